from .auth import Login
from .orders import Order, OrderItem, ORDER_STATUSES, CANCELLABLE_STATUSES
from .inventory import Item, Stock, LOW_STOCK_THRESHOLD

__all__ = [
    'Login',
    'Order', 'OrderItem', 'ORDER_STATUSES', 'CANCELLABLE_STATUSES',
    'Item', 'Stock', 'LOW_STOCK_THRESHOLD',
]
