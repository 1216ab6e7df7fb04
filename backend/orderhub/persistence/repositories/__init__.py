from .accounts import AccountRepository
from .inventory import InventoryRepository
from .orders import OrderRepository

__all__ = ["AccountRepository", "InventoryRepository", "OrderRepository"]
