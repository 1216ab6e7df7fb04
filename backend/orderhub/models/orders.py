from __future__ import annotations

from ..extensions import db
from .audit import AuditMixin


ORDER_STATUSES = ("Pending", "Processing", "Shipped", "Delivered", "Cancelled")
CANCELLABLE_STATUSES = ("Pending", "Processing")


class Order(AuditMixin, db.Model):
    """
    Customer order (parent of OrderItem).

    An order and its items are one atomic unit: they are created and
    soft-deleted together inside a single procedure call.

    INVARIANT: total_amount == sum(item.total_price for active items).
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.UniqueConstraint("order_number", name="uq_orders_order_number"),
        db.Index("ix_orders_created_by_deleted", "created_by", "is_deleted"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(50), nullable=False)

    customer_name = db.Column(db.String(100), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False)

    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default="Pending", index=True)

    items = db.relationship(
        "OrderItem",
        back_populates="order",
        lazy="select",
        order_by="OrderItem.id",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} number={self.order_number!r} status={self.status!r}>"

    def active_items(self) -> list["OrderItem"]:
        return [item for item in self.items if not item.is_deleted]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_number": self.order_number,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "total_amount": self.total_amount,
            "status": self.status,
            "order_items": [item.to_dict() for item in self.active_items()],
            **self.audit_dict(),
        }


class OrderItem(AuditMixin, db.Model):
    """
    Order line. unit_price and item_name are copied from the inventory item
    when the line is written, so later catalog changes do not reprice orders.

    INVARIANT: total_price == quantity * unit_price.
    """
    __tablename__ = "order_items"
    __table_args__ = (
        db.Index("ix_order_items_order_deleted", "order_id", "is_deleted"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id"), nullable=False, index=True)

    item_name = db.Column(db.String(100), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)

    order = db.relationship("Order", back_populates="items")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "item_name": self.item_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
        }
