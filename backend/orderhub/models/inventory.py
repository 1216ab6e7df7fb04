from __future__ import annotations

from ..extensions import db
from .audit import AuditMixin


LOW_STOCK_THRESHOLD = 10


class Item(AuditMixin, db.Model):
    """
    Inventory catalog item.

    ITEM CODE: unique among non-deleted items. A deleted item's code may be
    reused, so uniqueness is enforced by the create/update procedures rather
    than by a table constraint.

    An item and its Stock row are created together (initial quantity) and
    soft-deleted together.
    """
    __tablename__ = "items"
    __table_args__ = (
        db.Index("ix_items_code_deleted", "item_code", "is_deleted"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    item_name = db.Column(db.String(100), nullable=False)
    item_code = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)

    stock = db.relationship("Stock", back_populates="item", uselist=False)

    def __repr__(self) -> str:
        return f"<Item id={self.id} code={self.item_code!r} name={self.item_name!r}>"

    def to_dict(self) -> dict:
        stock = self.stock if self.stock is not None and not self.stock.is_deleted else None
        return {
            "id": self.id,
            "item_name": self.item_name,
            "item_code": self.item_code,
            "description": self.description,
            "category": self.category,
            "unit_price": self.unit_price,
            "quantity_available": stock.quantity_available if stock else 0,
            "warehouse_location": stock.warehouse_location if stock else None,
            **self.audit_dict(),
        }


class Stock(AuditMixin, db.Model):
    """On-hand quantity for one item. Never negative."""
    __tablename__ = "stocks"
    __table_args__ = (
        db.UniqueConstraint("item_id", name="uq_stocks_item"),
        db.CheckConstraint("quantity_available >= 0", name="ck_stocks_quantity_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id"), nullable=False, index=True)
    quantity_available = db.Column(db.Integer, nullable=False, default=0)
    warehouse_location = db.Column(db.String(100), nullable=True)

    item = db.relationship("Item", back_populates="stock")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "item_name": self.item.item_name if self.item else None,
            "item_code": self.item.item_code if self.item else None,
            "quantity_available": self.quantity_available,
            "warehouse_location": self.warehouse_location,
            **self.audit_dict(),
        }
