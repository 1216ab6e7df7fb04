from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from .models import ORDER_STATUSES
from .schemas import (
    AdjustStockDto,
    CreateInventoryItemDto,
    CreateOrderDto,
    SignUpDto,
    UpdateInventoryItemDto,
    UpdateOrderDto,
    UpdateStockDto,
)


# Maximum unit price: 9,999,999,999.99 fits Numeric(12, 2)
MAX_UNIT_PRICE = Decimal("9999999999.99")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(ValueError):
    """400-level input problem."""
    error_code = 400


def coerce(cls, payload):
    """Accept either a DTO instance or a raw JSON object for it."""
    if isinstance(payload, cls):
        return payload
    try:
        return cls.from_payload(payload)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid request: {e}")


def require_positive_id(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {label}")
    return value


def _require_text(value: str | None, label: str, max_length: int, min_length: int = 1) -> str:
    text = (value or "").strip()
    if len(text) < min_length:
        if min_length <= 1:
            raise ValidationError(f"{label} is required")
        raise ValidationError(f"{label} must be at least {min_length} characters")
    if len(text) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")
    return text


def _optional_text(value: str | None, label: str, max_length: int) -> str | None:
    if value is None:
        return None
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")
    return text or None


def _require_email(value: str | None, label: str = "Email") -> str:
    email = _require_text(value, label, 255)
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"{label} is not a valid email address")
    return email


def _require_price(value) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Unit price must be a number")
    if not price.is_finite() or price <= 0:
        raise ValidationError("Unit price must be greater than 0")
    if price > MAX_UNIT_PRICE:
        raise ValidationError("Unit price is too large")
    return price.quantize(Decimal("0.01"))


def _validate_order_lines(dto) -> None:
    if not dto.order_items:
        raise ValidationError("At least one order item is required")
    for line in dto.order_items:
        require_positive_id(line.item_id, "item ID")
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
            raise ValidationError("Quantity must be at least 1")


def validate_create_order(dto: CreateOrderDto) -> CreateOrderDto:
    dto.customer_name = _require_text(dto.customer_name, "Customer name", 100)
    dto.customer_email = _require_email(dto.customer_email, "Customer email")
    _validate_order_lines(dto)
    return dto


def validate_update_order(dto: UpdateOrderDto) -> UpdateOrderDto:
    dto.customer_name = _require_text(dto.customer_name, "Customer name", 100)
    dto.customer_email = _require_email(dto.customer_email, "Customer email")
    dto.status = _require_text(dto.status, "Status", 20)
    if dto.status not in ORDER_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(ORDER_STATUSES)}")
    _validate_order_lines(dto)
    return dto


def validate_create_item(dto: CreateInventoryItemDto) -> CreateInventoryItemDto:
    dto.item_name = _require_text(dto.item_name, "Item name", 100)
    dto.item_code = _require_text(dto.item_code, "Item code", 50)
    dto.category = _require_text(dto.category, "Category", 50)
    dto.description = _optional_text(dto.description, "Description", 1000)
    dto.warehouse_location = _optional_text(dto.warehouse_location, "Warehouse location", 100)
    dto.unit_price = _require_price(dto.unit_price)
    if isinstance(dto.initial_quantity, bool) or not isinstance(dto.initial_quantity, int) or dto.initial_quantity < 0:
        raise ValidationError("Initial quantity cannot be negative")
    return dto


def validate_update_item(dto: UpdateInventoryItemDto) -> UpdateInventoryItemDto:
    dto.item_name = _require_text(dto.item_name, "Item name", 100)
    dto.item_code = _require_text(dto.item_code, "Item code", 50)
    dto.category = _require_text(dto.category, "Category", 50)
    dto.description = _optional_text(dto.description, "Description", 1000)
    dto.unit_price = _require_price(dto.unit_price)
    return dto


def validate_update_stock(dto: UpdateStockDto) -> UpdateStockDto:
    require_positive_id(dto.item_id, "item ID")
    if isinstance(dto.quantity_available, bool) or not isinstance(dto.quantity_available, int) or dto.quantity_available < 0:
        raise ValidationError("Quantity cannot be negative")
    dto.warehouse_location = _optional_text(dto.warehouse_location, "Warehouse location", 100)
    return dto


def validate_adjust_stock(dto: AdjustStockDto) -> AdjustStockDto:
    require_positive_id(dto.item_id, "item ID")
    if isinstance(dto.quantity_change, bool) or not isinstance(dto.quantity_change, int) or dto.quantity_change == 0:
        raise ValidationError("Quantity change must be a non-zero integer")
    dto.reason = _optional_text(dto.reason, "Reason", 255)
    return dto


def validate_sign_up(dto: SignUpDto) -> SignUpDto:
    dto.username = _require_text(dto.username, "Username", 100, min_length=3)
    dto.email = _require_email(dto.email)
    # Passwords are not stripped: whitespace is significant
    if not dto.password or len(dto.password) < 6:
        raise ValidationError("Password must be at least 6 characters")
    if len(dto.password) > 100:
        raise ValidationError("Password cannot exceed 100 characters")
    if dto.password != dto.confirm_password:
        raise ValidationError("Passwords do not match")
    return dto
