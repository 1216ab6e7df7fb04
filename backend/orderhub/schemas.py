# Overview: Typed request/result objects and the decoder that turns procedure JSON into them.

"""
DTOs exchanged between use cases, repositories and callers.

Procedure payloads are decoded with Schema.from_payload(), which matches
keys case-insensitively and ignores underscores, so "createdBy",
"created_by" and "CreatedBy" all land in the created_by field. Untyped
JSON never travels past the gateway: every call site names the DTO it
expects.

to_dict() emits the camelCase wire shape used in responses.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints

from orderhub.time_utils import parse_iso_datetime, to_utc_z


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _convert(tp: Any, value: Any) -> Any:
    if value is None:
        return None

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        candidates = [arg for arg in get_args(tp) if arg is not type(None)]
        return _convert(candidates[0], value)
    if origin is list:
        (item_type,) = get_args(tp)
        if not isinstance(value, list):
            raise TypeError(f"Expected a list, got {type(value).__name__}")
        return [_convert(item_type, v) for v in value]

    if is_dataclass(tp):
        return decode(tp, value)
    if tp is Decimal:
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Not a decimal number: {value!r}")
    if tp is datetime:
        return value if isinstance(value, datetime) else parse_iso_datetime(str(value))
    if isinstance(tp, type) and issubclass(tp, Enum):
        return tp(value)
    if tp is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ValueError(f"Expected true or false, got {value!r}")
    if tp is int:
        if isinstance(value, bool):
            raise TypeError("Expected an integer, got a boolean")
        # 2.9 must not quietly become 2
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Expected a whole number, got {value!r}")
        if isinstance(value, Decimal) and value != value.to_integral_value():
            raise ValueError(f"Expected a whole number, got {value!r}")
        return int(value)
    if tp is str:
        return str(value)
    return value


def decode(cls: type, payload: Any):
    """Build dataclass `cls` from a JSON object. Raises TypeError/ValueError on shape mismatch."""
    if not isinstance(payload, Mapping):
        raise TypeError(f"Expected an object for {cls.__name__}, got {type(payload).__name__}")

    hints = get_type_hints(cls)
    lookup = {_normalize_key(str(k)): v for k, v in payload.items()}

    kwargs = {}
    for f in fields(cls):
        key = _normalize_key(f.name)
        if key in lookup:
            kwargs[f.name] = _convert(hints[f.name], lookup[key])
        elif f.default is MISSING and f.default_factory is MISSING:
            raise ValueError(f"{cls.__name__}.{f.name} missing from payload")
    return cls(**kwargs)


def _encode(value: Any) -> Any:
    if isinstance(value, Schema):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return to_utc_z(value)
    if isinstance(value, list):
        return [_encode(v) for v in value]
    return value


class Schema:
    """Mixin for DTO dataclasses."""

    _exclude_from_dict: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any):
        return decode(cls, payload)

    @classmethod
    def many(cls, payload: Any) -> list:
        if not isinstance(payload, list):
            raise TypeError(f"Expected a list of {cls.__name__}, got {type(payload).__name__}")
        return [decode(cls, item) for item in payload]

    def to_dict(self) -> dict:
        return {
            _camel(f.name): _encode(getattr(self, f.name))
            for f in fields(self)
            if f.name not in self._exclude_from_dict
        }


# =============================================================================
# IDENTITY
# =============================================================================

class Role(str, Enum):
    USER = "User"
    ADMIN = "Admin"


@dataclass(frozen=True)
class Identity(Schema):
    """Authenticated caller. Passed explicitly into every use case."""
    id: int
    username: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass
class CredentialRecord(Schema):
    """Identity-store row returned by sp_get_login_by_username."""
    id: int
    username: str
    email: str
    password_hash: str
    role: Role
    is_active: bool
    is_deleted: bool

    _exclude_from_dict = ("password_hash",)

    def to_identity(self) -> Identity:
        return Identity(id=self.id, username=self.username, email=self.email, role=self.role)


@dataclass
class SignUpDto(Schema):
    username: str
    email: str
    password: str
    confirm_password: str

    _exclude_from_dict = ("password", "confirm_password")


@dataclass
class RegisteredUserDto(Schema):
    username: str
    email: str


@dataclass
class LoginResponseDto(Schema):
    token: str
    user: Identity
    expires_at: datetime


# =============================================================================
# ORDERS
# =============================================================================

@dataclass
class OrderItemDto(Schema):
    id: int
    item_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    item_name: str = ""


@dataclass
class OrderDto(Schema):
    id: int
    order_number: str
    customer_name: str
    customer_email: str
    total_amount: Decimal
    status: str
    created_by: int
    created_date: datetime
    order_items: list[OrderItemDto] = field(default_factory=list)
    updated_by: int | None = None
    updated_date: datetime | None = None
    is_active: bool = True
    is_deleted: bool = False

    @property
    def owner_id(self) -> int:
        return self.created_by


@dataclass
class OrderRefDto(Schema):
    """What sp_create_order hands back: enough to fetch the full order."""
    id: int
    order_number: str


@dataclass
class CreateOrderItemDto(Schema):
    item_id: int
    quantity: int


@dataclass
class CreateOrderDto(Schema):
    customer_name: str
    customer_email: str
    order_items: list[CreateOrderItemDto] = field(default_factory=list)


@dataclass
class UpdateOrderDto(Schema):
    customer_name: str
    customer_email: str
    status: str
    order_items: list[CreateOrderItemDto] = field(default_factory=list)


# =============================================================================
# INVENTORY
# =============================================================================

@dataclass
class InventoryItemDto(Schema):
    id: int
    item_name: str
    item_code: str
    category: str
    unit_price: Decimal
    created_by: int
    created_date: datetime
    description: str | None = None
    quantity_available: int = 0
    warehouse_location: str | None = None
    updated_by: int | None = None
    updated_date: datetime | None = None
    is_active: bool = True
    is_deleted: bool = False


@dataclass
class ItemRefDto(Schema):
    """What sp_delete_item hands back."""
    id: int
    item_code: str


@dataclass
class CreateInventoryItemDto(Schema):
    item_name: str
    item_code: str
    category: str
    unit_price: Decimal
    description: str | None = None
    initial_quantity: int = 0
    warehouse_location: str | None = None


@dataclass
class UpdateInventoryItemDto(Schema):
    item_name: str
    item_code: str
    category: str
    unit_price: Decimal
    description: str | None = None
    is_active: bool = True


@dataclass
class StockDto(Schema):
    id: int
    item_id: int
    quantity_available: int
    created_by: int
    created_date: datetime
    item_name: str | None = None
    item_code: str | None = None
    warehouse_location: str | None = None
    updated_by: int | None = None
    updated_date: datetime | None = None
    is_active: bool = True
    is_deleted: bool = False


@dataclass
class StockRefDto(Schema):
    id: int
    item_id: int


@dataclass
class UpdateStockDto(Schema):
    item_id: int
    quantity_available: int
    warehouse_location: str | None = None


@dataclass
class AdjustStockDto(Schema):
    item_id: int
    quantity_change: int
    reason: str | None = None


@dataclass
class StockSummaryDto(Schema):
    total_items: int
    items_in_stock: int
    items_out_of_stock: int
    low_stock_items: int
    total_inventory_value: Decimal
