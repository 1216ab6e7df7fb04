# Overview: Inventory use cases; catalog items and stock levels.

"""
Inventory Use Cases

Catalog reads (get_all_items, get_item_by_id) are open to any signed-in
User or Admin. Items are not owner-scoped, so reads pass owner_id=None.
Every write, and every stock operation, is Admin only.

create_item writes the item and its initial stock row in one transaction.
"""

from ..decorators import require_roles, use_case
from ..responses import BaseResponse, ErrorCode
from ..schemas import (
    AdjustStockDto,
    CreateInventoryItemDto,
    Role,
    UpdateInventoryItemDto,
    UpdateStockDto,
)
from ..validation import (
    coerce,
    require_positive_id,
    validate_adjust_stock,
    validate_create_item,
    validate_update_item,
    validate_update_stock,
)
from .authorization import Action, require


_ITEM_MESSAGES = {
    ErrorCode.NOT_FOUND: "Inventory item not found",
    ErrorCode.CONFLICT: "An item with this code already exists",
    ErrorCode.VALIDATION_FAILED: "Invalid inventory item data",
}

_STOCK_MESSAGES = {
    ErrorCode.NOT_FOUND: "Stock record not found",
    ErrorCode.CONFLICT: "Insufficient stock for this adjustment",
    ErrorCode.VALIDATION_FAILED: "Invalid stock data",
}


def _failure(result, fallback: str, messages: dict) -> BaseResponse:
    return BaseResponse.error(messages.get(result.error_code, fallback), result.error_code)


# =============================================================================
# ITEMS
# =============================================================================

@use_case("get_all_items", "retrieving inventory items")
@require_roles(Role.USER, Role.ADMIN)
def get_all_items(identity, *, uow):
    result = uow.inventory.get_all_items()
    if not result.ok:
        return _failure(result, "Failed to retrieve inventory items", _ITEM_MESSAGES)
    return BaseResponse.success(result.data, "Inventory items retrieved successfully")


@use_case("get_item_by_id", "retrieving the inventory item")
@require_roles(Role.USER, Role.ADMIN)
def get_item_by_id(identity, item_id, *, uow):
    require_positive_id(item_id, "item ID")

    result = uow.inventory.get_item_by_id(item_id)
    if not result.ok:
        return _failure(result, "Failed to retrieve inventory item", _ITEM_MESSAGES)

    require(identity, Action.READ, owner_id=None)
    return BaseResponse.success(result.data, "Inventory item retrieved successfully")


@use_case("create_item", "creating the inventory item")
@require_roles(Role.ADMIN)
def create_item(identity, payload, *, uow):
    dto = validate_create_item(coerce(CreateInventoryItemDto, payload))

    uow.begin_transaction()
    result = uow.inventory.create_item(dto, identity.id)
    if not result.ok:
        uow.rollback()
        return _failure(result, "Failed to create inventory item", _ITEM_MESSAGES)
    uow.commit()
    return BaseResponse.success(result.data, "Inventory item created successfully")


@use_case("update_item", "updating the inventory item")
@require_roles(Role.ADMIN)
def update_item(identity, item_id, payload, *, uow):
    require_positive_id(item_id, "item ID")
    dto = validate_update_item(coerce(UpdateInventoryItemDto, payload))

    result = uow.inventory.update_item(item_id, dto, identity.id)
    if not result.ok:
        return _failure(result, "Failed to update inventory item", _ITEM_MESSAGES)
    return BaseResponse.success(result.data, "Inventory item updated successfully")


@use_case("delete_item", "deleting the inventory item")
@require_roles(Role.ADMIN)
def delete_item(identity, item_id, *, uow):
    require_positive_id(item_id, "item ID")

    result = uow.inventory.delete_item(item_id, identity.id)
    if not result.ok:
        return _failure(result, "Failed to delete inventory item", _ITEM_MESSAGES)
    return BaseResponse.success(result.data, "Inventory item deleted successfully")


# =============================================================================
# STOCK
# =============================================================================

@use_case("get_all_stock", "retrieving stock")
@require_roles(Role.ADMIN)
def get_all_stock(identity, *, uow):
    result = uow.inventory.get_all_stock()
    if not result.ok:
        return _failure(result, "Failed to retrieve stock", _STOCK_MESSAGES)
    return BaseResponse.success(result.data, "Stock retrieved successfully")


@use_case("update_stock", "updating stock")
@require_roles(Role.ADMIN)
def update_stock(identity, payload, *, uow):
    dto = validate_update_stock(coerce(UpdateStockDto, payload))

    result = uow.inventory.update_stock(dto, identity.id)
    if not result.ok:
        return _failure(result, "Failed to update stock", _STOCK_MESSAGES)
    return BaseResponse.success(result.data, "Stock updated successfully")


@use_case("adjust_stock", "adjusting stock")
@require_roles(Role.ADMIN)
def adjust_stock(identity, payload, *, uow):
    dto = validate_adjust_stock(coerce(AdjustStockDto, payload))

    result = uow.inventory.adjust_stock(dto, identity.id)
    if not result.ok:
        return _failure(result, "Failed to adjust stock", _STOCK_MESSAGES)
    return BaseResponse.success(result.data, "Stock adjusted successfully")


@use_case("delete_stock", "deleting stock")
@require_roles(Role.ADMIN)
def delete_stock(identity, item_id, *, uow):
    require_positive_id(item_id, "item ID")

    result = uow.inventory.delete_stock(item_id, identity.id)
    if not result.ok:
        return _failure(result, "Failed to delete stock", _STOCK_MESSAGES)
    return BaseResponse.success(result.data, "Stock deleted successfully")


@use_case("get_stock_summary", "retrieving the stock summary")
@require_roles(Role.ADMIN)
def get_stock_summary(identity, *, uow):
    result = uow.inventory.get_stock_summary()
    if not result.ok:
        return _failure(result, "Failed to retrieve stock summary", _STOCK_MESSAGES)
    return BaseResponse.success(result.data, "Stock summary retrieved successfully")
