# Overview: Order use cases; role and ownership checks, transactions and response envelopes.

"""
Order Use Cases

Every function takes the caller's Identity first and returns a BaseResponse.
The @use_case wrapper supplies the unit of work and converts unexpected
exceptions into a generic 500 envelope.

ROLES:
- get_all_orders, update_order, delete_order: Admin only
- get_my_orders, create_order: User or Admin
- get_order_by_id, cancel_order: the order's owner, or Admin

Ownership is checked after the order is fetched, so an unknown order is a
404 for everyone and never leaks existence through a 403.

create_order runs in an explicit transaction: the order and all its lines
are written together or not at all.
"""

from ..decorators import require_roles, use_case
from ..responses import BaseResponse, ErrorCode
from ..schemas import CreateOrderDto, Role, UpdateOrderDto
from ..validation import coerce, require_positive_id, validate_create_order, validate_update_order
from .authorization import Action, require


ORDER_NOT_FOUND = "Order not found"


_MESSAGES = {
    ErrorCode.NOT_FOUND: ORDER_NOT_FOUND,
    ErrorCode.VALIDATION_FAILED: "Invalid order data",
}


def _failure(result, fallback: str, overrides: dict | None = None) -> BaseResponse:
    """Envelope for a failed procedure call. `overrides` maps error codes to call-specific messages."""
    messages = {**_MESSAGES, **(overrides or {})}
    message = messages.get(result.error_code, fallback)
    return BaseResponse.error(message, result.error_code)


@use_case("get_all_orders", "retrieving orders")
@require_roles(Role.ADMIN)
def get_all_orders(identity, *, uow):
    result = uow.orders.get_all()
    if not result.ok:
        return _failure(result, "Failed to retrieve orders")
    return BaseResponse.success(result.data, "Orders retrieved successfully")


@use_case("get_my_orders", "retrieving your orders")
@require_roles(Role.USER, Role.ADMIN)
def get_my_orders(identity, *, uow):
    result = uow.orders.get_by_user(identity.id)
    if not result.ok:
        return _failure(result, "Failed to retrieve orders")
    return BaseResponse.success(result.data, "Orders retrieved successfully")


@use_case("get_order_by_id", "retrieving the order")
@require_roles(Role.USER, Role.ADMIN)
def get_order_by_id(identity, order_id, *, uow):
    require_positive_id(order_id, "order ID")

    result = uow.orders.get_by_id(order_id)
    if not result.ok:
        return _failure(result, "Failed to retrieve order")

    require(identity, Action.READ, owner_id=result.data.owner_id)
    return BaseResponse.success(result.data, "Order retrieved successfully")


@use_case("create_order", "creating the order")
@require_roles(Role.USER, Role.ADMIN)
def create_order(identity, payload, *, uow):
    dto = validate_create_order(coerce(CreateOrderDto, payload))

    uow.begin_transaction()
    created = uow.orders.create(dto, identity.id)
    if not created.ok:
        uow.rollback()
        return _failure(
            created,
            "Failed to create order",
            {ErrorCode.NOT_FOUND: "One or more order items were not found"},
        )
    uow.commit()

    # Hand back the complete order, lines and totals included
    fetched = uow.orders.get_by_id(created.data.id)
    if not fetched.ok:
        return _failure(fetched, "Order was created but could not be retrieved")
    return BaseResponse.success(fetched.data, "Order created successfully")


@use_case("update_order", "updating the order")
@require_roles(Role.ADMIN)
def update_order(identity, order_id, payload, *, uow):
    require_positive_id(order_id, "order ID")
    dto = validate_update_order(coerce(UpdateOrderDto, payload))

    result = uow.orders.update(order_id, dto, identity.id)
    if not result.ok:
        return _failure(result, "Failed to update order")
    return BaseResponse.success(result.data, "Order updated successfully")


@use_case("delete_order", "deleting the order")
@require_roles(Role.ADMIN)
def delete_order(identity, order_id, *, uow):
    require_positive_id(order_id, "order ID")

    result = uow.orders.delete(order_id, identity.id)
    if not result.ok:
        return _failure(result, "Failed to delete order")
    return BaseResponse.success(result.data, "Order deleted successfully")


@use_case("cancel_order", "cancelling the order")
@require_roles(Role.USER, Role.ADMIN)
def cancel_order(identity, order_id, *, uow):
    require_positive_id(order_id, "order ID")

    existing = uow.orders.get_by_id(order_id)
    if not existing.ok:
        return _failure(existing, "Failed to cancel order")
    require(identity, Action.MUTATE, owner_id=existing.data.owner_id)

    result = uow.orders.cancel(order_id, identity.id)
    if not result.ok:
        return _failure(
            result,
            "Failed to cancel order",
            {ErrorCode.CONFLICT: "Only pending or processing orders can be cancelled"},
        )
    return BaseResponse.success(result.data, "Order cancelled successfully")
