# Overview: Order procedures (create, read, update, cancel, soft-delete) returning JSON envelopes.

import secrets
from decimal import Decimal

from ..models import CANCELLABLE_STATUSES, Item, Order, OrderItem
from orderhub.time_utils import stamp
from . import envelope_json, parse_json_param, procedure


def _next_order_number() -> str:
    return f"ORD-{stamp()}-{secrets.token_hex(3).upper()}"


def _live_order(session, order_id):
    return (
        session.query(Order)
        .filter(Order.id == order_id, Order.is_deleted.is_(False))
        .one_or_none()
    )


def _price_line(session, item_id: int, quantity: int):
    """
    Price one order line from the catalog.

    Returns (item_name, unit_price, total_price) or None when the item is
    missing, inactive or deleted.
    """
    item = (
        session.query(Item)
        .filter(Item.id == item_id, Item.is_deleted.is_(False), Item.is_active.is_(True))
        .one_or_none()
    )
    if item is None:
        return None
    unit_price = Decimal(item.unit_price)
    return item.item_name, unit_price, unit_price * quantity


def _write_lines(session, order: Order, lines, user_id: int):
    """
    Add one OrderItem per line and recompute the order total.

    Returns the offending item id if a line cannot be priced; the caller
    reports 404 and the gateway rolls back everything written so far.
    """
    total = Decimal("0")
    for line in lines:
        item_id = int(line["item_id"])
        quantity = int(line["quantity"])
        priced = _price_line(session, item_id, quantity)
        if priced is None:
            return item_id
        item_name, unit_price, total_price = priced
        order.items.append(OrderItem(
            item_id=item_id,
            item_name=item_name,
            quantity=quantity,
            unit_price=unit_price,
            total_price=total_price,
            created_by=user_id,
        ))
        session.flush()
        total += total_price
    order.total_amount = total
    return None


@procedure("sp_get_all_orders")
def sp_get_all_orders(session):
    orders = (
        session.query(Order)
        .filter(Order.is_deleted.is_(False))
        .order_by(Order.created_date.desc(), Order.id.desc())
        .all()
    )
    return envelope_json(0, [order.to_dict() for order in orders])


@procedure("sp_get_order_by_id")
def sp_get_order_by_id(session, p_order_id):
    order = _live_order(session, p_order_id)
    if order is None:
        return envelope_json(404)
    return envelope_json(0, order.to_dict())


@procedure("sp_get_orders_by_user")
def sp_get_orders_by_user(session, p_user_id):
    orders = (
        session.query(Order)
        .filter(Order.created_by == p_user_id, Order.is_deleted.is_(False))
        .order_by(Order.created_date.desc(), Order.id.desc())
        .all()
    )
    return envelope_json(0, [order.to_dict() for order in orders])


@procedure("sp_create_order")
def sp_create_order(session, p_customer_name, p_customer_email, p_order_items, p_user_id):
    lines = parse_json_param(p_order_items) or []
    if not lines:
        return envelope_json(400)

    order = Order(
        order_number=_next_order_number(),
        customer_name=p_customer_name,
        customer_email=p_customer_email,
        total_amount=Decimal("0"),
        status="Pending",
        created_by=p_user_id,
    )
    session.add(order)
    session.flush()

    if _write_lines(session, order, lines, p_user_id) is not None:
        return envelope_json(404)

    session.flush()
    return envelope_json(0, {"id": order.id, "order_number": order.order_number})


@procedure("sp_update_order")
def sp_update_order(session, p_order_id, p_customer_name, p_customer_email, p_status, p_order_items, p_user_id):
    order = _live_order(session, p_order_id)
    if order is None:
        return envelope_json(404)

    lines = parse_json_param(p_order_items) or []
    if not lines:
        return envelope_json(400)

    # Existing lines are replaced, not merged
    for item in order.active_items():
        item.soft_delete(p_user_id)
    session.flush()

    if _write_lines(session, order, lines, p_user_id) is not None:
        return envelope_json(404)

    order.customer_name = p_customer_name
    order.customer_email = p_customer_email
    order.status = p_status
    order.touch(p_user_id)
    session.flush()
    return envelope_json(0, order.to_dict())


@procedure("sp_delete_order")
def sp_delete_order(session, p_order_id, p_updated_by):
    order = _live_order(session, p_order_id)
    if order is None:
        return envelope_json(404)

    for item in order.active_items():
        item.soft_delete(p_updated_by)
    order.soft_delete(p_updated_by)
    session.flush()
    return envelope_json(0, {"id": order.id, "order_number": order.order_number})


@procedure("sp_cancel_order")
def sp_cancel_order(session, p_order_id, p_user_id):
    order = _live_order(session, p_order_id)
    if order is None:
        return envelope_json(404)
    if order.status not in CANCELLABLE_STATUSES:
        # Already cancelled, shipped or delivered
        return envelope_json(409)

    order.status = "Cancelled"
    order.touch(p_user_id)
    session.flush()
    return envelope_json(0, order.to_dict())
