# Overview: Inventory item and stock procedures returning (error_code, data) rows.

from decimal import Decimal

from sqlalchemy.orm import joinedload

from ..models import LOW_STOCK_THRESHOLD, Item, Stock
from . import envelope_row, procedure


def _live_item(session, item_id):
    return (
        session.query(Item)
        .options(joinedload(Item.stock))
        .filter(Item.id == item_id, Item.is_deleted.is_(False))
        .one_or_none()
    )


def _live_stock(session, item_id):
    return (
        session.query(Stock)
        .join(Item, Stock.item_id == Item.id)
        .filter(
            Stock.item_id == item_id,
            Stock.is_deleted.is_(False),
            Item.is_deleted.is_(False),
        )
        .one_or_none()
    )


def _code_taken(session, item_code: str, exclude_id=None) -> bool:
    query = session.query(Item.id).filter(Item.item_code == item_code, Item.is_deleted.is_(False))
    if exclude_id is not None:
        query = query.filter(Item.id != exclude_id)
    return query.first() is not None


# =============================================================================
# ITEMS
# =============================================================================

@procedure("sp_get_all_items")
def sp_get_all_items(session):
    items = (
        session.query(Item)
        .options(joinedload(Item.stock))
        .filter(Item.is_deleted.is_(False))
        .order_by(Item.item_name.asc(), Item.id.asc())
        .all()
    )
    return envelope_row(0, [item.to_dict() for item in items])


@procedure("sp_get_item_by_id")
def sp_get_item_by_id(session, p_id):
    item = _live_item(session, p_id)
    if item is None:
        return envelope_row(404)
    return envelope_row(0, item.to_dict())


@procedure("sp_create_item")
def sp_create_item(
    session,
    p_item_name,
    p_item_code,
    p_description,
    p_category,
    p_unit_price,
    p_created_by,
    p_initial_quantity,
    p_warehouse_location,
):
    if _code_taken(session, p_item_code):
        return envelope_row(409)

    item = Item(
        item_name=p_item_name,
        item_code=p_item_code,
        description=p_description,
        category=p_category,
        unit_price=Decimal(str(p_unit_price)),
        created_by=p_created_by,
    )
    session.add(item)
    session.flush()

    # Every item gets its stock row in the same call
    item.stock = Stock(
        quantity_available=int(p_initial_quantity or 0),
        warehouse_location=p_warehouse_location,
        created_by=p_created_by,
    )
    session.flush()
    return envelope_row(0, item.to_dict())


@procedure("sp_update_item")
def sp_update_item(
    session,
    p_id,
    p_item_name,
    p_item_code,
    p_description,
    p_category,
    p_unit_price,
    p_is_active,
    p_updated_by,
):
    item = _live_item(session, p_id)
    if item is None:
        return envelope_row(404)
    if _code_taken(session, p_item_code, exclude_id=item.id):
        return envelope_row(409)

    item.item_name = p_item_name
    item.item_code = p_item_code
    item.description = p_description
    item.category = p_category
    item.unit_price = Decimal(str(p_unit_price))
    item.is_active = bool(p_is_active)
    item.touch(p_updated_by)
    session.flush()
    return envelope_row(0, item.to_dict())


@procedure("sp_delete_item")
def sp_delete_item(session, p_id, p_updated_by):
    item = _live_item(session, p_id)
    if item is None:
        return envelope_row(404)

    if item.stock is not None and not item.stock.is_deleted:
        item.stock.soft_delete(p_updated_by)
    item.soft_delete(p_updated_by)
    session.flush()
    return envelope_row(0, {"id": item.id, "item_code": item.item_code})


# =============================================================================
# STOCK
# =============================================================================

@procedure("sp_get_all_stock")
def sp_get_all_stock(session):
    rows = (
        session.query(Stock)
        .join(Item, Stock.item_id == Item.id)
        .options(joinedload(Stock.item))
        .filter(Stock.is_deleted.is_(False), Item.is_deleted.is_(False))
        .order_by(Item.item_name.asc(), Stock.id.asc())
        .all()
    )
    # Stock listing reports its code under "errorcode"
    return envelope_row(0, [stock.to_dict() for stock in rows], code_field="errorcode")


@procedure("sp_update_stock")
def sp_update_stock(session, p_item_id, p_quantity_available, p_warehouse_location, p_updated_by):
    stock = _live_stock(session, p_item_id)
    if stock is None:
        return envelope_row(404)

    stock.quantity_available = int(p_quantity_available)
    if p_warehouse_location is not None:
        stock.warehouse_location = p_warehouse_location
    stock.touch(p_updated_by)
    session.flush()
    return envelope_row(0, stock.to_dict())


@procedure("sp_adjust_stock")
def sp_adjust_stock(session, p_item_id, p_quantity_change, p_reason, p_updated_by):
    stock = _live_stock(session, p_item_id)
    if stock is None:
        return envelope_row(404)

    new_quantity = stock.quantity_available + int(p_quantity_change)
    if new_quantity < 0:
        return envelope_row(409)

    stock.quantity_available = new_quantity
    stock.touch(p_updated_by)
    session.flush()
    return envelope_row(0, stock.to_dict())


@procedure("sp_delete_stock")
def sp_delete_stock(session, p_item_id, p_updated_by):
    stock = _live_stock(session, p_item_id)
    if stock is None:
        return envelope_row(404)

    stock.soft_delete(p_updated_by)
    session.flush()
    return envelope_row(0, {"id": stock.id, "item_id": stock.item_id})


@procedure("sp_get_stock_summary")
def sp_get_stock_summary(session):
    rows = (
        session.query(Item, Stock)
        .outerjoin(Stock, (Stock.item_id == Item.id) & Stock.is_deleted.is_(False))
        .filter(Item.is_deleted.is_(False))
        .all()
    )

    in_stock = out_of_stock = low_stock = 0
    value = Decimal("0")
    for item, stock in rows:
        quantity = stock.quantity_available if stock is not None else 0
        if quantity > 0:
            in_stock += 1
        else:
            out_of_stock += 1
        if 0 < quantity < LOW_STOCK_THRESHOLD:
            low_stock += 1
        value += Decimal(item.unit_price) * quantity

    return envelope_row(0, {
        "total_items": len(rows),
        "items_in_stock": in_stock,
        "items_out_of_stock": out_of_stock,
        "low_stock_items": low_stock,
        "total_inventory_value": value.quantize(Decimal("0.01")),
    })
