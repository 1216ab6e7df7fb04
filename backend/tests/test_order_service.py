# Overview: Pytest coverage for order use cases (roles, ownership, atomic creation, cancellation).

"""
Order Use Case Tests

Covers:
1. Creation prices lines from the catalog and totals the order
2. Creation is atomic: a failing line leaves no order and no lines behind
3. Owner-or-admin reads; 404 is reported before any ownership check
4. Cancellation rules (owner only, Pending/Processing only, not twice)
5. Admin-only listing, update and delete
6. Unexpected exceptions become a generic 500 envelope
"""

from decimal import Decimal

import pytest
from conftest import order_payload

from orderhub.models import Order, OrderItem
from orderhub.persistence import UnitOfWork
from orderhub.procedures import orders as order_procedures
from orderhub.services import order_service


def _place(identity, *lines, **kwargs):
    response = order_service.create_order(identity, order_payload(*lines, **kwargs))
    assert response.ok, response.message
    return response.data


def _set_status(db_session, order_id, status):
    db_session.query(Order).filter_by(id=order_id).update({"status": status})
    db_session.commit()


# =============================================================================
# CREATE
# =============================================================================


class TestCreateOrder:

    def test_creates_priced_order(self, db_session, catalog, alice):
        widget, gadget = catalog["widget"], catalog["gadget"]

        order = _place(alice, (widget.id, 2), (gadget.id, 4))

        assert order.order_number.startswith("ORD-")
        assert order.status == "Pending"
        assert order.created_by == alice.id
        assert order.total_amount == Decimal("30.00")
        lines = {line.item_id: line for line in order.order_items}
        assert lines[widget.id].unit_price == Decimal("10.00")
        assert lines[widget.id].total_price == Decimal("20.00")
        assert lines[gadget.id].item_name == "Gadget"
        assert lines[gadget.id].total_price == Decimal("10.00")

    def test_order_numbers_are_unique(self, db_session, catalog, alice):
        first = _place(alice, (catalog["widget"].id, 1))
        second = _place(alice, (catalog["widget"].id, 1))
        assert first.order_number != second.order_number

    def test_unknown_item_is_not_found(self, db_session, catalog, alice):
        response = order_service.create_order(alice, order_payload((catalog["widget"].id, 1), (9999, 1)))

        assert response.error_code == 404
        assert db_session.query(Order).count() == 0
        assert db_session.query(OrderItem).count() == 0

    def test_inactive_item_is_not_found(self, db_session, catalog, alice):
        from conftest import make_item
        retired = make_item(db_session, "OLD-1", "Retired", "1.00", 5, is_active=False)

        response = order_service.create_order(alice, order_payload((retired.id, 1)))
        assert response.error_code == 404

    def test_failure_mid_order_leaves_nothing_behind(self, db_session, catalog, alice, monkeypatch):
        """The second line blows up after the order row and first line were written."""
        real_price_line = order_procedures._price_line
        calls = []

        def flaky_price_line(session, item_id, quantity):
            calls.append(item_id)
            if len(calls) == 2:
                raise RuntimeError("pricing service unavailable")
            return real_price_line(session, item_id, quantity)

        monkeypatch.setattr(order_procedures, "_price_line", flaky_price_line)

        response = order_service.create_order(
            alice, order_payload((catalog["widget"].id, 1), (catalog["gadget"].id, 1))
        )

        assert response.error_code == 500
        assert len(calls) == 2
        assert db_session.query(Order).count() == 0
        assert db_session.query(OrderItem).count() == 0

    @pytest.mark.parametrize(
        "payload",
        [
            {"customerName": "", "customerEmail": "jane@example.com", "orderItems": [{"itemId": 1, "quantity": 1}]},
            {"customerName": "Jane", "customerEmail": "not-an-email", "orderItems": [{"itemId": 1, "quantity": 1}]},
            {"customerName": "Jane", "customerEmail": "jane@example.com", "orderItems": []},
            {"customerName": "Jane", "customerEmail": "jane@example.com", "orderItems": [{"itemId": 1, "quantity": 0}]},
            {"customerName": "Jane", "customerEmail": "jane@example.com", "orderItems": [{"itemId": 1, "quantity": 2.9}]},
            {"customerName": "Jane", "customerEmail": "jane@example.com", "orderItems": [{"itemId": 1.5, "quantity": 1}]},
            {"customerEmail": "jane@example.com"},
        ],
    )
    def test_invalid_payload_is_rejected(self, db_session, catalog, alice, payload):
        response = order_service.create_order(alice, payload)

        assert response.error_code == 400
        assert db_session.query(Order).count() == 0

    def test_fractional_quantity_is_not_truncated(self, db_session, catalog, alice):
        response = order_service.create_order(alice, order_payload((catalog["widget"].id, 2.9)))

        assert response.error_code == 400
        assert db_session.query(OrderItem).count() == 0

    def test_whole_number_float_quantity_is_accepted(self, db_session, catalog, alice):
        response = order_service.create_order(alice, order_payload((catalog["widget"].id, 2.0)))

        assert response.ok, response.message
        assert response.data.order_items[0].quantity == 2

    def test_requires_identity(self, db_session, catalog):
        response = order_service.create_order(None, order_payload((catalog["widget"].id, 1)))
        assert response.error_code == 401


# =============================================================================
# READ
# =============================================================================


class TestReadOrders:

    def test_owner_can_read(self, db_session, catalog, alice):
        order = _place(alice, (catalog["widget"].id, 1))

        response = order_service.get_order_by_id(alice, order.id)
        assert response.ok
        assert response.data.id == order.id

    def test_other_user_is_forbidden(self, db_session, catalog, alice, bob):
        order = _place(alice, (catalog["widget"].id, 1))

        response = order_service.get_order_by_id(bob, order.id)
        assert response.error_code == 403
        assert response.data is None

    def test_admin_can_read_any(self, db_session, catalog, alice, admin):
        order = _place(alice, (catalog["widget"].id, 1))
        assert order_service.get_order_by_id(admin, order.id).ok

    def test_missing_order_is_404_before_ownership(self, db_session, bob):
        assert order_service.get_order_by_id(bob, 424242).error_code == 404

    def test_invalid_id(self, db_session, alice):
        assert order_service.get_order_by_id(alice, 0).error_code == 400

    def test_my_orders_are_scoped_to_caller(self, db_session, catalog, alice, bob):
        _place(alice, (catalog["widget"].id, 1))
        _place(alice, (catalog["gadget"].id, 1))
        _place(bob, (catalog["widget"].id, 3))

        mine = order_service.get_my_orders(alice)
        assert mine.ok
        assert len(mine.data) == 2
        assert {o.created_by for o in mine.data} == {alice.id}

    def test_my_orders_empty(self, db_session, alice):
        response = order_service.get_my_orders(alice)
        assert response.ok
        assert response.data == []

    def test_all_orders_admin_only(self, db_session, catalog, alice, bob, admin):
        _place(alice, (catalog["widget"].id, 1))
        _place(bob, (catalog["widget"].id, 1))

        assert order_service.get_all_orders(alice).error_code == 403
        everything = order_service.get_all_orders(admin)
        assert everything.ok
        assert len(everything.data) == 2


# =============================================================================
# CANCEL
# =============================================================================


class TestCancelOrder:

    def test_owner_cancels(self, db_session, catalog, alice):
        order = _place(alice, (catalog["widget"].id, 1))

        response = order_service.cancel_order(alice, order.id)
        assert response.ok
        assert response.data.status == "Cancelled"
        assert response.data.updated_by == alice.id

    def test_second_cancel_conflicts(self, db_session, catalog, alice):
        order = _place(alice, (catalog["widget"].id, 1))
        assert order_service.cancel_order(alice, order.id).ok

        assert order_service.cancel_order(alice, order.id).error_code == 409

    @pytest.mark.parametrize("status", ["Shipped", "Delivered"])
    def test_cannot_cancel_fulfilled(self, db_session, catalog, alice, status):
        order = _place(alice, (catalog["widget"].id, 1))
        _set_status(db_session, order.id, status)

        response = order_service.cancel_order(alice, order.id)
        assert response.error_code == 409

    def test_processing_can_be_cancelled(self, db_session, catalog, alice):
        order = _place(alice, (catalog["widget"].id, 1))
        _set_status(db_session, order.id, "Processing")

        assert order_service.cancel_order(alice, order.id).ok

    def test_other_user_cannot_cancel(self, db_session, catalog, alice, bob):
        order = _place(alice, (catalog["widget"].id, 1))

        assert order_service.cancel_order(bob, order.id).error_code == 403
        assert db_session.query(Order).filter_by(id=order.id).one().status == "Pending"

    def test_admin_can_cancel_any(self, db_session, catalog, alice, admin):
        order = _place(alice, (catalog["widget"].id, 1))
        assert order_service.cancel_order(admin, order.id).ok

    def test_missing_order(self, db_session, alice):
        assert order_service.cancel_order(alice, 31337).error_code == 404


# =============================================================================
# ADMIN WRITES
# =============================================================================


class TestAdminWrites:

    def test_update_replaces_lines_and_total(self, db_session, catalog, alice, admin):
        order = _place(alice, (catalog["widget"].id, 2))

        payload = order_payload((catalog["gadget"].id, 2), name="Jane Updated")
        payload["status"] = "Processing"
        response = order_service.update_order(admin, order.id, payload)

        assert response.ok, response.message
        assert response.data.customer_name == "Jane Updated"
        assert response.data.status == "Processing"
        assert response.data.total_amount == Decimal("5.00")
        assert [line.item_id for line in response.data.order_items] == [catalog["gadget"].id]

    def test_update_rejects_unknown_status(self, db_session, catalog, alice, admin):
        order = _place(alice, (catalog["widget"].id, 1))
        payload = order_payload((catalog["widget"].id, 1))
        payload["status"] = "Teleported"

        assert order_service.update_order(admin, order.id, payload).error_code == 400

    def test_update_is_admin_only(self, db_session, catalog, alice):
        order = _place(alice, (catalog["widget"].id, 1))
        payload = order_payload((catalog["widget"].id, 1))
        payload["status"] = "Pending"

        assert order_service.update_order(alice, order.id, payload).error_code == 403

    def test_delete_soft_deletes_order_and_lines(self, db_session, catalog, alice, admin):
        order = _place(alice, (catalog["widget"].id, 1), (catalog["gadget"].id, 1))

        assert order_service.delete_order(admin, order.id).ok

        row = db_session.query(Order).filter_by(id=order.id).one()
        assert row.is_deleted and not row.is_active
        assert all(line.is_deleted for line in row.items)
        assert order_service.get_order_by_id(admin, order.id).error_code == 404

    def test_delete_twice_is_not_found(self, db_session, catalog, alice, admin):
        order = _place(alice, (catalog["widget"].id, 1))
        assert order_service.delete_order(admin, order.id).ok

        assert order_service.delete_order(admin, order.id).error_code == 404

    def test_delete_is_admin_only(self, db_session, catalog, alice):
        order = _place(alice, (catalog["widget"].id, 1))
        assert order_service.delete_order(alice, order.id).error_code == 403


# =============================================================================
# END TO END
# =============================================================================


class TestOrderLifecycle:

    def test_create_then_cancel_twice(self, db_session, alice):
        from conftest import make_item
        item = make_item(db_session, "TEN-1", "Ten Dollar Thing", "10.00", 10)

        created = _place(alice, (item.id, 2))
        assert created.total_amount == Decimal("20.00")
        assert created.status == "Pending"

        cancelled = order_service.cancel_order(alice, created.id)
        assert cancelled.data.status == "Cancelled"

        again = order_service.cancel_order(alice, created.id)
        assert again.error_code == 409
        assert again.data is None

    def test_round_trip_and_audit_timestamps(self, db_session, catalog, alice, admin):
        created = _place(alice, (catalog["widget"].id, 1))
        fetched = order_service.get_order_by_id(alice, created.id).data

        assert fetched == created
        assert fetched.created_date is not None
        assert fetched.updated_by is None and fetched.updated_date is None

        payload = order_payload((catalog["gadget"].id, 1))
        payload["status"] = "Processing"
        first = order_service.update_order(admin, created.id, payload).data
        second = order_service.cancel_order(alice, created.id).data

        assert first.updated_by == admin.id
        assert second.updated_by == alice.id
        assert created.created_date <= first.updated_date <= second.updated_date
        assert second.created_date == created.created_date


# =============================================================================
# USE CASE PLUMBING
# =============================================================================


class TestUseCaseWrapper:

    def test_unexpected_error_is_generic_500(self, db_session, admin, monkeypatch, observer):
        def broken(self):
            raise RuntimeError("connection string: postgres://secret")

        from orderhub.persistence.repositories.orders import OrderRepository
        monkeypatch.setattr(OrderRepository, "get_all", broken)

        response = order_service.get_all_orders(admin, observer=observer)

        assert response.error_code == 500
        assert response.message == "An error occurred while retrieving orders"
        assert "secret" not in response.message
        assert observer.events == [("start", "get_all_orders"), ("failure", "get_all_orders")]

    def test_observer_sees_success(self, db_session, catalog, alice, observer):
        order_service.get_my_orders(alice, observer=observer)
        assert observer.events == [("start", "get_my_orders"), ("success", "get_my_orders")]

    def test_observer_sees_rejection(self, db_session, alice, observer):
        order_service.get_all_orders(alice, observer=observer)
        assert observer.events[-1] == ("failure", "get_all_orders")

    def test_shared_unit_of_work_is_not_disposed(self, db_session, catalog, alice):
        with UnitOfWork() as uow:
            first = order_service.create_order(alice, order_payload((catalog["widget"].id, 1)), uow=uow)
            second = order_service.get_order_by_id(alice, first.data.id, uow=uow)
            assert second.ok
            assert not uow._disposed
