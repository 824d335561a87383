"""Tests for the Order state machine, claim bookkeeping and courier position."""

import pytest
from protean.exceptions import ValidationError
from souqlink.order.events import (
    CourierLocationRecorded,
    OrderClaimed,
    OrderRevised,
    OrderStatusChanged,
)
from souqlink.order.order import Order, OrderStatus, parse_status
from souqlink.shared.exceptions import OrderAlreadyClaimed


def _order():
    order = Order.place(
        order_type="souq",
        customer_email="amina@example.com",
        customer_name="Amina",
        customer_phone="+212600000000",
        delivery_address="12 Rue des Oliviers",
        souq_list_text="mint, tomatoes",
    )
    order._events.clear()
    return order


def _claimed_order(courier_email="karim@example.com"):
    order = _order()
    order.apply_claim(courier_email)
    order._events.clear()
    return order


class TestApplyClaim:
    def test_binds_courier_and_starts_shopping(self):
        order = _order()
        order.apply_claim("Karim@Example.com")
        assert order.assigned_courier_email == "karim@example.com"
        assert order.status == OrderStatus.SHOPPING.value

    def test_raises_order_claimed_event(self):
        order = _order()
        order.apply_claim("karim@example.com")
        event = order._events[-1]
        assert isinstance(event, OrderClaimed)
        assert event.courier_email == "karim@example.com"
        assert event.claimed_at is not None

    def test_another_courier_is_a_conflict(self):
        order = _claimed_order()
        with pytest.raises(OrderAlreadyClaimed):
            order.apply_claim("youssef@example.com")
        assert order.assigned_courier_email == "karim@example.com"

    def test_is_assigned_to_ignores_case(self):
        order = _claimed_order()
        assert order.is_assigned_to("KARIM@example.com")
        assert not order.is_assigned_to("youssef@example.com")


class TestStatusTransitions:
    def test_full_forward_path(self):
        order = _claimed_order()
        order.change_status("in_delivery")
        order.change_status("delivered")
        assert order.status == OrderStatus.DELIVERED.value

    def test_cannot_leave_received_without_courier(self):
        order = _order()
        with pytest.raises(ValidationError) as exc:
            order.change_status("shopping")
        assert "status" in exc.value.messages
        assert order.status == OrderStatus.RECEIVED.value

    def test_cannot_skip_a_step(self):
        order = _claimed_order()
        with pytest.raises(ValidationError):
            order.change_status("delivered")
        assert order.status == OrderStatus.SHOPPING.value

    def test_cannot_move_backwards(self):
        order = _claimed_order()
        order.change_status("in_delivery")
        with pytest.raises(ValidationError):
            order.change_status("shopping")
        assert order.status == OrderStatus.IN_DELIVERY.value

    def test_delivered_is_terminal(self):
        order = _claimed_order()
        order.change_status("in_delivery")
        order.change_status("delivered")
        for status in ("received", "shopping", "in_delivery"):
            with pytest.raises(ValidationError):
                order.change_status(status)

    def test_repeating_current_status_is_a_no_op(self):
        order = _claimed_order()
        order.change_status("shopping")
        assert order.status == OrderStatus.SHOPPING.value
        assert order._events == []

    def test_unknown_status_rejected(self):
        order = _claimed_order()
        with pytest.raises(ValidationError):
            order.change_status("cancelled")

    def test_status_change_event(self):
        order = _claimed_order()
        order.change_status(OrderStatus.IN_DELIVERY)
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "shopping"
        assert event.new_status == "in_delivery"
        assert event.courier_email == "karim@example.com"

    def test_status_index_follows_lifecycle(self):
        order = _claimed_order()
        assert order.status_index() == 1
        order.change_status("in_delivery")
        assert order.status_index() == 2


class TestParseStatus:
    def test_known_value(self):
        assert parse_status("in_delivery") is OrderStatus.IN_DELIVERY

    def test_unknown_value(self):
        with pytest.raises(ValidationError) as exc:
            parse_status("lost")
        assert "status" in exc.value.messages


class TestRevise:
    def test_records_final_total_and_notes(self):
        order = _claimed_order()
        order.revise(final_total=182.5, notes="Receipt photo sent")
        assert order.final_total == 182.5
        assert order.notes == "Receipt photo sent"
        assert isinstance(order._events[-1], OrderRevised)

    def test_leaves_missing_fields_untouched(self):
        order = _claimed_order()
        order.revise(notes="Ring twice")
        order.revise(final_total=40.0)
        assert order.notes == "Ring twice"
        assert order.final_total == 40.0

    def test_nothing_to_revise_raises_no_event(self):
        order = _claimed_order()
        order.revise()
        assert order._events == []

    def test_rejects_negative_total(self):
        order = _claimed_order()
        with pytest.raises(ValidationError):
            order.revise(final_total=-1.0)


class TestCourierLocation:
    def test_records_position_and_timestamp(self):
        order = _claimed_order()
        order.record_courier_location(33.58, -7.60)
        assert order.courier_lat == 33.58
        assert order.courier_lng == -7.60
        assert order.courier_last_update is not None

        event = order._events[-1]
        assert isinstance(event, CourierLocationRecorded)
        assert event.courier_email == "karim@example.com"

    def test_both_coordinates_required(self):
        order = _claimed_order()
        with pytest.raises(ValidationError):
            order.record_courier_location(33.58, None)

    def test_latitude_range_checked(self):
        order = _claimed_order()
        with pytest.raises(ValidationError):
            order.record_courier_location(91.0, -7.60)
