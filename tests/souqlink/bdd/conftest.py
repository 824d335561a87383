"""Shared BDD fixtures and step definitions for orders."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from souqlink.order.events import (
    CourierLocationRecorded,
    OrderClaimed,
    OrderPlaced,
    OrderRevised,
    OrderStatusChanged,
)
from souqlink.order.order import Order

# Map event name strings to classes for dynamic lookup
_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderClaimed": OrderClaimed,
    "OrderStatusChanged": OrderStatusChanged,
    "OrderRevised": OrderRevised,
    "CourierLocationRecorded": CourierLocationRecorded,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a placed souq order", target_fixture="order")
def placed_souq_order():
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


@given(parsers.cfparse('the order is claimed by "{courier_email}"'))
def order_is_claimed(order, courier_email):
    order.apply_claim(courier_email)
    order._events.clear()


@given("the order has been delivered")
def order_has_been_delivered(order):
    order.change_status("in_delivery")
    order.change_status("delivered")
    order._events.clear()


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse('the order is assigned to "{courier_email}"'))
def order_assigned_to(order, courier_email):
    assert order.assigned_courier_email == courier_email


@then(parsers.cfparse("an {event_type} event is raised"))
def generic_event_raised(order, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then("no event is raised")
def no_event_raised(order):
    assert order._events == []
