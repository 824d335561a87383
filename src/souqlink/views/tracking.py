"""Tracking feed — what a customer's tracking screen polls.

Recomputed from the Order and User rows on every call; nothing is cached or
stored. Pickup and dropoff fall back to fixed coordinates when the order was
placed without them.
"""

from protean.utils.globals import current_domain

from souqlink.order.order import STATUS_SEQUENCE, Order, OrderStatus
from souqlink.user.user import User

DEFAULT_PICKUP = {"address": "Local supermarket", "lat": 33.5731, "lng": -7.5898}
DEFAULT_DROPOFF = {"lat": 33.5831, "lng": -7.5998}
DEFAULT_COURIER_NAME = "Courier"

TIMELINE_LABELS = {
    OrderStatus.RECEIVED: "Order received",
    OrderStatus.SHOPPING: "Shopping in progress",
    OrderStatus.IN_DELIVERY: "Out for delivery",
    OrderStatus.DELIVERED: "Delivered",
}


def _or_default(value, default):
    return default if value is None else value


def build_timeline(status):
    """One entry per lifecycle state, flagged completed/current against ``status``."""
    current_index = STATUS_SEQUENCE.index(OrderStatus(status))
    return [
        {
            "key": step.value,
            "label": TIMELINE_LABELS[step],
            "completed": index <= current_index,
            "current": index == current_index,
        }
        for index, step in enumerate(STATUS_SEQUENCE)
    ]


def progress(status):
    """Fraction of the lifecycle covered, from 0.0 (received) to 1.0 (delivered)."""
    return STATUS_SEQUENCE.index(OrderStatus(status)) / (len(STATUS_SEQUENCE) - 1)


def _courier_view(order):
    if not order.assigned_courier_email:
        return None

    courier = current_domain.repository_for(User).find_by_email(order.assigned_courier_email)
    return {
        "email": order.assigned_courier_email,
        "name": courier.name if courier and courier.name else DEFAULT_COURIER_NAME,
        "phone": courier.phone if courier else None,
        "lat": order.courier_lat,
        "lng": order.courier_lng,
        "last_update": order.courier_last_update,
    }


def get_tracking(order_id):
    """Build the tracking feed for an order. Raises ObjectNotFoundError for unknown ids."""
    order = current_domain.repository_for(Order).get(order_id)

    return {
        "order_id": str(order.id),
        "status": order.status,
        "order_type": order.order_type,
        "created_at": order.created_at,
        "pickup": {
            "address": order.pickup_address or DEFAULT_PICKUP["address"],
            "lat": _or_default(order.pickup_lat, DEFAULT_PICKUP["lat"]),
            "lng": _or_default(order.pickup_lng, DEFAULT_PICKUP["lng"]),
        },
        "dropoff": {
            "address": order.delivery_address,
            "lat": _or_default(order.dropoff_lat, DEFAULT_DROPOFF["lat"]),
            "lng": _or_default(order.dropoff_lng, DEFAULT_DROPOFF["lng"]),
        },
        "courier": _courier_view(order),
        "timeline": build_timeline(order.status),
        "progress": progress(order.status),
    }
