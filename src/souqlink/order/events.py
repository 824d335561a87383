"""Domain events for the Order aggregate.

Every accepted change to an order is recorded as one of these facts. Nothing
in the marketplace reacts to them yet; they land in the event store and give
each order an audit trail of who moved it and when.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from souqlink.domain import souqlink


@souqlink.event(part_of="Order")
class OrderPlaced:
    """A customer placed a supermarket or souq order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_type = String(required=True)
    customer_email = String(required=True)
    item_count = Integer(default=0)
    delivery_fee = Float()
    placed_at = DateTime(required=True)


@souqlink.event(part_of="Order")
class OrderClaimed:
    """A courier won the claim on an unassigned order."""

    __version__ = 1

    order_id = Identifier(required=True)
    courier_email = String(required=True)
    claimed_at = DateTime(required=True)


@souqlink.event(part_of="Order")
class OrderStatusChanged:
    """The order moved one step forward in its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    courier_email = String()
    changed_at = DateTime(required=True)


@souqlink.event(part_of="Order")
class OrderRevised:
    __version__ = 1

    order_id = Identifier(required=True)
    final_total = Float()
    notes = Text()


@souqlink.event(part_of="Order")
class CourierLocationRecorded:
    """The courier reported a GPS fix while working on the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    courier_email = String()
    lat = Float(required=True)
    lng = Float(required=True)
    recorded_at = DateTime(required=True)
