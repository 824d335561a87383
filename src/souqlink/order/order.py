"""Order aggregate — the delivery order, its line items and its lifecycle.

State Machine (4 states, forward only):
    RECEIVED → SHOPPING → IN_DELIVERY → DELIVERED

An order leaves RECEIVED only once a courier holds it. The courier is bound
by the claim protocol (see ``OrderRepository.claim``), never by overwriting
``assigned_courier_email`` on a loaded aggregate.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from souqlink.domain import souqlink
from souqlink.shared.email import normalize_email, validate_email
from souqlink.shared.exceptions import OrderAlreadyClaimed

DEFAULT_DELIVERY_FEE = 15.0


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    RECEIVED = "received"
    SHOPPING = "shopping"
    IN_DELIVERY = "in_delivery"
    DELIVERED = "delivered"


class OrderType(Enum):
    SUPERMARKET = "supermarket"
    SOUQ = "souq"


class QualityPreference(Enum):
    STANDARD = "standard"
    BEST_QUALITY = "best_quality"


class TimeWindow(Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# Lifecycle order, used for transitions and for the tracking timeline
STATUS_SEQUENCE = [
    OrderStatus.RECEIVED,
    OrderStatus.SHOPPING,
    OrderStatus.IN_DELIVERY,
    OrderStatus.DELIVERED,
]

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.RECEIVED: {OrderStatus.SHOPPING},
    OrderStatus.SHOPPING: {OrderStatus.IN_DELIVERY},
    OrderStatus.IN_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
}


def _utcnow():
    return datetime.now(UTC)


def parse_status(value):
    """Convert a raw status string into an OrderStatus or raise ValidationError."""
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Unknown status {value!r}; expected one of {allowed}"]}) from None


def _merge_items(items_data):
    """Collapse lines for the same product into one, summing quantities."""
    merged = {}
    for raw in items_data or []:
        product_id = str(raw.get("product_id") or "").strip()
        if not product_id:
            raise ValidationError({"items": ["Every item needs a product_id"]})

        quantity = raw.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": [f"Quantity for product {product_id} must be a positive whole number"]})

        if product_id in merged:
            merged[product_id]["quantity"] += quantity
        else:
            merged[product_id] = {
                "product_id": product_id,
                "quantity": quantity,
                "indicative_price": raw.get("indicative_price") or 0.0,
            }
    return list(merged.values())


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@souqlink.entity(part_of="Order")
class OrderItem:
    """A catalogue product requested in a supermarket order.

    Items are written together with their order and never change afterwards.
    The product is referenced, not owned.
    """

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    indicative_price: Float(default=0.0, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@souqlink.aggregate
class Order:
    order_type: String(required=True, choices=OrderType)
    customer_email: String(required=True, max_length=254)
    customer_name: String(required=True, max_length=100)
    customer_phone: String(required=True, max_length=30)
    delivery_address: String(required=True, max_length=500)
    status: String(choices=OrderStatus, default=OrderStatus.RECEIVED.value)
    assigned_courier_email: String(max_length=254)
    delivery_fee: Float(default=DEFAULT_DELIVERY_FEE, min_value=0.0)
    final_total: Float(min_value=0.0)
    notes: Text()
    souq_list_text: Text()
    quality_preference: String(choices=QualityPreference)
    budget_enabled: Boolean(default=False)
    budget_max: Float(min_value=0.0)
    preferred_time_window: String(choices=TimeWindow)
    pickup_address: String(max_length=500)
    pickup_lat: Float(min_value=-90.0, max_value=90.0)
    pickup_lng: Float(min_value=-180.0, max_value=180.0)
    dropoff_lat: Float(min_value=-90.0, max_value=90.0)
    dropoff_lng: Float(min_value=-180.0, max_value=180.0)
    courier_lat: Float(min_value=-90.0, max_value=90.0)
    courier_lng: Float(min_value=-180.0, max_value=180.0)
    courier_last_update: DateTime()
    items: HasMany(OrderItem)
    created_at: DateTime(default=_utcnow)
    updated_at: DateTime(default=_utcnow)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_type,
        customer_email,
        customer_name,
        customer_phone,
        delivery_address,
        items_data=None,
        souq_list_text=None,
        notes=None,
        quality_preference=None,
        budget_enabled=False,
        budget_max=None,
        preferred_time_window=None,
        pickup_address=None,
        pickup_lat=None,
        pickup_lng=None,
        dropoff_lat=None,
        dropoff_lng=None,
    ):
        """Create a new order in RECEIVED state, with its items if any.

        Args:
            order_type: "supermarket" or "souq".
            items_data: List of dicts with product_id, quantity and
                        indicative_price. Required for supermarket orders,
                        forbidden for souq orders.
            souq_list_text: Freeform shopping list. Required for souq orders.
        """
        from souqlink.order.events import OrderPlaced

        missing = {
            field: ["is required"]
            for field, value in (
                ("customer_email", customer_email),
                ("customer_name", customer_name),
                ("customer_phone", customer_phone),
                ("delivery_address", delivery_address),
            )
            if not (value or "").strip()
        }
        if missing:
            raise ValidationError(missing)

        lines = _merge_items(items_data)
        souq_list_text = (souq_list_text or "").strip() or None

        if order_type == OrderType.SUPERMARKET.value:
            if not lines:
                raise ValidationError({"items": ["A supermarket order needs at least one item"]})
            if souq_list_text:
                raise ValidationError({"souq_list_text": ["Only souq orders carry a shopping list"]})
        elif order_type == OrderType.SOUQ.value:
            if not souq_list_text:
                raise ValidationError({"souq_list_text": ["A souq order needs a shopping list"]})
            if lines:
                raise ValidationError({"items": ["Souq orders cannot reference catalogue items"]})

        if budget_enabled and budget_max is None:
            raise ValidationError({"budget_max": ["is required when the budget is enabled"]})

        order = cls(
            order_type=order_type,
            customer_email=validate_email(customer_email, field="customer_email"),
            customer_name=customer_name.strip(),
            customer_phone=customer_phone.strip(),
            delivery_address=delivery_address.strip(),
            souq_list_text=souq_list_text,
            notes=notes,
            quality_preference=quality_preference,
            budget_enabled=bool(budget_enabled),
            budget_max=budget_max if budget_enabled else None,
            preferred_time_window=preferred_time_window,
            pickup_address=pickup_address,
            pickup_lat=pickup_lat,
            pickup_lng=pickup_lng,
            dropoff_lat=dropoff_lat,
            dropoff_lng=dropoff_lng,
        )
        if lines:
            order.add_items([OrderItem(**line) for line in lines])

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_type=order.order_type,
                customer_email=order.customer_email,
                item_count=len(lines),
                delivery_fee=order.delivery_fee,
                placed_at=order.created_at,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_assigned(self):
        return bool(self.assigned_courier_email)

    def is_assigned_to(self, courier_email):
        return self.is_assigned and self.assigned_courier_email == normalize_email(courier_email)

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})
        if current == OrderStatus.RECEIVED and not self.is_assigned:
            raise ValidationError({"status": ["A courier must claim the order before it can progress"]})

    # -------------------------------------------------------------------
    # Claim
    # -------------------------------------------------------------------
    def apply_claim(self, courier_email):
        """Record on the aggregate a claim the repository already committed.

        The claim itself is the conditional update in
        ``OrderRepository.claim``; this only mirrors its outcome and raises
        the event. A different courier already on the order is a conflict.
        """
        from souqlink.order.events import OrderClaimed

        courier_email = normalize_email(courier_email)
        if self.is_assigned and self.assigned_courier_email != courier_email:
            raise OrderAlreadyClaimed("This order has already been accepted by another courier")

        self.assigned_courier_email = courier_email
        if self.status == OrderStatus.RECEIVED.value:
            self.status = OrderStatus.SHOPPING.value
        self.updated_at = _utcnow()

        self.raise_(
            OrderClaimed(
                order_id=self.id,
                courier_email=courier_email,
                claimed_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        """Move the order forward one step. Repeating the current status is a no-op."""
        from souqlink.order.events import OrderStatusChanged

        target = new_status if isinstance(new_status, OrderStatus) else parse_status(new_status)
        if target.value == self.status:
            return

        self._assert_can_transition(target)

        previous = self.status
        self.status = target.value
        self.updated_at = _utcnow()

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=self.status,
                courier_email=self.assigned_courier_email,
                changed_at=self.updated_at,
            )
        )

    def revise(self, final_total=None, notes=None):
        """Record the receipt total and/or replace the notes.

        Leaves status and courier untouched.
        """
        from souqlink.order.events import OrderRevised

        if final_total is None and notes is None:
            return

        if final_total is not None:
            self.final_total = final_total
        if notes is not None:
            self.notes = notes
        self.updated_at = _utcnow()

        self.raise_(
            OrderRevised(
                order_id=self.id,
                final_total=self.final_total,
                notes=self.notes,
            )
        )

    def record_courier_location(self, lat, lng):
        """Store the courier's latest GPS fix and stamp the time it was received."""
        from souqlink.order.events import CourierLocationRecorded

        if lat is None or lng is None:
            raise ValidationError({"location": ["Both latitude and longitude are required"]})

        now = _utcnow()
        self.courier_lat = lat
        self.courier_lng = lng
        self.courier_last_update = now
        self.updated_at = now

        self.raise_(
            CourierLocationRecorded(
                order_id=self.id,
                courier_email=self.assigned_courier_email,
                lat=lat,
                lng=lng,
                recorded_at=now,
            )
        )

    def status_index(self):
        return STATUS_SEQUENCE.index(OrderStatus(self.status))
