"""Order modification — commands and handler.

Partial updates coming from couriers and admins: status progress, courier
assignment, receipt total, notes and the courier's live position.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from souqlink.domain import souqlink
from souqlink.order.order import Order
from souqlink.shared.email import validate_email
from souqlink.shared.exceptions import OrderAlreadyClaimed
from souqlink.utils.logging import get_logger

logger = get_logger(__name__)


@souqlink.command(part_of="Order")
class UpdateOrder:
    """Apply any subset of changes to an order.

    When ``acting_courier_email`` is given, the order must be assigned to
    that courier; otherwise it is reported as not found.
    """

    order_id = Identifier(required=True)
    status = String(max_length=20)
    assigned_courier_email = String(max_length=254)
    final_total = Float(min_value=0.0)
    notes = Text()
    courier_lat = Float()
    courier_lng = Float()
    acting_courier_email = String(max_length=254)


@souqlink.command(part_of="Order")
class RecordCourierLocation:
    order_id = Identifier(required=True)
    lat = Float(required=True)
    lng = Float(required=True)


@souqlink.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if command.acting_courier_email and not order.is_assigned_to(command.acting_courier_email):
            raise ObjectNotFoundError(f"Order {command.order_id} not found or not assigned to this courier")

        if command.assigned_courier_email:
            self._assign(repo, order, command.assigned_courier_email)

        if command.status:
            previous = order.status
            order.change_status(command.status)
            if order.status != previous:
                logger.info(
                    "order_status_changed",
                    order_id=str(order.id),
                    previous_status=previous,
                    new_status=order.status,
                )

        order.revise(final_total=command.final_total, notes=command.notes)

        if command.courier_lat is not None or command.courier_lng is not None:
            if command.courier_lat is None or command.courier_lng is None:
                raise ValidationError({"location": ["Both courierLat and courierLng are required"]})
            order.record_courier_location(command.courier_lat, command.courier_lng)

        repo.add(order)
        return str(order.id)

    @handle(RecordCourierLocation)
    def record_courier_location(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_courier_location(command.lat, command.lng)
        repo.add(order)
        return str(order.id)

    @staticmethod
    def _assign(repo, order, courier_email):
        courier_email = validate_email(courier_email, field="assigned_courier_email")
        if order.is_assigned_to(courier_email):
            return
        if order.is_assigned:
            raise OrderAlreadyClaimed("This order has already been accepted by another courier")
        if not repo.claim(order.id, courier_email):
            raise OrderAlreadyClaimed("This order has already been accepted by another courier")

        order.apply_claim(courier_email)
        logger.info("order_claimed", order_id=str(order.id), courier_email=courier_email)
