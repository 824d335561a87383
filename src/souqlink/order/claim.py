"""Order claim — command and handler.

A courier takes an unassigned order. The repository's conditional update
decides the winner; this handler only interprets the outcome.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from souqlink.domain import souqlink
from souqlink.order.order import Order
from souqlink.shared.email import validate_email
from souqlink.shared.exceptions import OrderAlreadyClaimed
from souqlink.utils.logging import get_logger

logger = get_logger(__name__)


@souqlink.command(part_of="Order")
class ClaimOrder:
    order_id = Identifier(required=True)
    courier_email = String(required=True, max_length=254)


@souqlink.command_handler(part_of=Order)
class ClaimOrderHandler:
    @handle(ClaimOrder)
    def claim_order(self, command):
        courier_email = validate_email(command.courier_email, field="courier_email")
        repo = current_domain.repository_for(Order)

        if not repo.claim(command.order_id, courier_email):
            # Raises ObjectNotFoundError when the order does not exist
            order = repo.get(command.order_id)
            logger.info(
                "order_claim_rejected",
                order_id=str(order.id),
                courier_email=courier_email,
                held_by=order.assigned_courier_email,
                status=order.status,
            )
            raise OrderAlreadyClaimed("This order has already been accepted by another courier")

        order = repo.get(command.order_id)
        order.apply_claim(courier_email)
        repo.add(order)

        logger.info("order_claimed", order_id=str(order.id), courier_email=courier_email)
        return str(order.id)
