"""Repository for the Order aggregate.

Besides the listings, this is where the claim protocol lives: binding a
courier to an order is a single guarded write that only matches while the
order is still unassigned, so two couriers racing for the same order cannot
both win.
"""

from datetime import UTC, datetime

from protean import Q

from souqlink.domain import souqlink
from souqlink.order.order import Order, OrderStatus
from souqlink.shared.email import normalize_email

ACTIVE_STATUSES = [OrderStatus.SHOPPING.value, OrderStatus.IN_DELIVERY.value]


@souqlink.repository(part_of=Order)
class OrderRepository:
    def claim(self, order_id, courier_email) -> bool:
        """Assign the courier to the order if nobody holds it yet.

        The write commits on its own connection, outside the caller's unit of
        work, so a competing claimer sees it immediately. The memory provider
        serialises claimers under its lock; SQL providers re-check the criteria
        in the ``UPDATE ... WHERE`` itself.

        Returns True when this call bound the courier, False when the order is
        missing, already assigned, or no longer waiting for a courier.
        """
        claimed = self._dao.outside_uow()._claim(
            Q(
                id=order_id,
                assigned_courier_email__isnull=True,
                status=OrderStatus.RECEIVED.value,
            ),
            {
                "assigned_courier_email": normalize_email(courier_email),
                "status": OrderStatus.SHOPPING.value,
                "updated_at": datetime.now(UTC),
            },
            limit=1,
        )
        return len(claimed) == 1

    def list_all(self) -> list[Order]:
        """Every order, newest first."""
        return self._dao.query.order_by("-created_at").limit(None).all().items

    def list_available(self) -> list[Order]:
        """Orders waiting for a courier, newest first."""
        return (
            self._dao.query.filter(
                status=OrderStatus.RECEIVED.value,
                assigned_courier_email__isnull=True,
            )
            .order_by("-created_at")
            .limit(None)
            .all()
            .items
        )

    def list_for_customer(self, customer_email) -> list[Order]:
        email = normalize_email(customer_email)
        if not email:
            return []
        return self._dao.query.filter(customer_email=email).order_by("-created_at").limit(None).all().items

    def list_for_courier(self, courier_email) -> list[Order]:
        email = normalize_email(courier_email)
        if not email:
            return []
        return self._dao.query.filter(assigned_courier_email=email).order_by("-created_at").limit(None).all().items

    def count(self, **filters) -> int:
        """Number of orders matching the filters, unaffected by page limits."""
        queryset = self._dao.query
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.all().total

    def count_for_courier(self, courier_email, statuses=None) -> int:
        email = normalize_email(courier_email)
        if not email:
            return 0
        filters = {"assigned_courier_email": email}
        if statuses:
            filters["status__in"] = list(statuses)
        return self.count(**filters)
