"""Aggregate counts for the admin dashboard and the courier profile."""

from protean.utils.globals import current_domain

from souqlink.order.order import Order, OrderStatus, OrderType
from souqlink.order.repository import ACTIVE_STATUSES


def admin_stats():
    repo = current_domain.repository_for(Order)
    return {
        "total_orders": repo.count(),
        "supermarket_orders": repo.count(order_type=OrderType.SUPERMARKET.value),
        "souq_orders": repo.count(order_type=OrderType.SOUQ.value),
        "orders_by_status": {status.value: repo.count(status=status.value) for status in OrderStatus},
    }


def courier_stats(courier_email):
    """Workload of one courier: everything assigned, delivered, and still in progress."""
    repo = current_domain.repository_for(Order)
    return {
        "total_assigned": repo.count_for_courier(courier_email),
        "delivered": repo.count_for_courier(courier_email, statuses=[OrderStatus.DELIVERED.value]),
        "active": repo.count_for_courier(courier_email, statuses=ACTIVE_STATUSES),
    }
