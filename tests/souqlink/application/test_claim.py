"""Application tests for the courier claim protocol."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from souqlink.order.claim import ClaimOrder
from souqlink.order.modification import UpdateOrder
from souqlink.order.order import Order
from souqlink.order.placement import PlaceOrder
from souqlink.shared.exceptions import OrderAlreadyClaimed


def _place_souq_order():
    return current_domain.process(
        PlaceOrder(
            order_type="souq",
            customer_email="amina@example.com",
            customer_name="Amina",
            customer_phone="+212600000000",
            delivery_address="12 Rue des Oliviers",
            souq_list_text="mint, tomatoes",
        ),
        asynchronous=False,
    )


def _claim(order_id, courier_email):
    return current_domain.process(ClaimOrder(order_id=order_id, courier_email=courier_email), asynchronous=False)


class TestClaimOrder:
    def test_claim_assigns_courier_and_starts_shopping(self):
        order_id = _place_souq_order()
        _claim(order_id, "Karim@Example.com")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.assigned_courier_email == "karim@example.com"
        assert order.status == "shopping"

    def test_second_courier_is_rejected(self):
        order_id = _place_souq_order()
        _claim(order_id, "karim@example.com")

        with pytest.raises(OrderAlreadyClaimed):
            _claim(order_id, "youssef@example.com")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.assigned_courier_email == "karim@example.com"
        assert order.status == "shopping"

    def test_exactly_one_of_many_claims_succeeds(self):
        order_id = _place_souq_order()
        couriers = [f"courier{i}@example.com" for i in range(10)]

        winners = []
        for email in couriers:
            try:
                _claim(order_id, email)
                winners.append(email)
            except OrderAlreadyClaimed:
                pass

        assert winners == ["courier0@example.com"]
        order = current_domain.repository_for(Order).get(order_id)
        assert order.assigned_courier_email == "courier0@example.com"

    def test_claiming_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _claim("no-such-order", "karim@example.com")

    def test_claimed_order_leaves_available_list(self):
        order_id = _place_souq_order()
        other_id = _place_souq_order()
        _claim(order_id, "karim@example.com")

        available = current_domain.repository_for(Order).list_available()
        assert [str(order.id) for order in available] == [other_id]

    def test_invalid_courier_email(self):
        order_id = _place_souq_order()
        with pytest.raises(ValidationError):
            _claim(order_id, "not-an-email")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.assigned_courier_email is None


class TestRepositoryClaim:
    def test_conditional_update_reports_outcome(self):
        order_id = _place_souq_order()
        repo = current_domain.repository_for(Order)

        assert repo.claim(order_id, "karim@example.com") is True
        assert repo.claim(order_id, "youssef@example.com") is False
        assert repo.claim("no-such-order", "youssef@example.com") is False


def _race(domain, attempt, contenders):
    """Start ``attempt(email)`` for every contender at the same moment, each in its own domain context."""
    barrier = threading.Barrier(len(contenders))

    def run(email):
        with domain.domain_context():
            barrier.wait()
            try:
                attempt(email)
            except OrderAlreadyClaimed:
                return email, False
            return email, True

    with ThreadPoolExecutor(max_workers=len(contenders)) as pool:
        return list(pool.map(run, contenders))


class TestConcurrentClaims:
    def test_only_one_simultaneous_claim_wins(self, _souqlink_domain):
        order_id = _place_souq_order()
        couriers = [f"courier{i}@example.com" for i in range(12)]

        outcomes = _race(_souqlink_domain, lambda email: _claim(order_id, email), couriers)

        winners = [email for email, won in outcomes if won]
        assert len(winners) == 1
        assert sum(1 for _, won in outcomes if not won) == len(couriers) - 1

        order = current_domain.repository_for(Order).get(order_id)
        assert order.assigned_courier_email == winners[0]
        assert order.status == "shopping"

    def test_only_one_simultaneous_assignment_wins(self, _souqlink_domain):
        order_id = _place_souq_order()
        couriers = [f"courier{i}@example.com" for i in range(8)]

        def assign(email):
            current_domain.process(
                UpdateOrder(order_id=order_id, assigned_courier_email=email),
                asynchronous=False,
            )

        outcomes = _race(_souqlink_domain, assign, couriers)

        winners = [email for email, won in outcomes if won]
        assert len(winners) == 1

        order = current_domain.repository_for(Order).get(order_id)
        assert order.assigned_courier_email == winners[0]
        assert order.status == "shopping"

    def test_claim_and_assignment_racing_each_other(self, _souqlink_domain):
        order_id = _place_souq_order()

        def attempt(email):
            if email.startswith("claim"):
                _claim(order_id, email)
            else:
                current_domain.process(
                    UpdateOrder(order_id=order_id, assigned_courier_email=email),
                    asynchronous=False,
                )

        contenders = [f"claim{i}@example.com" for i in range(4)] + [f"assign{i}@example.com" for i in range(4)]
        outcomes = _race(_souqlink_domain, attempt, contenders)

        winners = [email for email, won in outcomes if won]
        assert len(winners) == 1
        assert current_domain.repository_for(Order).get(order_id).assigned_courier_email == winners[0]
