"""Order placement — command and handler.

The order and all of its items are written in one unit of work: the handler
either persists the whole order or nothing.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain

from souqlink.domain import souqlink
from souqlink.order.order import Order
from souqlink.product.product import Product
from souqlink.utils.logging import get_logger

logger = get_logger(__name__)


@souqlink.command(part_of="Order")
class PlaceOrder:
    order_type = String(required=True, max_length=20)
    customer_email = String(required=True, max_length=254)
    customer_name = String(required=True, max_length=100)
    customer_phone = String(required=True, max_length=30)
    delivery_address = String(required=True, max_length=500)
    items = Text()  # JSON: list of {product_id, quantity, indicative_price}
    souq_list_text = Text()
    notes = Text()
    quality_preference = String(max_length=20)
    budget_enabled = Boolean(default=False)
    budget_max = Float()
    preferred_time_window = String(max_length=20)
    pickup_address = String(max_length=500)
    pickup_lat = Float()
    pickup_lng = Float()
    dropoff_lat = Float()
    dropoff_lng = Float()


def _load_items(raw):
    if not raw:
        return []
    items = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValidationError({"items": ["Items must be a list of objects"]})
    return items


def _price_items(items_data):
    """Check every referenced product exists and fill in missing prices from the catalogue."""
    products = current_domain.repository_for(Product).find_many(item.get("product_id") for item in items_data)

    priced = []
    for item in items_data:
        product_id = item.get("product_id")
        if not product_id:
            raise ValidationError({"items": ["Every item needs a product_id"]})
        product = products.get(str(product_id))
        if product is None:
            raise ValidationError({"items": [f"Unknown product {product_id}"]})
        if item.get("indicative_price") is None:
            item = {**item, "indicative_price": product.indicative_price}
        priced.append(item)
    return priced


@souqlink.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = _price_items(_load_items(command.items))

        order = Order.place(
            order_type=command.order_type,
            customer_email=command.customer_email,
            customer_name=command.customer_name,
            customer_phone=command.customer_phone,
            delivery_address=command.delivery_address,
            items_data=items_data,
            souq_list_text=command.souq_list_text,
            notes=command.notes,
            quality_preference=command.quality_preference,
            budget_enabled=command.budget_enabled,
            budget_max=command.budget_max,
            preferred_time_window=command.preferred_time_window,
            pickup_address=command.pickup_address,
            pickup_lat=command.pickup_lat,
            pickup_lng=command.pickup_lng,
            dropoff_lat=command.dropoff_lat,
            dropoff_lng=command.dropoff_lng,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_type=order.order_type,
            item_count=len(order.items),
        )
        return str(order.id)
