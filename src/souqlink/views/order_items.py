"""Line items of an order joined with the catalogue entries they reference."""

from protean.utils.globals import current_domain

from souqlink.order.order import Order
from souqlink.product.product import Product

DEFAULT_PRODUCT_NAME = "Product"


def list_order_items(order_id):
    order = current_domain.repository_for(Order).get(order_id)
    products = current_domain.repository_for(Product).find_many(item.product_id for item in order.items)

    rows = []
    for item in order.items:
        product = products.get(str(item.product_id))
        rows.append(
            {
                "id": str(item.id),
                "order_id": str(order.id),
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "indicative_price": item.indicative_price,
                "product": {
                    "name": product.name if product else DEFAULT_PRODUCT_NAME,
                    "image_url": product.image_url if product else None,
                },
            }
        )
    return rows
