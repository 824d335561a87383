"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from souqlink.domain import souqlink


@souqlink.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    indicative_price: Float(required=True)
    is_active: Boolean(required=True)
    created_at: DateTime(required=True)


@souqlink.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    indicative_price: Float(required=True)
    is_active: Boolean(required=True)
