"""Product aggregate — catalogue entries referenced by supermarket orders."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String

from souqlink.domain import souqlink


class ProductCategory(Enum):
    FRUITS_VEGETABLES = "fruits_vegetables"
    DAIRY = "dairy"
    GROCERY = "grocery"
    DRINKS = "drinks"
    CLEANING = "cleaning"


def _utcnow():
    return datetime.now(UTC)


@souqlink.aggregate
class Product:
    """A catalogue product.

    Prices are indicative only: the amount actually paid is settled from the
    shop receipt and recorded on the order as its final total.
    """

    name: String(required=True, max_length=255)
    category: String(required=True, choices=ProductCategory)
    image_url: String(max_length=500)
    indicative_price: Float(required=True, min_value=0.0)
    is_active: Boolean(default=True)
    created_at: DateTime(default=_utcnow)

    @classmethod
    def create(cls, name, category, indicative_price, image_url=None, is_active=True):
        from souqlink.product.events import ProductCreated

        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["is required"]})

        product = cls(
            name=name,
            category=category,
            indicative_price=indicative_price,
            image_url=image_url,
            is_active=is_active,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                category=product.category,
                indicative_price=product.indicative_price,
                is_active=product.is_active,
                created_at=product.created_at,
            )
        )
        return product

    def update(self, name=None, category=None, indicative_price=None, image_url=None, is_active=None):
        """Apply a partial update; fields left as None keep their value."""
        from souqlink.product.events import ProductUpdated

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": ["cannot be blank"]})
            self.name = name
        if category is not None:
            self.category = category
        if indicative_price is not None:
            self.indicative_price = indicative_price
        if image_url is not None:
            self.image_url = image_url
        if is_active is not None:
            self.is_active = is_active

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                category=self.category,
                indicative_price=self.indicative_price,
                is_active=self.is_active,
            )
        )
