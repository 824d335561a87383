"""Repository for the Product aggregate."""

from souqlink.domain import souqlink
from souqlink.product.product import Product


@souqlink.repository(part_of=Product)
class ProductRepository:
    def list_all(self) -> list[Product]:
        """All products, newest first."""
        return self._dao.query.order_by("-created_at").limit(None).all().items

    def list_active(self) -> list[Product]:
        """Products on sale, alphabetically."""
        return self._dao.query.filter(is_active=True).order_by("name").limit(None).all().items

    def find_many(self, product_ids) -> dict[str, Product]:
        """Map of id to product for the given ids; unknown ids are left out."""
        ids = [str(pid) for pid in product_ids if pid]
        if not ids:
            return {}
        products = self._dao.query.filter(id__in=ids).limit(None).all().items
        return {str(product.id): product for product in products}
