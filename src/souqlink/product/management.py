"""Product management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from souqlink.domain import souqlink
from souqlink.product.product import Product


@souqlink.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    category: String(required=True, max_length=50)
    indicative_price: Float(default=0.0)
    image_url: String(max_length=500)
    is_active: Boolean(default=True)


@souqlink.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    category: String(max_length=50)
    indicative_price: Float()
    image_url: String(max_length=500)
    is_active: Boolean()


@souqlink.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            category=command.category,
            indicative_price=command.indicative_price or 0.0,
            image_url=command.image_url,
            is_active=command.is_active if command.is_active is not None else True,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update(
            name=command.name,
            category=command.category,
            indicative_price=command.indicative_price,
            image_url=command.image_url,
            is_active=command.is_active,
        )
        repo.add(product)
