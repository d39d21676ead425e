"""Catalog management: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from preorders.domain import preorders
from preorders.product.lookup import get_product
from preorders.product.product import Product


@preorders.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    description: Text()
    price_portion: Float(required=True, min_value=0.0)
    price_tray: Float(required=True, min_value=0.0)


@preorders.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    price_portion: Float(min_value=0.0)
    price_tray: Float(min_value=0.0)


@preorders.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            description=command.description,
            price_portion=command.price_portion,
            price_tray=command.price_tray,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = get_product(command.product_id)
        product.update(
            name=command.name,
            description=command.description,
            price_portion=command.price_portion,
            price_tray=command.price_tray,
        )
        current_domain.repository_for(Product).add(product)
