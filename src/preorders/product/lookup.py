"""Catalog lookup used by ordering and the API."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from preorders.exceptions import NotFound
from preorders.product.product import Product


def get_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError as exc:
        raise NotFound(f"Product not found: {product_id}", details={"product_id": str(product_id)}) from exc


def list_products() -> list[Product]:
    products = current_domain.repository_for(Product)._dao.query.all().items
    return sorted(products, key=lambda p: p.name)
