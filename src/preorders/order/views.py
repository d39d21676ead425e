"""Read-side shape of an order as shown to shops and admins.

Shop details and product names are looked up when the view is built, so they
reflect the current catalog and directory. Prices come from the order itself.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from preorders.order.order import Order
from preorders.product.product import Product
from preorders.shop.shop import Shop


def _shop_or_none(shop_id):
    try:
        return current_domain.repository_for(Shop).get(str(shop_id))
    except ObjectNotFoundError:
        return None


def _product_name(product_id, cache: dict) -> str | None:
    key = str(product_id)
    if key not in cache:
        try:
            cache[key] = current_domain.repository_for(Product).get(key).name
        except ObjectNotFoundError:
            cache[key] = None
    return cache[key]


def order_view(order: Order, product_names: dict | None = None) -> dict:
    product_names = {} if product_names is None else product_names
    shop = _shop_or_none(order.shop_id)

    return {
        "order_id": str(order.id),
        "shop_id": str(order.shop_id),
        "shop_name": shop.shop_name if shop else None,
        "account_name": shop.account_name if shop else None,
        "shop_address": shop.address if shop else None,
        "shop_phone": shop.phone if shop else None,
        "status": order.status,
        "total_price": order.total_price,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "item_id": str(item.id),
                "product_id": str(item.product_id),
                "product_name": _product_name(item.product_id, product_names),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "sub_total": item.sub_total,
            }
            for item in order.items
        ],
    }


def order_views(orders: list[Order]) -> list[dict]:
    product_names: dict = {}
    return [order_view(order, product_names) for order in orders]
