"""Role-scoped order listing."""

from protean.utils.globals import current_domain

from preorders.order.order import Order
from preorders.shop.directory import resolve_caller


def list_orders(caller: str) -> list[Order]:
    """Every order for an admin, only the caller's own orders otherwise. Newest first."""
    shop = resolve_caller(caller)
    repo = current_domain.repository_for(Order)
    if shop.is_admin:
        return repo.find_all_newest_first()
    return repo.find_for_shop_newest_first(shop.id)
