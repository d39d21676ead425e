"""Shop directory: resolves callers and target shops by name.

A shop can be addressed by its display name ("Lale Pastanesi") or by its
account name ("lale"). Resolution always tries the display name first, then
the account name.
"""

from protean.utils.globals import current_domain

from preorders.exceptions import Forbidden, NotFound
from preorders.shop.shop import Shop


def _repo():
    return current_domain.repository_for(Shop)


def find_by_display_name(shop_name: str) -> Shop | None:
    return _repo().find_by_display_name(shop_name)


def find_by_account_name(account_name: str) -> Shop | None:
    return _repo().find_by_account_name(account_name)


def resolve_shop(name: str) -> Shop:
    """Resolve ``name`` against display names, then account names."""
    shop = find_by_display_name(name) or find_by_account_name(name)
    if shop is None:
        raise NotFound(f"Shop not found: {name}", details={"shop_name": name})
    return shop


def resolve_caller(account_name: str) -> Shop:
    """The authenticated requester, looked up by the account name it logged in with."""
    shop = find_by_account_name(account_name)
    if shop is None:
        raise NotFound(f"Account not found: {account_name}", details={"account_name": account_name})
    return shop


def resolve_acting_shop(caller: Shop, shop_name: str | None = None) -> Shop:
    """The shop an order is attributed to.

    Admins may name any shop. Shops may only name themselves.
    """
    if not shop_name or caller.answers_to(shop_name):
        return caller
    if not caller.is_admin:
        raise Forbidden(
            "Only admins can place orders on behalf of another shop",
            details={"caller": caller.account_name, "shop_name": shop_name},
        )
    return resolve_shop(shop_name)
