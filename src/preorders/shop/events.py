"""Domain events for the Shop aggregate."""

from protean.fields import Identifier, String

from preorders.domain import preorders


@preorders.event(part_of="Shop")
class ShopRegistered:
    """A shop or admin account was added to the directory."""

    __version__ = "v1"

    shop_id: Identifier(required=True)
    account_name: String(required=True)
    shop_name: String(required=True)
    role: String(required=True)
