"""Repository for the Shop aggregate with name lookups."""

from preorders.domain import preorders
from preorders.shop.shop import Shop


@preorders.repository(part_of=Shop)
class ShopRepository:
    def find_by_display_name(self, shop_name: str) -> Shop | None:
        shops = self._dao.query.filter(shop_name=shop_name).all().items
        return shops[0] if shops else None

    def find_by_account_name(self, account_name: str) -> Shop | None:
        shops = self._dao.query.filter(account_name=account_name).all().items
        return shops[0] if shops else None
