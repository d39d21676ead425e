"""Shop aggregate. A retail account that places bulk pre-orders, or the bakery admin."""

from datetime import datetime
from enum import Enum

from protean.fields import DateTime, String

from preorders.domain import preorders


class Role(Enum):
    ADMIN = "ADMIN"
    SHOP = "SHOP"


@preorders.aggregate
class Shop:
    """A registered account. ``account_name`` is the login; ``shop_name`` is shown on orders."""

    account_name: String(required=True, max_length=100, unique=True)
    shop_name: String(required=True, max_length=255)
    role: String(choices=Role, default=Role.SHOP.value)
    phone: String(max_length=30)
    address: String(max_length=500)
    registered_at: DateTime(default=datetime.now)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def answers_to(self, name: str) -> bool:
        """True when ``name`` is this shop's display name or account name."""
        return name in (self.shop_name, self.account_name)

    @classmethod
    def register(cls, account_name, shop_name, role=None, phone=None, address=None):
        from preorders.shop.events import ShopRegistered

        shop = cls(
            account_name=account_name,
            shop_name=shop_name,
            role=role or Role.SHOP.value,
            phone=phone,
            address=address,
            registered_at=datetime.now(),
        )
        shop.raise_(
            ShopRegistered(
                shop_id=shop.id,
                account_name=account_name,
                shop_name=shop_name,
                role=shop.role,
            )
        )
        return shop
