"""Shop registration: command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from preorders.domain import preorders
from preorders.exceptions import ValidationFailed
from preorders.shop.shop import Role, Shop


@preorders.command(part_of="Shop")
class RegisterShop:
    """Add a shop (or admin) account to the directory."""

    account_name: String(required=True, max_length=100)
    shop_name: String(required=True, max_length=255)
    role: String(choices=Role, default=Role.SHOP.value)
    phone: String(max_length=30)
    address: String(max_length=500)


@preorders.command_handler(part_of=Shop)
class RegisterShopHandler:
    @handle(RegisterShop)
    def register_shop(self, command):
        repo = current_domain.repository_for(Shop)
        if repo.find_by_account_name(command.account_name) is not None:
            raise ValidationFailed(
                f"Account name already taken: {command.account_name}",
                details={"account_name": command.account_name},
            )

        shop = Shop.register(
            account_name=command.account_name,
            shop_name=command.shop_name,
            role=command.role,
            phone=command.phone,
            address=command.address,
        )
        repo.add(shop)
        return str(shop.id)
