"""Order placement: command and handler."""

import json
from datetime import datetime

from protean import handle
from protean.fields import DateTime, String, Text
from protean.utils.globals import current_domain

from preorders.config import get_order_cutoff
from preorders.domain import preorders
from preorders.exceptions import OrderWindowClosed, ValidationFailed
from preorders.order.order import Order
from preorders.order.window import is_order_window_open
from preorders.product.lookup import get_product
from preorders.shop.directory import resolve_acting_shop, resolve_caller
from preorders.utils.logging import get_logger

logger = get_logger(__name__)


@preorders.command(part_of="Order")
class PlaceOrder:
    """Place a cart of trays for the caller, or for another shop when the caller is an admin."""

    caller: String(required=True, max_length=100)  # Account name of the requester
    items: Text(required=True)  # JSON: list of {product_id, quantity}
    shop_name: String(max_length=255)
    requested_at: DateTime()


def parse_cart(items) -> list[dict]:
    """Decode and validate cart lines. Every line needs a product id and a quantity of at least 1."""
    lines = json.loads(items) if isinstance(items, str) else items
    if not isinstance(lines, list) or not lines:
        raise ValidationFailed("Order cart cannot be empty", details={"items": lines})

    parsed = []
    for position, line in enumerate(lines):
        product_id = line.get("product_id") if isinstance(line, dict) else None
        quantity = line.get("quantity") if isinstance(line, dict) else None
        if product_id in (None, ""):
            raise ValidationFailed("Product id is required", details={"line": position})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationFailed(
                "Quantity must be a whole number of at least 1",
                details={"line": position, "quantity": quantity},
            )
        parsed.append({"product_id": str(product_id), "quantity": quantity})
    return parsed


@preorders.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = parse_cart(command.items)

        caller = resolve_caller(command.caller)
        shop = resolve_acting_shop(caller, command.shop_name)

        requested_at = command.requested_at or datetime.now()
        if not is_order_window_open(caller.role, requested_at):
            raise OrderWindowClosed(get_order_cutoff(), requested_at)

        # Shops always order by the tray
        lines = []
        for line in cart:
            product = get_product(line["product_id"])
            lines.append(
                {
                    "product_id": str(product.id),
                    "quantity": line["quantity"],
                    "unit_price": product.price_tray,
                }
            )

        order = Order.place(shop_id=shop.id, lines=lines, placed_at=requested_at)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            shop=shop.account_name,
            placed_by=caller.account_name,
            total_price=order.total_price,
            lines=len(lines),
        )
        return str(order.id)
