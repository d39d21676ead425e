"""Daily quantity reconciliation.

An admin sets the number of trays of one product a shop has committed to for
the current day. The engine compares that target with what today's open orders
already hold and closes the gap:

- more wanted: a new WAITING order is placed for the difference, priced at the
  product's current tray price;
- fewer wanted: units are taken off today's orders, most recent first, shrinking
  or dropping lines and cancelling orders that end up empty;
- same: nothing happens, so repeating a call is harmless.

Existing lines keep their snapshot prices, so after a price change the day's
lines for one product may carry different unit prices.
"""

from datetime import datetime

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from preorders.domain import preorders
from preorders.exceptions import Forbidden, ValidationFailed
from preorders.order.order import Order, OrderStatus
from preorders.order.window import day_bounds
from preorders.product.lookup import get_product
from preorders.shop.directory import resolve_caller, resolve_shop
from preorders.utils.logging import get_logger

logger = get_logger(__name__)


@preorders.command(part_of="Order")
class ReconcileDailyQuantity:
    """Force a shop's total quantity of one product for today to ``target_quantity``."""

    caller: String(required=True, max_length=100)
    shop_name: String(required=True, max_length=255)
    product_id: Identifier(required=True)
    target_quantity: Integer(required=True)
    requested_at: DateTime()


def reconcile(shop, product, target_quantity: int, at: datetime) -> dict:
    """Bring ``shop``'s quantity of ``product`` for the day containing ``at`` to ``target_quantity``.

    Returns an outcome dict with the previous total and what was changed. Must
    run inside the caller's unit of work: every order write below commits or
    rolls back together.
    """
    repo = current_domain.repository_for(Order)
    start, end = day_bounds(at)

    # Newest first: shrinking undoes the latest additions before older orders
    todays_orders = repo.find_open_for_shop_between(shop.id, start, end)
    current_total = sum(order.quantity_of(product.id) for order in todays_orders)
    diff = target_quantity - current_total

    outcome = {
        "shop_id": str(shop.id),
        "product_id": str(product.id),
        "previous_total": current_total,
        "target_quantity": target_quantity,
        "created_order_id": None,
        "touched_order_ids": [],
        "cancelled_order_ids": [],
        "shortfall": 0,
    }

    log = logger.bind(
        shop=shop.account_name,
        product_id=str(product.id),
        previous_total=current_total,
        target_quantity=target_quantity,
        diff=diff,
    )

    if diff == 0:
        log.info("Daily quantity already at target")
        return outcome

    if diff > 0:
        order = Order.place(
            shop_id=shop.id,
            lines=[{"product_id": str(product.id), "quantity": diff, "unit_price": product.price_tray}],
            placed_at=at,
        )
        repo.add(order)
        outcome["created_order_id"] = str(order.id)
        log.info("Daily quantity raised with a new order", order_id=str(order.id), unit_price=product.price_tray)
        return outcome

    to_remove = -diff
    for order in todays_orders:
        if to_remove == 0:
            break
        if not order.items_for(product.id):
            continue

        to_remove -= order.remove_units(product.id, to_remove, removed_at=at)
        repo.add(order)

        outcome["touched_order_ids"].append(str(order.id))
        if order.status == OrderStatus.CANCELLED.value:
            outcome["cancelled_order_ids"].append(str(order.id))

    if to_remove > 0:
        # Today's orders held fewer units than were counted; the remainder is reported, not resolved
        log.warning("Daily quantity could not be fully reduced", shortfall=to_remove)
    else:
        log.info(
            "Daily quantity reduced",
            touched=len(outcome["touched_order_ids"]),
            cancelled=len(outcome["cancelled_order_ids"]),
        )

    outcome["shortfall"] = to_remove
    return outcome


@preorders.command_handler(part_of=Order)
class ReconcileDailyQuantityHandler:
    @handle(ReconcileDailyQuantity)
    def reconcile_daily_quantity(self, command):
        caller = resolve_caller(command.caller)
        if not caller.is_admin:
            raise Forbidden(
                "Only admins can set a shop's daily quantity",
                details={"caller": caller.account_name},
            )
        if command.target_quantity < 0:
            raise ValidationFailed(
                "Target quantity cannot be negative",
                details={"target_quantity": command.target_quantity},
            )

        shop = resolve_shop(command.shop_name)
        product = get_product(command.product_id)

        return reconcile(shop, product, command.target_quantity, command.requested_at or datetime.now())
