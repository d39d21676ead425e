"""Entry points used by the API and tests to drive the order commands.

Each function stamps the request time, works out which (shop, day) the command
touches, and processes it synchronously under that key's lock.
"""

import json
from datetime import datetime

from protean.utils.globals import current_domain

from preorders.order.creation import PlaceOrder
from preorders.order.listing import list_orders as _list_orders
from preorders.order.locking import process_serialized
from preorders.order.order import Order
from preorders.order.reconciliation import ReconcileDailyQuantity
from preorders.order.status import ChangeOrderStatus
from preorders.order.views import order_view, order_views
from preorders.shop.directory import find_by_account_name, find_by_display_name


def _shop_key(name: str | None) -> str:
    """Stable lock key for a shop name, falling back to the raw name when it is unknown."""
    if not name:
        return ""
    shop = find_by_display_name(name) or find_by_account_name(name)
    return str(shop.id) if shop else name


def _acting_shop_key(caller: str, shop_name: str | None) -> str:
    """Lock key of the shop an order will be attributed to.

    Follows the same resolution as the order handler: the caller is looked up by
    account name only, and keeps its own key whenever it names itself.
    """
    account = find_by_account_name(caller)
    if account is None:
        return caller
    if not shop_name or account.answers_to(shop_name):
        return str(account.id)
    return _shop_key(shop_name)


def place_order(caller: str, items: list[dict], shop_name: str | None = None, requested_at: datetime | None = None) -> str:
    requested_at = requested_at or datetime.now()
    command = PlaceOrder(
        caller=caller,
        items=json.dumps(items),
        shop_name=shop_name,
        requested_at=requested_at,
    )
    return process_serialized(command, _acting_shop_key(caller, shop_name), requested_at.date())


def list_orders(caller: str) -> list[dict]:
    return order_views(_list_orders(caller))


def change_order_status(caller: str, order_id: str, status: str, requested_at: datetime | None = None) -> str:
    command = ChangeOrderStatus(
        caller=caller,
        order_id=order_id,
        status=status,
        requested_at=requested_at or datetime.now(),
    )
    return current_domain.process(command, asynchronous=False)


def reconcile_daily_quantity(
    caller: str,
    shop_name: str,
    product_id: str,
    target_quantity: int,
    requested_at: datetime | None = None,
) -> dict:
    requested_at = requested_at or datetime.now()
    command = ReconcileDailyQuantity(
        caller=caller,
        shop_name=shop_name,
        product_id=product_id,
        target_quantity=target_quantity,
        requested_at=requested_at,
    )
    return process_serialized(command, _shop_key(shop_name), requested_at.date())


def order_detail(order_id: str) -> dict:
    return order_view(current_domain.repository_for(Order).get(str(order_id)))
