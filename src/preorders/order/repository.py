"""Repository for the Order aggregate with the listing and daily-window queries."""

from datetime import datetime

from preorders.domain import preorders
from preorders.order.order import Order, OrderStatus


@preorders.repository(part_of=Order)
class OrderRepository:
    def find_all_newest_first(self) -> list[Order]:
        return self._dao.query.order_by("-created_at").all().items

    def find_for_shop_newest_first(self, shop_id: str) -> list[Order]:
        return self._dao.query.filter(shop_id=str(shop_id)).order_by("-created_at").all().items

    def find_open_for_shop_between(self, shop_id: str, start: datetime, end: datetime) -> list[Order]:
        """Non-cancelled orders of ``shop_id`` created in ``[start, end)``, newest first."""
        orders = (
            self._dao.query.filter(
                shop_id=str(shop_id),
                created_at__gte=start,
                created_at__lt=end,
            )
            .order_by("-created_at")
            .all()
            .items
        )
        return [order for order in orders if order.status != OrderStatus.CANCELLED.value]
