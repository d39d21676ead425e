"""Admin-only order status transitions."""

from datetime import datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from preorders.domain import preorders
from preorders.exceptions import Forbidden, NotFound, ValidationFailed
from preorders.order.order import Order, OrderStatus
from preorders.shop.directory import resolve_caller
from preorders.utils.logging import get_logger

logger = get_logger(__name__)


@preorders.command(part_of="Order")
class ChangeOrderStatus:
    caller: String(required=True, max_length=100)
    order_id: Identifier(required=True)
    status: String(required=True, max_length=20)
    requested_at: DateTime()


@preorders.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        caller = resolve_caller(command.caller)
        if not caller.is_admin:
            raise Forbidden(
                "Only admins can change order status",
                details={"caller": caller.account_name, "order_id": str(command.order_id)},
            )

        if command.status not in {s.value for s in OrderStatus}:
            raise ValidationFailed(
                f"Unknown order status: {command.status}",
                details={"status": command.status, "allowed": [s.value for s in OrderStatus]},
            )

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError as exc:
            raise NotFound(f"Order not found: {command.order_id}", details={"order_id": str(command.order_id)}) from exc

        previous = order.status
        order.change_status(command.status, changed_at=command.requested_at or datetime.now())
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
            changed_by=caller.account_name,
        )
        return str(order.id)
