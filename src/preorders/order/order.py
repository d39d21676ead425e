"""Order aggregate: a shop's pre-order of trays, with OrderItem lines.

State Machine (5 states):
    WAITING → PREPARING → ON_WAY → DELIVERED
    WAITING, PREPARING → CANCELLED

Totals are derived. ``OrderItem.sub_total`` and ``Order.total_price`` are only
written by ``_recalculate_totals`` and are guarded by post-invariants, so an
order can never be persisted with totals that disagree with its lines.
"""

import math
from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from preorders.domain import preorders
from preorders.exceptions import InvalidTransition
from preorders.order.events import (
    OrderEmptied,
    OrderItemReduced,
    OrderItemRemoved,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    WAITING = "WAITING"
    PREPARING = "PREPARING"
    ON_WAY = "ON_WAY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.WAITING: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.ON_WAY, OrderStatus.CANCELLED},
    OrderStatus.ON_WAY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def allowed_transitions(status: OrderStatus) -> set[OrderStatus]:
    return set(_VALID_TRANSITIONS.get(status, set()))


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@preorders.entity(part_of="Order")
class OrderItem:
    """One product line of an order.

    ``unit_price`` is the product's tray price at the moment the line was
    created. It is never re-read from the catalog afterwards.
    """

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True, min_value=0.0)
    sub_total: Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@preorders.aggregate
class Order:
    shop_id: Identifier(required=True)
    status: String(choices=OrderStatus, default=OrderStatus.WAITING.value)
    items: HasMany(OrderItem)
    total_price: Float(default=0.0)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def lines_must_be_consistently_priced(self):
        for item in self.items:
            if item.quantity is None or item.quantity < 1:
                raise ValidationError({"items": ["Item quantity must be at least 1"]})
            if not math.isclose(item.sub_total, item.quantity * item.unit_price, abs_tol=1e-6):
                raise ValidationError({"items": ["Item subtotal must equal quantity times unit price"]})

    @invariant.post
    def total_must_match_lines(self):
        expected = sum(item.sub_total for item in self.items)
        if not math.isclose(self.total_price or 0.0, expected, abs_tol=1e-6):
            raise ValidationError({"total_price": ["Order total must equal the sum of its item subtotals"]})

    @invariant.post
    def empty_order_must_be_cancelled(self):
        if not self.items and self.status != OrderStatus.CANCELLED.value:
            raise ValidationError({"items": ["An order without items must be cancelled"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, shop_id, lines, placed_at=None):
        """Create a WAITING order for ``shop_id``.

        Args:
            shop_id: The shop the order is attributed to.
            lines: List of dicts with product_id, quantity, unit_price.
            placed_at: Creation timestamp; defaults to the local clock.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = placed_at or datetime.now()
        items = [
            OrderItem(
                product_id=str(line["product_id"]),
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                sub_total=line["quantity"] * line["unit_price"],
            )
            for line in lines
        ]

        order = cls(
            shop_id=str(shop_id),
            status=OrderStatus.WAITING.value,
            items=items,
            total_price=sum(item.sub_total for item in items),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                shop_id=str(shop_id),
                total_price=order.total_price,
                item_count=len(items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def items_for(self, product_id):
        return [item for item in self.items if str(item.product_id) == str(product_id)]

    def quantity_of(self, product_id) -> int:
        return sum(item.quantity for item in self.items_for(product_id))

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def change_status(self, new_status, changed_at=None):
        """Move to ``new_status`` if the transition table allows it."""
        current = OrderStatus(self.status)
        target = OrderStatus(new_status)
        if target not in allowed_transitions(current):
            raise InvalidTransition(current.value, target.value)

        now = changed_at or datetime.now()
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Quantity removal
    # -------------------------------------------------------------------
    def remove_units(self, product_id, units, removed_at=None) -> int:
        """Take up to ``units`` of ``product_id`` off this order.

        Matching lines are consumed in order: a line larger than what is left to
        remove is shrunk, otherwise it is dropped entirely. An order left with no
        lines is cancelled with a zero total. Returns the number of units removed.
        """
        if units <= 0:
            return 0

        now = removed_at or datetime.now()
        remaining = units
        events = []

        with atomic_change(self):
            for item in self.items_for(product_id):
                if remaining == 0:
                    break
                if item.quantity > remaining:
                    previous_quantity = item.quantity
                    item.quantity = previous_quantity - remaining
                    item.sub_total = item.quantity * item.unit_price
                    remaining = 0
                    events.append(
                        OrderItemReduced(
                            order_id=str(self.id),
                            item_id=str(item.id),
                            product_id=str(product_id),
                            previous_quantity=previous_quantity,
                            new_quantity=item.quantity,
                        )
                    )
                else:
                    remaining -= item.quantity
                    self.remove_items(item)
                    events.append(
                        OrderItemRemoved(
                            order_id=str(self.id),
                            item_id=str(item.id),
                            product_id=str(product_id),
                            removed_quantity=item.quantity,
                        )
                    )

            self._recalculate_totals()
            if not self.items:
                self.status = OrderStatus.CANCELLED.value
                events.append(
                    OrderEmptied(
                        order_id=str(self.id),
                        shop_id=str(self.shop_id),
                        cancelled_at=now,
                    )
                )
            self.updated_at = now

        for event in events:
            self.raise_(event)

        return units - remaining

    def _recalculate_totals(self):
        """Recompute line subtotals and the order total from quantities and snapshot prices."""
        for item in self.items:
            item.sub_total = item.quantity * item.unit_price
        self.total_price = sum(item.sub_total for item in self.items)
