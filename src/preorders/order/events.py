"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from preorders.domain import preorders


@preorders.event(part_of="Order")
class OrderPlaced:
    """A new WAITING order was created, by a shop or by reconciliation."""

    __version__ = "v1"

    order_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    total_price: Float(required=True)
    item_count: Integer(required=True)
    placed_at: DateTime(required=True)


@preorders.event(part_of="Order")
class OrderStatusChanged:
    __version__ = "v1"

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@preorders.event(part_of="Order")
class OrderItemReduced:
    """A line kept its place on the order with fewer units."""

    __version__ = "v1"

    order_id: Identifier(required=True)
    item_id: Identifier(required=True)
    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@preorders.event(part_of="Order")
class OrderItemRemoved:
    """A line was dropped from the order entirely."""

    __version__ = "v1"

    order_id: Identifier(required=True)
    item_id: Identifier(required=True)
    product_id: Identifier(required=True)
    removed_quantity: Integer(required=True)


@preorders.event(part_of="Order")
class OrderEmptied:
    """The last line was removed, so the order was cancelled with a zero total."""

    __version__ = "v1"

    order_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    cancelled_at: DateTime(required=True)
