"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from preorders.domain import preorders


@preorders.event(part_of="Product")
class ProductAdded:
    """A new product was added to the catalog."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    name: String(required=True)
    price_portion: Float(required=True)
    price_tray: Float(required=True)
    created_at: DateTime(required=True)


@preorders.event(part_of="Product")
class ProductUpdated:
    """Product details or prices changed. Existing order lines keep their snapshot price."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    name: String(required=True)
    price_portion: Float(required=True)
    previous_price_tray: Float(required=True)
    price_tray: Float(required=True)
