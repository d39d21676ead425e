"""Product aggregate, one entry of the bakery's tray/portion catalog."""

from datetime import datetime

from protean.fields import DateTime, Float, String, Text

from preorders.domain import preorders


@preorders.aggregate
class Product:
    """A baked good sold by the tray to shops and by the portion at retail.

    Prices are live: orders snapshot ``price_tray`` when a line is created, so
    changing it here never rewrites existing orders.
    """

    name: String(required=True, max_length=255)
    description: Text()
    price_portion: Float(required=True, min_value=0.0)
    price_tray: Float(required=True, min_value=0.0)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def add(cls, name, price_portion, price_tray, description=None):
        from preorders.product.events import ProductAdded

        now = datetime.now()
        product = cls(
            name=name,
            description=description,
            price_portion=price_portion,
            price_tray=price_tray,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                price_portion=price_portion,
                price_tray=price_tray,
                created_at=now,
            )
        )
        return product

    def update(self, name=None, description=None, price_portion=None, price_tray=None):
        """Partial update; ``None`` leaves a field unchanged."""
        from preorders.product.events import ProductUpdated

        previous_price_tray = self.price_tray

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if price_portion is not None:
            self.price_portion = price_portion
        if price_tray is not None:
            self.price_tray = price_tray

        self.updated_at = datetime.now()

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                price_portion=self.price_portion,
                previous_price_tray=previous_price_tray,
                price_tray=self.price_tray,
            )
        )
