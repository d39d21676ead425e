"""Pre-orders API package."""

from preorders.api.errors import register_error_handlers
from preorders.api.routes import order_router, product_router, shop_router

__all__ = ["order_router", "product_router", "shop_router", "register_error_handlers"]
