"""Pydantic request/response schemas for the Pre-orders API.

These are external contracts, kept separate from the internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str
    quantity: int


class PlaceOrderRequest(BaseModel):
    items: list[CartLineSchema]
    shop_name: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "a1b2c3", "quantity": 3},
                        {"product_id": "d4e5f6", "quantity": 1},
                    ],
                    "shop_name": None,
                }
            ]
        }
    }


class OrderItemView(BaseModel):
    item_id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float
    sub_total: float


class OrderView(BaseModel):
    order_id: str
    shop_id: str
    shop_name: str | None = None
    account_name: str | None = None
    shop_address: str | None = None
    shop_phone: str | None = None
    status: str
    total_price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemView] = []


class ChangeStatusRequest(BaseModel):
    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "PREPARING"}]}}


class DailyQuantityRequest(BaseModel):
    shop_name: str
    product_id: str
    target_quantity: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shop_name": "Lale Pastanesi",
                    "product_id": "a1b2c3",
                    "target_quantity": 12,
                }
            ]
        }
    }


class DailyQuantityResponse(BaseModel):
    shop_id: str
    product_id: str
    previous_total: int
    target_quantity: int
    created_order_id: str | None = None
    touched_order_ids: list[str] = []
    cancelled_order_ids: list[str] = []
    shortfall: int = 0


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str
    description: str | None = None
    price_portion: float = Field(ge=0)
    price_tray: float = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Baklava",
                    "description": "Pistachio baklava",
                    "price_portion": 45.0,
                    "price_tray": 900.0,
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price_portion: float | None = Field(default=None, ge=0)
    price_tray: float | None = Field(default=None, ge=0)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductView(BaseModel):
    product_id: str
    name: str
    description: str | None = None
    price_portion: float
    price_tray: float


# ---------------------------------------------------------------------------
# Shops
# ---------------------------------------------------------------------------
class RegisterShopRequest(BaseModel):
    account_name: str
    shop_name: str
    phone: str | None = None
    address: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_name": "lale",
                    "shop_name": "Lale Pastanesi",
                    "phone": "+90 212 555 0101",
                    "address": "Istiklal Cd. 12, Istanbul",
                }
            ]
        }
    }


class ShopIdResponse(BaseModel):
    shop_id: str
