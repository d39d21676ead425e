"""FastAPI routes for the Pre-orders domain: orders, products, shops.

The authenticated account name arrives in the ``X-Account-Name`` header.
"""

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from preorders.api.schemas import (
    AddProductRequest,
    ChangeStatusRequest,
    DailyQuantityRequest,
    DailyQuantityResponse,
    OrderView,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductView,
    RegisterShopRequest,
    ShopIdResponse,
    StatusResponse,
    UpdateProductRequest,
)
from preorders.exceptions import Forbidden
from preorders.order import services
from preorders.product.lookup import get_product, list_products
from preorders.product.management import AddProduct, UpdateProduct
from preorders.shop.directory import resolve_caller
from preorders.shop.registration import RegisterShop
from preorders.shop.shop import Role


def _product_view(product) -> ProductView:
    return ProductView(
        product_id=str(product.id),
        name=product.name,
        description=product.description,
        price_portion=product.price_portion,
        price_tray=product.price_tray,
    )


def _require_admin(account_name: str, action: str):
    caller = resolve_caller(account_name)
    if not caller.is_admin:
        raise Forbidden(f"Only admins can {action}", details={"caller": caller.account_name})
    return caller


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderView)
async def place_order(body: PlaceOrderRequest, x_account_name: str = Header()) -> OrderView:
    order_id = services.place_order(
        caller=x_account_name,
        items=[line.model_dump() for line in body.items],
        shop_name=body.shop_name,
    )
    return OrderView(**services.order_detail(order_id))


@order_router.get("", response_model=list[OrderView])
async def list_orders(x_account_name: str = Header()) -> list[OrderView]:
    return [OrderView(**view) for view in services.list_orders(x_account_name)]


@order_router.put("/daily-quantity", response_model=DailyQuantityResponse)
async def set_daily_quantity(body: DailyQuantityRequest, x_account_name: str = Header()) -> DailyQuantityResponse:
    outcome = services.reconcile_daily_quantity(
        caller=x_account_name,
        shop_name=body.shop_name,
        product_id=body.product_id,
        target_quantity=body.target_quantity,
    )
    return DailyQuantityResponse(**outcome)


@order_router.put("/{order_id}/status", response_model=OrderView)
async def change_order_status(order_id: str, body: ChangeStatusRequest, x_account_name: str = Header()) -> OrderView:
    services.change_order_status(caller=x_account_name, order_id=order_id, status=body.status)
    return OrderView(**services.order_detail(order_id))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest, x_account_name: str = Header()) -> ProductIdResponse:
    _require_admin(x_account_name, "add products")
    command = AddProduct(
        name=body.name,
        description=body.description,
        price_portion=body.price_portion,
        price_tray=body.price_tray,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=list[ProductView])
async def get_products() -> list[ProductView]:
    return [_product_view(product) for product in list_products()]


@product_router.get("/{product_id}", response_model=ProductView)
async def get_product_by_id(product_id: str) -> ProductView:
    return _product_view(get_product(product_id))


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest, x_account_name: str = Header()) -> StatusResponse:
    _require_admin(x_account_name, "update products")
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price_portion=body.price_portion,
        price_tray=body.price_tray,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Shop Router
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shops", tags=["shops"])


@shop_router.post("", status_code=201, response_model=ShopIdResponse)
async def register_shop(body: RegisterShopRequest) -> ShopIdResponse:
    # Self-registration only ever creates shop accounts; admins come from `manage.py create-admin`
    command = RegisterShop(
        account_name=body.account_name,
        shop_name=body.shop_name,
        role=Role.SHOP.value,
        phone=body.phone,
        address=body.address,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShopIdResponse(shop_id=result)
