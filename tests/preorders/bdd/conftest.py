"""Shared BDD fixtures and step definitions for the Pre-orders domain."""

from datetime import datetime, timedelta

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from preorders.exceptions import PreordersError
from preorders.order import services
from preorders.order.order import Order
from preorders.product.management import AddProduct
from preorders.shop.registration import RegisterShop
from preorders.shop.shop import Role, Shop

BAKE_DAY = datetime(2026, 3, 10)


def at(clock):
    hour, minute = (int(part) for part in clock.split(":"))
    return BAKE_DAY.replace(hour=hour, minute=minute)


@pytest.fixture()
def bake_time():
    """Turns an "HH:MM" clock reading into a time on the bake day."""
    return at


@pytest.fixture()
def error():
    """Container for captured pre-orders errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def placed():
    """Order ids by the time they were placed."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an admin account "{account_name}"'))
def admin_account(account_name):
    current_domain.process(
        RegisterShop(account_name=account_name, shop_name="Bakery HQ", role=Role.ADMIN.value),
        asynchronous=False,
    )


@given(parsers.cfparse('a shop "{account_name}" displayed as "{shop_name}"'), target_fixture="shop")
def shop_account(account_name, shop_name):
    shop_id = current_domain.process(
        RegisterShop(account_name=account_name, shop_name=shop_name),
        asynchronous=False,
    )
    return current_domain.repository_for(Shop).get(shop_id)


@given(parsers.cfparse('a product "{name}" priced {price:g} per tray'))
def catalog_product(products, name, price):
    products[name] = current_domain.process(
        AddProduct(name=name, price_portion=price / 20, price_tray=price),
        asynchronous=False,
    )


@given(parsers.cfparse('"{account_name}" ordered {quantity:d} "{product_name}" at {clock}'))
def existing_order(products, placed, account_name, quantity, product_name, clock):
    placed[clock] = services.place_order(
        account_name,
        [{"product_id": products[product_name], "quantity": quantity}],
        requested_at=at(clock),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request is refused as "{kind}"'))
def request_refused(error, kind):
    assert isinstance(error["exc"], PreordersError)
    assert error["exc"].__class__.__name__ == kind


@then(parsers.cfparse('the shop\'s daily quantity of "{product_name}" is {quantity:d}'))
def daily_quantity_is(shop, products, product_name, quantity):
    orders = current_domain.repository_for(Order).find_open_for_shop_between(
        shop.id, BAKE_DAY, BAKE_DAY + timedelta(days=1)
    )
    assert sum(order.quantity_of(products[product_name]) for order in orders) == quantity

