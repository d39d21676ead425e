import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain

from preorders.product.management import AddProduct
from preorders.shop.registration import RegisterShop
from preorders.shop.shop import Role, Shop


@pytest.fixture(scope="session")
def preorders_bed():
    from preorders.domain import preorders

    bed = DomainFixture(preorders)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(preorders_bed):
    with preorders_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


def register_shop(account_name, shop_name, role=Role.SHOP.value, **extra):
    shop_id = current_domain.process(
        RegisterShop(account_name=account_name, shop_name=shop_name, role=role, **extra),
        asynchronous=False,
    )
    return current_domain.repository_for(Shop).get(shop_id)


def add_product(name="Baklava", price_tray=900.0, price_portion=45.0):
    return current_domain.process(
        AddProduct(name=name, price_portion=price_portion, price_tray=price_tray),
        asynchronous=False,
    )


@pytest.fixture()
def admin():
    return register_shop("admin", "Bakery HQ", role=Role.ADMIN.value)


@pytest.fixture()
def shop():
    return register_shop(
        "lale",
        "Lale Pastanesi",
        phone="+90 212 555 0101",
        address="Istiklal Cd. 12, Istanbul",
    )


@pytest.fixture()
def other_shop():
    return register_shop("gul", "Gul Firini")


@pytest.fixture()
def baklava():
    return add_product("Baklava", price_tray=900.0)


@pytest.fixture()
def borek():
    return add_product("Su Boregi", price_tray=400.0, price_portion=20.0)


@pytest.fixture()
def make_shop():
    return register_shop


@pytest.fixture()
def make_product():
    return add_product
