"""Application tests for catalog management."""

import pytest
from protean import current_domain

from preorders.exceptions import NotFound
from preorders.product.lookup import get_product, list_products
from preorders.product.management import AddProduct, UpdateProduct


class TestAddProduct:
    def test_add_returns_id(self):
        product_id = current_domain.process(
            AddProduct(name="Baklava", description="Pistachio", price_portion=45.0, price_tray=900.0),
            asynchronous=False,
        )
        product = get_product(product_id)
        assert product.name == "Baklava"
        assert product.description == "Pistachio"


class TestUpdateProduct:
    def test_partial_update(self, baklava):
        current_domain.process(UpdateProduct(product_id=baklava, price_tray=950.0), asynchronous=False)

        product = get_product(baklava)
        assert product.price_tray == 950.0
        assert product.price_portion == 45.0
        assert product.name == "Baklava"

    def test_unknown_product(self):
        with pytest.raises(NotFound, match="Product not found: missing"):
            current_domain.process(UpdateProduct(product_id="missing", price_tray=1.0), asynchronous=False)


class TestLookup:
    def test_list_is_sorted_by_name(self, make_product):
        make_product("Tulumba", price_tray=300.0)
        make_product("Baklava", price_tray=900.0)

        assert [product.name for product in list_products()] == ["Baklava", "Tulumba"]

    def test_get_unknown(self):
        with pytest.raises(NotFound):
            get_product("missing")
