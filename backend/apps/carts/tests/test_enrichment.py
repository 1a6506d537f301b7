import unittest
from decimal import Decimal
from unittest.mock import Mock

from apps.carts.dtos import CartDTO, CartItemDTO
from apps.carts.enrichment import CartEnricher, is_stale
from apps.catalog.dtos import ProductSnapshot
from apps.common.results import LookupResult


def make_item(product_id=1, **overrides):
    data = dict(
        id=product_id,
        cart_id=1,
        product_id=product_id,
        quantity=1,
        price=Decimal("3.00"),
        product_name="Mug",
        description="",
        image_url="",
        category_id=2,
        category_name="Kitchen",
        product_type="PHYSICAL",
    )
    data.update(overrides)
    return CartItemDTO(**data)


SNAPSHOT = ProductSnapshot(
    id=1, name="Mug", price=Decimal("4.00"), category_id=2, category_name="Kitchen"
)


class StalenessTests(unittest.TestCase):
    def test_complete_item_is_fresh(self):
        self.assertFalse(is_stale(make_item()))

    def test_any_blank_field_is_stale(self):
        self.assertTrue(is_stale(make_item(product_name="")))
        self.assertTrue(is_stale(make_item(price=Decimal("0"))))
        self.assertTrue(is_stale(make_item(category_id=None)))
        self.assertTrue(is_stale(make_item(category_name="")))


class CartEnricherTests(unittest.TestCase):
    def setUp(self):
        self.catalog = Mock()
        self.enricher = CartEnricher(self.catalog)

    def test_fresh_items_skip_catalog(self):
        items = [make_item()]
        result = self.enricher.enrich_items(items)
        self.assertEqual(result, items)
        self.assertIsNot(result, items)
        self.catalog.get_product.assert_not_called()

    def test_stale_item_is_filled_from_catalog(self):
        self.catalog.get_product.return_value = LookupResult.found(SNAPSHOT)
        stale = make_item(price=Decimal("0"))
        result = self.enricher.enrich_items([stale])
        self.assertEqual(result[0].price, Decimal("4.00"))
        self.assertEqual(stale.price, Decimal("0"))

    def test_failed_lookup_leaves_item_untouched(self):
        self.catalog.get_product.side_effect = [
            LookupResult.failed("down"),
            RuntimeError("boom"),
        ]
        items = [make_item(1, product_name=""), make_item(2, category_id=None)]
        result = self.enricher.enrich_items(items)
        self.assertEqual(result, items)

    def test_enrich_cart_returns_new_cart(self):
        self.catalog.get_product.return_value = LookupResult.found(SNAPSHOT)
        cart = CartDTO(id=1, customer_id=5, created_at="", items=[make_item(product_name="")])
        enriched = self.enricher.enrich_cart(cart)
        self.assertEqual(enriched.items[0].product_name, "Mug")
        self.assertEqual(cart.items[0].product_name, "")
