import unittest
from decimal import Decimal
from unittest.mock import Mock

from apps.catalog.clients import ProductCatalogClient
from apps.common.results import LookupResult


def product_payload(**overrides):
    payload = {
        "id": 7,
        "name": "Desk Lamp",
        "price": 12.5,
        "description": "Warm light",
        "categoryId": 3,
        "category": {"id": 3, "name": "Lighting"},
        "type": 0,
        "mediaFiles": [{"url": "https://cdn/lamp.png"}, {"url": "https://cdn/lamp-2.png"}],
    }
    payload.update(overrides)
    return payload


class ProductCatalogClientTests(unittest.TestCase):
    def setUp(self):
        self.client = ProductCatalogClient("http://catalog", session=Mock())
        self.client.get_json = Mock()

    def test_builds_snapshot_from_payload(self):
        self.client.get_json.return_value = LookupResult.found(product_payload())
        result = self.client.get_product(7)
        self.assertTrue(result.is_found)
        snapshot = result.value
        self.assertEqual(snapshot.name, "Desk Lamp")
        self.assertEqual(snapshot.price, Decimal("12.5"))
        self.assertEqual(snapshot.category_id, 3)
        self.assertEqual(snapshot.category_name, "Lighting")
        self.assertEqual(snapshot.product_type, "PHYSICAL")
        self.assertEqual(snapshot.image_url, "https://cdn/lamp.png")
        self.client.get_json.assert_called_once_with("api/products/7")

    def test_category_name_is_looked_up_when_not_embedded(self):
        self.client.get_json.side_effect = [
            LookupResult.found(product_payload(category=None, type="digital")),
            LookupResult.found({"id": 3, "name": "Lighting"}),
        ]
        snapshot = self.client.get_product(7).value
        self.assertEqual(snapshot.category_name, "Lighting")
        self.assertEqual(snapshot.product_type, "DIGITAL")

    def test_category_lookup_failure_leaves_name_blank(self):
        self.client.get_json.side_effect = [
            LookupResult.found(product_payload(category=None)),
            LookupResult.failed("down"),
        ]
        result = self.client.get_product(7)
        self.assertTrue(result.is_found)
        self.assertEqual(result.value.category_name, "")

    def test_not_found_passes_through(self):
        self.client.get_json.return_value = LookupResult.not_found("404")
        self.assertTrue(self.client.get_product(99).is_not_found)

    def test_missing_price_is_an_error(self):
        self.client.get_json.return_value = LookupResult.found(product_payload(price=None))
        self.assertTrue(self.client.get_product(7).is_error)

    def test_non_object_payload_is_an_error(self):
        self.client.get_json.return_value = LookupResult.found(["not", "a", "product"])
        self.assertTrue(self.client.get_product(7).is_error)
