import unittest
from unittest.mock import Mock

from apps.common.results import LookupResult
from apps.users.clients import UserDirectoryClient
from apps.users.dtos import UserSnapshot


class FakeCache:
    def __init__(self):
        self.store = {}
        self.timeouts = {}

    def get(self, key, default=None):
        return self.store.get(key, default)

    def set(self, key, value, timeout=None):
        self.store[key] = value
        self.timeouts[key] = timeout


class UserDirectoryClientTests(unittest.TestCase):
    def setUp(self):
        self.cache = FakeCache()
        self.client = UserDirectoryClient(
            "http://users", cache_backend=self.cache, cache_ttl=60, session=Mock()
        )
        self.client.get_json = Mock()

    def test_fetches_and_caches_snapshot(self):
        self.client.get_json.return_value = LookupResult.found(
            {"id": 4, "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}
        )
        result = self.client.get_user(4)
        self.assertEqual(result.value, UserSnapshot(id=4, name="Ada Lovelace", email="ada@example.com"))
        self.assertEqual(self.cache.store["users:snapshot:4"], result.value)
        self.assertEqual(self.cache.timeouts["users:snapshot:4"], 60)

    def test_cache_hit_skips_network(self):
        self.cache.store["users:snapshot:4"] = UserSnapshot(id=4, name="cached")
        result = self.client.get_user(4)
        self.assertEqual(result.value.name, "cached")
        self.client.get_json.assert_not_called()

    def test_username_preferred_over_first_last(self):
        self.client.get_json.return_value = LookupResult.found(
            {"username": "ada", "firstName": "Ada"}
        )
        snapshot = self.client.get_user(4).value
        self.assertEqual(snapshot.name, "ada")
        self.assertIsNone(snapshot.email)

    def test_failures_are_not_cached(self):
        self.client.get_json.return_value = LookupResult.failed("timeout")
        self.assertTrue(self.client.get_user(4).is_error)
        self.assertEqual(self.cache.store, {})
