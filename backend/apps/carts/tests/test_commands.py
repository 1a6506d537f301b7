import unittest

from apps.carts.commands import CartItemCommand


class CartCommandTests(unittest.TestCase):
    def test_for_add_coerces_non_positive(self):
        self.assertEqual(CartItemCommand(5, -3).for_add().quantity, 1)
        self.assertEqual(CartItemCommand(5, 0).for_add().quantity, 1)

    def test_for_add_keeps_positive_quantity(self):
        self.assertEqual(CartItemCommand(5, 4).for_add(), CartItemCommand(5, 4))
