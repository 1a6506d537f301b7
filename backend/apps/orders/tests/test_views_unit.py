import types
import unittest
from decimal import Decimal
from unittest.mock import Mock, patch

from rest_framework.test import APIRequestFactory, force_authenticate

from apps.api.exceptions import NotFoundError, UpstreamError
from apps.orders.checkout import CheckoutResult
from apps.orders.dtos import OrderDTO, OrderItemDTO, OrderPageDTO
from apps.orders.views import (
    CalculateTotalView,
    CheckoutView,
    CustomerOrdersView,
    OrderCancelView,
    OrderDetailView,
    OrderItemDetailView,
    OrderListView,
    OrderStatusView,
)


def make_order_dto(order_id=1, customer_id=10, status="PENDING"):
    return OrderDTO(
        id=order_id,
        customer_id=customer_id,
        order_date="2025-01-01T00:00:00+00:00",
        updated_date="2025-01-01T00:00:00+00:00",
        status=status,
        total_amount=Decimal("25.00"),
        customer_name=None,
        customer_email=None,
        shipping_address_id=None,
        shipping_address=None,
        items=[
            OrderItemDTO(
                id=1,
                product_id=1,
                quantity=2,
                price=Decimal("10.00"),
                product_name="Widget",
                image_url="",
                category_id=None,
                category_name="",
                product_type="",
            )
        ],
    )


ITEM_PAYLOAD = {"productId": 1, "quantity": 2, "price": "10.00"}


class OrderViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def dispatch(self, request, view_cls, **kwargs):
        view = view_cls.as_view()
        return view(request, **kwargs)

    @staticmethod
    def _user(user_id, *, staff=False):
        return types.SimpleNamespace(
            id=user_id, is_authenticated=True, is_staff=staff, is_superuser=False
        )

    def _call(self, view_cls, method, path, user, data=None, **kwargs):
        factory_method = getattr(self.factory, method)
        if data is None:
            request = factory_method(path)
        else:
            request = factory_method(path, data, format="json")
        force_authenticate(request, user=user)
        return self.dispatch(request, view_cls, **kwargs)

    def test_list_all_orders_is_privileged(self):
        service_mock = Mock()
        service_mock.list_orders.return_value = [make_order_dto()]
        with patch.object(OrderListView, "service", service_mock):
            denied = self._call(OrderListView, "get", "/api/orders/", self._user(10))
            allowed = self._call(OrderListView, "get", "/api/orders/", self._user(1, staff=True))
        self.assertEqual(denied.status_code, 403)
        self.assertEqual(allowed.status_code, 200)
        service_mock.list_orders.assert_called_once_with()

    def test_create_order_for_self(self):
        service_mock = Mock()
        service_mock.create_order.return_value = make_order_dto()
        payload = {"customerId": 10, "items": [ITEM_PAYLOAD]}
        with patch.object(OrderListView, "service", service_mock):
            response = self._call(OrderListView, "post", "/api/orders/", self._user(10), payload)
        self.assertEqual(response.status_code, 201)
        command = service_mock.create_order.call_args[0][0]
        self.assertEqual(command.customer_id, 10)
        self.assertEqual(command.items[0].price, Decimal("10.00"))

    def test_create_order_for_someone_else_is_forbidden(self):
        service_mock = Mock()
        payload = {"customerId": 11, "items": [ITEM_PAYLOAD]}
        with patch.object(OrderListView, "service", service_mock):
            response = self._call(OrderListView, "post", "/api/orders/", self._user(10), payload)
        self.assertEqual(response.status_code, 403)
        service_mock.create_order.assert_not_called()

    def test_create_order_rejects_empty_items(self):
        service_mock = Mock()
        payload = {"customerId": 10, "items": []}
        with patch.object(OrderListView, "service", service_mock):
            response = self._call(OrderListView, "post", "/api/orders/", self._user(10), payload)
        self.assertEqual(response.status_code, 400)
        service_mock.create_order.assert_not_called()

    def test_checkout_returns_order_and_payment_methods(self):
        service_mock = Mock()
        service_mock.checkout_from_cart.return_value = CheckoutResult(
            order=make_order_dto(), payment_methods=["CREDIT_CARD"]
        )
        with patch.object(CheckoutView, "service", service_mock):
            response = self._call(
                CheckoutView,
                "post",
                "/api/orders/checkout/10/",
                self._user(10),
                {"shippingAddressId": 4},
                customer_id=10,
            )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["paymentMethods"], ["CREDIT_CARD"])
        self.assertEqual(response.data["order"]["total_amount"], "25.00")
        service_mock.checkout_from_cart.assert_called_once_with(
            10, shipping_address_id=4, shipping_address=None
        )

    def test_checkout_upstream_failure_is_502(self):
        service_mock = Mock()
        service_mock.checkout_from_cart.side_effect = UpstreamError("Product catalog unavailable")
        with patch.object(CheckoutView, "service", service_mock):
            response = self._call(
                CheckoutView, "post", "/api/orders/checkout/10/", self._user(10), {}, customer_id=10
            )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data["error"]["code"], "UPSTREAM_ERROR")

    def test_calculate_total(self):
        service_mock = Mock()
        service_mock.calculate_order_total.return_value = Decimal("25.00")
        payload = {"items": [ITEM_PAYLOAD, {"productId": 2, "quantity": 1, "price": "5.00"}]}
        with patch.object(CalculateTotalView, "service", service_mock):
            response = self._call(
                CalculateTotalView, "post", "/api/orders/calculate-total/", self._user(10), payload
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total"], "25.00")
        items = service_mock.calculate_order_total.call_args[0][0]
        self.assertEqual(len(items), 2)

    def test_order_detail_checks_owner(self):
        service_mock = Mock()
        service_mock.get_order_owner.return_value = 11
        with patch.object(OrderDetailView, "service", service_mock):
            response = self._call(OrderDetailView, "get", "/api/orders/1/", self._user(10), order_id=1)
        self.assertEqual(response.status_code, 403)
        service_mock.get_order.assert_not_called()

    def test_order_detail_missing(self):
        service_mock = Mock()
        service_mock.get_order_owner.side_effect = NotFoundError("Order not found")
        with patch.object(OrderDetailView, "service", service_mock):
            response = self._call(OrderDetailView, "get", "/api/orders/9/", self._user(10), order_id=9)
        self.assertEqual(response.status_code, 404)

    def test_customer_orders_passes_paging(self):
        service_mock = Mock()
        service_mock.list_orders_for_customer.return_value = OrderPageDTO(
            count=1, page=2, page_size=5, results=[make_order_dto()]
        )
        with patch.object(CustomerOrdersView, "service", service_mock):
            request = self.factory.get("/api/orders/customer/10/", {"page": 2, "pageSize": 5})
            force_authenticate(request, user=self._user(10))
            response = self.dispatch(request, CustomerOrdersView, customer_id=10)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        service_mock.list_orders_for_customer.assert_called_once_with(10, page=2, page_size=5)

    def test_status_change_requires_privilege(self):
        service_mock = Mock()
        service_mock.update_status.return_value = make_order_dto(status="SHIPPED")
        with patch.object(OrderStatusView, "service", service_mock):
            denied = self._call(
                OrderStatusView, "put", "/api/orders/1/status/", self._user(10), {"status": "SHIPPED"}, order_id=1
            )
            allowed = self._call(
                OrderStatusView,
                "put",
                "/api/orders/1/status/",
                self._user(1, staff=True),
                {"status": "SHIPPED"},
                order_id=1,
            )
        self.assertEqual(denied.status_code, 403)
        self.assertEqual(allowed.status_code, 200)
        self.assertEqual(allowed.data["status"], "SHIPPED")
        service_mock.update_status.assert_called_once_with(1, "SHIPPED")

    def test_status_change_rejects_unknown_status(self):
        service_mock = Mock()
        with patch.object(OrderStatusView, "service", service_mock):
            response = self._call(
                OrderStatusView,
                "put",
                "/api/orders/1/status/",
                self._user(1, staff=True),
                {"status": "LOST"},
                order_id=1,
            )
        self.assertEqual(response.status_code, 400)
        service_mock.update_status.assert_not_called()

    def test_owner_can_cancel(self):
        service_mock = Mock()
        service_mock.get_order_owner.return_value = 10
        service_mock.cancel_order.return_value = make_order_dto(status="CANCELED")
        with patch.object(OrderCancelView, "service", service_mock):
            response = self._call(OrderCancelView, "put", "/api/orders/1/cancel/", self._user(10), order_id=1)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "CANCELED")

    def test_remove_item_returns_order(self):
        service_mock = Mock()
        service_mock.get_order_owner.return_value = 10
        service_mock.remove_order_item.return_value = make_order_dto()
        with patch.object(OrderItemDetailView, "service", service_mock):
            response = self._call(
                OrderItemDetailView,
                "delete",
                "/api/orders/1/items/3/",
                self._user(10),
                order_id=1,
                item_id=3,
            )
        self.assertEqual(response.status_code, 200)
        service_mock.remove_order_item.assert_called_once_with(1, 3)
