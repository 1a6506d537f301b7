from rest_framework import serializers

from .models import OrderStatus


class OrderItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    product_name = serializers.CharField(allow_blank=True)
    image_url = serializers.CharField(allow_blank=True)
    category_id = serializers.IntegerField(allow_null=True)
    category_name = serializers.CharField(allow_blank=True)
    product_type = serializers.CharField(allow_blank=True)


class OrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    customer_id = serializers.IntegerField()
    order_date = serializers.CharField()
    updated_date = serializers.CharField()
    status = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    customer_name = serializers.CharField(allow_null=True)
    customer_email = serializers.CharField(allow_null=True)
    shipping_address_id = serializers.IntegerField(allow_null=True)
    shipping_address = serializers.JSONField(allow_null=True)
    items = OrderItemReadSerializer(many=True)


class OrderPageSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    results = OrderReadSerializer(many=True)


class CheckoutResponseSerializer(serializers.Serializer):
    order = OrderReadSerializer()
    paymentMethods = serializers.ListField(child=serializers.CharField(), source="payment_methods")


class OrderItemWriteSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id", min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    productName = serializers.CharField(source="product_name", required=False, allow_blank=True)
    imageUrl = serializers.CharField(source="image_url", required=False, allow_blank=True)
    categoryId = serializers.IntegerField(source="category_id", required=False, allow_null=True)
    categoryName = serializers.CharField(source="category_name", required=False, allow_blank=True)
    productType = serializers.CharField(source="product_type", required=False, allow_blank=True)


class OrderCreateSerializer(serializers.Serializer):
    customerId = serializers.IntegerField(source="customer_id")
    items = OrderItemWriteSerializer(many=True, allow_empty=False)
    customerName = serializers.CharField(source="customer_name", required=False, allow_null=True)
    customerEmail = serializers.CharField(source="customer_email", required=False, allow_null=True)
    shippingAddressId = serializers.IntegerField(
        source="shipping_address_id", required=False, allow_null=True
    )
    shippingAddress = serializers.JSONField(source="shipping_address", required=False, allow_null=True)


class CalculateTotalSerializer(serializers.Serializer):
    items = OrderItemWriteSerializer(many=True)


class CalculateTotalResponseSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class CheckoutRequestSerializer(serializers.Serializer):
    shippingAddressId = serializers.IntegerField(
        source="shipping_address_id", required=False, allow_null=True
    )
    shippingAddress = serializers.JSONField(source="shipping_address", required=False, allow_null=True)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class CustomerOrdersQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    pageSize = serializers.IntegerField(
        source="page_size", required=False, default=20, min_value=1, max_value=100
    )
