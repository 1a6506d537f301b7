from rest_framework import serializers


class CartItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    cart_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    product_name = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    image_url = serializers.CharField(allow_blank=True)
    category_id = serializers.IntegerField(allow_null=True)
    category_name = serializers.CharField(allow_blank=True)
    product_type = serializers.CharField(allow_blank=True)
    added_at = serializers.CharField(allow_null=True, required=False)


class CartReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    customer_id = serializers.IntegerField()
    created_at = serializers.CharField()
    items = CartItemReadSerializer(many=True)


class CartItemWriteSerializer(serializers.Serializer):
    # Quantity is not range-checked: add coerces <= 0 to 1, update removes the line.
    productId = serializers.IntegerField(source="product_id", min_value=1)
    quantity = serializers.IntegerField(required=False, default=1)


class CartMergeSerializer(serializers.Serializer):
    fromCustomerId = serializers.IntegerField(source="from_customer_id")
    toCustomerId = serializers.IntegerField(source="to_customer_id")
