from rest_framework import serializers


class PaymentReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.CharField()
    status = serializers.CharField()
    transaction_id = serializers.CharField(allow_null=True)
    payment_date = serializers.CharField()
    updated_at = serializers.CharField()


class PaymentCreateSerializer(serializers.Serializer):
    orderId = serializers.IntegerField(source="order_id", min_value=1)
    # Unknown methods are rejected by the registry as UNSUPPORTED, not here.
    method = serializers.CharField()
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )


class CheckoutSessionCreateSerializer(serializers.Serializer):
    orderId = serializers.IntegerField(source="order_id", min_value=1)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    successUrl = serializers.URLField(source="success_url")
    cancelUrl = serializers.URLField(source="cancel_url")


class CheckoutSessionSerializer(serializers.Serializer):
    sessionId = serializers.CharField(source="session_id")
    url = serializers.CharField(allow_null=True)
    publishableKey = serializers.CharField(source="publishable_key", allow_blank=True)
    payment = PaymentReadSerializer()


class CheckoutSessionStatusSerializer(serializers.Serializer):
    id = serializers.CharField()
    orderId = serializers.IntegerField(source="order_id", allow_null=True)
    paymentStatus = serializers.CharField(source="payment_status", allow_null=True)
    customerEmail = serializers.CharField(source="customer_email", allow_null=True)
    amountTotal = serializers.DecimalField(
        source="amount_total", max_digits=12, decimal_places=2, allow_null=True
    )
    currency = serializers.CharField(allow_null=True)
    paymentIntentId = serializers.CharField(source="payment_intent_id", allow_null=True)
