from django.db import models
from django.utils import timezone


class PaymentMethod(models.TextChoices):
    STRIPE = "STRIPE", "Stripe"
    CREDIT_CARD = "CREDIT_CARD", "Credit card"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY", "Cash on delivery"


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    REQUIRES_CONFIRMATION = "REQUIRES_CONFIRMATION", "Requires confirmation"
    # Reserved; no flow assigns these yet.
    PROCESSING = "PROCESSING", "Processing"
    COMPLETED = "COMPLETED", "Completed"
    FAILED = "FAILED", "Failed"
    REFUNDED = "REFUNDED", "Refunded"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED", "Partially refunded"


# Methods settled offline; their payments start PENDING rather than awaiting confirmation.
OFFLINE_METHODS = frozenset({PaymentMethod.CASH_ON_DELIVERY.value})

# Confirming a payment in one of these states is refused.
CLOSED_STATUSES = frozenset(
    {
        PaymentStatus.REFUNDED.value,
        PaymentStatus.PARTIALLY_REFUNDED.value,
        PaymentStatus.FAILED.value,
    }
)


class Payment(models.Model):
    id = models.AutoField(primary_key=True)
    order_id = models.IntegerField(unique=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=32, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=32, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    transaction_id = models.CharField(max_length=255, null=True, blank=True)
    payment_date = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "payments"
        ordering = ("-payment_date", "-id")

    def __str__(self):
        return f"Payment {self.id} for order {self.order_id} ({self.status})"
