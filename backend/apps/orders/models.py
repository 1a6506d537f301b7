from django.db import models
from django.utils import timezone


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PROCESSING = "PROCESSING", "Processing"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELED = "CANCELED", "Canceled"


class Order(models.Model):
    id = models.AutoField(primary_key=True)
    customer_id = models.BigIntegerField(db_index=True)
    order_date = models.DateTimeField(default=timezone.now)
    updated_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    customer_name = models.CharField(max_length=255, null=True, blank=True)
    customer_email = models.CharField(max_length=255, null=True, blank=True)
    shipping_address_id = models.BigIntegerField(null=True, blank=True)
    shipping_address = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ("-order_date", "-id")

    def __str__(self):
        return f"Order {self.id} ({self.status}) for customer {self.customer_id}"


class OrderItem(models.Model):
    """A purchased line; `price` is the price at purchase time and never changes."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product_id = models.BigIntegerField()
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    product_name = models.CharField(max_length=255, blank=True, default="")
    image_url = models.CharField(max_length=500, blank=True, default="")
    category_id = models.BigIntegerField(null=True, blank=True)
    category_name = models.CharField(max_length=255, blank=True, default="")
    product_type = models.CharField(max_length=16, blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ("id",)


class CartClearTask(models.Model):
    """Outbox row for a cart that still has to be cleared after checkout."""

    customer_id = models.BigIntegerField()
    order_id = models.IntegerField()
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "cart_clear_tasks"
        ordering = ("created_at", "id")
        indexes = [models.Index(fields=["completed_at"], name="cart_clear_pending_idx")]
