from django.db import models
from django.utils import timezone


class ProductType(models.TextChoices):
    PHYSICAL = "PHYSICAL", "Physical"
    DIGITAL = "DIGITAL", "Digital"


class Cart(models.Model):
    id = models.AutoField(primary_key=True)
    # One cart per customer; concurrent lazy creation is settled by this constraint.
    customer_id = models.BigIntegerField(unique=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "carts"

    def __str__(self):
        return f"Cart {self.id} for customer {self.customer_id}"


class CartItem(models.Model):
    """A cart line; the product fields are a snapshot of catalog data, not a source of truth."""

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product_id = models.BigIntegerField()
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    product_name = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    image_url = models.CharField(max_length=500, blank=True, default="")
    category_id = models.BigIntegerField(null=True, blank=True)
    category_name = models.CharField(max_length=255, blank=True, default="")
    product_type = models.CharField(
        max_length=16, choices=ProductType.choices, blank=True, default=""
    )
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = ("cart", "product_id")
        ordering = ("added_at", "id")
        db_table = "cart_items"

    def __str__(self):
        return f"CartItem {self.product_id} x{self.quantity} in cart {self.cart_id}"
