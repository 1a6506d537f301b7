import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.AutoField(primary_key=True, serialize=False)),
                ("customer_id", models.BigIntegerField(db_index=True)),
                ("order_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_date", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PROCESSING", "Processing"),
                            ("SHIPPED", "Shipped"),
                            ("DELIVERED", "Delivered"),
                            ("CANCELED", "Canceled"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("customer_name", models.CharField(blank=True, max_length=255, null=True)),
                ("customer_email", models.CharField(blank=True, max_length=255, null=True)),
                ("shipping_address_id", models.BigIntegerField(blank=True, null=True)),
                ("shipping_address", models.JSONField(blank=True, null=True)),
            ],
            options={"db_table": "orders", "ordering": ("-order_date", "-id")},
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_id", models.BigIntegerField()),
                ("quantity", models.PositiveIntegerField()),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("product_name", models.CharField(blank=True, default="", max_length=255)),
                ("image_url", models.CharField(blank=True, default="", max_length=500)),
                ("category_id", models.BigIntegerField(blank=True, null=True)),
                ("category_name", models.CharField(blank=True, default="", max_length=255)),
                ("product_type", models.CharField(blank=True, default="", max_length=16)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
            ],
            options={"db_table": "order_items", "ordering": ("id",)},
        ),
        migrations.CreateModel(
            name="CartClearTask",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.BigIntegerField()),
                ("order_id", models.IntegerField()),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "cart_clear_tasks",
                "ordering": ("created_at", "id"),
                "indexes": [models.Index(fields=["completed_at"], name="cart_clear_pending_idx")],
            },
        ),
    ]
