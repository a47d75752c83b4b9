from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models

import orders.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("metadata", models.JSONField(blank=True, default=dict, help_text="Flexible key-value metadata storage")),
                ("number", models.CharField(help_text="Human-readable order number", max_length=64, unique=True)),
                ("order_key", models.CharField(default=orders.models.generate_order_key, editable=False, help_text="Secret key for guest access to the order", max_length=64)),
                ("status", models.CharField(choices=[("pending", "Pending payment"), ("processing", "Processing"), ("on-hold", "On hold"), ("completed", "Completed"), ("cancelled", "Cancelled"), ("refunded", "Refunded"), ("failed", "Failed")], db_index=True, default="pending", max_length=20)),
                ("payment_method", models.CharField(blank=True, default="", max_length=64)),
                ("transaction_id", models.CharField(blank=True, default="", help_text="Payment reference reported by the payment gateway", max_length=255)),
                ("date_paid", models.DateTimeField(blank=True, null=True)),
                ("currency", models.CharField(default="EUR", max_length=3)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("shipping_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("billing_email", models.EmailField(blank=True, default="", max_length=254)),
                ("billing_phone", models.CharField(blank=True, default="", max_length=64)),
                ("billing_first_name", models.CharField(blank=True, default="", max_length=128)),
                ("billing_last_name", models.CharField(blank=True, default="", max_length=128)),
                ("billing_country", models.CharField(blank=True, default="", max_length=2)),
                ("billing_postcode", models.CharField(blank=True, default="", max_length=20)),
                ("billing_city", models.CharField(blank=True, default="", max_length=128)),
                ("billing_address_1", models.CharField(blank=True, default="", help_text="Street and house number", max_length=255)),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OrderLineItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("name", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("total", models.DecimalField(decimal_places=2, help_text="Line total including tax", max_digits=12)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="line_items", to="orders.order")),
            ],
            options={
                "verbose_name": "Order line item",
                "verbose_name_plural": "Order line items",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="OrderNote",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("note", models.TextField()),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notes", to="orders.order")),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
    ]
