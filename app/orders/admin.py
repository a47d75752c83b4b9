"""
Orders admin configuration.
"""

from django.contrib import admin

from orders.models import Order, OrderLineItem, OrderNote


class OrderLineItemInline(admin.TabularInline):
    model = OrderLineItem
    extra = 0


class OrderNoteInline(admin.TabularInline):
    model = OrderNote
    extra = 0
    readonly_fields = ["note", "created_at"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for Order.

    Metadata holds gateway correlation data and is shown collapsed.
    """

    list_display = [
        "number",
        "status",
        "payment_method",
        "total",
        "currency",
        "billing_country",
        "date_paid",
        "created_at",
    ]
    list_filter = ["status", "payment_method", "currency", "created_at"]
    search_fields = ["number", "billing_email", "transaction_id"]
    readonly_fields = ["order_key", "transaction_id", "date_paid", "created_at", "updated_at"]
    ordering = ["-created_at"]
    inlines = [OrderLineItemInline, OrderNoteInline]

    fieldsets = (
        (
            None,
            {
                "fields": ("number", "order_key", "status", "currency", "total", "shipping_total"),
            },
        ),
        (
            "Payment",
            {
                "fields": ("payment_method", "transaction_id", "date_paid"),
            },
        ),
        (
            "Billing",
            {
                "fields": (
                    "billing_first_name",
                    "billing_last_name",
                    "billing_email",
                    "billing_phone",
                    "billing_address_1",
                    "billing_postcode",
                    "billing_city",
                    "billing_country",
                ),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("metadata",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )
