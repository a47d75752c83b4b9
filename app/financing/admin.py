"""
Financing admin configuration.

Offers are read-only in the admin; their state only changes through
verified provider callbacks.
"""

from django.contrib import admin

from financing.models import FinancingOffer


@admin.register(FinancingOffer)
class FinancingOfferAdmin(admin.ModelAdmin):
    """
    Admin configuration for FinancingOffer.

    Provides visibility into offers and their funding state.
    """

    list_display = [
        "usage",
        "order",
        "amount",
        "mode",
        "state",
        "reference_id",
        "created_at",
    ]
    list_filter = ["state", "mode", "created_at"]
    search_fields = ["id", "usage", "reference_id", "order__number"]
    readonly_fields = [
        "id",
        "order",
        "usage",
        "registration_url",
        "amount",
        "mode",
        "state",
        "reference_id",
        "payment_received_at",
        "cancelled_at",
        "timed_out_at",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "order", "usage", "amount", "mode"),
            },
        ),
        (
            "Status",
            {
                "fields": ("state", "reference_id", "registration_url"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": (
                    "payment_received_at",
                    "cancelled_at",
                    "timed_out_at",
                    "created_at",
                    "updated_at",
                ),
            },
        ),
    )

    def has_add_permission(self, request):
        return False
