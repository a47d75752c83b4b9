"""
Financing app configuration.

This app provides the financing payment gateway including:
- Eligibility checks for carts and orders
- Offer creation against the provider REST API
- Verified provider callbacks driving the order state machine
"""

from django.apps import AppConfig


class FinancingAppConfig(AppConfig):
    """Configuration for the financing application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "financing"
    verbose_name = "Financing"

    def ready(self) -> None:
        # Register system checks for the gateway configuration
        from financing import checks  # noqa: F401
