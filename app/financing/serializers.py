"""
DRF serializers for the financing checkout API.

This module provides serializers for:
- Eligibility queries (cart total, country, currency)
- Process-payment requests (order key, optional cart totals)
- Widget and post-checkout data returned to the UI layer

Related files:
    - views.py: Checkout API views
    - eligibility.py: EligibilityEvaluator
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers


class EligibilityQuerySerializer(serializers.Serializer):
    """
    Query parameters of the eligibility endpoint.

    A missing amount counts as 0, a missing country as unknown and a
    missing currency as the store currency.
    """

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        default=Decimal("0"),
    )
    country = serializers.CharField(max_length=2, required=False, allow_blank=True, default="")
    currency = serializers.CharField(max_length=3, required=False, allow_blank=True, default="")


class ProcessPaymentSerializer(serializers.Serializer):
    """
    Request body of the process-payment endpoint.

    Fields:
        order_key: Guest access key of the order
        total: Cart total at checkout (defaults to the order total)
        shipping_total: Cart shipping costs (defaults to the order's)
    """

    order_key = serializers.CharField(max_length=64)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    shipping_total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)

    def validate(self, attrs):
        if "shipping_total" in attrs and "total" not in attrs:
            raise serializers.ValidationError(
                {"total": "total is required when shipping_total is given."}
            )
        return attrs


class WidgetSerializer(serializers.Serializer):
    """Data the UI layer needs to render the provider widget."""

    api_key = serializers.CharField()
    mode = serializers.CharField()
    locale = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class EligibilitySerializer(serializers.Serializer):
    """Eligibility result plus widget data."""

    eligible = serializers.BooleanField()
    reasons = serializers.ListField(child=serializers.CharField())
    warnings = serializers.ListField(child=serializers.CharField())
    within_bounds = serializers.BooleanField()
    widget = WidgetSerializer()


class CheckoutContextSerializer(serializers.Serializer):
    """Post-checkout data while the order awaits financing."""

    order_id = serializers.IntegerField()
    api_key = serializers.CharField()
    mode = serializers.CharField()
    locale = serializers.CharField()
    purchase_url = serializers.CharField()
