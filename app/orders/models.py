"""
Order models for the host storefront.

The storefront owns orders; payment gateways only read billing data and
line items and write a small subset of state (status, payment reference,
metadata). This module provides exactly that surface.

Models:
    Order: Customer order with billing address, totals, status and metadata
    OrderLineItem: One purchased product line
    OrderNote: Human-readable status change notes

Usage:
    from orders.models import Order, OrderStatus

    order = Order.objects.get(pk=order_id)
    order.update_status(OrderStatus.CANCELLED, note="Payment process was canceled.")

    # Record a completed payment with the provider's reference
    order.payment_complete("R1")
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from urllib.parse import urlencode

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.model_mixins import MetadataMixin
from core.models import BaseModel


def generate_order_key() -> str:
    """Generate a random key granting guest access to an order."""
    return f"order_{secrets.token_urlsafe(16)}"


class OrderStatus(models.TextChoices):
    """
    Order statuses of the storefront.

    Payment gateways map their own outcomes onto these values
    through configuration.
    """

    PENDING = "pending", "Pending payment"
    PROCESSING = "processing", "Processing"
    ON_HOLD = "on-hold", "On hold"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"
    FAILED = "failed", "Failed"


class Order(MetadataMixin, BaseModel):
    """
    Customer order.

    Fields:
        number: Human-readable order number shown to customers
        order_key: Secret key for guest access to the order
        status: Current storefront status
        payment_method: Identifier of the gateway used to pay
        transaction_id: Payment reference reported by the gateway
        date_paid: When payment completed
        currency: ISO 4217 currency code (uppercase)
        total: Grand total including shipping and tax
        shipping_total: Shipping costs
        billing_*: Billing contact and address
        metadata: Key/value store for gateway correlation data
    """

    number = models.CharField(
        max_length=64,
        unique=True,
        help_text="Human-readable order number",
    )

    order_key = models.CharField(
        max_length=64,
        default=generate_order_key,
        editable=False,
        help_text="Secret key for guest access to the order",
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )

    payment_method = models.CharField(max_length=64, blank=True, default="")

    transaction_id = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Payment reference reported by the payment gateway",
    )

    date_paid = models.DateTimeField(null=True, blank=True)

    currency = models.CharField(max_length=3, default="EUR")

    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    shipping_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    billing_email = models.EmailField(blank=True, default="")
    billing_phone = models.CharField(max_length=64, blank=True, default="")
    billing_first_name = models.CharField(max_length=128, blank=True, default="")
    billing_last_name = models.CharField(max_length=128, blank=True, default="")
    billing_country = models.CharField(max_length=2, blank=True, default="")
    billing_postcode = models.CharField(max_length=20, blank=True, default="")
    billing_city = models.CharField(max_length=128, blank=True, default="")
    billing_address_1 = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Street and house number",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"

    def __str__(self) -> str:
        return f"Order({self.number}, {self.status})"

    def add_note(self, note: str) -> OrderNote:
        """Attach a human-readable note to the order."""
        return OrderNote.objects.create(order=self, note=note)

    def update_status(self, new_status: str, note: str = "", save: bool = True) -> None:
        """
        Change the order status and record a transition note.

        Args:
            new_status: Target status (one of OrderStatus)
            note: Human-readable explanation stored as an OrderNote
            save: Whether to save the order (default True)
        """
        old_status = self.status
        self.status = new_status
        if save:
            self.save()
        message = f"Order status changed from {old_status} to {new_status}."
        if note:
            message = f"{note} {message}"
        self.add_note(message)

    def payment_complete(
        self,
        transaction_id: str,
        status: str = OrderStatus.PROCESSING,
        save: bool = True,
    ) -> None:
        """
        Mark the order as paid.

        Records the payment reference and payment date, then moves the
        order to the given paid status.

        Args:
            transaction_id: Payment reference from the gateway
            status: Paid status to move to (default processing)
            save: Whether to save the order (default True)
        """
        self.transaction_id = transaction_id or ""
        if self.date_paid is None:
            self.date_paid = timezone.now()
        self.update_status(status, note="Payment complete.", save=save)

    def has_status(self, *statuses: str) -> bool:
        """Check whether the order is in one of the given statuses."""
        return self.status in statuses

    def get_return_url(self) -> str:
        """Order-received page the customer returns to after checkout."""
        site_url = getattr(settings, "SITE_URL", "").rstrip("/")
        query = urlencode({"key": self.order_key})
        return f"{site_url}/checkout/order-received/{self.pk}/?{query}"


class OrderLineItem(BaseModel):
    """
    One product line of an order.

    Fields:
        order: Parent order
        name: Product name shown to the customer
        quantity: Number of units
        total: Line total including tax
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="line_items",
    )

    name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField(default=1)

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Line total including tax",
    )

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "Order line item"
        verbose_name_plural = "Order line items"

    def __str__(self) -> str:
        return f"{self.name} x {self.quantity}"

    @property
    def unit_total(self) -> Decimal:
        """Per-unit amount including tax, rounded to cents."""
        if not self.quantity:
            return Decimal("0.00")
        return (self.total / self.quantity).quantize(Decimal("0.01"))


class OrderNote(BaseModel):
    """Human-readable note attached to an order (status changes, gateway events)."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="notes",
    )

    note = models.TextField()

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return self.note[:50]
