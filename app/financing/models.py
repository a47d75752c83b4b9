"""
FinancingOffer model recording the lifecycle of one financing offer.

Correlation with provider callbacks happens through the order metadata
(usage token); this model is the audit trail next to it: which URL was
handed out, for which amount, in which mode, and how the offer ended.

Usage:
    from financing.models import FinancingOffer

    offer = FinancingOffer.objects.pending_for_usage("Order-1042").first()

    # State transitions using django-fsm
    offer.receive_payment("R1")  # pending_funding -> payment_received
    offer.save()
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from financing.state_machines import FinancingState, GatewayMode


class FinancingOfferQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(state=FinancingState.PENDING_FUNDING)

    def pending_for_usage(self, usage: str):
        return self.pending().filter(usage=usage)


class FinancingOffer(UUIDPrimaryKeyMixin, BaseModel):
    """
    One financing offer handed out for an order.

    State Flow:
        PENDING_FUNDING -> PAYMENT_RECEIVED
        PENDING_FUNDING -> CANCELLED
        PENDING_FUNDING -> TIMED_OUT

    Fields:
        order: Order the offer was created for
        usage: Usage token sent to the provider
        registration_url: Provider URL where the customer applies
        amount: Financed amount as sent to the provider
        mode: Gateway mode the offer was created in
        state: Current state (managed by FSM)
        reference_id: Provider reference id once funded
        *_at timestamps: Track state transition times
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="financing_offers",
    )

    usage = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Usage token correlating the offer with provider callbacks",
    )

    registration_url = models.URLField(
        max_length=2048,
        help_text="Provider URL where the customer completes the application",
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    mode = models.CharField(
        max_length=10,
        choices=GatewayMode.choices,
        default=GatewayMode.TEST,
    )

    state = FSMField(
        default=FinancingState.PENDING_FUNDING,
        choices=FinancingState.choices,
        db_index=True,
        help_text="Current state of the offer (managed by FSM)",
    )

    reference_id = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Provider reference id of the completed financing",
    )

    payment_received_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    timed_out_at = models.DateTimeField(null=True, blank=True)

    objects = FinancingOfferQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Financing Offer"
        verbose_name_plural = "Financing Offers"
        indexes = [
            models.Index(fields=["order", "state"], name="fin_offer_order_state_idx"),
        ]

    def __str__(self) -> str:
        return f"FinancingOffer({self.usage}, {self.state})"

    @property
    def is_terminal(self) -> bool:
        return self.state in FinancingState.terminal_states()

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=state,
        source=FinancingState.PENDING_FUNDING,
        target=FinancingState.PAYMENT_RECEIVED,
    )
    def receive_payment(self, reference_id: str):
        """
        Record the funded financing.

        Transition: PENDING_FUNDING -> PAYMENT_RECEIVED
        """
        self.reference_id = reference_id or ""
        self.payment_received_at = timezone.now()

    @transition(
        field=state,
        source=FinancingState.PENDING_FUNDING,
        target=FinancingState.CANCELLED,
    )
    def cancel(self):
        """
        Customer cancelled the financing application.

        Transition: PENDING_FUNDING -> CANCELLED
        """
        self.cancelled_at = timezone.now()

    @transition(
        field=state,
        source=FinancingState.PENDING_FUNDING,
        target=FinancingState.TIMED_OUT,
    )
    def time_out(self):
        """
        Validity period expired without a decision.

        Transition: PENDING_FUNDING -> TIMED_OUT
        """
        self.timed_out_at = timezone.now()
