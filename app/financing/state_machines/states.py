"""
State enums for the financing gateway.

These are Django TextChoices for database storage and admin integration.

State Machines Overview:

FinancingOffer States:
    pending_funding → payment_received
    pending_funding → cancelled
    pending_funding → timed_out

Callback statuses reported by the provider map onto the terminal states:
    SUCCESS   → payment_received
    CANCELLED → cancelled
    TIMEOUT   → timed_out
"""

from django.db import models


class FinancingState(models.TextChoices):
    """
    States of a financing offer.

    Terminal states: PAYMENT_RECEIVED, CANCELLED, TIMED_OUT
    PENDING_FUNDING is the only non-terminal state.
    """

    PENDING_FUNDING = "pending_funding", "Pending Funding"
    PAYMENT_RECEIVED = "payment_received", "Payment Received"
    CANCELLED = "cancelled", "Cancelled"
    TIMED_OUT = "timed_out", "Timed Out"

    @classmethod
    def terminal_states(cls) -> frozenset[str]:
        return frozenset({cls.PAYMENT_RECEIVED, cls.CANCELLED, cls.TIMED_OUT})


class CallbackStatus(models.TextChoices):
    """Outcome values the provider reports in the callback body."""

    SUCCESS = "SUCCESS", "Success"
    CANCELLED = "CANCELLED", "Cancelled"
    TIMEOUT = "TIMEOUT", "Timeout"


class GatewayMode(models.TextChoices):
    """
    Provider environment.

    LIVE talks to the production host, TEST to the sandbox host.
    """

    LIVE = "live", "Live"
    TEST = "test", "Test"


__all__ = [
    "CallbackStatus",
    "FinancingState",
    "GatewayMode",
]
