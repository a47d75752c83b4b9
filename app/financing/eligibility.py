"""
Eligibility rules for offering the financing gateway.

The evaluator is a pure function of its inputs and the configuration.
It answers two questions:

- is_eligible(): may the gateway be shown for this cart or order?
- is_within_bounds(): is a single amount financeable (product pages)?

Usage:
    from financing.eligibility import EligibilityEvaluator

    evaluator = EligibilityEvaluator(get_config())
    result = evaluator.evaluate(
        amount=Decimal("650.00"),
        country="DE",
        is_secure_context=request.is_secure(),
        currency="EUR",
    )
    if not result.eligible:
        logger.info("Financing unavailable", extra={"reasons": result.reasons})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.conf import settings

if TYPE_CHECKING:
    from typing import Any

    from financing.conf import FinancingConfig


class IneligibilityReason:
    """Machine-readable reasons for an ineligible result."""

    DISABLED = "GATEWAY_DISABLED"
    CURRENCY = "CURRENCY_NOT_SUPPORTED"
    INSECURE_TRANSPORT = "INSECURE_TRANSPORT"
    AMOUNT_BELOW_MINIMUM = "AMOUNT_BELOW_MINIMUM"
    AMOUNT_ABOVE_MAXIMUM = "AMOUNT_ABOVE_MAXIMUM"
    COUNTRY_NOT_ALLOWED = "COUNTRY_NOT_ALLOWED"


@dataclass
class EligibilityResult:
    """
    Outcome of an eligibility evaluation.

    Attributes:
        eligible: Whether the gateway may be offered
        reasons: Reasons the gateway is not offered (empty when eligible)
        warnings: Non-blocking findings (test mode on insecure transport)
    """

    eligible: bool
    reasons: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.eligible


def to_amount(value: Any) -> Decimal:
    """Coerce an amount to Decimal; missing or unparseable amounts count as 0."""
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


class EligibilityEvaluator:
    """Decides whether financing can be offered."""

    def __init__(self, config: FinancingConfig):
        self.config = config

    def evaluate(
        self,
        amount: Any,
        country: str | None,
        is_secure_context: bool,
        currency: str | None,
        *,
        is_admin: bool = False,
    ) -> EligibilityResult:
        """
        Evaluate all eligibility rules and collect the reasons.

        Args:
            amount: Cart/order total (missing counts as 0)
            country: Billing country code, None or "" when unknown
            is_secure_context: Whether the request arrived over https
            currency: Store/order currency
            is_admin: Administrative preview, always eligible

        Returns:
            EligibilityResult
        """
        if is_admin:
            return EligibilityResult(eligible=True)

        config = self.config
        result = EligibilityResult(eligible=True)

        if not config.enabled:
            result.reasons.append(IneligibilityReason.DISABLED)

        if (currency or "").upper() != config.currency:
            result.reasons.append(IneligibilityReason.CURRENCY)

        if self.is_transport_insecure(is_secure_context):
            if config.is_live:
                result.reasons.append(IneligibilityReason.INSECURE_TRANSPORT)
            else:
                result.warnings.append(IneligibilityReason.INSECURE_TRANSPORT)

        amount = to_amount(amount)
        if config.min_amount and amount < config.min_amount:
            result.reasons.append(IneligibilityReason.AMOUNT_BELOW_MINIMUM)
        if config.max_amount and amount > config.max_amount:
            result.reasons.append(IneligibilityReason.AMOUNT_ABOVE_MAXIMUM)

        if not self.ships_to_allowed_country(country):
            result.reasons.append(IneligibilityReason.COUNTRY_NOT_ALLOWED)

        result.eligible = not result.reasons
        return result

    def is_eligible(
        self,
        amount: Any,
        country: str | None,
        is_secure_context: bool,
        currency: str | None,
        *,
        is_admin: bool = False,
    ) -> bool:
        """Boolean form of evaluate()."""
        return self.evaluate(
            amount,
            country,
            is_secure_context,
            currency,
            is_admin=is_admin,
        ).eligible

    def is_within_bounds(self, amount: Any) -> bool:
        """Check an amount against the inclusive bounds; a bound of 0 is ignored."""
        amount = to_amount(amount)
        if self.config.min_amount and amount < self.config.min_amount:
            return False
        if self.config.max_amount and amount > self.config.max_amount:
            return False
        return True

    def ships_to_allowed_country(self, country: str | None) -> bool:
        """Unknown countries are allowed; known ones must be in the allowed set."""
        if not country:
            return True
        return country.strip().upper() in self.config.allowed_countries

    def is_transport_insecure(self, is_secure_context: bool) -> bool:
        """
        Check whether checkout would run over plain http.

        Not insecure when the request is secure, when the host forces
        https itself (SECURE_SSL_REDIRECT) or when the override is set.
        """
        if is_secure_context or self.config.allow_insecure:
            return False
        return not getattr(settings, "SECURE_SSL_REDIRECT", False)
