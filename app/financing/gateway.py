"""
Financing gateway facade.

FinancingGateway is the capability contract the storefront uses. It
exposes exactly three operations and returns plain data, leaving
rendering to the caller:

- is_eligible(): may the gateway be offered?
- process_payment(): create an offer and return checkout data
- handle_callback(): apply a provider callback, return the HTTP answer

Usage:
    from financing.gateway import FinancingGateway

    gateway = FinancingGateway()
    if gateway.is_eligible(cart_total, country, request.is_secure(), "EUR"):
        checkout = gateway.process_payment(order)
        if checkout["result"] == "success":
            return redirect(checkout["registration_url"])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from financing.conf import GATEWAY_ID, get_config
from financing.eligibility import EligibilityEvaluator
from financing.exceptions import CallbackError
from financing.services import CallbackService, OfferService

if TYPE_CHECKING:
    from typing import Any

    from financing.adapters import CartSnapshot, FinancingProviderAdapter
    from financing.conf import FinancingConfig
    from financing.eligibility import EligibilityResult
    from financing.protocols import FinancingOrder, OrderRepository


logger = logging.getLogger(__name__)

OFFER_FAILED_MESSAGE = (
    "The financing request could not be started. Please try again or choose "
    "another payment method."
)


class FinancingGateway:
    """Installment financing payment gateway."""

    id = GATEWAY_ID
    title = "Financing"

    def __init__(
        self,
        config: FinancingConfig | None = None,
        *,
        adapter: FinancingProviderAdapter | None = None,
        repository: OrderRepository | None = None,
    ):
        self.config = config or get_config()
        self.adapter = adapter
        self.repository = repository
        self.evaluator = EligibilityEvaluator(self.config)

    def evaluate(
        self,
        amount: Any,
        country: str | None,
        is_secure_context: bool,
        currency: str | None,
        *,
        is_admin: bool = False,
    ) -> EligibilityResult:
        return self.evaluator.evaluate(
            amount,
            country,
            is_secure_context,
            currency,
            is_admin=is_admin,
        )

    def is_eligible(
        self,
        amount: Any,
        country: str | None,
        is_secure_context: bool,
        currency: str | None,
        *,
        is_admin: bool = False,
    ) -> bool:
        return self.evaluate(
            amount,
            country,
            is_secure_context,
            currency,
            is_admin=is_admin,
        ).eligible

    def process_payment(
        self,
        order: FinancingOrder,
        cart: CartSnapshot | None = None,
    ) -> dict[str, Any]:
        """
        Start the financing checkout for an order.

        Returns:
            {"result": "success", "redirect": <return url>, "registration_url": <url>}
            or {"result": "failure", "message": <customer message>, "error_code": <code>}
        """
        result = OfferService.create_offer(
            order,
            cart,
            config=self.config,
            adapter=self.adapter,
            repository=self.repository,
        )
        if not result.success:
            return {
                "result": "failure",
                "message": OFFER_FAILED_MESSAGE,
                "error_code": result.error_code,
            }

        return {
            "result": "success",
            "redirect": order.get_return_url(),
            "registration_url": result.data,
        }

    def handle_callback(self, body: bytes | str) -> tuple[int, dict[str, Any]]:
        """
        Apply a provider callback.

        Returns:
            (HTTP status, response body) for the callback endpoint
        """
        try:
            CallbackService.process(body, config=self.config, repository=self.repository)
        except CallbackError as e:
            logger.info(
                "Financing callback rejected",
                extra={"error_code": e.error_code, "status_code": e.status_code},
            )
            return e.status_code, {"success": False}
        return 200, {"success": True}
