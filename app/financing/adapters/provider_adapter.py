"""
Financing provider API adapter.

This module provides the FinancingProviderAdapter class which
encapsulates the single outbound call to the provider: creating a
financing offer ("URL referral") for an order. All provider HTTP calls
go through this adapter to ensure consistent timeouts, error
translation and logging.

Features:
- Configurable timeout, single attempt (no retries)
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Partner key never logged

Usage:
    from financing.adapters import FinancingProviderAdapter, FinancingRequest

    request = FinancingRequest.from_order(order, config, usage, callback_url)
    response = FinancingProviderAdapter(config).request_offer(request)
    redirect_to = response.url
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

import requests

from financing.exceptions import (
    MalformedProviderResponseError,
    OfferDeclinedError,
    ProviderTransportError,
)
from financing.helpers import sanitize_redirect_url

if TYPE_CHECKING:
    from typing import Any

    from financing.conf import FinancingConfig
    from financing.protocols import FinancingOrder


SHIPPING_DESCRIPTION = "Shipping costs"

REQUEST_HEADERS = {
    "Content-Type": "application/json; charset=utf-8",
    "Accept": "application/json",
}


def to_wire_amount(value: Any) -> float:
    """Provider amounts are JSON numbers with two decimals."""
    return float(Decimal(str(value or 0)).quantize(Decimal("0.01")))


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CartSnapshot:
    """
    Cart totals at checkout time.

    Attributes:
        total: Cart total as displayed (not recalculated)
        shipping_total: Shipping costs of the cart
    """

    total: Decimal
    shipping_total: Decimal = Decimal("0.00")


@dataclass
class BasketItem:
    """
    One basket entry of a financing request.

    Attributes:
        description: Product name
        amount: Per-unit amount including tax
        times: Quantity
    """

    description: str
    amount: float
    times: int


@dataclass
class FinancingRequest:
    """
    Wire payload for creating a financing offer.

    Field names follow the provider's JSON keys; to_payload() returns
    the exact body sent.
    """

    partnerKey: str
    amount: float
    validityDays: int
    usage: str
    email: str
    basket: list[BasketItem]
    callbackUrl: str
    description: str = ""
    phone: str = ""
    given: str = ""
    family: str = ""
    birthdate: str = ""
    country: str = ""
    zip: str = ""
    city: str = ""
    streetAndHousenumber: str = ""

    @classmethod
    def from_order(
        cls,
        order: FinancingOrder,
        config: FinancingConfig,
        usage: str,
        callback_url: str,
        cart: CartSnapshot | None = None,
    ) -> FinancingRequest:
        """
        Assemble the request from an order and the checkout cart.

        The amount is the cart total as-is (the order total when no cart
        is given). The basket lists each line item with its per-unit
        amount, followed by one shipping entry.
        """
        total = cart.total if cart is not None else order.total
        shipping_total = cart.shipping_total if cart is not None else order.shipping_total

        basket = [
            BasketItem(
                description=item.name,
                amount=to_wire_amount(item.unit_total),
                times=item.quantity,
            )
            for item in order.line_items.all()
        ]
        basket.append(
            BasketItem(
                description=SHIPPING_DESCRIPTION,
                amount=to_wire_amount(shipping_total),
                times=1,
            )
        )

        return cls(
            partnerKey=config.secret_key,
            amount=to_wire_amount(total),
            validityDays=config.validity_days,
            usage=usage,
            email=order.billing_email,
            basket=basket,
            callbackUrl=callback_url,
            phone=order.billing_phone,
            given=order.billing_first_name,
            family=order.billing_last_name,
            country=order.billing_country,
            zip=order.billing_postcode,
            city=order.billing_city,
            streetAndHousenumber=order.billing_address_1,
        )

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FinancingResponse:
    """
    Successful provider answer.

    Attributes:
        url: Sanitized registration URL for the customer
        raw_response: Full response body (for debugging)
    """

    url: str
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Provider Adapter
# =============================================================================


class FinancingProviderAdapter:
    """
    Adapter for the financing provider REST API.

    Instances hold only the configuration and an optional requests
    session, so one adapter can be shared across threads.
    """

    def __init__(self, config: FinancingConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def _post(self, url: str, payload: dict[str, Any]) -> requests.Response:
        sender = self.session or requests
        return sender.post(
            url,
            json=payload,
            headers=REQUEST_HEADERS,
            timeout=self.config.timeout_seconds,
        )

    def request_offer(self, request: FinancingRequest) -> FinancingResponse:
        """
        Create a financing offer at the provider.

        Args:
            request: Assembled financing request

        Returns:
            FinancingResponse with the sanitized registration URL

        Raises:
            ProviderTransportError: Connection failure or timeout
            OfferDeclinedError: Non-2xx status or success is not true
            MalformedProviderResponseError: Body unusable or url missing/unsafe
        """
        logger = self.get_logger()
        url = self.config.offer_request_url

        log_context = {
            "operation": "request_offer",
            "usage": request.usage,
            "amount": request.amount,
            "mode": self.config.mode,
        }

        start_time = time.time()
        logger.info("Starting financing provider request", extra=log_context)

        try:
            response = self._post(url, request.to_payload())
        except requests.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                f"Financing provider unreachable: {type(e).__name__}",
                extra={**log_context, "duration_ms": duration_ms},
            )
            raise ProviderTransportError(
                "Financing provider unavailable",
                details={"error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        log_context = {
            **log_context,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        body = self._parse_body(response, log_context)

        if not 200 <= response.status_code < 300 or body.get("success") is not True:
            logger.warning("Financing offer declined", extra=log_context)
            raise OfferDeclinedError(
                "Financing provider declined the offer",
                details={"status_code": response.status_code},
            )

        registration_url = sanitize_redirect_url(body.get("url"))
        if not registration_url:
            logger.warning(
                "Financing provider returned no usable url",
                extra=log_context,
            )
            raise MalformedProviderResponseError(
                "Financing provider returned no usable registration URL",
                details={"status_code": response.status_code},
            )

        logger.info("Financing provider request completed", extra=log_context)
        return FinancingResponse(url=registration_url, raw_response=body)

    def _parse_body(self, response: requests.Response, log_context: dict[str, Any]) -> dict[str, Any]:
        """
        Decode the JSON body.

        Non-2xx answers with an unusable body count as declined rather
        than malformed.
        """
        is_ok = 200 <= response.status_code < 300
        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if isinstance(body, dict):
            return body

        if not is_ok:
            return {}

        self.get_logger().warning(
            "Financing provider returned a malformed body",
            extra=log_context,
        )
        raise MalformedProviderResponseError(
            "Financing provider response is not a JSON object",
            details={"status_code": response.status_code},
        )
