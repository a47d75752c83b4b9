"""
Offer creation service.

Requests a financing offer from the provider for an order and records
the correlation state on the order.

Flow:
    1. Build the usage token from the prefix and the order number
    2. Assemble the financing request (cart total, basket, billing data)
    3. POST it to the provider (single attempt)
    4. On success, in one transaction:
       - store usage token and base64 registration URL as order metadata
       - move the order to the pending-payment status
       - create or refresh the FinancingOffer record

Nothing is written to the order on any failure path.

Usage:
    from financing.services import OfferService

    result = OfferService.create_offer(order)
    if result.success:
        return redirect(result.data)
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from core.services import BaseService, ServiceResult

from financing.adapters import CartSnapshot, FinancingProviderAdapter, FinancingRequest
from financing.conf import (
    GATEWAY_ID,
    ORDER_META_URL,
    ORDER_META_USAGE,
    get_config,
)
from financing.exceptions import OfferRequestError
from financing.helpers import (
    build_callback_url,
    build_usage_token,
    encode_registration_url,
    format_order_number,
)
from financing.models import FinancingOffer
from financing.repositories import DjangoOrderRepository

if TYPE_CHECKING:
    from financing.conf import FinancingConfig
    from financing.protocols import FinancingOrder, OrderRepository


PENDING_NOTE = "Customer still needs to verify."


class OfferService(BaseService):
    """Service for creating financing offers."""

    @classmethod
    def create_offer(
        cls,
        order: FinancingOrder,
        cart: CartSnapshot | None = None,
        *,
        config: FinancingConfig | None = None,
        adapter: FinancingProviderAdapter | None = None,
        repository: OrderRepository | None = None,
    ) -> ServiceResult[str]:
        """
        Create a financing offer for an order.

        Args:
            order: Order to finance
            cart: Cart totals at checkout (defaults to the order totals)
            config: Gateway configuration (defaults to settings)
            adapter: Provider adapter (defaults to one built from config)
            repository: Order repository used for the row lock

        Returns:
            ServiceResult with the registration URL on success,
            failure with the provider error code otherwise
        """
        logger = cls.get_logger()
        config = config or get_config()
        adapter = adapter or FinancingProviderAdapter(config)
        repository = repository or DjangoOrderRepository()

        usage = build_usage_token(config.usage_prefix, format_order_number(order, config))
        request = FinancingRequest.from_order(
            order,
            config,
            usage=usage,
            callback_url=build_callback_url(config),
            cart=cart,
        )

        try:
            response = adapter.request_offer(request)
        except OfferRequestError as e:
            return cls.handle_exception(
                e,
                f"Financing offer for order {order.pk} failed",
                log_level=logging.WARNING,
            )

        with cls.atomic():
            # Concurrent offers for one order serialize here; the last one wins
            locked = repository.get(order.pk, for_update=True) or order
            locked.set_meta(ORDER_META_USAGE, usage, save=False)
            locked.set_meta(ORDER_META_URL, encode_registration_url(response.url), save=False)
            locked.payment_method = GATEWAY_ID
            locked.update_status(config.state_pending_payment, note=PENDING_NOTE)
            cls._record_offer(locked, usage, response.url, request.amount, config)

        if locked is not order:
            order.refresh_from_db()

        logger.info(
            "Financing offer created",
            extra={"order_id": order.pk, "usage": usage, "mode": config.mode},
        )
        return ServiceResult.success(response.url)

    @classmethod
    def _record_offer(
        cls,
        order: FinancingOrder,
        usage: str,
        registration_url: str,
        amount: float,
        config: FinancingConfig,
    ) -> FinancingOffer:
        """Create the offer record, or refresh the pending one for the same usage."""
        offer = FinancingOffer.objects.pending_for_usage(usage).filter(order_id=order.pk).first()
        if offer is None:
            return FinancingOffer.objects.create(
                order_id=order.pk,
                usage=usage,
                registration_url=registration_url,
                amount=Decimal(str(amount)),
                mode=config.mode,
            )

        offer.registration_url = registration_url
        offer.amount = Decimal(str(amount))
        offer.mode = config.mode
        offer.save(update_fields=["registration_url", "amount", "mode", "updated_at"])
        return offer
