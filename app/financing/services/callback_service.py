"""
Callback processing service.

Turns a raw provider callback into an order state transition.

Flow:
    1. Parse the body (non-empty JSON object)
    2. Verify the hash over secret, status, referenceId and usage
    3. Lock the single order carrying the usage token
    4. Apply the transition for the reported status:
       SUCCESS   -> payment received (referenceId becomes the payment reference)
       CANCELLED -> cancelled
       TIMEOUT   -> timed out
    5. Clear the usage/registration metadata in the same transaction

A redelivered callback finds no order (metadata already cleared) and is
rejected as not found instead of being applied twice.

Usage:
    from financing.services import CallbackService

    try:
        order = CallbackService.process(request.body)
    except CallbackError as e:
        return JsonResponse({"success": False}, status=e.status_code)
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from django.db import DatabaseError

from core.services import BaseService

from financing.conf import ORDER_META_URL, ORDER_META_USAGE, get_config
from financing.exceptions import (
    CallbackOrderNotFoundError,
    CallbackVerificationError,
    InvalidCallbackPayloadError,
    OrderStateError,
    UnknownCallbackStatusError,
)
from financing.models import FinancingOffer
from financing.repositories import DjangoOrderRepository
from financing.state_machines import CallbackStatus
from financing.verification import verify_callback

if TYPE_CHECKING:
    from typing import Any

    from financing.conf import FinancingConfig
    from financing.protocols import FinancingOrder, OrderRepository


CANCELLED_NOTE = "Payment process was canceled."
TIMED_OUT_NOTE = "Order expired."


class CallbackService(BaseService):
    """Service for verified provider callbacks."""

    @classmethod
    def parse_payload(cls, body: bytes | str) -> dict[str, Any]:
        """
        Decode a callback body.

        Raises:
            InvalidCallbackPayloadError: Empty body, invalid JSON, or not
                a non-empty JSON object
        """
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidCallbackPayloadError("Callback body is not valid UTF-8") from e

        if not body or not body.strip():
            raise InvalidCallbackPayloadError("Callback body is empty")

        try:
            payload = json.loads(body)
        except (ValueError, RecursionError) as e:
            raise InvalidCallbackPayloadError("Callback body is not valid JSON") from e

        if not isinstance(payload, dict) or not payload:
            raise InvalidCallbackPayloadError("Callback body must be a non-empty JSON object")

        return payload

    @classmethod
    def process(
        cls,
        body: bytes | str,
        *,
        config: FinancingConfig | None = None,
        repository: OrderRepository | None = None,
    ) -> FinancingOrder:
        """
        Verify a callback and apply it to its order.

        Args:
            body: Raw request body
            config: Gateway configuration (defaults to settings)
            repository: Order repository (defaults to the orders app)

        Returns:
            The transitioned order

        Raises:
            InvalidCallbackPayloadError: Body unusable (400)
            CallbackVerificationError: Hash mismatch (403)
            CallbackOrderNotFoundError: No single order for the usage token (400)
            UnknownCallbackStatusError: Status outside the known set (400)
            OrderStateError: Order state could not be written (503)
        """
        logger = cls.get_logger()
        config = config or get_config()
        repository = repository or DjangoOrderRepository()

        payload = cls.parse_payload(body)
        status = payload.get("status")
        reference_id = payload.get("referenceId")
        usage = payload.get("usage")

        if not config.secret_key:
            logger.warning("Financing callback rejected: no secret key configured")
            raise CallbackVerificationError("Callback verification failed")

        if not verify_callback(
            config.secret_key,
            status,
            reference_id,
            usage,
            payload.get("verificationHash"),
        ):
            logger.warning(
                "Financing callback verification failed",
                extra={"usage": usage if isinstance(usage, str) else None},
            )
            raise CallbackVerificationError("Callback verification failed")

        try:
            with cls.atomic():
                order = repository.find_one_by_meta(ORDER_META_USAGE, usage, for_update=True)
                if order is None:
                    logger.info(
                        "Financing callback for unknown usage token",
                        extra={"usage": usage, "status": status},
                    )
                    raise CallbackOrderNotFoundError(
                        "No order found for usage token",
                        details={"usage": usage},
                    )
                cls.apply_transition(order, status, reference_id, config)
        except DatabaseError as e:
            logger.error(
                "Could not persist financing callback state",
                extra={"usage": usage, "status": status},
                exc_info=True,
            )
            raise OrderStateError(
                "Order state could not be updated",
                details={"usage": usage},
            ) from e

        logger.info(
            f"Financing callback applied: {status}",
            extra={"order_id": order.pk, "usage": usage, "status": status},
        )
        return order

    @classmethod
    def apply_transition(
        cls,
        order: FinancingOrder,
        status: Any,
        reference_id: Any,
        config: FinancingConfig,
    ) -> None:
        """
        Move the order to the state for a verified callback status.

        Must run inside a transaction: status, metadata and offer record
        are written together.

        Raises:
            UnknownCallbackStatusError: Status is not SUCCESS, CANCELLED or TIMEOUT
        """
        if status not in CallbackStatus.values:
            raise UnknownCallbackStatusError(
                "Unknown callback status",
                details={"status": status if isinstance(status, str) else repr(status)},
            )

        usage = order.get_meta(ORDER_META_USAGE)
        order.delete_meta(ORDER_META_URL, save=False)
        order.delete_meta(ORDER_META_USAGE, save=False)

        offer = (
            FinancingOffer.objects.pending_for_usage(usage)
            .filter(order_id=order.pk)
            .select_for_update()
            .first()
        )

        if status == CallbackStatus.SUCCESS:
            order.payment_complete(reference_id or "", status=config.state_payment_received)
            if offer is not None:
                offer.receive_payment(reference_id or "")
        elif status == CallbackStatus.CANCELLED:
            order.update_status(config.state_cancelled, note=CANCELLED_NOTE)
            if offer is not None:
                offer.cancel()
        else:
            order.update_status(config.state_timed_out, note=TIMED_OUT_NOTE)
            if offer is not None:
                offer.time_out()

        if offer is not None:
            offer.save()
