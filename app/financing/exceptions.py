"""
Financing-specific exceptions.

Exception Hierarchy:
    OfferRequestError (ExternalServiceError) - No offer obtained from the provider
    ├── ProviderTransportError - Network failure or timeout (transient)
    ├── MalformedProviderResponseError - Unparseable or incomplete response
    └── OfferDeclinedError - Provider answered but refused the offer

    CallbackError - Base for inbound callback failures
    ├── InvalidCallbackPayloadError (ValidationError) - Bad body (400)
    ├── CallbackVerificationError (PermissionDeniedError) - Hash mismatch (403)
    ├── CallbackOrderNotFoundError (NotFoundError) - No order for usage (400)
    ├── UnknownCallbackStatusError (ValidationError) - Unknown status (400)
    └── OrderStateError (ConflictError) - State write failed (503, retryable)

Every CallbackError carries the HTTP status the callback endpoint
answers with, so the view maps errors to responses in one place.

Usage:
    from financing.exceptions import CallbackError, OfferRequestError

    try:
        CallbackService.process(request.body)
    except CallbackError as e:
        return JsonResponse({"success": False}, status=e.status_code)
"""

from __future__ import annotations

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


# =============================================================================
# Outbound offer request
# =============================================================================


class OfferRequestError(ExternalServiceError):
    """
    Raised when no registration URL could be obtained.

    Nothing is written to the order when this is raised.

    Attributes:
        is_retryable: Whether a later attempt may succeed
    """

    default_error_code: str = "OFFER_REQUEST_FAILED"
    is_retryable: bool = False


class ProviderTransportError(OfferRequestError):
    """Connection error, timeout or TLS failure talking to the provider."""

    default_error_code: str = "PROVIDER_UNAVAILABLE"
    is_retryable: bool = True


class MalformedProviderResponseError(OfferRequestError):
    """
    Provider response could not be used.

    Use for:
    - Body that is not JSON or not a JSON object
    - Missing or empty url
    - url that is not a safe http(s) URL after sanitizing
    """

    default_error_code: str = "MALFORMED_PROVIDER_RESPONSE"


class OfferDeclinedError(OfferRequestError):
    """Provider returned a non-success answer (non-2xx or success is not true)."""

    default_error_code: str = "OFFER_DECLINED"


# =============================================================================
# Inbound callbacks
# =============================================================================


class CallbackError(BaseApplicationError):
    """
    Base exception for callback processing failures.

    Attributes:
        status_code: HTTP status returned to the provider
        is_retryable: Whether the provider may redeliver successfully
    """

    default_error_code: str = "CALLBACK_ERROR"
    status_code: int = 400
    is_retryable: bool = False


class InvalidCallbackPayloadError(CallbackError, ValidationError):
    """Callback body is empty, not JSON, or not a non-empty JSON object."""

    default_error_code: str = "INVALID_CALLBACK_PAYLOAD"


class CallbackVerificationError(CallbackError, PermissionDeniedError):
    """Callback hash does not match the expected value."""

    default_error_code: str = "VERIFICATION_FAILED"
    status_code: int = 403


class CallbackOrderNotFoundError(CallbackError, NotFoundError):
    """No single order carries the callback's usage token."""

    default_error_code: str = "ORDER_NOT_FOUND"


class UnknownCallbackStatusError(CallbackError, ValidationError):
    """Callback status is not one of SUCCESS, CANCELLED, TIMEOUT."""

    default_error_code: str = "UNKNOWN_CALLBACK_STATUS"


class OrderStateError(CallbackError, ConflictError):
    """
    Order state could not be persisted.

    The transaction was rolled back and correlation metadata is intact,
    so the provider can redeliver the callback.
    """

    default_error_code: str = "ORDER_STATE_WRITE_FAILED"
    status_code: int = 503
    is_retryable: bool = True


__all__ = [
    "OfferRequestError",
    "ProviderTransportError",
    "MalformedProviderResponseError",
    "OfferDeclinedError",
    "CallbackError",
    "InvalidCallbackPayloadError",
    "CallbackVerificationError",
    "CallbackOrderNotFoundError",
    "UnknownCallbackStatusError",
    "OrderStateError",
]
