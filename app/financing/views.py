"""
Views for the financing gateway.

This module provides:
- The provider callback endpoint (plain Django view, CSRF exempt)
- The gateway router for ``/?<param>=<gateway id>`` callback URLs
- DRF checkout API views returning plain data for the UI layer

Related files:
    - gateway.py: FinancingGateway facade
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Endpoints:
    POST /api/v1/financing/callback/ - Provider callback
    POST /?gateway-api=financing - Provider callback (gateway router)
    GET /api/v1/financing/eligibility/ - Eligibility and widget data
    POST /api/v1/financing/orders/<id>/pay/ - Start financing checkout
    GET /api/v1/financing/orders/<id>/checkout-context/ - Post-checkout data

Security:
    - Callbacks are authenticated by their verification hash
    - Order endpoints require the order's guest access key
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils import translation
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from financing.adapters import CartSnapshot
from financing.conf import GATEWAY_ID, ORDER_META_URL, get_config
from financing.gateway import FinancingGateway
from financing.helpers import decode_registration_url, get_provider_locale
from financing.repositories import DjangoOrderRepository

from .serializers import (
    CheckoutContextSerializer,
    EligibilityQuerySerializer,
    EligibilitySerializer,
    ProcessPaymentSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Provider callbacks
# =============================================================================


@csrf_exempt
def financing_callback(request: HttpRequest) -> HttpResponse:
    """
    Receive a financing outcome from the provider.

    Body:
        {"status": "SUCCESS"|"CANCELLED"|"TIMEOUT", "referenceId": "...",
         "usage": "...", "verificationHash": "..."}

    Returns:
        JsonResponse with status:
        - 200: Transition applied, body {"success": true}
        - 400: Malformed body, unknown order or unknown status
        - 403: Verification failed
        - 405: Not a POST request
        - 503: Order state could not be written, redeliver later
    """
    if request.method != "POST":
        response = JsonResponse({"success": False}, status=405)
        response["Allow"] = "POST"
        return response

    status_code, body = FinancingGateway().handle_callback(request.body)
    return JsonResponse(body, status=status_code)


@csrf_exempt
def gateway_api(request: HttpRequest) -> HttpResponse:
    """
    Dispatch ``?<callback param>=<gateway id>`` requests to the gateway.

    Callback URLs sent to the provider point at the site root with the
    gateway selected by query parameter.
    """
    config = get_config()
    gateway_id = request.GET.get(config.callback_query_param, "")

    if gateway_id == GATEWAY_ID:
        return financing_callback(request)

    logger.info(
        "Gateway API request for unknown gateway",
        extra={"gateway_id": gateway_id[:64]},
    )
    return JsonResponse({"success": False}, status=404)


# =============================================================================
# Checkout API
# =============================================================================


class EligibilityView(APIView):
    """
    Check whether financing can be offered.

    GET /api/v1/financing/eligibility/?amount=650.00&country=DE&currency=EUR

    Returns:
        {"eligible": true, "reasons": [], "warnings": [], "within_bounds": true,
         "widget": {"api_key": "...", "mode": "test", "locale": "de", "amount": "650.00"}}
    """

    permission_classes = [AllowAny]

    def get(self, request):
        query = EligibilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        gateway = FinancingGateway()
        config = gateway.config
        result = gateway.evaluate(
            params["amount"],
            params["country"] or None,
            request.is_secure(),
            params["currency"] or getattr(settings, "STORE_CURRENCY", config.currency),
            is_admin=bool(request.user and request.user.is_staff),
        )

        serializer = EligibilitySerializer(
            {
                "eligible": result.eligible,
                "reasons": result.reasons,
                "warnings": result.warnings,
                "within_bounds": gateway.evaluator.is_within_bounds(params["amount"]),
                "widget": {
                    "api_key": config.api_key,
                    "mode": config.mode,
                    "locale": get_provider_locale(translation.get_language()),
                    "amount": params["amount"],
                },
            }
        )
        return Response(serializer.data)


class OrderAccessMixin:
    """Resolve an order from the URL and check its guest access key."""

    def get_order(self, order_id, order_key: str):
        order = DjangoOrderRepository().get(order_id)
        if order is None or not constant_time_compare(order.order_key, order_key or ""):
            return None
        return order


class ProcessPaymentView(OrderAccessMixin, APIView):
    """
    Start the financing checkout for an order.

    POST /api/v1/financing/orders/<id>/pay/

    Request body:
        {"order_key": "order_...", "total": "650.00", "shipping_total": "4.90"}

    Returns:
        200 {"result": "success", "redirect": "...", "registration_url": "..."}
        400 order not eligible
        404 unknown order or wrong key
        409 order already paid
        502 {"result": "failure", "message": "..."} provider failure
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, order_id):
        serializer = ProcessPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = self.get_order(order_id, data["order_key"])
        if order is None:
            return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)

        if order.date_paid is not None:
            return Response({"detail": "Order is already paid."}, status=status.HTTP_409_CONFLICT)

        cart = None
        if "total" in data:
            cart = CartSnapshot(
                total=data["total"],
                shipping_total=data.get("shipping_total", order.shipping_total),
            )

        gateway = FinancingGateway()
        eligibility = gateway.evaluate(
            cart.total if cart is not None else order.total,
            order.billing_country or None,
            request.is_secure(),
            order.currency,
        )
        if not eligibility.eligible:
            return Response(
                {"result": "failure", "reasons": eligibility.reasons},
                status=status.HTTP_400_BAD_REQUEST,
            )

        checkout = gateway.process_payment(order, cart)
        if checkout["result"] != "success":
            return Response(checkout, status=status.HTTP_502_BAD_GATEWAY)
        return Response(checkout)


class CheckoutContextView(OrderAccessMixin, APIView):
    """
    Post-checkout data for an order awaiting financing.

    GET /api/v1/financing/orders/<id>/checkout-context/?key=order_...

    Returns:
        {"order_id": 1, "api_key": "...", "mode": "test", "locale": "en",
         "purchase_url": "https://..."}
        404 when the order is unknown, the key is wrong or no offer is pending
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, order_id):
        order = self.get_order(order_id, request.query_params.get("key", ""))
        if order is None or order.payment_method != GATEWAY_ID:
            return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)

        purchase_url = decode_registration_url(order.get_meta(ORDER_META_URL))
        if not purchase_url:
            return Response(
                {"detail": "No financing pending for this order."},
                status=status.HTTP_404_NOT_FOUND,
            )

        config = get_config()
        serializer = CheckoutContextSerializer(
            {
                "order_id": order.pk,
                "api_key": config.api_key,
                "mode": config.mode,
                "locale": get_provider_locale(translation.get_language()),
                "purchase_url": purchase_url,
            }
        )
        return Response(serializer.data)
