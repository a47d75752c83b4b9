"""
End-to-end checkout flows through the HTTP surface.

Each scenario starts the financing checkout for a fresh order, lets the
provider (mocked at requests.post) hand out a registration URL and then
delivers the provider's signed callback to the site-root gateway route.
"""

import json
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.urls import reverse

from financing.conf import ORDER_META_URL, ORDER_META_USAGE
from financing.models import FinancingOffer
from financing.state_machines import FinancingState
from financing.tests.factories import REGISTRATION_URL
from orders.models import OrderStatus


POST_TARGET = "financing.adapters.provider_adapter.requests.post"


def start_checkout(api_client, order, provider_response):
    with patch(POST_TARGET) as mock_post:
        mock_post.return_value = provider_response(
            body={"success": True, "url": REGISTRATION_URL}
        )
        response = api_client.post(
            reverse("financing:process-payment", kwargs={"order_id": order.pk}),
            {"order_key": order.order_key},
            format="json",
        )
    return response, mock_post


def deliver_callback(client, body):
    return client.post("/?gateway-api=financing", data=body, content_type="application/json")


@pytest.mark.usefixtures("financing_settings")
class TestFinancingCheckoutFlow:
    """Order 1042 over 650.00 EUR billed to Germany."""

    def test_eligible_before_checkout(self, api_client, order):
        response = api_client.get(
            "/api/v1/financing/eligibility/",
            {"amount": "650.00", "country": "DE", "currency": "EUR"},
            secure=True,
        )

        assert response.json()["eligible"] is True

    def test_successful_financing(
        self, api_client, client, order, provider_response, signed_callback
    ):
        response, mock_post = start_checkout(api_client, order, provider_response)

        assert response.status_code == 200
        assert response.json()["registration_url"] == REGISTRATION_URL

        payload = mock_post.call_args.kwargs["json"]
        assert payload["usage"] == "Order-1042"
        assert payload["amount"] == 650.0
        assert payload["callbackUrl"] == "https://shop.example/?gateway-api=financing"
        assert payload["basket"] == [
            {"description": "City E-Bike", "amount": 645.1, "times": 1},
            {"description": "Shipping costs", "amount": 4.9, "times": 1},
        ]

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert order.get_meta(ORDER_META_USAGE) == "Order-1042"
        assert order.has_meta(ORDER_META_URL)

        callback = deliver_callback(client, signed_callback("SUCCESS", "R1", "Order-1042"))

        assert callback.status_code == 200
        assert json.loads(callback.content) == {"success": True}

        order.refresh_from_db()
        assert order.status == OrderStatus.PROCESSING
        assert order.transaction_id == "R1"
        assert order.date_paid is not None
        assert not order.has_meta(ORDER_META_USAGE)
        assert not order.has_meta(ORDER_META_URL)

        offer = FinancingOffer.objects.get(order=order)
        assert offer.state == FinancingState.PAYMENT_RECEIVED
        assert offer.amount == Decimal("650.00")

        notes = list(order.notes.order_by("created_at").values_list("note", flat=True))
        assert notes[0].startswith("Customer still needs to verify.")
        assert notes[-1].startswith("Payment complete.")

        replay = deliver_callback(client, signed_callback("SUCCESS", "R1", "Order-1042"))
        assert replay.status_code == 400

    def test_expired_financing(
        self, api_client, client, order, provider_response, signed_callback
    ):
        response, _ = start_checkout(api_client, order, provider_response)
        assert response.status_code == 200

        callback = deliver_callback(client, signed_callback("TIMEOUT", "", "Order-1042"))

        assert callback.status_code == 200
        order.refresh_from_db()
        assert order.status == OrderStatus.FAILED
        assert order.transaction_id == ""
        assert order.date_paid is None
        assert order.metadata == {}
        assert order.notes.order_by("-created_at").first().note.startswith("Order expired.")
        assert FinancingOffer.objects.get(order=order).state == FinancingState.TIMED_OUT

    def test_forged_callback_leaves_order_pending(
        self, api_client, client, order, provider_response, signed_callback
    ):
        start_checkout(api_client, order, provider_response)

        callback = deliver_callback(
            client, signed_callback("SUCCESS", "R1", "Order-1042", secret="guessed")
        )

        assert callback.status_code == 403
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert order.get_meta(ORDER_META_USAGE) == "Order-1042"
