"""
Tests for OfferService.

The provider adapter is replaced with a mock; order persistence runs
against the test database.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from financing.adapters import CartSnapshot, FinancingProviderAdapter, FinancingResponse
from financing.conf import GATEWAY_ID, ORDER_META_URL, ORDER_META_USAGE, FinancingConfig
from financing.exceptions import (
    MalformedProviderResponseError,
    OfferDeclinedError,
    ProviderTransportError,
)
from financing.helpers import decode_registration_url, encode_registration_url
from financing.models import FinancingOffer
from financing.services import OfferService
from financing.services.offer_service import PENDING_NOTE
from financing.state_machines import FinancingState
from orders.models import OrderStatus


REGISTRATION_URL = "https://backend.test-financeabike.de/register/abc123"


def make_adapter(url=REGISTRATION_URL, error=None):
    adapter = MagicMock(spec=FinancingProviderAdapter)
    if error is not None:
        adapter.request_offer.side_effect = error
    else:
        adapter.request_offer.return_value = FinancingResponse(
            url=url,
            raw_response={"success": True, "url": url},
        )
    return adapter


@pytest.fixture
def on_hold_order(order):
    order.status = OrderStatus.ON_HOLD
    order.save()
    return order


class TestCreateOfferSuccess:
    """Successful offer creation."""

    def test_returns_registration_url(self, on_hold_order, config):
        result = OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())

        assert result.success is True
        assert result.data == REGISTRATION_URL

    def test_writes_exactly_two_metadata_keys(self, on_hold_order, config):
        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())

        on_hold_order.refresh_from_db()
        assert on_hold_order.metadata == {
            ORDER_META_USAGE: "Order-1042",
            ORDER_META_URL: encode_registration_url(REGISTRATION_URL),
        }
        assert decode_registration_url(on_hold_order.get_meta(ORDER_META_URL)) == REGISTRATION_URL

    def test_moves_order_to_pending_with_note(self, on_hold_order, config):
        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())

        on_hold_order.refresh_from_db()
        assert on_hold_order.status == OrderStatus.PENDING
        assert on_hold_order.payment_method == GATEWAY_ID
        assert on_hold_order.notes.get().note.startswith(PENDING_NOTE)

    def test_caller_instance_is_refreshed(self, on_hold_order, config):
        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())

        assert on_hold_order.get_meta(ORDER_META_USAGE) == "Order-1042"
        assert on_hold_order.status == OrderStatus.PENDING

    def test_records_pending_offer(self, on_hold_order, config):
        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())

        offer = FinancingOffer.objects.get(order=on_hold_order)
        assert offer.usage == "Order-1042"
        assert offer.registration_url == REGISTRATION_URL
        assert offer.amount == Decimal("650.00")
        assert offer.mode == "test"
        assert offer.state == FinancingState.PENDING_FUNDING

    def test_configured_pending_status(self, on_hold_order, financing_options):
        config = FinancingConfig.from_settings(
            {**financing_options, "STATE_PENDING_PAYMENT": OrderStatus.ON_HOLD}
        )

        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())

        on_hold_order.refresh_from_db()
        assert on_hold_order.status == OrderStatus.ON_HOLD

    def test_custom_usage_prefix(self, on_hold_order, financing_options):
        config = FinancingConfig.from_settings({**financing_options, "USAGE_PREFIX": "Bike Shop"})
        adapter = make_adapter()

        OfferService.create_offer(on_hold_order, config=config, adapter=adapter)

        sent = adapter.request_offer.call_args.args[0]
        assert sent.usage == "Bike-Shop-1042"
        on_hold_order.refresh_from_db()
        assert on_hold_order.get_meta(ORDER_META_USAGE) == "Bike-Shop-1042"

    def test_request_uses_cart_and_callback_url(self, on_hold_order, config):
        adapter = make_adapter()
        cart = CartSnapshot(total=Decimal("655.00"), shipping_total=Decimal("9.90"))

        OfferService.create_offer(on_hold_order, cart, config=config, adapter=adapter)

        sent = adapter.request_offer.call_args.args[0]
        assert sent.amount == 655.0
        assert sent.callbackUrl == "https://shop.example/?gateway-api=financing"
        assert FinancingOffer.objects.get(order=on_hold_order).amount == Decimal("655.00")

    def test_repeat_offer_refreshes_pending_offer(self, on_hold_order, config):
        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter())
        second_url = "https://backend.test-financeabike.de/register/def456"

        result = OfferService.create_offer(
            on_hold_order, config=config, adapter=make_adapter(url=second_url)
        )

        assert result.data == second_url
        offer = FinancingOffer.objects.get(order=on_hold_order)
        assert offer.registration_url == second_url
        on_hold_order.refresh_from_db()
        assert decode_registration_url(on_hold_order.get_meta(ORDER_META_URL)) == second_url

    def test_uses_requests_adapter_by_default(self, on_hold_order, config, provider_response):
        with patch("financing.adapters.provider_adapter.requests.post") as mock_post:
            mock_post.return_value = provider_response(
                body={"success": True, "url": REGISTRATION_URL}
            )

            result = OfferService.create_offer(on_hold_order, config=config)

        assert result.success
        assert mock_post.call_args.kwargs["json"]["usage"] == "Order-1042"


class TestCreateOfferFailure:
    """Failures leave the order untouched."""

    @pytest.mark.parametrize(
        "error,error_code",
        [
            (ProviderTransportError("down"), "PROVIDER_UNAVAILABLE"),
            (OfferDeclinedError("declined"), "OFFER_DECLINED"),
            (MalformedProviderResponseError("bad body"), "MALFORMED_PROVIDER_RESPONSE"),
        ],
    )
    def test_failure_result(self, on_hold_order, config, error, error_code):
        result = OfferService.create_offer(
            on_hold_order, config=config, adapter=make_adapter(error=error)
        )

        assert result.success is False
        assert result.error_code == error_code

    @pytest.mark.parametrize(
        "error",
        [
            ProviderTransportError("down"),
            OfferDeclinedError("declined"),
            MalformedProviderResponseError("bad body"),
        ],
    )
    def test_order_is_not_modified(self, on_hold_order, config, error):
        OfferService.create_offer(on_hold_order, config=config, adapter=make_adapter(error=error))

        on_hold_order.refresh_from_db()
        assert on_hold_order.metadata == {}
        assert on_hold_order.status == OrderStatus.ON_HOLD
        assert on_hold_order.payment_method == ""
        assert not on_hold_order.notes.exists()
        assert not FinancingOffer.objects.exists()

    def test_unexpected_errors_propagate(self, on_hold_order, config):
        with pytest.raises(RuntimeError):
            OfferService.create_offer(
                on_hold_order, config=config, adapter=make_adapter(error=RuntimeError("boom"))
            )

        on_hold_order.refresh_from_db()
        assert on_hold_order.metadata == {}
