"""
Pytest fixtures for financing tests.

Provides gateway configurations, orders in the states the gateway
produces, and helpers for building signed provider callbacks.

Usage:
    def test_success_callback(pending_order, signed_callback):
        body = signed_callback("SUCCESS", "R1", "Order-1042")
        CallbackService.process(body)
"""

import json
import logging
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from financing.conf import FinancingConfig
from financing.tests.factories import pending_financing_order
from financing.verification import generate_verification_hash
from orders.tests.factories import OrderFactory, OrderLineItemFactory


SECRET_KEY = "partner-secret"
API_KEY = "partner-api-key"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def financing_options():
    """Option dict as found in settings.FINANCING for an enabled test-mode gateway."""
    return {
        "ENABLED": True,
        "API_KEY": API_KEY,
        "SECRET_KEY": SECRET_KEY,
        "MODE": "test",
        "SITE_URL": "https://shop.example",
    }


@pytest.fixture
def financing_settings(settings, financing_options):
    """Install the enabled test-mode configuration into Django settings."""
    settings.FINANCING = financing_options
    settings.SECURE_SSL_REDIRECT = False
    settings.STORE_CURRENCY = "EUR"
    settings.SITE_URL = "https://shop.example"
    return settings


@pytest.fixture
def config(financing_options):
    """Enabled test-mode configuration with default bounds."""
    return FinancingConfig.from_settings(financing_options)


@pytest.fixture
def live_config(financing_options):
    return FinancingConfig.from_settings({**financing_options, "MODE": "live"})


@pytest.fixture
def financing_caplog(caplog):
    """caplog attached to the financing logger, which does not propagate."""
    logger = logging.getLogger("financing")
    previous_level = logger.level
    logger.addHandler(caplog.handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)
        logger.setLevel(previous_level)


# =============================================================================
# Order Fixtures
# =============================================================================


@pytest.fixture
def order(db):
    """Order 1042 over 650.00 EUR billed to Germany with one line item."""
    order = OrderFactory(
        number="1042",
        total=Decimal("650.00"),
        shipping_total=Decimal("4.90"),
    )
    OrderLineItemFactory(order=order, name="City E-Bike", quantity=1, total=Decimal("645.10"))
    return order


@pytest.fixture
def pending_order(db):
    """Order 1042 as left by a successful offer request."""
    return pending_financing_order(number="1042")


# =============================================================================
# Callback Helpers
# =============================================================================


@pytest.fixture
def signed_callback():
    """Build a JSON callback body with a valid verification hash."""

    def build(status, reference_id, usage, secret=SECRET_KEY, **overrides):
        payload = {
            "status": status,
            "referenceId": reference_id,
            "usage": usage,
            "verificationHash": generate_verification_hash(secret, status, reference_id, usage),
        }
        payload.update(overrides)
        return json.dumps(payload).encode("utf-8")

    return build


# =============================================================================
# Provider Response Helpers
# =============================================================================


@pytest.fixture
def provider_response():
    """Build a fake requests.Response-like object."""

    def build(status_code=200, body=None, content=None):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        if content is None:
            content = json.dumps(body).encode("utf-8") if body is not None else b""
        response.content = content

        def parse_json():
            return json.loads(content)

        response.json.side_effect = parse_json
        return response

    return build
