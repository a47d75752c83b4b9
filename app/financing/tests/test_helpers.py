"""
Tests for financing helper functions.

Covers usage token construction, URL sanitizing, registration URL
encoding, callback URLs and locale selection.
"""

import pytest

from financing.conf import FinancingConfig
from financing.helpers import (
    build_callback_url,
    build_usage_token,
    decode_registration_url,
    encode_registration_url,
    format_order_number,
    get_provider_locale,
    sanitize_redirect_url,
)


def prefixed_order_number(order):
    return f"WEB-{order.number}"


# =============================================================================
# Usage Token
# =============================================================================


class TestBuildUsageToken:
    """Tests for build_usage_token."""

    def test_simple_prefix(self):
        assert build_usage_token("Order", "1042") == "Order-1042"

    def test_whitespace_becomes_hyphens(self):
        """Each whitespace character maps to one hyphen."""
        assert build_usage_token("My  Shop", "1042") == "My--Shop-1042"

    def test_prefix_is_trimmed(self):
        assert build_usage_token("  My Shop\t", "1042") == "My-Shop-1042"

    def test_tabs_and_newlines(self):
        assert build_usage_token("A\tB\nC", "7") == "A-B-C-7"

    def test_long_prefix_is_truncated(self):
        """Overlong tokens cut the prefix, never the order number."""
        token = build_usage_token("P" * 300, "1042")

        assert len(token) == 255
        assert token.endswith("-1042")
        assert token == "P" * 250 + "-1042"

    def test_exact_limit_is_kept(self):
        token = build_usage_token("P" * 250, "1042")

        assert len(token) == 255
        assert token == "P" * 250 + "-1042"

    def test_suffix_never_truncated(self):
        """Even an order number close to the limit survives whole."""
        order_number = "9" * 254
        token = build_usage_token("Order", order_number)

        assert token.endswith(order_number)
        assert len(token) == 255

    @pytest.mark.parametrize("prefix", ["Order", "My Shop", "x" * 400, ""])
    @pytest.mark.parametrize("order_number", ["1", "1042", "2026-000001"])
    def test_length_never_exceeds_limit(self, prefix, order_number):
        token = build_usage_token(prefix, order_number)

        assert len(token) <= 255
        assert token.endswith(f"-{order_number}")


class TestFormatOrderNumber:
    """Tests for the optional order number formatter."""

    def test_defaults_to_order_number(self, order):
        assert format_order_number(order, FinancingConfig()) == "1042"

    def test_uses_configured_formatter(self, order):
        config = FinancingConfig(
            order_number_formatter="financing.tests.test_helpers.prefixed_order_number",
        )

        assert format_order_number(order, config) == "WEB-1042"


# =============================================================================
# URLs
# =============================================================================


class TestSanitizeRedirectUrl:
    """Tests for sanitize_redirect_url."""

    def test_keeps_safe_url(self):
        url = "https://backend.test-financeabike.de/register?token=abc&step=1"

        assert sanitize_redirect_url(url) == url

    def test_strips_whitespace(self):
        assert sanitize_redirect_url("  https://example.com/a  ") == "https://example.com/a"

    def test_escapes_unsafe_characters(self):
        assert sanitize_redirect_url("https://example.com/a b/ü") == (
            "https://example.com/a%20b/%C3%BC"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "javascript:alert(1)",
            "ftp://example.com/file",
            "//example.com/path",
            "/relative/path",
            "https://",
            "https://example.com/\x00evil",
            "",
            "   ",
            None,
            42,
        ],
    )
    def test_rejects_unsafe_urls(self, url):
        assert sanitize_redirect_url(url) == ""


class TestRegistrationUrlEncoding:
    """Tests for the base64 metadata encoding."""

    def test_encoded_value_is_base64(self):
        assert encode_registration_url("https://example.com/") == "aHR0cHM6Ly9leGFtcGxlLmNvbS8="

    def test_decode(self):
        assert decode_registration_url("aHR0cHM6Ly9leGFtcGxlLmNvbS8=") == "https://example.com/"

    @pytest.mark.parametrize("value", [None, "", "not base64!", "////"])
    def test_decode_invalid_values(self, value):
        assert decode_registration_url(value) == ""


class TestBuildCallbackUrl:
    """Tests for build_callback_url."""

    def test_default_parameter(self):
        config = FinancingConfig(site_url="https://shop.example")

        assert build_callback_url(config) == "https://shop.example/?gateway-api=financing"

    def test_forces_https(self):
        config = FinancingConfig(site_url="http://shop.example/store")

        assert build_callback_url(config) == "https://shop.example/store?gateway-api=financing"

    def test_custom_parameter(self):
        config = FinancingConfig(site_url="https://shop.example", callback_query_param="wc-api")

        assert build_callback_url(config, "financeabike") == (
            "https://shop.example/?wc-api=financeabike"
        )


# =============================================================================
# Locale
# =============================================================================


class TestGetProviderLocale:
    """Tests for get_provider_locale."""

    @pytest.mark.parametrize("code", ["de", "de-DE", "de_AT", "de-ch", "de_CH"])
    def test_german(self, code):
        assert get_provider_locale(code) == "de"

    @pytest.mark.parametrize("code", ["en", "en-us", "fr", "dee", "de-ABCD", "", None])
    def test_other_languages(self, code):
        assert get_provider_locale(code) == "en"
