"""
Helper functions for the financing gateway.

Pure functions with no database access:
- Usage token construction
- Redirect URL sanitizing
- Registration URL encoding for metadata storage
- Callback URL construction
- Provider locale selection
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import TYPE_CHECKING
from urllib.parse import urlencode, urlsplit, urlunsplit

from django.utils.encoding import iri_to_uri

from financing.conf import GATEWAY_ID, USAGE_MAX_LENGTH

if TYPE_CHECKING:
    from typing import Any

    from financing.conf import FinancingConfig


_WHITESPACE_RE = re.compile(r"\s")
_GERMAN_LOCALE_RE = re.compile(r"^de([_-][A-Z]{1,3})?$", re.IGNORECASE)
_ALLOWED_URL_SCHEMES = {"http", "https"}


# =============================================================================
# Usage token
# =============================================================================


def build_usage_token(prefix: str, order_number: str) -> str:
    """
    Build the usage token correlating an offer with its callback.

    The prefix is trimmed and each whitespace character becomes a hyphen.
    Tokens longer than USAGE_MAX_LENGTH are shortened by cutting the end
    of the prefix; the order number suffix is always kept whole.

    Args:
        prefix: Configured usage prefix
        order_number: Formatted order number

    Returns:
        "<prefix>-<order_number>"

    Example:
        >>> build_usage_token(" My  Shop ", "1042")
        'My--Shop-1042'
    """
    clean_prefix = _WHITESPACE_RE.sub("-", prefix.strip())
    order_number = str(order_number)

    overflow = len(clean_prefix) + 1 + len(order_number) - USAGE_MAX_LENGTH
    if overflow > 0:
        clean_prefix = clean_prefix[: max(len(clean_prefix) - overflow, 0)]

    return f"{clean_prefix}-{order_number}"


def format_order_number(order: Any, config: FinancingConfig) -> str:
    """
    Return the order number as shown to the provider.

    Uses the configured formatter callable when one is set, the order's
    own number otherwise.
    """
    formatter = config.get_order_number_formatter()
    if formatter is not None:
        return str(formatter(order))
    return str(order.number)


# =============================================================================
# URLs
# =============================================================================


def sanitize_redirect_url(url: Any) -> str:
    """
    Clean a provider-supplied URL before it is stored or redirected to.

    Only absolute http(s) URLs with a host survive. Non-ASCII characters
    and unsafe bytes are percent-encoded.

    Returns:
        The sanitized URL, or "" when the URL is unusable
    """
    if not isinstance(url, str):
        return ""

    url = url.strip()
    if not url or any(ord(char) < 32 for char in url):
        return ""

    try:
        parts = urlsplit(url)
    except ValueError:
        return ""

    if parts.scheme.lower() not in _ALLOWED_URL_SCHEMES or not parts.netloc:
        return ""

    return iri_to_uri(urlunsplit(parts))


def encode_registration_url(url: str) -> str:
    """Encode a registration URL for metadata storage."""
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


def decode_registration_url(value: str | None) -> str:
    """
    Decode a stored registration URL.

    Returns:
        The URL, or "" when the value is missing or not valid base64
    """
    if not value:
        return ""
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return ""


def build_callback_url(config: FinancingConfig, gateway_id: str = GATEWAY_ID) -> str:
    """
    Build the URL the provider posts callbacks to.

    The site URL is forced to https; the gateway is selected through the
    configured query parameter.

    Example:
        >>> build_callback_url(config)
        'https://shop.example/?gateway-api=financing'
    """
    parts = urlsplit(config.site_url.strip())
    path = parts.path or "/"
    query = urlencode({config.callback_query_param: gateway_id})
    return urlunsplit(("https", parts.netloc, path, query, ""))


def is_secure_url(url: str) -> bool:
    """Check whether a URL uses https."""
    return urlsplit(url.strip()).scheme.lower() == "https"


# =============================================================================
# Locale
# =============================================================================


def get_provider_locale(language_code: str | None) -> str:
    """
    Select the provider widget locale.

    German language codes (de, de-DE, de_AT, de-ch) map to "de",
    everything else to "en".
    """
    if language_code and _GERMAN_LOCALE_RE.match(language_code):
        return "de"
    return "en"
