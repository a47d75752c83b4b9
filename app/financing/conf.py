"""
Configuration for the financing gateway.

All options live in ``settings.FINANCING`` (a dict populated from
``FINANCING_*`` environment variables in config/settings.py). They are
mapped onto the frozen FinancingConfig dataclass by a single explicit
step, FinancingConfig.from_settings(), which validates every value.

Options:
    ENABLED: Whether the gateway is offered at all
    API_KEY: Partner API key (public, used by provider widgets)
    SECRET_KEY: Partner secret (sent as partnerKey, used for callback hashes)
    MODE: "live" or "test"
    ALLOW_INSECURE: Keep the gateway available without HTTPS
    USAGE_PREFIX: Prefix of the usage token, order number is appended
    VALIDITY_DAYS: How long the customer can complete the financing
    CURRENCY: The only currency the provider accepts
    MIN_AMOUNT / MAX_AMOUNT: Inclusive amount bounds (0 disables a side)
    ALLOWED_COUNTRIES: Billing countries the provider accepts
    STATE_PENDING_PAYMENT: Order status once the offer was created
    STATE_PAYMENT_RECEIVED: Order status once financing succeeded
    STATE_CANCELLED: Order status when the customer cancelled financing
    STATE_TIMED_OUT: Order status when the validity period expired
    LIVE_BASE_URL / TEST_BASE_URL: Provider REST hosts
    SITE_URL: Public base URL of the shop (callback URL base)
    CALLBACK_QUERY_PARAM: Query parameter identifying the gateway on callbacks
    TIMEOUT_SECONDS: Timeout for the outbound offer request
    ORDER_NUMBER_FORMATTER: Optional dotted path to ``callable(order) -> str``

Usage:
    from financing.conf import get_config

    config = get_config()
    if config.is_live:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from financing.state_machines import GatewayMode

if TYPE_CHECKING:
    from typing import Any, Callable


GATEWAY_ID = "financing"

# Provider endpoint for creating an offer, relative to the mode's base URL
OFFER_REQUEST_PATH = "backend/urlreferral/url"

# Order metadata keys; both are written and removed together
ORDER_META_USAGE = "financing_usage"
ORDER_META_URL = "financing_register_url"

USAGE_MAX_LENGTH = 255


@dataclass(frozen=True)
class FinancingConfig:
    """
    Validated gateway configuration.

    Instances are immutable; build them with from_settings() or
    directly in tests.
    """

    enabled: bool = False
    api_key: str = ""
    secret_key: str = ""
    mode: str = GatewayMode.TEST
    allow_insecure: bool = False
    usage_prefix: str = "Order"
    validity_days: int = 3
    currency: str = "EUR"
    min_amount: Decimal = Decimal("500")
    max_amount: Decimal = Decimal("12000")
    allowed_countries: frozenset[str] = field(default_factory=lambda: frozenset({"DE"}))
    state_pending_payment: str = "pending"
    state_payment_received: str = "processing"
    state_cancelled: str = "cancelled"
    state_timed_out: str = "failed"
    live_base_url: str = "https://backend.financeabike.de/rest"
    test_base_url: str = "https://backend.test-financeabike.de"
    site_url: str = "https://localhost"
    callback_query_param: str = "gateway-api"
    timeout_seconds: float = 10.0
    order_number_formatter: str = ""

    def __post_init__(self) -> None:
        if self.mode not in GatewayMode.values:
            raise ImproperlyConfigured(
                f"FINANCING['MODE'] must be one of {GatewayMode.values}, got {self.mode!r}"
            )
        if self.min_amount < 0 or self.max_amount < 0:
            raise ImproperlyConfigured("FINANCING amount bounds must not be negative")
        if self.min_amount > 0 and self.max_amount > 0 and self.min_amount > self.max_amount:
            raise ImproperlyConfigured(
                "FINANCING['MIN_AMOUNT'] must not exceed FINANCING['MAX_AMOUNT']"
            )
        if self.validity_days < 1:
            raise ImproperlyConfigured("FINANCING['VALIDITY_DAYS'] must be at least 1")
        if self.timeout_seconds <= 0:
            raise ImproperlyConfigured("FINANCING['TIMEOUT_SECONDS'] must be positive")
        if len(self.currency) != 3:
            raise ImproperlyConfigured("FINANCING['CURRENCY'] must be an ISO 4217 code")

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def is_live(self) -> bool:
        return self.mode == GatewayMode.LIVE

    @property
    def base_url(self) -> str:
        """Provider REST host for the configured mode."""
        return self.live_base_url if self.is_live else self.test_base_url

    def get_url(self, path: str) -> str:
        """Join a provider path onto the mode's base URL."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @property
    def offer_request_url(self) -> str:
        return self.get_url(OFFER_REQUEST_PATH)

    @property
    def host_statuses(self) -> dict[str, str]:
        """Configured host statuses keyed by option name."""
        return {
            "STATE_PENDING_PAYMENT": self.state_pending_payment,
            "STATE_PAYMENT_RECEIVED": self.state_payment_received,
            "STATE_CANCELLED": self.state_cancelled,
            "STATE_TIMED_OUT": self.state_timed_out,
        }

    def get_order_number_formatter(self) -> Callable[[Any], str] | None:
        """Resolve the optional order-number formatter callable."""
        if not self.order_number_formatter:
            return None
        try:
            return import_string(self.order_number_formatter)
        except ImportError as e:
            raise ImproperlyConfigured(
                f"FINANCING['ORDER_NUMBER_FORMATTER'] could not be imported: {e}"
            ) from e

    # =========================================================================
    # Mapping from Django settings
    # =========================================================================

    @classmethod
    def from_settings(cls, options: dict[str, Any] | None = None) -> FinancingConfig:
        """
        Build the configuration from ``settings.FINANCING``.

        Args:
            options: Explicit option dict (defaults to settings.FINANCING)

        Returns:
            Validated FinancingConfig

        Raises:
            ImproperlyConfigured: Unknown option or invalid value
        """
        if options is None:
            options = getattr(settings, "FINANCING", {})

        unknown = set(options) - set(_OPTION_MAP)
        if unknown:
            raise ImproperlyConfigured(
                f"Unknown FINANCING option(s): {', '.join(sorted(unknown))}"
            )

        kwargs: dict[str, Any] = {}
        for option, (attribute, cast) in _OPTION_MAP.items():
            if option in options:
                try:
                    kwargs[attribute] = cast(options[option])
                except (TypeError, ValueError, InvalidOperation) as e:
                    raise ImproperlyConfigured(
                        f"Invalid value for FINANCING['{option}']: {options[option]!r}"
                    ) from e
        return cls(**kwargs)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _to_countries(value: Any) -> frozenset[str]:
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(country.strip().upper() for country in value if country.strip())


def _to_decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def _to_text(value: Any) -> str:
    return str(value).strip()


_OPTION_MAP: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "ENABLED": ("enabled", _to_bool),
    "API_KEY": ("api_key", _to_text),
    "SECRET_KEY": ("secret_key", _to_text),
    "MODE": ("mode", lambda value: _to_text(value).lower()),
    "ALLOW_INSECURE": ("allow_insecure", _to_bool),
    "USAGE_PREFIX": ("usage_prefix", str),
    "VALIDITY_DAYS": ("validity_days", int),
    "CURRENCY": ("currency", lambda value: _to_text(value).upper()),
    "MIN_AMOUNT": ("min_amount", _to_decimal),
    "MAX_AMOUNT": ("max_amount", _to_decimal),
    "ALLOWED_COUNTRIES": ("allowed_countries", _to_countries),
    "STATE_PENDING_PAYMENT": ("state_pending_payment", _to_text),
    "STATE_PAYMENT_RECEIVED": ("state_payment_received", _to_text),
    "STATE_CANCELLED": ("state_cancelled", _to_text),
    "STATE_TIMED_OUT": ("state_timed_out", _to_text),
    "LIVE_BASE_URL": ("live_base_url", _to_text),
    "TEST_BASE_URL": ("test_base_url", _to_text),
    "SITE_URL": ("site_url", _to_text),
    "CALLBACK_QUERY_PARAM": ("callback_query_param", _to_text),
    "TIMEOUT_SECONDS": ("timeout_seconds", float),
    "ORDER_NUMBER_FORMATTER": ("order_number_formatter", _to_text),
}


def get_config() -> FinancingConfig:
    """Return the configuration for the current settings."""
    return FinancingConfig.from_settings()
