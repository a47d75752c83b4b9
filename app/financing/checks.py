"""
System checks for the financing gateway configuration.

Run with ``manage.py check --tag financing``. Checks report problems an
operator has to fix before the gateway can be offered:

    financing.E001 - Configuration invalid
    financing.E002 - Gateway enabled without API key or secret key
    financing.E003 - Live mode on an insecure site (gateway disabled)
    financing.E004 - Configured order status unknown to the storefront
    financing.W001 - Store currency differs from the financing currency
    financing.W002 - Test mode on an insecure site
"""

from __future__ import annotations

from django.conf import settings
from django.core import checks
from django.core.exceptions import ImproperlyConfigured

from financing.conf import FinancingConfig
from financing.helpers import is_secure_url


@checks.register("financing")
def check_financing_configuration(app_configs=None, **kwargs):
    try:
        config = FinancingConfig.from_settings()
    except ImproperlyConfigured as e:
        return [
            checks.Error(
                f"Financing configuration is invalid: {e}",
                hint="Fix the FINANCING_* environment variables.",
                id="financing.E001",
            )
        ]

    errors = []

    if config.enabled and not (config.api_key and config.secret_key):
        errors.append(
            checks.Error(
                "The financing gateway is enabled but the API key or secret key is missing.",
                hint="Set FINANCING_API_KEY and FINANCING_SECRET_KEY.",
                id="financing.E002",
            )
        )

    store_currency = getattr(settings, "STORE_CURRENCY", config.currency)
    if store_currency.upper() != config.currency:
        errors.append(
            checks.Warning(
                f"The store currency is {store_currency} but financing requires "
                f"{config.currency}; the gateway will not be offered.",
                id="financing.W001",
            )
        )

    insecure = (
        not is_secure_url(config.site_url)
        and not config.allow_insecure
        and not getattr(settings, "SECURE_SSL_REDIRECT", False)
    )
    if insecure and config.is_live:
        errors.append(
            checks.Error(
                "The site is not served over HTTPS; the financing gateway is "
                "disabled in live mode.",
                hint="Serve the site over HTTPS or set SECURE_SSL_REDIRECT.",
                id="financing.E003",
            )
        )
    elif insecure:
        errors.append(
            checks.Warning(
                "The site is not served over HTTPS. Test mode keeps the "
                "financing gateway available, live mode will disable it.",
                id="financing.W002",
            )
        )

    from orders.models import OrderStatus

    for option, value in config.host_statuses.items():
        if value not in OrderStatus.values:
            errors.append(
                checks.Error(
                    f"FINANCING['{option}'] is {value!r}, which is not an order status.",
                    hint=f"Use one of: {', '.join(OrderStatus.values)}.",
                    id="financing.E004",
                )
            )

    return errors
