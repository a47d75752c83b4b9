"""
Adapters for the external financing provider.

All provider API calls go through these adapters to ensure consistent
error handling, timeouts and observability.

Usage:
    from financing.adapters import FinancingProviderAdapter, FinancingRequest

    response = FinancingProviderAdapter(config).request_offer(request)
"""

from financing.adapters.provider_adapter import (
    BasketItem,
    CartSnapshot,
    FinancingProviderAdapter,
    FinancingRequest,
    FinancingResponse,
    to_wire_amount,
)

__all__ = [
    "BasketItem",
    "CartSnapshot",
    "FinancingProviderAdapter",
    "FinancingRequest",
    "FinancingResponse",
    "to_wire_amount",
]
