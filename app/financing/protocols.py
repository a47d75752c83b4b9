"""
Protocol definitions for the host storefront consumed by the gateway.

The gateway never imports the storefront's query layer directly; it
talks to orders through these interfaces. financing.repositories
provides the implementation backed by orders.models.

Available Protocols:
    FinancingOrder: Order surface read and written by the gateway
    OrderRepository: Order lookups by id and by metadata

Usage:
    from financing.protocols import OrderRepository

    def find_order(repository: OrderRepository, usage: str):
        return repository.find_one_by_meta("financing_usage", usage)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable
    from decimal import Decimal
    from typing import Any


@runtime_checkable
class FinancingOrder(Protocol):
    """
    Order as seen by the gateway.

    Billing fields, totals and line items are read; status, payment
    reference and metadata are written.
    """

    pk: Any
    number: str
    status: str
    currency: str
    total: Decimal
    shipping_total: Decimal
    billing_email: str
    billing_phone: str
    billing_first_name: str
    billing_last_name: str
    billing_country: str
    billing_postcode: str
    billing_city: str
    billing_address_1: str

    def get_meta(self, key: str, default: Any = None) -> Any: ...

    def set_meta(self, key: str, value: Any, save: bool = True) -> None: ...

    def delete_meta(self, key: str, save: bool = True) -> None: ...

    def save(self, *args: Any, **kwargs: Any) -> None: ...

    def update_status(self, new_status: str, note: str = "", save: bool = True) -> None: ...

    def payment_complete(self, transaction_id: str, status: str = ..., save: bool = True) -> None: ...


@runtime_checkable
class OrderRepository(Protocol):
    """
    Protocol for order lookups.

    Example:
        class InMemoryOrders:
            def get(self, order_id, *, for_update=False): ...
            def find_by_meta(self, key, value, *, limit=2, for_update=False): ...
            def find_one_by_meta(self, key, value, *, for_update=False): ...
    """

    def get(self, order_id: Any, *, for_update: bool = False) -> FinancingOrder | None:
        """
        Get an order by primary key.

        Returns:
            The order, or None if it does not exist
        """
        ...

    def find_by_meta(
        self,
        key: str,
        value: Any,
        *,
        limit: int = 2,
        for_update: bool = False,
    ) -> Iterable[FinancingOrder]:
        """Find at most ``limit`` orders whose metadata ``key`` equals ``value``."""
        ...

    def find_one_by_meta(
        self,
        key: str,
        value: Any,
        *,
        for_update: bool = False,
    ) -> FinancingOrder | None:
        """
        Find the single order whose metadata ``key`` equals ``value``.

        Returns:
            The order when exactly one matches, None for zero or several
        """
        ...
