"""
Order repository backed by the orders app.

Usage:
    from financing.repositories import DjangoOrderRepository

    repository = DjangoOrderRepository()
    with transaction.atomic():
        order = repository.find_one_by_meta("financing_usage", usage, for_update=True)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from orders.models import Order

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


class DjangoOrderRepository:
    """OrderRepository implementation over orders.models.Order."""

    def _queryset(self, for_update: bool):
        queryset = Order.objects.all()
        if for_update:
            # Row locks require an open transaction
            queryset = queryset.select_for_update()
        return queryset

    def get(self, order_id: Any, *, for_update: bool = False) -> Order | None:
        try:
            return self._queryset(for_update).get(pk=order_id)
        except (Order.DoesNotExist, ValueError):
            return None

    def find_by_meta(
        self,
        key: str,
        value: Any,
        *,
        limit: int = 2,
        for_update: bool = False,
    ) -> list[Order]:
        lookup = {f"metadata__{key}": value}
        return list(self._queryset(for_update).filter(**lookup).order_by("pk")[:limit])

    def find_one_by_meta(
        self,
        key: str,
        value: Any,
        *,
        for_update: bool = False,
    ) -> Order | None:
        """Return the order only when exactly one matches; never pick among several."""
        matches = self.find_by_meta(key, value, limit=2, for_update=for_update)
        if len(matches) != 1:
            if matches:
                logger.warning(
                    "Ambiguous order lookup by metadata",
                    extra={"meta_key": key, "match_count": len(matches)},
                )
            return None
        return matches[0]
