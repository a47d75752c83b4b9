"""
Model mixins providing reusable functionality for Django models.

This module contains abstract mixin classes that can be combined with
BaseModel to add specific functionality. They are generic infrastructure
classes with no domain-specific logic.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    MetadataMixin: Flexible JSON key/value metadata storage

Usage:
    from core.models import BaseModel
    from core.model_mixins import MetadataMixin, UUIDPrimaryKeyMixin

    class FinancingOffer(UUIDPrimaryKeyMixin, BaseModel):
        usage = models.CharField(max_length=255)

    class Order(MetadataMixin, BaseModel):
        number = models.CharField(max_length=64)

Note:
    - Always list mixins before BaseModel in inheritance
    - Mixins are abstract and don't create database tables
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import models

if TYPE_CHECKING:
    from typing import Any


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Fields:
        id: UUIDField as primary key (auto-generated)

    Note:
        UUIDs are non-guessable and can be generated before the
        database insert, at the cost of slightly larger indexes.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class MetadataMixin(models.Model):
    """
    Flexible JSON metadata storage.

    Provides a JSONField for storing arbitrary key-value data.
    Keys can be queried with JSON key lookups, e.g.
    ``Order.objects.filter(metadata__financing_usage="Order-1042")``.

    Fields:
        metadata: JSONField for arbitrary key-value data

    Usage:
        order.set_meta("financing_usage", "Order-1042")
        order.get_meta("financing_usage")  # "Order-1042"
        order.has_meta("financing_usage")  # True

        # Batch several changes into a single save
        order.delete_meta("financing_usage", save=False)
        order.delete_meta("financing_register_url", save=False)
        order.save()
    """

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Flexible key-value metadata storage",
    )

    class Meta:
        abstract = True

    def get_meta(self, key: str, default: Any = None) -> Any:
        """
        Get metadata value by key.

        Args:
            key: Metadata key
            default: Value to return if key not found

        Returns:
            Metadata value or default
        """
        return self.metadata.get(key, default)

    def set_meta(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set metadata value and optionally save.

        Args:
            key: Metadata key
            value: Value to store (must be JSON-serializable)
            save: Whether to save the model (default True)
        """
        self.metadata[key] = value
        if save:
            self.save(update_fields=["metadata", "updated_at"])

    def delete_meta(self, key: str, save: bool = True) -> None:
        """
        Remove metadata key.

        Missing keys are ignored.

        Args:
            key: Metadata key to remove
            save: Whether to save the model (default True)
        """
        if key in self.metadata:
            del self.metadata[key]
            if save:
                self.save(update_fields=["metadata", "updated_at"])

    def has_meta(self, key: str) -> bool:
        """Check if metadata key exists."""
        return key in self.metadata
