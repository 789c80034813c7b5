"""
Model mixins providing reusable functionality for Django models.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    AppendOnlyMixin: Rows can be inserted but never updated or deleted

Usage:
    from core.model_mixins import AppendOnlyMixin, UUIDPrimaryKeyMixin

    class TransactionRecord(UUIDPrimaryKeyMixin, AppendOnlyMixin, models.Model):
        amount = models.PositiveBigIntegerField()

Note:
    - Mixins are abstract and don't create database tables
    - AppendOnlyMixin guards the ORM path only; bulk QuerySet.update()
      and raw SQL bypass it
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import models

from core.exceptions import ConflictError

if TYPE_CHECKING:
    from typing import Any


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Fields:
        id: UUIDField as primary key (auto-generated)

    Usage:
        record = TransactionRecord.objects.create(...)
        print(record.id)  # UUID like: 550e8400-e29b-41d4-a716-446655440000
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class ImmutableRecordError(ConflictError):
    """Raised when code tries to modify or delete an append-only row."""

    default_error_code: str = "IMMUTABLE_RECORD"


class AppendOnlyMixin(models.Model):
    """
    Make a model append-only at the ORM level.

    The first save() inserts the row. Any later save() or delete() on the
    same instance raises ImmutableRecordError; corrections are made by
    appending new rows, never by editing old ones.

    Because UUID primary keys are assigned before insert, "already stored"
    is tracked through Django's ``_state.adding`` flag rather than ``pk``.
    """

    class Meta:
        abstract = True

    def save(self, *args: Any, **kwargs: Any) -> None:
        """Insert the row once; refuse updates."""
        if not self._state.adding:
            raise ImmutableRecordError(
                f"{self.__class__.__name__} {self.pk} is append-only and cannot be modified",
                details={"model": self.__class__.__name__, "pk": str(self.pk)},
            )
        kwargs["force_insert"] = True
        super().save(*args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any):
        """Refuse deletes."""
        raise ImmutableRecordError(
            f"{self.__class__.__name__} {self.pk} is append-only and cannot be deleted",
            details={"model": self.__class__.__name__, "pk": str(self.pk)},
        )
