"""
Base ORM Models and Mixins.

Provides common functionality for all models:
- UUID primary keys
- Timestamps (created_at, updated_at)
- Read-only computed fields
"""

import uuid
from django.db import models

from domain.shared.exceptions import ComputedFieldError


class TimeStampedMixin(models.Model):
    """Mixin for created_at and updated_at timestamps."""

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated at"
    )

    class Meta:
        abstract = True


class ComputedFieldsMixin(models.Model):
    """
    Mixin for fields owned by the recalculation engine.

    Fields listed in COMPUTED_FIELDS may be set when a row is created, but a
    save() of an existing row that changes any of them raises
    ComputedFieldError, and a save() of an existing row never writes them.
    The engine writes them with QuerySet.update(), which does not go through
    save().
    """

    COMPUTED_FIELDS = ()

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._remember_computed()
        return instance

    def _remember_computed(self):
        # Deferred fields are absent from __dict__ and cannot have been changed
        self._loaded_computed = {
            name: self.__dict__[name]
            for name in self.COMPUTED_FIELDS
            if name in self.__dict__
        }

    def changed_computed_fields(self):
        loaded = getattr(self, '_loaded_computed', None)
        if self._state.adding or loaded is None:
            return []
        return [name for name, value in loaded.items() if self.__dict__.get(name) != value]

    def save(self, *args, **kwargs):
        changed = self.changed_computed_fields()
        if changed:
            raise ComputedFieldError(self.__class__.__name__, self.pk, changed)
        # An instance loaded before the engine ran must not write back stale values
        if not self._state.adding and not args and kwargs.get('update_fields') is None:
            kwargs['update_fields'] = [
                f.name for f in self._meta.concrete_fields
                if not f.primary_key and f.name not in self.COMPUTED_FIELDS
            ]
        super().save(*args, **kwargs)
        self._remember_computed()

    def refresh_from_db(self, *args, **kwargs):
        super().refresh_from_db(*args, **kwargs)
        self._remember_computed()


class BaseModel(TimeStampedMixin):
    """
    Base model with common functionality.

    Includes:
    - UUID primary key
    - Timestamps (created_at, updated_at)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name="ID"
    )

    class Meta:
        abstract = True

    def __str__(self):
        return str(self.id)
