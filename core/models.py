"""Base models for the Nupcial platform."""

import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _


class TimeStampedModel(models.Model):
    """Abstract base model that provides self-updating created_at and updated_at fields."""

    created_at = models.DateTimeField(_("Created at"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("Updated at"), auto_now=True)

    class Meta:
        abstract = True


class UUIDModel(models.Model):
    """Abstract base model that provides a UUID primary key."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    class Meta:
        abstract = True


class BaseModel(TimeStampedModel, UUIDModel):
    """Base model for all Nupcial models."""

    class Meta:
        abstract = True


class SystemConfig(TimeStampedModel):
    """
    Runtime key/value configuration.

    Values are stored as JSON so integers, strings and flags can live
    side by side, e.g. ``site.max_versions`` or ``site.performance_threshold``.
    """

    key = models.CharField(_("key"), max_length=100, unique=True)
    value = models.JSONField(_("value"), null=True, blank=True)
    description = models.CharField(_("description"), max_length=255, blank=True)

    class Meta:
        verbose_name = _("system config")
        verbose_name_plural = _("system configs")
        ordering = ['key']

    def __str__(self):
        return self.key

    @classmethod
    def get(cls, key, default=None):
        """Return the stored value for ``key`` or ``default`` when missing."""
        entry = cls.objects.filter(key=key).only('value').first()
        if entry is None or entry.value is None:
            return default
        return entry.value

    @classmethod
    def set(cls, key, value, description=''):
        """Create or update a configuration entry."""
        entry, _created = cls.objects.update_or_create(
            key=key,
            defaults={'value': value, 'description': description},
        )
        return entry
