"""
Wedding media library models.

Files uploaded by the couple live on the default storage under
``sites/{wedding_id}/media/``; rows here keep the metadata, the generated
variants and the album organisation.
"""

import logging

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, TimeStampedModel

logger = logging.getLogger(__name__)


class PlanLimit(TimeStampedModel):
    """Upload ceilings of a subscription plan."""

    PLAN_BASIC = 'basic'
    PLAN_PREMIUM = 'premium'

    slug = models.SlugField(_("slug"), max_length=50, unique=True)
    name = models.CharField(_("name"), max_length=100)
    max_files = models.PositiveIntegerField(_("max files"))
    max_storage_bytes = models.BigIntegerField(_("max storage (bytes)"))

    class Meta:
        verbose_name = _("plan limit")
        verbose_name_plural = _("plan limits")
        ordering = ['max_storage_bytes']

    def __str__(self):
        return self.name

    @property
    def max_storage_mb(self):
        return round(self.max_storage_bytes / (1024 * 1024), 2)

    @classmethod
    def find_by_slug(cls, slug):
        return cls.objects.filter(slug=slug).first()


class AlbumType(TimeStampedModel):
    """Classification of albums (pre-wedding, post-wedding, site usage)."""

    PRE_WEDDING = 'pre_casamento'
    POST_WEDDING = 'pos_casamento'
    SITE_USAGE = 'uso_site'

    slug = models.SlugField(_("slug"), max_length=50, unique=True)
    name = models.CharField(_("name"), max_length=100)
    description = models.TextField(_("description"), blank=True)

    class Meta:
        verbose_name = _("album type")
        verbose_name_plural = _("album types")
        ordering = ['id']

    def __str__(self):
        return self.name

    @classmethod
    def get_slugs(cls):
        return list(cls.objects.order_by('id').values_list('slug', flat=True))


class Album(BaseModel):
    """Named collection of media inside a wedding."""

    wedding = models.ForeignKey(
        'weddings.Wedding',
        on_delete=models.CASCADE,
        related_name='albums',
        verbose_name=_("wedding")
    )
    album_type = models.ForeignKey(
        AlbumType,
        on_delete=models.PROTECT,
        related_name='albums',
        verbose_name=_("album type")
    )
    name = models.CharField(_("name"), max_length=255)
    description = models.TextField(_("description"), blank=True, null=True)
    cover_media = models.ForeignKey(
        'media.SiteMedia',
        on_delete=models.SET_NULL,
        related_name='+',
        null=True,
        blank=True,
        verbose_name=_("cover media")
    )

    class Meta:
        verbose_name = _("album")
        verbose_name_plural = _("albums")
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class UploadBatch(BaseModel):
    """Group of files uploaded together and tracked as one unit."""

    STATUS_PENDING = 'pending'
    STATUS_PROCESSING = 'processing'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = (
        (STATUS_PENDING, _('Pending')),
        (STATUS_PROCESSING, _('Processing')),
        (STATUS_COMPLETED, _('Completed')),
        (STATUS_FAILED, _('Failed')),
        (STATUS_CANCELLED, _('Cancelled')),
    )

    FINISHED_STATUSES = (STATUS_COMPLETED, STATUS_FAILED, STATUS_CANCELLED)

    wedding = models.ForeignKey(
        'weddings.Wedding',
        on_delete=models.CASCADE,
        related_name='upload_batches',
        verbose_name=_("wedding")
    )
    album = models.ForeignKey(
        Album,
        on_delete=models.SET_NULL,
        related_name='upload_batches',
        null=True,
        blank=True,
        verbose_name=_("album")
    )
    total_files = models.PositiveIntegerField(_("total files"), default=0)
    completed_files = models.PositiveIntegerField(_("completed files"), default=0)
    failed_files = models.PositiveIntegerField(_("failed files"), default=0)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING
    )
    errors = models.JSONField(_("errors"), default=list, blank=True)

    class Meta:
        verbose_name = _("upload batch")
        verbose_name_plural = _("upload batches")
        ordering = ['-created_at']

    def __str__(self):
        return f"Batch {self.id} ({self.completed_files}/{self.total_files})"

    @property
    def pending_files(self):
        return max(self.total_files - self.completed_files - self.failed_files, 0)

    @property
    def is_finished(self):
        return self.status in self.FINISHED_STATUSES


class SiteMedia(BaseModel):
    """
    A file of the wedding media library.

    ``variants`` maps a variant name (``webp``, ``thumbnail``, ``1x``,
    ``2x``) to its storage path.
    """

    STATUS_PENDING = 'pending'
    STATUS_PROCESSING = 'processing'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'

    STATUS_CHOICES = (
        (STATUS_PENDING, _('Pending')),
        (STATUS_PROCESSING, _('Processing')),
        (STATUS_COMPLETED, _('Completed')),
        (STATUS_FAILED, _('Failed')),
    )

    wedding = models.ForeignKey(
        'weddings.Wedding',
        on_delete=models.CASCADE,
        related_name='media',
        verbose_name=_("wedding")
    )
    site = models.ForeignKey(
        'wedding_sites.SiteLayout',
        on_delete=models.SET_NULL,
        related_name='media',
        null=True,
        blank=True,
        verbose_name=_("site")
    )
    album = models.ForeignKey(
        Album,
        on_delete=models.SET_NULL,
        related_name='media',
        null=True,
        blank=True,
        verbose_name=_("album")
    )
    batch = models.ForeignKey(
        UploadBatch,
        on_delete=models.SET_NULL,
        related_name='media',
        null=True,
        blank=True,
        verbose_name=_("batch")
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='uploaded_media',
        null=True,
        blank=True,
        verbose_name=_("uploaded by")
    )
    original_name = models.CharField(_("original name"), max_length=255)
    path = models.CharField(_("path"), max_length=500, blank=True)
    size = models.BigIntegerField(_("size in bytes"), default=0)
    mime_type = models.CharField(_("MIME type"), max_length=100, default='application/octet-stream')
    variants = models.JSONField(_("variants"), default=dict, blank=True)
    width = models.PositiveIntegerField(_("width"), null=True, blank=True)
    height = models.PositiveIntegerField(_("height"), null=True, blank=True)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED
    )
    error_message = models.TextField(_("error message"), blank=True, null=True)

    class Meta:
        verbose_name = _("site media")
        verbose_name_plural = _("site media")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['wedding', 'status'], name='media_sitem_wedding_2b7c1e_idx'),
            models.Index(fields=['batch', 'status'], name='media_sitem_batch_i_8d41f0_idx'),
        ]

    def __str__(self):
        return f"{self.original_name} ({self.status})"

    @property
    def is_image(self):
        return self.mime_type.startswith('image/')

    @property
    def is_video(self):
        return self.mime_type.startswith('video/')

    @property
    def size_mb(self):
        return round(self.size / (1024 * 1024), 2)

    @property
    def url(self):
        if not self.path:
            return None
        return default_storage.url(self.path)

    def get_variant_url(self, name):
        path = (self.variants or {}).get(name)
        if not path:
            return None
        return default_storage.url(path)

    def get_variant_size(self, path):
        """Size in bytes of a stored variant, 0 when it is missing."""
        try:
            return default_storage.size(path)
        except (OSError, NotImplementedError) as e:
            logger.warning(f"[MEDIA] Could not read size of variant {path}: {e}")
            return 0
