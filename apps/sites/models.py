"""Models for the sites app."""

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, TimeStampedModel


class SiteLayout(BaseModel):
    """
    Wedding microsite.

    Holds the editable draft content tree and the snapshot that is
    currently published. Every wedding has at most one site.
    """

    wedding = models.OneToOneField(
        'weddings.Wedding',
        on_delete=models.CASCADE,
        related_name='site',
        verbose_name=_("wedding")
    )
    slug = models.SlugField(_("slug"), max_length=100, unique=True)
    custom_domain = models.CharField(
        _("custom domain"),
        max_length=255,
        unique=True,
        null=True,
        blank=True
    )
    access_token = models.CharField(
        _("access token"),
        max_length=128,
        null=True,
        blank=True,
        help_text=_("Hashed password guests must enter to see the site.")
    )
    draft_content = models.JSONField(_("draft content"), default=dict, blank=True)
    published_content = models.JSONField(_("published content"), null=True, blank=True)
    is_published = models.BooleanField(_("published"), default=False)
    published_at = models.DateTimeField(_("published at"), null=True, blank=True)

    class Meta:
        verbose_name = _("site layout")
        verbose_name_plural = _("site layouts")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.slug} ({self.wedding})"

    @property
    def has_password(self):
        return bool(self.access_token)

    @property
    def is_draft(self):
        """True while the draft differs from what is live."""
        return not self.is_published or self.draft_content != self.published_content

    @property
    def public_url(self):
        if self.custom_domain:
            return f"https://{self.custom_domain}"
        return f"{settings.FRONTEND_URL.rstrip('/')}/site/{self.slug}"

    def set_access_token(self, raw_token):
        """Store ``raw_token`` hashed, or clear protection when empty."""
        self.access_token = make_password(raw_token) if raw_token else None

    def check_access_token(self, raw_token):
        if not self.access_token:
            return True
        return check_password(raw_token or '', self.access_token)


class SiteVersion(TimeStampedModel):
    """Immutable snapshot of a site's content."""

    site = models.ForeignKey(
        SiteLayout,
        on_delete=models.CASCADE,
        related_name='versions',
        verbose_name=_("site")
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='site_versions',
        null=True,
        blank=True,
        verbose_name=_("user")
    )
    content = models.JSONField(_("content"), default=dict)
    summary = models.CharField(_("summary"), max_length=500, blank=True)
    is_published = models.BooleanField(_("published"), default=False)

    class Meta:
        verbose_name = _("site version")
        verbose_name_plural = _("site versions")
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.site.slug} @ {self.created_at:%d/%m/%Y %H:%M}"


class SiteTemplateQuerySet(models.QuerySet):

    def available_for(self, wedding):
        """Public templates plus the ones the wedding created."""
        return self.filter(models.Q(is_public=True) | models.Q(wedding=wedding))


class SiteTemplate(BaseModel):
    """
    Ready-made site content a couple can apply to their draft.

    System templates have no wedding and are public; a wedding may also
    keep private templates of its own.
    """

    wedding = models.ForeignKey(
        'weddings.Wedding',
        on_delete=models.CASCADE,
        related_name='site_templates',
        null=True,
        blank=True,
        verbose_name=_("wedding")
    )
    name = models.CharField(_("name"), max_length=100)
    slug = models.SlugField(_("slug"), max_length=140, unique=True)
    description = models.CharField(_("description"), max_length=500, blank=True)
    thumbnail = models.URLField(_("thumbnail"), max_length=500, blank=True)
    content = models.JSONField(_("content"), default=dict)
    is_public = models.BooleanField(_("public"), default=False)

    objects = SiteTemplateQuerySet.as_manager()

    class Meta:
        verbose_name = _("site template")
        verbose_name_plural = _("site templates")
        ordering = ['-is_public', 'name']

    def __str__(self):
        return self.name

    @property
    def is_system(self):
        return self.wedding_id is None

    def is_available_for(self, wedding):
        return self.is_public or (wedding is not None and self.wedding_id == wedding.id)
