"""Models for the weddings app."""

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Wedding(BaseModel):
    """
    Wedding model, the tenant of the platform.

    A wedding owns its microsite, albums, media and the memberships that
    grant users access to it.
    """

    PLAN_CHOICES = (
        ('basic', _('Basic')),
        ('premium', _('Premium')),
    )

    title = models.CharField(_("title"), max_length=255)
    slug = models.SlugField(_("slug"), max_length=255, unique=True, blank=True)
    wedding_date = models.DateField(_("wedding date"), null=True, blank=True)
    venue = models.CharField(_("venue"), max_length=255, blank=True)
    plan = models.CharField(_("plan"), max_length=20, choices=PLAN_CHOICES, default='basic')
    details = models.JSONField(_("details"), default=dict, blank=True)
    is_active = models.BooleanField(_("active"), default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='created_weddings',
        null=True,
        blank=True,
        verbose_name=_("created by")
    )

    class Meta:
        verbose_name = _("wedding")
        verbose_name_plural = _("weddings")
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def plan_slug(self):
        """Plan identifier used for quota lookups."""
        return self.plan or 'basic'

    def get_membership(self, user):
        """Return the WeddingUser row for ``user`` or None."""
        if user is None or not getattr(user, 'pk', None):
            return None
        return self.memberships.filter(user=user).first()

    def couple_users(self):
        """Return users attached to this wedding as couple."""
        from django.contrib.auth import get_user_model
        return get_user_model().objects.filter(
            wedding_memberships__wedding=self,
            wedding_memberships__role=WeddingUser.ROLE_COUPLE,
        )


class WeddingUser(BaseModel):
    """Membership of a user in a wedding with a role and module permissions."""

    ROLE_COUPLE = 'couple'
    ROLE_ORGANIZER = 'organizer'
    ROLE_GUEST = 'guest'

    ROLE_CHOICES = (
        (ROLE_COUPLE, _('Couple')),
        (ROLE_ORGANIZER, _('Organizer')),
        (ROLE_GUEST, _('Guest')),
    )

    wedding = models.ForeignKey(
        Wedding,
        on_delete=models.CASCADE,
        related_name='memberships',
        verbose_name=_("wedding")
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='wedding_memberships',
        verbose_name=_("user")
    )
    role = models.CharField(_("role"), max_length=20, choices=ROLE_CHOICES, default=ROLE_GUEST)
    permissions = models.JSONField(
        _("permissions"),
        default=list,
        blank=True,
        help_text=_("Modules an organizer may access.")
    )

    class Meta:
        verbose_name = _("wedding user")
        verbose_name_plural = _("wedding users")
        unique_together = ('wedding', 'user')

    def __str__(self):
        return f"{self.user} - {self.wedding} ({self.role})"


class GuestEvent(BaseModel):
    """An event of the wedding that guests can RSVP to."""

    wedding = models.ForeignKey(
        Wedding,
        on_delete=models.CASCADE,
        related_name='guest_events',
        verbose_name=_("wedding")
    )
    slug = models.SlugField(_("slug"), max_length=100)
    name = models.CharField(_("name"), max_length=255)
    event_at = models.DateTimeField(_("event at"), null=True, blank=True)
    is_active = models.BooleanField(_("active"), default=True)
    metadata = models.JSONField(_("metadata"), default=dict, blank=True)

    class Meta:
        verbose_name = _("guest event")
        verbose_name_plural = _("guest events")
        unique_together = ('wedding', 'slug')
        ordering = ['event_at']

    def __str__(self):
        return f"{self.name} ({self.wedding})"


def default_invite_expiration():
    return timezone.now() + timedelta(days=7)


class PartnerInvite(BaseModel):
    """Token-based invitation that links a second user to a wedding as couple."""

    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_DECLINED = 'declined'
    STATUS_EXPIRED = 'expired'

    STATUS_CHOICES = (
        (STATUS_PENDING, _('Pending')),
        (STATUS_ACCEPTED, _('Accepted')),
        (STATUS_DECLINED, _('Declined')),
        (STATUS_EXPIRED, _('Expired')),
    )

    wedding = models.ForeignKey(
        Wedding,
        on_delete=models.CASCADE,
        related_name='partner_invites',
        verbose_name=_("wedding")
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sent_partner_invites',
        verbose_name=_("invited by")
    )
    email = models.EmailField(_("email"))
    name = models.CharField(_("name"), max_length=255)
    token = models.CharField(_("token"), max_length=64, unique=True)
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    expires_at = models.DateTimeField(_("expires at"), default=default_invite_expiration)
    existing_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='received_partner_invites',
        null=True,
        blank=True,
        verbose_name=_("existing user")
    )
    previous_wedding = models.ForeignKey(
        Wedding,
        on_delete=models.SET_NULL,
        related_name='+',
        null=True,
        blank=True,
        verbose_name=_("previous wedding")
    )
    accepted_at = models.DateTimeField(_("accepted at"), null=True, blank=True)
    declined_at = models.DateTimeField(_("declined at"), null=True, blank=True)

    class Meta:
        verbose_name = _("partner invite")
        verbose_name_plural = _("partner invites")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.email} -> {self.wedding} ({self.status})"

    @property
    def is_expired(self):
        return self.expires_at <= timezone.now()

    @property
    def is_valid(self):
        """An invite can be used only while pending and not expired."""
        return self.status == self.STATUS_PENDING and not self.is_expired
