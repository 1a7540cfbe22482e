"""Models for the users app."""

from django.db import models
from django.contrib.auth.models import AbstractUser
from django.utils.translation import gettext_lazy as _
from django.utils import timezone
from core.models import TimeStampedModel


class User(AbstractUser, TimeStampedModel):
    """Custom user model for the Nupcial platform."""

    email = models.EmailField(
        _('email address'),
        unique=True,
        error_messages={
            'unique': _("A user with that email already exists."),
        }
    )
    phone_number = models.CharField(
        _("phone number"),
        max_length=30,
        blank=True,
        null=True
    )

    # Wedding the user is currently working on
    current_wedding = models.ForeignKey(
        'weddings.Wedding',
        on_delete=models.SET_NULL,
        related_name='current_users',
        null=True,
        blank=True,
        verbose_name=_("current wedding")
    )

    # Onboarding tracking
    onboarding_completed = models.BooleanField(
        _("onboarding completed"),
        default=False,
        help_text=_("Designates whether this user finished the onboarding flow.")
    )
    onboarding_completed_at = models.DateTimeField(
        _("onboarding completed at"),
        null=True,
        blank=True
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ['-date_joined']

    def __str__(self):
        return self.email

    def get_full_name(self):
        """Return the user's full name."""
        full_name = f"{self.first_name} {self.last_name}"
        return full_name.strip() or self.username

    @property
    def is_admin(self):
        """Return True if the user is a platform administrator."""
        return bool(self.is_staff or self.is_superuser)

    def mark_onboarding_complete(self):
        """Mark the onboarding flow as completed."""
        self.onboarding_completed = True
        self.onboarding_completed_at = timezone.now()
        self.save(update_fields=['onboarding_completed', 'onboarding_completed_at'])

    def switch_wedding(self, wedding):
        """Set the wedding the user is currently working on."""
        self.current_wedding = wedding
        self.save(update_fields=['current_wedding'])
