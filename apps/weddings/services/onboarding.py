"""Account setup for a newly registered couple."""

import logging
import re
from datetime import datetime, time

from django.db import transaction
from django.utils import timezone

from apps.weddings.models import GuestEvent

from .invites import PartnerInviteService
from .weddings import WeddingService

logger = logging.getLogger(__name__)

DEFAULT_WEDDING_TIME = '18:00'
WEDDING_TIME_RE = re.compile(r'^(?P<hour>\d{2}):(?P<minute>\d{2})(?::\d{2})?$')


class OnboardingService:
    """
    Complete the onboarding of a user.

    Everything runs in a single transaction: the wedding, its site, the
    default RSVP event, the optional partner invite and the onboarding flag
    are created together or not at all.
    """

    @classmethod
    def complete(cls, user, data):
        from apps.sites.services import SiteBuilderService

        with transaction.atomic():
            wedding = cls._create_wedding(user, data)
            SiteBuilderService.create(wedding)
            cls._create_default_guest_event(wedding, data)

            if cls._has_partner_data(data):
                PartnerInviteService.send_invite(
                    wedding,
                    user,
                    data['partner_email'],
                    data['partner_name'],
                )

            user.mark_onboarding_complete()

        logger.info(f"[ONBOARDING] Completed for {user.email}, wedding {wedding.id}")
        return wedding

    @classmethod
    def has_completed(cls, user):
        return bool(user.onboarding_completed)

    @classmethod
    def _create_wedding(cls, user, data):
        wedding_time = cls.normalize_wedding_time(data.get('wedding_time'))
        plan = data.get('plan') or 'basic'
        return WeddingService.create_wedding(user, {
            'title': cls.generate_wedding_title(user, data),
            'wedding_date': data.get('wedding_date'),
            'venue': data.get('venue_name') or '',
            'plan': plan,
            'details': {
                'plan': plan,
                'venue_address': data.get('venue_address'),
                'venue_neighborhood': data.get('venue_neighborhood'),
                'venue_city': data.get('venue_city'),
                'venue_state': data.get('venue_state'),
                'venue_phone': data.get('venue_phone'),
                'wedding_time': wedding_time,
            },
        })

    @classmethod
    def generate_wedding_title(cls, user, data):
        creator_first_name = cls._first_name(user.get_full_name())
        partner_name = data.get('partner_name')
        if partner_name:
            return f"Casamento {creator_first_name} e {cls._first_name(partner_name)}"
        return f"Casamento de {creator_first_name}"

    @staticmethod
    def _first_name(full_name):
        parts = (full_name or '').strip().split(' ')
        return parts[0] if parts and parts[0] else (full_name or '')

    @staticmethod
    def _has_partner_data(data):
        return bool(data.get('partner_email')) and bool(data.get('partner_name'))

    @classmethod
    def _create_default_guest_event(cls, wedding, data):
        GuestEvent.objects.get_or_create(
            wedding=wedding,
            slug='casamento',
            defaults={
                'name': 'Casamento',
                'event_at': cls.resolve_event_at(data),
                'is_active': True,
                'metadata': {
                    'source': 'onboarding',
                    'auto_created': True,
                },
            },
        )

    @classmethod
    def resolve_event_at(cls, data):
        """Combine wedding date and time into an aware datetime."""
        wedding_date = WeddingService.normalize_wedding_date(data.get('wedding_date'))
        if wedding_date is None:
            return None

        hour, minute = (int(part) for part in cls.normalize_wedding_time(data.get('wedding_time')).split(':'))
        naive = datetime.combine(wedding_date, time(hour, minute))
        return timezone.make_aware(naive, timezone.get_current_timezone())

    @staticmethod
    def normalize_wedding_time(value):
        """Return ``HH:MM`` or the default time when ``value`` is not a valid time."""
        if not value or not isinstance(value, str):
            return DEFAULT_WEDDING_TIME

        match = WEDDING_TIME_RE.match(value.strip())
        if not match:
            return DEFAULT_WEDDING_TIME

        hour = int(match.group('hour'))
        minute = int(match.group('minute'))
        if hour > 23 or minute > 59:
            return DEFAULT_WEDDING_TIME

        return f"{hour:02d}:{minute:02d}"
