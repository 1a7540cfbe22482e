"""Wedding creation and membership management."""

import logging
import re
from datetime import date, datetime

from django.db import transaction
from django.utils.dateparse import parse_date

from apps.weddings.models import Wedding, WeddingUser
from core.utils import generate_unique_slug

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


class WeddingService:
    """Create weddings and manage who belongs to them."""

    @classmethod
    def create_wedding(cls, creator, data):
        """
        Create a wedding and link ``creator`` to it as couple.

        The new wedding becomes the creator's current wedding.
        """
        with transaction.atomic():
            details = dict(data.get('details') or {})
            plan = data.get('plan') or details.get('plan') or 'basic'
            details.setdefault('plan', plan)

            wedding = Wedding.objects.create(
                title=data['title'],
                slug=generate_unique_slug(Wedding, data['title'], max_length=255),
                wedding_date=cls.normalize_wedding_date(data.get('wedding_date')),
                venue=data.get('venue') or '',
                plan=plan,
                details=details,
                is_active=True,
                created_by=creator,
            )

            cls.attach_user(wedding, creator, WeddingUser.ROLE_COUPLE)
            creator.switch_wedding(wedding)

        logger.info(f"[WEDDINGS] Wedding {wedding.id} created by {creator.email}")
        return wedding

    @classmethod
    def attach_user(cls, wedding, user, role, permissions=None):
        """Create or update the membership of ``user`` in ``wedding``."""
        membership, _created = WeddingUser.objects.update_or_create(
            wedding=wedding,
            user=user,
            defaults={'role': role, 'permissions': permissions or []},
        )
        return membership

    @classmethod
    def add_couple_partner(cls, wedding, user):
        return cls.attach_user(wedding, user, WeddingUser.ROLE_COUPLE)

    @classmethod
    def detach_user(cls, wedding, user):
        WeddingUser.objects.filter(wedding=wedding, user=user).delete()

    @staticmethod
    def normalize_wedding_date(value):
        """Return a ``date`` for ``value`` or None when it cannot be parsed."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            return None

        normalized = value.strip()
        if not normalized or normalized.lower() == 'null' or normalized == '0000-00-00':
            return None

        if ISO_DATE_RE.match(normalized):
            try:
                return parse_date(normalized)
            except ValueError:
                return None

        try:
            return datetime.fromisoformat(normalized).date()
        except ValueError:
            pass

        for fmt in ('%d/%m/%Y', '%d-%m-%Y'):
            try:
                return datetime.strptime(normalized, fmt).date()
            except ValueError:
                continue
        return None
