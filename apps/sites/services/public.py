"""Lookup and caching helpers for the published side of wedding sites."""

import copy
import hashlib
import json

from apps.sites import schema
from apps.sites.models import SiteLayout


class PublicSiteService:
    """Resolve published sites for guests, by slug or by custom domain."""

    @staticmethod
    def _published():
        return SiteLayout.objects.select_related('wedding').filter(
            is_published=True,
            published_content__isnull=False,
        )

    @classmethod
    def find_by_slug(cls, slug):
        return cls._published().filter(slug=slug).first()

    @classmethod
    def find_by_domain(cls, domain):
        # Host headers may carry a port
        domain = (domain or '').strip().lower().split(':')[0]
        if not domain:
            return None
        return cls._published().filter(custom_domain=domain).first()

    @staticmethod
    def get_content(site):
        return schema.normalize(copy.deepcopy(site.published_content))

    @staticmethod
    def get_etag(site):
        """Strong ETag that changes whenever the published snapshot changes."""
        content_hash = hashlib.sha1(
            json.dumps(site.published_content or {}, sort_keys=True, ensure_ascii=False).encode('utf-8')
        ).hexdigest()
        published_at = site.published_at.timestamp() if site.published_at else ''
        fingerprint = f"{site.id}|{published_at}|{content_hash}"
        return f'"{hashlib.sha1(fingerprint.encode("utf-8")).hexdigest()}"'

    @staticmethod
    def etag_matches(if_none_match, etag):
        if not if_none_match:
            return False
        current = etag.strip('"')
        for candidate in if_none_match.split(','):
            candidate = candidate.strip()
            if candidate == '*':
                return True
            if candidate.startswith('W/'):
                candidate = candidate[2:]
            if candidate.strip('"') == current:
                return True
        return False
