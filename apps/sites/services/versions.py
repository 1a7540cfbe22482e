"""Version history of wedding sites."""

import copy
import logging

from django.conf import settings
from django.utils import timezone

from apps.sites.models import SiteVersion
from core.models import SystemConfig

logger = logging.getLogger(__name__)


class SiteVersionService:
    """
    Keep a bounded history of site snapshots.

    At most ``max_versions`` versions are kept per site. When a new
    version pushes the history over the limit the oldest unpublished
    versions are removed first; published versions are never pruned.
    """

    @classmethod
    def get_max_versions(cls):
        return int(SystemConfig.get('site.max_versions', settings.SITE_MAX_VERSIONS))

    @classmethod
    def create_version(cls, site, content, user=None, summary=None):
        return cls.record_version(site, content, user=user, summary=summary)

    @classmethod
    def record_version(cls, site, content, user=None, summary=None, is_published=False):
        """Insert a snapshot and prune the history back under the limit."""
        version = SiteVersion.objects.create(
            site=site,
            user=user,
            content=copy.deepcopy(content),
            summary=summary or '',
            is_published=is_published,
        )
        cls.prune_old_versions(site)
        return version

    @classmethod
    def get_versions(cls, site, limit=None):
        """Newest first."""
        limit = limit or cls.get_max_versions()
        return list(
            SiteVersion.objects
            .filter(site=site)
            .select_related('user')
            .order_by('-created_at', '-id')[:limit]
        )

    @classmethod
    def get_published_versions(cls, site):
        return (
            SiteVersion.objects
            .filter(site=site, is_published=True)
            .select_related('user')
            .order_by('-created_at', '-id')
        )

    @classmethod
    def restore(cls, site, version, user=None):
        """Copy ``version`` into the draft and record the restore in history."""
        site.draft_content = copy.deepcopy(version.content)
        site.save(update_fields=['draft_content', 'updated_at'])

        local_created = timezone.localtime(version.created_at)
        cls.record_version(
            site,
            version.content,
            user=user,
            summary=f"Restored from version of {local_created:%d/%m/%Y %H:%M}",
        )

        logger.info(f"[SITES] Site {site.id} draft restored from version {version.id}")
        return site

    @classmethod
    def prune_old_versions(cls, site):
        """Delete the oldest unpublished versions above the limit."""
        max_versions = cls.get_max_versions()
        total = SiteVersion.objects.filter(site=site).count()
        if total <= max_versions:
            return 0

        excess = total - max_versions
        stale_ids = list(
            SiteVersion.objects
            .filter(site=site, is_published=False)
            .order_by('created_at', 'id')
            .values_list('id', flat=True)[:excess]
        )
        if not stale_ids:
            return 0

        deleted, _ = SiteVersion.objects.filter(id__in=stale_ids).delete()
        logger.debug(f"[SITES] Pruned {deleted} old versions of site {site.id}")
        return deleted
