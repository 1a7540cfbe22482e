"""Draft, publish and rollback of wedding sites."""

import copy
import logging

from django.db import transaction
from django.utils import timezone

from apps.sites import schema
from apps.sites.models import SiteLayout
from apps.sites.signals import site_published
from core.utils import generate_unique_slug

from .exceptions import NoPublishedVersionError, SiteAlreadyExistsError, SiteValidationError
from .sanitizer import ContentSanitizer
from .validator import SiteValidator
from .versions import SiteVersionService

logger = logging.getLogger(__name__)


class SiteBuilderService:
    """Lifecycle of a wedding site: create, edit the draft, publish, roll back."""

    @classmethod
    def create(cls, wedding):
        """Create the wedding's site with the default draft content."""
        if SiteLayout.objects.filter(wedding=wedding).exists():
            raise SiteAlreadyExistsError(f"Wedding {wedding.id} already has a site.")

        site = SiteLayout.objects.create(
            wedding=wedding,
            slug=generate_unique_slug(SiteLayout, wedding.title),
            draft_content=schema.get_default_content(),
            published_content=None,
            is_published=False,
        )
        logger.info(f"[SITES] Site {site.id} created for wedding {wedding.id}")
        return site

    @classmethod
    def get_by_wedding(cls, wedding):
        return SiteLayout.objects.filter(wedding=wedding).first()

    @classmethod
    def update_draft(cls, site, content, user=None, create_version=True, summary=None):
        """Sanitize, normalize and store ``content`` as the new draft."""
        normalized = schema.normalize(ContentSanitizer.sanitize_data(content))

        with transaction.atomic():
            site.draft_content = normalized
            site.save(update_fields=['draft_content', 'updated_at'])

            if create_version:
                SiteVersionService.create_version(
                    site,
                    normalized,
                    user=user,
                    summary=summary or "Draft updated",
                )

        return site

    @classmethod
    def publish(cls, site, user=None):
        """
        Publish the current draft.

        Raises SiteValidationError with ``content`` errors when the draft
        structure is broken and ``qa`` errors when a QA check fails.
        """
        normalized = schema.normalize(copy.deepcopy(site.draft_content or {}))

        errors = schema.validate(normalized)
        if errors:
            raise SiteValidationError({'content': errors})

        qa_result = SiteValidator.run_qa_checklist(site)
        if not qa_result.can_publish():
            messages = [
                cls._format_check(check) for check in qa_result.get_failed_checks()
            ]
            messages = [message for message in messages if message]
            raise SiteValidationError({'qa': messages or ["The site has QA issues that block publishing."]})

        with transaction.atomic():
            site.draft_content = normalized
            site.published_content = copy.deepcopy(normalized)
            site.is_published = True
            site.published_at = timezone.now()
            site.save(update_fields=[
                'draft_content', 'published_content', 'is_published', 'published_at', 'updated_at',
            ])

            SiteVersionService.record_version(
                site,
                normalized,
                user=user,
                summary="Site published",
                is_published=True,
            )

            site_published.send(sender=SiteLayout, site=site, user=user)

        logger.info(f"[SITES] Site {site.id} published")
        return site

    @classmethod
    def rollback(cls, site, user=None):
        """Restore the latest published version into both draft and published content."""
        version = SiteVersionService.get_published_versions(site).first()
        if version is None:
            raise NoPublishedVersionError("There is no published version to restore.")

        with transaction.atomic():
            site.published_content = copy.deepcopy(version.content)
            site.draft_content = copy.deepcopy(version.content)
            site.save(update_fields=['published_content', 'draft_content', 'updated_at'])

            local_created = timezone.localtime(version.created_at)
            SiteVersionService.record_version(
                site,
                version.content,
                user=user,
                summary=f"Rollback to version of {local_created:%d/%m/%Y %H:%M}",
                is_published=True,
            )

        logger.info(f"[SITES] Site {site.id} rolled back to version {version.id}")
        return site

    @classmethod
    def update_settings(cls, site, data):
        """Update slug, custom domain and guest access token."""
        update_fields = ['updated_at']

        if 'slug' in data and data['slug']:
            site.slug = data['slug']
            update_fields.append('slug')

        if 'custom_domain' in data:
            site.custom_domain = data['custom_domain'] or None
            update_fields.append('custom_domain')

        if 'access_token' in data:
            site.set_access_token(data['access_token'])
            update_fields.append('access_token')

        site.save(update_fields=update_fields)
        return site

    @staticmethod
    def _format_check(check):
        name = (check.get('name') or '').strip()
        message = (check.get('message') or '').strip()
        if name and message:
            return f"{name}: {message}"
        return name or message
