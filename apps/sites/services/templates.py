"""Applying ready-made templates to site drafts."""

import copy
import logging

from django.db import transaction

from apps.sites import schema
from apps.sites.models import SiteTemplate

from .builder import SiteBuilderService
from .exceptions import InvalidTemplateModeError
from .versions import SiteVersionService

logger = logging.getLogger(__name__)

MODE_MERGE = 'merge'
MODE_OVERWRITE = 'overwrite'
APPLY_MODES = (MODE_MERGE, MODE_OVERWRITE)

GALLERY_ALBUMS = ('before', 'after')


class SiteTemplateService:
    """
    Apply a template to a site draft.

    ``overwrite`` replaces the draft with the template. ``merge`` takes
    structure, styles and texts from the template but keeps the media the
    couple already placed on the site (header logo, hero media and gallery
    photos) and any key the template does not know about.

    The draft before the template is kept as a version so the couple can
    restore it.
    """

    @classmethod
    def get_available(cls, wedding):
        return SiteTemplate.objects.available_for(wedding)

    @classmethod
    def apply(cls, site, template, mode=MODE_MERGE, user=None):
        mode = (mode or MODE_MERGE).strip().lower()
        if mode not in APPLY_MODES:
            raise InvalidTemplateModeError('Modo de aplicação inválido. Use "merge" ou "overwrite".')

        existing = schema.normalize(copy.deepcopy(site.draft_content or {}))
        template_content = schema.normalize(copy.deepcopy(template.content or {}))

        if mode == MODE_OVERWRITE:
            applied = template_content
        else:
            applied = cls.merge_content(existing, template_content)

        with transaction.atomic():
            SiteVersionService.create_version(
                site,
                existing,
                user=user,
                summary=f"Snapshot antes do template: {template.name}",
            )
            SiteBuilderService.update_draft(
                site,
                applied,
                user=user,
                summary=f"Template aplicado ({mode}): {template.name}",
            )

        logger.info(f"[SITES] Template {template.slug} applied to site {site.id} ({mode})")
        return site

    @classmethod
    def merge_content(cls, existing, template_content):
        merged = cls._merge_unknown_keys(copy.deepcopy(template_content), existing)
        sections = merged['sections']
        existing_sections = existing.get('sections', {})

        logo = existing_sections.get('header', {}).get('logo', {})
        if sections['header']['logo'].get('type', 'image') == 'image' and (logo.get('url') or '').strip():
            sections['header']['logo'].update(type='image', url=logo['url'], alt=logo.get('alt', ''))

        hero_media = existing_sections.get('hero', {}).get('media', {})
        if isinstance(hero_media, dict) and (hero_media.get('url') or '').strip():
            sections['hero']['media'] = copy.deepcopy(hero_media)

        albums = existing_sections.get('photoGallery', {}).get('albums', {})
        for name in GALLERY_ALBUMS:
            photos = albums.get(name, {}).get('photos')
            if photos:
                sections['photoGallery']['albums'][name]['photos'] = copy.deepcopy(photos)

        return merged

    @classmethod
    def _merge_unknown_keys(cls, template_content, existing):
        # Keys only the existing draft knows survive; nested dicts are walked.
        for key, value in existing.items():
            if key not in template_content:
                template_content[key] = copy.deepcopy(value)
            elif isinstance(template_content[key], dict) and isinstance(value, dict):
                template_content[key] = cls._merge_unknown_keys(template_content[key], value)
        return template_content
