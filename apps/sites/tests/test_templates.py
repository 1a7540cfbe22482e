"""
Tests for site templates and SiteTemplateService.
"""

from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.sites import schema
from apps.sites.models import SiteTemplate, SiteVersion
from apps.sites.services import InvalidTemplateModeError, SiteBuilderService, SiteTemplateService
from apps.weddings.models import Wedding

User = get_user_model()

LOGO = 'https://cdn.example.com/sites/logo-existente.png'
HERO = 'https://cdn.example.com/sites/hero-existente.png'
PHOTO = 'https://cdn.example.com/sites/galeria-existente.png'


class SiteTemplateModelTestCase(TestCase):

    def setUp(self):
        self.wedding = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno')
        self.other = Wedding.objects.create(title='Carla & Davi', slug='carla-davi')

    def test_system_templates_are_seeded(self):
        slugs = set(SiteTemplate.objects.filter(wedding__isnull=True).values_list('slug', flat=True))

        self.assertTrue({'classico', 'moderno', 'minimalista', 'romantico'} <= slugs)
        self.assertTrue(SiteTemplate.objects.get(slug='classico').is_system)

    def test_available_for_wedding(self):
        own = SiteTemplate.objects.create(wedding=self.wedding, name='Nosso', slug='nosso')
        foreign = SiteTemplate.objects.create(wedding=self.other, name='Deles', slug='deles')

        available = SiteTemplate.objects.available_for(self.wedding)

        self.assertIn(own, available)
        self.assertNotIn(foreign, available)
        self.assertIn(SiteTemplate.objects.get(slug='moderno'), available)
        self.assertTrue(own.is_available_for(self.wedding))
        self.assertFalse(foreign.is_available_for(self.wedding))


class SiteTemplateServiceTestCase(TestCase):
    """Test applying templates in merge and overwrite modes."""

    def setUp(self):
        self.user = User.objects.create_user(username='ana', email='ana@example.com', password='secret123')
        self.wedding = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno')
        self.site = SiteBuilderService.create(self.wedding)

        content = schema.get_default_content()
        content['sections']['header']['title'] = 'Título Atual'
        content['sections']['header']['logo']['url'] = LOGO
        content['sections']['hero']['media']['url'] = HERO
        content['sections']['photoGallery']['albums']['before']['photos'] = [{'url': PHOTO}]
        content['sections']['footer']['customNote'] = 'Nota do casal'
        SiteBuilderService.update_draft(self.site, content, user=self.user, create_version=False)

        template_content = schema.get_default_content()
        template_content['theme']['primaryColor'] = '#e84393'
        template_content['sections']['header']['title'] = 'Título do Template'
        template_content['sections']['header']['logo']['url'] = 'https://cdn.example.com/templates/logo.png'
        template_content['sections']['hero']['media']['url'] = 'https://cdn.example.com/templates/hero.png'
        self.template = SiteTemplate.objects.create(
            name='Template Merge',
            slug='template-merge',
            content=template_content,
            is_public=True,
        )

    def test_merge_keeps_couple_media_and_takes_template_text(self):
        site = SiteTemplateService.apply(self.site, self.template, mode='merge', user=self.user)
        sections = site.draft_content['sections']

        self.assertEqual(sections['header']['title'], 'Título do Template')
        self.assertEqual(site.draft_content['theme']['primaryColor'], '#e84393')
        self.assertEqual(sections['header']['logo']['url'], LOGO)
        self.assertEqual(sections['hero']['media']['url'], HERO)
        self.assertEqual(sections['photoGallery']['albums']['before']['photos'], [{'url': PHOTO}])
        self.assertEqual(sections['footer']['customNote'], 'Nota do casal')

    def test_overwrite_replaces_the_draft(self):
        site = SiteTemplateService.apply(self.site, self.template, mode='overwrite', user=self.user)
        sections = site.draft_content['sections']

        self.assertEqual(sections['header']['logo']['url'], 'https://cdn.example.com/templates/logo.png')
        self.assertEqual(sections['hero']['media']['url'], 'https://cdn.example.com/templates/hero.png')
        self.assertEqual(sections['photoGallery']['albums']['before']['photos'], [])
        self.assertNotIn('customNote', sections['footer'])

    def test_previous_draft_is_kept_as_version(self):
        SiteTemplateService.apply(self.site, self.template, user=self.user)

        versions = list(SiteVersion.objects.filter(site=self.site).order_by('created_at', 'id'))

        self.assertEqual(
            [version.summary for version in versions],
            ['Snapshot antes do template: Template Merge', 'Template aplicado (merge): Template Merge']
        )
        self.assertEqual(versions[0].content['sections']['header']['title'], 'Título Atual')
        self.assertEqual(versions[1].user, self.user)

    def test_partial_template_content_is_normalized(self):
        template = SiteTemplate.objects.get(slug='classico')

        site = SiteTemplateService.apply(self.site, template, mode='overwrite')

        self.assertEqual(schema.validate(site.draft_content), [])
        self.assertEqual(site.draft_content['sections']['header']['style']['backgroundColor'], '#faf8f5')

    def test_invalid_mode(self):
        with self.assertRaises(InvalidTemplateModeError):
            SiteTemplateService.apply(self.site, self.template, mode='replace')

        self.assertFalse(SiteVersion.objects.filter(site=self.site).exists())
