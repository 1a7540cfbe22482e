"""
Tests for SiteBuilderService.
"""

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase

from apps.sites import schema
from apps.sites.models import SiteLayout, SiteVersion
from apps.sites.services import (
    NoPublishedVersionError,
    SiteAlreadyExistsError,
    SiteBuilderService,
    SiteValidationError,
)
from apps.weddings.models import Wedding, WeddingUser

User = get_user_model()


class SiteBuilderServiceTestCase(TestCase):
    """Test the site lifecycle."""

    def setUp(self):
        self.ana = User.objects.create_user(username='ana', email='ana@example.com', password='secret123')
        self.bruno = User.objects.create_user(username='bruno', email='bruno@example.com', password='secret123')
        self.wedding = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno')
        WeddingUser.objects.create(wedding=self.wedding, user=self.ana, role=WeddingUser.ROLE_COUPLE)
        WeddingUser.objects.create(wedding=self.wedding, user=self.bruno, role=WeddingUser.ROLE_COUPLE)
        self.site = SiteBuilderService.create(self.wedding)

    def test_create(self):
        """Test a new site starts unpublished with the default draft."""
        self.assertEqual(self.site.slug, 'ana-bruno')
        self.assertEqual(self.site.draft_content, schema.get_default_content())
        self.assertIsNone(self.site.published_content)
        self.assertFalse(self.site.is_published)
        self.assertTrue(self.site.is_draft)

    def test_create_twice_raises(self):
        with self.assertRaises(SiteAlreadyExistsError):
            SiteBuilderService.create(self.wedding)
        self.assertEqual(SiteLayout.objects.filter(wedding=self.wedding).count(), 1)

    def test_create_uses_unique_slug(self):
        other = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno-2')

        site = SiteBuilderService.create(other)

        self.assertEqual(site.slug, 'ana-bruno-1')

    def test_update_draft_sanitizes_and_normalizes(self):
        SiteBuilderService.update_draft(
            self.site,
            {'sections': {'hero': {'title': 'Oi<script>alert(1)</script>'}}},
            user=self.ana,
        )
        self.site.refresh_from_db()

        hero = self.site.draft_content['sections']['hero']
        self.assertEqual(hero['title'], 'Oi')
        self.assertTrue(hero['enabled'])
        self.assertIn('footer', self.site.draft_content['sections'])

        version = SiteVersion.objects.get(site=self.site)
        self.assertEqual(version.summary, 'Draft updated')
        self.assertEqual(version.user, self.ana)

    def test_update_draft_without_version(self):
        SiteBuilderService.update_draft(self.site, {'sections': {}}, create_version=False)

        self.assertFalse(SiteVersion.objects.filter(site=self.site).exists())

    def test_publish(self):
        with self.captureOnCommitCallbacks(execute=True):
            SiteBuilderService.publish(self.site, user=self.ana)
        self.site.refresh_from_db()

        self.assertTrue(self.site.is_published)
        self.assertIsNotNone(self.site.published_at)
        self.assertEqual(self.site.published_content, self.site.draft_content)
        self.assertFalse(self.site.is_draft)

        version = SiteVersion.objects.get(site=self.site)
        self.assertTrue(version.is_published)
        self.assertEqual(version.summary, 'Site published')

    def test_publish_notifies_the_other_partner(self):
        with self.captureOnCommitCallbacks(execute=True):
            SiteBuilderService.publish(self.site, user=self.ana)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['bruno@example.com'])
        self.assertIn(self.site.public_url, mail.outbox[0].body)

    def test_publish_blocked_by_qa(self):
        self.site.draft_content['sections']['header']['enabled'] = False
        self.site.draft_content['sections']['hero']['enabled'] = False
        self.site.save()

        with self.assertRaises(SiteValidationError) as ctx:
            SiteBuilderService.publish(self.site, user=self.ana)

        self.assertEqual(
            ctx.exception.errors,
            {'qa': ["required_fields: At least one section (Header or Hero) must be enabled"]}
        )
        self.site.refresh_from_db()
        self.assertFalse(self.site.is_published)
        self.assertFalse(SiteVersion.objects.filter(site=self.site).exists())

    def test_publish_blocked_by_broken_structure(self):
        self.site.draft_content['sections']['hero'] = 'not a section'
        self.site.save()

        with self.assertRaises(SiteValidationError) as ctx:
            SiteBuilderService.publish(self.site)

        self.assertEqual(ctx.exception.errors, {'content': ["Section 'hero' must have an 'enabled' field"]})

    def test_rollback_without_published_version(self):
        with self.assertRaises(NoPublishedVersionError):
            SiteBuilderService.rollback(self.site)

    def test_rollback_restores_published_content(self):
        SiteBuilderService.publish(self.site, user=self.ana)
        published = self.site.published_content
        SiteBuilderService.update_draft(self.site, {'sections': {'hero': {'title': 'Rascunho'}}})

        SiteBuilderService.rollback(self.site, user=self.bruno)
        self.site.refresh_from_db()

        self.assertEqual(self.site.draft_content, published)
        self.assertEqual(self.site.published_content, published)
        latest = SiteVersion.objects.filter(site=self.site).first()
        self.assertTrue(latest.is_published)
        self.assertTrue(latest.summary.startswith('Rollback to version of '))

    def test_update_settings(self):
        SiteBuilderService.update_settings(self.site, {
            'slug': 'ana-e-bruno',
            'custom_domain': 'anaebruno.com.br',
            'access_token': 'segredo',
        })
        self.site.refresh_from_db()

        self.assertEqual(self.site.slug, 'ana-e-bruno')
        self.assertEqual(self.site.public_url, 'https://anaebruno.com.br')
        self.assertNotEqual(self.site.access_token, 'segredo')
        self.assertTrue(self.site.check_access_token('segredo'))
        self.assertFalse(self.site.check_access_token('errado'))

    def test_clear_access_token(self):
        SiteBuilderService.update_settings(self.site, {'access_token': 'segredo'})
        SiteBuilderService.update_settings(self.site, {'access_token': '', 'custom_domain': None})
        self.site.refresh_from_db()

        self.assertFalse(self.site.has_password)
        self.assertIsNone(self.site.custom_domain)
        self.assertTrue(self.site.check_access_token(None))
