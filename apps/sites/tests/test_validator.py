"""
Tests for the publish validation and the QA checklist.
"""

from django.test import SimpleTestCase, TestCase

from apps.media.models import SiteMedia
from apps.sites import schema
from apps.sites.models import SiteLayout
from apps.sites.services import SiteValidator
from apps.sites.services.validator import (
    contrast_ratio,
    is_valid_url,
    parse_color,
    required_contrast_ratio,
)
from apps.weddings.models import Wedding
from core.models import SystemConfig


def publishable_content():
    content = schema.get_default_content()
    content['meta']['title'] = 'Ana & Bruno'
    content['sections']['header']['title'] = 'Ana & Bruno'
    content['sections']['hero']['title'] = 'Vamos casar!'
    content['sections']['saveTheDate']['mapCoordinates'] = {'lat': -23.55, 'lng': -46.63}
    return content


class ColorHelpersTestCase(SimpleTestCase):

    def test_parse_color(self):
        self.assertEqual(parse_color('#fff'), (255, 255, 255, 1.0))
        self.assertEqual(parse_color('#D4A574'), (212, 165, 116, 1.0))
        self.assertEqual(parse_color('rgb(10, 20, 30)'), (10, 20, 30, 1.0))
        self.assertEqual(parse_color('rgba(0, 0, 0, 0.5)'), (0, 0, 0, 0.5))
        self.assertEqual(parse_color('transparent'), (0, 0, 0, 0.0))
        self.assertEqual(parse_color('#00000080')[3], 0.502)

    def test_parse_invalid_color(self):
        self.assertIsNone(parse_color('blue'))
        self.assertIsNone(parse_color('#12345'))
        self.assertIsNone(parse_color(''))
        self.assertIsNone(parse_color(None))

    def test_contrast_ratio(self):
        self.assertAlmostEqual(contrast_ratio('#000000', '#ffffff'), 21.0, places=2)
        self.assertAlmostEqual(contrast_ratio('#ffffff', '#ffffff'), 1.0, places=2)
        self.assertEqual(
            round(contrast_ratio('#000000', '#ffffff'), 4),
            round(contrast_ratio('#ffffff', '#000000'), 4)
        )

    def test_translucent_colors_are_composited(self):
        # Fully transparent text renders as the background itself
        self.assertAlmostEqual(contrast_ratio('rgba(0, 0, 0, 0)', '#ffffff'), 1.0, places=2)
        # A transparent background falls back to white
        self.assertAlmostEqual(contrast_ratio('#000000', 'transparent'), 21.0, places=2)

    def test_required_contrast_ratio(self):
        self.assertEqual(required_contrast_ratio('24px', 400), 3.0)
        self.assertEqual(required_contrast_ratio(19, 'bold'), 3.0)
        self.assertEqual(required_contrast_ratio('18px', 'bold'), 4.5)
        self.assertEqual(required_contrast_ratio(14, 700), 4.5)
        self.assertEqual(required_contrast_ratio(None, None), 4.5)

    def test_is_valid_url(self):
        self.assertTrue(is_valid_url('https://example.com/privacidade'))
        self.assertTrue(is_valid_url('http://example.com'))
        self.assertFalse(is_valid_url('ftp://example.com'))
        self.assertFalse(is_valid_url('javascript:alert(1)'))
        self.assertFalse(is_valid_url(''))


class ValidateForPublishTestCase(SimpleTestCase):

    def test_default_content_is_not_publishable(self):
        result = SiteValidator.validate_for_publish(schema.get_default_content())

        self.assertFalse(result.is_valid)
        self.assertEqual(result.errors, [
            "The site title (meta.title) is required",
            "Header: the title cannot be empty when the section is enabled",
            "Hero: a media (image/video) or a title is required",
            "Save the Date: map coordinates are required when the map is enabled",
        ])

    def test_complete_content_is_valid(self):
        result = SiteValidator.validate_for_publish(publishable_content())

        self.assertTrue(result.is_valid)
        self.assertEqual(result.warnings, [])

    def test_header_or_hero_must_be_enabled(self):
        content = publishable_content()
        content['sections']['header']['enabled'] = False
        content['sections']['hero']['enabled'] = False

        result = SiteValidator.validate_for_publish(content)

        self.assertEqual(result.errors, ["At least one section (Header or Hero) must be enabled"])

    def test_hero_with_media_needs_no_title(self):
        content = publishable_content()
        content['sections']['hero']['title'] = ''
        content['sections']['hero']['media']['url'] = 'https://cdn.example.com/hero.jpg'

        self.assertTrue(SiteValidator.validate_for_publish(content).is_valid)

    def test_invalid_map_coordinates(self):
        content = publishable_content()
        content['sections']['saveTheDate']['mapCoordinates'] = {'lat': 123, 'lng': -46.63}

        result = SiteValidator.validate_for_publish(content)

        self.assertEqual(result.errors, ["Save the Date: map coordinates are invalid"])

    def test_map_disabled_skips_coordinates(self):
        content = publishable_content()
        content['sections']['saveTheDate']['showMap'] = False
        content['sections']['saveTheDate']['mapCoordinates'] = {'lat': None, 'lng': None}

        self.assertTrue(SiteValidator.validate_for_publish(content).is_valid)

    def test_footer_privacy_policy(self):
        content = publishable_content()
        content['sections']['footer']['showPrivacyPolicy'] = True

        result = SiteValidator.validate_for_publish(content)
        self.assertEqual(result.errors, ["Footer: the privacy policy URL is required when it is shown"])

        content['sections']['footer']['privacyPolicyUrl'] = 'privacidade'
        result = SiteValidator.validate_for_publish(content)
        self.assertEqual(result.errors, ["Footer: the privacy policy URL is invalid"])

    def test_logo_without_alt_is_a_warning(self):
        content = publishable_content()
        content['sections']['header']['logo']['url'] = 'https://cdn.example.com/logo.png'

        result = SiteValidator.validate_for_publish(content)

        self.assertTrue(result.is_valid)
        self.assertEqual(
            result.warnings,
            ["Header: the logo should have alternative text for accessibility"]
        )

    def test_gallery_photos_without_alt_are_warnings(self):
        content = publishable_content()
        gallery = content['sections']['photoGallery']
        gallery['enabled'] = True
        gallery['albums']['before']['photos'] = [
            {'url': 'https://cdn.example.com/1.jpg', 'alt': 'Pedido'},
            {'url': 'https://cdn.example.com/2.jpg'},
            {'url': 'https://cdn.example.com/3.mp4', 'type': 'video'},
        ]

        result = SiteValidator.validate_for_publish(content)

        self.assertTrue(result.is_valid)
        self.assertEqual(
            result.warnings,
            ["Photo gallery: these photos have no alternative text: before[1]"]
        )


class QAChecklistTestCase(TestCase):
    """Test the QA checklist run before publishing."""

    def setUp(self):
        self.wedding = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno')
        self.site = SiteLayout.objects.create(
            wedding=self.wedding,
            slug='ana-bruno',
            draft_content=publishable_content(),
        )

    def _check(self, result, name):
        return next(check for check in result.checks if check['name'] == name)

    def test_checks_run_in_order(self):
        result = SiteValidator.run_qa_checklist(self.site)

        self.assertEqual(
            [check['name'] for check in result.checks],
            ['images_alt_text', 'valid_links', 'required_fields', 'wcag_contrast', 'resource_size']
        )

    def test_default_content_can_be_published(self):
        self.site.draft_content = schema.get_default_content()

        result = SiteValidator.run_qa_checklist(self.site)

        self.assertTrue(result.can_publish())
        self.assertEqual(result.get_failed_checks(), [])
        # The default primary colour is too light for text on white
        self.assertEqual(self._check(result, 'wcag_contrast')['status'], 'warning')
        self.assertEqual(result.get_counts(), {'total': 5, 'passed': 4, 'failed': 0, 'warnings': 1})

    def test_missing_alt_text_fails(self):
        self.site.draft_content['sections']['hero']['media']['url'] = 'https://cdn.example.com/hero.jpg'

        result = SiteValidator.run_qa_checklist(self.site)
        check = self._check(result, 'images_alt_text')

        self.assertEqual(check['status'], 'fail')
        self.assertEqual(check['section'], 'hero')
        self.assertFalse(result.can_publish())

    def test_invalid_links_fail(self):
        self.site.draft_content['sections']['hero']['ctaPrimary']['target'] = 'ftp://example.com'
        self.site.draft_content['sections']['footer']['socialLinks'] = [{'url': 'instagram'}]

        result = SiteValidator.run_qa_checklist(self.site)
        check = self._check(result, 'valid_links')

        self.assertEqual(check['status'], 'fail')
        self.assertEqual(check['message'], "2 invalid link(s) found")
        self.assertEqual(check['section'], 'hero')

    def test_anchor_links_are_valid(self):
        self.site.draft_content['sections']['hero']['ctaPrimary']['target'] = '#rsvp'

        result = SiteValidator.run_qa_checklist(self.site)

        self.assertEqual(self._check(result, 'valid_links')['status'], 'pass')

    def test_required_fields_fail_without_header_and_hero(self):
        self.site.draft_content['sections']['header']['enabled'] = False
        self.site.draft_content['sections']['hero']['enabled'] = False

        result = SiteValidator.run_qa_checklist(self.site)

        self.assertEqual(self._check(result, 'required_fields')['status'], 'fail')
        self.assertFalse(result.can_publish())

    def test_readable_colors_pass_contrast(self):
        content = self.site.draft_content
        content['theme']['primaryColor'] = '#222222'
        content['sections']['saveTheDate']['enabled'] = False

        result = SiteValidator.run_qa_checklist(self.site)

        self.assertEqual(self._check(result, 'wcag_contrast')['status'], 'pass')

    def test_resource_size_over_threshold_is_a_warning(self):
        SystemConfig.set('site.performance_threshold', 1000)
        path = f"sites/{self.wedding.id}/media/hero.jpg"
        SiteMedia.objects.create(
            wedding=self.wedding,
            original_name='hero.jpg',
            path=path,
            size=5000,
            mime_type='image/jpeg',
        )
        hero = self.site.draft_content['sections']['hero']
        hero['media']['url'] = f"http://testserver/media/{path}"
        hero['media']['alt'] = 'Ana e Bruno'

        result = SiteValidator.run_qa_checklist(self.site)
        check = self._check(result, 'resource_size')

        self.assertEqual(check['status'], 'warning')
        self.assertIn('hero.jpg', check['message'])
        self.assertTrue(result.can_publish())

    def test_unreferenced_media_is_not_counted(self):
        SiteMedia.objects.create(
            wedding=self.wedding,
            original_name='other.jpg',
            path=f"sites/{self.wedding.id}/media/other.jpg",
            size=10 * 1024 * 1024,
            mime_type='image/jpeg',
        )

        total, top_files = SiteValidator.calculate_resource_size(self.site)

        self.assertEqual(total, 0)
        self.assertEqual(top_files, [])

    def test_to_dict(self):
        data = SiteValidator.run_qa_checklist(self.site).to_dict()

        self.assertEqual(set(data), {'passed', 'can_publish', 'checks', 'counts'})
        self.assertEqual(data['counts']['total'], 5)
