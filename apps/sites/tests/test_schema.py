"""
Tests for the site content schema.
"""

from django.test import SimpleTestCase

from apps.sites import schema


class DefaultContentTestCase(SimpleTestCase):

    def test_default_content_has_every_section(self):
        content = schema.get_default_content()

        self.assertEqual(content['version'], '1.0')
        for name in schema.REQUIRED_SECTIONS:
            self.assertIn(name, content['sections'])
            self.assertIn('enabled', content['sections'][name])

    def test_default_theme(self):
        theme = schema.get_default_content()['theme']

        self.assertEqual(theme['primaryColor'], '#d4a574')
        self.assertEqual(theme['secondaryColor'], '#8b7355')
        self.assertEqual(theme['fontFamily'], 'Playfair Display')
        self.assertEqual(theme['fontSize'], '16px')

    def test_default_content_is_a_fresh_copy(self):
        first = schema.get_default_content()
        first['sections']['hero']['title'] = 'Changed'

        self.assertEqual(schema.get_default_content()['sections']['hero']['title'], '')


class ValidateTestCase(SimpleTestCase):

    def test_default_content_is_valid(self):
        self.assertEqual(schema.validate(schema.get_default_content()), [])

    def test_missing_sections_key(self):
        self.assertEqual(schema.validate({}), ["Content must have a 'sections' key"])
        self.assertEqual(schema.validate({'sections': []}), ["Content must have a 'sections' key"])

    def test_missing_required_section(self):
        content = schema.get_default_content()
        del content['sections']['rsvp']
        del content['sections']['footer']

        errors = schema.validate(content)

        self.assertIn("Missing required section: rsvp", errors)
        self.assertIn("Missing required section: footer", errors)

    def test_section_without_enabled_flag(self):
        content = schema.get_default_content()
        del content['sections']['hero']['enabled']

        self.assertEqual(schema.validate(content), ["Section 'hero' must have an 'enabled' field"])


class NormalizeTestCase(SimpleTestCase):

    def test_missing_keys_are_filled(self):
        normalized = schema.normalize({'sections': {'hero': {'title': 'Ana & Bruno'}}})

        self.assertEqual(normalized['version'], '1.0')
        self.assertEqual(normalized['sections']['hero']['title'], 'Ana & Bruno')
        self.assertTrue(normalized['sections']['hero']['enabled'])
        self.assertEqual(normalized['sections']['hero']['style']['overlay']['opacity'], 0.3)
        self.assertIn('footer', normalized['sections'])
        self.assertEqual(normalized['theme']['primaryColor'], '#d4a574')
        self.assertEqual(schema.validate(normalized), [])

    def test_given_values_win_over_defaults(self):
        navigation = [{'label': 'RSVP', 'target': '#rsvp'}]
        normalized = schema.normalize({
            'sections': {'header': {'enabled': False, 'navigation': navigation}},
            'theme': {'primaryColor': '#000000'},
        })

        self.assertFalse(normalized['sections']['header']['enabled'])
        self.assertEqual(normalized['sections']['header']['navigation'], navigation)
        self.assertEqual(normalized['theme']['primaryColor'], '#000000')
        self.assertEqual(normalized['theme']['fontSize'], '16px')

    def test_unknown_keys_are_kept(self):
        normalized = schema.normalize({'sections': {'custom': {'enabled': True}}})

        self.assertEqual(normalized['sections']['custom'], {'enabled': True})

    def test_non_dict_content_becomes_default(self):
        self.assertEqual(schema.normalize(None), schema.get_default_content())
