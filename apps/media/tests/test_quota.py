"""
Tests for QuotaTrackingService.
"""

from django.test import TestCase

from apps.media.models import PlanLimit, SiteMedia
from apps.media.services import QuotaTrackingService, QuotaUsage
from apps.weddings.models import Wedding


class QuotaTrackingServiceTestCase(TestCase):
    """Test usage against plan limits."""

    def setUp(self):
        self.wedding = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno', plan='basic')

    def _add_media(self, size=100, status=SiteMedia.STATUS_COMPLETED, wedding=None):
        return SiteMedia.objects.create(
            wedding=wedding or self.wedding,
            original_name='photo.jpg',
            path='sites/x/media/photo.jpg',
            size=size,
            mime_type='image/jpeg',
            status=status,
        )

    def test_empty_usage_uses_plan_limits(self):
        usage = QuotaTrackingService.get_usage(self.wedding)

        self.assertEqual(usage.current_files, 0)
        self.assertEqual(usage.max_files, 100)
        self.assertEqual(usage.max_storage_bytes, 524288000)
        self.assertFalse(usage.is_at_limit)

    def test_only_completed_media_counts(self):
        self._add_media(size=300)
        self._add_media(size=200)
        self._add_media(size=999, status=SiteMedia.STATUS_FAILED)
        self._add_media(size=999, wedding=Wedding.objects.create(title='Outro', slug='outro'))

        usage = QuotaTrackingService.get_usage(self.wedding)

        self.assertEqual(usage.current_files, 2)
        self.assertEqual(usage.current_storage_bytes, 500)
        self.assertEqual(usage.files_percentage, 2.0)

    def test_usage_is_cached_until_cleared(self):
        QuotaTrackingService.get_usage(self.wedding)
        self._add_media()

        self.assertEqual(QuotaTrackingService.get_usage(self.wedding).current_files, 0)

        QuotaTrackingService.clear_cache(self.wedding)
        self.assertEqual(QuotaTrackingService.get_usage(self.wedding).current_files, 1)

    def test_premium_limits(self):
        self.wedding.plan = 'premium'
        self.wedding.save()

        limits = QuotaTrackingService.get_plan_limits(self.wedding)

        self.assertEqual(limits.max_files, 1000)
        self.assertEqual(limits.max_storage_bytes, 5368709120)

    def test_unknown_plan_falls_back_to_basic(self):
        self.wedding.plan = 'gold'

        self.assertEqual(QuotaTrackingService.get_plan_limits(self.wedding).slug, 'basic')

    def test_missing_plan_rows_use_defaults(self):
        PlanLimit.objects.all().delete()

        limits = QuotaTrackingService.get_plan_limits(self.wedding)

        self.assertEqual(limits.max_files, 100)
        self.assertEqual(limits.max_storage_bytes, 524288000)

    def test_can_upload(self):
        result = QuotaTrackingService.can_upload(self.wedding, file_size=1024)

        self.assertTrue(result.can_upload)
        self.assertEqual(result.to_dict(), {'can_upload': True, 'reason': None, 'upgrade_message': None})

    def test_file_count_limit(self):
        PlanLimit.objects.filter(slug='basic').update(max_files=2)
        self._add_media()
        self._add_media()

        result = QuotaTrackingService.can_upload(self.wedding, file_size=1)

        self.assertFalse(result.can_upload)
        self.assertIn('Cota de arquivos excedida', result.reason)
        self.assertIn('2 arquivos', result.reason)
        self.assertEqual(
            result.upgrade_message,
            'Faça upgrade para o plano premium para aumentar seu limite de arquivos.'
        )

    def test_storage_limit(self):
        PlanLimit.objects.filter(slug='basic').update(max_storage_bytes=1000)
        self._add_media(size=900)

        result = QuotaTrackingService.can_upload(self.wedding, file_size=200)

        self.assertFalse(result.can_upload)
        self.assertIn('Cota de armazenamento excedida', result.reason)
        self.assertEqual(
            result.upgrade_message,
            'Faça upgrade para o plano premium para aumentar seu espaço de armazenamento.'
        )

    def test_premium_gets_no_upgrade_message(self):
        self.wedding.plan = 'premium'
        self.wedding.save()
        PlanLimit.objects.filter(slug='premium').update(max_files=1)
        self._add_media()

        result = QuotaTrackingService.can_upload(self.wedding, file_size=1)

        self.assertFalse(result.can_upload)
        self.assertIsNone(result.upgrade_message)

    def test_multiple_files_are_checked_together(self):
        PlanLimit.objects.filter(slug='basic').update(max_files=3)
        self._add_media()

        self.assertTrue(QuotaTrackingService.can_upload(self.wedding, 1, file_count=2).can_upload)
        self.assertFalse(QuotaTrackingService.can_upload(self.wedding, 1, file_count=3).can_upload)


class QuotaUsageTestCase(TestCase):

    def _usage(self, files_percentage, storage_percentage):
        return QuotaUsage(
            current_files=0,
            max_files=100,
            current_storage_bytes=0,
            max_storage_bytes=1000,
            files_percentage=files_percentage,
            storage_percentage=storage_percentage,
        )

    def test_limits(self):
        self.assertTrue(self._usage(100.0, 0).is_at_limit)
        self.assertTrue(self._usage(0, 100.0).is_at_limit)
        self.assertTrue(self._usage(80.0, 0).is_near_limit())
        self.assertFalse(self._usage(79.9, 50.0).is_near_limit())
        self.assertTrue(self._usage(50.0, 50.0).is_near_limit(threshold=0.5))

    def test_to_dict_rounds_percentages(self):
        data = self._usage(33.3333, 12.3456).to_dict()

        self.assertEqual(data['files_percentage'], 33.33)
        self.assertEqual(data['storage_percentage'], 12.35)
        self.assertFalse(data['is_at_limit'])
        self.assertFalse(data['is_near_limit'])
