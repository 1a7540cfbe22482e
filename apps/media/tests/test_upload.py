"""
Tests for MediaUploadService.
"""

from io import BytesIO

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from apps.media.models import SiteMedia
from apps.media.services import MediaUploadError, MediaUploadService, QuotaTrackingService
from apps.weddings.models import Wedding
from core.models import SystemConfig

from .helpers import (
    animated_gif_file, heic_bytes, image_bytes, image_file, mp4_file, oversized_png_bytes, webm_file,
)


class DetectionTestCase(TestCase):
    """Test MIME detection and the malware scan."""

    def test_detect_image_types(self):
        self.assertEqual(MediaUploadService.detect_mime_type(image_file('a.png', 'PNG')), 'image/png')
        self.assertEqual(MediaUploadService.detect_mime_type(image_file('a.jpg', 'JPEG')), 'image/jpeg')
        self.assertEqual(MediaUploadService.detect_mime_type(image_file('a.gif', 'GIF')), 'image/gif')
        self.assertEqual(MediaUploadService.detect_mime_type(image_file('a.webp', 'WEBP')), 'image/webp')

    def test_detect_video_types(self):
        self.assertEqual(MediaUploadService.detect_mime_type(webm_file()), 'video/webm')
        self.assertEqual(MediaUploadService.detect_mime_type(mp4_file()), 'video/mp4')

    def test_detect_unknown_content(self):
        blob = SimpleUploadedFile('a.png', b'\x00' * 64)

        self.assertEqual(MediaUploadService.detect_mime_type(blob), 'application/octet-stream')

    def test_heic_is_not_taken_for_mp4(self):
        heic = SimpleUploadedFile('clip.mp4', heic_bytes(), content_type='video/mp4')

        self.assertNotEqual(MediaUploadService.detect_mime_type(heic), 'video/mp4')
        self.assertFalse(MediaUploadService.validate_file(heic).is_valid)

    def test_empty_file_uses_declared_type(self):
        empty = SimpleUploadedFile('a.png', b'', content_type='image/png')

        self.assertEqual(MediaUploadService.detect_mime_type(empty), 'image/png')

    def test_detection_rewinds_the_file(self):
        upload = image_file()
        MediaUploadService.detect_mime_type(upload)

        self.assertEqual(upload.tell(), 0)

    def test_scan_for_malware(self):
        self.assertTrue(MediaUploadService.scan_for_malware(image_file()))
        self.assertFalse(MediaUploadService.scan_for_malware(SimpleUploadedFile('a.jpg', b'MZ\x90\x00')))
        self.assertFalse(MediaUploadService.scan_for_malware(SimpleUploadedFile('a.jpg', b'#!/bin/sh\n')))
        self.assertFalse(MediaUploadService.scan_for_malware(
            SimpleUploadedFile('a.jpg', b'\xff\xd8 junk <SCRIPT>alert(1)</SCRIPT>')
        ))
        self.assertFalse(MediaUploadService.scan_for_malware(SimpleUploadedFile('a.jpg', b'xx <?= $a ?>')))

    def test_signatures_anywhere_in_first_kilobyte(self):
        for marker in (b'MZ', b'#!/bin/sh', b'<?php'):
            upload = SimpleUploadedFile('a.jpg', b'\xff\xd8' + b'\x00' * 900 + marker)
            self.assertFalse(MediaUploadService.scan_for_malware(upload), marker)

    def test_markers_after_first_kilobyte_are_ignored(self):
        upload = SimpleUploadedFile('a.jpg', b'\x00' * 1024 + b'MZ #!/bin/sh')

        self.assertTrue(MediaUploadService.scan_for_malware(upload))

    def test_signatures_after_first_kilobyte_are_ignored(self):
        upload = SimpleUploadedFile('a.jpg', b'\x00' * 2048 + b'<?php')

        self.assertTrue(MediaUploadService.scan_for_malware(upload))


class ValidateFileTestCase(TestCase):

    def test_valid_image(self):
        self.assertTrue(MediaUploadService.validate_file(image_file('a.png')).is_valid)

    def test_blocked_extension(self):
        result = MediaUploadService.validate_file(SimpleUploadedFile('shell.php', b'<?php echo 1;'))

        self.assertEqual(result.errors, ["Tipo de arquivo não permitido: .php"])

    def test_extension_not_allowed(self):
        result = MediaUploadService.validate_file(SimpleUploadedFile('doc.pdf', b'%PDF-1.4'))

        self.assertEqual(
            result.errors,
            ["Tipo de arquivo não permitido. Use: jpg, jpeg, png, gif, webp, mp4, webm"]
        )

    def test_extension_must_match_content(self):
        result = MediaUploadService.validate_file(image_file('photo.jpg', 'PNG'))

        self.assertEqual(
            result.errors,
            ["Tipo de arquivo não corresponde à extensão. Esperado: image/jpeg, encontrado: image/png"]
        )

    def test_original_name_wins_over_file_name(self):
        upload = image_file('blob', 'PNG')

        self.assertTrue(MediaUploadService.validate_file(upload, 'photo.png').is_valid)

    def test_image_size_limit(self):
        SystemConfig.set('media.max_image_size', 10)

        result = MediaUploadService.validate_file(image_file())

        self.assertEqual(result.errors, ["Imagem excede o limite de 0MB"])

    def test_video_size_limit(self):
        SystemConfig.set('media.max_video_size', 10)

        result = MediaUploadService.validate_file(mp4_file())

        self.assertEqual(result.errors, ["Vídeo excede o limite de 0MB"])

    def test_configured_extensions(self):
        SystemConfig.set('site.allowed_extensions', ['png'])

        self.assertFalse(MediaUploadService.validate_file(image_file('a.jpg', 'JPEG')).is_valid)
        self.assertTrue(MediaUploadService.validate_file(image_file('a.png', 'PNG')).is_valid)


    def test_pixel_bomb_is_rejected(self):
        upload = SimpleUploadedFile('bomb.png', oversized_png_bytes(), content_type='image/png')

        result = MediaUploadService.validate_file(upload)

        self.assertEqual(result.errors, ["Imagem excede o limite de pixels"])
        self.assertEqual(upload.tell(), 0)

    def test_truncated_image_is_rejected(self):
        upload = SimpleUploadedFile('broken.png', image_bytes()[:20], content_type='image/png')

        result = MediaUploadService.validate_file(upload)

        self.assertFalse(result.is_valid)

class UploadTestCase(TestCase):
    """Test storing files and generating image variants."""

    def setUp(self):
        self.wedding = Wedding.objects.create(title='Ana & Bruno', slug='ana-bruno')

    def test_upload_small_png(self):
        media = MediaUploadService.upload(image_file('photo.png'), self.wedding)

        self.assertEqual(media.status, SiteMedia.STATUS_COMPLETED)
        self.assertEqual(media.mime_type, 'image/png')
        self.assertEqual(media.original_name, 'photo.png')
        self.assertEqual((media.width, media.height), (10, 10))
        self.assertTrue(media.path.startswith(f"sites/{self.wedding.id}/media/"))
        self.assertTrue(media.path.endswith('.png'))
        self.assertEqual(media.size, default_storage.size(media.path))

        self.assertEqual(set(media.variants), {'webp', 'thumbnail'})
        self.assertTrue(media.variants['webp'].endswith('.webp'))
        for path in media.variants.values():
            self.assertTrue(default_storage.exists(path))

    def test_large_image_gets_retina_variants(self):
        media = MediaUploadService.upload(image_file('big.jpg', 'JPEG', size=(800, 640)), self.wedding)

        self.assertEqual(media.variants['2x'], media.path)
        with default_storage.open(media.variants['1x']) as handle:
            self.assertEqual(Image.open(handle).size, (400, 320))
        with default_storage.open(media.variants['thumbnail']) as handle:
            self.assertEqual(Image.open(handle).size, (300, 240))

    def test_image_is_clamped_to_max_dimensions(self):
        SystemConfig.set('media.max_image_width', 100)
        SystemConfig.set('media.max_image_height', 100)

        media = MediaUploadService.upload(image_file('wide.png', size=(400, 200)), self.wedding)

        self.assertEqual((media.width, media.height), (100, 50))
        with default_storage.open(media.path) as handle:
            self.assertEqual(Image.open(handle).size, (100, 50))

    def test_webp_upload_is_its_own_webp_variant(self):
        media = MediaUploadService.upload(image_file('photo.webp', 'WEBP'), self.wedding)

        self.assertEqual(media.mime_type, 'image/webp')
        self.assertEqual(media.variants['webp'], media.path)

    def test_animated_gif_is_stored_untouched(self):
        upload = animated_gif_file()
        original = upload.read()
        upload.seek(0)

        media = MediaUploadService.upload(upload, self.wedding)

        with default_storage.open(media.path) as handle:
            self.assertEqual(handle.read(), original)
        self.assertIn('thumbnail', media.variants)
        self.assertEqual((media.width, media.height), (20, 20))

    def test_video_is_stored_without_variants(self):
        media = MediaUploadService.upload(mp4_file(), self.wedding)

        self.assertEqual(media.mime_type, 'video/mp4')
        self.assertEqual(media.variants, {})
        self.assertIsNone(media.width)
        self.assertTrue(media.path.endswith('.mp4'))

    def test_invalid_file_is_rejected(self):
        with self.assertRaises(MediaUploadError) as ctx:
            MediaUploadService.upload(image_file('photo.gif', 'PNG'), self.wedding)

        self.assertEqual(ctx.exception.message, 'File validation failed')
        self.assertFalse(SiteMedia.objects.exists())

    def test_malicious_image_is_rejected(self):
        info = PngInfo()
        info.add_text('Comment', "<?php system($_GET['c']); ?>")
        upload = SimpleUploadedFile('photo.png', image_bytes('PNG', pnginfo=info), content_type='image/png')

        with self.assertRaises(MediaUploadError) as ctx:
            MediaUploadService.upload(upload, self.wedding)

        self.assertEqual(ctx.exception.message, 'File rejected for security reasons')
        self.assertEqual(ctx.exception.errors, ['File appears to be malicious'])
        self.assertFalse(SiteMedia.objects.exists())

    def test_pixel_bomb_upload_raises_upload_error(self):
        upload = SimpleUploadedFile('bomb.png', oversized_png_bytes(), content_type='image/png')

        with self.assertRaises(MediaUploadError) as ctx:
            MediaUploadService.upload(upload, self.wedding)

        self.assertEqual(ctx.exception.errors, ["Imagem excede o limite de pixels"])
        self.assertFalse(SiteMedia.objects.exists())

    def test_storage_limit(self):
        SystemConfig.set('site.max_storage_per_wedding', 10)

        with self.assertRaises(MediaUploadError) as ctx:
            MediaUploadService.upload(image_file(), self.wedding)

        self.assertEqual(ctx.exception.message, 'Storage quota exceeded')

    def test_upload_clears_quota_cache(self):
        QuotaTrackingService.get_usage(self.wedding)

        MediaUploadService.upload(image_file(), self.wedding)

        self.assertEqual(QuotaTrackingService.get_usage(self.wedding).current_files, 1)

    def test_storage_usage(self):
        first = MediaUploadService.upload(image_file('a.png'), self.wedding)
        second = MediaUploadService.upload(image_file('b.png'), self.wedding)

        self.assertEqual(MediaUploadService.get_storage_usage(self.wedding), first.size + second.size)

    def test_delete_removes_files(self):
        media = MediaUploadService.upload(image_file(), self.wedding)
        paths = [media.path] + list(media.variants.values())

        MediaUploadService.delete(media)

        self.assertFalse(SiteMedia.objects.exists())
        for path in paths:
            self.assertFalse(default_storage.exists(path))


class ResizeTestCase(TestCase):

    def test_image_within_limits_is_unchanged(self):
        image = Image.new('RGB', (50, 40))

        self.assertIs(MediaUploadService.resize_to_max_dimensions(image), image)

    def test_tall_image_keeps_ratio(self):
        SystemConfig.set('media.max_image_width', 1000)
        SystemConfig.set('media.max_image_height', 100)

        resized = MediaUploadService.resize_to_max_dimensions(Image.new('RGB', (300, 600)))

        self.assertEqual(resized.size, (50, 100))

    def test_encode_jpeg_converts_transparency(self):
        data = MediaUploadService._encode(Image.new('RGBA', (5, 5)), 'JPEG', 85)

        self.assertEqual(Image.open(BytesIO(data)).format, 'JPEG')
