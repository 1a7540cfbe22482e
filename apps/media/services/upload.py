"""Validation, storage and image optimisation of uploaded media."""

import logging
import os
import posixpath
import uuid
from io import BytesIO

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db.models import Sum
import magic
from PIL import Image, UnidentifiedImageError

from apps.media.models import SiteMedia
from apps.sites.services.validator import ValidationResult
from core.models import SystemConfig

from .exceptions import MediaUploadError
from .quota import QuotaTrackingService

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif', 'webp', 'mp4', 'webm']
DEFAULT_BLOCKED_EXTENSIONS = ['exe', 'bat', 'sh', 'php', 'js', 'html']

EXTENSION_TO_MIME = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
    'mp4': 'video/mp4',
    'webm': 'video/webm',
}

# Pillow format name used when re-encoding each image type
PIL_FORMATS = {
    'image/jpeg': 'JPEG',
    'image/png': 'PNG',
    'image/gif': 'GIF',
    'image/webp': 'WEBP',
}

# Script markers, matched case-insensitively anywhere in the first kilobyte
DANGEROUS_SIGNATURES = (b'<?php', b'<?=', b'<script')
# Shebang and DOS/PE executable markers, matched byte for byte in the same window
DANGEROUS_MARKERS = (b'#!/', b'MZ')

SCAN_BYTES = 1024
MAGIC_BYTES = 2048
OPTIMIZE_QUALITY = 85
THUMBNAIL_SIZE = (300, 300)
RETINA_MIN_SIDE = 600


def _read_head(file, length):
    file.seek(0)
    head = file.read(length)
    file.seek(0)
    return head or b''


def resolve_file_name(file, original_name=None):
    return original_name or os.path.basename(getattr(file, 'name', '') or '')


def get_extension(name):
    return os.path.splitext(name)[1].lstrip('.').lower()


class MediaUploadService:
    """Store files of the wedding media library."""

    @classmethod
    def upload(cls, file, wedding, site=None, user=None, original_name=None):
        """
        Validate, scan and store ``file`` for ``wedding``.

        Images are clamped to the maximum dimensions, re-compressed and get
        their ``webp``, ``thumbnail`` and retina variants. Raises
        ``MediaUploadError`` when the file is rejected.
        """
        original_name = resolve_file_name(file, original_name)

        validation = cls.validate_file(file, original_name)
        if not validation.is_valid:
            raise MediaUploadError.validation_failed(validation.errors)

        max_storage = int(SystemConfig.get(
            'site.max_storage_per_wedding', settings.MEDIA_MAX_STORAGE_PER_WEDDING
        ))
        if cls.get_storage_usage(wedding) + file.size > max_storage:
            raise MediaUploadError.storage_quota_exceeded(max_storage)

        if not cls.scan_for_malware(file):
            logger.warning(f"[MEDIA] Malicious upload rejected for wedding {wedding.id}: {original_name}")
            raise MediaUploadError.malware_detected()

        extension = get_extension(original_name)
        mime_type = cls.detect_mime_type(file)
        path = f"sites/{wedding.id}/media/{uuid.uuid4()}.{extension}"

        width = height = None
        variants = {}
        if mime_type in PIL_FORMATS:
            path, variants, width, height = cls._store_image(file, path, mime_type, original_name)
        else:
            file.seek(0)
            path = default_storage.save(path, file)

        media = SiteMedia.objects.create(
            wedding=wedding,
            site=site,
            uploaded_by=user,
            original_name=original_name[:255],
            path=path,
            size=default_storage.size(path),
            mime_type=mime_type,
            width=width,
            height=height,
            variants=variants,
            status=SiteMedia.STATUS_COMPLETED,
        )
        QuotaTrackingService.clear_cache(wedding)

        logger.info(f"[MEDIA] Stored {original_name} as {path} ({media.size} bytes) for wedding {wedding.id}")
        return media

    @classmethod
    def validate_file(cls, file, original_name=None):
        result = ValidationResult()
        extension = get_extension(resolve_file_name(file, original_name))

        blocked = SystemConfig.get('site.blocked_extensions', DEFAULT_BLOCKED_EXTENSIONS)
        if extension in blocked:
            return result.add_error(f"Tipo de arquivo não permitido: .{extension}")

        allowed = SystemConfig.get('site.allowed_extensions', DEFAULT_ALLOWED_EXTENSIONS)
        if extension not in allowed:
            return result.add_error(f"Tipo de arquivo não permitido. Use: {', '.join(allowed)}")

        real_mime_type = cls.detect_mime_type(file)
        expected_mime_type = EXTENSION_TO_MIME.get(extension)
        if expected_mime_type and real_mime_type != expected_mime_type:
            return result.add_error(
                f"Tipo de arquivo não corresponde à extensão. "
                f"Esperado: {expected_mime_type}, encontrado: {real_mime_type}"
            )

        if real_mime_type.startswith('image/'):
            max_size = SystemConfig.get('media.max_image_size', 10485760)
            message = "Imagem excede o limite de {}MB"
        elif real_mime_type.startswith('video/'):
            max_size = SystemConfig.get('media.max_video_size', 104857600)
            message = "Vídeo excede o limite de {}MB"
        else:
            max_size = SystemConfig.get('site.max_file_size', 10485760)
            message = "Arquivo excede o limite de {}MB"

        if file.size > max_size:
            return result.add_error(message.format(round(max_size / 1024 / 1024)))

        if real_mime_type in PIL_FORMATS:
            image_error = cls.check_image(file)
            if image_error:
                result.add_error(image_error)

        return result

    @staticmethod
    def detect_mime_type(file):
        """
        MIME type from the file contents, as reported by libmagic.

        Empty files fall back to the type declared by the client.
        """
        head = _read_head(file, MAGIC_BYTES)
        if not head:
            declared = getattr(file, 'content_type', None)
            return declared if declared and declared != 'application/octet-stream' else 'application/octet-stream'

        return magic.from_buffer(head, mime=True)

    @staticmethod
    def check_image(file):
        """
        Open the image header with Pillow and return an error message, or None.

        Only the header is parsed, so oversized pixel counts are caught before
        any pixel data is decoded.
        """
        try:
            Image.open(file).close()
        except Image.DecompressionBombError:
            return "Imagem excede o limite de pixels"
        except (UnidentifiedImageError, OSError):
            return "Imagem inválida ou corrompida"
        finally:
            file.seek(0)
        return None

    @staticmethod
    def scan_for_malware(file):
        """False when the head of the file carries an executable or script signature."""
        head = _read_head(file, SCAN_BYTES)

        for marker in DANGEROUS_MARKERS:
            if marker in head:
                logger.warning(f"[MEDIA] Dangerous file marker detected: {marker!r}")
                return False

        lowered = head.lower()
        for signature in DANGEROUS_SIGNATURES:
            if signature in lowered:
                logger.warning(f"[MEDIA] Dangerous signature detected: {signature!r}")
                return False

        return True

    @staticmethod
    def get_max_dimensions():
        return (
            int(SystemConfig.get('media.max_image_width', 4096)),
            int(SystemConfig.get('media.max_image_height', 4096)),
        )

    @classmethod
    def resize_to_max_dimensions(cls, image):
        """Return ``image`` scaled down to fit the maximum dimensions, keeping its ratio."""
        max_width, max_height = cls.get_max_dimensions()
        width, height = image.size
        if width <= max_width and height <= max_height:
            return image

        ratio = min(max_width / width, max_height / height)
        new_size = (max(int(width * ratio), 1), max(int(height * ratio), 1))
        logger.info(f"[MEDIA] Image resized from {width}x{height} to {new_size[0]}x{new_size[1]}")
        return image.resize(new_size, Image.LANCZOS)

    @classmethod
    def get_storage_usage(cls, wedding):
        return SiteMedia.objects.filter(wedding=wedding).aggregate(total=Sum('size'))['total'] or 0

    @classmethod
    def delete(cls, media):
        """Remove the stored file, its variants and the row."""
        paths = {media.path} | set((media.variants or {}).values())
        for path in paths:
            if path and default_storage.exists(path):
                default_storage.delete(path)

        wedding = media.wedding
        media.delete()
        QuotaTrackingService.clear_cache(wedding)
        logger.info(f"[MEDIA] Deleted media {media.original_name} of wedding {wedding.id}")
        return True

    @classmethod
    def rename(cls, media, name):
        """Change the display name; the stored file keeps its path."""
        name = name.strip()
        extension = get_extension(media.original_name)
        if extension and get_extension(name) != extension:
            name = f"{name}.{extension}"

        media.original_name = name[:255]
        media.save(update_fields=['original_name', 'updated_at'])
        logger.info(f"[MEDIA] Media {media.id} renamed to {media.original_name}")
        return media

    @classmethod
    def crop(cls, media, x, y, width, height, user=None):
        """
        Store the ``width`` x ``height`` area at ``(x, y)`` of an image as new media.

        The source media is left untouched. The cropped copy lands in the
        same album and gets its own variants. Raises ``MediaUploadError``
        when the media is not an image or the area falls outside it, and
        ``FileNotFoundError`` when the stored file is gone.
        """
        if media.mime_type not in PIL_FORMATS:
            raise MediaUploadError('Invalid media type', ['Apenas imagens podem ser cortadas.'])
        if not media.path or not default_storage.exists(media.path):
            raise FileNotFoundError(media.path)

        image_format = PIL_FORMATS[media.mime_type]
        with default_storage.open(media.path, 'rb') as handle:
            with Image.open(handle) as source:
                source.load()
                image = source.copy()

        if x + width > image.width or y + height > image.height:
            raise MediaUploadError.validation_failed(['A área de corte excede os limites da imagem.'])

        cropped = image.crop((x, y, x + width, y + height))

        directory, filename = posixpath.split(media.path)
        name, extension = posixpath.splitext(filename)
        path = posixpath.join(directory, f"{name}_cropped_{uuid.uuid4().hex[:8]}{extension}")
        path = default_storage.save(path, ContentFile(cls._encode(cropped, image_format, OPTIMIZE_QUALITY)))
        variants = cls._generate_variants(cropped, path, image_format)

        cropped_media = SiteMedia.objects.create(
            wedding_id=media.wedding_id,
            site_id=media.site_id,
            album_id=media.album_id,
            uploaded_by=user,
            original_name=f"{media.original_name} (cortada)"[:255],
            path=path,
            size=default_storage.size(path),
            mime_type=media.mime_type,
            width=width,
            height=height,
            variants=variants,
            status=SiteMedia.STATUS_COMPLETED,
        )
        QuotaTrackingService.clear_cache(media.wedding)

        logger.info(f"[MEDIA] Media {media.id} cropped to {width}x{height} as {cropped_media.id}")
        return cropped_media

    @classmethod
    def _store_image(cls, file, path, mime_type, original_name=None):
        file.seek(0)
        data = file.read()
        image_format = PIL_FORMATS[mime_type]

        try:
            with Image.open(BytesIO(data)) as source:
                source.load()
                animated = getattr(source, 'is_animated', False)
                image = source.copy()
        except Image.DecompressionBombError:
            raise MediaUploadError.validation_failed(["Imagem excede o limite de pixels"])
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"[MEDIA] Could not decode {original_name}: {e}")
            raise MediaUploadError.validation_failed(["Imagem inválida ou corrompida"])

        # Animated images keep their frames; only the first one feeds the variants.
        if animated:
            path = default_storage.save(path, ContentFile(data))
            variants = cls._generate_variants(image, path, image_format)
            width, height = image.size
            return path, variants, width, height

        image = cls.resize_to_max_dimensions(image)
        path = default_storage.save(path, ContentFile(cls._encode(image, image_format, OPTIMIZE_QUALITY)))
        variants = cls._generate_variants(image, path, image_format)
        width, height = image.size
        return path, variants, width, height

    @classmethod
    def _generate_variants(cls, image, path, image_format):
        directory, filename = posixpath.split(path)
        name, extension = posixpath.splitext(filename)
        variants = {}

        if image_format == 'WEBP':
            variants['webp'] = path
        else:
            webp_path = posixpath.join(directory, f"{name}.webp")
            variants['webp'] = cls._save_variant(image, webp_path, 'WEBP')

        thumbnail = image.copy()
        thumbnail.thumbnail(THUMBNAIL_SIZE, Image.LANCZOS)
        thumbnail_path = posixpath.join(directory, f"{name}_thumb{extension}")
        variants['thumbnail'] = cls._save_variant(thumbnail, thumbnail_path, image_format)

        width, height = image.size
        if width >= RETINA_MIN_SIDE and height >= RETINA_MIN_SIDE:
            half = image.resize((width // 2, height // 2), Image.LANCZOS)
            half_path = posixpath.join(directory, f"{name}_1x{extension}")
            variants['1x'] = cls._save_variant(half, half_path, image_format)
            variants['2x'] = path

        return variants

    @classmethod
    def _save_variant(cls, image, path, image_format):
        return default_storage.save(path, ContentFile(cls._encode(image, image_format, OPTIMIZE_QUALITY)))

    @staticmethod
    def _encode(image, image_format, quality):
        buffer = BytesIO()
        if image_format == 'JPEG':
            if image.mode not in ('RGB', 'L'):
                image = image.convert('RGB')
            image.save(buffer, format='JPEG', quality=quality, optimize=True)
        elif image_format == 'WEBP':
            if image.mode not in ('RGB', 'RGBA'):
                image = image.convert('RGBA')
            image.save(buffer, format='WEBP', quality=quality)
        elif image_format == 'PNG':
            image.save(buffer, format='PNG', optimize=True)
        else:
            image.save(buffer, format=image_format)
        return buffer.getvalue()
