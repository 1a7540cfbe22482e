"""Multi-file uploads tracked as batches."""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import List

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.media.models import SiteMedia, UploadBatch

from .exceptions import MediaUploadError
from .quota import QuotaTrackingService
from .upload import MediaUploadService, resolve_file_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchStatus:
    batch_id: str
    status: str
    total: int
    completed: int
    failed: int
    pending: int
    errors: List[str] = field(default_factory=list)

    @property
    def is_complete(self):
        return self.pending == 0

    @property
    def progress_percentage(self):
        if self.total == 0:
            return 100.0
        return ((self.completed + self.failed) / self.total) * 100

    def to_dict(self):
        return {
            'batch_id': self.batch_id,
            'status': self.status,
            'total': self.total,
            'completed': self.completed,
            'failed': self.failed,
            'pending': self.pending,
            'errors': self.errors,
            'is_complete': self.is_complete,
            'progress_percentage': round(self.progress_percentage, 2),
        }


@dataclass(frozen=True)
class UploadResult:
    success: bool
    media: SiteMedia = None
    error: str = None


class BatchUploadService:
    """
    Upload several files as one batch.

    Every file is processed in isolation: a rejected file is recorded as a
    failed media row and counted, it never aborts the rest of the batch.
    """

    @classmethod
    @transaction.atomic
    def create_batch(cls, wedding, total_files, album=None):
        batch = UploadBatch.objects.create(
            wedding=wedding,
            album=album,
            total_files=total_files,
        )
        logger.info(
            f"[MEDIA] Upload batch {batch.id} created for wedding {wedding.id} "
            f"({total_files} files, album {album.id if album else None})"
        )
        return batch

    @classmethod
    def process_file(cls, batch, file, original_name=None, user=None):
        original_name = resolve_file_name(file, original_name)
        batch.refresh_from_db()

        if batch.status == UploadBatch.STATUS_CANCELLED:
            cls._create_failed_media(batch, original_name, 'Batch foi cancelado')
            return UploadResult(success=False, error='Batch foi cancelado')

        if batch.completed_files + batch.failed_files >= batch.total_files:
            logger.warning(f"[MEDIA] Batch {batch.id} already accounted for all files, rejecting {original_name}")
            return UploadResult(success=False, error='O batch já recebeu todos os arquivos')

        if batch.status == UploadBatch.STATUS_PENDING:
            UploadBatch.objects.filter(pk=batch.pk, status=UploadBatch.STATUS_PENDING).update(
                status=UploadBatch.STATUS_PROCESSING,
                updated_at=timezone.now(),
            )
            batch.refresh_from_db(fields=['status', 'updated_at'])

        try:
            quota = QuotaTrackingService.can_upload(batch.wedding, file.size)
            if not quota.can_upload:
                error = quota.reason or 'Cota excedida'
                cls._create_failed_media(batch, original_name, error)
                cls._increment_failed(batch, error)
                return UploadResult(success=False, error=error)

            validation = MediaUploadService.validate_file(file, original_name)
            if not validation.is_valid:
                error = ', '.join(validation.errors)
                cls._create_failed_media(batch, original_name, error)
                cls._increment_failed(batch, error)
                logger.warning(f"[MEDIA] Batch {batch.id}: {original_name} failed validation: {error}")
                return UploadResult(success=False, error=error)

            media = MediaUploadService.upload(
                file,
                batch.wedding,
                site=cls._get_site(batch.wedding),
                user=user,
                original_name=original_name,
            )
        except MediaUploadError as e:
            error = ', '.join(e.errors) or e.message
            cls._create_failed_media(batch, original_name, error)
            cls._increment_failed(batch, error)
            logger.warning(f"[MEDIA] Batch {batch.id}: {original_name} rejected: {error}")
            return UploadResult(success=False, error=error)
        except Exception as e:
            error = 'Erro inesperado durante o upload'
            cls._create_failed_media(batch, original_name, error)
            cls._increment_failed(batch, error)
            logger.error(f"[MEDIA] Batch {batch.id}: unexpected error uploading {original_name}: {e}", exc_info=True)
            return UploadResult(success=False, error=error)

        media.album_id = batch.album_id
        media.batch = batch
        media.status = SiteMedia.STATUS_COMPLETED
        media.save(update_fields=['album', 'batch', 'status', 'updated_at'])
        cls._increment_completed(batch)

        logger.info(f"[MEDIA] Batch {batch.id}: {original_name} stored as media {media.id}")
        return UploadResult(success=True, media=media)

    @classmethod
    def cancel_batch(cls, batch):
        cancelled = (
            UploadBatch.objects
            .filter(pk=batch.pk)
            .exclude(status__in=[UploadBatch.STATUS_COMPLETED, UploadBatch.STATUS_CANCELLED])
            .update(status=UploadBatch.STATUS_CANCELLED, updated_at=timezone.now())
        )
        batch.refresh_from_db()
        if not cancelled:
            return False

        SiteMedia.objects.filter(batch=batch, status=SiteMedia.STATUS_PENDING).update(
            status=SiteMedia.STATUS_FAILED,
            error_message='Batch cancelado',
        )

        logger.info(f"[MEDIA] Upload batch {batch.id} cancelled")
        return True

    @classmethod
    def get_batch_status(cls, batch):
        batch.refresh_from_db()
        errors = list(
            SiteMedia.objects
            .filter(batch=batch, status=SiteMedia.STATUS_FAILED, error_message__isnull=False)
            .values_list('error_message', flat=True)
        )
        return BatchStatus(
            batch_id=str(batch.id),
            status=batch.status,
            total=batch.total_files,
            completed=batch.completed_files,
            failed=batch.failed_files,
            pending=batch.total_files - batch.completed_files - batch.failed_files,
            errors=errors,
        )

    @classmethod
    def get_batches(cls, wedding, include_completed=False):
        queryset = UploadBatch.objects.filter(wedding=wedding).order_by('-created_at')
        if not include_completed:
            queryset = queryset.exclude(
                status__in=[UploadBatch.STATUS_COMPLETED, UploadBatch.STATUS_CANCELLED]
            )
        return queryset

    @staticmethod
    def stage_file(file):
        """Copy an uploaded file to the local staging directory and return its path."""
        os.makedirs(settings.MEDIA_UPLOAD_TEMP_DIR, exist_ok=True)
        extension = os.path.splitext(getattr(file, 'name', '') or '')[1].lower()
        with tempfile.NamedTemporaryFile(
            dir=settings.MEDIA_UPLOAD_TEMP_DIR, suffix=extension, delete=False
        ) as staged:
            for chunk in file.chunks():
                staged.write(chunk)
        return staged.name

    @classmethod
    def record_failure(cls, batch, original_name, error):
        """Count a file that never reached ``process_file``."""
        batch.refresh_from_db()
        if batch.completed_files + batch.failed_files >= batch.total_files:
            logger.warning(f"[MEDIA] Batch {batch.id} already accounted for all files, ignoring {original_name}")
            return
        cls._create_failed_media(batch, original_name, error)
        cls._increment_failed(batch, error)

    @classmethod
    def _increment_completed(cls, batch):
        with transaction.atomic():
            locked = UploadBatch.objects.select_for_update().get(pk=batch.pk)
            locked.completed_files = F('completed_files') + 1
            locked.save(update_fields=['completed_files', 'updated_at'])
            cls._check_completion(locked)
        batch.refresh_from_db()

    @classmethod
    def _increment_failed(cls, batch, error):
        # The row lock keeps concurrent failures from dropping each other's errors
        with transaction.atomic():
            locked = UploadBatch.objects.select_for_update().get(pk=batch.pk)
            locked.failed_files = F('failed_files') + 1
            locked.errors = list(locked.errors or []) + [error]
            locked.save(update_fields=['failed_files', 'errors', 'updated_at'])
            cls._check_completion(locked)
        batch.refresh_from_db()

    @staticmethod
    def _check_completion(batch):
        """Close ``batch`` once every file is accounted for. Runs under the row lock."""
        batch.refresh_from_db()
        if batch.status == UploadBatch.STATUS_CANCELLED:
            return
        if batch.completed_files + batch.failed_files < batch.total_files:
            return

        if batch.failed_files == batch.total_files:
            batch.status = UploadBatch.STATUS_FAILED
        else:
            batch.status = UploadBatch.STATUS_COMPLETED
        batch.save(update_fields=['status', 'updated_at'])

        logger.info(
            f"[MEDIA] Upload batch {batch.id} finished as {batch.status} "
            f"({batch.completed_files} completed, {batch.failed_files} failed)"
        )

    @classmethod
    def _create_failed_media(cls, batch, original_name, error):
        return SiteMedia.objects.create(
            wedding_id=batch.wedding_id,
            site=cls._get_site(batch.wedding),
            batch=batch,
            album_id=batch.album_id,
            original_name=(original_name or '')[:255],
            path='',
            size=0,
            mime_type='application/octet-stream',
            status=SiteMedia.STATUS_FAILED,
            error_message=error,
        )

    @staticmethod
    def _get_site(wedding):
        from apps.sites.models import SiteLayout

        return SiteLayout.objects.filter(wedding=wedding).first()
