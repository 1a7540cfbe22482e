"""Celery tasks for the media app."""

import logging
import os

from celery import shared_task
from django.contrib.auth import get_user_model
from django.core.files import File

logger = logging.getLogger(__name__)


def _cleanup_temp_file(temp_path):
    try:
        os.remove(temp_path)
    except FileNotFoundError:
        pass


@shared_task(bind=True, max_retries=3)
def process_media_upload(self, batch_id, temp_path, original_name, user_id=None):
    """
    Store a file staged on local disk as part of an upload batch.

    The staged file is removed once the batch has accounted for it, either
    as stored media or as a failure.
    """
    from apps.media.models import UploadBatch
    from apps.media.services import BatchUploadService

    batch = UploadBatch.objects.select_related('wedding').filter(id=batch_id).first()
    if batch is None:
        logger.warning(f"[MEDIA] Batch {batch_id} not found, dropping staged file {original_name}")
        _cleanup_temp_file(temp_path)
        return {'status': 'missing_batch'}

    if batch.status == UploadBatch.STATUS_CANCELLED:
        logger.info(f"[MEDIA] Skipping {original_name}: batch {batch_id} was cancelled")
        _cleanup_temp_file(temp_path)
        return {'status': 'cancelled'}

    if not os.path.exists(temp_path):
        logger.warning(f"[MEDIA] Staged file for {original_name} not found in batch {batch_id}")
        BatchUploadService.record_failure(batch, original_name, 'Arquivo temporário não encontrado')
        return {'status': 'failed', 'error': 'Arquivo temporário não encontrado'}

    user = get_user_model().objects.filter(id=user_id).first() if user_id else None

    try:
        with open(temp_path, 'rb') as handle:
            result = BatchUploadService.process_file(
                batch,
                File(handle, name=original_name),
                original_name=original_name,
                user=user,
            )
    except OSError as exc:
        if self.request.retries < self.max_retries:
            logger.warning(f"[MEDIA] Could not read {original_name} of batch {batch_id}, retrying: {exc}")
            raise self.retry(exc=exc, countdown=30)

        logger.error(f"[MEDIA] Giving up on {original_name} of batch {batch_id}: {exc}")
        BatchUploadService.record_failure(batch, original_name, f"Erro durante processamento: {exc}")
        _cleanup_temp_file(temp_path)
        return {'status': 'failed', 'error': str(exc)}
    except Exception as exc:
        logger.error(f"[MEDIA] Unexpected error processing {original_name} of batch {batch_id}: {exc}", exc_info=True)
        BatchUploadService.record_failure(batch, original_name, 'Erro inesperado durante o upload')
        _cleanup_temp_file(temp_path)
        return {'status': 'failed', 'error': 'Erro inesperado durante o upload'}

    _cleanup_temp_file(temp_path)

    if not result.success:
        logger.warning(f"[MEDIA] Upload of {original_name} in batch {batch_id} failed: {result.error}")
        return {'status': 'failed', 'error': result.error}

    return {'status': 'completed', 'media_id': str(result.media.id)}
