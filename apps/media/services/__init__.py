"""Services for the media app."""

from .albums import AlbumManagementService
from .batch import BatchStatus, BatchUploadService, UploadResult
from .exceptions import AlbumError, MediaUploadError
from .quota import QuotaCheckResult, QuotaTrackingService, QuotaUsage
from .upload import MediaUploadService

__all__ = [
    'AlbumError',
    'AlbumManagementService',
    'BatchStatus',
    'BatchUploadService',
    'MediaUploadError',
    'MediaUploadService',
    'QuotaCheckResult',
    'QuotaTrackingService',
    'QuotaUsage',
    'UploadResult',
]
