"""Per-wedding upload quota tracking."""

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.db.models import Sum

from apps.media.models import PlanLimit, SiteMedia

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = 'quota:'
DEFAULT_PLAN = PlanLimit.PLAN_BASIC
DEFAULT_MAX_FILES = 100
DEFAULT_MAX_STORAGE_BYTES = 524288000


@dataclass(frozen=True)
class QuotaUsage:
    current_files: int
    max_files: int
    current_storage_bytes: int
    max_storage_bytes: int
    files_percentage: float
    storage_percentage: float

    @property
    def is_at_limit(self):
        return self.files_percentage >= 100.0 or self.storage_percentage >= 100.0

    def is_near_limit(self, threshold=0.8):
        threshold_percentage = threshold * 100
        return (
            self.files_percentage >= threshold_percentage
            or self.storage_percentage >= threshold_percentage
        )

    def to_dict(self):
        return {
            'current_files': self.current_files,
            'max_files': self.max_files,
            'current_storage_bytes': self.current_storage_bytes,
            'max_storage_bytes': self.max_storage_bytes,
            'files_percentage': round(self.files_percentage, 2),
            'storage_percentage': round(self.storage_percentage, 2),
            'is_at_limit': self.is_at_limit,
            'is_near_limit': self.is_near_limit(),
        }


@dataclass(frozen=True)
class QuotaCheckResult:
    can_upload: bool
    reason: Optional[str] = None
    upgrade_message: Optional[str] = None

    def to_dict(self):
        return {
            'can_upload': self.can_upload,
            'reason': self.reason,
            'upgrade_message': self.upgrade_message,
        }


class QuotaTrackingService:
    """
    Compare a wedding's media usage with the limits of its plan.

    Usage is cached per wedding; callers that add or remove media are
    expected to call ``clear_cache``.
    """

    @classmethod
    def get_usage(cls, wedding):
        key = cls.get_cache_key(wedding)
        usage = cache.get(key)
        if usage is None:
            usage = cls._calculate_usage(wedding)
            cache.set(key, usage, settings.QUOTA_CACHE_TTL)
        return usage

    @classmethod
    def can_upload(cls, wedding, file_size, file_count=1):
        """Check the file count first, then the storage."""
        usage = cls.get_usage(wedding)
        limits = cls.get_plan_limits(wedding)

        if usage.current_files + file_count > limits.max_files:
            return cls._blocked(
                wedding,
                f"Cota de arquivos excedida. Você atingiu o limite máximo de "
                f"{limits.max_files} arquivos do seu plano.",
                limit_type='files',
            )

        if usage.current_storage_bytes + file_size > limits.max_storage_bytes:
            return cls._blocked(
                wedding,
                "Cota de armazenamento excedida. Você atingiu o limite máximo "
                "de armazenamento do seu plano.",
                limit_type='storage',
            )

        return QuotaCheckResult(can_upload=True)

    @classmethod
    def get_plan_limits(cls, wedding):
        """Limits of the wedding plan, falling back to the basic plan."""
        plan_limit = PlanLimit.find_by_slug(wedding.plan_slug) or PlanLimit.find_by_slug(DEFAULT_PLAN)
        if plan_limit is None:
            plan_limit = PlanLimit(
                slug=DEFAULT_PLAN,
                name='Basic',
                max_files=DEFAULT_MAX_FILES,
                max_storage_bytes=DEFAULT_MAX_STORAGE_BYTES,
            )
        return plan_limit

    @classmethod
    def get_usage_percentage(cls, wedding):
        usage = cls.get_usage(wedding)
        return {
            'files': usage.files_percentage,
            'storage': usage.storage_percentage,
        }

    @classmethod
    def clear_cache(cls, wedding):
        cache.delete(cls.get_cache_key(wedding))

    @staticmethod
    def get_cache_key(wedding):
        wedding_id = getattr(wedding, 'id', wedding)
        return f"{CACHE_KEY_PREFIX}{wedding_id}"

    @classmethod
    def _calculate_usage(cls, wedding):
        completed = SiteMedia.objects.filter(wedding=wedding, status=SiteMedia.STATUS_COMPLETED)
        current_files = completed.count()
        current_storage_bytes = completed.aggregate(total=Sum('size'))['total'] or 0

        limits = cls.get_plan_limits(wedding)
        files_percentage = (current_files / limits.max_files) * 100 if limits.max_files > 0 else 0.0
        storage_percentage = (
            (current_storage_bytes / limits.max_storage_bytes) * 100
            if limits.max_storage_bytes > 0 else 0.0
        )

        return QuotaUsage(
            current_files=current_files,
            max_files=limits.max_files,
            current_storage_bytes=current_storage_bytes,
            max_storage_bytes=limits.max_storage_bytes,
            files_percentage=files_percentage,
            storage_percentage=storage_percentage,
        )

    @staticmethod
    def _blocked(wedding, reason, limit_type):
        upgrade_message = None
        if wedding.plan_slug == PlanLimit.PLAN_BASIC:
            if limit_type == 'files':
                upgrade_message = 'Faça upgrade para o plano premium para aumentar seu limite de arquivos.'
            else:
                upgrade_message = 'Faça upgrade para o plano premium para aumentar seu espaço de armazenamento.'

        logger.info(f"[QUOTA] Upload blocked for wedding {wedding.id}: {limit_type} limit reached")
        return QuotaCheckResult(can_upload=False, reason=reason, upgrade_message=upgrade_message)
