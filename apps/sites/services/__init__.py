"""Services for the sites app."""

from .builder import SiteBuilderService
from .exceptions import (
    InvalidTemplateModeError,
    NoPublishedVersionError,
    SiteAlreadyExistsError,
    SiteValidationError,
)
from .public import PublicSiteService
from .sanitizer import ContentSanitizer
from .templates import SiteTemplateService
from .validator import QAResult, SiteValidator, ValidationResult
from .versions import SiteVersionService

__all__ = [
    'ContentSanitizer',
    'InvalidTemplateModeError',
    'NoPublishedVersionError',
    'PublicSiteService',
    'QAResult',
    'SiteAlreadyExistsError',
    'SiteBuilderService',
    'SiteTemplateService',
    'SiteValidationError',
    'SiteValidator',
    'SiteVersionService',
    'ValidationResult',
]
