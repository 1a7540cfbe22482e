"""Services for the weddings app."""

from .exceptions import InviteError
from .invites import PartnerInviteService
from .onboarding import OnboardingService
from .permissions import PermissionService, SiteLayoutPolicy
from .weddings import WeddingService

__all__ = [
    'InviteError',
    'OnboardingService',
    'PartnerInviteService',
    'PermissionService',
    'SiteLayoutPolicy',
    'WeddingService',
]
