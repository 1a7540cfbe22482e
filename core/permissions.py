"""Custom DRF permissions for the Nupcial platform."""

import logging

from rest_framework import permissions
from rest_framework.exceptions import PermissionDenied

from apps.weddings.services import PermissionService, SiteLayoutPolicy
from core.utils import get_request_wedding

logger = logging.getLogger(__name__)


class HasWeddingModule(permissions.BasePermission):
    """
    Check that the user may use ``view.required_module`` inside the wedding
    the request works on (``X-Wedding-ID`` header or current wedding).
    """

    message = 'You do not have access to this module.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        module = getattr(view, 'required_module', None)
        if module is None:
            return True

        wedding = get_request_wedding(request)
        allowed = PermissionService.can_access(request.user, module, wedding)
        if not allowed:
            logger.info(
                f"[PERMISSIONS] {request.user.email} denied module '{module}' "
                f"in wedding {wedding.id if wedding else None}"
            )
        return allowed


class SiteLayoutPermission(permissions.BasePermission):
    """Object level checks backed by ``SiteLayoutPolicy``."""

    message = 'You do not have permission to perform this action on the site.'

    # Actions mapped to the policy rule they need
    ACTION_RULES = {
        'publish': 'publish',
        'rollback': 'rollback',
        'destroy': 'delete',
    }

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            rule = 'view'
        else:
            rule = self.ACTION_RULES.get(getattr(view, 'action', None), 'update')
        return getattr(SiteLayoutPolicy, rule)(request.user, obj)


class WeddingContextMixin:
    """Give views access to the wedding of the request."""

    def get_wedding(self):
        wedding = get_request_wedding(self.request)
        if wedding is None:
            raise PermissionDenied('No wedding selected or no access to it.')
        return wedding
