"""Role and module based access control for weddings."""

from apps.weddings.models import WeddingUser


class PermissionService:
    """
    Decide which platform modules a user may use inside a wedding.

    Admins reach everything. Couples reach every module of their wedding,
    organizers only the modules granted on their membership and guests only
    the guest app.
    """

    MODULES = ['sites', 'tasks', 'guests', 'finance', 'reports', 'app', 'users']
    ROLES = ['admin', 'couple', 'organizer', 'guest']
    GUEST_MODULES = ['app']

    @classmethod
    def get_membership(cls, user, wedding):
        if wedding is None or user is None or not user.is_authenticated:
            return None
        return WeddingUser.objects.filter(wedding=wedding, user=user).first()

    @classmethod
    def can_access(cls, user, module, wedding=None):
        """Return True if ``user`` may use ``module`` in ``wedding``."""
        if user is None or not user.is_authenticated:
            return False

        if user.is_admin:
            return True

        if wedding is None:
            return module in cls.GUEST_MODULES

        membership = cls.get_membership(user, wedding)
        if membership is None:
            return False

        if membership.role == WeddingUser.ROLE_COUPLE:
            return True

        if membership.role == WeddingUser.ROLE_ORGANIZER:
            return module in (membership.permissions or [])

        if membership.role == WeddingUser.ROLE_GUEST:
            return module in cls.GUEST_MODULES

        return False

    @classmethod
    def get_accessible_modules(cls, user, wedding=None):
        return [module for module in cls.MODULES if cls.can_access(user, module, wedding)]

    @classmethod
    def has_wedding_access(cls, user, wedding):
        if user is None or not user.is_authenticated or wedding is None:
            return False
        if user.is_admin:
            return True
        return cls.get_membership(user, wedding) is not None

    @classmethod
    def get_wedding_role(cls, user, wedding):
        """Return ``admin``, the membership role, or None."""
        if user is None or not user.is_authenticated:
            return None
        if user.is_admin:
            return 'admin'
        membership = cls.get_membership(user, wedding)
        return membership.role if membership else None


class SiteLayoutPolicy:
    """Authorization rules for site layouts."""

    @classmethod
    def _role(cls, user, site):
        return PermissionService.get_wedding_role(user, site.wedding)

    @classmethod
    def view(cls, user, site):
        role = cls._role(user, site)
        if role in ('admin', WeddingUser.ROLE_COUPLE):
            return True
        if role == WeddingUser.ROLE_ORGANIZER:
            return PermissionService.can_access(user, 'sites', site.wedding)
        return False

    @classmethod
    def update(cls, user, site):
        return cls.view(user, site)

    @classmethod
    def publish(cls, user, site):
        """Only admins and the couple can publish."""
        return cls._role(user, site) in ('admin', WeddingUser.ROLE_COUPLE)

    @classmethod
    def rollback(cls, user, site):
        return cls.publish(user, site)

    @classmethod
    def delete(cls, user, site):
        return cls.publish(user, site)
