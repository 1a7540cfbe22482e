"""App configuration for the sites app."""

from django.apps import AppConfig


class SitesConfig(AppConfig):
    """Configuration for the wedding sites app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.sites'
    label = 'wedding_sites'
    verbose_name = 'Wedding sites'

    def ready(self):
        """Initialize app when ready."""
        import apps.sites.signals  # noqa
