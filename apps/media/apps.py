"""App configuration for the media app."""

from django.apps import AppConfig


class MediaConfig(AppConfig):
    """Configuration for the wedding media library."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.media'
    verbose_name = 'Media'
