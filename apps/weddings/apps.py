"""App configuration for the weddings app."""

from django.apps import AppConfig


class WeddingsConfig(AppConfig):
    """Configuration for the weddings app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.weddings'
