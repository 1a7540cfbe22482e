"""Signals for the sites app."""

import logging

from django.db import transaction
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Sent after a site is published; provides ``site`` and ``user``.
site_published = Signal()


@receiver(site_published)
def queue_site_published_notification(sender, site, user=None, **kwargs):
    """Notify the couple that their site is live."""
    from apps.sites.tasks import notify_site_published

    user_id = user.pk if user is not None else None
    transaction.on_commit(lambda: notify_site_published.delay(str(site.pk), user_id))
    logger.debug(f"[SITES] Publish notification queued for site {site.pk}")
