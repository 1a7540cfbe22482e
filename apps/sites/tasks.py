"""Celery tasks for the sites app."""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def notify_site_published(self, site_id, user_id=None):
    """Email the couple the public address of their freshly published site."""
    from apps.sites.models import SiteLayout

    try:
        site = SiteLayout.objects.select_related('wedding').get(id=site_id)
    except SiteLayout.DoesNotExist:
        logger.warning(f"[SITES] Site {site_id} not found, skipping publish notification")
        return {'sent': 0}

    recipients = [
        user.email
        for user in site.wedding.couple_users()
        if user.email and user.pk != user_id
    ]
    if not recipients:
        return {'sent': 0}

    try:
        send_mail(
            subject=f"{site.wedding.title} is online",
            message=(
                f"The site of {site.wedding.title} has just been published.\n\n"
                f"Visit it at {site.public_url}"
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=recipients,
            fail_silently=False,
        )
    except Exception as exc:
        logger.error(f"[SITES] Error sending publish notification for site {site_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))

    logger.info(f"[SITES] Publish notification sent for site {site_id} to {len(recipients)} recipient(s)")
    return {'sent': len(recipients)}
