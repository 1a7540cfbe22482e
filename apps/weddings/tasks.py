"""Celery tasks for the weddings app."""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def send_partner_invite_email(self, invite_id):
    """Email a partner invitation link."""
    from apps.weddings.models import PartnerInvite

    try:
        invite = PartnerInvite.objects.select_related('wedding', 'invited_by').get(id=invite_id)
    except PartnerInvite.DoesNotExist:
        logger.warning(f"[INVITES] Invite {invite_id} not found, skipping email")
        return

    accept_url = f"{settings.FRONTEND_URL.rstrip('/')}/invites/{invite.token}"
    inviter_name = invite.invited_by.get_full_name()

    if invite.existing_user_id:
        intro = f"{inviter_name} invited you to plan \"{invite.wedding.title}\" together."
    else:
        intro = f"{inviter_name} invited you to join Nupcial and plan \"{invite.wedding.title}\" together."

    message = (
        f"Hi {invite.name},\n\n"
        f"{intro}\n\n"
        f"Accept the invitation: {accept_url}\n\n"
        f"This link expires on {invite.expires_at:%d/%m/%Y}."
    )

    try:
        send_mail(
            subject=f"{inviter_name} invited you to {invite.wedding.title}",
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[invite.email],
            fail_silently=False,
        )
        logger.info(f"[INVITES] Invite email sent to {invite.email}")
    except Exception as exc:
        logger.error(f"[INVITES] Error sending invite {invite_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))


@shared_task
def expire_partner_invites():
    """Mark pending invites past their expiration date as expired."""
    from apps.weddings.services import PartnerInviteService

    expired = PartnerInviteService.expire_stale_invites()
    if expired:
        logger.info(f"[INVITES] Expired {expired} partner invites")
    return {'expired': expired}
