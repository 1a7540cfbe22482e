"""Partner invitations."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.weddings.models import PartnerInvite, WeddingUser
from core.utils import generate_token

from .exceptions import InviteError
from .weddings import WeddingService

logger = logging.getLogger(__name__)
User = get_user_model()


class PartnerInviteService:
    """Invite a partner to join a wedding as couple."""

    TOKEN_LENGTH = 64

    @classmethod
    def send_invite(cls, wedding, inviter, partner_email, partner_name):
        """
        Create a pending invite and queue the notification email.

        When the email belongs to an existing user, the couple wedding they
        currently belong to is recorded so it can be detached on acceptance.
        """
        existing_user = User.objects.filter(email__iexact=partner_email).first()

        previous_wedding = None
        if existing_user:
            membership = (
                existing_user.wedding_memberships
                .filter(role=WeddingUser.ROLE_COUPLE)
                .select_related('wedding')
                .order_by('created_at')
                .first()
            )
            previous_wedding = membership.wedding if membership else None

        invite = PartnerInvite.objects.create(
            wedding=wedding,
            invited_by=inviter,
            email=partner_email,
            name=partner_name,
            token=generate_token(cls.TOKEN_LENGTH),
            status=PartnerInvite.STATUS_PENDING,
            existing_user=existing_user,
            previous_wedding=previous_wedding,
        )

        from apps.weddings.tasks import send_partner_invite_email
        transaction.on_commit(lambda: send_partner_invite_email.delay(str(invite.id)))

        logger.info(f"[INVITES] Partner invite {invite.id} sent to {partner_email} for wedding {wedding.id}")
        return invite

    @classmethod
    def accept_invite(cls, invite, user):
        """Link ``user`` to the invite's wedding as couple."""
        if not invite.is_valid:
            raise InviteError("This invitation is no longer valid.")

        with transaction.atomic():
            if invite.previous_wedding_id and invite.previous_wedding_id != invite.wedding_id:
                WeddingUser.objects.filter(wedding_id=invite.previous_wedding_id, user=user).delete()

            WeddingService.add_couple_partner(invite.wedding, user)

            user.current_wedding = invite.wedding
            user.onboarding_completed = True
            if user.onboarding_completed_at is None:
                user.onboarding_completed_at = timezone.now()
            user.save(update_fields=['current_wedding', 'onboarding_completed', 'onboarding_completed_at'])

            invite.status = PartnerInvite.STATUS_ACCEPTED
            invite.accepted_at = timezone.now()
            invite.save(update_fields=['status', 'accepted_at', 'updated_at'])

        logger.info(f"[INVITES] Invite {invite.id} accepted by {user.email}")

    @classmethod
    def decline_invite(cls, invite):
        if not invite.is_valid:
            raise InviteError("This invitation is no longer valid.")
        invite.status = PartnerInvite.STATUS_DECLINED
        invite.declined_at = timezone.now()
        invite.save(update_fields=['status', 'declined_at', 'updated_at'])

    @classmethod
    def find_by_token(cls, token):
        """Return the pending, unexpired invite for ``token`` or None."""
        return (
            PartnerInvite.objects
            .select_related('wedding', 'invited_by')
            .filter(
                token=token,
                status=PartnerInvite.STATUS_PENDING,
                expires_at__gt=timezone.now(),
            )
            .first()
        )

    @classmethod
    def has_pending_invite(cls, wedding, email):
        return PartnerInvite.objects.filter(
            wedding=wedding,
            email__iexact=email,
            status=PartnerInvite.STATUS_PENDING,
        ).exists()

    @classmethod
    def expire_stale_invites(cls):
        """Flag pending invites past their expiration date."""
        return PartnerInvite.objects.filter(
            status=PartnerInvite.STATUS_PENDING,
            expires_at__lte=timezone.now(),
        ).update(status=PartnerInvite.STATUS_EXPIRED, updated_at=timezone.now())
