"""Views for onboarding, weddings and partner invites."""

import logging

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.weddings.models import Wedding
from apps.weddings.services import InviteError, OnboardingService, PartnerInviteService
from core.utils import get_request_wedding

from .serializers import OnboardingSerializer, PartnerInviteSerializer, WeddingSerializer

logger = logging.getLogger(__name__)

INVALID_INVITE_MESSAGE = 'Este convite não é válido ou já foi utilizado.'


class OnboardingCompleteView(APIView):
    """
    Finish the onboarding wizard.

    Creates the wedding, its site, the default RSVP event and, when partner
    data is given, the partner invite.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        if OnboardingService.has_completed(request.user):
            return Response(
                {"detail": "Onboarding already completed."},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = OnboardingSerializer(data=request.data, context={'user': request.user})
        serializer.is_valid(raise_exception=True)

        wedding = OnboardingService.complete(request.user, serializer.validated_data)
        data = WeddingSerializer(wedding, context={'request': request}).data
        return Response(data, status=status.HTTP_201_CREATED)


class WeddingViewSet(viewsets.ReadOnlyModelViewSet):
    """Weddings the authenticated user belongs to."""
    serializer_class = WeddingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = Wedding.objects.prefetch_related('guest_events')
        if self.request.user.is_admin:
            return queryset
        return queryset.filter(memberships__user=self.request.user).distinct()

    @action(detail=False, methods=['get'])
    def current(self, request):
        """Get the wedding the request works on."""
        wedding = get_request_wedding(request)
        if wedding is None:
            return Response(
                {"detail": "No wedding selected."},
                status=status.HTTP_404_NOT_FOUND
            )
        serializer = self.get_serializer(wedding)
        return Response(serializer.data)


class InviteMixin:

    def get_invite(self, token):
        return PartnerInviteService.find_by_token(token)

    def invalid_invite_response(self):
        return Response({"detail": INVALID_INVITE_MESSAGE}, status=status.HTTP_404_NOT_FOUND)


class InviteDetailView(InviteMixin, APIView):
    """Public details of a pending invite."""
    permission_classes = [permissions.AllowAny]

    def get(self, request, token):
        invite = self.get_invite(token)
        if invite is None:
            return self.invalid_invite_response()
        return Response(PartnerInviteSerializer(invite).data)


class InviteAcceptView(InviteMixin, APIView):
    """Accept an invite with the account the invite was sent to."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, token):
        invite = self.get_invite(token)
        if invite is None:
            return self.invalid_invite_response()

        if request.user.email.lower() != invite.email.lower():
            logger.info(f"[INVITES] {request.user.email} tried to accept invite {invite.id} sent to {invite.email}")
            return Response(
                {"detail": f"Você precisa estar logado com o e-mail {invite.email} para aceitar este convite."},
                status=status.HTTP_403_FORBIDDEN
            )

        try:
            PartnerInviteService.accept_invite(invite, request.user)
        except InviteError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        serializer = WeddingSerializer(invite.wedding, context={'request': request})
        return Response(serializer.data, status=status.HTTP_200_OK)


class InviteDeclineView(InviteMixin, APIView):
    """Decline an invite; the link is enough to do so."""
    permission_classes = [permissions.AllowAny]

    def post(self, request, token):
        invite = self.get_invite(token)
        if invite is None:
            return self.invalid_invite_response()

        try:
            PartnerInviteService.decline_invite(invite)
        except InviteError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'inviter_name': invite.invited_by.get_full_name(),
        }, status=status.HTTP_200_OK)
