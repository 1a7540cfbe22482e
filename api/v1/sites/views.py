"""Views for the wedding site builder API."""

import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.media.serializers import FileUploadSerializer, SiteMediaSerializer
from apps.media.models import SiteMedia
from apps.media.services import MediaUploadError, MediaUploadService
from apps.sites.models import SiteLayout, SiteTemplate, SiteVersion
from apps.sites.services import (
    InvalidTemplateModeError,
    NoPublishedVersionError,
    PublicSiteService,
    SiteAlreadyExistsError,
    SiteBuilderService,
    SiteTemplateService,
    SiteValidationError,
    SiteValidator,
    SiteVersionService,
)
from core.models import SystemConfig
from core.permissions import HasWeddingModule, SiteLayoutPermission, WeddingContextMixin

from .serializers import (
    ApplyTemplateSerializer,
    PublicSiteSerializer,
    SiteDraftSerializer,
    SiteLayoutSerializer,
    SiteRestoreSerializer,
    SiteSettingsSerializer,
    SiteTemplateDetailSerializer,
    SiteTemplateSerializer,
    SiteVersionSerializer,
)

logger = logging.getLogger(__name__)


class SiteLayoutViewSet(WeddingContextMixin,
                        mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.DestroyModelMixin,
                        viewsets.GenericViewSet):
    """
    API endpoint for the site of the current wedding.

    Editing actions need the ``sites`` module; publishing, rolling back and
    deleting are reserved to the couple and admins.
    """
    serializer_class = SiteLayoutSerializer
    permission_classes = [permissions.IsAuthenticated, HasWeddingModule, SiteLayoutPermission]
    required_module = 'sites'
    pagination_class = None

    def get_queryset(self):
        return SiteLayout.objects.filter(wedding=self.get_wedding()).select_related('wedding')

    def create(self, request, *args, **kwargs):
        wedding = self.get_wedding()
        try:
            site = SiteBuilderService.create(wedding)
        except SiteAlreadyExistsError:
            return Response(
                {"detail": "This wedding already has a site."},
                status=status.HTTP_409_CONFLICT
            )
        serializer = self.get_serializer(site)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['put'])
    def draft(self, request, pk=None):
        """Save the draft content."""
        site = self.get_object()
        serializer = SiteDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        site = SiteBuilderService.update_draft(
            site,
            serializer.validated_data['content'],
            user=request.user,
            create_version=serializer.validated_data['create_version'],
            summary=serializer.validated_data.get('summary'),
        )
        return Response(self.get_serializer(site).data)

    @action(detail=True, methods=['put'], url_path='settings')
    def update_settings(self, request, pk=None):
        """Update slug, custom domain and guest password."""
        site = self.get_object()
        serializer = SiteSettingsSerializer(data=request.data, context={'site': site})
        serializer.is_valid(raise_exception=True)

        site = SiteBuilderService.update_settings(site, serializer.validated_data)
        return Response(self.get_serializer(site).data)

    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        site = self.get_object()
        try:
            site = SiteBuilderService.publish(site, user=request.user)
        except SiteValidationError as e:
            logger.info(f"[SITES] Publish of site {site.id} blocked: {e}")
            return Response({
                'success': False,
                'message': 'The site cannot be published',
                'errors': e.errors
            }, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        return Response(self.get_serializer(site).data)

    @action(detail=True, methods=['post'])
    def rollback(self, request, pk=None):
        """Go back to the latest published version."""
        site = self.get_object()
        try:
            site = SiteBuilderService.rollback(site, user=request.user)
        except NoPublishedVersionError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(site).data)

    @action(detail=True, methods=['get'])
    def versions(self, request, pk=None):
        site = self.get_object()
        try:
            limit = int(request.query_params.get('limit', 0)) or None
        except ValueError:
            limit = None

        versions = SiteVersionService.get_versions(site, limit=limit)
        return Response(SiteVersionSerializer(versions, many=True).data)

    @action(detail=True, methods=['post'])
    def restore(self, request, pk=None):
        """Copy an old version into the draft."""
        site = self.get_object()
        serializer = SiteRestoreSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        version = SiteVersion.objects.filter(
            pk=serializer.validated_data['version_id'],
            site=site,
        ).first()
        if version is None:
            return Response(
                {"detail": "This version does not belong to the site."},
                status=status.HTTP_400_BAD_REQUEST
            )

        site = SiteVersionService.restore(site, version, user=request.user)
        return Response(self.get_serializer(site).data)

    @action(detail=True, methods=['post'], url_path=r'apply-template/(?P<template_slug>[-\w]+)')
    def apply_template(self, request, pk=None, template_slug=None):
        """Apply a template to the draft, merging it or overwriting it."""
        site = self.get_object()
        template = get_object_or_404(SiteTemplate, slug=template_slug)
        if not template.is_available_for(site.wedding):
            return Response(
                {"detail": "You do not have permission to use this template."},
                status=status.HTTP_403_FORBIDDEN
            )

        serializer = ApplyTemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        mode = serializer.validated_data['mode']

        try:
            site = SiteTemplateService.apply(site, template, mode=mode, user=request.user)
        except InvalidTemplateModeError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        data = self.get_serializer(site).data
        data['message'] = f"Template '{template.name}' aplicado com sucesso ({mode})."
        return Response(data)

    @action(detail=True, methods=['get'])
    def qa(self, request, pk=None):
        """Run the pre-publish checklist on the draft."""
        site = self.get_object()
        result = SiteValidator.run_qa_checklist(site)
        validation = SiteValidator.validate_for_publish(site.draft_content)

        data = result.to_dict()
        data['validation'] = {
            'is_valid': validation.is_valid,
            'errors': validation.errors,
            'warnings': validation.warnings,
        }
        return Response(data)

    @action(
        detail=True,
        methods=['get', 'post'],
        url_path='media',
        parser_classes=[MultiPartParser, FormParser],
    )
    def media(self, request, pk=None):
        """List or upload the media attached to the site."""
        site = self.get_object()

        if request.method == 'GET':
            media = site.media.filter(status=SiteMedia.STATUS_COMPLETED).order_by('-created_at')
            return Response(SiteMediaSerializer(media, many=True).data)

        serializer = FileUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            media = MediaUploadService.upload(
                serializer.validated_data['file'],
                site.wedding,
                site=site,
                user=request.user,
                original_name=serializer.validated_data.get('original_name') or None,
            )
        except MediaUploadError as e:
            return Response({
                'success': False,
                'message': e.message,
                'errors': e.errors
            }, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        return Response(SiteMediaSerializer(media).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'], url_path='media/usage')
    def media_usage(self, request, pk=None):
        site = self.get_object()
        used_bytes = MediaUploadService.get_storage_usage(site.wedding)
        limit_bytes = int(SystemConfig.get(
            'site.max_storage_per_wedding', settings.MEDIA_MAX_STORAGE_PER_WEDDING
        ))

        return Response({
            'used_bytes': used_bytes,
            'limit_bytes': limit_bytes,
            'used_mb': round(used_bytes / 1024 / 1024, 2),
            'limit_mb': round(limit_bytes / 1024 / 1024, 2),
            'percentage': round((used_bytes / limit_bytes) * 100, 2) if limit_bytes > 0 else 0,
        })

    @action(detail=True, methods=['delete'], url_path=r'media/(?P<media_id>[0-9a-f-]+)')
    def delete_media(self, request, pk=None, media_id=None):
        site = self.get_object()
        media = get_object_or_404(SiteMedia, pk=media_id, site=site)
        MediaUploadService.delete(media)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SiteTemplateViewSet(WeddingContextMixin, viewsets.ReadOnlyModelViewSet):
    """Templates the current wedding may apply: the public ones and its own."""
    serializer_class = SiteTemplateSerializer
    permission_classes = [permissions.IsAuthenticated, HasWeddingModule]
    required_module = 'sites'
    lookup_field = 'slug'
    pagination_class = None

    def get_queryset(self):
        return SiteTemplateService.get_available(self.get_wedding())

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return SiteTemplateDetailSerializer
        return SiteTemplateSerializer


class PublicSiteView(APIView):
    """
    Published content of a site, for guests.

    The site is found by slug, or by custom domain given as ``?domain=`` or
    taken from the Host header. Password protected sites need the guest
    password in the ``X-Site-Access-Token`` header or the ``access_token``
    query parameter.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request, slug=None):
        if slug:
            site = PublicSiteService.find_by_slug(slug)
        else:
            site = PublicSiteService.find_by_domain(request.query_params.get('domain') or request.get_host())

        if site is None:
            return Response(
                {'success': False, 'message': 'Site não encontrado'},
                status=status.HTTP_404_NOT_FOUND
            )

        if site.has_password:
            token = request.headers.get('X-Site-Access-Token') or request.query_params.get('access_token')
            if not token:
                response = Response({
                    'success': False,
                    'message': 'Este site é protegido por senha',
                    'requires_password': True,
                }, status=status.HTTP_401_UNAUTHORIZED)
                return self._private(response)
            if not site.check_access_token(token):
                logger.info(f"[SITES] Wrong access token for site {site.slug}")
                response = Response({
                    'success': False,
                    'message': 'Senha incorreta',
                    'requires_password': True,
                }, status=status.HTTP_403_FORBIDDEN)
                return self._private(response)

        serializer = PublicSiteSerializer(site, context={'content': PublicSiteService.get_content(site)})

        if site.has_password:
            return self._private(Response(serializer.data))

        etag = PublicSiteService.get_etag(site)
        if PublicSiteService.etag_matches(request.headers.get('If-None-Match'), etag):
            response = Response(status=status.HTTP_304_NOT_MODIFIED)
        else:
            response = Response(serializer.data)
        response['ETag'] = etag
        response['Cache-Control'] = 'public, no-cache, max-age=0, must-revalidate'
        return response

    @staticmethod
    def _private(response):
        response['Cache-Control'] = 'private, no-store, no-cache, must-revalidate, max-age=0'
        return response
