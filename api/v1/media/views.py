"""Views for the wedding media library API."""

import logging
import uuid

from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.media.models import Album, AlbumType, SiteMedia, UploadBatch
from apps.media.services import (
    AlbumError,
    AlbumManagementService,
    BatchUploadService,
    MediaUploadError,
    MediaUploadService,
    QuotaTrackingService,
)
from apps.media.tasks import process_media_upload
from core.permissions import HasWeddingModule, WeddingContextMixin

from .filters import SiteMediaFilter
from .serializers import (
    AlbumSerializer,
    AlbumTypeSerializer,
    AlbumWriteSerializer,
    BatchDeleteSerializer,
    BatchMoveSerializer,
    CreateBatchSerializer,
    CropMediaSerializer,
    FileUploadSerializer,
    MoveMediaSerializer,
    QuotaCheckSerializer,
    RenameMediaSerializer,
    SiteMediaDetailSerializer,
    SiteMediaSerializer,
    UploadBatchSerializer,
)

logger = logging.getLogger(__name__)


def album_error_response(error, response_status=status.HTTP_422_UNPROCESSABLE_ENTITY):
    return Response({
        'success': False,
        'message': error.message,
        'field': error.field,
    }, status=response_status)


class MediaModuleMixin(WeddingContextMixin):
    permission_classes = [permissions.IsAuthenticated, HasWeddingModule]
    required_module = 'sites'


class SiteMediaViewSet(MediaModuleMixin,
                       mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    """
    Media of the current wedding.

    The listing only shows completed uploads and can be filtered by album,
    album type, MIME type prefix and name.
    """
    serializer_class = SiteMediaSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = SiteMediaFilter

    def get_queryset(self):
        queryset = SiteMedia.objects.filter(wedding=self.get_wedding()).select_related('album__album_type')
        if self.action == 'list':
            queryset = queryset.filter(status=SiteMedia.STATUS_COMPLETED)
        return queryset.order_by('-created_at')

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return SiteMediaDetailSerializer
        return SiteMediaSerializer

    def perform_destroy(self, instance):
        MediaUploadService.delete(instance)

    @action(detail=True, methods=['post'])
    def move(self, request, pk=None):
        """Move a media to another album."""
        media = self.get_object()
        serializer = MoveMediaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        target_album = get_object_or_404(Album, pk=serializer.validated_data['album_id'])
        try:
            media = AlbumManagementService.move_media(media, target_album)
        except AlbumError as e:
            return album_error_response(e)

        return Response({
            'success': True,
            'message': 'Mídia movida com sucesso.',
            'media': SiteMediaSerializer(media).data
        })

    @action(detail=True, methods=['patch'])
    def rename(self, request, pk=None):
        media = self.get_object()
        serializer = RenameMediaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        media = MediaUploadService.rename(media, serializer.validated_data['original_name'])
        return Response({
            'success': True,
            'message': 'Mídia renomeada com sucesso.',
            'media': SiteMediaSerializer(media).data
        })

    @action(detail=True, methods=['post'])
    def crop(self, request, pk=None):
        """Crop an image into a new media of the same album."""
        media = self.get_object()
        serializer = CropMediaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cropped = MediaUploadService.crop(media, user=request.user, **serializer.validated_data)
        except MediaUploadError as e:
            return Response({
                'success': False,
                'message': e.message,
                'errors': e.errors
            }, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        except FileNotFoundError:
            return Response(
                {"detail": "Arquivo de imagem não encontrado."},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response({
            'success': True,
            'message': 'Imagem cortada com sucesso.',
            'media': SiteMediaSerializer(cropped).data
        }, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'])
    def cancel(self, request, pk=None):
        """Cancel an upload that has not been processed yet."""
        media = self.get_object()
        if media.status != SiteMedia.STATUS_PENDING:
            return Response(
                {"detail": "Apenas uploads pendentes podem ser cancelados."},
                status=status.HTTP_400_BAD_REQUEST
            )

        media.status = SiteMedia.STATUS_FAILED
        media.error_message = 'Upload cancelado'
        media.save(update_fields=['status', 'error_message', 'updated_at'])
        return Response({'success': True, 'message': 'Upload cancelado com sucesso.'})

    @action(detail=False, methods=['post'], url_path='batch-delete')
    def batch_delete(self, request):
        serializer = BatchDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        media_items = SiteMedia.objects.filter(
            id__in=serializer.validated_data['media_ids'],
            wedding=self.get_wedding(),
        )
        deleted_count = 0
        for media in media_items:
            MediaUploadService.delete(media)
            deleted_count += 1

        return Response({
            'success': True,
            'message': f"{deleted_count} arquivo(s) excluído(s) com sucesso.",
            'deleted_count': deleted_count
        })

    @action(detail=False, methods=['post'], url_path='batch-move')
    def batch_move(self, request):
        serializer = BatchMoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        wedding = self.get_wedding()
        target_album = get_object_or_404(Album, pk=serializer.validated_data['target_album_id'])
        if target_album.wedding_id != wedding.id:
            return Response(
                {"detail": "O álbum de destino não pertence a este casamento."},
                status=status.HTTP_403_FORBIDDEN
            )

        media_ids = set(serializer.validated_data['media_ids'])
        media_items = list(SiteMedia.objects.filter(id__in=media_ids, wedding=wedding))
        if len(media_items) != len(media_ids):
            return Response(
                {"detail": "Uma ou mais mídias não pertencem a este casamento."},
                status=status.HTTP_403_FORBIDDEN
            )

        for media in media_items:
            AlbumManagementService.move_media(media, target_album)

        return Response({
            'success': True,
            'message': f"{len(media_items)} foto(s) movida(s) com sucesso.",
            'moved_count': len(media_items)
        })


class UploadBatchViewSet(MediaModuleMixin,
                         mixins.ListModelMixin,
                         mixins.CreateModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """
    Upload batches of the current wedding.

    Files sent to ``upload`` are staged on local disk and stored by the
    ``process_media_upload`` task.
    """
    serializer_class = UploadBatchSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    pagination_class = None

    def get_queryset(self):
        if self.action == 'list':
            include_completed = self.request.query_params.get('include_completed', 'false').lower() == 'true'
            return BatchUploadService.get_batches(self.get_wedding(), include_completed=include_completed)
        return UploadBatch.objects.filter(wedding=self.get_wedding())

    def create(self, request, *args, **kwargs):
        serializer = CreateBatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        wedding = self.get_wedding()
        album = None
        album_id = serializer.validated_data.get('album_id')
        if album_id:
            album = Album.objects.filter(pk=album_id).first()
            if album is None or album.wedding_id != wedding.id:
                return Response(
                    {"detail": "O álbum não pertence a este casamento."},
                    status=status.HTTP_403_FORBIDDEN
                )

        batch = BatchUploadService.create_batch(wedding, serializer.validated_data['total_files'], album=album)
        return Response(UploadBatchSerializer(batch).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        batch = self.get_object()
        return Response(BatchUploadService.get_batch_status(batch).to_dict())

    @action(detail=True, methods=['post'])
    def upload(self, request, pk=None):
        """Queue one file of the batch for processing."""
        batch = self.get_object()
        if batch.is_finished:
            return Response(
                {"detail": f"O batch não aceita mais arquivos (status: {batch.status})."},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = FileUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        file = serializer.validated_data['file']
        original_name = serializer.validated_data.get('original_name') or file.name
        temp_path = BatchUploadService.stage_file(file)

        process_media_upload.delay(str(batch.id), temp_path, original_name, request.user.pk)
        logger.info(f"[MEDIA] {original_name} queued for batch {batch.id}")

        return Response(
            BatchUploadService.get_batch_status(batch).to_dict(),
            status=status.HTTP_202_ACCEPTED
        )

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        batch = self.get_object()
        if not BatchUploadService.cancel_batch(batch):
            return Response(
                {"detail": "O batch já foi finalizado ou cancelado."},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(BatchUploadService.get_batch_status(batch).to_dict())


class AlbumViewSet(MediaModuleMixin, viewsets.ModelViewSet):
    """Albums of the current wedding."""
    serializer_class = AlbumSerializer
    pagination_class = None
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return (
            Album.objects
            .filter(wedding=self.get_wedding())
            .select_related('album_type', 'cover_media')
            .annotate(media_count=Count('media', filter=Q(media__status=SiteMedia.STATUS_COMPLETED)))
            .order_by('-created_at')
        )

    def create(self, request, *args, **kwargs):
        serializer = AlbumWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            album = AlbumManagementService.create_album(self.get_wedding(), data.get('type_slug'), data)
        except AlbumError as e:
            return album_error_response(e)

        return Response(AlbumSerializer(album).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        album = self.get_object()
        serializer = AlbumWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        data = {key: value for key, value in serializer.validated_data.items() if key != 'type_slug'}
        try:
            album = AlbumManagementService.update_album(album, data)
        except AlbumError as e:
            return album_error_response(e)

        return Response(AlbumSerializer(album).data)

    def destroy(self, request, *args, **kwargs):
        """
        Delete an album.

        An album with media needs ``move_to_album_id`` (body or query string)
        naming the album that receives them.
        """
        album = self.get_object()
        move_to_id = request.data.get('move_to_album_id') or request.query_params.get('move_to_album_id')

        move_to = None
        if move_to_id:
            try:
                move_to = Album.objects.filter(pk=uuid.UUID(str(move_to_id))).first()
            except ValueError:
                move_to = None
            if move_to is None:
                return Response(
                    {"detail": "Álbum de destino não encontrado."},
                    status=status.HTTP_400_BAD_REQUEST
                )

        try:
            AlbumManagementService.delete_album(album, move_to=move_to)
        except AlbumError as e:
            return album_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def types(self, request):
        return Response(AlbumTypeSerializer(AlbumType.objects.order_by('id'), many=True).data)

    @action(detail=False, methods=['get'], url_path='by-type')
    def by_type(self, request):
        grouped = AlbumManagementService.get_albums_by_type(self.get_wedding())
        return Response({
            slug: AlbumSerializer(albums, many=True).data
            for slug, albums in grouped.items()
        })

    @action(detail=True, methods=['get'])
    def media(self, request, pk=None):
        album = self.get_object()
        media = album.media.filter(status=SiteMedia.STATUS_COMPLETED).order_by('-created_at')
        return Response(SiteMediaSerializer(media, many=True).data)


class QuotaView(MediaModuleMixin, APIView):
    """Media usage of the current wedding against its plan."""

    def get(self, request):
        wedding = self.get_wedding()
        usage = QuotaTrackingService.get_usage(wedding)
        limits = QuotaTrackingService.get_plan_limits(wedding)

        return Response({
            'files': {
                'current': usage.current_files,
                'max': usage.max_files,
                'percentage': round(usage.files_percentage, 2),
            },
            'storage': {
                'current_bytes': usage.current_storage_bytes,
                'max_bytes': usage.max_storage_bytes,
                'current_mb': round(usage.current_storage_bytes / 1024 / 1024, 2),
                'max_mb': round(usage.max_storage_bytes / 1024 / 1024, 2),
                'percentage': round(usage.storage_percentage, 2),
            },
            'plan': limits.slug,
            'is_at_limit': usage.is_at_limit,
            'is_near_limit': usage.is_near_limit(0.8),
        })


class QuotaCheckView(MediaModuleMixin, APIView):
    """Tell the client whether an upload fits before sending it."""

    def post(self, request):
        serializer = QuotaCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = QuotaTrackingService.can_upload(
            self.get_wedding(),
            serializer.validated_data['file_size'],
            serializer.validated_data['file_count'],
        )
        return Response(result.to_dict())
