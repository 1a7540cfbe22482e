from rest_framework import serializers

from apps.media.models import Album, AlbumType, SiteMedia, UploadBatch

MAX_FILES_PER_BATCH = 100


class SiteMediaSerializer(serializers.ModelSerializer):
    """Serializer for media of the wedding library."""

    url = serializers.ReadOnlyField()
    size_mb = serializers.ReadOnlyField()
    variants = serializers.SerializerMethodField()
    album_id = serializers.UUIDField(read_only=True)
    batch_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = SiteMedia
        fields = [
            'id', 'original_name', 'url', 'variants', 'size', 'size_mb',
            'mime_type', 'width', 'height', 'album_id', 'batch_id',
            'status', 'error_message', 'created_at'
        ]
        read_only_fields = fields

    def get_variants(self, obj):
        return {name: obj.get_variant_url(name) for name in (obj.variants or {})}


class SiteMediaDetailSerializer(SiteMediaSerializer):
    album = serializers.SerializerMethodField()

    class Meta(SiteMediaSerializer.Meta):
        fields = SiteMediaSerializer.Meta.fields + ['album', 'updated_at']
        read_only_fields = fields

    def get_album(self, obj):
        if obj.album is None:
            return None
        return {
            'id': str(obj.album.id),
            'name': obj.album.name,
            'type': obj.album.album_type.slug,
        }


class AlbumTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = AlbumType
        fields = ['slug', 'name', 'description']
        read_only_fields = fields


class AlbumSerializer(serializers.ModelSerializer):
    type_slug = serializers.CharField(source='album_type.slug', read_only=True)
    type_name = serializers.CharField(source='album_type.name', read_only=True)
    cover_media_id = serializers.UUIDField(read_only=True)
    cover_url = serializers.SerializerMethodField()
    media_count = serializers.SerializerMethodField()

    class Meta:
        model = Album
        fields = [
            'id', 'name', 'description', 'type_slug', 'type_name',
            'cover_media_id', 'cover_url', 'media_count', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_cover_url(self, obj):
        if obj.cover_media is None:
            return None
        return obj.cover_media.get_variant_url('thumbnail') or obj.cover_media.url

    def get_media_count(self, obj):
        count = getattr(obj, 'media_count', None)
        if count is None:
            count = obj.media.filter(status=SiteMedia.STATUS_COMPLETED).count()
        return count


class AlbumWriteSerializer(serializers.Serializer):
    """Input for creating and editing albums; rule checks live in the service."""

    type_slug = serializers.CharField(required=False, max_length=50)
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    cover_media_id = serializers.UUIDField(required=False, allow_null=True)


class UploadBatchSerializer(serializers.ModelSerializer):
    album_id = serializers.UUIDField(read_only=True)
    pending_files = serializers.ReadOnlyField()

    class Meta:
        model = UploadBatch
        fields = [
            'id', 'album_id', 'total_files', 'completed_files', 'failed_files',
            'pending_files', 'status', 'errors', 'created_at'
        ]
        read_only_fields = fields


class CreateBatchSerializer(serializers.Serializer):
    total_files = serializers.IntegerField(min_value=1, max_value=MAX_FILES_PER_BATCH)
    album_id = serializers.UUIDField(required=False, allow_null=True)


class FileUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    original_name = serializers.CharField(required=False, allow_blank=True, max_length=255)


class MoveMediaSerializer(serializers.Serializer):
    album_id = serializers.UUIDField()


class RenameMediaSerializer(serializers.Serializer):
    original_name = serializers.CharField(max_length=255)


class CropMediaSerializer(serializers.Serializer):
    x = serializers.IntegerField(min_value=0)
    y = serializers.IntegerField(min_value=0)
    width = serializers.IntegerField(min_value=1)
    height = serializers.IntegerField(min_value=1)


class BatchDeleteSerializer(serializers.Serializer):
    media_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1, max_length=MAX_FILES_PER_BATCH)


class BatchMoveSerializer(serializers.Serializer):
    media_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1, max_length=MAX_FILES_PER_BATCH)
    target_album_id = serializers.UUIDField()


class QuotaCheckSerializer(serializers.Serializer):
    file_size = serializers.IntegerField(min_value=0)
    file_count = serializers.IntegerField(min_value=1, required=False, default=1)
