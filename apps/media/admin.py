"""Admin for the wedding media library."""

from django.contrib import admin

from apps.media.models import Album, AlbumType, PlanLimit, SiteMedia, UploadBatch


@admin.register(PlanLimit)
class PlanLimitAdmin(admin.ModelAdmin):
    list_display = ['slug', 'name', 'max_files', 'max_storage_mb']
    search_fields = ['slug', 'name']

    def max_storage_mb(self, obj):
        return obj.max_storage_mb
    max_storage_mb.short_description = 'Max storage (MB)'


@admin.register(AlbumType)
class AlbumTypeAdmin(admin.ModelAdmin):
    list_display = ['slug', 'name']
    search_fields = ['slug', 'name']


@admin.register(Album)
class AlbumAdmin(admin.ModelAdmin):
    list_display = ['name', 'wedding', 'album_type', 'created_at']
    list_filter = ['album_type', 'created_at']
    search_fields = ['name', 'wedding__title']
    raw_id_fields = ['wedding', 'cover_media']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(SiteMedia)
class SiteMediaAdmin(admin.ModelAdmin):
    list_display = [
        'original_name',
        'wedding',
        'album',
        'mime_type',
        'size_mb',
        'width',
        'height',
        'status',
        'created_at',
    ]
    list_filter = ['status', 'mime_type', 'created_at']
    search_fields = ['original_name', 'path', 'wedding__title']
    raw_id_fields = ['wedding', 'site', 'album', 'batch', 'uploaded_by']
    readonly_fields = ['id', 'path', 'size', 'variants', 'width', 'height', 'created_at', 'updated_at']

    def size_mb(self, obj):
        return obj.size_mb
    size_mb.short_description = 'Size (MB)'


@admin.register(UploadBatch)
class UploadBatchAdmin(admin.ModelAdmin):
    list_display = ['id', 'wedding', 'album', 'total_files', 'completed_files', 'failed_files', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['wedding__title']
    raw_id_fields = ['wedding', 'album']
    readonly_fields = ['id', 'errors', 'created_at', 'updated_at']
