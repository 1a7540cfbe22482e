import django_filters

from apps.media.models import SiteMedia


class SiteMediaFilter(django_filters.FilterSet):
    album_id = django_filters.UUIDFilter(field_name='album_id')
    album_type = django_filters.CharFilter(field_name='album__album_type__slug')
    mime_type = django_filters.CharFilter(field_name='mime_type', lookup_expr='istartswith')
    search = django_filters.CharFilter(field_name='original_name', lookup_expr='icontains')

    class Meta:
        model = SiteMedia
        fields = ['album_id', 'album_type', 'mime_type', 'search']
