"""URL Configuration for API v1."""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1.media.views import (
    AlbumViewSet,
    QuotaCheckView,
    QuotaView,
    SiteMediaViewSet,
    UploadBatchViewSet,
)
from api.v1.sites.views import PublicSiteView, SiteLayoutViewSet, SiteTemplateViewSet
from api.v1.weddings.views import WeddingViewSet
from core.views import VersionView

# Create a router and register our viewsets with it
router = DefaultRouter()
router.register(r'weddings', WeddingViewSet, basename='wedding')
router.register(r'sites', SiteLayoutViewSet, basename='site')
router.register(r'site-templates', SiteTemplateViewSet, basename='site-template')
# Batches before media so that media/batch/ is not read as a media id
router.register(r'media/batch', UploadBatchViewSet, basename='upload-batch')
router.register(r'media', SiteMediaViewSet, basename='media')
router.register(r'albums', AlbumViewSet, basename='album')

# Wire up our API using automatic URL routing
urlpatterns = [
    path('', include(router.urls)),
    path('auth/', include('api.v1.auth.urls')),
    path('', include('api.v1.weddings.urls')),
    path('quota/', QuotaView.as_view(), name='quota'),
    path('quota/check/', QuotaCheckView.as_view(), name='quota-check'),
    path('public/sites/', PublicSiteView.as_view(), name='public-site-domain'),
    path('public/sites/<slug:slug>/', PublicSiteView.as_view(), name='public-site'),
    path('version/', VersionView.as_view(), name='version'),
]
