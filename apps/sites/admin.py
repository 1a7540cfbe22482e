"""Admin configuration for sites app."""

from django.contrib import admin
from .models import SiteLayout, SiteTemplate, SiteVersion


@admin.register(SiteLayout)
class SiteLayoutAdmin(admin.ModelAdmin):
    list_display = ('slug', 'wedding', 'is_published', 'published_at', 'custom_domain')
    list_filter = ('is_published',)
    search_fields = ('slug', 'custom_domain', 'wedding__title')
    readonly_fields = ('id', 'access_token', 'created_at', 'updated_at', 'published_at')


@admin.register(SiteVersion)
class SiteVersionAdmin(admin.ModelAdmin):
    list_display = ('site', 'summary', 'is_published', 'user', 'created_at')
    list_filter = ('is_published',)
    search_fields = ('site__slug', 'summary')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(SiteTemplate)
class SiteTemplateAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'is_public', 'wedding', 'created_at')
    list_filter = ('is_public',)
    search_fields = ('name', 'slug', 'wedding__title')
    prepopulated_fields = {'slug': ('name',)}
