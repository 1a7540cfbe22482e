"""Admin configuration for weddings app."""

from django.contrib import admin
from .models import Wedding, WeddingUser, GuestEvent, PartnerInvite


class WeddingUserInline(admin.TabularInline):
    model = WeddingUser
    extra = 0
    raw_id_fields = ('user',)


@admin.register(Wedding)
class WeddingAdmin(admin.ModelAdmin):
    list_display = ('title', 'slug', 'wedding_date', 'plan', 'is_active', 'created_at')
    list_filter = ('plan', 'is_active')
    search_fields = ('title', 'slug', 'venue')
    readonly_fields = ('id', 'created_at', 'updated_at')
    inlines = [WeddingUserInline]


@admin.register(GuestEvent)
class GuestEventAdmin(admin.ModelAdmin):
    list_display = ('name', 'wedding', 'slug', 'event_at', 'is_active')
    search_fields = ('name', 'wedding__title')
    readonly_fields = ('id', 'created_at', 'updated_at')


@admin.register(PartnerInvite)
class PartnerInviteAdmin(admin.ModelAdmin):
    list_display = ('email', 'wedding', 'status', 'expires_at', 'accepted_at')
    list_filter = ('status',)
    search_fields = ('email', 'name', 'wedding__title')
    readonly_fields = ('id', 'token', 'created_at', 'updated_at')
