"""Admin configuration for users app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'username', 'first_name', 'last_name', 'current_wedding', 'onboarding_completed', 'is_staff')
    list_filter = ('is_staff', 'is_superuser', 'is_active', 'onboarding_completed')
    search_fields = ('email', 'username', 'first_name', 'last_name')
    ordering = ('-date_joined',)
    raw_id_fields = ('current_wedding',)
    readonly_fields = ('onboarding_completed_at', 'last_login', 'date_joined')

    fieldsets = BaseUserAdmin.fieldsets + (
        (_('Wedding'), {'fields': ('phone_number', 'current_wedding', 'onboarding_completed', 'onboarding_completed_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'username', 'password1', 'password2'),
        }),
    )
