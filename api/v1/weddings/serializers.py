from rest_framework import serializers

from apps.sites.models import SiteLayout
from apps.weddings.models import GuestEvent, PartnerInvite, Wedding
from apps.weddings.services import PermissionService


class OnboardingSerializer(serializers.Serializer):
    """Data collected by the onboarding wizard."""

    wedding_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    wedding_time = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    venue_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    venue_address = serializers.CharField(required=False, allow_blank=True, max_length=255)
    venue_neighborhood = serializers.CharField(required=False, allow_blank=True, max_length=255)
    venue_city = serializers.CharField(required=False, allow_blank=True, max_length=255)
    venue_state = serializers.CharField(required=False, allow_blank=True, max_length=2)
    venue_phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    plan = serializers.ChoiceField(choices=['basic', 'premium'], required=False, default='basic')
    partner_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    partner_email = serializers.EmailField(required=False, allow_blank=True)

    def validate_partner_email(self, value):
        value = (value or '').lower().strip()
        user = self.context.get('user')
        if value and user is not None and value == user.email.lower():
            raise serializers.ValidationError("You cannot invite yourself.")
        return value

    def validate(self, attrs):
        if attrs.get('partner_email') and not attrs.get('partner_name'):
            raise serializers.ValidationError({'partner_name': "Partner name is required with an email."})
        return attrs


class GuestEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = GuestEvent
        fields = ['id', 'slug', 'name', 'event_at', 'is_active', 'metadata']
        read_only_fields = fields


class WeddingSerializer(serializers.ModelSerializer):
    """Wedding with the requesting user's role and modules."""

    role = serializers.SerializerMethodField()
    modules = serializers.SerializerMethodField()
    site_id = serializers.SerializerMethodField()
    guest_events = GuestEventSerializer(many=True, read_only=True)

    class Meta:
        model = Wedding
        fields = [
            'id', 'title', 'slug', 'wedding_date', 'venue', 'plan', 'details',
            'is_active', 'role', 'modules', 'site_id', 'guest_events',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def _user(self):
        request = self.context.get('request')
        return request.user if request else None

    def get_role(self, obj):
        return PermissionService.get_wedding_role(self._user(), obj)

    def get_modules(self, obj):
        return PermissionService.get_accessible_modules(self._user(), obj)

    def get_site_id(self, obj):
        site_id = SiteLayout.objects.filter(wedding=obj).values_list('id', flat=True).first()
        return str(site_id) if site_id else None


class PartnerInviteSerializer(serializers.ModelSerializer):
    """Public view of a pending invite."""

    inviter_name = serializers.SerializerMethodField()
    wedding_title = serializers.CharField(source='wedding.title', read_only=True)
    has_account = serializers.SerializerMethodField()

    class Meta:
        model = PartnerInvite
        fields = [
            'name', 'email', 'status', 'expires_at',
            'inviter_name', 'wedding_title', 'has_account'
        ]
        read_only_fields = fields

    def get_inviter_name(self, obj):
        return obj.invited_by.get_full_name()

    def get_has_account(self, obj):
        return obj.existing_user_id is not None
