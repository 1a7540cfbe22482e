import re

from rest_framework import serializers

from apps.sites.models import SiteLayout, SiteTemplate, SiteVersion

SLUG_RE = re.compile(r'^[a-z0-9-]+$')
HOSTNAME_RE = re.compile(
    r'^(?=.{1,253}$)(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$',
    re.IGNORECASE,
)


class SiteLayoutSerializer(serializers.ModelSerializer):
    """Serializer for wedding sites."""

    wedding_id = serializers.UUIDField(read_only=True)
    has_password = serializers.ReadOnlyField()
    is_draft = serializers.ReadOnlyField()
    public_url = serializers.ReadOnlyField()

    class Meta:
        model = SiteLayout
        fields = [
            'id', 'wedding_id', 'slug', 'custom_domain', 'has_password',
            'draft_content', 'published_content', 'is_published', 'published_at',
            'is_draft', 'public_url', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SiteVersionSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = SiteVersion
        fields = ['id', 'summary', 'is_published', 'user_name', 'content', 'created_at']
        read_only_fields = fields

    def get_user_name(self, obj):
        return obj.user.get_full_name() if obj.user else None


class SiteDraftSerializer(serializers.Serializer):
    content = serializers.DictField()
    summary = serializers.CharField(required=False, allow_blank=True, max_length=500)
    create_version = serializers.BooleanField(required=False, default=True)


class SiteSettingsSerializer(serializers.Serializer):
    """Slug, custom domain and guest password of a site."""

    slug = serializers.CharField(required=False, max_length=100)
    custom_domain = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    access_token = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, min_length=4, max_length=50
    )

    def validate_slug(self, value):
        value = value.strip()
        if not SLUG_RE.match(value):
            raise serializers.ValidationError("Use only lowercase letters, numbers and hyphens.")
        site = self.context['site']
        if SiteLayout.objects.filter(slug=value).exclude(pk=site.pk).exists():
            raise serializers.ValidationError("This address is already in use.")
        return value

    def validate_custom_domain(self, value):
        if not value:
            return None
        value = value.strip().lower()
        if not HOSTNAME_RE.match(value):
            raise serializers.ValidationError("Enter a valid domain, like www.example.com.")
        site = self.context['site']
        if SiteLayout.objects.filter(custom_domain=value).exclude(pk=site.pk).exists():
            raise serializers.ValidationError("This domain is already in use.")
        return value


class SiteRestoreSerializer(serializers.Serializer):
    version_id = serializers.IntegerField()


class SiteTemplateSerializer(serializers.ModelSerializer):
    wedding_id = serializers.UUIDField(read_only=True)
    is_system = serializers.ReadOnlyField()

    class Meta:
        model = SiteTemplate
        fields = [
            'id', 'name', 'slug', 'description', 'thumbnail', 'is_public', 'is_system',
            'wedding_id', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SiteTemplateDetailSerializer(SiteTemplateSerializer):

    class Meta(SiteTemplateSerializer.Meta):
        fields = SiteTemplateSerializer.Meta.fields + ['content']
        read_only_fields = fields


class ApplyTemplateSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=['merge', 'overwrite'], required=False, default='merge')


class PublicSiteSerializer(serializers.ModelSerializer):
    """What guests get from a published site."""

    wedding = serializers.SerializerMethodField()
    public_url = serializers.ReadOnlyField()
    content = serializers.SerializerMethodField()

    class Meta:
        model = SiteLayout
        fields = ['slug', 'custom_domain', 'public_url', 'published_at', 'wedding', 'content']
        read_only_fields = fields

    def get_wedding(self, obj):
        return {
            'title': obj.wedding.title,
            'wedding_date': obj.wedding.wedding_date,
            'venue': obj.wedding.venue,
        }

    def get_content(self, obj):
        return self.context['content']
