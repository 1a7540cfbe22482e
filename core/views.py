"""
Core API views (e.g. version, health).
"""
import os
from datetime import datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


def _format_deployed_at(iso_value):
    """Format DEPLOYED_AT (ISO) in the server timezone."""
    if not iso_value or iso_value == "unknown":
        return None
    server_tz = ZoneInfo(settings.TIME_ZONE)
    try:
        dt = datetime.fromisoformat(iso_value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return iso_value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=server_tz)
    else:
        dt = dt.astimezone(server_tz)
    return dt.strftime("%d/%m/%Y %H:%M:%S")


class VersionView(APIView):
    """
    GET /api/v1/version/
    Public endpoint to see which version is running and when it was deployed.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        deployed_at_raw = os.environ.get("DEPLOYED_AT")
        return Response({
            "version": os.environ.get("APP_VERSION", "dev"),
            "settings_module": os.environ.get("DJANGO_SETTINGS_MODULE", "unknown"),
            "deployed_at": deployed_at_raw,
            "deployed_at_display": _format_deployed_at(deployed_at_raw),
            "timezone": settings.TIME_ZONE,
        })
