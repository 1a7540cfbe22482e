"""Utility functions for the Nupcial platform."""

import secrets
import string
import uuid

from django.utils.text import slugify


def generate_token(length=64):
    """Generate a random alphanumeric token."""
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_username(email):
    """Generate a unique username from email."""
    from django.contrib.auth import get_user_model

    User = get_user_model()
    base_username = email.split('@')[0]
    username = base_username
    counter = 1

    while User.objects.filter(username=username).exists():
        username = f"{base_username}{counter}"
        counter += 1

    return username


def generate_unique_slug(model, value, field='slug', max_length=100, exclude_pk=None):
    """
    Build a slug from ``value`` that is unique for ``model.field``.

    A numeric suffix is appended while the slug is taken.
    """
    base_slug = slugify(value)[:max_length].strip('-') or uuid.uuid4().hex[:8]
    slug = base_slug
    counter = 1

    queryset = model.objects.all()
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)

    while queryset.filter(**{field: slug}).exists():
        suffix = f"-{counter}"
        slug = f"{base_slug[:max_length - len(suffix)]}{suffix}"
        counter += 1

    return slug


def get_request_wedding(request):
    """
    Resolve the wedding a request works on.

    The ``X-Wedding-ID`` header wins; otherwise the user's current wedding
    is used. Returns None when the user has no access to the wedding.
    """
    from apps.weddings.models import Wedding
    from apps.weddings.services import PermissionService

    cached = getattr(request, '_wedding_cache', None)
    if cached is not None:
        return cached or None

    user = request.user
    wedding = None
    wedding_id = request.headers.get('X-Wedding-ID')

    if wedding_id:
        try:
            wedding = Wedding.objects.filter(pk=uuid.UUID(str(wedding_id))).first()
        except ValueError:
            wedding = None
    elif user.is_authenticated and user.current_wedding_id:
        wedding = user.current_wedding

    if wedding is not None and not PermissionService.has_wedding_access(user, wedding):
        wedding = None

    request._wedding_cache = wedding or False
    return wedding
