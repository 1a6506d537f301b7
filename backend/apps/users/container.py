from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from .clients import UserDirectoryClient


def build_user_directory() -> UserDirectoryClient:
    return UserDirectoryClient(
        getattr(settings, "USER_SERVICE_URL", ""),
        cache_backend=cache,
        cache_ttl=getattr(settings, "CACHE_TTL", 300),
    )
