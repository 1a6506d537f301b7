from __future__ import annotations

from typing import Any, Mapping, Optional

from apps.common import get_logger
from apps.common.http import ServiceClient
from apps.common.results import LookupResult

from .dtos import UserSnapshot
from .protocols import CacheBackendProtocol

logger = get_logger(__name__).bind(component="users", layer="client")


def _display_name(payload: Mapping[str, Any]) -> Optional[str]:
    for key in ("name", "username", "userName"):
        value = payload.get(key)
        if value:
            return str(value)
    first = payload.get("firstName") or ""
    last = payload.get("lastName") or ""
    full = f"{first} {last}".strip()
    return full or None


class UserDirectoryClient(ServiceClient):
    """Reads customer display data from the user directory, with a read-through cache."""

    service_name = "user-directory"
    cache_prefix = "users:snapshot"

    def __init__(
        self,
        base_url: str,
        *,
        cache_backend: Optional[CacheBackendProtocol] = None,
        cache_ttl: Optional[int] = 300,
        **kwargs: Any,
    ):
        super().__init__(base_url, **kwargs)
        self.cache = cache_backend
        self.cache_ttl = cache_ttl

    def _cache_key(self, user_id: int) -> str:
        return f"{self.cache_prefix}:{user_id}"

    def get_user(self, user_id: int) -> LookupResult[UserSnapshot]:
        key = self._cache_key(user_id)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug("User snapshot cache hit", cache_key=key)
                return LookupResult.found(cached)
        result = self.get_json(f"api/users/{user_id}")
        if not result.is_found:
            return result
        payload = result.value
        if not isinstance(payload, Mapping):
            self.logger.warning("User payload is not an object", user_id=user_id)
            return LookupResult.failed("user-directory returned malformed user")
        snapshot = UserSnapshot(
            id=user_id,
            name=_display_name(payload),
            email=payload.get("email") or None,
        )
        if self.cache is not None:
            self.cache.set(key, snapshot, timeout=self.cache_ttl)
        return LookupResult.found(snapshot)
