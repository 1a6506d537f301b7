from __future__ import annotations

from typing import Any, Optional, Protocol

from apps.common.results import LookupResult

from .dtos import UserSnapshot


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        ...


class UserDirectoryProtocol(Protocol):
    def get_user(self, user_id: int) -> LookupResult[UserSnapshot]:
        ...
