from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """Outcome of a read against a collaborator service.

    Lookups never raise for remote failures; the caller picks the fallback.
    """

    status: LookupStatus
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, value: T) -> "LookupResult[T]":
        return cls(LookupStatus.FOUND, value=value)

    @classmethod
    def not_found(cls, detail: Optional[str] = None) -> "LookupResult[T]":
        return cls(LookupStatus.NOT_FOUND, error=detail)

    @classmethod
    def failed(cls, error: str) -> "LookupResult[T]":
        return cls(LookupStatus.ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def is_not_found(self) -> bool:
        return self.status is LookupStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.status is LookupStatus.ERROR

    def value_or(self, default: T) -> T:
        return self.value if self.is_found else default
