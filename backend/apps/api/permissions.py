from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from apps.api.exceptions import ForbiddenError, UnauthorizedError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="permissions")


@dataclass(frozen=True)
class Actor:
    """Caller identity resolved from the bearer token."""

    user_id: int
    is_privileged: bool = False

    def owns(self, owner_id: Optional[int]) -> bool:
        return owner_id is not None and int(owner_id) == self.user_id


def _is_privileged_user(user: Any) -> bool:
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def resolve_actor(request) -> Actor:
    """Return the authenticated caller or raise UnauthorizedError.

    Works with both Django users and simplejwt's stateless TokenUser, whose
    `id` is the token's user_id claim.
    """
    user = getattr(request, "user", None)
    user_id = getattr(user, "id", None) if user is not None else None
    if not user or not getattr(user, "is_authenticated", False) or user_id is None:
        logger.debug("Anonymous request rejected", path=getattr(request, "path", None))
        raise UnauthorizedError("Authentication required")
    try:
        resolved_id = int(user_id)
    except (TypeError, ValueError):
        logger.warning("Token carries non-numeric user id", user_id=user_id)
        raise UnauthorizedError("Authentication required") from None
    return Actor(user_id=resolved_id, is_privileged=_is_privileged_user(user))


def ensure_owner(actor: Actor, owner_id: Optional[int], *, resource: str = "resource") -> None:
    """Allow the owner of a resource or any privileged caller."""
    if actor.is_privileged or actor.owns(owner_id):
        return
    logger.warning(
        "Ownership check failed",
        actor_id=actor.user_id,
        owner_id=owner_id,
        resource=resource,
    )
    raise ForbiddenError(
        f"You do not have permission to access this {resource}",
        details={"resource": resource},
    )


def ensure_owner_of_all(
    actor: Actor, owner_ids: Iterable[Optional[int]], *, resource: str = "resource"
) -> None:
    for owner_id in owner_ids:
        ensure_owner(actor, owner_id, resource=resource)


def ensure_privileged(actor: Actor, *, action: str = "perform this action") -> None:
    if actor.is_privileged:
        return
    logger.warning("Privileged action refused", actor_id=actor.user_id, action=action)
    raise ForbiddenError(f"You do not have permission to {action}")


def authorize_owner(request, owner_id: Optional[int], *, resource: str = "resource") -> Actor:
    """Resolve the caller and check ownership in one step; views call this before any service call."""
    actor = resolve_actor(request)
    ensure_owner(actor, owner_id, resource=resource)
    return actor


def authorize_privileged(request, *, action: str = "perform this action") -> Actor:
    actor = resolve_actor(request)
    ensure_privileged(actor, action=action)
    return actor
