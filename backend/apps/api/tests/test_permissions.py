import types

import pytest

from apps.api.exceptions import ForbiddenError, UnauthorizedError
from apps.api.permissions import (
    Actor,
    authorize_owner,
    authorize_privileged,
    ensure_owner,
    ensure_owner_of_all,
    resolve_actor,
)


def _request(user=None):
    return types.SimpleNamespace(user=user, path="/api/test/")


def test_resolve_actor_reads_token_claims(token_user):
    actor = resolve_actor(_request(token_user(user_id="12", is_staff=True)))
    assert actor == Actor(user_id=12, is_privileged=True)


def test_resolve_actor_rejects_anonymous():
    anonymous = types.SimpleNamespace(id=None, is_authenticated=False)
    with pytest.raises(UnauthorizedError):
        resolve_actor(_request(anonymous))
    with pytest.raises(UnauthorizedError):
        resolve_actor(_request(None))


def test_resolve_actor_rejects_non_numeric_id(token_user):
    with pytest.raises(UnauthorizedError):
        resolve_actor(_request(token_user(user_id="abc")))


def test_owner_and_privileged_callers_pass():
    ensure_owner(Actor(user_id=5), 5, resource="cart")
    ensure_owner(Actor(user_id=1, is_privileged=True), 5, resource="cart")


def test_non_owner_is_forbidden():
    with pytest.raises(ForbiddenError) as excinfo:
        ensure_owner(Actor(user_id=1), 5, resource="order")
    assert excinfo.value.details == {"resource": "order"}


def test_missing_owner_is_forbidden_for_regular_caller():
    with pytest.raises(ForbiddenError):
        ensure_owner(Actor(user_id=1), None)


def test_ensure_owner_of_all_requires_every_owner():
    ensure_owner_of_all(Actor(user_id=3), [3, 3], resource="cart")
    with pytest.raises(ForbiddenError):
        ensure_owner_of_all(Actor(user_id=3), [3, 4], resource="cart")


def test_authorize_helpers(token_user):
    actor = authorize_owner(_request(token_user(user_id=8)), 8, resource="cart")
    assert actor.user_id == 8
    with pytest.raises(ForbiddenError):
        authorize_privileged(_request(token_user(user_id=8)), action="list carts")
    admin = authorize_privileged(_request(token_user(user_id=1, is_superuser=True)))
    assert admin.is_privileged
