import os
import sys
import types

import pytest

# Ensure backend package is importable when running `pytest` from repo root
BASE_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.join(BASE_DIR, 'backend')
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)


@pytest.fixture
def token_user():
    """Build a stand-in for simplejwt's TokenUser."""

    def _make(user_id=1, is_staff=False, is_superuser=False):
        return types.SimpleNamespace(
            id=user_id,
            is_authenticated=True,
            is_staff=is_staff,
            is_superuser=is_superuser,
        )

    return _make
