"""
Pytest configuration and shared fixtures for Flectra tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used leaf fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures.common import make_leaves  # noqa: E402
from flectra.crypto.hashing import keccak256  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def three_leaves() -> list[bytes]:
    """Leaves [H(a), H(b), H(c)]: the odd-count scenario."""
    return [keccak256(b"a"), keccak256(b"b"), keccak256(b"c")]


@pytest.fixture
def seven_leaves() -> list[bytes]:
    return make_leaves(7)


@pytest.fixture(autouse=True)
def _clean_flectra_env(monkeypatch):
    """Keep FLECTRA_* variables from the host environment out of tests."""
    for name in ("FLECTRA_HASH_ALGORITHM", "FLECTRA_LOG_LEVEL", "FLECTRA_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
