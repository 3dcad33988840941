"""
Test configuration: repo root on sys.path, isolated app home, no live network.

This allows tests to import from top-level packages (dayplan, tests.fixtures).
Enforces determinism by blocking live network access and pinning the app
home to a temporary directory.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add repo root to sys.path so tests can import dayplan.*, tests.fixtures.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# =============================================================================
# DETERMINISM GUARD: Block live network access
# =============================================================================


def _raise_determinism_violation(request: httpx.Request, *args, **kwargs):
    raise RuntimeError(
        f"DETERMINISM VIOLATION: live HTTP request to {request.url}\n"
        "Tests must pass an httpx.Client built on httpx.MockTransport."
    )


@pytest.fixture(autouse=True)
def guard_live_network(monkeypatch):
    """Real transports raise; MockTransport-backed clients are unaffected."""
    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _raise_determinism_violation)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point DAYPLAN_HOME at a throwaway directory."""
    home = tmp_path / "dayplan_home"
    monkeypatch.setenv("DAYPLAN_HOME", str(home))
    return home


@pytest.fixture
def day():
    """A plain Tuesday with no DST transition in common zones."""
    from tests.fixtures import FIXTURE_DAY

    return FIXTURE_DAY
