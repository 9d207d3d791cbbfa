"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend and reset module-level state
(session store, interest repo, env toggles) so tests stay independent in a
full-suite run.
"""
import sys
from pathlib import Path

import pytest

# Ensure `backend.*` imports work without an editable install.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_env_toggles(monkeypatch: pytest.MonkeyPatch):
    """Clear env-driven toggles that may leak across tests.

    Individual tests opt into prod semantics or custom routes explicitly.
    """
    for var in (
        "BIZLIST_ENV",
        "BIZLIST_INTERNAL_BASE_URL",
        "BIZLIST_INTEREST_TOGGLE_ROUTE",
        "BIZLIST_LOGIN_LOCATION",
        "BIZLIST_INTEREST_TIMEOUT_SECONDS",
        "BIZLIST_TRUST_PROXY",
        "BIZLIST_SEED_DEMO_SESSIONS",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_web_state(monkeypatch: pytest.MonkeyPatch):
    """Fresh session store, CSRF tokens and interest repo per test.

    Why:
        Routes read these module globals; a session or star created in one
        test must not change the rendering of another.
    """
    from backend.identity_access.stores import SessionStore
    from backend.marketplace.repo import InterestRepo
    from backend.web import main
    from backend.web.routes import interest as interest_routes

    monkeypatch.setattr(main, "SESSION_STORE", SessionStore())
    monkeypatch.setattr(main, "_CSRF_BY_SESSION", {})
    interest_routes.set_repo(InterestRepo())
    yield
