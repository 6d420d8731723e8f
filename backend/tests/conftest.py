"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend to avoid sandbox restrictions
that can affect the Trio backend (e.g., socketpair permission errors).
"""
import importlib
import sys
from pathlib import Path

import pytest

# Ensure modules in backend/ and backend/web are importable across tests
REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
WEB_DIR = BACKEND_DIR / "web"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(BACKEND_DIR), str(WEB_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_env_toggles(monkeypatch: pytest.MonkeyPatch):
    """Start every test from dev defaults.

    Why:
        Config and guard tests set ACADEMY_ENV/CONTENT_BASE_URL/ROLE_MATCH_MODE;
        a leftover value would change match semantics in unrelated tests.
    """
    for var in (
        "ACADEMY_ENV",
        "CONTENT_BASE_URL",
        "CONTENT_TIMEOUT_SECONDS",
        "VIEWER_CACHE_TTL_SECONDS",
        "ROLE_MATCH_MODE",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_web_state(monkeypatch: pytest.MonkeyPatch):
    """Reset the viewer cache and content client per test.

    Why:
        API tests swap in fake identity/content clients. Without a reset, a
        cached viewer or fake client from one test leaks into the next.
    """
    try:
        main = importlib.import_module("main")
        catalog_routes = importlib.import_module("routes.catalog")
        from identity_access.stores import ViewerStore
    except ImportError:
        yield
        return
    monkeypatch.setattr(main, "VIEWER_STORE", ViewerStore(), raising=False)
    monkeypatch.setattr(main, "PROFILE", main.load_profile_client(), raising=False)
    monkeypatch.setattr(catalog_routes, "CONTENT", None, raising=False)
    main.SETTINGS.override_environment(None)
    yield
