"CPS Academy catalog"
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from identity_access.domain import Viewer, viewer_from_user
from identity_access.profile import ProfileClient
from identity_access.stores import ViewerStore
import config as _cfg


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via ACADEMY_ENABLE_DOTENV (default true outside
      pytest).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("ACADEMY_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    load_dotenv()

# Minimal production safety checks (fail-fast on insecure config)
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------

class AppSettings:
    def __init__(self) -> None:
        self._env_override: str | None = None

    @property
    def environment(self) -> str:
        if self._env_override is not None:
            return self._env_override
        return _cfg.get_environment()

    def override_environment(self, env: str | None) -> None:
        """Override environment for tests (e.g., "prod"), or reset with None."""
        self._env_override = env


logger = logging.getLogger("academy.web")
SETTINGS = AppSettings()

app = FastAPI(title="CPS Academy", description="Role-gated course catalog", version="0.1.0")

from routes.catalog import catalog_router  # noqa: E402

app.include_router(catalog_router)

# --- Identity Provider & Viewer Cache -------------------------------------------

def load_profile_client() -> ProfileClient:
    return ProfileClient(base_url=_cfg.get_content_base_url(), timeout=float(_cfg.get_content_timeout_seconds()))


PROFILE = load_profile_client()
VIEWER_STORE = ViewerStore(ttl_seconds=_cfg.get_viewer_cache_ttl_seconds())

# --- Viewer Resolution Middleware ------------------------------------------------

def _no_store_headers() -> dict:
    return {"Cache-Control": "private, no-store", "Vary": "Authorization"}


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization") or ""
    scheme, _, value = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    value = value.strip()
    return value or None


async def _resolve_viewer(token: str) -> Optional[Viewer]:
    cached = VIEWER_STORE.get(token)
    if cached is not None:
        return cached
    payload = await run_in_threadpool(PROFILE.fetch_current_user, token)
    viewer = viewer_from_user(payload)
    if viewer is not None:
        VIEWER_STORE.put(token, viewer)
    return viewer


@app.middleware("http")
async def viewer_resolution(request: Request, call_next):
    """Attach the caller (or None for anonymous) to `request.state.viewer`.

    A request without bearer token proceeds anonymously. A token rejected by
    the identity provider yields 401; an unreachable provider yields 503.
    """
    request.state.viewer = None
    request.state.token = None
    if not request.url.path.startswith("/api/"):
        return await call_next(request)

    token = _bearer_token(request)
    if token:
        try:
            viewer = await _resolve_viewer(token)
        except PermissionError:
            VIEWER_STORE.delete(token)
            return JSONResponse({"error": "unauthenticated"}, status_code=401, headers=_no_store_headers())
        except RuntimeError as exc:
            logger.warning("Viewer resolution failed: %s", exc.__class__.__name__)
            return JSONResponse(
                {"error": "identity_provider_unavailable"}, status_code=503, headers=_no_store_headers()
            )
        request.state.viewer = viewer
        request.state.token = token
    return await call_next(request)

# --- Security Headers Middleware ----------------------------------------------

@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    if _cfg.is_prod_like(SETTINGS.environment):
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
    response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response


@app.get("/health")
async def health():
    return {"status": "ok"}
