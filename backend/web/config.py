"""
Configuration and startup security checks for the academy catalog.

Why: Course access depends on an external content store and identity
provider. A production deployment talking to them over plain HTTP would leak
bearer tokens, and a typo in the role match mode would silently change who can
open which course. This module reads the settings and provides a single guard
that enforces minimal production safety without burdening local development.

Permissions: The caller needs no special privileges. The functions simply read
environment variables; the guard raises `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os

from catalog.access import ROLE_MATCH_MODES


CONTENT_BASE_URL_DEFAULT = "http://localhost:1337"
CONTENT_TIMEOUT_SECONDS_DEFAULT = 10
VIEWER_CACHE_TTL_SECONDS_DEFAULT = 300
ROLE_MATCH_MODE_DEFAULT = "fuzzy"


def is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def _parse_int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return value


def get_environment() -> str:
    return (os.getenv("ACADEMY_ENV", "dev") or "dev").strip().lower()


def get_content_base_url() -> str:
    """Base URL of the content store (also serves `/api/users/me` and media)."""
    return (os.getenv("CONTENT_BASE_URL") or CONTENT_BASE_URL_DEFAULT).strip().rstrip("/")


def get_content_timeout_seconds() -> int:
    return _parse_int_env("CONTENT_TIMEOUT_SECONDS", CONTENT_TIMEOUT_SECONDS_DEFAULT)


def get_viewer_cache_ttl_seconds() -> int:
    return _parse_int_env("VIEWER_CACHE_TTL_SECONDS", VIEWER_CACHE_TTL_SECONDS_DEFAULT)


def get_role_match_mode() -> str:
    """Return `fuzzy` (default, partial matches) or `exact`.

    Unknown values fall back to the default; the startup guard rejects them in
    production.
    """
    mode = (os.getenv("ROLE_MATCH_MODE") or ROLE_MATCH_MODE_DEFAULT).strip().lower()
    return mode if mode in ROLE_MATCH_MODES else ROLE_MATCH_MODE_DEFAULT


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/production/stage/staging only):
    - CONTENT_BASE_URL must use https (bearer tokens are forwarded to it).
    - ROLE_MATCH_MODE, when set, must be one of `fuzzy` or `exact`.
    """
    if not is_prod_like(get_environment()):
        return  # dev/test remain permissive

    base = get_content_base_url().lower()
    if not base.startswith("https://"):
        raise SystemExit(
            "Refusing to start: CONTENT_BASE_URL must use https in production."
        )

    raw_mode = (os.getenv("ROLE_MATCH_MODE") or "").strip().lower()
    if raw_mode and raw_mode not in ROLE_MATCH_MODES:
        raise SystemExit(
            f"Refusing to start: ROLE_MATCH_MODE must be one of {sorted(ROLE_MATCH_MODES)} (got {raw_mode!r})."
        )


__all__ = [
    "CONTENT_BASE_URL_DEFAULT",
    "ensure_secure_config_on_startup",
    "get_content_base_url",
    "get_content_timeout_seconds",
    "get_environment",
    "get_role_match_mode",
    "get_viewer_cache_ttl_seconds",
    "is_prod_like",
]
