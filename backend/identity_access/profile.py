"""
Identity provider adapter: resolve the current user behind a bearer token.

This module is a thin, framework-agnostic client used by the web layer to
turn an already-issued JWT into a user record with its role. It does not log
in, register or store tokens; the caller passes the token through.

Security: Never log tokens. Errors carry short machine-readable codes only.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

# Small indirection to ease monkeypatching in tests
import requests as http


logger = logging.getLogger("academy.identity_access")

ME_PATH = "/api/users/me"


def http_get(url: str, *, params: dict, headers: dict, timeout: float):
    return http.get(url, params=params, headers=headers, timeout=timeout)


@dataclass
class ProfileClient:
    base_url: str
    timeout: float = 10.0

    @property
    def me_endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}{ME_PATH}"

    def fetch_current_user(self, token: str) -> dict:
        """Return the user record (with populated role) for `token`.

        Raises:
            ValueError("missing_token") when the token is empty.
            PermissionError("invalid_token") when the provider rejects it.
            RuntimeError("identity_provider_unavailable") on any other failure.
        """
        token = (token or "").strip()
        if not token:
            raise ValueError("missing_token")
        try:
            r = http_get(
                self.me_endpoint,
                params={"populate": "role"},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except http.RequestException as exc:
            logger.warning("Identity provider request failed: %s", exc.__class__.__name__)
            raise RuntimeError("identity_provider_unavailable") from exc
        if r.status_code in (401, 403):
            raise PermissionError("invalid_token")
        if r.status_code != 200:
            logger.warning("Identity provider answered %s", r.status_code)
            raise RuntimeError("identity_provider_unavailable")
        try:
            body = r.json()
        except ValueError as exc:
            raise RuntimeError("identity_provider_unavailable") from exc
        if not isinstance(body, dict) or not body:
            raise RuntimeError("identity_provider_unavailable")
        return body


__all__ = ["ProfileClient", "http_get", "ME_PATH"]
