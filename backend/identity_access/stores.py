"""
In-memory viewer cache keyed by bearer token.

Why: Resolving the role behind a token costs one identity-provider round trip.
The role is stable for the lifetime of a session, so we keep the resolved
viewer for a short TTL instead of asking on every page load.

Security: Only a SHA-256 digest of the token is kept as key; the raw token is
never stored. For multi-process deployments, replace with a shared store.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import hashlib
import threading
import time

from identity_access.domain import Viewer


def _now() -> int:
    return int(time.time())


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass
class ViewerRecord:
    viewer: Viewer
    expires_at: int


class ViewerStore:
    def __init__(self, ttl_seconds: int = 300):
        self.ttl_seconds = ttl_seconds
        self._data: Dict[str, ViewerRecord] = {}
        self._lock = threading.Lock()

    def put(self, token: str, viewer: Viewer) -> ViewerRecord:
        now = _now()
        rec = ViewerRecord(viewer=viewer, expires_at=now + self.ttl_seconds)
        with self._lock:
            # Tokens that never come back would otherwise stay forever.
            expired = [key for key, old in self._data.items() if old.expires_at < now]
            for key in expired:
                del self._data[key]
            self._data[_token_key(token)] = rec
        return rec

    def get(self, token: str) -> Optional[Viewer]:
        key = _token_key(token)
        with self._lock:
            rec = self._data.get(key)
            if not rec:
                return None
            if rec.expires_at < _now():
                self._data.pop(key, None)
                return None
            return rec.viewer

    def delete(self, token: str) -> None:
        with self._lock:
            self._data.pop(_token_key(token), None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
