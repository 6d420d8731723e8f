"""
Content-store adapter (course list and course detail).

Why:
    Keep the REST details of the content backend (paths, populate parameters,
    envelope shape) out of the use cases. The web layer forwards the caller's
    bearer token so the backend applies its own visibility rules.

Security: Never log tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import quote
import logging

# Small indirection to ease monkeypatching in tests
import requests as http


logger = logging.getLogger("academy.catalog")

COURSES_PATH = "/api/courses"


class ContentStoreProtocol(Protocol):
    base_url: str

    def list_courses(self, token: Optional[str] = None) -> list[dict]:
        ...

    def get_course(self, course_id: str, token: Optional[str] = None) -> dict:
        ...


def http_get(url: str, *, params: dict, headers: dict, timeout: float):
    return http.get(url, params=params, headers=headers, timeout=timeout)


@dataclass
class ContentClient:
    base_url: str
    timeout: float = 10.0

    def _headers(self, token: Optional[str]) -> dict:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _get(self, path: str, params: dict, token: Optional[str]):
        url = f"{self.base_url.rstrip('/')}{path}"
        try:
            return http_get(url, params=params, headers=self._headers(token), timeout=self.timeout)
        except http.RequestException as exc:
            logger.warning("Content store request failed: %s", exc.__class__.__name__)
            raise RuntimeError("content_store_unavailable") from exc

    @staticmethod
    def _json(r) -> object:
        try:
            return r.json()
        except ValueError as exc:
            raise RuntimeError("content_store_unavailable") from exc

    def list_courses(self, token: Optional[str] = None) -> list[dict]:
        """Return raw course records (`data` list of `/api/courses?populate=*`)."""
        r = self._get(COURSES_PATH, {"populate": "*"}, token)
        if r.status_code != 200:
            logger.warning("Content store answered %s on course list", r.status_code)
            raise RuntimeError("content_store_unavailable")
        body = self._json(r)
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    def get_course(self, course_id: str, token: Optional[str] = None) -> dict:
        """Return one raw course record with modules and their classes populated.

        Raises LookupError("course_not_found") for unknown ids.
        """
        path = f"{COURSES_PATH}/{quote(str(course_id), safe='')}"
        r = self._get(path, {"populate[modules][populate]": "classes"}, token)
        if r.status_code == 404:
            raise LookupError("course_not_found")
        if r.status_code != 200:
            logger.warning("Content store answered %s on course detail", r.status_code)
            raise RuntimeError("content_store_unavailable")
        body = self._json(r)
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data:
            raise LookupError("course_not_found")
        return data


__all__ = ["ContentClient", "ContentStoreProtocol", "COURSES_PATH", "http_get"]
