"""Catalog API routes: access-annotated course list, course detail, current viewer."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

import config as _cfg
from catalog.content import ContentClient, ContentStoreProtocol
from catalog.usecases import (
    GetCourseDetailInput,
    GetCourseDetailUseCase,
    ListCatalogInput,
    ListCatalogUseCase,
)
from identity_access.domain import Viewer


logger = logging.getLogger("academy.web.catalog")

catalog_router = APIRouter(tags=["Catalog"])

CONTENT: Optional[ContentStoreProtocol] = None


def set_content_client(client: Optional[ContentStoreProtocol]) -> None:  # pragma: no cover - used in tests
    global CONTENT
    CONTENT = client


def _get_content() -> ContentStoreProtocol:
    global CONTENT
    if CONTENT is None:
        CONTENT = ContentClient(
            base_url=_cfg.get_content_base_url(),
            timeout=float(_cfg.get_content_timeout_seconds()),
        )
    return CONTENT


def _cache_headers() -> dict[str, str]:
    # Responses depend on the caller's role: never share them across viewers.
    return {"Cache-Control": "private, no-store", "Vary": "Authorization"}


def _current_viewer(request: Request) -> Optional[Viewer]:
    viewer = getattr(request.state, "viewer", None)
    return viewer if isinstance(viewer, Viewer) else None


def _exact_matching() -> bool:
    return _cfg.get_role_match_mode() == "exact"


def _bad_gateway() -> JSONResponse:
    return JSONResponse({"error": "bad_gateway"}, status_code=502, headers=_cache_headers())


@catalog_router.get("/api/catalog/courses")
async def list_courses(request: Request):
    """List all courses with a per-course `has_access` flag and statistics.

    Behavior:
        - Anonymous callers see every course locked.
        - Authenticated callers see courses without configured roles as open.
        - Responds 502 when the content store fails.
    """
    uc = ListCatalogUseCase(_get_content(), exact=_exact_matching())
    req = ListCatalogInput(viewer=_current_viewer(request), token=getattr(request.state, "token", None))
    try:
        result = await run_in_threadpool(uc.execute, req)
    except RuntimeError as exc:
        logger.warning("Course list failed: %s", exc.__class__.__name__)
        return _bad_gateway()
    return JSONResponse(result, headers=_cache_headers())


@catalog_router.get("/api/catalog/courses/{course_id}")
async def get_course(request: Request, course_id: str):
    """Return one course; modules/classes are only included when accessible.

    Responds 404 for unknown courses, 400 for a blank id and 502 when the
    content store fails.
    """
    uc = GetCourseDetailUseCase(_get_content(), exact=_exact_matching())
    req = GetCourseDetailInput(
        viewer=_current_viewer(request),
        course_id=course_id,
        token=getattr(request.state, "token", None),
    )
    try:
        result = await run_in_threadpool(uc.execute, req)
    except ValueError:
        return JSONResponse({"error": "bad_request", "detail": "invalid_course_id"}, status_code=400, headers=_cache_headers())
    except LookupError:
        return JSONResponse({"error": "not_found"}, status_code=404, headers=_cache_headers())
    except RuntimeError as exc:
        logger.warning("Course detail failed: %s", exc.__class__.__name__)
        return _bad_gateway()
    return JSONResponse(result, headers=_cache_headers())


@catalog_router.get("/api/me")
async def get_me(request: Request):
    viewer = _current_viewer(request)
    if viewer is None:
        return JSONResponse({"error": "unauthenticated"}, status_code=401, headers=_cache_headers())
    return JSONResponse(
        {
            "id": viewer.user_id,
            "username": viewer.username,
            "role": {"type": viewer.role.type_id, "name": viewer.role.display_name},
        },
        headers=_cache_headers(),
    )
