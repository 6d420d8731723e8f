"""Catalog use cases: access-annotated course list and course detail."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

from catalog.access import has_access
from catalog.content import ContentStoreProtocol
from catalog.models import Course, course_from_payload
from identity_access.domain import Viewer


logger = logging.getLogger("academy.catalog")


def _decide(course: Course, viewer: Optional[Viewer], exact: bool) -> bool:
    decision = has_access(viewer.role if viewer else None, course.allowed_roles_raw, exact=exact)
    logger.debug("access course=%s roles=%s decision=%s", course.document_id or course.id, course.allowed_roles, decision)
    return decision


@dataclass
class ListCatalogInput:
    viewer: Optional[Viewer]
    token: Optional[str] = None


class ListCatalogUseCase:
    def __init__(self, content: ContentStoreProtocol, *, exact: bool = False) -> None:
        self._content = content
        self._exact = exact

    def execute(self, req: ListCatalogInput) -> dict:
        """Return every course with its access flag plus catalog statistics.

        Behavior:
            - Items keep the content-store order.
            - stats.available counts courses the viewer may open; anonymous
              viewers get 0 available and every course locked.
        """
        courses = [course_from_payload(p, self._content.base_url) for p in self._content.list_courses(req.token)]
        items = []
        available = 0
        for course in courses:
            allowed = _decide(course, req.viewer, self._exact)
            if allowed:
                available += 1
            item = course.to_summary()
            item["has_access"] = allowed
            items.append(item)
        total = len(items)
        return {"items": items, "stats": {"total": total, "available": available, "locked": total - available}}


@dataclass
class GetCourseDetailInput:
    viewer: Optional[Viewer]
    course_id: str
    token: Optional[str] = None


class GetCourseDetailUseCase:
    def __init__(self, content: ContentStoreProtocol, *, exact: bool = False) -> None:
        self._content = content
        self._exact = exact

    def execute(self, req: GetCourseDetailInput) -> dict:
        """Return one course; modules and classes only when the viewer has access.

        Raises:
            ValueError("invalid_course_id") for a blank id.
            LookupError("course_not_found") when the course does not exist.
        """
        course_id = (req.course_id or "").strip()
        if not course_id:
            raise ValueError("invalid_course_id")
        course = course_from_payload(self._content.get_course(course_id, req.token), self._content.base_url)
        allowed = _decide(course, req.viewer, self._exact)
        data = course.to_detail() if allowed else course.to_summary()
        if not allowed:
            data["modules"] = []
        data["has_access"] = allowed
        data["locked"] = not allowed
        return data


__all__ = ["ListCatalogInput", "ListCatalogUseCase", "GetCourseDetailInput", "GetCourseDetailUseCase"]
