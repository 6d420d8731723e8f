"""
Course catalog models parsed from content-store payloads.

Why:
    The content store returns courses with loosely typed fields: descriptions
    are either plain strings or rich-text blocks, `allowedRoles` comes in three
    shapes, modules and classes arrive unordered. Parse once at the boundary so
    use cases and the web adapter handle plain dataclasses.

Behavior:
    - Modules and classes are sorted by their `order` field (stable; missing
      order sorts last).
    - Thumbnail paths are resolved against the media base URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from catalog.access import normalize_allowed_roles


NO_DESCRIPTION = "No description available"


def extract_description(value: Any) -> str:
    """Flatten a description into plain text.

    Rich-text blocks look like `[{"type": "paragraph", "children": [{"text": ...}]}]`;
    each block contributes the concatenated text of its children and blocks are
    joined with a single space.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts: List[str] = []
        for block in value:
            children = block.get("children") if isinstance(block, Mapping) else None
            if not isinstance(children, list):
                parts.append("")
                continue
            parts.append("".join(_text(child.get("text")) for child in children if isinstance(child, Mapping)))
        return " ".join(parts)
    return NO_DESCRIPTION


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _order_key(item: Any) -> tuple[int, int]:
    order = item.order
    return (0, order) if order is not None else (1, 0)


def resolve_media_url(path: Any, media_base_url: str) -> Optional[str]:
    if not isinstance(path, str) or not path.strip():
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{media_base_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass
class CourseClass:
    id: Optional[int]
    document_id: str
    title: str
    topics: str = ""
    video_url: Optional[str] = None
    duration: Optional[int] = None
    order: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "document_id": self.document_id,
            "title": self.title,
            "topics": self.topics,
            "video_url": self.video_url,
            "duration": self.duration,
            "order": self.order,
        }


@dataclass
class CourseModule:
    id: Optional[int]
    document_id: str
    title: str
    description: str = ""
    order: Optional[int] = None
    classes: List[CourseClass] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "document_id": self.document_id,
            "title": self.title,
            "description": self.description,
            "order": self.order,
            "classes": [c.to_dict() for c in self.classes],
        }


@dataclass
class Course:
    id: Optional[int]
    document_id: str
    title: str
    description: str
    allowed_roles_raw: Any = None
    allowed_roles: List[str] = field(default_factory=list)
    thumbnail_url: Optional[str] = None
    modules: List[CourseModule] = field(default_factory=list)

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "document_id": self.document_id,
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "allowed_roles": list(self.allowed_roles),
        }

    def to_detail(self) -> dict:
        data = self.to_summary()
        data["modules"] = [m.to_dict() for m in self.modules]
        return data


def class_from_payload(payload: Mapping[str, Any]) -> CourseClass:
    video = payload.get("videoUrl")
    return CourseClass(
        id=_int_or_none(payload.get("id")),
        document_id=_text(payload.get("documentId")),
        title=_text(payload.get("title")),
        topics=_text(payload.get("topics")),
        video_url=video if isinstance(video, str) and video else None,
        duration=_int_or_none(payload.get("duration")),
        order=_int_or_none(payload.get("order")),
    )


def module_from_payload(payload: Mapping[str, Any]) -> CourseModule:
    raw_classes = payload.get("classes")
    classes = [class_from_payload(c) for c in raw_classes if isinstance(c, Mapping)] if isinstance(raw_classes, list) else []
    return CourseModule(
        id=_int_or_none(payload.get("id")),
        document_id=_text(payload.get("documentId")),
        title=_text(payload.get("title")),
        description=_text(payload.get("description")),
        order=_int_or_none(payload.get("order")),
        classes=sorted(classes, key=_order_key),
    )


def course_from_payload(payload: Mapping[str, Any], media_base_url: str = "") -> Course:
    raw_modules = payload.get("modules")
    modules = [module_from_payload(m) for m in raw_modules if isinstance(m, Mapping)] if isinstance(raw_modules, list) else []
    thumbnail = payload.get("thumbnail")
    thumb_path = thumbnail.get("url") if isinstance(thumbnail, Mapping) else None
    raw_roles = payload.get("allowedRoles")
    return Course(
        id=_int_or_none(payload.get("id")),
        document_id=_text(payload.get("documentId")),
        title=_text(payload.get("title")),
        description=extract_description(payload.get("description")),
        allowed_roles_raw=raw_roles,
        allowed_roles=normalize_allowed_roles(raw_roles),
        thumbnail_url=resolve_media_url(thumb_path, media_base_url),
        modules=sorted(modules, key=_order_key),
    )


__all__ = [
    "NO_DESCRIPTION",
    "Course",
    "CourseClass",
    "CourseModule",
    "class_from_payload",
    "course_from_payload",
    "extract_description",
    "module_from_payload",
    "resolve_media_url",
]
