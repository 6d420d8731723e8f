"""
Course access evaluation (role-based).

Why:
    Course pages, course cards and the catalog statistics all need the same
    answer to "may this viewer open this course?". Keeping the decision in one
    pure module prevents the per-page drift we had before (one page skipped the
    display-name checks).

Behavior:
    - Unauthenticated viewers (None) never have access.
    - A course without configured roles is open to every authenticated viewer.
    - Roles match case-insensitively against the role type or the display
      name, including partial matches in both directions ("student" matches
      "Pro Student"). Pass `exact=True` to disable partial matches.

Permissions:
    Pure function; no I/O and no shared state.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from identity_access.domain import RoleDescriptor


# `exact` restricts matching to case-insensitive equality; `fuzzy` also
# accepts partial matches in both directions.
ROLE_MATCH_MODES = frozenset({"fuzzy", "exact"})


def _coerce_roles(items: Sequence[Any]) -> list[str]:
    roles: list[str] = []
    for item in items:
        if item is None:
            continue
        text = item if isinstance(item, str) else str(item)
        if text.strip():
            roles.append(text)
    return roles


def normalize_allowed_roles(raw: Any) -> list[str]:
    """Return the allowed roles of a course as a list of non-empty strings.

    Accepts a list/tuple, a JSON-encoded array string, or a single role name.
    Malformed JSON and JSON non-arrays are kept as one literal role. Any other
    shape yields an empty list.
    """
    if isinstance(raw, (list, tuple)):
        return _coerce_roles(raw)
    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            return [raw]
        if isinstance(parsed, list):
            return _coerce_roles(parsed)
        return [raw]
    return []


def _role_matches(role: str, user_type: str, user_name: str, *, exact: bool) -> bool:
    role_lower = role.strip().lower()
    if role_lower == user_type or role_lower == user_name:
        return True
    if exact:
        return False
    if user_type and (role_lower in user_type or user_type in role_lower):
        return True
    if user_name and (role_lower in user_name or user_name in role_lower):
        return True
    return False


def has_access(viewer: Optional[RoleDescriptor], allowed_roles_raw: Any, *, exact: bool = False) -> bool:
    """Decide whether `viewer` may view a course restricted to `allowed_roles_raw`."""
    if viewer is None:
        return False
    allowed = normalize_allowed_roles(allowed_roles_raw)
    if not allowed:
        return True
    user_type = (viewer.type_id or "").strip().lower()
    user_name = (viewer.display_name or "").strip().lower()
    return any(_role_matches(role, user_type, user_name, exact=exact) for role in allowed)


__all__ = ["ROLE_MATCH_MODES", "normalize_allowed_roles", "has_access"]
