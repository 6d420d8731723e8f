"""
Identity domain types and payload helpers.

Why:
- The identity provider returns loosely shaped user records (`role` may be
  missing, partially filled or carry non-string values). Convert them once at
  the boundary so the rest of the code works with small immutable values.
- Keep terms aligned with the glossary: a role descriptor is the pair of
  machine identifier (`type`) and human label (`name`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class RoleDescriptor:
    type_id: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class Viewer:
    """Authenticated caller as resolved from the identity provider."""

    user_id: str
    username: str = ""
    role: RoleDescriptor = field(default_factory=RoleDescriptor)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def role_descriptor_from_user(payload: Any) -> Optional[RoleDescriptor]:
    """Build a RoleDescriptor from a user record (`{"role": {"type", "name"}}`).

    Returns None for an empty or non-mapping payload (no authenticated user).
    A user without a role object still yields a descriptor with empty fields.
    """
    if not isinstance(payload, Mapping) or not payload:
        return None
    role = payload.get("role")
    if not isinstance(role, Mapping):
        return RoleDescriptor()
    return RoleDescriptor(type_id=_text(role.get("type")), display_name=_text(role.get("name")))


def viewer_from_user(payload: Any) -> Optional[Viewer]:
    role = role_descriptor_from_user(payload)
    if role is None:
        return None
    user_id = payload.get("id")
    return Viewer(
        user_id="" if user_id is None else str(user_id),
        username=_text(payload.get("username")),
        role=role,
    )


__all__ = ["RoleDescriptor", "Viewer", "role_descriptor_from_user", "viewer_from_user"]
