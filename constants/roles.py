from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """
    System-wide user roles:
    - admin: full control over users, projects and documents
    - lead: edits the projects they lead and manages their documents
    - developer: read access to the projects they are a team member of
    """

    ADMIN = "admin"
    LEAD = "lead"
    DEVELOPER = "developer"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]


class ProjectRole(str, Enum):
    """A user's role inside one project."""

    LEAD = "lead"
    MEMBER = "member"


ALL_ROLES: set[str] = set(Role.values())

DEFAULT_ROLE = Role.DEVELOPER

# Roles that can be picked as project lead or team member
ASSIGNABLE_ROLES: tuple[str, ...] = (Role.LEAD.value, Role.DEVELOPER.value)


def normalize_role(raw: Role | str | None, default: Role = DEFAULT_ROLE) -> Role:
    """
    Clean an externally supplied role value:
    - None or blank => default
    - strip surrounding whitespace, lower-case
    - must be a registered role
    """
    if isinstance(raw, Role):
        return raw
    if not raw or not str(raw).strip():
        return default
    value = str(raw).strip().lower()
    if value not in ALL_ROLES:
        raise ValueError(f"Invalid role: {raw}")
    return Role(value)
