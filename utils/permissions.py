"""
Authorization policy: who may view, edit or delete a project and who may
manage its documents. Pure decisions over an ``Actor`` and a project-like
object exposing ``lead_id`` and ``team_user_ids``; no storage access here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol

from flask import g

from constants.roles import Role, normalize_role
from utils.exceptions import Forbidden, Unauthenticated


class ProjectLike(Protocol):
    lead_id: int
    team_user_ids: Iterable[int]


@dataclass(frozen=True)
class Actor:
    id: int
    role: Role
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, user: Mapping[str, Any]) -> "Actor":
        return cls(
            id=int(user["id"]),
            role=normalize_role(user.get("role")),
            name=user.get("name"),
            email=user.get("email"),
        )

    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}


def _leads(actor: Actor, project: ProjectLike) -> bool:
    return project.lead_id is not None and int(project.lead_id) == actor.id


def _on_team(actor: Actor, project: ProjectLike) -> bool:
    return actor.id in {int(uid) for uid in project.team_user_ids}


def can_view(actor: Actor, project: ProjectLike) -> bool:
    if actor.role is Role.ADMIN:
        return True
    if actor.role is Role.LEAD or actor.role is Role.DEVELOPER:
        return _leads(actor, project) or _on_team(actor, project)
    raise ValueError(f"Unhandled role: {actor.role!r}")


def can_edit_metadata(actor: Actor, project: ProjectLike) -> bool:
    """Admin, or the project's own lead. Lead reassignment is checked separately."""
    if actor.role is Role.ADMIN:
        return True
    if actor.role is Role.LEAD or actor.role is Role.DEVELOPER:
        return _leads(actor, project)
    raise ValueError(f"Unhandled role: {actor.role!r}")


def can_reassign_lead(actor: Actor) -> bool:
    return actor.is_admin()


def can_delete_project(actor: Actor) -> bool:
    return actor.is_admin()


def can_manage_documents(actor: Actor, project: ProjectLike) -> bool:
    # same holders as metadata edits: upload and delete
    return can_edit_metadata(actor, project)


def assert_can_view(actor: Actor, project: ProjectLike):
    if not can_view(actor, project):
        raise Forbidden("You do not have permission to view this project")


def assert_can_edit_metadata(actor: Actor, project: ProjectLike):
    if not can_edit_metadata(actor, project):
        raise Forbidden("You do not have permission to update this project")


def assert_can_delete_project(actor: Actor):
    if not can_delete_project(actor):
        raise Forbidden("You do not have permission to delete this project")


def assert_can_manage_documents(actor: Actor, project: ProjectLike):
    if not can_manage_documents(actor, project):
        raise Forbidden("You do not have permission to manage documents of this project")


def get_current_actor() -> Actor:
    """
    Current authenticated actor (stored on g.current_actor by auth_required).
    """
    actor = getattr(g, "current_actor", None)
    if not actor:
        raise Unauthenticated()
    return actor


def can_create_project(actor: Actor) -> bool:
    return actor.is_admin()


def assert_can_create_project(actor: Actor):
    if not can_create_project(actor):
        raise Forbidden("Only administrators can create projects")
