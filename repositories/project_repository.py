from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import and_, desc, exists, or_, select
from sqlalchemy.orm import selectinload

from constants.project import ProjectStatus
from constants.roles import Role
from extensions.database import db, commit_session
from models.project import Project, ProjectMember
from utils.permissions import Actor


def _is_member(user_id: int):
    return exists().where(
        ProjectMember.project_id == Project.id,
        ProjectMember.user_id == user_id,
    )


class ProjectRepository:
    @staticmethod
    def _load_options():
        return (
            selectinload(Project.lead),
            selectinload(Project.members).selectinload(ProjectMember.user),
        )

    @staticmethod
    def visibility_conditions(actor: Actor) -> list:
        """
        Listing predicate per role. Completed projects are hidden from every
        listing, admin included; they stay reachable by id.
          - admin: all active
          - lead: active AND (leads it OR on its team)
          - developer: active AND on its team
        """
        active = Project.status == ProjectStatus.ACTIVE.value
        if actor.role is Role.ADMIN:
            return [active]
        if actor.role is Role.LEAD:
            return [active, or_(Project.lead_id == actor.id, _is_member(actor.id))]
        if actor.role is Role.DEVELOPER:
            return [active, _is_member(actor.id)]
        raise ValueError(f"Unhandled role: {actor.role!r}")

    @staticmethod
    def list_visible(actor: Actor) -> List[Project]:
        stmt = (
            select(Project)
            .options(*ProjectRepository._load_options())
            .where(and_(*ProjectRepository.visibility_conditions(actor)))
            .order_by(desc(Project.created_at), desc(Project.id))
        )
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def get_by_id(project_id: int) -> Optional[Project]:
        stmt = (
            select(Project)
            .options(*ProjectRepository._load_options())
            .where(Project.id == project_id)
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def create(
        name: str,
        description: str,
        deadline: date,
        lead_id: int,
        status: str = ProjectStatus.ACTIVE.value,
        team_user_ids: Iterable[int] = (),
    ) -> Project:
        project = Project(
            name=name,
            description=description,
            deadline=deadline,
            lead_id=lead_id,
            status=status,
            members=[ProjectMember(user_id=uid) for uid in team_user_ids],
        )
        db.session.add(project)
        db.session.flush()
        return project

    @staticmethod
    def update(project: Project, *, name=None, description=None, deadline=None, status=None, lead_id=None) -> Project:
        if name is not None:
            project.name = name
        if description is not None:
            project.description = description
        if deadline is not None:
            project.deadline = deadline
        if status is not None:
            project.status = status
        if lead_id is not None:
            project.lead_id = lead_id
        db.session.flush()
        return project

    @staticmethod
    def replace_team(project: Project, user_ids: Iterable[int]):
        """Replace (not merge) the team; memberships that survive keep their rows."""
        wanted = list(dict.fromkeys(user_ids))
        keep = [m for m in project.members if m.user_id in wanted]
        kept_ids = {m.user_id for m in keep}
        project.members = keep + [ProjectMember(user_id=uid) for uid in wanted if uid not in kept_ids]
        db.session.flush()

    @staticmethod
    def delete(project: Project):
        db.session.delete(project)
        db.session.flush()

    commit = staticmethod(commit_session)
