from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from constants.project import DEFAULT_PROJECT_STATUS, ProjectStatus
from constants.roles import ASSIGNABLE_ROLES
from models.project import Project
from repositories.document_repository import DocumentRepository
from repositories.project_repository import ProjectRepository
from repositories.user_repository import UserRepository
from utils.exceptions import (
    LeadNotFound,
    NotFound,
    ServerError,
    TeamMemberNotFound,
    ValidationError,
)
from utils.patch import MISSING, blank, is_present, parse_date, parse_id, parse_member_ids
from utils.permissions import (
    Actor,
    assert_can_create_project,
    assert_can_delete_project,
    assert_can_edit_metadata,
    assert_can_view,
    can_reassign_lead,
)

logger = logging.getLogger(__name__)


def _text(value, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def _deadline(value) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise ValidationError("deadline must be an ISO-8601 date")


def _status(value) -> str:
    if value not in ProjectStatus.values():
        raise ValidationError(f"status must be one of: {', '.join(ProjectStatus.values())}")
    return value


def _team_ids(value) -> List[int]:
    if not isinstance(value, list):
        raise ValidationError("team must be a list")
    try:
        return parse_member_ids(value)
    except ValueError:
        raise ValidationError("Invalid team member id")


@dataclass
class ProjectPatch:
    """
    Partial project update. Every field is either the raw client value or
    MISSING; values are validated by ``ProjectService.update`` only after the
    project is loaded and the actor may edit it.

    name, description, deadline, status and lead treat null/blank input as
    absent: these columns are required, so an empty string cannot clear
    them and simply keeps the stored value. ``team`` is present whenever the
    key is non-null, so ``[]`` empties the team.
    """

    name: Any = MISSING
    description: Any = MISSING
    deadline: Any = MISSING
    status: Any = MISSING
    lead: Any = MISSING
    team: Any = MISSING

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ProjectPatch":
        patch = cls()
        for key in ("name", "description", "deadline", "status", "lead"):
            if not blank(data.get(key)):
                setattr(patch, key, data[key])
        if data.get("team") is not None:
            patch.team = data["team"]
        return patch

    def cleaned(self) -> "ProjectPatch":
        """Validated copy of the non-lead fields; ``lead`` is carried over raw."""
        return ProjectPatch(
            name=_text(self.name, "name") if is_present(self.name) else MISSING,
            description=_text(self.description, "description") if is_present(self.description) else MISSING,
            deadline=_deadline(self.deadline) if is_present(self.deadline) else MISSING,
            status=_status(self.status) if is_present(self.status) else MISSING,
            lead=self.lead,
            team=_team_ids(self.team) if is_present(self.team) else MISSING,
        )


class ProjectService:

    @staticmethod
    def _load(project_id: int) -> Project:
        project = ProjectRepository.get_by_id(project_id)
        if not project:
            raise NotFound("Project not found")
        return project

    @staticmethod
    def _resolve_lead(lead_id: int):
        lead = UserRepository.find_by_id(lead_id)
        if not lead:
            raise LeadNotFound()
        return lead

    @staticmethod
    def _resolve_team(user_ids: List[int]) -> List[int]:
        """The whole list is validated in one lookup; one unknown id rejects all of it."""
        found = UserRepository.find_by_ids(user_ids)
        if len(found) != len(user_ids):
            raise TeamMemberNotFound()
        return user_ids

    @staticmethod
    def _commit(action: str):
        try:
            ProjectRepository.commit()
        except IntegrityError:
            logger.exception("project %s violated a constraint", action)
            raise ServerError(f"Failed to {action} project")

    @staticmethod
    def create(data: Mapping[str, Any], *, actor: Actor) -> Project:
        assert_can_create_project(actor)
        required = ("name", "description", "deadline", "lead")
        if any(blank(data.get(key)) for key in required):
            raise ValidationError("Please provide name, description, deadline, and lead")

        name = _text(data["name"], "name")
        description = _text(data["description"], "description")
        deadline = _deadline(data["deadline"])
        status = DEFAULT_PROJECT_STATUS.value
        if not blank(data.get("status")):
            status = _status(data["status"])
        try:
            lead_id = parse_id(data["lead"])
        except ValueError:
            raise LeadNotFound()
        ProjectService._resolve_lead(lead_id)

        team_ids: List[int] = []
        if data.get("team") is not None:
            team_ids = ProjectService._resolve_team(_team_ids(data["team"]))

        project = ProjectRepository.create(
            name=name,
            description=description,
            deadline=deadline,
            lead_id=lead_id,
            status=status,
            team_user_ids=team_ids,
        )
        ProjectService._commit("create")
        logger.info("project %s created by user %s (lead=%s, team=%s)", project.id, actor.id, lead_id, team_ids)
        return ProjectService._load(project.id)

    @staticmethod
    def get(project_id: int, *, actor: Actor) -> Project:
        project = ProjectService._load(project_id)
        assert_can_view(actor, project)
        return project

    @staticmethod
    def list_visible(actor: Actor) -> List[dict]:
        projects = ProjectRepository.list_visible(actor)
        counts = DocumentRepository.count_by_projects(p.id for p in projects)
        return [p.to_dict(document_count=counts.get(p.id, 0)) for p in projects]

    @staticmethod
    def update(project_id: int, patch: ProjectPatch, *, actor: Actor) -> Project:
        project = ProjectService._load(project_id)
        assert_can_edit_metadata(actor, project)
        patch = patch.cleaned()

        lead_id: Optional[int] = None
        if is_present(patch.lead):
            if can_reassign_lead(actor):
                try:
                    lead_id = parse_id(patch.lead)
                except ValueError:
                    raise LeadNotFound()
                ProjectService._resolve_lead(lead_id)
            else:
                logger.warning(
                    "user %s tried to reassign lead of project %s; ignored", actor.id, project.id
                )

        if is_present(patch.team):
            ProjectService._resolve_team(patch.team)
            ProjectRepository.replace_team(project, patch.team)

        ProjectRepository.update(
            project,
            name=patch.name if is_present(patch.name) else None,
            description=patch.description if is_present(patch.description) else None,
            deadline=patch.deadline if is_present(patch.deadline) else None,
            status=patch.status if is_present(patch.status) else None,
            lead_id=lead_id,
        )
        ProjectService._commit("update")
        logger.info("project %s updated by user %s", project_id, actor.id)
        return ProjectService._load(project_id)

    @staticmethod
    def delete(project_id: int, *, actor: Actor):
        project = ProjectService._load(project_id)
        assert_can_delete_project(actor)
        # documents first: no document may point at a missing project
        removed = DocumentRepository.delete_by_project(project.id)
        ProjectRepository.delete(project)
        ProjectService._commit("delete")
        logger.info("project %s deleted by user %s with %s documents", project_id, actor.id, removed)

    @staticmethod
    def available_users() -> List[dict]:
        return [u.to_summary() for u in UserRepository.list_by_roles(ASSIGNABLE_ROLES)]
