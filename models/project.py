# -*- coding: utf-8 -*-
"""
project.py
--------------------------------------------------------------------
Project and team membership:
- Project: a unit of work with exactly one lead and a team.
- ProjectMember: a user's membership in a project's team.
Documents reference projects but are not an ORM cascade of Project; the
service layer removes them before the project row.
"""

from extensions.database import db
from constants.project import ProjectStatus
from constants.roles import ProjectRole
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, isoformat


class Project(TimestampMixin, db.Model):
    __tablename__ = "project"
    __table_args__ = (
        db.Index("ix_project_status_deadline", "status", "deadline"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    deadline = db.Column(db.Date, nullable=False)
    status = db.Column(
        db.String(32),
        nullable=False,
        server_default=ProjectStatus.ACTIVE.value,
        default=ProjectStatus.ACTIVE.value,
    )
    lead_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)

    lead = db.relationship("User", back_populates="led_projects")
    members = db.relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.id",
    )

    @property
    def team_user_ids(self) -> list[int]:
        return [member.user_id for member in self.members]

    def to_dict(self, document_count=None) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "deadline": isoformat(self.deadline),
            "status": self.status,
            "lead": self.lead.to_summary() if self.lead else None,
            "team": [member.to_dict() for member in self.members],
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
        if document_count is not None:
            data["document_count"] = document_count
        return data


class ProjectMember(db.Model):
    __tablename__ = "project_member"
    __table_args__ = (
        db.UniqueConstraint("project_id", "user_id", name="uq_project_member_project_user"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("project.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    role_in_project = db.Column(
        db.String(32),
        nullable=False,
        server_default=ProjectRole.MEMBER.value,
        default=ProjectRole.MEMBER.value,
    )

    project = db.relationship("Project", back_populates="members")
    user = db.relationship("User", back_populates="memberships")

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "user": self.user.to_summary() if self.user else None,
        }
