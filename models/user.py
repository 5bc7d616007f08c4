# -*- coding: utf-8 -*-
"""
user.py
--------------------------------------------------------------------
User entity.
Notes:
- email is unique, stored trimmed and lower-cased.
- role is the system-wide role: admin / lead / developer.
- password_hash and mfa_secret never leave the server: ``to_dict`` omits
  them and the token payload is built from ``to_dict``.
- Project associations are derived: projects this user leads plus
  ProjectMember rows.
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, isoformat
from constants.roles import Role, ProjectRole


class User(TimestampMixin, db.Model):
    __tablename__ = "user"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120))
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, server_default=Role.DEVELOPER.value, default=Role.DEVELOPER.value)
    mfa_secret = db.Column(db.String(255))

    led_projects = db.relationship("Project", back_populates="lead", passive_deletes=True)
    memberships = db.relationship("ProjectMember", back_populates="user", passive_deletes=True)

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"

    @property
    def project_associations(self) -> list[dict]:
        items = [
            {"project_id": project.id, "role_in_project": ProjectRole.LEAD.value}
            for project in self.led_projects
        ]
        items.extend(
            {"project_id": member.project_id, "role_in_project": ProjectRole.MEMBER.value}
            for member in self.memberships
        )
        return items

    def to_summary(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}

    def to_dict(self) -> dict:
        data = self.to_summary()
        data.update(
            {
                "projects": self.project_associations,
                "created_at": isoformat(self.created_at),
                "updated_at": isoformat(self.updated_at),
            }
        )
        return data
