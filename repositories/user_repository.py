# repositories/user_repository.py
from __future__ import annotations
from typing import Iterable, List, Optional

from sqlalchemy import func, select

from extensions.database import db, commit_session
from models.document import Document
from models.project import Project, ProjectMember
from models.user import User


class UserRepository:
    """
    Persistence for users. No business rules here; writes are flushed but not
    committed, callers commit explicitly.
    """

    @staticmethod
    def find_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def find_by_email(email: str) -> Optional[User]:
        return db.session.execute(select(User).where(User.email == email)).scalar_one_or_none()

    @staticmethod
    def find_by_ids(user_ids: Iterable[int]) -> List[User]:
        """Single batch lookup by id."""
        ids = {uid for uid in user_ids if uid is not None}
        if not ids:
            return []
        return list(db.session.execute(select(User).where(User.id.in_(ids))).scalars().all())

    @staticmethod
    def list_all() -> List[User]:
        return list(db.session.execute(select(User).order_by(User.id)).scalars().all())

    @staticmethod
    def list_by_roles(roles: Iterable[str]) -> List[User]:
        stmt = select(User).where(User.role.in_(list(roles))).order_by(User.name, User.id)
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def count_by_role(role: str) -> int:
        return db.session.execute(select(func.count(User.id)).where(User.role == role)).scalar() or 0

    @staticmethod
    def count_references(user_id: int) -> dict:
        """How many projects/documents point at this user."""
        led = db.session.execute(
            select(func.count(Project.id)).where(Project.lead_id == user_id)
        ).scalar() or 0
        member = db.session.execute(
            select(func.count(ProjectMember.id)).where(ProjectMember.user_id == user_id)
        ).scalar() or 0
        uploads = db.session.execute(
            select(func.count(Document.id)).where(Document.uploaded_by == user_id)
        ).scalar() or 0
        return {"lead": led, "member": member, "documents": uploads}

    @staticmethod
    def add(user: User) -> User:
        db.session.add(user)
        db.session.flush()
        return user

    @staticmethod
    def update(user: User, *, name=None, email=None, role=None) -> User:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if role is not None:
            user.role = role
        db.session.flush()
        return user

    @staticmethod
    def update_password(user: User, new_hash: str):
        user.password_hash = new_hash
        db.session.flush()

    @staticmethod
    def delete(user: User):
        db.session.delete(user)
        db.session.flush()

    commit = staticmethod(commit_session)

    @staticmethod
    def rollback():
        db.session.rollback()
