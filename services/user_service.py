# services/user_service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from constants.roles import Role, normalize_role
from models.user import User
from repositories.user_repository import UserRepository
from services.policy_service import validate_password_policy
from utils.exceptions import Conflict, Forbidden, NotFound, ServerError, ValidationError
from utils.password import hash_password
from utils.permissions import Actor
from utils.validators import normalize_email, validate_email

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def _role(raw) -> str:
        try:
            return normalize_role(raw).value
        except ValueError:
            raise ValidationError("Invalid role")

    @staticmethod
    def _email(raw) -> str:
        email = normalize_email(raw)
        if not validate_email(email):
            raise ValidationError("Invalid email format")
        return email

    @staticmethod
    def _get(user_id: int) -> User:
        user = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    @staticmethod
    def _commit_unique():
        try:
            UserRepository.commit()
        except IntegrityError:
            raise Conflict("Email already in use")

    @staticmethod
    def list_users() -> List[User]:
        return UserRepository.list_all()

    @staticmethod
    def get_user(user_id: int) -> User:
        return UserService._get(user_id)

    @staticmethod
    def create_user(email, password, name=None, role=None, *, actor: Actor) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required")
        email = UserService._email(email)
        errors = validate_password_policy(password)
        if errors:
            raise ValidationError("; ".join(errors))
        if UserRepository.find_by_email(email):
            raise Conflict("Email already in use")

        user = User(
            email=email,
            name=name.strip() if isinstance(name, str) else None,
            password_hash=hash_password(password),
            role=UserService._role(role),
        )
        UserRepository.add(user)
        UserService._commit_unique()
        logger.info("user %s (%s) created by admin %s", user.id, user.role, actor.id)
        return user

    @staticmethod
    def update_user(user_id: int, *, actor: Actor, name=None, role=None, email=None) -> User:
        """
        Admin edits of name / role / email. Absent (None) fields are kept.
        An admin cannot demote themselves, which also keeps at least one admin.
        """
        target = UserService._get(user_id)
        new_role = UserService._role(role) if role is not None else None
        if new_role and target.id == actor.id and new_role != Role.ADMIN.value:
            raise Forbidden("You cannot change your own role")
        new_email = UserService._email(email) if email is not None else None
        if new_email and new_email != target.email and UserRepository.find_by_email(new_email):
            raise Conflict("Email already in use")

        UserRepository.update(
            target,
            name=name.strip() if isinstance(name, str) else None,
            email=new_email,
            role=new_role,
        )
        UserService._commit_unique()
        logger.info("user %s updated by admin %s", target.id, actor.id)
        return target

    @staticmethod
    def delete_user(user_id: int, *, actor: Actor):
        """
        Hard delete. Refused while projects or documents still reference the
        user; references are never cascaded or nulled.
        """
        target = UserService._get(user_id)
        if target.id == actor.id:
            raise Forbidden("You cannot delete your own account")
        refs = UserRepository.count_references(target.id)
        if any(refs.values()):
            raise Conflict(
                "User is still referenced by projects or documents; reassign them first",
                data=refs,
            )
        UserRepository.delete(target)
        UserRepository.commit()
        logger.info("user %s deleted by admin %s", user_id, actor.id)

    @staticmethod
    def ensure_default_admin(app):
        """Provision the bootstrap admin from ADMIN_INIT_* when no admin exists yet."""
        email = normalize_email(app.config.get("ADMIN_INIT_EMAIL"))
        password = app.config.get("ADMIN_INIT_PASSWORD")
        if not email or not password:
            return
        try:
            if UserRepository.count_by_role(Role.ADMIN.value) > 0:
                return
            UserRepository.add(
                User(
                    email=email,
                    name=app.config.get("ADMIN_INIT_NAME") or "Admin",
                    password_hash=hash_password(password),
                    role=Role.ADMIN.value,
                )
            )
            UserRepository.commit()
        except (SQLAlchemyError, ServerError):
            # tables do not exist before the first migration
            UserRepository.rollback()
            app.logger.warning("bootstrap admin skipped: database not ready")
            return
        app.logger.info("bootstrap admin created: %s", email)
