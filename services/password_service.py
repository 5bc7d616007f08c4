# services/password_service.py
import logging

from flask import current_app

from repositories.user_repository import UserRepository
from services.policy_service import validate_password_policy
from services.rate_limit_service import PasswordChangeRateLimiter
from utils.exceptions import NotFound, ValidationError
from utils.password import verify_password, hash_password
from utils.permissions import Actor

logger = logging.getLogger(__name__)


class PasswordService:

    @staticmethod
    def change_password(actor: Actor, current_password: str, new_password: str):
        """
        Self-service password change. Returns the updated user.
        Wrong current password and policy violations count towards the
        per-user failure limiter.
        """
        cfg = current_app.config
        fail_limit = cfg.get("PASSWORD_CHANGE_FAIL_LIMIT", 5)
        block_seconds = cfg.get("PASSWORD_CHANGE_BLOCK_SECONDS", 900)

        if not current_password or not new_password:
            raise ValidationError("Please provide currentPassword and newPassword")

        user = UserRepository.find_by_id(actor.id)
        if not user:
            raise NotFound("User not found")

        limiter = PasswordChangeRateLimiter(user.id, fail_limit, block_seconds)
        limiter.ensure_not_blocked()

        if not verify_password(user.password_hash, current_password):
            limiter.record_failure()
            logger.warning("user %s supplied a wrong current password", user.id)
            raise ValidationError("Current password is incorrect")

        policy_errors = validate_password_policy(new_password)
        if policy_errors:
            limiter.record_failure()
            raise ValidationError("; ".join(policy_errors))

        if verify_password(user.password_hash, new_password):
            limiter.record_failure()
            raise ValidationError("New password must differ from the current one")

        UserRepository.update_password(user, hash_password(new_password))
        UserRepository.commit()
        limiter.clear()
        logger.info("user %s changed password", user.id)
        return user
