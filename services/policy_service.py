# services/policy_service.py
from flask import current_app


def validate_password_policy(new_password: str) -> list[str]:
    min_len = current_app.config.get("PASSWORD_MIN_LENGTH", 4)
    errors = []
    if not new_password or not new_password.strip():
        errors.append("Password must not be blank")
    elif len(new_password) < min_len:
        errors.append(f"Password must be at least {min_len} characters")
    return errors
