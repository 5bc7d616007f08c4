# utils/password.py
from flask import current_app, has_app_context
from werkzeug.security import generate_password_hash, check_password_hash

# Compared against when the account does not exist, so both failure paths cost one hash check
_DUMMY_HASH = generate_password_hash("not-a-real-password")


def hash_password(plain: str) -> str:
    method = current_app.config.get("PASSWORD_HASH_METHOD") if has_app_context() else None
    if method:
        return generate_password_hash(plain, method=method)
    return generate_password_hash(plain)


def verify_password(hashed: str | None, plain: str) -> bool:
    if not hashed:
        check_password_hash(_DUMMY_HASH, plain)
        return False
    return check_password_hash(hashed, plain)
