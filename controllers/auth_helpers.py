# controllers/auth_helpers.py
from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from constants.roles import Role, normalize_role
from middlewares.auth import SessionAuthenticator
from utils.exceptions import Forbidden
from utils.permissions import get_current_actor


def get_authenticator() -> SessionAuthenticator:
    return current_app.extensions["session_authenticator"]


def auth_required():
    """
    Authentication decorator:
      - validates Authorization: Bearer <token>
      - stores the resolved Actor on g.current_actor
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_actor = get_authenticator().authenticate(request.headers.get("Authorization"))
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def require_roles(*roles: Role | str):
    """
    Role allow-list; must sit below @auth_required.
    """
    allowed = {normalize_role(role) for role in roles if role}
    if not allowed:
        raise ValueError("require_roles needs at least one role")

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            actor = get_current_actor()
            if actor.role not in allowed:
                raise Forbidden("Access denied")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
