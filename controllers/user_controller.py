# controllers/user_controller.py
from flask import Blueprint

from constants.roles import Role
from controllers.auth_helpers import auth_required, require_roles
from controllers.request_helpers import json_object
from services.user_service import UserService
from utils.permissions import get_current_actor
from utils.response import json_response

user_bp = Blueprint("user", __name__)


@user_bp.get("/users")
@auth_required()
@require_roles(Role.ADMIN)
def list_users():
    users = UserService.list_users()
    return json_response(data={"items": [u.to_dict() for u in users], "total": len(users)})


@user_bp.post("/users")
@auth_required()
@require_roles(Role.ADMIN)
def create_user():
    data = json_object()
    user = UserService.create_user(
        email=data.get("email"),
        password=data.get("password"),
        name=data.get("name"),
        role=data.get("role"),
        actor=get_current_actor(),
    )
    return json_response(message="User created", data=user.to_dict(), code=201)


@user_bp.get("/users/<int:user_id>")
@auth_required()
@require_roles(Role.ADMIN)
def get_user(user_id: int):
    return json_response(data=UserService.get_user(user_id).to_dict())


@user_bp.put("/users/<int:user_id>")
@auth_required()
@require_roles(Role.ADMIN)
def update_user(user_id: int):
    data = json_object()
    user = UserService.update_user(
        user_id,
        actor=get_current_actor(),
        name=data.get("name"),
        role=data.get("role"),
        email=data.get("email"),
    )
    return json_response(message="User updated", data=user.to_dict())


@user_bp.delete("/users/<int:user_id>")
@auth_required()
@require_roles(Role.ADMIN)
def delete_user(user_id: int):
    UserService.delete_user(user_id, actor=get_current_actor())
    return json_response(message="User deleted")
