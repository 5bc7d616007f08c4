from flask import Blueprint

from constants.roles import Role
from controllers.auth_helpers import auth_required, require_roles
from controllers.request_helpers import json_object
from services.project_service import ProjectPatch, ProjectService
from utils.permissions import get_current_actor
from utils.response import json_response


project_bp = Blueprint("project", __name__, url_prefix="/api/projects")


@project_bp.get("/available-users")
def available_users():
    return json_response(data=ProjectService.available_users())


@project_bp.post("")
@auth_required()
@require_roles(Role.ADMIN)
def create_project():
    data = json_object()
    project = ProjectService.create(data, actor=get_current_actor())
    return json_response(message="Project created", data=project.to_dict(), code=201)


@project_bp.get("")
@auth_required()
def list_projects():
    items = ProjectService.list_visible(get_current_actor())
    return json_response(data={"items": items, "total": len(items)})


@project_bp.get("/<int:project_id>")
@auth_required()
def get_project(project_id: int):
    project = ProjectService.get(project_id, actor=get_current_actor())
    return json_response(data=project.to_dict())


@project_bp.put("/<int:project_id>")
@auth_required()
def update_project(project_id: int):
    data = json_object()
    project = ProjectService.update(
        project_id,
        ProjectPatch.from_payload(data),
        actor=get_current_actor(),
    )
    return json_response(message="Project updated", data=project.to_dict())


@project_bp.delete("/<int:project_id>")
@auth_required()
@require_roles(Role.ADMIN)
def delete_project(project_id: int):
    ProjectService.delete(project_id, actor=get_current_actor())
    return json_response(message="Project deleted")
