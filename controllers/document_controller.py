# -*- coding: utf-8 -*-
"""Project document endpoints: list, upload (file or link), download, delete."""

from __future__ import annotations

from urllib.parse import quote

from flask import Blueprint, current_app, request

from constants.roles import Role
from controllers.auth_helpers import auth_required, require_roles
from controllers.request_helpers import json_object
from services.document_service import DocumentService, UploadedFile
from utils.permissions import get_current_actor
from utils.response import json_response


document_bp = Blueprint("document", __name__, url_prefix="/api/projects/<int:project_id>/documents")


def content_disposition(filename: str) -> str:
    """RFC 5987 form; percent-encodes everything encodeURIComponent would."""
    return "attachment; filename*=UTF-8''" + quote(filename, safe="!~*'()")


@document_bp.get("")
@auth_required()
def list_documents(project_id: int):
    documents = DocumentService.list_for_project(project_id, actor=get_current_actor())
    return json_response(data={"items": [d.to_dict() for d in documents], "total": len(documents)})


@document_bp.post("")
@auth_required()
@require_roles(Role.ADMIN, Role.LEAD)
def upload_document(project_id: int):
    storage = request.files.get("document")
    upload = None
    if storage is not None and storage.filename:
        upload = UploadedFile(
            filename=storage.filename,
            content_type=storage.mimetype,
            data=storage.read(),
        )
    document = DocumentService.upload_file(
        project_id,
        request.form.get("name"),
        upload,
        actor=get_current_actor(),
    )
    return json_response(message="Document uploaded", data=document.to_dict(), code=201)


@document_bp.post("/link")
@auth_required()
@require_roles(Role.ADMIN, Role.LEAD)
def upload_document_link(project_id: int):
    data = json_object()
    document = DocumentService.upload_link(
        project_id,
        data.get("name"),
        data.get("link"),
        actor=get_current_actor(),
    )
    return json_response(message="Document link added", data=document.to_dict(), code=201)


@document_bp.get("/<int:doc_id>/download")
@auth_required()
def download_document(project_id: int, doc_id: int):
    download = DocumentService.download(project_id, doc_id, actor=get_current_actor())
    resp = current_app.response_class(download.data, content_type=download.content_type)
    resp.headers["Content-Length"] = str(download.size)
    resp.headers["Content-Disposition"] = content_disposition(download.name)
    return resp


@document_bp.delete("/<int:doc_id>")
@auth_required()
@require_roles(Role.ADMIN, Role.LEAD)
def delete_document(project_id: int, doc_id: int):
    DocumentService.delete(project_id, doc_id, actor=get_current_actor())
    return json_response(message="Document deleted")
