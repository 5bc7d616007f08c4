from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models.document import Document
from models.project import Project
from repositories.document_repository import DocumentRepository
from repositories.project_repository import ProjectRepository
from utils.exceptions import (
    InvalidURL,
    NotFound,
    PayloadTooLarge,
    ServerError,
    ValidationError,
)
from utils.patch import blank
from utils.permissions import Actor, assert_can_manage_documents, assert_can_view
from utils.validators import is_absolute_url

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    """A fully buffered upload: bytes plus the metadata the client sent."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class DocumentDownload:
    name: str
    content_type: str
    size: int
    data: bytes


def stored_file_name(base: str, original_filename: str) -> str:
    """``<trimmed base>.<original extension>``; no extension keeps the base alone."""
    extension = os.path.splitext(original_filename or "")[1].lstrip(".")
    base = base.strip()
    return f"{base}.{extension}" if extension else base


class DocumentService:

    @staticmethod
    def _project(project_id: int) -> Project:
        project = ProjectRepository.get_by_id(project_id)
        if not project:
            raise NotFound("Project not found")
        return project

    @staticmethod
    def _document(doc_id: int) -> Document:
        document = DocumentRepository.get_by_id(doc_id)
        if not document:
            raise NotFound("Document not found")
        return document

    @staticmethod
    def _commit():
        try:
            DocumentRepository.commit()
        except IntegrityError:
            logger.exception("document write violated a constraint")
            raise ServerError("Failed to save document")

    @staticmethod
    def list_for_project(project_id: int, *, actor: Actor) -> List[Document]:
        project = DocumentService._project(project_id)
        assert_can_view(actor, project)
        return DocumentRepository.list_by_project(project.id)

    @staticmethod
    def upload_file(project_id: int, name: Optional[str], upload: Optional[UploadedFile], *, actor: Actor) -> Document:
        if upload is None:
            raise ValidationError("No file uploaded")
        if blank(name):
            raise ValidationError("Document name is required")
        cfg = current_app.config
        max_bytes = cfg.get("MAX_UPLOAD_BYTES", 15 * 1024 * 1024)
        if upload.size > max_bytes:
            raise PayloadTooLarge(f"File exceeds the {max_bytes} byte limit")
        allowed = cfg.get("ALLOWED_UPLOAD_MIME_TYPES")
        if allowed and upload.content_type not in allowed:
            raise ValidationError("Invalid file type")

        project = DocumentService._project(project_id)
        assert_can_manage_documents(actor, project)

        document = DocumentRepository.add_file(
            project_id=project.id,
            name=stored_file_name(name, upload.filename),
            data=upload.data,
            content_type=upload.content_type,
            size=upload.size,
            uploaded_by=actor.id,
        )
        DocumentService._commit()
        logger.info(
            "document %s (%s bytes) uploaded to project %s by user %s",
            document.id, upload.size, project.id, actor.id,
        )
        return DocumentService._document(document.id)

    @staticmethod
    def upload_link(project_id: int, name: Optional[str], link: Optional[str], *, actor: Actor) -> Document:
        if blank(name):
            raise ValidationError("Document name is required")
        if blank(link):
            raise ValidationError("Document link is required")
        if not isinstance(name, str) or not isinstance(link, str):
            raise ValidationError("name and link must be strings")
        link = link.strip()
        if not is_absolute_url(link):
            raise InvalidURL()

        project = DocumentService._project(project_id)
        assert_can_manage_documents(actor, project)

        document = DocumentRepository.add_link(
            project_id=project.id,
            name=name.strip(),
            link=link,
            uploaded_by=actor.id,
        )
        DocumentService._commit()
        logger.info("link document %s added to project %s by user %s", document.id, project.id, actor.id)
        return DocumentService._document(document.id)

    @staticmethod
    def download(project_id: int, doc_id: int, *, actor: Actor) -> DocumentDownload:
        document = DocumentRepository.get_with_payload(doc_id)
        if not document or document.project_id != project_id:
            raise NotFound("Document not found")
        project = DocumentService._project(document.project_id)
        assert_can_view(actor, project)
        if document.is_link:
            # link documents are opened by the client directly
            raise ValidationError("Link documents cannot be downloaded", data={"link": document.link})
        return DocumentDownload(
            name=document.name,
            content_type=document.content_type or "application/octet-stream",
            size=document.size if document.size is not None else len(document.data),
            data=document.data,
        )

    @staticmethod
    def delete(project_id: int, doc_id: int, *, actor: Actor):
        document = DocumentService._document(doc_id)
        if document.project_id != project_id:
            raise ValidationError("Document does not belong to this project")
        project = DocumentService._project(project_id)
        assert_can_manage_documents(actor, project)
        DocumentRepository.delete(document)
        DocumentService._commit()
        logger.info("document %s deleted from project %s by user %s", doc_id, project_id, actor.id)
