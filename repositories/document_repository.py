from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, desc, func, select
from sqlalchemy.orm import selectinload, undefer

from extensions.database import db, commit_session
from models.document import Document


class DocumentRepository:
    """
    Document rows. The binary column is deferred: list/get never pull the
    payload, only ``get_with_payload`` does.
    """

    @staticmethod
    def add_file(project_id: int, name: str, data: bytes, content_type: str, size: int, uploaded_by: int) -> Document:
        document = Document(
            project_id=project_id,
            name=name,
            data=data,
            content_type=content_type,
            size=size,
            uploaded_by=uploaded_by,
        )
        db.session.add(document)
        db.session.flush()
        return document

    @staticmethod
    def add_link(project_id: int, name: str, link: str, uploaded_by: int) -> Document:
        document = Document(project_id=project_id, name=name, link=link, uploaded_by=uploaded_by)
        db.session.add(document)
        db.session.flush()
        return document

    @staticmethod
    def get_by_id(doc_id: int) -> Optional[Document]:
        stmt = select(Document).options(selectinload(Document.uploader)).where(Document.id == doc_id)
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def get_with_payload(doc_id: int) -> Optional[Document]:
        stmt = select(Document).options(undefer(Document.data)).where(Document.id == doc_id)
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def list_by_project(project_id: int) -> List[Document]:
        stmt = (
            select(Document)
            .options(selectinload(Document.uploader))
            .where(Document.project_id == project_id)
            .order_by(desc(Document.created_at), desc(Document.id))
        )
        return list(db.session.execute(stmt).scalars().all())

    @staticmethod
    def count_by_projects(project_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(project_ids)
        if not ids:
            return {}
        stmt = (
            select(Document.project_id, func.count(Document.id))
            .where(Document.project_id.in_(ids))
            .group_by(Document.project_id)
        )
        counts = {pid: 0 for pid in ids}
        counts.update({pid: count for pid, count in db.session.execute(stmt).all()})
        return counts

    @staticmethod
    def delete(document: Document):
        db.session.delete(document)
        db.session.flush()

    @staticmethod
    def delete_by_project(project_id: int) -> int:
        result = db.session.execute(
            delete(Document).where(Document.project_id == project_id),
            execution_options={"synchronize_session": False},
        )
        db.session.flush()
        return result.rowcount or 0

    commit = staticmethod(commit_session)
