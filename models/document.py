# -*- coding: utf-8 -*-
"""
document.py
--------------------------------------------------------------------
Project documents, stored in one of two forms:
- file form: ``data`` + ``content_type`` + ``size``
- link form: ``link`` only (external URL)
Exactly one of ``data`` / ``link`` is set; the table enforces it with a
check constraint. ``to_dict`` never includes the binary payload.
"""

from sqlalchemy.orm import deferred

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, isoformat


class Document(TimestampMixin, db.Model):
    __tablename__ = "document"
    __table_args__ = (
        db.CheckConstraint(
            "(data IS NULL AND link IS NOT NULL) OR (data IS NOT NULL AND link IS NULL)",
            name="ck_document_payload_xor_link",
        ),
        db.Index("ix_document_project_created", "project_id", "created_at"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey("project.id"), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    # payload only loaded when explicitly requested (download)
    data = deferred(db.Column(db.LargeBinary(length=(2 ** 32) - 1)))
    content_type = db.Column(db.String(255))
    size = db.Column(db.Integer)
    link = db.Column(db.String(2048))
    uploaded_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)

    uploader = db.relationship("User")

    @property
    def is_link(self) -> bool:
        return self.link is not None

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "content_type": self.content_type,
            "size": self.size,
            "link": self.link,
            "uploaded_by": self.uploader.to_summary() if self.uploader else None,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
