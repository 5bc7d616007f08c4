# -*- coding: utf-8 -*-
"""
__init__.py
--------------------------------------------------------------------
Import every model here so that:
- Flask-Migrate/Alembic detects all tables.
- callers can write ``from models import Project, Document``.
"""

from .mixins import TimestampMixin
from .user import User
from .project import Project, ProjectMember
from .document import Document

__all__ = ["TimestampMixin", "User", "Project", "ProjectMember", "Document"]
