# fellowship_api/database/__init__.py
"""
Database package for the verse enrichment service.

Provides the SQLAlchemy base, the ``group_verses`` ORM model and the session
service.
"""

from .base import Base
from .models import GroupVerse
from .session import DatabaseService

__all__ = [
    "Base",
    "GroupVerse",
    "DatabaseService",
]
