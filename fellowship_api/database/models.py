# fellowship_api/database/models.py
"""
SQLAlchemy ORM models for the fellowship database.

Models:
    - GroupVerse: A verse shared with a group, plus its generated enrichment

The table is created and owned by the main fellowship application; this
service only reads and updates existing rows.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    ARRAY,
    Column,
    DateTime,
    JSON,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID

from .base import Base


# UUID type that works with both SQLite and PostgreSQL
class UUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses PostgreSQL's UUID type when available, otherwise uses String(36).
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


# text[] on PostgreSQL, JSON elsewhere
StringList = ARRAY(Text).with_variant(JSON(), "sqlite")


class GroupVerse(Base):
    """
    A verse added to a group's study list.

    Attributes:
        id: Unique verse identifier
        group_id: Owning group
        reference: Citation as entered, e.g. "Romans 8:28-29"
        version: Requested translation code (NIV, KJV, ...)
        verse_text: Resolved canonical text
        testament: "old" or "new"
        status: pending, enriching, enriched, error
        error_message: Last failure, bounded length
        simplified_explanation: Plain-language explanation (column simplified_5th)
        hebrew_keywords / greek_keywords: Only the one matching the testament is set
        enriched_at / enriched_by: Set when enrichment succeeds
    """

    __tablename__ = "group_verses"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    group_id = Column(UUID(), nullable=False, index=True)
    reference = Column(String(255), nullable=False)
    version = Column(String(20), nullable=True)
    verse_text = Column(Text, nullable=True)
    testament = Column(String(3), nullable=True)  # old, new
    status = Column(String(20), nullable=False, default="pending")  # pending, enriching, enriched, error
    error_message = Column(Text, nullable=True)

    # Enrichment
    author_name = Column(Text, nullable=True)
    author_role = Column(Text, nullable=True)
    setting_context = Column(Text, nullable=True)
    simplified_explanation = Column("simplified_5th", Text, nullable=True)
    book_context_summary = Column(Text, nullable=True)
    classification = Column(Text, nullable=True)
    tags = Column(StringList, nullable=True)
    hebrew_keywords = Column(StringList, nullable=True)
    greek_keywords = Column(StringList, nullable=True)
    heart_snapshot = Column(Text, nullable=True)
    emotional_climate = Column(StringList, nullable=True)
    then_now_bridge = Column(Text, nullable=True)
    cross_references = Column(StringList, nullable=True)

    enriched_at = Column(DateTime(timezone=True), nullable=True)
    enriched_by = Column(UUID(), nullable=True)

    def __repr__(self) -> str:
        return f"<GroupVerse(id={self.id}, reference={self.reference}, status={self.status})>"
