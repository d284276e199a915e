# Verse Models
"""Pydantic models for verse records and their generated enrichment."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Testament(str, Enum):
    OLD = "old"
    NEW = "new"


class VerseStatus(str, Enum):
    """Processing state of a group verse.

    pending -> enriching -> enriched | error. Both terminal states may be
    re-entered by running the pipeline again.
    """

    PENDING = "pending"
    ENRICHING = "enriching"
    ENRICHED = "enriched"
    ERROR = "error"


class ParsedReference(BaseModel):
    """A citation split into its parts, e.g. ``1 John 3:18``."""

    book: str
    chapter: int
    verse_spec: str


class Enrichment(BaseModel):
    """Generated study notes for one verse.

    Exactly one of ``hebrew_keywords`` / ``greek_keywords`` is set, matching
    the verse's testament.
    """

    author_name: str = ""
    author_role: str = ""
    setting_context: str = ""
    simplified_explanation: str = ""
    book_context_summary: str = ""
    classification: str = ""
    tags: List[str] = Field(default_factory=list)
    heart_snapshot: str = ""
    emotional_climate: List[str] = Field(default_factory=list)
    then_now_bridge: str = ""
    cross_references: List[str] = Field(default_factory=list)
    hebrew_keywords: Optional[List[str]] = None
    greek_keywords: Optional[List[str]] = None


class VerseRecord(BaseModel):
    """Snapshot of a ``group_verses`` row as read by the pipeline."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    group_id: UUID
    reference: str
    version: Optional[str] = None
    verse_text: Optional[str] = None
    testament: Optional[Testament] = None
    status: VerseStatus = VerseStatus.PENDING
    error_message: Optional[str] = None
    enriched_at: Optional[datetime] = None
    enriched_by: Optional[UUID] = None
