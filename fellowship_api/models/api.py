# API Models
"""Request and response bodies for the enrichment endpoint."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .verse import VerseStatus


class EnrichVerseRequest(BaseModel):
    verse_id: Optional[UUID] = Field(default=None, description="Verse to enrich")


class EnrichVerseResponse(BaseModel):
    ok: bool = True
    verse_id: UUID
    status: VerseStatus


class ErrorResponse(BaseModel):
    """Uniform error payload returned for every failure."""

    error: str
    code: str
    detail: Optional[str] = None
    verse_id: Optional[UUID] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
