# Verse Repository
"""Read and update ``group_verses`` rows."""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from fellowship_api.config import Settings
from fellowship_api.database.models import GroupVerse
from fellowship_api.database.session import DatabaseService
from fellowship_api.errors import NotFoundError, PersistenceError
from fellowship_api.models.verse import VerseRecord, VerseStatus
from fellowship_api.utils.text_utils import truncate

logger = logging.getLogger("fellowship.services.verse_repository")


class VerseRepository:
    """
    Row-level access to group verses.

    Each call opens its own short session, so nothing is held open while the
    pipeline waits on external providers.
    """

    def __init__(self, database: DatabaseService, settings: Settings):
        self.database = database
        self.error_message_max_length = settings.error_message_max_length

    async def get_verse(self, verse_id: UUID) -> VerseRecord:
        """
        Load a verse by id.

        Raises:
            NotFoundError: No row with this id
            PersistenceError: The query failed
        """
        try:
            async with self.database.get_session() as session:
                result = await session.execute(select(GroupVerse).where(GroupVerse.id == verse_id))
                row = result.scalar_one_or_none()
                if row is None:
                    raise NotFoundError("Verse not found", verse_id=verse_id)
                return VerseRecord.model_validate(row)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load verse", verse_id=verse_id, detail=str(e)) from e

    async def update_verse(self, verse_id: UUID, values: Dict[str, Any]) -> None:
        """Apply a partial update to one row."""
        try:
            async with self.database.get_session() as session:
                await session.execute(
                    update(GroupVerse).where(GroupVerse.id == verse_id).values(**values)
                )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to update verse", verse_id=verse_id, detail=str(e)) from e

    async def set_status(
        self,
        verse_id: UUID,
        status: VerseStatus,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Move a verse to ``status``.

        Entering ``error`` always stores a message, truncated to the
        configured maximum length.
        """
        values: Dict[str, Any] = {"status": status.value}
        if status == VerseStatus.ERROR:
            values["error_message"] = truncate(
                error_message or "Unknown error", self.error_message_max_length
            )
        logger.info(f"Verse {verse_id} -> {status.value}")
        await self.update_verse(verse_id, values)
