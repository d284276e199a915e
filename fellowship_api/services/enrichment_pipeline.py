# ============================================================================
# fellowship_api/services/enrichment_pipeline.py
# ============================================================================
#
# Verse Enrichment Pipeline
#
# Drives one verse through pending -> enriching -> enriched | error:
#
#   1. load the verse and authorize the caller (no state change on failure)
#   2. resolve missing text/testament (parse, fetch, classify); an exhausted
#      provider chain moves the verse to error and stops
#   3. persist text/testament, then mark the verse enriching
#   4. generate enrichment
#   5. persist the normalized enrichment and mark the verse enriched
#
# Failures in steps 4-5 are handled in one place: the verse is marked error
# on a best-effort basis and the original exception is re-raised. Errors
# that are not EnrichmentServiceError leave run() wrapped as a 500 carrying
# the verse id.
#
# There is no lock or version check on the row. Two concurrent runs for the
# same verse both complete and the last write wins.
#
# ============================================================================

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Tuple
from uuid import UUID

from fellowship_api.errors import EnrichmentServiceError, ResolutionError
from fellowship_api.models.api import EnrichVerseResponse
from fellowship_api.models.verse import Enrichment, Testament, VerseRecord, VerseStatus
from fellowship_api.services.authorization_service import AuthorizationGate
from fellowship_api.services.bible_text_service import BibleTextService
from fellowship_api.services.enrichment_generator import (
    CROSS_REFERENCE_LIMIT,
    EMOTIONAL_CLIMATE_LIMIT,
    KEYWORD_LIMIT,
    EnrichmentGenerator,
)
from fellowship_api.services.reference_parser import parse_reference
from fellowship_api.services.testament import classify_testament, normalize_book_name
from fellowship_api.services.verse_repository import VerseRepository
from fellowship_api.utils.text_utils import unique_strings

logger = logging.getLogger("fellowship.services.enrichment_pipeline")

RESOLUTION_FAILED_MESSAGE = "Bible API: unable to resolve verse_text"
TAG_LIMIT = 8


def build_enrichment_update(
    enrichment: Enrichment,
    testament: Testament,
    caller_id: UUID,
) -> Dict[str, Any]:
    """
    Column values for a successful enrichment.

    Lists are de-duplicated case-insensitively and capped. The keyword column
    for the other testament is written as NULL.
    """
    values: Dict[str, Any] = {
        "author_name": enrichment.author_name,
        "author_role": enrichment.author_role,
        "setting_context": enrichment.setting_context,
        "simplified_explanation": enrichment.simplified_explanation,
        "book_context_summary": enrichment.book_context_summary,
        "classification": enrichment.classification,
        "tags": unique_strings(enrichment.tags, TAG_LIMIT),
        "heart_snapshot": enrichment.heart_snapshot,
        "emotional_climate": unique_strings(enrichment.emotional_climate, EMOTIONAL_CLIMATE_LIMIT),
        "then_now_bridge": enrichment.then_now_bridge,
        "cross_references": unique_strings(enrichment.cross_references, CROSS_REFERENCE_LIMIT),
        "enriched_at": datetime.now(timezone.utc),
        "enriched_by": caller_id,
        "status": VerseStatus.ENRICHED.value,
        "error_message": None,
    }

    if testament == Testament.OLD:
        values["hebrew_keywords"] = unique_strings(enrichment.hebrew_keywords or [], KEYWORD_LIMIT)
        values["greek_keywords"] = None
    else:
        values["greek_keywords"] = unique_strings(enrichment.greek_keywords or [], KEYWORD_LIMIT)
        values["hebrew_keywords"] = None
    return values


class EnrichmentPipeline:
    """Coordinates authorization, text resolution, generation and persistence."""

    def __init__(
        self,
        repository: VerseRepository,
        gate: AuthorizationGate,
        bible_text: BibleTextService,
        generator: EnrichmentGenerator,
    ):
        self.repository = repository
        self.gate = gate
        self.bible_text = bible_text
        self.generator = generator

    async def _resolve_text(self, verse: VerseRecord) -> Tuple[str, Testament]:
        """
        Fill in verse text and testament from the reference.

        Raises:
            ParseError: The reference cannot be parsed (status untouched)
            ResolutionError: No provider returned text (status set to error)
        """
        ref = parse_reference(verse.reference)
        book = normalize_book_name(ref.book)

        verse_text = await self.bible_text.resolve(book, ref.chapter, ref.verse_spec, verse.version)
        if not verse_text:
            await self.repository.set_status(verse.id, VerseStatus.ERROR, RESOLUTION_FAILED_MESSAGE)
            raise ResolutionError("Bible API lookup failed", verse_id=verse.id, detail=RESOLUTION_FAILED_MESSAGE)

        testament = classify_testament(book)
        await self.repository.update_verse(verse.id, {"verse_text": verse_text, "testament": testament.value})
        return verse_text, testament

    async def _mark_failed(self, verse_id: UUID, error: Exception) -> None:
        """Best-effort move to error; a failing write is logged and dropped."""
        try:
            await self.repository.set_status(verse_id, VerseStatus.ERROR, str(error))
        except Exception:
            logger.exception(f"Could not record failure for verse {verse_id}")

    async def run(self, verse_id: UUID, caller_id: UUID) -> EnrichVerseResponse:
        """
        Enrich one verse on behalf of ``caller_id``.

        Every error leaving this method is an EnrichmentServiceError tagged
        with ``verse_id``. Anything else is wrapped as an internal error.

        Returns:
            EnrichVerseResponse with the final status

        Raises:
            NotFoundError, ForbiddenError, AuthorizationError: Before any state change
            ParseError: Reference malformed, verse left as it was
            ResolutionError: Text could not be resolved, verse marked error
            GenerationError, PersistenceError: After the verse was marked enriching
            EnrichmentServiceError: Any other failure (500, INTERNAL_ERROR)
        """
        try:
            return await self._run(verse_id, caller_id)
        except EnrichmentServiceError as e:
            if e.verse_id is None:
                e.verse_id = verse_id
            raise
        except Exception as e:
            logger.exception(f"Unexpected failure enriching verse {verse_id}")
            raise EnrichmentServiceError(
                "Internal server error", verse_id=verse_id, detail=str(e)
            ) from e

    async def _run(self, verse_id: UUID, caller_id: UUID) -> EnrichVerseResponse:
        verse = await self.repository.get_verse(verse_id)
        await self.gate.authorize(caller_id, verse.group_id)

        verse_text = verse.verse_text
        testament = verse.testament
        if not verse_text or not testament:
            verse_text, testament = await self._resolve_text(verse)

        await self.repository.set_status(verse_id, VerseStatus.ENRICHING)

        try:
            enrichment = await self.generator.generate(verse.reference, verse_text, testament)
            await self.repository.update_verse(
                verse_id, build_enrichment_update(enrichment, testament, caller_id)
            )
        except Exception as e:
            logger.error(f"Enrichment failed for verse {verse_id}: {e}")
            await self._mark_failed(verse_id, e)
            raise

        logger.info(f"Verse {verse_id} enriched ({verse.reference}, {testament.value} testament)")
        return EnrichVerseResponse(ok=True, verse_id=verse_id, status=VerseStatus.ENRICHED)
