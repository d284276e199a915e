# Enrichment Router
"""HTTP entry point for the verse enrichment pipeline."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from fellowship_api.dependencies import get_caller_id, get_pipeline
from fellowship_api.errors import BadRequestError
from fellowship_api.models.api import EnrichVerseRequest, EnrichVerseResponse, ErrorResponse
from fellowship_api.services.enrichment_pipeline import EnrichmentPipeline

logger = logging.getLogger("fellowship.routers.enrich")

router = APIRouter()


@router.post(
    "/enrich-verse",
    response_model=EnrichVerseResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def enrich_verse(
    payload: Optional[EnrichVerseRequest] = None,
    caller_id: UUID = Depends(get_caller_id),
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> EnrichVerseResponse:
    """
    Resolve, classify and enrich a group verse.

    Body: ``{"verse_id": "<uuid>"}``. The caller must be a member of the
    verse's group or an admin of the group's organization.
    """
    if payload is None or payload.verse_id is None:
        raise BadRequestError("Missing verse_id")

    logger.info(f"Enrichment requested for verse {payload.verse_id} by {caller_id}")
    return await pipeline.run(payload.verse_id, caller_id)
