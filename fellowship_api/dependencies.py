# fellowship_api/dependencies.py
"""
FastAPI dependency wiring.

Services are built once from the process settings and shared by all
requests. Tests replace them through ``app.dependency_overrides``.

Key Dependencies:
    - get_pipeline: The EnrichmentPipeline
    - get_identity: IdentityService used to verify bearer tokens
    - get_caller_id: Caller user id from the Authorization header
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fellowship_api.config import get_settings
from fellowship_api.database.session import DatabaseService
from fellowship_api.errors import AuthError
from fellowship_api.services.authorization_service import AuthorizationGate
from fellowship_api.services.bible_text_service import BibleTextService
from fellowship_api.services.enrichment_generator import EnrichmentGenerator
from fellowship_api.services.enrichment_pipeline import EnrichmentPipeline
from fellowship_api.services.identity_service import IdentityService
from fellowship_api.services.membership_service import MembershipService
from fellowship_api.services.verse_repository import VerseRepository

logger = logging.getLogger("fellowship.dependencies")

# HTTP Bearer scheme; a missing header is reported by get_caller_id
bearer_scheme = HTTPBearer(auto_error=False)

_settings = get_settings()
_database = DatabaseService(_settings)
_bible_text = BibleTextService(_settings)
_generator = EnrichmentGenerator(_settings)
_identity = IdentityService(_settings)
_pipeline = EnrichmentPipeline(
    repository=VerseRepository(_database, _settings),
    gate=AuthorizationGate(MembershipService(_database)),
    bible_text=_bible_text,
    generator=_generator,
)


def get_pipeline() -> EnrichmentPipeline:
    return _pipeline


def get_identity() -> IdentityService:
    return _identity


async def get_caller_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityService = Depends(get_identity),
) -> UUID:
    """
    Resolve the calling user from ``Authorization: Bearer <jwt>``.

    Raises:
        AuthError: Header missing, not a bearer token, or token invalid
    """
    if credentials is None:
        raise AuthError("Missing Authorization Bearer token")
    return identity.resolve_caller(credentials.credentials)


async def close_services() -> None:
    """Release HTTP clients and database connections on shutdown."""
    await _bible_text.close()
    await _generator.close()
    await _database.close()
