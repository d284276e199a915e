# Error Taxonomy
"""
Exceptions raised by the verse enrichment pipeline.

Every error carries the HTTP status code and machine-readable code the API
layer reports, plus the verse id when one is known. Client faults map to
400/401/403/404, upstream faults to 502 and internal faults to 500.
"""

from typing import Optional
from uuid import UUID


class EnrichmentServiceError(Exception):
    """Base class for all pipeline errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, verse_id: Optional[UUID] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.verse_id = verse_id
        self.detail = detail


class BadRequestError(EnrichmentServiceError):
    status_code = 400
    code = "BAD_REQUEST"


class AuthError(EnrichmentServiceError):
    """Missing or invalid caller credential."""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(EnrichmentServiceError):
    """Caller is neither a group member nor an org admin."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(EnrichmentServiceError):
    status_code = 404
    code = "NOT_FOUND"


class ParseError(EnrichmentServiceError):
    """Reference string does not match the citation grammar."""

    status_code = 400
    code = "INVALID_REFERENCE"

    def __init__(self, reference: str, **kwargs):
        super().__init__(f"Unrecognized reference format: {reference}", **kwargs)
        self.reference = reference


class ResolutionError(EnrichmentServiceError):
    """Every scripture text provider failed."""

    status_code = 502
    code = "TEXT_RESOLUTION_FAILED"


class GenerationError(EnrichmentServiceError):
    """The generative provider failed or returned unusable output."""

    status_code = 502
    code = "GENERATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        provider_status: Optional[int] = None,
        provider_body: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.provider_status = provider_status
        self.provider_body = provider_body


class AuthorizationError(EnrichmentServiceError):
    """A membership or admin check could not be evaluated."""

    status_code = 500
    code = "AUTHORIZATION_CHECK_FAILED"


class PersistenceError(EnrichmentServiceError):
    status_code = 500
    code = "PERSISTENCE_FAILED"
