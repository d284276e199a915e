from .api import EnrichVerseRequest, EnrichVerseResponse, ErrorResponse
from .verse import Enrichment, ParsedReference, Testament, VerseRecord, VerseStatus

__all__ = [
    "EnrichVerseRequest",
    "EnrichVerseResponse",
    "ErrorResponse",
    "Enrichment",
    "ParsedReference",
    "Testament",
    "VerseRecord",
    "VerseStatus",
]
