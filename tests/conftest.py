# Test Configuration
"""Shared fixtures: settings, in-memory verse store and mock HTTP transports."""

import json
import uuid
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest
from openai import AsyncOpenAI

from fellowship_api.config import Settings
from fellowship_api.errors import NotFoundError
from fellowship_api.models.verse import VerseRecord
from fellowship_api.services.authorization_service import AuthorizationGate
from fellowship_api.services.bible_text_service import BibleTextService
from fellowship_api.services.enrichment_generator import EnrichmentGenerator
from fellowship_api.services.enrichment_pipeline import EnrichmentPipeline
from fellowship_api.services.verse_repository import VerseRepository

JWT_SECRET = "test-jwt-secret-for-the-fellowship-suite"


@pytest.fixture
def settings():
    return Settings(
        jwt_secret_key=JWT_SECRET,
        openai_api_key="sk-test",
        openai_base_url="https://llm.test/v1",
        rapidapi_key="rapid-test-key",
        bible_api_base="https://rapid.test",
        bible_api_host="rapid.test",
        bible_fallback_api_base="https://bible-api.test",
    )


class InMemoryVerseRepository(VerseRepository):
    """VerseRepository backed by a dict; records every status written."""

    def __init__(self, settings: Settings, rows: Optional[List[Dict[str, Any]]] = None):
        self.error_message_max_length = settings.error_message_max_length
        self.rows: Dict[uuid.UUID, Dict[str, Any]] = {row["id"]: dict(row) for row in rows or []}
        self.status_history: Dict[uuid.UUID, List[str]] = {}
        self.fail_updates = False

    async def get_verse(self, verse_id):
        if verse_id not in self.rows:
            raise NotFoundError("Verse not found", verse_id=verse_id)
        return VerseRecord.model_validate(self.rows[verse_id])

    async def update_verse(self, verse_id, values):
        if self.fail_updates:
            raise RuntimeError("database unavailable")
        self.rows[verse_id].update(values)
        if "status" in values:
            self.status_history.setdefault(verse_id, []).append(values["status"])


def make_verse_row(reference: str = "Romans 5:8", **overrides) -> Dict[str, Any]:
    row = {
        "id": uuid.uuid4(),
        "group_id": uuid.uuid4(),
        "reference": reference,
        "version": None,
        "verse_text": None,
        "testament": None,
        "status": "pending",
        "error_message": None,
    }
    row.update(overrides)
    return row


def chat_completion(content: Optional[str]) -> Dict[str, Any]:
    """Minimal OpenAI chat.completion body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


def make_openai_client(handler: Callable[[httpx.Request], httpx.Response]) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key="sk-test",
        base_url="https://llm.test/v1",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def llm_returning(payload: Dict[str, Any], calls: Optional[List[Dict[str, Any]]] = None):
    """Mock LLM transport answering every request with ``payload`` as JSON content."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(json.loads(request.content))
        return httpx.Response(200, json=chat_completion(json.dumps(payload)))

    return handler


def bible_client(rapid: Callable, fallback: Callable) -> httpx.AsyncClient:
    """httpx client routing rapid.test and bible-api.test to separate handlers."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "rapid.test":
            return rapid(request)
        return fallback(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def failing(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, text="unavailable")


@pytest.fixture
def sample_enrichment_payload():
    return {
        "author_name": "Paul",
        "author_role": "Apostle",
        "setting_context": "Letter to the church in Rome",
        "simplified_explanation": "God loved us before we were good.",
        "book_context_summary": "Romans explains the gospel.",
        "classification": "Epistle",
        "tags": ["Grace", "grace", "Love", "Atonement"],
        "hebrew_keywords": ["hesed (steadfast love)"],
        "greek_keywords": ["agape (self-giving love)", "hamartolos (sinner)"],
        "heart_snapshot": "God is loving here.",
        "emotional_climate": ["awe", "gratitude"],
        "then_now_bridge": "Christ's love meets us today.",
        "cross_references": ["John 3:16", "1 John 4:10"],
    }


@pytest.fixture
def membership():
    """Membership collaborator where the caller is a member but not an admin."""
    mock = AsyncMock()
    mock.is_group_member = AsyncMock(return_value=True)
    mock.is_org_admin_for_group = AsyncMock(return_value=False)
    return mock


@pytest.fixture
def build_pipeline(settings, membership):
    """Factory wiring a pipeline from fakes and mock transports."""

    def _build(repository, rapid=failing, fallback=failing, llm=None):
        generator = EnrichmentGenerator(settings, client=make_openai_client(llm or failing))
        bible_text = BibleTextService(settings, client=bible_client(rapid, fallback))
        return EnrichmentPipeline(
            repository=repository,
            gate=AuthorizationGate(membership),
            bible_text=bible_text,
            generator=generator,
        )

    return _build
