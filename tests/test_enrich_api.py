"""HTTP tests for the enrichment endpoint and error rendering."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt
import pytest
from fastapi.testclient import TestClient

from conftest import JWT_SECRET
from fellowship_api.dependencies import get_identity, get_pipeline
from fellowship_api.errors import ForbiddenError, NotFoundError, ResolutionError
from fellowship_api.main import app
from fellowship_api.models.api import EnrichVerseResponse, ErrorResponse
from fellowship_api.models.verse import VerseStatus
from fellowship_api.services.enrichment_pipeline import EnrichmentPipeline
from fellowship_api.services.identity_service import IdentityService

CALLER_ID = uuid.uuid4()


def bearer(sub=str(CALLER_ID)):
    claims = {
        "sub": sub,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return {"Authorization": f"Bearer {jwt.encode(claims, JWT_SECRET, algorithm='HS256')}"}


@pytest.fixture
def pipeline():
    return AsyncMock()


@pytest.fixture
def client(settings, pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_identity] = lambda: IdentityService(settings)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestEnrichVerse:
    def test_success(self, client, pipeline):
        verse_id = uuid.uuid4()
        pipeline.run.return_value = EnrichVerseResponse(ok=True, verse_id=verse_id, status=VerseStatus.ENRICHED)

        response = client.post("/enrich-verse", json={"verse_id": str(verse_id)}, headers=bearer())

        assert response.status_code == 200
        assert response.json() == {"ok": True, "verse_id": str(verse_id), "status": "enriched"}
        pipeline.run.assert_awaited_once_with(verse_id, CALLER_ID)

    def test_missing_token(self, client, pipeline):
        response = client.post("/enrich-verse", json={"verse_id": str(uuid.uuid4())})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"
        assert response.json()["error"] == "Missing Authorization Bearer token"
        pipeline.run.assert_not_awaited()

    def test_bad_token(self, client, pipeline):
        response = client.post(
            "/enrich-verse",
            json={"verse_id": str(uuid.uuid4())},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        pipeline.run.assert_not_awaited()

    def test_missing_verse_id(self, client, pipeline):
        response = client.post("/enrich-verse", json={}, headers=bearer())

        assert response.status_code == 400
        assert response.json()["error"] == "Missing verse_id"
        pipeline.run.assert_not_awaited()

    def test_missing_body(self, client, pipeline):
        response = client.post("/enrich-verse", headers=bearer())

        assert response.status_code == 400
        pipeline.run.assert_not_awaited()

    def test_malformed_verse_id(self, client, pipeline):
        response = client.post("/enrich-verse", json={"verse_id": "not-a-uuid"}, headers=bearer())

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"

    def test_forbidden(self, client, pipeline):
        pipeline.run.side_effect = ForbiddenError("Forbidden: not a group member or admin")

        response = client.post("/enrich-verse", json={"verse_id": str(uuid.uuid4())}, headers=bearer())

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_not_found(self, client, pipeline):
        verse_id = uuid.uuid4()
        pipeline.run.side_effect = NotFoundError("Verse not found", verse_id=verse_id)

        response = client.post("/enrich-verse", json={"verse_id": str(verse_id)}, headers=bearer())

        assert response.status_code == 404
        assert response.json()["error"] == "Verse not found"
        assert response.json()["verse_id"] == str(verse_id)

    def test_resolution_failure_is_bad_gateway(self, client, pipeline):
        pipeline.run.side_effect = ResolutionError(
            "Bible API lookup failed", detail="Bible API: unable to resolve verse_text"
        )

        response = client.post("/enrich-verse", json={"verse_id": str(uuid.uuid4())}, headers=bearer())

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "TEXT_RESOLUTION_FAILED"
        assert body["detail"] == "Bible API: unable to resolve verse_text"
        assert "timestamp" in body

    def test_unexpected_error_is_500(self, settings, pipeline):
        pipeline.run.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        app.dependency_overrides[get_identity] = lambda: IdentityService(settings)
        try:
            response = TestClient(app, raise_server_exceptions=False).post(
                "/enrich-verse", json={"verse_id": str(uuid.uuid4())}, headers=bearer()
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"

    def test_pipeline_failure_keeps_cors_and_verse_id(self, client):
        repository = AsyncMock()
        repository.get_verse.side_effect = RuntimeError("connection pool exhausted")
        pipeline = EnrichmentPipeline(repository, AsyncMock(), AsyncMock(), AsyncMock())
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        verse_id = uuid.uuid4()

        response = client.post(
            "/enrich-verse",
            json={"verse_id": str(verse_id)},
            headers={**bearer(), "Origin": "https://app.example.com"},
        )

        assert response.status_code == 500
        assert response.headers["access-control-allow-origin"] == "*"
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert body["verse_id"] == str(verse_id)
        assert body["detail"] == "connection pool exhausted"


class TestAmbientEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_correlation_id_is_generated(self, client):
        response = client.get("/health")

        assert response.headers["X-Correlation-ID"]

    def test_cors_preflight(self, client):
        response = client.options(
            "/enrich-verse",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


def test_error_timestamp_is_utc():
    body = ErrorResponse(error="Verse not found", code="NOT_FOUND")

    assert body.timestamp.utcoffset() == timedelta(0)
