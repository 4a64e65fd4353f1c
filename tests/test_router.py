"""Tests for the study generator HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from src.core.rate_limiter import RateLimiter
from src.main import app
from src.services.study_generator.orchestrator import MultiPassOrchestrator
from src.services.study_generator.router import get_rate_limiter, get_study_generator
from src.services.study_generator.service import StudyGeneratorService
from src.services.study_generator.store import InMemoryDocumentStore
from stubs import ScriptedLLM, make_settings, scripted_responses

BODY = {
    "inputType": "scripture",
    "inputValue": "Romans 8:28",
    "language": "en",
    "studyMode": "standard",
}


@pytest.fixture
def llm():
    return ScriptedLLM(scripted_responses("standard"))


@pytest.fixture
def client(llm):
    cfg = make_settings()
    service = StudyGeneratorService(
        orchestrator=MultiPassOrchestrator(llm, settings=cfg),
        store=InMemoryDocumentStore(),
        settings=cfg,
    )
    limiter = RateLimiter(max_requests=2, window_seconds=60)

    app.dependency_overrides[get_study_generator] = lambda: service
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestGenerateEndpoint:
    def test_generates_study_guide(self, client, llm):
        response = client.post("/study/generate", json=BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["cached"] is False
        assert data["studyMode"] == "standard"
        assert data["language"] == "en"
        assert len(data["cacheKey"]) == 64
        guide = data["studyGuide"]
        assert guide["interpretation"] == "PASS1\n\nPASS2"
        assert guide["relatedVerses"] == ["relatedVerses item 1", "relatedVerses item 2"]
        assert len(llm.calls) == 2

    def test_repeat_request_is_cached(self, client, llm):
        client.post("/study/generate", json=BODY)
        response = client.post("/study/generate", json=BODY)

        assert response.json()["cached"] is True
        assert len(llm.calls) == 2

    def test_unknown_mode_is_unprocessable(self, client, llm):
        response = client.post("/study/generate", json={**BODY, "studyMode": "devotional"})

        assert response.status_code == 422
        assert llm.calls == []

    def test_invalid_body_is_rejected(self, client):
        response = client.post("/study/generate", json={**BODY, "inputValue": ""})
        assert response.status_code == 422

    def test_generation_failure_is_bad_gateway(self, client, llm):
        llm.responses = ["no json", "still no json"]
        response = client.post("/study/generate", json=BODY)

        assert response.status_code == 502
        assert response.json()["detail"] == "Study generation failed, please retry."

    def test_rate_limited_per_client(self, client):
        client.post("/study/generate", json={**BODY, "studyMode": "devotional"})
        client.post("/study/generate", json={**BODY, "studyMode": "devotional"})

        response = client.post("/study/generate", json=BODY)
        assert response.status_code == 429

    def test_client_id_header_does_not_reset_limit(self, client, llm):
        for caller in ("pastor-1", "pastor-2"):
            client.post(
                "/study/generate",
                json={**BODY, "studyMode": "devotional"},
                headers={"X-Client-Id": caller},
            )

        response = client.post("/study/generate", json=BODY, headers={"X-Client-Id": "pastor-3"})
        assert response.status_code == 429
        assert llm.calls == []


class TestInfoEndpoints:
    def test_modes(self, client):
        response = client.get("/study/modes")

        assert response.status_code == 200
        modes = {item["mode"]: item for item in response.json()}
        assert modes["sermon"]["passes"] == 4
        assert modes["quick"]["passFields"][0][3] == "interpretation"
        assert modes["standard"]["wordTarget"] == "1500-1800"

    def test_modes_for_language(self, client):
        modes = {item["mode"]: item for item in client.get("/study/modes?language=ml").json()}
        assert modes["standard"]["wordTarget"] == "1200-1500"

    def test_status(self, client):
        data = client.get("/study/status").json()
        assert {"en", "hi", "ml"} <= set(data["languages"])
        assert "sermon" in data["study_modes"]
        assert data["store_backend"] == "memory"

    def test_root(self, client):
        assert client.get("/").json()["services"] == ["study_generator"]

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] in ("healthy", "degraded")
        assert data["store_backend"]
