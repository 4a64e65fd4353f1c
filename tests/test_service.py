"""Tests for the study generator service and document stores."""

import asyncio
import json

import httpx
import pytest

from src.services.study_generator.errors import LLMCallError, ParseError, TemplateError
from src.services.study_generator.models import GenerationRequest
from src.services.study_generator.orchestrator import MultiPassOrchestrator
from src.services.study_generator.service import StudyGeneratorService, compute_cache_key
from src.services.study_generator.store import (
    InMemoryDocumentStore,
    StoreError,
    SupabaseDocumentStore,
    create_document_store,
)
from stubs import ScriptedLLM, make_settings, scripted_responses


def make_request(mode="standard", language="en", **kwargs) -> GenerationRequest:
    values = {"input_type": "scripture", "input_value": "Romans 8:28", "language": language, "study_mode": mode}
    values.update(kwargs)
    return GenerationRequest(**values)


def make_service(responses, store=None, **overrides):
    cfg = make_settings(**overrides)
    llm = ScriptedLLM(responses)
    service = StudyGeneratorService(
        orchestrator=MultiPassOrchestrator(llm, settings=cfg),
        store=store if store is not None else InMemoryDocumentStore(),
        settings=cfg,
    )
    return service, llm


class FailingStore(InMemoryDocumentStore):
    async def get(self, key):
        raise StoreError("lookup failed")

    async def put(self, key, document, metadata=None):
        raise StoreError("insert failed")


class CountingStore(InMemoryDocumentStore):
    def __init__(self):
        super().__init__()
        self.lookups = 0

    async def get(self, key):
        self.lookups += 1
        return await super().get(key)


class TestCacheKey:
    def test_normalises_input_value(self):
        a = make_request(input_value="Romans  8:28")
        b = make_request(input_value="romans 8:28")
        assert compute_cache_key(a) == compute_cache_key(b)

    def test_mode_and_language_are_part_of_key(self):
        base = compute_cache_key(make_request())
        assert compute_cache_key(make_request(mode="deep")) != base
        assert compute_cache_key(make_request(language="hi")) != base
        assert compute_cache_key(make_request(input_type="topic")) != base

    def test_key_is_sha256_hex(self):
        key = compute_cache_key(make_request())
        assert len(key) == 64
        int(key, 16)


class TestGenerate:
    def test_generates_and_stores(self):
        store = InMemoryDocumentStore()
        service, llm = make_service(scripted_responses("standard"), store=store)

        outcome = asyncio.run(service.generate(make_request()))

        assert not outcome.cached
        assert outcome.cache_key == compute_cache_key(make_request())
        assert len(llm.calls) == 2
        assert len(store) == 1

    def test_second_request_is_served_from_cache(self):
        service, llm = make_service(scripted_responses("standard"))

        async def run_twice():
            first = await service.generate(make_request())
            second = await service.generate(make_request(input_value="  romans 8:28 "))
            return first, second

        first, second = asyncio.run(run_twice())

        assert second.cached
        assert second.document == first.document
        assert len(llm.calls) == 2

    def test_retries_whole_sequence_after_failure(self):
        responses = [
            "not json at all",
            *scripted_responses("standard"),
        ]
        store = InMemoryDocumentStore()
        service, llm = make_service(responses, store=store, generation_max_attempts=2)

        outcome = asyncio.run(service.generate(make_request()))

        assert not outcome.cached
        assert len(llm.calls) == 3
        assert len(store) == 1

    def test_nothing_stored_after_final_failure(self):
        store = InMemoryDocumentStore()
        service, llm = make_service(
            [RuntimeError("boom"), RuntimeError("boom again")],
            store=store,
            generation_max_attempts=2,
        )

        with pytest.raises(LLMCallError):
            asyncio.run(service.generate(make_request()))

        assert len(llm.calls) == 2
        assert len(store) == 0

    def test_template_error_is_not_retried(self):
        service, llm = make_service([], generation_max_attempts=3)

        with pytest.raises(TemplateError):
            asyncio.run(service.generate(make_request(mode="devotional")))
        assert llm.calls == []

    def test_unknown_mode_rejected_before_cache_lookup(self):
        store = CountingStore()
        service, llm = make_service([], store=store)

        with pytest.raises(TemplateError):
            asyncio.run(service.generate(make_request(mode="devotional")))
        assert store.lookups == 0
        assert llm.calls == []

    def test_later_pass_garbage_fails_without_storing(self):
        first, _ = scripted_responses("standard")
        store = InMemoryDocumentStore()
        service, llm = make_service(
            [first, "garbage, not json"], store=store, generation_max_attempts=1
        )

        with pytest.raises(ParseError) as exc_info:
            asyncio.run(service.generate(make_request()))

        assert exc_info.value.pass_index == 2
        assert len(llm.calls) == 2
        assert len(store) == 0

    def test_sermon_middle_pass_garbage_fails_without_storing(self):
        first, second, _, _ = scripted_responses("sermon")
        store = InMemoryDocumentStore()
        service, llm = make_service(
            [first, second, "I cannot continue this sermon."], store=store, generation_max_attempts=1
        )

        with pytest.raises(ParseError) as exc_info:
            asyncio.run(service.generate(make_request(mode="sermon")))

        assert exc_info.value.pass_index == 3
        assert len(llm.calls) == 3
        assert len(store) == 0

    def test_unsupported_language_generates_english(self):
        service, llm = make_service(scripted_responses("standard"))

        outcome = asyncio.run(service.generate(make_request(language="fr")))

        assert outcome.request.language == "en"
        assert outcome.cache_key == compute_cache_key(make_request())

    def test_store_failures_do_not_fail_generation(self):
        service, llm = make_service(scripted_responses("quick"), store=FailingStore())

        outcome = asyncio.run(service.generate(make_request(mode="quick")))

        assert not outcome.cached
        assert outcome.document.interpretation == "PASS1"


def supabase_store(handler) -> SupabaseDocumentStore:
    store = SupabaseDocumentStore(
        base_url="https://example.supabase.co",
        service_key="service-key",
        table="study_guides",
    )
    store._get_client = lambda: httpx.AsyncClient(
        base_url="https://example.supabase.co/rest/v1",
        transport=httpx.MockTransport(handler),
    )
    return store


class TestSupabaseDocumentStore:
    def test_get_returns_none_when_not_cached(self):
        def handler(request):
            assert request.url.path == "/rest/v1/study_guides"
            assert request.url.params["cache_key"] == "eq.abc"
            return httpx.Response(200, json=[])

        assert asyncio.run(supabase_store(handler).get("abc")) is None

    def test_put_then_get_row(self):
        rows = {}

        def handler(request):
            if request.method == "POST":
                row = json.loads(request.content)
                rows[row["cache_key"]] = row
                assert request.url.params["on_conflict"] == "cache_key"
                return httpx.Response(201)
            key = request.url.params["cache_key"].removeprefix("eq.")
            return httpx.Response(200, json=[{"content": rows[key]["content"]}])

        store = supabase_store(handler)
        service, _ = make_service(scripted_responses("quick"))
        document = asyncio.run(service.generate(make_request(mode="quick"))).document

        asyncio.run(store.put("abc", document, {"language": "en"}))
        assert rows["abc"]["language"] == "en"
        assert "relatedVerses" in rows["abc"]["content"]
        assert asyncio.run(store.get("abc")) == document

    def test_rejected_insert_raises_store_error(self):
        def handler(request):
            return httpx.Response(409, text="duplicate key")

        store = supabase_store(handler)
        service, _ = make_service(scripted_responses("quick"))
        document = asyncio.run(service.generate(make_request(mode="quick"))).document

        with pytest.raises(StoreError):
            asyncio.run(store.put("abc", document))


class TestCreateDocumentStore:
    def test_memory_backend(self):
        assert isinstance(create_document_store(make_settings()), InMemoryDocumentStore)

    def test_supabase_requires_credentials(self):
        with pytest.raises(ValueError):
            create_document_store(make_settings(store_backend="supabase", supabase_url=""))

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_document_store(make_settings(store_backend="redis"))
