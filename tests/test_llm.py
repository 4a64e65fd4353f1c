"""Tests for provider fallback and Gemini key rotation."""

import asyncio

import pytest

from src.llm.base import FallbackLLMClient, is_fallback_worthy
from src.llm.key_rotator import GeminiKeyRotator
from stubs import ScriptedLLM


class TestFallbackLLMClient:
    def test_primary_success_skips_fallback(self):
        primary = ScriptedLLM(['{"summary": "a"}'])
        fallback = ScriptedLLM(['{"summary": "b"}'])

        result = asyncio.run(FallbackLLMClient(primary, fallback).generate_content("prompt"))

        assert result == '{"summary": "a"}'
        assert fallback.calls == []

    def test_rate_limit_falls_back_with_same_arguments(self):
        primary = ScriptedLLM([RuntimeError("429 RESOURCE_EXHAUSTED")])
        fallback = ScriptedLLM(['{"summary": "b"}'])
        client = FallbackLLMClient(primary, fallback)

        result = asyncio.run(
            client.generate_content(
                "prompt", system_instruction="system", temperature=0.2, max_output_tokens=3520
            )
        )

        assert result == '{"summary": "b"}'
        assert fallback.calls[0]["system_instruction"] == "system"
        assert fallback.calls[0]["max_output_tokens"] == 3520

    def test_other_errors_propagate(self):
        primary = ScriptedLLM([RuntimeError("500 internal error")])
        fallback = ScriptedLLM(['{"summary": "b"}'])

        with pytest.raises(RuntimeError):
            asyncio.run(FallbackLLMClient(primary, fallback).generate_content("prompt"))
        assert fallback.calls == []

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("429 Too Many Requests", True),
            ("Quota exceeded for model", True),
            ("API_KEY_INVALID", True),
            ("All Gemini API keys exhausted", True),
            ("Connection reset by peer", False),
        ],
    )
    def test_is_fallback_worthy(self, message, expected):
        assert is_fallback_worthy(Exception(message)) is expected


class TestGeminiKeyRotator:
    def test_rotates_through_keys(self):
        rotator = GeminiKeyRotator(["key-a", "key-b"])

        assert rotator.current_key == "key-a"
        assert rotator.rotate() == "key-b"
        assert rotator.rotate() == "key-a"
        assert rotator.key_count == 2

    def test_requires_keys(self, monkeypatch):
        monkeypatch.setattr("src.llm.key_rotator.settings.gemini_api_key", "")
        with pytest.raises(ValueError):
            GeminiKeyRotator([])
