"""Stub LLM clients and response builders for the study generator tests."""

import asyncio
import json
from typing import Optional

from src.core.config import Settings
from src.services.study_generator.languages import get_language_profile_or_default
from src.services.study_generator.passes import LIST_FIELDS, PassSpec, get_pass_specs


def make_settings(**overrides) -> Settings:
    values = {
        "store_backend": "memory",
        "generation_retry_wait_seconds": 0,
        "pass_timeout_seconds": 5.0,
    }
    values.update(overrides)
    return Settings(**values)


def pass_payload(spec: PassSpec, **extra) -> dict:
    """A well-formed response for one pass."""
    payload = {}
    for field in spec.produces:
        if field == spec.interpretation_field:
            payload[field] = f"PASS{spec.index}"
        elif field in LIST_FIELDS:
            payload[field] = [f"{field} item 1", f"{field} item 2"]
        elif field == "passage":
            payload[field] = "Romans 8:28-39"
        else:
            payload[field] = f"{field} text"
    payload.update(extra)
    return payload


def scripted_responses(study_mode: str, language: str = "en", cfg: Optional[Settings] = None) -> list[str]:
    profile = get_language_profile_or_default(language)
    specs = get_pass_specs(study_mode, profile, cfg or make_settings())
    return [json.dumps(pass_payload(spec), ensure_ascii=False) for spec in specs]


class ScriptedLLM:
    """Returns queued responses in order and records every call."""

    def __init__(self, responses: list):
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def generate_content(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.3,
        max_output_tokens: int = 4000,
    ) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system_instruction": system_instruction,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        if not self.responses:
            raise RuntimeError("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class SlowLLM:
    """Never answers within a short pass timeout."""

    def __init__(self, delay: float = 1.0):
        self.delay = delay
        self.calls = 0

    async def generate_content(self, prompt: str, **kwargs) -> str:
        self.calls += 1
        await asyncio.sleep(self.delay)
        return "{}"

