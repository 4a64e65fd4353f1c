"""Tests for the multi-pass orchestrator."""

import asyncio
import json

import pytest

from src.services.study_generator.errors import (
    GenerationCancelledError,
    LLMCallError,
    ParseError,
    TemplateError,
    ValidationError,
)
from src.services.study_generator.languages import LANGUAGE_PROFILES
from src.services.study_generator.models import ContentDocument, GenerationRequest
from src.services.study_generator.orchestrator import MultiPassOrchestrator
from src.services.study_generator.passes import get_pass_specs
from stubs import ScriptedLLM, SlowLLM, make_settings, pass_payload, scripted_responses

PASS_COUNTS = {"quick": 1, "standard": 2, "deep": 2, "lectio": 2, "sermon": 4}


def make_request(mode="standard", language="en", **kwargs) -> GenerationRequest:
    values = {"input_type": "scripture", "input_value": "Romans 8:28", "language": language, "study_mode": mode}
    values.update(kwargs)
    return GenerationRequest(**values)


class TestRunGeneration:
    @pytest.mark.parametrize("language", ["en", "hi", "ml"])
    @pytest.mark.parametrize("mode,count", PASS_COUNTS.items())
    def test_call_count_per_mode(self, settings, mode, count, language):
        llm = ScriptedLLM(scripted_responses(mode, language, settings))
        orchestrator = MultiPassOrchestrator(llm, settings=settings)

        document = asyncio.run(orchestrator.run_generation(make_request(mode, language)))

        assert isinstance(document, ContentDocument)
        assert len(llm.calls) == count

    @pytest.mark.parametrize("mode", ["standard", "deep", "lectio", "sermon"])
    def test_interpretation_joined_in_pass_order(self, settings, mode):
        llm = ScriptedLLM(scripted_responses(mode, cfg=settings))
        orchestrator = MultiPassOrchestrator(llm, settings=settings)

        document = asyncio.run(orchestrator.run_generation(make_request(mode)))

        expected = "\n\n".join(f"PASS{i}" for i in range(1, PASS_COUNTS[mode] + 1))
        assert document.interpretation == expected

    def test_quick_interpretation_is_single_segment(self, settings):
        llm = ScriptedLLM(scripted_responses("quick", cfg=settings))
        document = asyncio.run(
            MultiPassOrchestrator(llm, settings=settings).run_generation(make_request("quick"))
        )
        assert document.interpretation == "PASS1"

    def test_romans_standard_english(self, settings):
        specs = get_pass_specs("standard", LANGUAGE_PROFILES["en"], settings)
        first = pass_payload(
            specs[0],
            summary="Nothing can separate believers from the love of God in Christ.",
            context="Paul writes to the church in Rome around AD 57.",
            passage="Romans 8:28-39",
            interpretationPart1="Paul opens with the promise that God works all things for good.",
        )
        second = pass_payload(
            specs[1],
            interpretationPart2="Believers can face hardship with confidence this week.",
            relatedVerses=["Romans 5:8", "John 10:28"],
        )
        llm = ScriptedLLM([json.dumps(first), "```json\n" + json.dumps(second) + "\n```"])
        orchestrator = MultiPassOrchestrator(llm, settings=settings)

        document = asyncio.run(orchestrator.run_generation(make_request()))

        assert document.passage == "Romans 8:28-39"
        assert document.interpretation == (
            "Paul opens with the promise that God works all things for good.\n\n"
            "Believers can face hardship with confidence this week."
        )
        assert document.related_verses == ["Romans 5:8", "John 10:28"]
        assert document.summary.startswith("Nothing can separate")

        # Pass 2 is told what pass 1 produced
        second_prompt = llm.calls[1]["prompt"]
        assert "Nothing can separate believers" in second_prompt
        assert "Romans 8:28-39" in second_prompt

    def test_profile_settings_reach_the_provider(self, settings):
        llm = ScriptedLLM(scripted_responses("quick", "ml", settings))
        asyncio.run(
            MultiPassOrchestrator(llm, settings=settings).run_generation(make_request("quick", "ml"))
        )

        call = llm.calls[0]
        assert call["temperature"] == 0.2
        assert call["max_output_tokens"] == 3520
        assert "Malayalam" in call["system_instruction"]

    def test_bare_string_list_field_is_wrapped(self, settings):
        specs = get_pass_specs("sermon", LANGUAGE_PROFILES["en"], settings)
        responses = scripted_responses("sermon", cfg=settings)
        responses[-1] = json.dumps(pass_payload(specs[-1], prayerPoints="Come forward and pray."))
        llm = ScriptedLLM(responses)

        document = asyncio.run(
            MultiPassOrchestrator(llm, settings=settings).run_generation(make_request("sermon"))
        )
        assert document.prayer_points == ["Come forward and pray."]

    def test_extra_fields_are_ignored(self, settings):
        specs = get_pass_specs("standard", LANGUAGE_PROFILES["en"], settings)
        responses = [
            json.dumps(pass_payload(specs[0], relatedVerses=["Genesis 1:1"])),
            json.dumps(pass_payload(specs[1])),
        ]
        llm = ScriptedLLM(responses)

        document = asyncio.run(
            MultiPassOrchestrator(llm, settings=settings).run_generation(make_request())
        )
        assert document.related_verses == ["relatedVerses item 1", "relatedVerses item 2"]

    def test_pass_callback_receives_each_result(self, settings):
        seen = []

        async def on_pass(spec, result):
            seen.append((spec.index, sorted(result)))

        llm = ScriptedLLM(scripted_responses("deep", cfg=settings))
        orchestrator = MultiPassOrchestrator(llm, settings=settings, on_pass_complete=on_pass)
        asyncio.run(orchestrator.run_generation(make_request("deep")))

        assert [index for index, _ in seen] == [1, 2]
        assert "interpretationPart1" in seen[0][1]
        assert "prayerQuestion" in seen[1][1]

    def test_unknown_language_uses_english(self, settings):
        llm = ScriptedLLM(scripted_responses("standard", "en", settings))
        asyncio.run(
            MultiPassOrchestrator(llm, settings=settings).run_generation(make_request(language="fr"))
        )
        assert "PRIMARY LANGUAGE: English" in llm.calls[0]["system_instruction"]


class TestFailures:
    def test_unknown_mode_makes_no_calls(self, settings):
        llm = ScriptedLLM([])
        with pytest.raises(TemplateError):
            asyncio.run(
                MultiPassOrchestrator(llm, settings=settings).run_generation(make_request("devotional"))
            )
        assert llm.calls == []

    def test_missing_field_stops_before_next_pass(self, settings):
        specs = get_pass_specs("sermon", LANGUAGE_PROFILES["en"], settings)
        broken = pass_payload(specs[0])
        del broken["passage"]
        llm = ScriptedLLM([json.dumps(broken)] + scripted_responses("sermon", cfg=settings)[1:])

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(
                MultiPassOrchestrator(llm, settings=settings).run_generation(make_request("sermon"))
            )

        assert exc_info.value.pass_index == 1
        assert exc_info.value.missing_fields == ["passage"]
        assert len(llm.calls) == 1

    def test_empty_list_field_is_missing(self, settings):
        specs = get_pass_specs("standard", LANGUAGE_PROFILES["en"], settings)
        responses = [
            json.dumps(pass_payload(specs[0])),
            json.dumps(pass_payload(specs[1], reflectionQuestions=[])),
        ]
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(
                MultiPassOrchestrator(ScriptedLLM(responses), settings=settings).run_generation(make_request())
            )
        assert exc_info.value.pass_index == 2
        assert exc_info.value.missing_fields == ["reflectionQuestions"]

    def test_unparsable_response(self, settings):
        llm = ScriptedLLM(["I'm sorry, I can't write that study."])
        with pytest.raises(ParseError) as exc_info:
            asyncio.run(MultiPassOrchestrator(llm, settings=settings).run_generation(make_request()))
        assert exc_info.value.pass_index == 1

    def test_provider_error_becomes_llm_call_error(self, settings):
        llm = ScriptedLLM([RuntimeError("503 Service Unavailable")])
        with pytest.raises(LLMCallError) as exc_info:
            asyncio.run(MultiPassOrchestrator(llm, settings=settings).run_generation(make_request()))
        assert "503" in str(exc_info.value)

    def test_timeout_becomes_llm_call_error(self):
        cfg = make_settings(pass_timeout_seconds=0.01)
        llm = SlowLLM(delay=1.0)
        with pytest.raises(LLMCallError) as exc_info:
            asyncio.run(MultiPassOrchestrator(llm, settings=cfg).run_generation(make_request()))
        assert "timed out" in str(exc_info.value)
        assert llm.calls == 1

    def test_cancel_before_first_pass(self, settings):
        llm = ScriptedLLM(scripted_responses("standard", cfg=settings))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(GenerationCancelledError):
            asyncio.run(
                MultiPassOrchestrator(llm, settings=settings).run_generation(make_request(), cancel)
            )
        assert llm.calls == []

    def test_cancel_between_passes(self, settings):
        llm = ScriptedLLM(scripted_responses("sermon", cfg=settings))

        async def run():
            cancel = asyncio.Event()

            async def on_pass(spec, result):
                if spec.index == 2:
                    cancel.set()

            orchestrator = MultiPassOrchestrator(llm, settings=settings, on_pass_complete=on_pass)
            await orchestrator.run_generation(make_request("sermon"), cancel)

        with pytest.raises(GenerationCancelledError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.pass_index == 3
        assert len(llm.calls) == 2
