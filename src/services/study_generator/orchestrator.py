"""Multi-pass orchestration of one study guide generation."""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from src.core.config import Settings, settings as default_settings
from src.llm.base import LLMClient
from src.services.study_generator.budgets import calculate_pass_tokens
from src.services.study_generator.errors import (
    GenerationCancelledError,
    LLMCallError,
    ParseError,
    ValidationError,
)
from src.services.study_generator.languages import (
    LanguageProfile,
    get_language_profile_or_default,
)
from src.services.study_generator.merge import merge_passes, missing_fields
from src.services.study_generator.models import (
    ContentDocument,
    GenerationRequest,
    PassResult,
)
from src.services.study_generator.parser import try_parse
from src.services.study_generator.passes import PassSpec, get_pass_specs
from src.services.study_generator.prompts.engine import TemplateEngine

logger = logging.getLogger(__name__)

PassCallback = Callable[[PassSpec, PassResult], Awaitable[None]]


class MultiPassOrchestrator:
    """
    Runs the ordered LLM passes for a study mode and merges their output.

    Each run keeps its own accumulated state, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        engine: Optional[TemplateEngine] = None,
        settings: Optional[Settings] = None,
        on_pass_complete: Optional[PassCallback] = None,
    ):
        self.llm_client = llm_client
        self.settings = settings or default_settings
        self.engine = engine or TemplateEngine(settings=self.settings)
        self.on_pass_complete = on_pass_complete

    async def run_generation(
        self,
        request: GenerationRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ContentDocument:
        """
        Generate a complete study guide.

        Args:
            request: The generation request
            cancel_event: Set by the caller to stop before the next pass

        Returns:
            The merged ContentDocument

        Raises:
            TemplateError: Unknown study mode, raised before any LLM call
            LLMCallError: Provider failure or pass timeout
            ParseError: Response could not be parsed as a JSON object
            ValidationError: A mandatory field is missing or empty
            GenerationCancelledError: cancel_event was set between passes
        """
        profile = get_language_profile_or_default(request.language)
        specs = get_pass_specs(request.study_mode, profile, self.settings)
        max_tokens = calculate_pass_tokens(request.study_mode, profile, self.settings)

        logger.info(
            f"Starting {request.study_mode} generation ({profile.code}, "
            f"{len(specs)} passes) for {request.input_type}: {request.input_value[:50]}"
        )
        started = time.monotonic()
        state: dict[str, Any] = {}

        for spec in specs:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Generation cancelled before pass {spec.index}/{spec.total}")
                raise GenerationCancelledError(
                    f"Generation cancelled before pass {spec.index}",
                    pass_index=spec.index,
                )

            result = await self._run_pass(request, profile, spec, state, max_tokens)
            state.update(result)

            if self.on_pass_complete is not None:
                await self.on_pass_complete(spec, result)

        document = merge_passes(state, specs)
        logger.info(
            f"Completed {request.study_mode} generation ({profile.code}) in "
            f"{time.monotonic() - started:.1f}s, "
            f"interpretation {len(document.interpretation.split())} words"
        )
        return document

    async def _run_pass(
        self,
        request: GenerationRequest,
        profile: LanguageProfile,
        spec: PassSpec,
        state: dict[str, Any],
        max_tokens: int,
    ) -> PassResult:
        prior = {field: state[field] for field in spec.reads if field in state}
        prompt = self.engine.build(request, profile, spec, prior)

        logger.info(
            f"Pass {spec.index}/{spec.total} ({spec.label}) for "
            f"{request.study_mode}/{profile.code}, max_tokens={max_tokens}"
        )
        pass_started = time.monotonic()
        try:
            raw = await asyncio.wait_for(
                self.llm_client.generate_content(
                    prompt=prompt.user_message,
                    system_instruction=prompt.system_message,
                    temperature=profile.temperature,
                    max_output_tokens=max_tokens,
                ),
                timeout=self.settings.pass_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise LLMCallError(
                f"Pass {spec.index} timed out after {self.settings.pass_timeout_seconds}s",
                pass_index=spec.index,
            ) from e
        except Exception as e:
            logger.error(f"Pass {spec.index}/{spec.total} LLM call failed: {e}")
            raise LLMCallError(
                f"Pass {spec.index} LLM call failed: {e}", pass_index=spec.index
            ) from e

        outcome = try_parse(raw or "")
        if not outcome.ok:
            logger.error(
                f"Pass {spec.index}/{spec.total} returned unparsable output "
                f"({outcome.error}). Raw: {(raw or '')[: self.settings.raw_log_chars]}"
            )
            raise ParseError(
                f"Pass {spec.index} response is not a JSON object: {outcome.error}",
                pass_index=spec.index,
            )
        if outcome.repaired:
            logger.warning(f"Pass {spec.index}/{spec.total} output was truncated and repaired")

        result = outcome.value
        missing = missing_fields(result, spec.mandatory)
        if missing:
            logger.error(
                f"Pass {spec.index}/{spec.total} missing mandatory fields: {', '.join(missing)}"
            )
            raise ValidationError(
                f"Pass {spec.index} missing mandatory fields: {', '.join(missing)}",
                pass_index=spec.index,
                missing_fields=missing,
            )

        logger.info(
            f"Pass {spec.index}/{spec.total} complete in "
            f"{time.monotonic() - pass_started:.1f}s ({len(raw)} chars)"
        )
        return {field: value for field, value in result.items() if field in spec.produces}
