"""Study guide service: cache lookup, generation with retry, persistence."""

import asyncio
import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import Settings, settings as default_settings
from src.llm import get_configured_llm
from src.services.study_generator.errors import RETRYABLE_ERRORS
from src.services.study_generator.languages import (
    DEFAULT_LANGUAGE,
    LANGUAGE_PROFILES,
    get_language_profile,
)
from src.services.study_generator.models import ContentDocument, GenerationRequest
from src.services.study_generator.orchestrator import MultiPassOrchestrator
from src.services.study_generator.passes import get_pass_specs
from src.services.study_generator.store import DocumentStore, create_document_store

logger = logging.getLogger(__name__)


def compute_cache_key(request: GenerationRequest) -> str:
    """SHA-256 over the normalised request identity."""
    parts = (
        request.input_type,
        " ".join(request.input_value.lower().split()),
        request.language,
        request.study_mode,
    )
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class GenerationOutcome:
    request: GenerationRequest
    document: ContentDocument
    cached: bool
    cache_key: str
    generated_at: datetime


class StudyGeneratorService:
    """Service that serves cached study guides or generates new ones."""

    def __init__(
        self,
        orchestrator: Optional[MultiPassOrchestrator] = None,
        store: Optional[DocumentStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self._orchestrator = orchestrator
        self._store = store

    @property
    def orchestrator(self) -> MultiPassOrchestrator:
        """Lazy initialization so the LLM provider is resolved on first use."""
        if self._orchestrator is None:
            self._orchestrator = MultiPassOrchestrator(
                get_configured_llm(), settings=self.settings
            )
        return self._orchestrator

    @property
    def store(self) -> DocumentStore:
        if self._store is None:
            self._store = create_document_store(self.settings)
        return self._store

    async def generate(
        self,
        request: GenerationRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GenerationOutcome:
        """
        Return a study guide for the request.

        Cached guides are returned as-is. Otherwise the full pass sequence
        runs, retried on LLM, parse and validation failures, and the result
        is stored once.

        Raises:
            TemplateError: If the study mode is unknown
            StudyGenerationError: If generation fails after all attempts
        """
        profile = get_language_profile(request.language)
        if profile is None:
            logger.warning(
                f"Unsupported language '{request.language}', generating in {DEFAULT_LANGUAGE}"
            )
            request = request.model_copy(update={"language": DEFAULT_LANGUAGE})
            profile = LANGUAGE_PROFILES[DEFAULT_LANGUAGE]

        # Unknown modes fail here, before the store is consulted
        get_pass_specs(request.study_mode, profile, self.settings)

        key = compute_cache_key(request)

        cached = await self._lookup(key)
        if cached is not None:
            logger.info(f"Cache hit for {request.study_mode}/{request.language}: {key[:12]}")
            return GenerationOutcome(
                request=request,
                document=cached,
                cached=True,
                cache_key=key,
                generated_at=datetime.now(timezone.utc),
            )

        document = await self._generate_with_retry(request, cancel_event)
        generated_at = datetime.now(timezone.utc)

        metadata = {
            "input_type": request.input_type,
            "input_value": request.input_value,
            "language": request.language,
            "study_mode": request.study_mode,
        }
        try:
            await self.store.put(key, document, metadata)
        except Exception as e:
            logger.error(f"Failed to store study guide {key[:12]}: {e}")

        return GenerationOutcome(
            request=request,
            document=document,
            cached=False,
            cache_key=key,
            generated_at=generated_at,
        )

    async def _lookup(self, key: str) -> Optional[ContentDocument]:
        try:
            return await self.store.get(key)
        except Exception as e:
            logger.warning(f"Cache lookup failed for {key[:12]}, generating: {e}")
            return None

    async def _generate_with_retry(
        self,
        request: GenerationRequest,
        cancel_event: Optional[asyncio.Event],
    ) -> ContentDocument:
        attempts = max(1, self.settings.generation_max_attempts)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(
                multiplier=self.settings.generation_retry_wait_seconds, max=10
            ),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self.orchestrator.run_generation(request, cancel_event)

    @staticmethod
    def _log_retry(retry_state) -> None:
        error = retry_state.outcome.exception()
        logger.warning(
            f"Generation attempt {retry_state.attempt_number} failed "
            f"({type(error).__name__}: {error}), retrying"
        )

    def get_status(self) -> dict:
        """Provider and generation settings, for the status endpoint."""
        cfg = self.settings
        provider = cfg.llm_provider.lower()
        return {
            "llm_provider": provider,
            "model": cfg.gemini_model if provider == "gemini" else cfg.openai_model,
            "llm_fallback_enabled": cfg.llm_fallback_enabled,
            "store_backend": cfg.store_backend,
            "pass_timeout_seconds": cfg.pass_timeout_seconds,
            "generation_max_attempts": cfg.generation_max_attempts,
        }


# Singleton instance
study_generator = StudyGeneratorService()
