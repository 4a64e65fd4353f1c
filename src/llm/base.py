"""Unified LLM interface for provider switching."""

import logging
from typing import Optional, Protocol

from src.core.config import settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("gemini", "openai")


class LLMClient(Protocol):
    """Protocol for LLM clients."""

    async def generate_content(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.3,
        max_output_tokens: int = 4000,
    ) -> str:
        """Generate content from the LLM."""
        ...


def is_fallback_worthy(error: Exception) -> bool:
    """Check whether an error should send the call to the alternate provider."""
    error_str = str(error).lower()
    return (
        # Rate limit / quota errors
        "429" in error_str
        or "quota" in error_str
        or "rate" in error_str
        or "exhausted" in error_str
        or "all gemini api keys" in error_str
        # Invalid/expired API key errors
        or "api_key_invalid" in error_str
        or "api key expired" in error_str
        or "invalid api key" in error_str
    )


def provider_configured(provider: str) -> bool:
    """Check if a provider has API keys configured."""
    if provider == "openai":
        return bool(settings.openai_api_key)
    elif provider == "gemini":
        return bool(settings.gemini_api_keys)
    return False


class FallbackLLMClient:
    """LLM client that retries a failed call once on the alternate provider."""

    def __init__(self, primary: LLMClient, fallback: LLMClient):
        self.primary = primary
        self.fallback = fallback

    async def generate_content(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.3,
        max_output_tokens: int = 4000,
    ) -> str:
        try:
            return await self.primary.generate_content(
                prompt=prompt,
                system_instruction=system_instruction,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )
        except Exception as e:
            if not is_fallback_worthy(e):
                raise
            logger.warning(
                f"Primary provider '{getattr(self.primary, 'name', 'primary')}' failed "
                f"({type(e).__name__}), falling back to "
                f"'{getattr(self.fallback, 'name', 'fallback')}'"
            )
            return await self.fallback.generate_content(
                prompt=prompt,
                system_instruction=system_instruction,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )


def _provider_client(provider: str) -> LLMClient:
    if provider == "gemini":
        from src.llm.gemini import gemini_client

        return gemini_client
    from src.llm.openai import openai_client

    return openai_client


def get_llm_client() -> LLMClient:
    """
    Get the configured LLM client based on LLM_PROVIDER setting.

    When LLM_FALLBACK_ENABLED is set and the other provider has keys, the
    client is wrapped so rate-limited or rejected calls are retried there.

    Returns:
        LLMClient instance

    Raises:
        ValueError: If provider is not supported or not configured
    """
    provider = settings.llm_provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: {provider}. Supported: gemini, openai"
        )
    if not provider_configured(provider):
        raise ValueError(
            f"{provider.upper()}_API_KEY is required when LLM_PROVIDER={provider}"
        )

    model = settings.gemini_model if provider == "gemini" else settings.openai_model
    logger.info(f"Using {provider} LLM provider (model: {model})")
    client = _provider_client(provider)

    alternate = "openai" if provider == "gemini" else "gemini"
    if settings.llm_fallback_enabled and provider_configured(alternate):
        logger.info(f"LLM fallback enabled: {provider} -> {alternate}")
        return FallbackLLMClient(client, _provider_client(alternate))

    return client


# Lazy-loaded singleton
_llm_client: Optional[LLMClient] = None


def get_configured_llm() -> LLMClient:
    """Get the singleton LLM client instance."""
    global _llm_client
    if _llm_client is None:
        _llm_client = get_llm_client()
    return _llm_client
