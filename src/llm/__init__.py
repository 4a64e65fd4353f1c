"""LLM integrations for the study generation service."""

from src.llm.base import (
    FallbackLLMClient,
    LLMClient,
    get_configured_llm,
    get_llm_client,
)
from src.llm.gemini import GeminiClient, gemini_client
from src.llm.openai import OpenAIClient, openai_client

__all__ = [
    "get_configured_llm",
    "get_llm_client",
    "FallbackLLMClient",
    "LLMClient",
    "GeminiClient",
    "gemini_client",
    "OpenAIClient",
    "openai_client",
]
