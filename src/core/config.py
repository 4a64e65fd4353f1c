"""Application configuration using Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "scriptura"
    debug: bool = False
    log_level: str = "INFO"

    # LLM Configuration
    llm_provider: str = "openai"  # Options: "gemini", "openai"
    llm_fallback_enabled: bool = True

    # Gemini Configuration (comma-separated keys are rotated on 429)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # OpenAI Configuration
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Multi-pass generation
    pass_timeout_seconds: float = 150.0
    model_max_tokens: int = 16384
    quick_model_max_tokens: int = 8192
    low_efficiency_threshold: float = 0.25  # words per token
    generation_max_attempts: int = 2
    generation_retry_wait_seconds: float = 1.0
    raw_log_chars: int = 500
    summary_context_chars: int = 200  # summary excerpt carried into later passes
    sermon_summary_context_chars: int = 300
    language_profiles_path: Optional[str] = None

    # Study guide store
    store_backend: str = "memory"  # Options: "memory", "supabase"
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_table: str = "study_guides"

    # Rate limiting for the generate endpoint
    rate_limit_requests: int = 10
    rate_limit_window_seconds: int = 60

    @property
    def gemini_api_keys(self) -> list[str]:
        """Parse comma-separated Gemini keys into list."""
        if not self.gemini_api_key:
            return []
        return [k.strip() for k in self.gemini_api_key.split(",") if k.strip()]


settings = Settings()
