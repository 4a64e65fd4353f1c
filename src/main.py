"""Scriptura - Multilingual Bible Study Generator.

FastAPI application entry point with lifespan management.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from pydantic import BaseModel

from src.core.config import settings
from src.core.logging import setup_logging
from src.core.rate_limiter import rate_limiter
from src.llm.base import provider_configured
from src.services.study_generator import router as study_router
from src.services.study_generator.languages import (
    load_profile_overrides,
    supported_languages,
)

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown."""
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    if settings.language_profiles_path:
        load_profile_overrides(settings.language_profiles_path)
    logger.info(f"Study languages: {', '.join(supported_languages())}")
    yield
    # Shutdown
    logger.info("Shutting down...")
    removed = await rate_limiter.cleanup()
    logger.debug(f"Dropped {removed} rate limiter entries")


app = FastAPI(
    title="Scriptura",
    description="Multilingual Bible study guide generation",
    version="0.1.0",
    lifespan=lifespan,
)

# Include service routers
app.include_router(study_router)


# Health check models
class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    llm_provider_configured: bool
    store_backend: str


@app.get("/")
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "description": "Multilingual Bible study guide generation",
        "services": ["study_generator"],
    }


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check that the configured LLM provider has credentials."""
    llm_ready = provider_configured(settings.llm_provider.lower())

    return HealthResponse(
        status="healthy" if llm_ready else "degraded",
        llm_provider_configured=llm_ready,
        store_backend=settings.store_backend,
    )
