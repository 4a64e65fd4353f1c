"""FastAPI router for study generation endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from src.core.rate_limiter import RateLimiter, rate_limiter
from src.services.study_generator.errors import (
    StudyGenerationError,
    TemplateError,
)
from src.services.study_generator.languages import (
    get_language_profile_or_default,
    supported_languages,
)
from src.services.study_generator.models import (
    GenerateStudyResponse,
    GenerationRequest,
    StudyModeInfo,
)
from src.services.study_generator.passes import get_pass_specs, study_modes
from src.services.study_generator.service import StudyGeneratorService, study_generator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study", tags=["study"])


def get_study_generator() -> StudyGeneratorService:
    return study_generator


def get_rate_limiter() -> RateLimiter:
    return rate_limiter


def _client_id(request: Request) -> str:
    """Rate limiting key: the remote address of the caller."""
    return request.client.host if request.client else "anonymous"


@router.post(
    "/generate",
    response_model=GenerateStudyResponse,
    response_model_by_alias=True,
)
async def generate_study(
    body: GenerationRequest,
    request: Request,
    service: StudyGeneratorService = Depends(get_study_generator),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> GenerateStudyResponse:
    """Generate (or fetch from cache) a study guide."""
    client_id = _client_id(request)
    if not await limiter.is_allowed(client_id):
        logger.warning(f"Rate limit exceeded for {client_id}")
        raise HTTPException(
            status_code=429,
            detail="Too many study requests, please wait a moment and try again.",
        )

    try:
        outcome = await service.generate(body)
    except TemplateError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StudyGenerationError as e:
        logger.error(
            f"Study generation failed for {body.study_mode}/{body.language} "
            f"({type(e).__name__}, pass {e.pass_index}): {e}"
        )
        raise HTTPException(
            status_code=502,
            detail="Study generation failed, please retry.",
        )
    except ValueError as e:
        # Provider or store misconfiguration
        logger.error(f"Study generator is not configured: {e}")
        raise HTTPException(status_code=503, detail="Study generation is unavailable.")

    return GenerateStudyResponse(
        study_guide=outcome.document,
        cached=outcome.cached,
        cache_key=outcome.cache_key,
        study_mode=outcome.request.study_mode,
        language=outcome.request.language,
        generated_at=outcome.generated_at,
    )


@router.get(
    "/modes",
    response_model=list[StudyModeInfo],
    response_model_by_alias=True,
)
async def list_modes(language: Optional[str] = None) -> list[StudyModeInfo]:
    """Describe each study mode's pass layout for a language."""
    profile = get_language_profile_or_default(language or "en")
    modes = []
    for mode in study_modes():
        specs = get_pass_specs(mode, profile)
        modes.append(
            StudyModeInfo(
                mode=mode,
                passes=len(specs),
                word_target=str(profile.word_target(mode)),
                pass_fields=[list(spec.produces) for spec in specs],
            )
        )
    return modes


@router.get("/status")
async def get_status(
    service: StudyGeneratorService = Depends(get_study_generator),
) -> dict:
    """Get study generator status."""
    return {
        **service.get_status(),
        "languages": supported_languages(),
        "study_modes": list(study_modes()),
    }
