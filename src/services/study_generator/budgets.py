"""Per-call token budgets and budget tiers."""

import logging
import math
from typing import Optional

from src.core.config import Settings, settings as default_settings
from src.services.study_generator.languages import LanguageProfile

logger = logging.getLogger(__name__)

FULL = "full"
COMPACT = "compact"

# Base completion budgets sized for English output
BASE_TOKENS = {
    "quick": 8000,
    "standard": 16000,
    "deep": 16000,
    "lectio": 16000,
    "sermon": 16000,
}


def budget_tier(profile: LanguageProfile, cfg: Optional[Settings] = None) -> str:
    """Compact tier for scripts that need many tokens per word."""
    cfg = cfg or default_settings
    if profile.words_per_token < cfg.low_efficiency_threshold:
        return COMPACT
    return FULL


def model_max_tokens(study_mode: str, cfg: Optional[Settings] = None) -> int:
    """Provider ceiling for a single completion call."""
    cfg = cfg or default_settings
    if study_mode == "quick":
        return cfg.quick_model_max_tokens
    return cfg.model_max_tokens


def calculate_pass_tokens(
    study_mode: str,
    profile: LanguageProfile,
    cfg: Optional[Settings] = None,
) -> int:
    """
    Compute max_output_tokens for one pass.

    The mode's base budget is scaled by the language multiplier and capped
    at the provider's per-call maximum.
    """
    base = BASE_TOKENS.get(study_mode, BASE_TOKENS["standard"])
    multiplier = profile.token_multiplier(study_mode)
    requested = math.floor(base * multiplier)
    ceiling = model_max_tokens(study_mode, cfg)

    if requested > ceiling:
        logger.warning(
            f"Requested {requested} tokens for {profile.code}/{study_mode} "
            f"exceeds model limit, capping at {ceiling}"
        )
        return ceiling

    logger.debug(
        f"Token budget {profile.code}/{study_mode}: {requested} ({multiplier}x base)"
    )
    return requested
