"""Template engine that turns a request and pass into a prompt pair."""

import logging
from typing import Any, Mapping, Optional

from src.core.config import Settings, settings as default_settings
from src.services.study_generator.budgets import budget_tier
from src.services.study_generator.errors import TemplateError
from src.services.study_generator.languages import (
    LanguageProfile,
    get_language_profile_or_default,
)
from src.services.study_generator.models import GenerationRequest
from src.services.study_generator.passes import PassSpec
from src.services.study_generator.prompts import deep, lectio, quick, sermon, standard
from src.services.study_generator.prompts.base import Builder, PromptContext, PromptPair
from src.services.study_generator.prompts.blocks import DEFAULT_BLOCKS, PromptBlocks

logger = logging.getLogger(__name__)

_MODE_MODULES = {
    "quick": quick,
    "standard": standard,
    "deep": deep,
    "lectio": lectio,
    "sermon": sermon,
}

# (study_mode, pass_index) -> builder
BUILDERS: dict[tuple[str, int], Builder] = {
    (mode, index): builder
    for mode, module in _MODE_MODULES.items()
    for index, builder in module.BUILDERS.items()
}

# (study_mode, tier) -> numeric targets used inside the templates
BUDGET_TABLES: dict[tuple[str, str], Mapping[str, Any]] = {
    (mode, tier): table
    for mode, module in _MODE_MODULES.items()
    for tier, table in module.BUDGETS.items()
}


class TemplateEngine:
    """Renders prompts for every (study mode, pass) combination."""

    def __init__(
        self,
        blocks: PromptBlocks = DEFAULT_BLOCKS,
        settings: Optional[Settings] = None,
    ):
        self.blocks = blocks
        self.settings = settings or default_settings

    def build(
        self,
        request: GenerationRequest,
        profile: Optional[LanguageProfile],
        pass_spec: PassSpec,
        prior: Optional[Mapping[str, Any]] = None,
    ) -> PromptPair:
        """
        Build the system and user messages for one pass.

        Args:
            request: The generation request
            profile: Language profile, or None to resolve from the request
            pass_spec: The pass being rendered
            prior: Fields accumulated from earlier passes

        Returns:
            PromptPair of (system_message, user_message)

        Raises:
            TemplateError: If no builder exists for the mode and pass
        """
        profile = profile or get_language_profile_or_default(request.language)
        mode = request.study_mode

        builder = BUILDERS.get((mode, pass_spec.index))
        if builder is None:
            raise TemplateError(
                f"No prompt template for {mode} pass {pass_spec.index}",
                pass_index=pass_spec.index,
            )

        tier = budget_tier(profile, self.settings)
        ctx = PromptContext(
            request=request,
            profile=profile,
            pass_spec=pass_spec,
            blocks=self.blocks,
            tier=tier,
            budget=BUDGET_TABLES[(mode, tier)],
            prior=dict(prior or {}),
        )
        prompt = builder(ctx)
        logger.debug(
            f"Built {mode} pass {pass_spec.index}/{pass_spec.total} prompt "
            f"({profile.code}, {tier}): {len(prompt.system_message)} + "
            f"{len(prompt.user_message)} chars"
        )
        return prompt
