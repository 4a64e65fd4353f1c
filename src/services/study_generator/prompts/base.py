"""Shared types for prompt builders."""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, NamedTuple

from src.services.study_generator.languages import LanguageProfile
from src.services.study_generator.models import GenerationRequest
from src.services.study_generator.passes import PassSpec
from src.services.study_generator.prompts.blocks import (
    PromptBlocks,
    language_block,
    task_description,
    verse_reference_block,
)


class PromptPair(NamedTuple):
    system_message: str
    user_message: str


@dataclass(frozen=True)
class PromptContext:
    """Everything a builder needs to render one pass."""

    request: GenerationRequest
    profile: LanguageProfile
    pass_spec: PassSpec
    blocks: PromptBlocks
    tier: str
    budget: Mapping[str, Any]
    prior: Mapping[str, Any] = field(default_factory=dict)

    @property
    def language_name(self) -> str:
        return self.profile.name

    @property
    def headings(self) -> Mapping[str, str]:
        return self.profile.sermon_headings

    @property
    def target(self) -> str:
        return str(self.pass_spec.target_words)

    def prior_summary(self) -> str:
        """Summary from pass 1, cut to this pass's excerpt length."""
        summary = str(self.prior.get("summary", ""))
        limit = self.pass_spec.summary_chars
        if limit and len(summary) > limit:
            return summary[:limit] + "..."
        return summary

    def prior_passage(self) -> str:
        return str(self.prior.get("passage", ""))

    def mode_line(self, study: str) -> str:
        spec = self.pass_spec
        if spec.total == 1:
            return f"STUDY MODE: {study}"
        return f"STUDY MODE: {study} - PASS {spec.index}/{spec.total} ({spec.label})"

    def system_message(self, role: str, details: str) -> str:
        """Role line, shared blocks, language rules, then mode details."""
        blocks = self.blocks
        return "\n\n".join(
            [
                role,
                f"{blocks.separator}\n{blocks.theological_foundation}",
                f"{blocks.separator}\n{blocks.json_output_rules}",
                language_block(blocks, self.profile),
                details,
            ]
        )

    def opening(self, study_label: str) -> str:
        """Task line plus verse reference rules, used by first passes."""
        return (
            f"{task_description(self.request, study_label)}\n\n"
            f"{verse_reference_block(self.profile)}"
        )


Builder = Callable[[PromptContext], PromptPair]
