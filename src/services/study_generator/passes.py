"""Pass layouts for each study mode."""

from dataclasses import dataclass
from typing import Optional

from src.core.config import Settings, settings as default_settings
from src.services.study_generator.budgets import COMPACT, budget_tier
from src.services.study_generator.errors import TemplateError
from src.services.study_generator.languages import (
    COMPACT_WORD_TARGETS,
    DEFAULT_WORD_TARGETS,
    LanguageProfile,
    WordRange,
)

FOUNDATION_FIELDS = ("summary", "context", "passage")

SUPPORTING_FIELDS = (
    "relatedVerses",
    "reflectionQuestions",
    "prayerPoints",
    "summaryInsights",
    "interpretationInsights",
    "reflectionAnswers",
    "contextQuestion",
    "summaryQuestion",
    "relatedVersesQuestion",
    "reflectionQuestion",
    "prayerQuestion",
)

LIST_FIELDS = frozenset(SUPPORTING_FIELDS[:6])


@dataclass(frozen=True)
class PassSpec:
    """One LLM call in a generation."""

    index: int
    total: int
    label: str
    produces: tuple[str, ...]
    mandatory: tuple[str, ...]
    reads: tuple[str, ...]
    interpretation_field: str
    target_words: WordRange
    structure: str
    summary_chars: int = 0

    @property
    def is_first(self) -> bool:
        return self.index == 1

    @property
    def is_last(self) -> bool:
        return self.index == self.total


@dataclass(frozen=True)
class _Step:
    label: str
    structure: str
    full: WordRange
    compact: WordRange


# Interpretation segment per pass, in order
_LAYOUTS: dict[str, tuple[_Step, ...]] = {
    "quick": (
        _Step(
            "Quick Study",
            "EXACTLY 2 paragraphs, 3-4 sentences each",
            WordRange(140, 150),
            WordRange(110, 120),
        ),
    ),
    "standard": (
        _Step(
            "Foundation + Teaching",
            "EXACTLY 2 paragraphs, 6-8 sentences each",
            WordRange(500, 650),
            WordRange(350, 450),
        ),
        _Step(
            "Application + Resources",
            "EXACTLY 2 paragraphs, 5-7 sentences each",
            WordRange(350, 450),
            WordRange(250, 350),
        ),
    ),
    "deep": (
        _Step(
            "Exegesis + Theology",
            "3 sections (Verse-by-Verse Exegesis, Theological Interpretation, "
            "Doctrinal Implications), paragraphs of 8-10 sentences",
            WordRange(1300, 1600),
            WordRange(600, 750),
        ),
        _Step(
            "Application + Resources",
            "3 sections (Life Transformation, Contemporary Relevance, "
            "Spiritual Disciplines), paragraphs of 8-10 sentences",
            WordRange(1000, 1100),
            WordRange(450, 550),
        ),
    ),
    "lectio": (
        _Step(
            "Lectio + Meditatio",
            "LECTIO (3 readings) then MEDITATIO (3 meditations), 7-9 sentences per section",
            WordRange(1200, 1500),
            WordRange(550, 700),
        ),
        _Step(
            "Oratio + Contemplatio",
            "ORATIO (2 prayer sections) then CONTEMPLATIO (1 section), 7-9 sentences per section",
            WordRange(1000, 1300),
            WordRange(450, 550),
        ),
    ),
    "sermon": (
        _Step(
            "Introduction + First Point",
            "Introduction (hook, bridge, preview, transition) then Point 1",
            WordRange(1450, 1750),
            WordRange(450, 550),
        ),
        _Step(
            "Second Point",
            "Point 2 (main teaching, scripture foundation, illustration, "
            "application, transition)",
            WordRange(1000, 1200),
            WordRange(380, 420),
        ),
        _Step(
            "Third Point",
            "Point 3 (main teaching, scripture foundation, illustration, "
            "application, transition)",
            WordRange(700, 900),
            WordRange(330, 370),
        ),
        _Step(
            "Conclusion + Altar Call",
            "Conclusion (gospel recap, invitation, response options, closing prayer)",
            WordRange(350, 450),
            WordRange(220, 250),
        ),
    ),
}


def study_modes() -> tuple[str, ...]:
    return tuple(_LAYOUTS)


def _target_scale(study_mode: str, profile: LanguageProfile, tier: str) -> float:
    """
    Ratio of the profile's study target to the one the tier's pass split
    was sized for.

    Stock profiles give 1.0. An overridden target stretches or shrinks every
    pass while keeping the tier's split between passes.
    """
    reference = (COMPACT_WORD_TARGETS if tier == COMPACT else DEFAULT_WORD_TARGETS)[study_mode]
    target = profile.word_target(study_mode)
    if target == reference:
        return 1.0
    return (target.low + target.high) / (reference.low + reference.high)


def get_pass_specs(
    study_mode: str,
    profile: LanguageProfile,
    cfg: Optional[Settings] = None,
) -> tuple[PassSpec, ...]:
    """
    Return the ordered passes for a study mode.

    Raises:
        TemplateError: If the study mode is unknown
    """
    cfg = cfg or default_settings
    steps = _LAYOUTS.get(study_mode)
    if steps is None:
        raise TemplateError(f"Unknown study mode: {study_mode}")

    tier = budget_tier(profile, cfg)
    total = len(steps)
    scale = _target_scale(study_mode, profile, tier)

    # Sermon middle passes carry a longer summary excerpt
    long_summary = cfg.sermon_summary_context_chars
    short_summary = cfg.summary_context_chars

    specs = []
    for index, step in enumerate(steps, start=1):
        target = (step.compact if tier == COMPACT else step.full).scaled(scale)
        is_first = index == 1
        is_last = index == total

        if total == 1:
            interpretation_field = "interpretation"
            produces = FOUNDATION_FIELDS + ("interpretation",) + SUPPORTING_FIELDS
            reads: tuple[str, ...] = ()
            summary_chars = 0
        else:
            interpretation_field = f"interpretationPart{index}"
            if is_first:
                produces = FOUNDATION_FIELDS + (interpretation_field,)
                reads = ()
                summary_chars = 0
            elif is_last:
                produces = (interpretation_field,) + SUPPORTING_FIELDS
                reads = ("summary", "passage")
                summary_chars = short_summary
            else:
                produces = (interpretation_field,)
                reads = ("summary", "passage")
                summary_chars = long_summary

        specs.append(
            PassSpec(
                index=index,
                total=total,
                label=step.label,
                produces=produces,
                mandatory=produces,
                reads=reads,
                interpretation_field=interpretation_field,
                target_words=target,
                structure=step.structure,
                summary_chars=summary_chars,
            )
        )
    return tuple(specs)
