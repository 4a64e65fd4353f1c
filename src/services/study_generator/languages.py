"""Language profile table for study generation."""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class WordRange:
    """Inclusive word-count target."""

    low: int
    high: int

    def __str__(self) -> str:
        return f"{self.low}-{self.high}"

    def scaled(self, factor: float) -> "WordRange":
        return WordRange(max(1, round(self.low * factor)), max(1, round(self.high * factor)))


@dataclass(frozen=True)
class LanguageProfile:
    """Static description of one output language."""

    code: str
    name: str
    language_instruction: str
    complexity_instruction: str
    cultural_context: str
    script_rules: str
    verse_examples: tuple[str, ...]
    verse_script: str
    prayer_closing: str
    sermon_headings: Mapping[str, str]
    words_per_token: float
    temperature: float
    word_targets: Mapping[str, WordRange]
    token_multipliers: Mapping[str, float] = field(default_factory=dict)

    def word_target(self, study_mode: str) -> WordRange:
        return self.word_targets.get(study_mode, DEFAULT_WORD_TARGETS[study_mode])

    def token_multiplier(self, study_mode: str) -> float:
        return self.token_multipliers.get(study_mode, 1.0)


# Reading-with-understanding targets for the whole study
DEFAULT_WORD_TARGETS = {
    "quick": WordRange(450, 600),
    "standard": WordRange(1500, 1800),
    "deep": WordRange(1800, 2100),
    "lectio": WordRange(1300, 1600),
    "sermon": WordRange(4500, 5350),
}

# Targets for scripts that need many tokens per word, sized to the per-call
# token ceiling
COMPACT_WORD_TARGETS = {
    "quick": WordRange(400, 500),
    "standard": WordRange(1200, 1500),
    "deep": WordRange(1300, 1600),
    "lectio": WordRange(1100, 1400),
    "sermon": WordRange(1500, 1800),
}

ENGLISH_HEADINGS = {
    "openingPrayer": "Opening Prayer",
    "introduction": "Introduction / Hook",
    "point": "Point",
    "mainTeaching": "Main Teaching",
    "scriptureFoundation": "Scripture Foundation",
    "illustration": "Illustration",
    "application": "Application",
    "transition": "Transition",
    "conclusion": "Conclusion",
    "gospelRecap": "Gospel Recap",
    "theInvitation": "The Invitation",
    "responseOptions": "Response Options",
    "closingPrayer": "Closing Prayer",
}

HINDI_HEADINGS = {
    "openingPrayer": "आरंभिक प्रार्थना",
    "introduction": "प्रस्तावना",
    "point": "मुख्य बिंदु",
    "mainTeaching": "मुख्य शिक्षा",
    "scriptureFoundation": "पवित्रशास्त्र आधार",
    "illustration": "उदाहरण",
    "application": "व्यावहारिक उपयोग",
    "transition": "संक्रमण",
    "conclusion": "निष्कर्ष",
    "gospelRecap": "सुसमाचार सारांश",
    "theInvitation": "निमंत्रण",
    "responseOptions": "प्रतिक्रिया विकल्प",
    "closingPrayer": "समापन प्रार्थना",
}

MALAYALAM_HEADINGS = {
    "openingPrayer": "പ്രാരംഭ പ്രാർത്ഥന",
    "introduction": "ആമുഖം",
    "point": "പ്രധാന പോയിന്റ്",
    "mainTeaching": "പ്രധാന പഠനം",
    "scriptureFoundation": "തിരുവെഴുത്ത് അടിസ്ഥാനം",
    "illustration": "ഉദാഹരണം",
    "application": "പ്രയോഗം",
    "transition": "പരിവർത്തനം",
    "conclusion": "നിഗമനം",
    "gospelRecap": "സുവിശേഷ സംഗ്രഹം",
    "theInvitation": "ക്ഷണം",
    "responseOptions": "പ്രതികരണ ഓപ്ഷനുകൾ",
    "closingPrayer": "സമാപന പ്രാർത്ഥന",
}

HINDI_SCRIPT_RULES = """\
✓ ALL Hindi content MUST be in Devanagari script
✗ NO romanized Hinglish (e.g., "Prabhu" is FORBIDDEN, use "प्रभु")

CHRISTIAN TERMINOLOGY (MANDATORY):
✓ "परमेश्वर" (God): ALWAYS USE THIS
✗ "भगवान", "ईश्वर", "अल्लाह": NEVER USE
✓ "यीशु मसीह", "प्रभु यीशु" (Jesus Christ)
✓ "पवित्र आत्मा" (Holy Spirit)
✓ "कलीसिया" (church), "बाइबल" (Bible)

Simple spoken Hindi (NOT literary or Sanskrit):
✓ प्रेम, मदद, जिंदगी, दिल, समझना, करना, देखना
✗ Avoid: प्रीति, सहायता, जीवन, हृदय, बोध होना, संपन्न करना"""

MALAYALAM_SCRIPT_RULES = """\
✓ ALL Malayalam content MUST be in Malayalam script
✗ NO romanized Manglish (e.g., "Karthaav" is FORBIDDEN, use "കർത്താവ്")

ക്രിസ്തീയ പദാവലി (നിർബന്ധം):
✓ "ദൈവം", "കർത്താവ്" (God/Lord)
✗ "ഭഗവാൻ", "അല്ലാഹു": ഒരിക്കലും ഉപയോഗിക്കരുത്
✓ "യേശു", "യേശുക്രിസ്തു" (Jesus Christ)
✓ "പരിശുദ്ധാത്മാവ്" (Holy Spirit)
✓ "സഭ" (church), "ബൈബിൾ" (Bible)

ലളിതമായ സംസാര ഭാഷ (സാഹിത്യമല്ല):
✓ സ്നേഹം, സഹായം, ജീവിതം, മനസ്സ്, മനസ്സിലാക്കുക"""

ENGLISH_SCRIPT_RULES = """\
✓ Use clear, accessible English (avoid unnecessary theological jargon)"""


LANGUAGE_PROFILES: dict[str, LanguageProfile] = {
    "en": LanguageProfile(
        code="en",
        name="English",
        language_instruction="Output only in clear, accessible English",
        complexity_instruction=(
            "Use clear, pastoral language appropriate for all education levels"
        ),
        cultural_context="Western Christian context with Protestant theological emphasis",
        script_rules=ENGLISH_SCRIPT_RULES,
        verse_examples=("John 3:16", "Romans 8:28", "Psalm 23:1"),
        verse_script="English",
        prayer_closing="In Jesus' name, Amen",
        sermon_headings=ENGLISH_HEADINGS,
        words_per_token=0.70,
        temperature=0.3,
        word_targets=dict(DEFAULT_WORD_TARGETS),
    ),
    "hi": LanguageProfile(
        code="hi",
        name="Hindi",
        language_instruction=(
            "Output only in simple, everyday Hindi (avoid complex Sanskrit words, "
            "use common spoken Hindi)"
        ),
        complexity_instruction=(
            "Use easy level language that common people can easily understand"
        ),
        cultural_context=(
            "Indian Christian context with cultural sensitivity to local "
            "traditions and practices"
        ),
        script_rules=HINDI_SCRIPT_RULES,
        verse_examples=("यूहन्ना 3:16", "रोमियों 8:28", "भजन संहिता 23:1"),
        verse_script="Devanagari script",
        prayer_closing="येशु मसीह के नाम से, आमेन",
        sermon_headings=HINDI_HEADINGS,
        words_per_token=0.28,
        temperature=0.2,
        word_targets=dict(DEFAULT_WORD_TARGETS),
        token_multipliers={"deep": 1.024, "sermon": 1.024},
    ),
    "ml": LanguageProfile(
        code="ml",
        name="Malayalam",
        language_instruction=(
            "Output only in simple, everyday Malayalam (avoid complex literary "
            "words, use common spoken Malayalam)"
        ),
        complexity_instruction=(
            "Use simple vocabulary accessible to Malayalam speakers across Kerala"
        ),
        cultural_context=(
            "Kerala Christian context with awareness of the strong Protestant "
            "Christian heritage in the region"
        ),
        script_rules=MALAYALAM_SCRIPT_RULES,
        verse_examples=("യോഹന്നാൻ 3:16", "റോമർ 8:28", "സങ്കീർത്തനങ്ങൾ 23:1"),
        verse_script="Malayalam script",
        prayer_closing="യേശുക്രിസ്തുവിന്റെ നാമത്തിൽ, ആമേൻ",
        sermon_headings=MALAYALAM_HEADINGS,
        words_per_token=0.09,
        temperature=0.2,
        word_targets=dict(COMPACT_WORD_TARGETS),
        token_multipliers={
            "quick": 0.44,
            "standard": 1.024,
            "deep": 1.024,
            "lectio": 1.024,
            "sermon": 1.024,
        },
    ),
}


def get_language_profile(code: str) -> Optional[LanguageProfile]:
    """Return the profile for a language code, or None if unknown."""
    return LANGUAGE_PROFILES.get((code or "").strip().lower())


def get_language_profile_or_default(code: str) -> LanguageProfile:
    """Return the profile for a language code, falling back to English."""
    profile = get_language_profile(code)
    if profile is None:
        logger.warning(f"Unknown language '{code}', using {DEFAULT_LANGUAGE}")
        return LANGUAGE_PROFILES[DEFAULT_LANGUAGE]
    return profile


def supported_languages() -> list[str]:
    return sorted(LANGUAGE_PROFILES)


class ProfileOverride(BaseModel):
    """One language entry in a profile overrides file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = None
    base: str = DEFAULT_LANGUAGE
    words_per_token: Optional[float] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    word_targets: dict[str, tuple[int, int]] = Field(default_factory=dict)
    token_multipliers: dict[str, float] = Field(default_factory=dict)


def apply_profile_override(code: str, override: ProfileOverride) -> LanguageProfile:
    """Build a profile from an override on top of an existing profile."""
    base = LANGUAGE_PROFILES.get(code) or LANGUAGE_PROFILES[override.base]
    word_targets = dict(base.word_targets)
    for mode, (low, high) in override.word_targets.items():
        if low > high:
            raise ValueError(f"Invalid word target for {code}/{mode}: {low}-{high}")
        word_targets[mode] = WordRange(low, high)
    token_multipliers = {**base.token_multipliers, **override.token_multipliers}

    changes = {
        "code": code,
        "word_targets": word_targets,
        "token_multipliers": token_multipliers,
    }
    if override.name is not None:
        changes["name"] = override.name
    if override.words_per_token is not None:
        changes["words_per_token"] = override.words_per_token
    if override.temperature is not None:
        changes["temperature"] = override.temperature
    return replace(base, **changes)


def load_profile_overrides(path: str) -> list[str]:
    """
    Load language profile overrides from a JSON file.

    The file maps language codes to override objects, e.g.
    ``{"ml": {"wordTargets": {"standard": [1100, 1400]}}}``. Unknown codes
    become new languages cloned from ``base`` (English by default).

    Called once at startup, before any generation reads the table.

    Returns:
        The language codes that were added or updated
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Language profile overrides must be a JSON object: {path}")

    updated = []
    for code, data in raw.items():
        code = code.strip().lower()
        override = ProfileOverride.model_validate(data)
        LANGUAGE_PROFILES[code] = apply_profile_override(code, override)
        updated.append(code)

    logger.info(f"Loaded language profile overrides for: {', '.join(updated)}")
    return updated
