"""Shared prompt blocks reused by every study mode."""

from dataclasses import dataclass
from typing import Mapping, Optional

from src.services.study_generator.languages import LanguageProfile
from src.services.study_generator.models import GenerationRequest

SEPARATOR = "═" * 75

THEOLOGICAL_FOUNDATION = """\
THEOLOGICAL FRAMEWORK - NON-NEGOTIABLE CONSTRAINTS

DOCTRINAL ORTHODOXY (Protestant Evangelical):
✓ Sola Scriptura: Scripture ALONE as final authority
✓ Sola Fide: Salvation by grace ALONE through faith ALONE in Christ ALONE
✓ Penal Substitutionary Atonement: Christ bore God's wrath for sinners on the cross
✓ Biblical Inerrancy: Scripture is without error in original manuscripts
✓ Triune God: One God in three persons (Father, Son, Holy Spirit)

HERMENEUTICAL METHOD (Historical-Grammatical):
✓ Authorial Intent: Interpret according to what the original author meant to the original audience
✓ Grammatical-Historical Context: Consider grammar, history, culture, literary genre
✓ Scripture Interprets Scripture: Use clear passages to illuminate difficult ones
✓ Christocentric Reading: All Scripture ultimately points to Jesus Christ
✓ REJECT: Allegorical speculation, eisegesis, prosperity gospel, word-faith theology

GOSPEL CLARITY (Essential for Salvation):
✓ Human Condition: All have sinned and fall short of God's glory (Romans 3:23)
✓ God's Holiness: God's wrath against sin requires satisfaction (Romans 6:23)
✓ Christ's Work: Jesus lived sinlessly, died substitutionally, rose bodily (1 Cor 15:3-4)
✓ Saving Faith: Repentance from sin + faith in Christ alone (not works, not rituals)
✓ REJECT: Works-based salvation, decisional regeneration without repentance, universalism

DOCTRINAL PROHIBITIONS (NEVER Teach):
✗ Prosperity gospel (health/wealth as entitlement)
✗ Word-faith theology ("name it and claim it")
✗ Liberal theology (Scripture as merely human wisdom)
✗ Universalism (all paths lead to God)
✗ Works-righteousness (salvation earned by human merit)
✗ Extra-biblical revelation as authoritative (dreams, visions, "God told me")"""

JSON_OUTPUT_RULES = """\
JSON OUTPUT REQUIREMENTS - ABSOLUTE PRIORITY

1. Return ONLY the raw JSON object
2. NO markdown code fences (no ```json, no ```), NO text before or after the JSON
3. Output MUST start with { and end with }
4. NO trailing commas in arrays or objects
5. Use proper JSON string escaping: \\n for newlines, \\" for quotes, \\\\ for backslashes

THEOLOGICAL CONTENT POLICY:
You are creating Protestant Christian Bible study materials. This is LEGITIMATE
EDUCATIONAL CONTENT. ALL biblical passages and orthodox doctrines are permitted,
including difficult topics (suffering, judgment, sovereignty, election).
NEVER refuse a biblical passage or orthodox doctrine as "harmful" or "controversial".
If a passage is dense, provide MORE depth and explanation instead.

VALIDATION CHECKPOINT:
Before generating output, verify:
✓ Is the first character { (not backticks or text)?
✓ Is the last character } (not backticks or text)?
✓ Are all strings properly escaped?
✓ Are all required fields present?
✓ Is the entire JSON response complete (no truncation)?"""


@dataclass(frozen=True)
class PromptBlocks:
    """Boilerplate shared by all prompts, injected into the template engine."""

    theological_foundation: str = THEOLOGICAL_FOUNDATION
    json_output_rules: str = JSON_OUTPUT_RULES
    separator: str = SEPARATOR


DEFAULT_BLOCKS = PromptBlocks()


def section(blocks: PromptBlocks, title: str) -> str:
    return f"{blocks.separator}\n{title}\n{blocks.separator}"


def language_block(blocks: PromptBlocks, profile: LanguageProfile) -> str:
    """Language requirements with native script enforcement."""
    return f"""{section(blocks, "LANGUAGE REQUIREMENTS - STRICT ENFORCEMENT")}

PRIMARY LANGUAGE: {profile.name}
{profile.language_instruction}
{profile.complexity_instruction}
Cultural Context: {profile.cultural_context}

NATIVE SCRIPT ENFORCEMENT:
{profile.script_rules}
✓ Prayer closing: "{profile.prayer_closing}"

VOCABULARY: Simple, 5th-6th grade level language that anyone can understand."""


def verse_reference_block(profile: LanguageProfile) -> str:
    examples = ", ".join(f'"{example}"' for example in profile.verse_examples)
    return f"""VERSE REFERENCE FORMAT:
Examples: {examples}
✓ ALL verse references MUST use {profile.verse_script} book names"""


def prayer_format_block(profile: LanguageProfile, sentences: str = "6-8") -> str:
    return f"""PRAYER FORMAT REQUIREMENTS:
1. Structure: [Address God] → [Prayer content based on study] → [Closing]
2. Length: {sentences} complete sentences
3. Person: First-person ("I"/"we"), addressing God directly
4. Tone: Reverent, personal, aligned with study content
5. Closing: "{profile.prayer_closing}"
6. Language: ENTIRE prayer in {profile.name} (including closing)"""


def task_description(request: GenerationRequest, study_label: str) -> str:
    """Opening task line, worded by input type."""
    value = request.input_value
    if request.input_type == "scripture":
        return f'Create a {study_label} for: "{value}"'
    if request.input_type == "topic":
        task = f'Create a {study_label} on: "{value}"'
        if request.topic_description:
            task += f"\n\nContext: {request.topic_description}"
        return task
    return f'Create a {study_label} addressing: "{value}"'


def passage_instruction(profile: LanguageProfile, preferred: str) -> str:
    return (
        "MANDATORY - Scripture reference ONLY, no verse text. "
        f"PREFER {preferred}. Write the reference in {profile.name}. "
        "DO NOT skip this field."
    )


def json_skeleton(fields: Mapping[str, str]) -> str:
    """Render the expected JSON shape with one placeholder per field."""
    lines = [f'  "{name}": {description}' for name, description in fields.items()]
    return "{\n" + ",\n".join(lines) + "\n}"


def verification_block(title: str, checks: list[str]) -> str:
    """Numbered pre-output checklist."""
    numbered = "\n".join(f"{i}. {check}" for i, check in enumerate(checks, start=1))
    return f"""MANDATORY PRE-OUTPUT VERIFICATION FOR {title}:

Before completing your response, COUNT and verify:
{numbered}

IF ANY ANSWER IS "NO" OR OUTSIDE RANGE - YOU MUST FIX IT BEFORE OUTPUT.
DO NOT OUTPUT LITERAL "..." - THESE ARE PLACEHOLDERS. Generate FULL CONTENT for every field."""


def supporting_fields(
    profile: LanguageProfile,
    budget: Mapping[str, object],
    prayer_description: Optional[str] = None,
) -> dict[str, str]:
    """JSON placeholders for the supporting fields written by the last pass."""
    insight_words = budget["insight_words"]
    question_words = budget["question_words"]
    prayer = prayer_description or (
        f"[{budget['prayer_points']} prayer points based on the study, "
        f"each {budget['prayer_words']} words]"
    )
    return {
        "relatedVerses": (
            f"[{budget['related_verses']} Bible verse REFERENCES ONLY in "
            f"{profile.name} for further study - NO verse text]"
        ),
        "reflectionQuestions": (
            f"[{budget['reflection_questions']} reflection questions mixing "
            "understanding and application]"
        ),
        "prayerPoints": prayer,
        "summaryInsights": (
            f"[{budget['insights']} key takeaways - {insight_words} words each]"
        ),
        "interpretationInsights": (
            f"[{budget['insights']} biblical truths taught - {insight_words} words each]"
        ),
        "reflectionAnswers": (
            f"[{budget['insights']} life applications - {insight_words} words each]"
        ),
        "contextQuestion": '"[Yes/no question connecting biblical context to modern life]"',
        "summaryQuestion": f'"[Question about the key message - {question_words} words]"',
        "relatedVersesQuestion": (
            f'"[Question encouraging scripture study - {question_words} words]"'
        ),
        "reflectionQuestion": (
            f'"[Application question for reflection - {question_words} words]"'
        ),
        "prayerQuestion": (
            f'"[Invitation question encouraging response - '
            f'{budget.get("prayer_question_words", question_words)} words]"'
        ),
    }


def supporting_checks(profile: LanguageProfile, budget: Mapping[str, object]) -> list[str]:
    return [
        f'Does "relatedVerses" contain {budget["related_verses"]} references in {profile.name}? [Count: ___]',
        f'Does "reflectionQuestions" contain {budget["reflection_questions"]} questions? [Count: ___]',
        f'Are the three insight lists {budget["insights"]} items of {budget["insight_words"]} words each? [Count: ___]',
        "Are all five orientation questions present and non-empty? [Check: Yes/No]",
    ]
