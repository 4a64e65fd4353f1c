"""Lectio Divina prompts: reading and meditation, then prayer and rest."""

from src.services.study_generator.budgets import COMPACT, FULL
from src.services.study_generator.prompts.base import PromptContext, PromptPair
from src.services.study_generator.prompts.blocks import (
    json_skeleton,
    passage_instruction,
    prayer_format_block,
    section,
    supporting_checks,
    supporting_fields,
    verification_block,
)

BUDGETS = {
    FULL: {
        "summary": "250-300",
        "summary_sentences": "8-12",
        "context": "50-80",
        "related_verses": "5-7",
        "reflection_questions": "5-7",
        "prayer_points": "4-5",
        "prayer_words": "50-70",
        "insights": "4-5",
        "insight_words": "15-20",
        "question_words": "12-18",
        "prayer_question_words": "10-15",
    },
    COMPACT: {
        "summary": "120-150",
        "summary_sentences": "5-7",
        "context": "30-40",
        "related_verses": "4-5",
        "reflection_questions": "4-5",
        "prayer_points": "3-4",
        "prayer_words": "35-45",
        "insights": "3-4",
        "insight_words": "12-15",
        "question_words": "10-15",
        "prayer_question_words": "8-12",
    },
}

CONTEMPLATIVE_TONE = """\
CONTEMPLATIVE DEPTH REQUIREMENTS (MANDATORY):
- MAINTAIN a gentle, invitational tone throughout (never rushed or prescriptive)
- INVITE personal encounter with God through Scripture, not just information
- EMPHASIZE the Holy Spirit's role in illumination and transformation"""


def build_pass1(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name
    field = spec.interpretation_field

    if ctx.request.input_type == "scripture":
        summary_focus = (
            f"include the passage text in {language} for slow, meditative reading, "
            "then what God speaks through these words"
        )
    else:
        summary_focus = "the central spiritual truth God reveals through this theme"

    system_message = ctx.system_message(
        "You are a spiritual director guiding believers through Lectio Divina.",
        f"""{ctx.mode_line("LECTIO DIVINA")}
This is part 1 of a multi-pass contemplative study. Focus on reading and meditation.
Tone: Gentle, contemplative, invitational.""",
    )

    fields = {
        "summary": (
            f'"[{budget["summary"]} words: invitational title, central spiritual '
            'message, contemplative focus, invitation to encounter]"'
        ),
        "context": f'"[{budget["context"]} words: gentle introduction to the practice]"',
        "passage": f'"{passage_instruction(ctx.profile, "a focused passage of 5-12 verses")}"',
        field: f'"[{ctx.target} words: LECTIO (sacred reading) and MEDITATIO (meditation)]"',
    }

    checks = verification_block(
        "PASS 1",
        [
            f'Does "summary" have {budget["summary"]} words? [Count: ___]',
            f'Does "context" have {budget["context"]} words? [Count: ___]',
            'Does "passage" contain ONLY the Scripture reference (5-12 verses)? [Yes/No]',
            f'Does "{field}" follow: {spec.structure}? [Check: Yes/No]',
            f'Is "{field}" {ctx.target} words? [Estimated count: ___]',
            "Is the tone contemplative, gentle and invitational? [Yes/No]",
        ],
    )

    user_message = f"""{ctx.opening("LECTIO DIVINA study")}

{section(ctx.blocks, "PASS 1: LECTIO DIVINA (Summary + Context + Lectio + Meditatio)")}

Generate the following JSON structure with THESE SPECIFIC FIELDS ONLY:

{json_skeleton(fields)}

**SUMMARY ({budget["summary"]} words):**
ONE flowing paragraph of {budget["summary_sentences"]} sentences. Begin with an
invitational 4-6 word title, then {summary_focus}, and close with an invitation
to deeper communion with God. Write ENTIRELY in {language}.

**CONTEXT ({budget["context"]} words):**
Explain Lectio Divina as prayerful Scripture reading and how to prepare the heart:
silence, openness, dependence on the Holy Spirit.

**{field.upper()} - LECTIO & MEDITATIO ({ctx.target} words):**
Structure: {spec.structure}.

{CONTEMPLATIVE_TONE}

## LECTIO: Sacred Reading
First reading (listening), second reading (noticing a word or phrase),
third reading (receiving what God is saying).

## MEDITATIO: Meditation
Verse-by-verse meditation, personal encounter prompts, listening to the Holy Spirit.

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


def build_pass2(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name
    field = spec.interpretation_field

    system_message = ctx.system_message(
        "You are a spiritual director completing a Lectio Divina guide.",
        f"""{ctx.mode_line("LECTIO DIVINA")}
This is part 2 of a 2-part contemplative study. Focus on prayer and rest in God.
Continue the gentle, contemplative tone.""",
    )

    fields = {
        field: f'"[{ctx.target} words: ORATIO (prayer response) and CONTEMPLATIO (contemplative rest)]"',
        **supporting_fields(ctx.profile, budget),
    }

    checks = verification_block(
        "PASS 2",
        [
            f'Does "{field}" follow: {spec.structure}? [Check: Yes/No]',
            f'Is "{field}" {ctx.target} words? [Estimated count: ___]',
            f'Does "prayerPoints" contain {budget["prayer_points"]} prayer themes of {budget["prayer_words"]} words? [Count: ___]',
            "Are reflection questions gentle and prayerful, not analytical? [Yes/No]",
            *supporting_checks(ctx.profile, budget),
            f"Are all verse references in {language}? [Yes/No]",
        ],
    )

    user_message = f"""{section(ctx.blocks, "PASS 2: LECTIO DIVINA (Oratio + Contemplatio + Resources)")}

CONTEXT FROM PASS 1:
- Study Summary: {ctx.prior_summary()}
- Passage: {ctx.prior_passage()}
- You already wrote: Lectio (sacred reading) and Meditatio (meditation)

NOW COMPLETE THE GUIDE with prayer, contemplation and supporting resources.

Generate this JSON structure ({field} MUST be FIRST):

{json_skeleton(fields)}

**{field.upper()} - ORATIO & CONTEMPLATIO ({ctx.target} words):**
Structure: {spec.structure}.

## ORATIO: Prayer Response
Conversational prayer flowing from the meditation, then intercession and surrender.

## CONTEMPLATIO: Contemplative Rest
Silence, abiding in God's presence, and carrying the word into the day.

{prayer_format_block(ctx.profile, "5-7")}

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


BUILDERS = {1: build_pass1, 2: build_pass2}
