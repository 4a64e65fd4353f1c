"""Deep dive prompts: exegesis and theology, then application."""

from src.services.study_generator.budgets import COMPACT, FULL
from src.services.study_generator.prompts.base import PromptContext, PromptPair
from src.services.study_generator.prompts.blocks import (
    json_skeleton,
    passage_instruction,
    section,
    supporting_checks,
    supporting_fields,
    verification_block,
)

BUDGETS = {
    FULL: {
        "summary": "180-220",
        "summary_sentences": "8-10",
        "context": "60-100",
        "related_verses": "7-10",
        "reflection_questions": "8-12",
        "prayer_points": "5-7",
        "prayer_words": "40-60",
        "insights": "5-7",
        "insight_words": "15-20",
        "question_words": "12-18",
        "prayer_question_words": "10-15",
    },
    COMPACT: {
        "summary": "100-130",
        "summary_sentences": "5-6",
        "context": "40-60",
        "related_verses": "5-6",
        "reflection_questions": "5-6",
        "prayer_points": "4-5",
        "prayer_words": "30-40",
        "insights": "4-5",
        "insight_words": "12-15",
        "question_words": "10-15",
        "prayer_question_words": "8-12",
    },
}

SCHOLARLY_DEPTH = """\
SCHOLARLY DEPTH REQUIREMENTS (MANDATORY):
- INCLUDE original language insights (Hebrew/Greek words, grammar, syntax)
- REFERENCE historical theologians and biblical scholars where relevant
- CONNECT to systematic theology and biblical theology frameworks
- PROVIDE cross-references with exegetical analysis
- DEMONSTRATE the grammatical-historical method"""


def build_pass1(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name
    field = spec.interpretation_field

    system_message = ctx.system_message(
        "You are a biblical scholar creating in-depth Bible studies with word studies "
        "and theological analysis.",
        f"""{ctx.mode_line("DEEP DIVE")}
This is part 1 of a multi-pass deep study generation. Focus on exegesis and theology.
Tone: Scholarly yet accessible, reverent, precise.""",
    )

    fields = {
        "summary": (
            f'"[{budget["summary"]} words: Study title, central theme, key questions, '
            'theological significance, study objectives]"'
        ),
        "context": f'"[{budget["context"]} words: essential theological and biblical framing]"',
        "passage": (
            f'"{passage_instruction(ctx.profile, "LONGER passages with rich theological content")}"'
        ),
        field: (
            f'"[{ctx.target} words: COMPREHENSIVE EXEGETICAL ANALYSIS with original '
            'language insights, theological interpretation, doctrinal implications]"'
        ),
    }

    checks = verification_block(
        "PASS 1",
        [
            f'Does "summary" have {budget["summary"]} words ({budget["summary_sentences"]} sentences)? [Count: ___]',
            f'Does "context" have {budget["context"]} words? [Count: ___]',
            'Does "passage" contain ONLY the Scripture reference? [Yes/No]',
            f'Does "{field}" follow: {spec.structure}? [Check: Yes/No]',
            f'Is "{field}" {ctx.target} words? [Estimated count: ___]',
            "Are original language words explained in plain terms? [Yes/No]",
            f"Are all verse references in {language}? [Yes/No]",
        ],
    )

    user_message = f"""{ctx.opening("DEEP DIVE STUDY with word studies")}

{section(ctx.blocks, "PASS 1: DEEP STUDY FOUNDATION (Summary + Context + Analysis)")}

Generate the following JSON structure with THESE SPECIFIC FIELDS ONLY:

{json_skeleton(fields)}

**SUMMARY ({budget["summary"]} words):**
ONE flowing paragraph of {budget["summary_sentences"]} sentences: open with a 4-6 word
study title, then the central theme, the key questions this study answers, its
theological significance and what learners will gain. Write ENTIRELY in {language}.

**CONTEXT ({budget["context"]} words):**
Authorship, date, original audience, literary genre and the passage's place in
redemptive history.

**{field.upper()} ({ctx.target} words):**
Structure: {spec.structure}.

{SCHOLARLY_DEPTH}

## Section 1: Verse-by-Verse Exegesis
Key Hebrew/Greek words with their meaning, grammar and syntax, literary devices,
cross-references and historical-cultural background.

## Section 2: Theological Interpretation
What the passage teaches about God, about Christ and about salvation.

## Section 3: Doctrinal Implications
The orthodox reading, how the church has understood it, and errors to avoid.

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


def build_pass2(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name
    field = spec.interpretation_field

    system_message = ctx.system_message(
        "You are a biblical scholar completing an in-depth Bible study.",
        f"""{ctx.mode_line("DEEP DIVE")}
This is part 2 of a 2-part deep study generation. Focus on transformed living.
Continue the scholarly yet accessible tone.""",
    )

    fields = {
        field: (
            f'"[{ctx.target} words: PRACTICAL APPLICATION grounded in the exegesis '
            'of Pass 1]"'
        ),
        **supporting_fields(ctx.profile, budget),
    }

    checks = verification_block(
        "PASS 2",
        [
            f'Does "{field}" follow: {spec.structure}? [Check: Yes/No]',
            f'Is "{field}" {ctx.target} words? [Estimated count: ___]',
            f'Does "prayerPoints" contain {budget["prayer_points"]} points of {budget["prayer_words"]} words? [Count: ___]',
            *supporting_checks(ctx.profile, budget),
            f"Are all verse references in {language}? [Yes/No]",
        ],
    )

    user_message = f"""{section(ctx.blocks, "PASS 2: DEEP STUDY APPLICATION (Transformation + Resources)")}

CONTEXT FROM PASS 1:
- Study Summary: {ctx.prior_summary()}
- Passage: {ctx.prior_passage()}
- You already wrote: Verse-by-verse exegesis, theological interpretation and doctrinal implications

NOW COMPLETE THE STUDY with application and supporting resources.

Generate this JSON structure ({field} MUST be FIRST):

{json_skeleton(fields)}

**{field.upper()} - PRACTICAL APPLICATION ({ctx.target} words):**
Structure: {spec.structure}.

## Section 1: Life Transformation
Inner transformation of heart and mind, then its outward expression in
relationships and conduct.

## Section 2: Contemporary Relevance
How this truth answers the questions and pressures of today's culture.

## Section 3: Spiritual Disciplines & Action Steps
Specific practices (Scripture, prayer, fellowship, service) for the coming week.

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


BUILDERS = {1: build_pass1, 2: build_pass2}
