"""Standard study prompts: two passes, teaching then application."""

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
        "summary": "80-100",
        "summary_sentences": "5-6",
        "context": "40-60",
        "related_verses": "5-7",
        "reflection_questions": "5-7",
        "prayer_points": "3-5",
        "prayer_words": "40-50",
        "insights": "4-5",
        "insight_words": "15-20",
        "question_words": "12-18",
        "prayer_question_words": "10-15",
    },
    COMPACT: {
        "summary": "60-80",
        "summary_sentences": "4-5",
        "context": "30-40",
        "related_verses": "4-5",
        "reflection_questions": "4-5",
        "prayer_points": "3",
        "prayer_words": "30-40",
        "insights": "3-4",
        "insight_words": "12-15",
        "question_words": "10-15",
        "prayer_question_words": "8-12",
    },
}

ROLE = "You are a Bible teacher creating balanced, accessible study guides."


def build_pass1(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name

    system_message = ctx.system_message(
        ROLE,
        f"""{ctx.mode_line("STANDARD STUDY")}
This is part 1 of a multi-pass standard study generation. Focus on solid teaching.
Tone: Clear, accessible, biblically grounded, practical.""",
    )

    checks = verification_block(
        "PASS 1",
        [
            f'Does "summary" have {budget["summary"]} words? [Count: ___]',
            f'Does "context" have {budget["context"]} words? [Count: ___]',
            'Does "passage" contain ONLY the Scripture reference? [Yes/No]',
            f'Does "{spec.interpretation_field}" follow: {spec.structure}? [Count: ___]',
            f'Is "{spec.interpretation_field}" {ctx.target} words? [Estimated count: ___]',
            f"Are all verse references in {language}? [Yes/No]",
        ],
    )

    fields = {
        "summary": f'"[{budget["summary"]} words: Study title, key message, main takeaways, practical focus]"',
        "context": f'"[{budget["context"]} words: MINIMAL - necessary biblical background only]"',
        "passage": f'"{passage_instruction(ctx.profile, "LONGER PASSAGES (10-20+ verses)")}"',
        spec.interpretation_field: (
            f'"[{ctx.target} words: MAIN TEACHING with verse explanation, key principles, '
            'theological insights, biblical connections]"'
        ),
    }

    user_message = f"""{ctx.opening("STANDARD STUDY")}

{section(ctx.blocks, "PASS 1: STANDARD STUDY FOUNDATION (Summary + Context + Teaching)")}

Generate the following JSON structure with THESE SPECIFIC FIELDS ONLY:

{json_skeleton(fields)}

**SUMMARY ({budget["summary"]} words):**
Write a clear overview as ONE flowing paragraph of {budget["summary_sentences"]} sentences.
Open with a 4-6 word study title, explain the core biblical truth, then the main
takeaways and how this applies to daily life. Write ENTIRELY in {language}.

**CONTEXT ({budget["context"]} words):**
Minimal biblical background: authorship, date, original audience, literary setting.

**{spec.interpretation_field.upper()} - MAIN TEACHING ({ctx.target} words):**
Structure: {spec.structure}.
A sentence ends with a period, question mark or exclamation point. Count as you write.

## Paragraph 1: Verse Explanation
What the passage says, what it meant in its original context, why it matters,
key words explained, cross-references to related passages.

## Paragraph 2: Key Principles & Theological Insights
Two or three timeless principles, what they reveal about God's character, and
how they point to the gospel and Christ.

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


def build_pass2(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name

    system_message = ctx.system_message(
        "You are a Bible teacher completing a balanced, accessible study guide.",
        f"""{ctx.mode_line("STANDARD STUDY")}
This is part 2 of a 2-part standard study generation. Focus on practical life change.
Continue the clear, practical, biblically grounded tone.""",
    )

    checks = verification_block(
        "PASS 2",
        [
            f'Does "{spec.interpretation_field}" follow: {spec.structure}? [Count: ___]',
            f'Is "{spec.interpretation_field}" {ctx.target} words? [Estimated count: ___]',
            f'Does "prayerPoints" contain {budget["prayer_points"]} points of {budget["prayer_words"]} words? [Count: ___]',
            *supporting_checks(ctx.profile, budget),
            f"Are all verse references in {language}? [Yes/No]",
        ],
    )

    fields = {
        spec.interpretation_field: (
            f'"[{ctx.target} words: PRACTICAL APPLICATION with life transformation '
            'and specific action steps]"'
        ),
        **supporting_fields(ctx.profile, budget),
    }

    user_message = f"""{section(ctx.blocks, "PASS 2: STANDARD STUDY APPLICATION (Life Application + Resources)")}

CONTEXT FROM PASS 1:
- Study Summary: {ctx.prior_summary()}
- Passage: {ctx.prior_passage()}
- You already wrote: Main teaching and key principles in Pass 1

NOW COMPLETE THE STUDY with practical application and supporting resources.

Generate this JSON structure ({spec.interpretation_field} MUST be FIRST):

{json_skeleton(fields)}

**{spec.interpretation_field.upper()} - PRACTICAL APPLICATION ({ctx.target} words):**
Structure: {spec.structure}.

## Paragraph 1: Life Transformation
Personal growth, relationships, mindset shifts and behavioral changes, with examples
from home, work and community.

## Paragraph 2: Specific Action Steps
Concrete steps for the next 7 days: with God, with others, in challenges.

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


BUILDERS = {1: build_pass1, 2: build_pass2}
