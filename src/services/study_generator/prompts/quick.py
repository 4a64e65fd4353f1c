"""Quick read prompt: one call that writes every field."""

from src.services.study_generator.budgets import COMPACT, FULL
from src.services.study_generator.prompts.base import PromptContext, PromptPair
from src.services.study_generator.prompts.blocks import (
    json_skeleton,
    passage_instruction,
    prayer_format_block,
    verification_block,
)

BUDGETS = {
    FULL: {
        "summary": 60,
        "context": 70,
        "prayer": 80,
        "items": 3,
        "insight_words": "8-12",
        "question_words": "6-10",
        "prayer_question_words": "5-8",
    },
    COMPACT: {
        "summary": 50,
        "context": 70,
        "prayer": 65,
        "items": 3,
        "insight_words": "8-12",
        "question_words": "6-10",
        "prayer_question_words": "5-8",
    },
}


def build_pass1(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name
    items = budget["items"]
    max_words = spec.target_words.high

    word_target = ctx.profile.word_target("quick")
    mode_line = ctx.mode_line(f"QUICK READ (3 minutes = {word_target} words)")

    system_message = ctx.system_message(
        "You are a biblical scholar creating CONCISE but SUBSTANTIAL Bible studies "
        "for busy readers.",
        f"""{mode_line}
Reading-with-understanding speed: 140-160 words/minute.
Tone: Direct, warm, immediately actionable, theologically sound.""",
    )

    fields = {
        "summary": f'"[Main message in 3-4 sentences, MAX {budget["summary"]} words]"',
        "context": f'"[Essential background, MAX {budget["context"]} words, ONE brief paragraph]"',
        "passage": f'"{passage_instruction(ctx.profile, "LONGER PASSAGES (10-20+ verses)")}"',
        "interpretation": f'"[{spec.structure}. MAX {max_words} words. NO headings, NO bullets]"',
        "relatedVerses": f'["EXACTLY {items} verse REFERENCES ONLY in {language}"]',
        "reflectionQuestions": f'["EXACTLY {items} practical application questions"]',
        "prayerPoints": f'["4-5 sentences addressing God directly, MAX {budget["prayer"]} words"]',
        "summaryInsights": f'["EXACTLY {items} key themes ({budget["insight_words"]} words each)"]',
        "interpretationInsights": (
            f'["EXACTLY {items} theological insights ({budget["insight_words"]} words each)"]'
        ),
        "reflectionAnswers": f'["EXACTLY {items} life applications ({budget["insight_words"]} words each)"]',
        "contextQuestion": '"[Yes/no question connecting context to modern life]"',
        "summaryQuestion": f'"[Brief question ({budget["question_words"]} words)]"',
        "relatedVersesQuestion": f'"[Verse question ({budget["question_words"]} words)]"',
        "reflectionQuestion": f'"[Application question ({budget["question_words"]} words)]"',
        "prayerQuestion": f'"[Prayer prompt ({budget["prayer_question_words"]} words)]"',
    }

    checks = verification_block(
        "QUICK READ",
        [
            f'"summary" is at most {budget["summary"]} words? [Count: ___]',
            f'"interpretation" follows: {spec.structure}? [Yes/No]',
            f'"interpretation" is at most {max_words} words? [Count: ___]',
            f'"context" is at most {budget["context"]} words? [Count: ___]',
            f'"prayerPoints" is 4-5 sentences and at most {budget["prayer"]} words? [Count: ___]',
            f'"relatedVerses" and "reflectionQuestions" have EXACTLY {items} items? [Count: ___]',
            f"All three insight arrays have EXACTLY {items} items? [Count: ___]",
            "All 15 fields present? [Yes/No]",
        ],
    )

    user_message = f"""{ctx.opening("3-MINUTE quick study")}

STRICT WORD COUNT ENFORCEMENT - QUICK READ MODE
TARGET: {word_target} words TOTAL.

CONTENT STRUCTURE (ALL 15 FIELDS MANDATORY):
{json_skeleton(fields)}

{prayer_format_block(ctx.profile, "4-5")}

CRITICAL FORMATTING:
✓ Continuous narrative prose (NO headings, NO bullets)
✓ Separate paragraphs with double newline (\\n\\n)
✓ Focus on ONE central truth
✓ Brevity is paramount

{checks}

OUTPUT: Valid JSON starting with {{ and ending with }}"""

    return PromptPair(system_message, user_message)


BUILDERS = {1: build_pass1}
