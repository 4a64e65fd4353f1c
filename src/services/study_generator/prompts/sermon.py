"""Sermon outline prompts: four passes, one per sermon movement."""

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
        "summary": "250-350",
        "summary_sentences": "8-12",
        "context": "50-100",
        "introduction": "450-550",
        "hook": "120-150",
        "bridge": "180-220",
        "preview": "100-120",
        "transition": "50-70",
        "main_teaching": "350-450",
        "scripture": "300-350",
        "key_verses": "2-3",
        "illustration": "150-200",
        "application": "180-220",
        "applications": "3-4",
        "point_summary": "80-100",
        "gospel_climax": "100-120",
        "altar_call": "300-400",
        "gospel_recap": "120-150",
        "invitation": "120-150",
        "response_options": "4-5",
        "closing_prayer": "60-80",
        "related_verses": "5-7",
        "reflection_questions": "5-7",
        "insights": "5",
        "insight_words": "15-20",
        "question_words": "10-15",
        "prayer_question_words": "8-12",
    },
    COMPACT: {
        "summary": "100-130",
        "summary_sentences": "4-5",
        "context": "30-40",
        "introduction": "150-200",
        "hook": "40-50",
        "bridge": "60-80",
        "preview": "30-40",
        "transition": "20-30",
        "main_teaching": "100-120",
        "scripture": "80-100",
        "key_verses": "2",
        "illustration": "40-50",
        "application": "40-50",
        "applications": "2",
        "point_summary": "50-60",
        "gospel_climax": "70-90",
        "altar_call": "180-220",
        "gospel_recap": "70-90",
        "invitation": "60-80",
        "response_options": "3-4",
        "closing_prayer": "40-50",
        "related_verses": "3-4",
        "reflection_questions": "3-4",
        "insights": "3",
        "insight_words": "12-15",
        "question_words": "10-15",
        "prayer_question_words": "8-12",
    },
}

ROLE = "You are an experienced preacher creating sermon outlines for pastors."

PREACHER_FACING = """\
PREACHER-FACING EXPLANATION REQUIREMENTS (MANDATORY):
- PROVIDE CORE theological content and conceptual ideas (not a full manuscript)
- CONCEPTUAL illustrations (the idea, not the full story with dialogue)
- FOCUSED applications; pastors will expand this during live delivery"""


def sermon_format(ctx: PromptContext) -> str:
    if ctx.request.input_type == "scripture":
        return "EXPOSITORY sermon outline"
    return "TOPICAL (3-Point) sermon outline"


def point_outline(ctx: PromptContext, number: int) -> str:
    """Sub-sections every sermon point follows."""
    budget = ctx.budget
    h = ctx.headings
    return f"""## {h["point"]} {number}: [Memorable Title]

**{h["mainTeaching"]}** ({budget["main_teaching"]} words): core theological exposition,
key biblical terms defined, connection to Christ's person and work.

**{h["scriptureFoundation"]}** ({budget["scripture"]} words): {budget["key_verses"]} key verses
in {ctx.language_name}, each with its context, meaning and connection to this point.

**{h["illustration"]}** (conceptual, {budget["illustration"]} words): the type of story or
example that works and how it connects to the doctrinal truth.

**{h["application"]}** ({budget["application"]} words): {budget["applications"]} focused
applications for heart and life.

**{h["transition"]}** ({budget["transition"]} words): one paragraph bridging to what follows."""


def middle_system(ctx: PromptContext, focus: str) -> str:
    return ctx.system_message(
        "You are an experienced preacher continuing a sermon outline for pastors.",
        f"""{ctx.mode_line("SERMON OUTLINE")}
This is part {ctx.pass_spec.index} of a {ctx.pass_spec.total}-part PREACHER-FACING EXPLANATION. {focus}
Tone: Theologically rich, pastorally wise, suitable for preacher preparation.""",
    )


def build_pass1(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    language = ctx.language_name
    field = spec.interpretation_field
    h = ctx.headings

    system_message = ctx.system_message(
        ROLE,
        f"""{ctx.mode_line("SERMON OUTLINE")}
This is part 1 of a {spec.total}-part PREACHER-FACING EXPLANATION (not a full manuscript).
Tone: Theologically rich, pastorally wise, suitable for preacher preparation.""",
    )

    fields = {
        "summary": (
            f'"[{budget["summary"]} words: Sermon title, thesis statement, hook preview, '
            'key question, gospel connection]"'
        ),
        "context": f'"[{budget["context"]} words: essential Scripture background only]"',
        "passage": f'"{passage_instruction(ctx.profile, "LONGER PASSAGES (10-20+ verses)")}"',
        field: (
            f'"[{ctx.target} words: {h["introduction"]} ({budget["introduction"]} words) '
            f'+ {h["point"]} 1]"'
        ),
    }

    checks = verification_block(
        "PASS 1",
        [
            f'Does "summary" have {budget["summary"]} words? [Count: ___]',
            f'Does "context" have {budget["context"]} words? [Count: ___]',
            'Does "passage" contain ONLY the Scripture reference? [Yes/No]',
            f'Does "{field}" include the {h["introduction"]} (hook, bridge, preview, transition)? [Yes/No]',
            f'Does "{field}" include {h["point"]} 1 with every sub-section? [Yes/No]',
            f'Is "{field}" {ctx.target} words total? [Estimated count: ___]',
            f"Are all verse references in {language}? [Yes/No]",
        ],
    )

    user_message = f"""{ctx.opening(sermon_format(ctx))}

{section(ctx.blocks, "PASS 1: SERMON FOUNDATION (Summary + Context + Passage + Intro + Point 1)")}

Generate the following JSON structure with THESE SPECIFIC FIELDS ONLY:

{json_skeleton(fields)}

**SUMMARY ({budget["summary"]} words):**
ONE flowing paragraph of {budget["summary_sentences"]} sentences: a 3-6 word sermon title,
the thesis, a preview of the hook, the central question, and how the message points
to Christ. Write ENTIRELY in {language}.

**CONTEXT ({budget["context"]} words):**
Authorship, date, audience, genre and the theological framework of the text.

**{field.upper()} ({ctx.target} words):**
You MUST write BOTH the {h["introduction"]} AND {h["point"]} 1 in this field.

{PREACHER_FACING}

## {h["introduction"]} ({budget["introduction"]} words)

**Hook** ({budget["hook"]} words): a real-life tension, question or cultural moment.
**Bridge** ({budget["bridge"]} words): life, then text, then the gospel theme.
**Preview** ({budget["preview"]} words): the thesis and the titles of all 3 points.
**{h["transition"]}** ({budget["transition"]} words): bridge to {h["point"]} 1.

{point_outline(ctx, 1)}

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


def _build_point(ctx: PromptContext, number: int) -> PromptPair:
    spec = ctx.pass_spec
    field = spec.interpretation_field
    h = ctx.headings

    system_message = middle_system(ctx, f"Focus on {h['point']} {number} only.")

    checks = verification_block(
        f"PASS {spec.index}",
        [
            f'Does "{field}" contain ONLY {h["point"]} {number}? [Yes/No]',
            f'Does {h["point"]} {number} include every sub-section? [Yes/No]',
            f'Is "{field}" {ctx.target} words? [Estimated count: ___]',
            f"Are all verse references in {ctx.language_name}? [Yes/No]",
        ],
    )

    header = section(ctx.blocks, f"PASS {spec.index}: {h['point']} {number}".upper())
    skeleton = json_skeleton(
        {field: f'"[{ctx.target} words: {h["point"]} {number} of the sermon]"'}
    )

    user_message = f"""{header}

CONTEXT FROM EARLIER PASSES:
- Sermon Summary: {ctx.prior_summary()}
- Passage: {ctx.prior_passage()}
- You already wrote: the {h["introduction"]} and the earlier points

Generate this JSON structure:

{skeleton}

{PREACHER_FACING}

{point_outline(ctx, number)}

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


def build_pass2(ctx: PromptContext) -> PromptPair:
    return _build_point(ctx, 2)


def build_pass3(ctx: PromptContext) -> PromptPair:
    return _build_point(ctx, 3)


def build_pass4(ctx: PromptContext) -> PromptPair:
    budget = ctx.budget
    spec = ctx.pass_spec
    field = spec.interpretation_field
    h = ctx.headings

    system_message = middle_system(
        ctx, "Provide the CORE conclusion and altar call outline that preachers will expand."
    )

    altar_call = (
        f'["[{budget["altar_call"]} word ALTAR CALL OUTLINE as a SINGLE STRING: '
        f'{h["gospelRecap"]}, {h["theInvitation"]}, {h["responseOptions"]}, '
        f'{h["closingPrayer"]}]"]'
    )
    # Conclusion is written last
    fields = {
        **supporting_fields(ctx.profile, budget, prayer_description=altar_call),
        field: (
            f'"[{ctx.target} words: {h["conclusion"]} with summaries of all 3 points '
            "and a gospel climax]\""
        ),
    }

    checks = verification_block(
        f"PASS {spec.index}",
        [
            f'Does "{field}" have the {h["conclusion"]} in 4 paragraphs? [Yes/No]',
            f'Is "{field}" {ctx.target} words? [Estimated count: ___]',
            f'Is "prayerPoints" ONE string of {budget["altar_call"]} words with all four parts? [Yes/No]',
            *supporting_checks(ctx.profile, budget),
        ],
    )

    header = section(
        ctx.blocks, f"PASS {spec.index}: CONCLUSION + ALTAR CALL + SUPPORTING MATERIALS"
    )

    user_message = f"""{header}

CONTEXT FROM EARLIER PASSES:
- Sermon Summary: {ctx.prior_summary()}
- Passage: {ctx.prior_passage()}
- You already wrote: the {h["introduction"]} and all 3 points

NOW COMPLETE THE SERMON with conclusion, altar call and supporting materials.

Generate this JSON structure ({field} MUST be LAST):

{json_skeleton(fields)}

**{field.upper()} - {h["conclusion"]} ({ctx.target} words):**
- Summary of {h["point"]} 1 ({budget["point_summary"]} words)
- Summary of {h["point"]} 2 ({budget["point_summary"]} words), building on the first
- Summary of {h["point"]} 3 ({budget["point_summary"]} words), uniting all points
- Gospel climax ({budget["gospel_climax"]} words): tie everything to Christ's finished work

**PRAYER POINTS - ALTAR CALL ({budget["altar_call"]} words as a single string):**
**{h["gospelRecap"]}** ({budget["gospel_recap"]} words): God's holiness and our sin,
Christ's death and resurrection, the call to repentance and faith.
**{h["theInvitation"]}** ({budget["invitation"]} words): a direct invitation with urgency and grace.
**{h["responseOptions"]}**: {budget["response_options"]} clear ways to respond.
**{h["closingPrayer"]}** ({budget["closing_prayer"]} words): first-person prayer ending with
"{ctx.profile.prayer_closing}".

{checks}

OUTPUT ONLY THIS JSON - NO OTHER TEXT."""

    return PromptPair(system_message, user_message)


BUILDERS = {1: build_pass1, 2: build_pass2, 3: build_pass3, 4: build_pass4}
