"""Pydantic models for the study generator service."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

InputType = Literal["scripture", "topic", "question"]

STUDY_MODES = ("quick", "standard", "deep", "lectio", "sermon")

# A parsed pass response: field name -> text or list of texts
PassResult = dict[str, "str | list[str]"]


class GenerationRequest(BaseModel):
    """One user-facing request for a study guide."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    input_type: InputType
    input_value: str = Field(min_length=1, max_length=500)
    topic_description: Optional[str] = Field(default=None, max_length=1000)
    language: str = "en"
    # Unknown modes are rejected by the orchestrator, not here
    study_mode: str = "standard"

    @field_validator("language", "study_mode")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("topic_description")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class ContentDocument(BaseModel):
    """The merged study guide produced by one successful generation."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    summary: str = Field(min_length=1)
    interpretation: str = Field(min_length=1)
    context: str = Field(min_length=1)
    passage: str = Field(min_length=1)
    related_verses: list[str] = Field(min_length=1)
    reflection_questions: list[str] = Field(min_length=1)
    prayer_points: list[str] = Field(min_length=1)
    summary_insights: list[str] = Field(min_length=1)
    interpretation_insights: list[str] = Field(min_length=1)
    reflection_answers: list[str] = Field(min_length=1)
    context_question: str = Field(min_length=1)
    summary_question: str = Field(min_length=1)
    related_verses_question: str = Field(min_length=1)
    reflection_question: str = Field(min_length=1)
    prayer_question: str = Field(min_length=1)


class GenerateStudyResponse(BaseModel):
    """Response model for study generation."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    study_guide: ContentDocument
    cached: bool
    cache_key: str
    study_mode: str
    language: str
    generated_at: datetime


class StudyModeInfo(BaseModel):
    """Description of one study mode and its pass layout."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    mode: str
    passes: int
    word_target: str
    pass_fields: list[list[str]]
