"""Exceptions raised while generating a study guide."""

from typing import Optional


class StudyGenerationError(Exception):
    """Base exception for a failed study generation."""

    def __init__(self, message: str, pass_index: Optional[int] = None):
        super().__init__(message)
        self.pass_index = pass_index


class TemplateError(StudyGenerationError):
    """Raised when a request cannot be turned into prompts (unknown study mode)."""

    pass


class LLMCallError(StudyGenerationError):
    """Raised when the provider call for a pass fails or times out."""

    pass


class ParseError(StudyGenerationError):
    """Raised when a pass response cannot be coerced into a JSON object."""

    pass


class ValidationError(StudyGenerationError):
    """Raised when a parsed pass response lacks a mandatory field."""

    def __init__(
        self,
        message: str,
        pass_index: Optional[int] = None,
        missing_fields: Optional[list[str]] = None,
    ):
        super().__init__(message, pass_index)
        self.missing_fields = missing_fields or []


class GenerationCancelledError(StudyGenerationError):
    """Raised when the caller cancels a generation between passes."""

    pass


# Errors worth re-running the whole pass sequence for
RETRYABLE_ERRORS = (LLMCallError, ParseError, ValidationError)
