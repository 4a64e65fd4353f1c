"""Parsing, repair and sanitization of LLM JSON responses."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from src.services.study_generator.errors import ParseError

logger = logging.getLogger(__name__)

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_TRAILING_COMMA = re.compile(r",\s*$")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_ANGLE_BRACKETS = re.compile(r"[<>]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParseOutcome:
    """Result of coercing one response into a JSON object."""

    value: Optional[dict[str, Any]]
    error: Optional[str] = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.value is not None


def clean_json_response(text: str) -> str:
    """Trim and strip a surrounding markdown code fence."""
    cleaned = (text or "").strip()
    cleaned = _FENCE_START.sub("", cleaned)
    cleaned = _FENCE_END.sub("", cleaned)
    return cleaned.strip()


def extract_json_object(text: str) -> str:
    """
    Take the span from the first '{' to the last '}'.

    A response cut off before its closing brace yields the tail from the
    first '{' so it can still be repaired.
    """
    match = _JSON_OBJECT.search(text)
    if match:
        return match.group(0)
    start = text.find("{")
    if start >= 0:
        return text[start:]
    return text


def repair_truncated_json(text: str) -> str:
    """
    Close a JSON document that was cut off mid-output.

    Closes an odd trailing quote on the last line, drops a trailing comma,
    then appends ']' and '}' until bracket and brace counts balance. Text
    that already parses is returned unchanged. Cannot repair a cut inside
    a key or several structural defects at once.
    """
    if _is_valid_json(text):
        return text

    repaired = text
    open_braces = repaired.count("{")
    close_braces = repaired.count("}")
    open_brackets = repaired.count("[")
    close_brackets = repaired.count("]")

    last_line = repaired.split("\n")[-1]
    if last_line.count('"') % 2 == 1:
        repaired += '"'

    repaired = _TRAILING_COMMA.sub("", repaired)
    repaired += "]" * max(open_brackets - close_brackets, 0)
    repaired += "}" * max(open_braces - close_braces, 0)
    return repaired


def _is_valid_json(text: str) -> bool:
    try:
        json.loads(text)
    except json.JSONDecodeError:
        return False
    return True


def _is_truncation(error: json.JSONDecodeError) -> bool:
    return "Unterminated string" in error.msg or error.pos >= len(error.doc.rstrip())


def _load_object(text: str) -> dict[str, Any]:
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError(f"Expected a JSON object, got {type(value).__name__}")
    return value


def try_parse(text: str) -> ParseOutcome:
    """
    Coerce a raw response into a JSON object.

    Tries the cleaned text, then the extracted object span, then a repaired
    span when the failure looks like truncation.
    """
    cleaned = clean_json_response(text)
    if not cleaned:
        return ParseOutcome(None, "Empty response")

    try:
        return ParseOutcome(_load_object(cleaned))
    except (json.JSONDecodeError, ValueError) as e:
        error = e

    extracted = extract_json_object(cleaned)
    if extracted != cleaned:
        try:
            return ParseOutcome(_load_object(extracted))
        except (json.JSONDecodeError, ValueError) as e:
            error = e

    if isinstance(error, json.JSONDecodeError) and _is_truncation(error):
        logger.info("Detected truncated JSON, attempting repair")
        try:
            return ParseOutcome(_load_object(repair_truncated_json(extracted)), repaired=True)
        except (json.JSONDecodeError, ValueError) as e:
            error = e

    return ParseOutcome(None, str(error))


def parse_json_object(text: str, pass_index: Optional[int] = None) -> dict[str, Any]:
    """
    Parse a response into a dict.

    Raises:
        ParseError: If the response cannot be coerced into a JSON object
    """
    outcome = try_parse(text)
    if not outcome.ok:
        raise ParseError(
            f"Could not parse LLM response: {outcome.error}", pass_index=pass_index
        )
    return outcome.value


def sanitize_text(text: Any, max_length: int = 2000) -> str:
    """Sanitize a short single-line value such as a verse reference."""
    if not isinstance(text, str):
        return ""
    cleaned = _CONTROL_CHARS.sub("", text)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    cleaned = _ANGLE_BRACKETS.sub("", cleaned)
    return cleaned[:max_length]


def sanitize_markdown_text(text: Any, max_length: Optional[int] = None) -> str:
    """Sanitize long prose while keeping its paragraph structure."""
    if not isinstance(text, str):
        return ""
    cleaned = _CONTROL_CHARS.sub("", text)
    cleaned = _ANGLE_BRACKETS.sub("", cleaned)
    cleaned = "\n".join(line.rstrip() for line in cleaned.split("\n"))
    cleaned = cleaned.strip("\n")
    if max_length is not None:
        cleaned = cleaned[:max_length]
    return cleaned
