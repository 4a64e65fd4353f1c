"""Combine pass results into one study guide."""

from typing import Any, Mapping, Sequence

from src.services.study_generator.errors import ValidationError
from src.services.study_generator.models import ContentDocument
from src.services.study_generator.parser import sanitize_markdown_text, sanitize_text
from src.services.study_generator.passes import LIST_FIELDS, SUPPORTING_FIELDS, PassSpec

# Prose fields keep their paragraph breaks
PROSE_FIELDS = frozenset({"summary", "context", "interpretation"})
PROSE_LIST_FIELDS = frozenset({"prayerPoints"})


def is_present(field: str, value: Any) -> bool:
    """Check a value is a non-empty string or a non-empty list of strings."""
    if isinstance(value, str):
        return bool(value.strip())
    if field in LIST_FIELDS and isinstance(value, list):
        return any(isinstance(item, str) and item.strip() for item in value)
    return False


def missing_fields(result: Mapping[str, Any], fields: Sequence[str]) -> list[str]:
    return [field for field in fields if not is_present(field, result.get(field))]


def _as_list(field: str, value: Any) -> list[str]:
    items = [value] if isinstance(value, str) else list(value or [])
    clean = sanitize_markdown_text if field in PROSE_LIST_FIELDS else sanitize_text
    return [cleaned for cleaned in (clean(item) for item in items) if cleaned]


def join_interpretation(state: Mapping[str, Any], specs: Sequence[PassSpec]) -> str:
    """Blank-line join of each pass's interpretation segment, in pass order."""
    parts = [str(state.get(spec.interpretation_field, "")).strip() for spec in specs]
    return "\n\n".join(part for part in parts if part)


def merge_passes(state: Mapping[str, Any], specs: Sequence[PassSpec]) -> ContentDocument:
    """
    Build the ContentDocument from accumulated pass output.

    Raises:
        ValidationError: If a document field ends up empty after sanitizing
    """
    document: dict[str, Any] = {"interpretation": join_interpretation(state, specs)}
    for field in ("summary", "context", "passage") + SUPPORTING_FIELDS:
        value = state.get(field)
        if field in LIST_FIELDS:
            document[field] = _as_list(field, value)
        elif field in PROSE_FIELDS:
            document[field] = sanitize_markdown_text(value)
        else:
            document[field] = sanitize_text(value)
    document["interpretation"] = sanitize_markdown_text(document["interpretation"])

    empty = [field for field, value in document.items() if not value]
    if empty:
        raise ValidationError(
            f"Merged study guide has empty fields: {', '.join(empty)}",
            pass_index=specs[-1].index if specs else None,
            missing_fields=empty,
        )
    return ContentDocument.model_validate(document)
