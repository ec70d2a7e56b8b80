"""Client-side checks run on a draft before anything is sent."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from vocab_editor.exceptions import ValidationError

if TYPE_CHECKING:
    from vocab_editor.session import DraftDefinition

MAX_EXPRESSION_LENGTH = 50

SPECIAL_CHARACTERS = frozenset("!@#$%^&*()_+-=[]{};':\"\\|,.<>?~`")

WORD_REQUIRED = "word required"
WORD_TOO_LONG = "too long"
NO_SPECIAL_CHARACTERS = "no special characters"
DEFINITIONS_REQUIRED = "all meanings and parts of speech required"


def validate_expression(expression: str) -> str:
    """Return the trimmed expression or raise :class:`ValidationError`."""
    trimmed = (expression or "").strip()
    if not trimmed:
        raise ValidationError(WORD_REQUIRED)
    if len(trimmed) > MAX_EXPRESSION_LENGTH:
        raise ValidationError(WORD_TOO_LONG)
    if any(ch in SPECIAL_CHARACTERS for ch in trimmed):
        raise ValidationError(NO_SPECIAL_CHARACTERS)
    return trimmed


def validate_definitions(drafts: Iterable[DraftDefinition]) -> None:
    drafts = list(drafts)
    if not drafts or not all(d.is_complete for d in drafts):
        raise ValidationError(DEFINITIONS_REQUIRED)


def validate_draft(expression: str, drafts: Iterable[DraftDefinition]) -> str:
    """Run every check in order; returns the trimmed expression."""
    trimmed = validate_expression(expression)
    validate_definitions(drafts)
    return trimmed
