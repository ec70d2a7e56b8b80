"""Tests for draft validation."""

import pytest

from vocab_editor import DraftDefinition, PartOfSpeech, ValidationError, validate_draft
from vocab_editor.validation import (
    DEFINITIONS_REQUIRED,
    MAX_EXPRESSION_LENGTH,
    NO_SPECIAL_CHARACTERS,
    WORD_REQUIRED,
    WORD_TOO_LONG,
    validate_definitions,
    validate_expression,
)


def complete(text="달리다", pos=PartOfSpeech.VERB):
    return DraftDefinition(text=text, part_of_speech=pos)


class TestExpression:
    """Expression rules: required, length, character set."""

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_required(self, value):
        with pytest.raises(ValidationError, match=WORD_REQUIRED):
            validate_expression(value)

    def test_trims_whitespace(self):
        assert validate_expression("  run away  ") == "run away"

    def test_max_length_accepted(self):
        value = "a" * MAX_EXPRESSION_LENGTH
        assert validate_expression(value) == value

    def test_over_max_length_rejected(self):
        with pytest.raises(ValidationError, match=WORD_TOO_LONG):
            validate_expression("a" * (MAX_EXPRESSION_LENGTH + 1))

    def test_length_measured_after_trim(self):
        value = "  " + "a" * MAX_EXPRESSION_LENGTH + "  "
        assert len(validate_expression(value)) == MAX_EXPRESSION_LENGTH

    @pytest.mark.parametrize("value", ["run#", "don't", "a.b", "x-ray", "what?"])
    def test_special_characters_rejected(self, value):
        with pytest.raises(ValidationError, match=NO_SPECIAL_CHARACTERS):
            validate_expression(value)

    @pytest.mark.parametrize("value", ["apple", "사과", "give up", "route66"])
    def test_plain_characters_accepted(self, value):
        assert validate_expression(value) == value

    def test_length_checked_before_characters(self):
        with pytest.raises(ValidationError, match=WORD_TOO_LONG):
            validate_expression("#" * (MAX_EXPRESSION_LENGTH + 1))


class TestDefinitions:
    """Every row needs text and a part of speech."""

    def test_complete_rows_pass(self):
        validate_definitions([complete(), complete("경주", PartOfSpeech.NOUN)])

    def test_blank_text_rejected(self):
        with pytest.raises(ValidationError, match=DEFINITIONS_REQUIRED):
            validate_definitions([complete(), complete(text="  ")])

    def test_missing_part_of_speech_rejected(self):
        with pytest.raises(ValidationError, match=DEFINITIONS_REQUIRED):
            validate_definitions([complete(pos=None)])

    def test_no_rows_rejected(self):
        with pytest.raises(ValidationError, match=DEFINITIONS_REQUIRED):
            validate_definitions([])


class TestDraft:
    """validate_draft runs the expression check first."""

    def test_returns_trimmed_expression(self):
        assert validate_draft(" run ", [complete()]) == "run"

    def test_expression_error_wins(self):
        with pytest.raises(ValidationError, match=WORD_REQUIRED):
            validate_draft("", [DraftDefinition()])
