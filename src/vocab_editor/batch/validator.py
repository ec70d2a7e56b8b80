"""
Validation for batch change requests.

Provides schema validation (required fields, types, draft rules) and, when
the loaded word list is supplied, referential validation of word targets.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import ValidationError as DraftError
from ..models import PartOfSpeech, Word
from ..validation import validate_expression
from .schema import (
    DEFINITION_TARGETED,
    REQUIRED_FIELDS,
    WORD_TARGETED,
    Change,
    ChangeRequest,
    OperationType,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)


def validate_change_request(
    request: ChangeRequest,
    words: Optional[Sequence[Word]] = None,
) -> ValidationResult:
    """Validate a change request.

    Args:
        request: The change request to validate
        words: Loaded words of the vocabulary; when given, word targets
            must refer to one of them

    Returns:
        ValidationResult with errors and warnings
    """
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []
    added: Dict[str, int] = {}

    for i, change in enumerate(request.changes):
        change_errors, change_warnings = _validate_change(change, i, words)
        errors.extend(change_errors)
        warnings.extend(change_warnings)

        if change.operation == OperationType.ADD_WORD.value:
            expression = str(change.params.get("expression", "")).strip()
            if expression in added:
                warnings.append(
                    ValidationWarning(
                        index=i,
                        operation=change.operation,
                        message=(
                            f"Expression '{expression}' is also added by "
                            f"change #{added[expression] + 1}"
                        ),
                    )
                )
            else:
                added[expression] = i

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_change(
    change: Change,
    index: int,
    words: Optional[Sequence[Word]],
) -> tuple[List[ValidationError], List[ValidationWarning]]:
    """Validate a single change operation."""
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []

    def error(field: str, message: str) -> None:
        errors.append(
            ValidationError(
                index=index,
                operation=change.operation,
                field=field,
                message=message,
            )
        )

    def warn(message: str) -> None:
        warnings.append(
            ValidationWarning(
                index=index,
                operation=change.operation,
                message=message,
            )
        )

    valid_operations = {op.value for op in OperationType}
    if change.operation not in valid_operations:
        error(
            "operation",
            f"Unknown operation '{change.operation}'. "
            f"Valid: {', '.join(sorted(valid_operations))}",
        )
        return errors, warnings

    for field in REQUIRED_FIELDS.get(change.operation, []):
        if change.params.get(field) is None:
            error(field, f"Missing required field '{field}'")

    op = change.operation
    params = change.params

    if op in WORD_TARGETED:
        _validate_word_target(change, words, error)

    if op in DEFINITION_TARGETED:
        _validate_definition_target(params, error)

    if op == OperationType.ADD_WORD.value:
        if params.get("expression") is not None:
            _validate_expression(params["expression"], error)
        if params.get("definitions") is not None:
            _validate_definition_list(params["definitions"], error)

    elif op == OperationType.EDIT_WORD.value:
        if params.get("expression") is not None:
            _validate_expression(params["expression"], error)
        if params.get("definitions") is not None:
            _validate_definition_list(params["definitions"], error)
        if params.get("expression") is None and params.get("definitions") is None:
            warn("Nothing to change: give 'expression' and/or 'definitions'")

    elif op == OperationType.ADD_DEFINITION.value:
        _validate_definition_fields(params, "", error, required=True)

    elif op == OperationType.EDIT_DEFINITION.value:
        _validate_definition_fields(params, "", error, required=False)
        if params.get("definition") is None and params.get("type") is None:
            warn("Nothing to change: give 'definition' and/or 'type'")

    return errors, warnings


def _validate_word_target(change: Change, words, error) -> None:
    word, word_id = change.word, change.word_id
    if word is None and word_id is None:
        error("word", "Missing word reference: give 'word' or 'word_id'")
        return
    if word_id is not None and (isinstance(word_id, bool) or not isinstance(word_id, int)):
        error("word_id", "Field 'word_id' must be an integer")
        return
    if word is not None and not isinstance(word, str):
        error("word", "Field 'word' must be a string")
        return
    if words is None:
        return
    live = [w for w in words if not w.is_placeholder]
    if word_id is not None:
        if not any(w.id == word_id for w in live):
            error("word_id", f"Word #{word_id} not found in vocabulary")
    elif not any(w.expression == word for w in live):
        error("word", f"Word '{word}' not found in vocabulary")


def _validate_definition_target(params: Dict[str, Any], error) -> None:
    index, def_id = params.get("index"), params.get("def_id")
    if index is None and def_id is None:
        error("index", "Missing definition reference: give 'index' or 'def_id'")
        return
    if index is not None and (isinstance(index, bool) or not isinstance(index, int) or index < 0):
        error("index", "Field 'index' must be a non-negative integer")
    if def_id is not None and (isinstance(def_id, bool) or not isinstance(def_id, int)):
        error("def_id", "Field 'def_id' must be an integer")


def _validate_expression(expression: Any, error) -> None:
    if not isinstance(expression, str):
        error("expression", "Field 'expression' must be a string")
        return
    try:
        validate_expression(expression)
    except DraftError as e:
        error("expression", str(e))


def _validate_definition_fields(
    spec: Dict[str, Any], prefix: str, error, *, required: bool
) -> None:
    text = spec.get("definition")
    if text is not None or required:
        if not isinstance(text, str) or not text.strip():
            error(f"{prefix}definition", "Definition text must be a non-empty string")
    pos = spec.get("type")
    if pos is not None or required:
        try:
            PartOfSpeech.parse(pos)
        except DraftError as e:
            error(f"{prefix}type", str(e))


def _validate_definition_list(definitions: Any, error) -> None:
    if not isinstance(definitions, list):
        error("definitions", "Field 'definitions' must be a list")
        return
    if len(definitions) == 0:
        error("definitions", "Field 'definitions' cannot be empty")
        return
    for i, spec in enumerate(definitions):
        if not isinstance(spec, dict):
            error(f"definitions[{i}]", "Definition must be a mapping {definition: ..., type: ...}")
            continue
        _validate_definition_fields(spec, f"definitions[{i}].", error, required=True)
