"""
Executor for batch change requests.

Applies changes to a vocabulary through the editor's add, edit and delete
flows, so every change gets the same validation and conflict handling as
an interactive edit.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from ..editor import VocabularyEditor
from ..exceptions import EntityNotFoundError
from ..models import DefinitionResult, PartOfSpeech, SubmitResult, Word
from ..mutations import WORD_DELETE_FAILED
from ..session import DraftDefinition
from .schema import BatchResult, Change, ChangeRequest, ChangeResult, OperationType

logger = logging.getLogger(__name__)


async def execute_change_request(
    editor: VocabularyEditor,
    request: ChangeRequest,
    dry_run: bool = False,
) -> BatchResult:
    """Execute a batch change request.

    Args:
        editor: Editor bound to the request's vocabulary
        request: The change request to execute
        dry_run: If True, only resolve targets without making changes

    Returns:
        BatchResult with details of each change
    """
    if editor.vocab_id != request.vocabulary:
        raise ValueError(
            f"Editor is bound to vocabulary {editor.vocab_id}, "
            f"request targets {request.vocabulary}"
        )

    start_time = time.time()
    results: List[ChangeResult] = []

    await editor.refresh()
    for i, change in enumerate(request.changes):
        results.append(await _execute_change(editor, change, i, dry_run))

    success_count = sum(1 for r in results if r.success)
    failure_count = sum(1 for r in results if not r.success)

    return BatchResult(
        vocabulary=request.vocabulary,
        total_count=len(results),
        success_count=success_count,
        failure_count=failure_count,
        changes=results,
        duration_seconds=time.time() - start_time,
    )


async def _execute_change(
    editor: VocabularyEditor,
    change: Change,
    index: int,
    dry_run: bool,
) -> ChangeResult:
    """Execute a single change operation.

    Returns:
        ChangeResult with success/failure status
    """
    op = change.operation

    try:
        if dry_run:
            return _dry_run_change(editor, change, index)

        if op == OperationType.ADD_WORD.value:
            return await _exec_add_word(editor, change, index)

        elif op == OperationType.EDIT_WORD.value:
            return await _exec_edit_word(editor, change, index)

        elif op == OperationType.DELETE_WORD.value:
            return await _exec_delete_word(editor, change, index)

        elif op == OperationType.ADD_DEFINITION.value:
            return await _exec_add_definition(editor, change, index)

        elif op == OperationType.EDIT_DEFINITION.value:
            return await _exec_edit_definition(editor, change, index)

        elif op == OperationType.DELETE_DEFINITION.value:
            return await _exec_delete_definition(editor, change, index)

        else:
            return ChangeResult(
                index=index,
                operation=op,
                success=False,
                message=f"Unknown operation: {op}",
                error=f"Unknown operation: {op}",
            )

    except Exception as e:
        logger.exception(f"Error executing change #{index + 1} ({op})")
        return ChangeResult(
            index=index,
            operation=op,
            success=False,
            message=f"Error: {e}",
            target=change.target,
            error=str(e),
        )


def _dry_run_change(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Resolve a change's targets without sending anything."""
    op = change.operation
    target = change.target
    if op in (
        OperationType.EDIT_DEFINITION.value,
        OperationType.DELETE_DEFINITION.value,
    ):
        _resolve_definition_id(_resolve_word(editor, change), change)
    elif op != OperationType.ADD_WORD.value:
        _resolve_word(editor, change)

    return ChangeResult(
        index=index,
        operation=op,
        success=True,
        message=f"Would execute {op}",
        target=target,
    )


# =============================================================================
# Target resolution
# =============================================================================

def _resolve_word(editor: VocabularyEditor, change: Change) -> Word:
    if change.word_id is not None:
        word = editor.view.find(change.word_id)
    else:
        word = editor.view.find_by_expression(str(change.word))
    if word is None:
        raise EntityNotFoundError(f"Word not found: {change.target}")
    return word


def _resolve_definition_id(word: Word, change: Change) -> int:
    def_id = change.params.get("def_id")
    if def_id is not None:
        if not any(d.id == def_id for d in word.definitions):
            raise EntityNotFoundError(
                f"Definition #{def_id} does not belong to '{word.expression}'"
            )
        return def_id
    index = change.params.get("index", 0)
    if not 0 <= index < len(word.definitions):
        raise EntityNotFoundError(
            f"'{word.expression}' has no definition at index {index}"
        )
    return word.definitions[index].id


def _drafts(specs: List[Dict[str, Any]]) -> List[DraftDefinition]:
    return [
        DraftDefinition(
            text=spec.get("definition", ""),
            part_of_speech=PartOfSpeech.parse(spec.get("type")),
            definition_id=spec.get("def_id"),
        )
        for spec in specs
    ]


# =============================================================================
# Operations
# =============================================================================

def _submit_result(
    change: Change, index: int, result: SubmitResult, target: Optional[str]
) -> ChangeResult:
    failed = result.failed_definitions
    message = result.message
    if result.ok and failed:
        message = (
            f"{result.message}; {len(failed)} definition(s) failed: "
            + ", ".join(r.message for r in failed)
        )
    return ChangeResult(
        index=index,
        operation=change.operation,
        success=result.ok and not failed,
        message=message,
        target=target,
        created_id=result.word_id if change.operation == OperationType.ADD_WORD.value else None,
        error=None if result.ok and not failed else message,
    )


def _definition_result(
    change: Change, index: int, result: DefinitionResult, word: Word
) -> ChangeResult:
    return ChangeResult(
        index=index,
        operation=change.operation,
        success=result.ok,
        message=result.message,
        target=word.expression,
        created_id=result.definition_id if change.operation == OperationType.ADD_DEFINITION.value else None,
        error=None if result.ok else result.message,
    )


async def _exec_add_word(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Execute add_word operation."""
    session = editor.open_add()
    try:
        session.expression = change.params.get("expression", "")
        session.replace_definitions(_drafts(change.params.get("definitions") or []))
        result = await editor.submit_add()
    finally:
        editor.close_add()
    return _submit_result(change, index, result, change.params.get("expression"))


async def _exec_edit_word(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Execute edit_word operation."""
    word = _resolve_word(editor, change)
    session = editor.open_edit(word)
    try:
        if change.params.get("expression") is not None:
            session.expression = change.params["expression"]
        if change.params.get("definitions") is not None:
            session.replace_definitions(_drafts(change.params["definitions"]))
        result = await editor.submit_edit()
    finally:
        editor.close_edit()
    return _submit_result(change, index, result, word.expression)


async def _exec_delete_word(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Execute delete_word operation."""
    word = _resolve_word(editor, change)
    deleted = await editor.delete_word(word, confirm=lambda _: True)
    message = f"Deleted word '{word.expression}'" if deleted else WORD_DELETE_FAILED
    return ChangeResult(
        index=index,
        operation=change.operation,
        success=deleted,
        message=message,
        target=word.expression,
        error=None if deleted else message,
    )


async def _exec_add_definition(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Execute add_definition operation."""
    word = _resolve_word(editor, change)
    result = await editor.add_definition(
        word, change.params.get("definition", ""), change.params.get("type")
    )
    return _definition_result(change, index, result, word)


async def _exec_edit_definition(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Execute edit_definition operation."""
    word = _resolve_word(editor, change)
    def_id = _resolve_definition_id(word, change)
    result = await editor.update_definition(
        word,
        def_id,
        text=change.params.get("definition"),
        part_of_speech=change.params.get("type"),
    )
    return _definition_result(change, index, result, word)


async def _exec_delete_definition(editor: VocabularyEditor, change: Change, index: int) -> ChangeResult:
    """Execute delete_definition operation."""
    word = _resolve_word(editor, change)
    def_id = _resolve_definition_id(word, change)
    result = await editor.delete_definition(word, def_id)
    return _definition_result(change, index, result, word)
