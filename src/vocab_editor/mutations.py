"""Write operations against the vocabulary service.

Word-level calls raise :class:`ConflictError` or :class:`RequestError` so the
caller can tell a duplicate from a generic failure. Definition writes go out
in concurrent batches that never raise; every item reports its own
:class:`DefinitionResult`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from functools import partial

from vocab_editor.api import VocabularyApi
from vocab_editor.exceptions import (
    ConflictError,
    RequestError,
    VocabEditorError,
)
from vocab_editor.models import Definition, DefinitionResult, Envelope, Word
from vocab_editor.session import DraftDefinition

logger = logging.getLogger(__name__)

DUPLICATE_WORD = "duplicate word"
DUPLICATE_DEFINITION = "duplicate definition"
WORD_ADD_FAILED = "failed to add word"
WORD_UPDATE_FAILED = "failed to update word"
WORD_DELETE_FAILED = "failed to delete word"
DEFINITION_SAVE_FAILED = "failed to save definition"
DEFINITION_DELETE_FAILED = "failed to delete definition"


def _check(envelope: Envelope, conflict: str, failure: str) -> Envelope:
    if envelope.ok:
        return envelope
    if envelope.is_conflict:
        raise ConflictError(conflict)
    raise RequestError(failure, status=envelope.status)


def _returned_id(envelope: Envelope, key: str) -> int | None:
    data = envelope.data
    if isinstance(data, dict) and data.get(key) is not None:
        try:
            return int(data[key])
        except (TypeError, ValueError):
            return None
    return None


# ---------------------------------------------------------------------------
# Words
# ---------------------------------------------------------------------------

async def create_word(api: VocabularyApi, vocab_id: int, expression: str) -> int:
    """Create a word and return its server-assigned id."""
    envelope = _check(
        await api.create_word(vocab_id, expression), DUPLICATE_WORD, WORD_ADD_FAILED
    )
    word_id = _returned_id(envelope, "wordId")
    if word_id is None:
        raise RequestError(WORD_ADD_FAILED, status=envelope.status)
    return word_id


async def update_word(
    api: VocabularyApi,
    vocab_id: int,
    word: Word,
    expression: str,
    *,
    scope: str = "word",
) -> bool:
    """Rename *word*; returns False when the expression is unchanged."""
    if word.id is None:
        raise RequestError(WORD_UPDATE_FAILED)
    if expression == word.expression:
        return False
    _check(
        await api.update_word(vocab_id, word.id, expression, scope=scope),
        DUPLICATE_WORD,
        WORD_UPDATE_FAILED,
    )
    return True


async def delete_word(api: VocabularyApi, word_id: int) -> None:
    envelope = await api.delete_word(word_id)
    if not envelope.ok:
        raise RequestError(WORD_DELETE_FAILED, status=envelope.status)


# ---------------------------------------------------------------------------
# Single definitions
# ---------------------------------------------------------------------------

async def create_definition(
    api: VocabularyApi, word_id: int, draft: DraftDefinition
) -> int | None:
    envelope = _check(
        await api.create_definition(word_id, draft.text.strip(), draft.part_of_speech),
        DUPLICATE_DEFINITION,
        DEFINITION_SAVE_FAILED,
    )
    return _returned_id(envelope, "defId")


async def update_definition(
    api: VocabularyApi, definition_id: int, draft: DraftDefinition
) -> int:
    _check(
        await api.update_definition(
            definition_id, draft.text.strip(), draft.part_of_speech
        ),
        DUPLICATE_DEFINITION,
        DEFINITION_SAVE_FAILED,
    )
    return definition_id


async def delete_definition(api: VocabularyApi, definition_id: int) -> int:
    envelope = await api.delete_definition(definition_id)
    if not envelope.ok:
        raise RequestError(DEFINITION_DELETE_FAILED, status=envelope.status)
    return definition_id


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------

async def _settle(index: int, call: Awaitable[int | None]) -> DefinitionResult:
    try:
        definition_id = await call
    except ConflictError as e:
        logger.warning("Definition #%d rejected: %s", index + 1, e)
        return DefinitionResult(index=index, ok=False, message=str(e), status=409)
    except RequestError as e:
        logger.warning("Definition #%d failed (status=%s): %s", index + 1, e.status, e)
        return DefinitionResult(index=index, ok=False, message=str(e), status=e.status)
    except VocabEditorError as e:
        logger.error("Definition #%d failed: %s", index + 1, e)
        return DefinitionResult(index=index, ok=False, message=DEFINITION_SAVE_FAILED)
    return DefinitionResult(
        index=index, ok=True, message="saved", definition_id=definition_id, status=200
    )


async def create_definitions(
    api: VocabularyApi, word_id: int, drafts: Sequence[DraftDefinition]
) -> list[DefinitionResult]:
    """Create every draft under *word_id* concurrently."""
    return list(
        await asyncio.gather(
            *(_settle(i, create_definition(api, word_id, d)) for i, d in enumerate(drafts))
        )
    )


def _changed(draft: DraftDefinition, existing: Definition | None) -> bool:
    if existing is None:
        return True
    return (
        draft.text.strip() != existing.text
        or draft.part_of_speech != existing.part_of_speech
    )


def _assign_targets(
    drafts: Sequence[DraftDefinition],
    existing: dict[int, Definition],
    removed_ids: Sequence[int],
) -> tuple[list[int | None], list[int]]:
    """Give rows without an id one of the removed ids to overwrite.

    A removed definition with the same text is preferred, then the removed
    ids in order. Returns the target id per row and the ids left to delete.
    """
    targets: list[int | None] = [d.definition_id for d in drafts]
    spare = list(removed_ids)
    for i, draft in enumerate(drafts):
        if targets[i] is not None:
            continue
        text = draft.text.strip()
        same = next(
            (r for r in spare if r in existing and existing[r].text == text), None
        )
        if same is not None:
            targets[i] = same
            spare.remove(same)
    for i in range(len(drafts)):
        if targets[i] is None and spare:
            targets[i] = spare.pop(0)
    return targets, spare


async def _run_phase(
    calls: list[tuple[int, Callable[[], Awaitable[int | None]]]],
) -> list[DefinitionResult]:
    return list(await asyncio.gather(*(_settle(i, call()) for i, call in calls)))


async def sync_definitions(
    api: VocabularyApi,
    word: Word,
    drafts: Sequence[DraftDefinition],
    removed_ids: Sequence[int] = (),
) -> list[DefinitionResult]:
    """Reconcile *word*'s definitions with the edited drafts.

    New rows first take over the ids in *removed_ids* and are sent as
    updates, so re-adding a removed text never collides with the old row.
    Updates settle before creates, and the removed ids still unused are
    deleted last. Unchanged rows send nothing. Results are indexed by
    draft row; deletions follow after the last row.
    """
    if word.id is None:
        raise RequestError(DEFINITION_SAVE_FAILED)
    existing = {d.id: d for d in word.definitions if d.id is not None}
    targets, leftover = _assign_targets(drafts, existing, removed_ids)

    updates = [
        (i, partial(update_definition, api, target, draft))
        for i, (draft, target) in enumerate(zip(drafts, targets))
        if target is not None and _changed(draft, existing.get(target))
    ]
    creates = [
        (i, partial(create_definition, api, word.id, draft))
        for i, (draft, target) in enumerate(zip(drafts, targets))
        if target is None
    ]
    deletes = [
        (len(drafts) + offset, partial(delete_definition, api, definition_id))
        for offset, definition_id in enumerate(leftover)
    ]

    results = await _run_phase(updates)
    results += await _run_phase(creates)
    results += await _run_phase(deletes)
    return sorted(results, key=lambda r: r.index)
