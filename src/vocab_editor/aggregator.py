"""Builds the merged word list of a vocabulary from independent endpoints."""

from __future__ import annotations

import asyncio
import logging
from contextlib import nullcontext
from typing import Any

from vocab_editor.api import VocabularyApi
from vocab_editor.exceptions import TransportError, ValidationError
from vocab_editor.models import EMPTY_VOCABULARY, Definition, PartOfSpeech, Word

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = 0.5


async def load_vocabulary(
    api: VocabularyApi,
    vocab_id: int,
    *,
    default_difficulty: float = DEFAULT_DIFFICULTY,
    max_concurrency: int | None = None,
) -> list[Word]:
    """Fetch every word of *vocab_id* with its definitions and difficulty.

    Never raises for request failures. A failed word-list fetch yields an
    empty list; an empty vocabulary yields ``[EMPTY_VOCABULARY]``. Each
    word's sub-fetches degrade independently, so one word's failures never
    affect its siblings.
    """
    try:
        envelope = await api.list_words(vocab_id)
    except TransportError as e:
        logger.error("Word list for vocabulary %s unavailable: %s", vocab_id, e)
        return []
    if not envelope.ok:
        logger.error("Word list for vocabulary %s unavailable", vocab_id)
        return []

    rows = [r for r in (_parse_word_row(row) for row in envelope.data or []) if r]
    if not rows:
        return [EMPTY_VOCABULARY]

    limit = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def load(word_id: int, expression: str) -> Word:
        async with (limit if limit is not None else nullcontext()):
            return await _load_word(api, word_id, expression, default_difficulty)

    results = await asyncio.gather(
        *(load(word_id, expression) for word_id, expression in rows),
        return_exceptions=True,
    )

    words: list[Word] = []
    for (word_id, expression), result in zip(rows, results):
        if isinstance(result, BaseException):
            logger.error("Aggregating word %s failed: %r", word_id, result)
            result = Word(
                id=word_id,
                expression=expression,
                definitions=(),
                difficulty=default_difficulty,
            )
        words.append(result)
    return words


async def load_title(api: VocabularyApi, vocab_id: int) -> str | None:
    """Fetch the vocabulary's title, or None when unavailable."""
    try:
        envelope = await api.get_vocabulary(vocab_id)
    except TransportError as e:
        logger.warning("Title of vocabulary %s unavailable: %s", vocab_id, e)
        return None
    if envelope.ok and isinstance(envelope.data, dict):
        title = envelope.data.get("title")
        return str(title) if title is not None else None
    return None


async def _load_word(
    api: VocabularyApi,
    word_id: int,
    expression: str,
    default_difficulty: float,
) -> Word:
    definitions, stats, difficulty = await asyncio.gather(
        _fetch_definitions(api, word_id),
        _fetch_stats(api, word_id),
        _fetch_difficulty(api, word_id, default_difficulty),
    )
    return Word(
        id=word_id,
        expression=expression,
        definitions=definitions,
        difficulty=difficulty,
        stats=stats,
    )


async def _fetch_definitions(api: VocabularyApi, word_id: int) -> tuple[Definition, ...]:
    try:
        envelope = await api.list_definitions(word_id)
    except TransportError as e:
        logger.warning("Definitions of word %s unavailable: %s", word_id, e)
        return ()
    if not envelope.ok:
        logger.warning("Definitions of word %s unavailable", word_id)
        return ()
    return tuple(
        d for d in (_parse_definition_row(row, word_id) for row in envelope.data or []) if d
    )


async def _fetch_stats(api: VocabularyApi, word_id: int) -> Any:
    try:
        envelope = await api.get_stats_detail(word_id)
    except TransportError as e:
        logger.warning("Statistics of word %s unavailable: %s", word_id, e)
        return None
    if not envelope.ok:
        logger.warning("Statistics of word %s unavailable", word_id)
        return None
    return envelope.data


async def _fetch_difficulty(
    api: VocabularyApi, word_id: int, default: float
) -> float:
    try:
        envelope = await api.get_difficulty(word_id)
    except TransportError as e:
        logger.warning("Difficulty of word %s unavailable: %s", word_id, e)
        return default
    if not envelope.ok:
        logger.warning("Difficulty of word %s unavailable", word_id)
        return default
    if envelope.data is None:
        return default
    try:
        return float(envelope.data)
    except (TypeError, ValueError):
        logger.warning("Difficulty of word %s is not numeric: %r", word_id, envelope.data)
        return default


def _parse_word_row(row: Any) -> tuple[int, str] | None:
    try:
        return int(row["wordId"]), str(row["expression"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Skipping malformed word row: %r", row)
        return None


def _parse_definition_row(row: Any, word_id: int) -> Definition | None:
    try:
        def_id = int(row["defId"])
        text = str(row["definition"])
        raw_type = row.get("type")
    except (KeyError, TypeError, ValueError, AttributeError):
        logger.warning("Skipping malformed definition row of word %s: %r", word_id, row)
        return None
    try:
        pos = PartOfSpeech.parse(raw_type)
    except ValidationError:
        logger.warning("Definition %s has unknown part of speech %r", def_id, raw_type)
        pos = None
    return Definition(id=def_id, text=text, part_of_speech=pos)
