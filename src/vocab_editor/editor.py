"""VocabularyEditor: main entry point for the vocab-editor library."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from vocab_editor import aggregator as _agg
from vocab_editor import mutations as _mut
from vocab_editor.api import VocabularyApi
from vocab_editor.config import ClientConfig
from vocab_editor.exceptions import (
    ConflictError,
    EntityNotFoundError,
    RequestError,
    ValidationError,
    VocabEditorError,
)
from vocab_editor.models import (
    DefinitionResult,
    Notice,
    NoticeLevel,
    PartOfSpeech,
    SubmitResult,
    VocabularyView,
    Word,
)
from vocab_editor.session import DraftDefinition, EditSession
from vocab_editor.transport import Transport
from vocab_editor.validation import validate_definitions, validate_draft

logger = logging.getLogger(__name__)

SUBMIT_PROBLEM = "problem while submitting word"

_LOG_LEVELS = {
    NoticeLevel.ERROR: logging.ERROR,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.INFO: logging.INFO,
}


class VocabularyEditor:
    """Loads one vocabulary and reconciles local edits with the service.

    Owns the merged :class:`VocabularyView` and the two edit sessions.
    Request failures never propagate out of the flows below; they are
    logged and recorded in ``view.notices`` instead. The single-definition
    helpers raise ValidationError or EntityNotFoundError for bad arguments
    before anything is sent.
    """

    def __init__(
        self,
        vocab_id: int,
        *,
        config: ClientConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.view = VocabularyView(vocab_id=vocab_id)
        self.add_session = EditSession()
        self.edit_session = EditSession()
        self._owns_session = session is None
        self._http = session
        self._api: VocabularyApi | None = None
        self._generation = 0

    @property
    def vocab_id(self) -> int:
        return self.view.vocab_id

    @property
    def words(self) -> list[Word]:
        return self.view.words

    @property
    def api(self) -> VocabularyApi:
        if self._api is None:
            if self._http is None:
                timeout = aiohttp.ClientTimeout(total=self.config.timeout)
                self._http = aiohttp.ClientSession(timeout=timeout)
            self._api = VocabularyApi(Transport(self.config.base_url, self._http))
        return self._api

    async def close(self) -> None:
        """Close the HTTP session if this editor created it."""
        if self._owns_session and self._http is not None and not self._http.closed:
            await self._http.close()

    async def __aenter__(self) -> VocabularyEditor:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _notify(self, level: NoticeLevel, message: str) -> None:
        logger.log(_LOG_LEVELS[level], "%s", message)
        self.view.notices.append(Notice(level=level, message=message))

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def refresh(self) -> list[Word]:
        """Re-run aggregation and install the result in the view.

        When another refresh started while this one was in flight, the
        older result is dropped and the current view is returned.
        """
        self._generation += 1
        generation = self._generation
        if self.view.title is None:
            self.view.title = await _agg.load_title(self.api, self.vocab_id)
        words = await _agg.load_vocabulary(
            self.api,
            self.vocab_id,
            default_difficulty=self.config.default_difficulty,
            max_concurrency=self.config.max_concurrency,
        )
        if generation != self._generation:
            logger.debug("Discarding stale refresh #%d", generation)
            return self.view.words
        self.view.replace_words(words)
        return self.view.words

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_selected(self, word_id: int | None) -> bool:
        return self.view.toggle(word_id)

    def clear_selection(self) -> None:
        self.view.clear_selection()

    # ------------------------------------------------------------------
    # Add flow
    # ------------------------------------------------------------------

    def open_add(self) -> EditSession:
        self.add_session.open()
        return self.add_session

    def close_add(self) -> None:
        self.add_session.close()

    async def submit_add(self) -> SubmitResult:
        """Validate the add draft, create the word and its definitions."""
        session = self.add_session
        try:
            expression = validate_draft(session.expression, session.drafts)
        except ValidationError as e:
            self._notify(NoticeLevel.WARNING, str(e))
            return SubmitResult(ok=False, message=str(e))

        try:
            word_id = await _mut.create_word(self.api, self.vocab_id, expression)
        except VocabEditorError as e:
            return self._submit_failed(e)

        results = await _mut.create_definitions(self.api, word_id, session.drafts)
        self._report_definitions(results)
        await self.refresh()
        self.close_add()
        return SubmitResult(
            ok=True, message="word added", word_id=word_id, definitions=tuple(results)
        )

    # ------------------------------------------------------------------
    # Edit flow
    # ------------------------------------------------------------------

    def open_edit(self, word: Word) -> EditSession:
        if word.is_placeholder:
            raise EntityNotFoundError("The empty-vocabulary entry cannot be edited")
        self.edit_session.open_for(word, self.view.index_of(word))
        return self.edit_session

    def close_edit(self) -> None:
        self.edit_session.close()

    async def submit_edit(self) -> SubmitResult:
        """Validate the edit draft and push changed fields by identifier."""
        session = self.edit_session
        word = session.target
        if word is None:
            message = "no word is being edited"
            self._notify(NoticeLevel.WARNING, message)
            return SubmitResult(ok=False, message=message)
        try:
            expression = validate_draft(session.expression, session.drafts)
        except ValidationError as e:
            self._notify(NoticeLevel.WARNING, str(e))
            return SubmitResult(ok=False, message=str(e), word_id=word.id)

        try:
            await _mut.update_word(
                self.api,
                self.vocab_id,
                word,
                expression,
                scope=self.config.word_update_scope,
            )
        except VocabEditorError as e:
            return self._submit_failed(e, word.id)

        results = await _mut.sync_definitions(
            self.api, word, session.drafts, session.removed_definition_ids()
        )
        self._report_definitions(results)
        await self.refresh()
        self.close_edit()
        return SubmitResult(
            ok=True, message="word updated", word_id=word.id, definitions=tuple(results)
        )

    def _submit_failed(
        self, error: VocabEditorError, word_id: int | None = None
    ) -> SubmitResult:
        if isinstance(error, (ConflictError, RequestError)):
            message = str(error)
        else:
            logger.error("Submitting word failed: %s", error)
            message = SUBMIT_PROBLEM
        self._notify(NoticeLevel.ERROR, message)
        return SubmitResult(ok=False, message=message, word_id=word_id)

    def _report_definitions(self, results: list[DefinitionResult]) -> None:
        for result in results:
            if not result.ok:
                self._notify(NoticeLevel.ERROR, result.message)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_word(self, word: Word, confirm: Callable[[Word], bool]) -> bool:
        """Delete *word* once *confirm* approves; returns True if deleted."""
        if word.is_placeholder or word.id is None:
            return False
        if not confirm(word):
            logger.debug("Deletion of %r not confirmed", word.expression)
            return False
        try:
            await _mut.delete_word(self.api, word.id)
        except VocabEditorError as e:
            logger.error("Deleting word %s failed: %s", word.id, e)
            self._notify(NoticeLevel.ERROR, _mut.WORD_DELETE_FAILED)
            return False
        self.view.selected.discard(word.id)
        await self.refresh()
        return True

    # ------------------------------------------------------------------
    # Single definitions
    # ------------------------------------------------------------------

    def _require_word(self, word: Word | int) -> Word:
        if isinstance(word, Word):
            if word.id is None:
                raise EntityNotFoundError("The empty-vocabulary entry has no definitions")
            return word
        found = self.view.find(word)
        if found is None:
            raise EntityNotFoundError(f"Word not found: {word!r}")
        return found

    async def add_definition(
        self, word: Word | int, text: str, part_of_speech: Any
    ) -> DefinitionResult:
        target = self._require_word(word)
        draft = DraftDefinition(text=text, part_of_speech=PartOfSpeech.parse(part_of_speech))
        validate_definitions([draft])
        return await self._definition_write(
            _mut.create_definitions(self.api, target.id, [draft])
        )

    async def update_definition(
        self,
        word: Word | int,
        definition_id: int,
        *,
        text: str | None = None,
        part_of_speech: Any = None,
    ) -> DefinitionResult:
        target = self._require_word(word)
        current = next((d for d in target.definitions if d.id == definition_id), None)
        if current is None:
            raise EntityNotFoundError(f"Definition not found: {definition_id!r}")
        draft = DraftDefinition(
            text=current.text if text is None else text,
            part_of_speech=(
                current.part_of_speech
                if part_of_speech is None
                else PartOfSpeech.parse(part_of_speech)
            ),
            definition_id=definition_id,
        )
        validate_definitions([draft])
        return await self._definition_write(
            _mut.sync_definitions(self.api, target, [draft])
        )

    async def delete_definition(self, word: Word | int, definition_id: int) -> DefinitionResult:
        target = self._require_word(word)
        if not any(d.id == definition_id for d in target.definitions):
            raise EntityNotFoundError(f"Definition not found: {definition_id!r}")
        if len(target.definitions) <= 1:
            raise ValidationError("a word keeps at least one definition")
        drafts = [
            DraftDefinition(d.text, d.part_of_speech, d.id)
            for d in target.definitions
            if d.id != definition_id
        ]
        return await self._definition_write(
            _mut.sync_definitions(self.api, target, drafts, [definition_id])
        )

    async def _definition_write(
        self, batch: Awaitable[list[DefinitionResult]]
    ) -> DefinitionResult:
        results = await batch
        if not results:
            return DefinitionResult(index=0, ok=True, message="unchanged")
        self._report_definitions(results)
        if any(r.ok for r in results):
            await self.refresh()
        return results[-1]
