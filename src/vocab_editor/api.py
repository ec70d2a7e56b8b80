"""Bindings for the vocabulary service's REST endpoints."""

from __future__ import annotations

from vocab_editor.models import Envelope, PartOfSpeech
from vocab_editor.transport import Transport


class VocabularyApi:
    """One coroutine per endpoint; each returns the raw :class:`Envelope`."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_vocabulary(self, vocab_id: int) -> Envelope:
        return await self.transport.request(f"/api/vocabs/detail?vocab_id={vocab_id}")

    async def list_words(self, vocab_id: int) -> Envelope:
        return await self.transport.request(f"/api/words/all?vocab_id={vocab_id}")

    async def list_definitions(self, word_id: int) -> Envelope:
        return await self.transport.request(f"/api/defs/all?word_id={word_id}")

    async def get_stats_detail(self, word_id: int) -> Envelope:
        return await self.transport.request(f"/api/stats/detail?word_id={word_id}")

    async def get_difficulty(self, word_id: int) -> Envelope:
        return await self.transport.request(f"/api/stats/diff?word_id={word_id}")

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    async def create_word(self, vocab_id: int, expression: str) -> Envelope:
        return await self.transport.request(
            f"/api/words/{vocab_id}", "POST", {"expression": expression}
        )

    async def update_word(
        self,
        vocab_id: int,
        word_id: int,
        expression: str,
        *,
        scope: str = "word",
    ) -> Envelope:
        """PATCH a word's expression.

        With ``scope="vocabulary"`` the request addresses the vocabulary
        resource and names the word in the body instead of the path.
        That is the shape the deployed backend exposes
        (``PATCH /api/words/{vocabId}``); the default ``"word"`` scope
        addresses the word directly.
        """
        if scope == "vocabulary":
            return await self.transport.request(
                f"/api/words/{vocab_id}",
                "PATCH",
                {"wordId": word_id, "expression": expression},
            )
        return await self.transport.request(
            f"/api/words/{word_id}", "PATCH", {"expression": expression}
        )

    async def delete_word(self, word_id: int) -> Envelope:
        return await self.transport.request(f"/api/words/{word_id}", "DELETE")

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    async def create_definition(
        self, word_id: int, text: str, part_of_speech: PartOfSpeech
    ) -> Envelope:
        return await self.transport.request(
            f"/api/defs/{word_id}",
            "POST",
            {"definition": text, "type": part_of_speech.value},
        )

    async def update_definition(
        self, definition_id: int, text: str, part_of_speech: PartOfSpeech
    ) -> Envelope:
        return await self.transport.request(
            f"/api/defs/{definition_id}",
            "PATCH",
            {"definition": text, "type": part_of_speech.value},
        )

    async def delete_definition(self, definition_id: int) -> Envelope:
        return await self.transport.request(f"/api/defs/{definition_id}", "DELETE")
