"""Shared test fixtures for vocab-editor."""

import asyncio
import itertools

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from vocab_editor import ClientConfig, VocabularyEditor


def envelope(data=None, status=200):
    return web.json_response({"status": status, "data": data})


class FakeBackend:
    """In-memory stand-in for the vocabulary service.

    ``failing`` and ``broken`` hold ``(kind, key)`` pairs; matching requests
    are answered with a status-500 envelope or a non-JSON body.
    ``delete_delay`` holds back definition deletes by that many seconds.
    """

    def __init__(self):
        self.titles = {1: "Daily words"}
        self.words = {}
        self.definitions = {}
        self.difficulty = {}
        self.failing = set()
        self.broken = set()
        self.delete_delay = 0.0
        self.requests = []
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Seeding and inspection
    # ------------------------------------------------------------------

    def add_word(self, expression, definitions=(), *, vocab_id=1, difficulty=None):
        word_id = next(self._ids)
        self.words[word_id] = {
            "wordId": word_id, "expression": expression, "vocabId": vocab_id,
        }
        self.difficulty[word_id] = difficulty
        for text, pos in definitions:
            self.add_definition(word_id, text, pos)
        return word_id

    def add_definition(self, word_id, text, pos):
        def_id = next(self._ids)
        self.definitions[def_id] = {
            "defId": def_id, "definition": text, "type": pos, "wordId": word_id,
        }
        return def_id

    def definitions_of(self, word_id):
        return [d for d in self.definitions.values() if d["wordId"] == word_id]

    def word_by_expression(self, expression, vocab_id=1):
        for word in self.words.values():
            if word["expression"] == expression and word["vocabId"] == vocab_id:
                return word
        return None

    @property
    def writes(self):
        return [r for r in self.requests if r[0] not in ("GET", "HEAD")]

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def make_app(self):
        @web.middleware
        async def record(request, handler):
            self.requests.append((request.method, request.path_qs))
            return await handler(request)

        app = web.Application(middlewares=[record])
        app.router.add_get("/api/vocabs/detail", self._vocab_detail)
        app.router.add_get("/api/words/all", self._list_words)
        app.router.add_post("/api/words/{id}", self._create_word)
        app.router.add_patch("/api/words/{id}", self._update_word)
        app.router.add_delete("/api/words/{id}", self._delete_word)
        app.router.add_get("/api/defs/all", self._list_definitions)
        app.router.add_post("/api/defs/{id}", self._create_definition)
        app.router.add_patch("/api/defs/{id}", self._update_definition)
        app.router.add_delete("/api/defs/{id}", self._delete_definition)
        app.router.add_get("/api/stats/detail", self._stats_detail)
        app.router.add_get("/api/stats/diff", self._difficulty)
        return app

    def _fault(self, kind, key):
        if (kind, key) in self.broken:
            return web.Response(text="<html>gateway error</html>", content_type="text/html")
        if (kind, key) in self.failing:
            return envelope(status=500)
        return None

    async def _vocab_detail(self, request):
        vocab_id = int(request.query["vocab_id"])
        if vocab_id not in self.titles:
            return envelope(status=404)
        return envelope({"vocabId": vocab_id, "title": self.titles[vocab_id]})

    async def _list_words(self, request):
        vocab_id = int(request.query["vocab_id"])
        fault = self._fault("words", vocab_id)
        if fault is not None:
            return fault
        return envelope([
            {"wordId": w["wordId"], "expression": w["expression"]}
            for w in self.words.values()
            if w["vocabId"] == vocab_id
        ])

    async def _create_word(self, request):
        vocab_id = int(request.match_info["id"])
        fault = self._fault("create_word", vocab_id)
        if fault is not None:
            return fault
        body = await request.json()
        expression = body["expression"]
        if self.word_by_expression(expression, vocab_id):
            return envelope(status=409)
        word_id = self.add_word(expression, vocab_id=vocab_id)
        return envelope({"wordId": word_id, "expression": expression})

    async def _update_word(self, request):
        body = await request.json()
        word_id = body.get("wordId", int(request.match_info["id"]))
        fault = self._fault("update_word", word_id)
        if fault is not None:
            return fault
        word = self.words.get(word_id)
        if word is None:
            return envelope(status=404)
        other = self.word_by_expression(body["expression"], word["vocabId"])
        if other is not None and other["wordId"] != word_id:
            return envelope(status=409)
        word["expression"] = body["expression"]
        return envelope({"wordId": word_id, "expression": word["expression"]})

    async def _delete_word(self, request):
        word_id = int(request.match_info["id"])
        fault = self._fault("delete_word", word_id)
        if fault is not None:
            return fault
        word = self.words.pop(word_id, None)
        if word is None:
            return envelope(status=404)
        for definition in self.definitions_of(word_id):
            del self.definitions[definition["defId"]]
        return envelope({"wordId": word_id})

    async def _list_definitions(self, request):
        word_id = int(request.query["word_id"])
        fault = self._fault("defs", word_id)
        if fault is not None:
            return fault
        return envelope([
            {"defId": d["defId"], "definition": d["definition"], "type": d["type"]}
            for d in self.definitions_of(word_id)
        ])

    async def _create_definition(self, request):
        word_id = int(request.match_info["id"])
        body = await request.json()
        fault = self._fault("create_def", body["definition"])
        if fault is not None:
            return fault
        if word_id not in self.words:
            return envelope(status=404)
        if any(d["definition"] == body["definition"] for d in self.definitions_of(word_id)):
            return envelope(status=409)
        def_id = self.add_definition(word_id, body["definition"], body["type"])
        return envelope({"defId": def_id, "definition": body["definition"], "type": body["type"]})

    async def _update_definition(self, request):
        def_id = int(request.match_info["id"])
        body = await request.json()
        fault = self._fault("update_def", def_id)
        if fault is not None:
            return fault
        definition = self.definitions.get(def_id)
        if definition is None:
            return envelope(status=404)
        for other in self.definitions_of(definition["wordId"]):
            if other["defId"] != def_id and other["definition"] == body["definition"]:
                return envelope(status=409)
        definition["definition"] = body["definition"]
        definition["type"] = body["type"]
        return envelope({"defId": def_id, "definition": body["definition"], "type": body["type"]})

    async def _delete_definition(self, request):
        def_id = int(request.match_info["id"])
        if self.delete_delay:
            await asyncio.sleep(self.delete_delay)
        if self.definitions.pop(def_id, None) is None:
            return envelope(status=404)
        return envelope({"defId": def_id})

    async def _stats_detail(self, request):
        word_id = int(request.query["word_id"])
        fault = self._fault("stats", word_id)
        if fault is not None:
            return fault
        return envelope({"wordId": word_id, "correct": 3, "wrong": 1})

    async def _difficulty(self, request):
        word_id = int(request.query["word_id"])
        fault = self._fault("diff", word_id)
        if fault is not None:
            return fault
        return envelope(self.difficulty.get(word_id))


@pytest.fixture
def backend():
    """An empty fake service with one vocabulary (id 1)."""
    return FakeBackend()


@pytest.fixture
def run(backend):
    """Serve ``backend`` and run ``scenario(editor)`` against it.

    Extra keyword arguments become ClientConfig fields.
    """

    def _run(scenario, vocab_id=1, **config):
        async def main():
            server = TestServer(backend.make_app())
            await server.start_server()
            try:
                cfg = ClientConfig(base_url=f"http://{server.host}:{server.port}", **config)
                async with VocabularyEditor(vocab_id, config=cfg) as editor:
                    return await scenario(editor)
            finally:
                await server.close()

        return asyncio.run(main())

    return _run


@pytest.fixture
def seeded(backend):
    """Backend holding 'run' and 'apple' with definitions and difficulties."""
    run_id = backend.add_word(
        "run", [("달리다", "VERB"), ("경주", "NOUN")], difficulty=0.3,
    )
    apple_id = backend.add_word("apple", [("사과", "NOUN")], difficulty=0.8)
    return backend, run_id, apple_id
