"""Tests for the JSON-envelope transport."""

import asyncio

import aiohttp
import pytest

from vocab_editor import TransportError
from vocab_editor.transport import Transport


class TestRequest:
    """Unwrapping envelopes from the fake service."""

    def test_ok_envelope(self, run, seeded):
        backend, run_id, _ = seeded

        async def scenario(editor):
            return await editor.api.transport.request(f"/api/stats/diff?word_id={run_id}")

        envelope = run(scenario)
        assert envelope.ok
        assert envelope.data == 0.3

    def test_non_200_status_yields_empty_envelope(self, run, seeded):
        backend, run_id, _ = seeded
        backend.failing.add(("stats", run_id))

        async def scenario(editor):
            return await editor.api.get_stats_detail(run_id)

        envelope = run(scenario)
        assert not envelope.ok
        assert envelope.status == 500
        assert envelope.data is None

    def test_conflict_status_is_kept(self, run, seeded):
        async def scenario(editor):
            return await editor.api.create_word(1, "run")

        assert run(scenario).is_conflict

    def test_body_sent_as_json(self, run, backend):
        async def scenario(editor):
            return await editor.api.create_word(1, "사과")

        envelope = run(scenario)
        assert envelope.ok
        assert backend.word_by_expression("사과")["wordId"] == envelope.data["wordId"]
        assert backend.writes == [("POST", "/api/words/1")]

    def test_undecodable_body_raises(self, run, seeded):
        backend, run_id, _ = seeded
        backend.broken.add(("defs", run_id))

        async def scenario(editor):
            await editor.api.list_definitions(run_id)

        with pytest.raises(TransportError):
            run(scenario)


class TestConnection:
    """Failures below the envelope."""

    def test_unreachable_host(self):
        async def scenario():
            async with aiohttp.ClientSession() as session:
                transport = Transport("http://127.0.0.1:1", session)
                await transport.request("/api/words/all?vocab_id=1")

        with pytest.raises(TransportError):
            asyncio.run(scenario())

    def test_url_for_joins_slashes(self):
        transport = Transport("http://vocab.test/", session=None)
        assert transport.url_for("/api/defs/all") == "http://vocab.test/api/defs/all"
        assert transport.base_url == "http://vocab.test"
