"""Tests for vocabulary aggregation."""

import asyncio

from vocab_editor import EMPTY_VOCABULARY, Difficulty, PartOfSpeech, VocabularyEditor, Word
from vocab_editor import aggregator


class TestLoadVocabulary:
    """Merging words, definitions, stats and difficulty."""

    def test_merges_every_source(self, run, seeded):
        backend, run_id, apple_id = seeded

        async def scenario(editor):
            return await editor.refresh()

        words = run(scenario)
        assert [w.expression for w in words] == ["run", "apple"]
        first = words[0]
        assert first.id == run_id
        assert [(d.text, d.part_of_speech) for d in first.definitions] == [
            ("달리다", PartOfSpeech.VERB),
            ("경주", PartOfSpeech.NOUN),
        ]
        assert first.difficulty == 0.3
        assert first.level is Difficulty.EASY
        assert first.stats == {"wordId": run_id, "correct": 3, "wrong": 1}
        assert words[1].level is Difficulty.HARD

    def test_empty_vocabulary_yields_placeholder(self, run, backend):
        async def scenario(editor):
            return await editor.refresh()

        assert run(scenario) == [EMPTY_VOCABULARY]

    def test_word_list_failure_yields_nothing(self, run, seeded):
        backend, _, _ = seeded
        backend.failing.add(("words", 1))

        async def scenario(editor):
            return await editor.refresh()

        assert run(scenario) == []

    def test_undecodable_word_list_yields_nothing(self, run, seeded):
        backend, _, _ = seeded
        backend.broken.add(("words", 1))

        async def scenario(editor):
            return await editor.refresh()

        assert run(scenario) == []

    def test_definitions_failure_is_isolated(self, run, seeded):
        backend, run_id, apple_id = seeded
        backend.failing.add(("defs", run_id))

        async def scenario(editor):
            return await editor.refresh()

        words = run(scenario)
        assert words[0].definitions == ()
        assert words[0].difficulty == 0.3
        assert [d.text for d in words[1].definitions] == ["사과"]

    def test_broken_stats_are_isolated(self, run, seeded):
        backend, run_id, _ = seeded
        backend.broken.add(("stats", run_id))

        async def scenario(editor):
            return await editor.refresh()

        words = run(scenario)
        assert words[0].stats is None
        assert len(words[0].definitions) == 2

    def test_null_difficulty_uses_default(self, run, backend):
        backend.add_word("new", [("새로운", "ADJECTIVE")], difficulty=None)

        async def scenario(editor):
            return await editor.refresh()

        word = run(scenario)[0]
        assert word.difficulty == 0.5
        assert word.level is Difficulty.MEDIUM

    def test_failed_difficulty_uses_configured_default(self, run, seeded):
        backend, run_id, _ = seeded
        backend.failing.add(("diff", run_id))

        async def scenario(editor):
            return await editor.refresh()

        assert run(scenario, default_difficulty=0.9)[0].difficulty == 0.9

    def test_unknown_part_of_speech_is_kept(self, run, backend):
        word_id = backend.add_word("odd")
        backend.add_definition(word_id, "이상한", "GERUND")

        async def scenario(editor):
            return await editor.refresh()

        definition = run(scenario)[0].definitions[0]
        assert definition.text == "이상한"
        assert definition.part_of_speech is None

    def test_bounded_concurrency(self, run, seeded):
        async def scenario(editor):
            return await editor.refresh()

        assert len(run(scenario, max_concurrency=1)) == 2

    def test_other_vocabulary_not_included(self, run, seeded):
        backend, _, _ = seeded
        backend.add_word("elsewhere", vocab_id=2)

        async def scenario(editor):
            return await editor.refresh()

        assert "elsewhere" not in [w.expression for w in run(scenario)]


class TestLoadTitle:
    def test_title(self, run, backend):
        async def scenario(editor):
            await editor.refresh()
            return editor.view.title

        assert run(scenario) == "Daily words"

    def test_missing_title(self, run, backend):
        async def scenario(editor):
            await editor.refresh()
            return editor.view.title

        assert run(scenario, vocab_id=2) is None


class TestStaleRefresh:
    """A refresh overtaken by a newer one must not install its result."""

    def test_older_result_discarded(self, monkeypatch):
        async def scenario():
            release = asyncio.Event()
            calls = []

            async def fake_title(api, vocab_id):
                return "Daily words"

            async def fake_load(api, vocab_id, **kwargs):
                calls.append(vocab_id)
                if len(calls) == 1:
                    await release.wait()
                    return [Word(1, "old", ())]
                return [Word(2, "new", ())]

            monkeypatch.setattr(aggregator, "load_title", fake_title)
            monkeypatch.setattr(aggregator, "load_vocabulary", fake_load)

            async with VocabularyEditor(1) as editor:
                first = asyncio.create_task(editor.refresh())
                await asyncio.sleep(0)
                await editor.refresh()
                release.set()
                await first
                return editor.view.words

        words = asyncio.run(scenario())
        assert [w.expression for w in words] == ["new"]
