"""Tests for core/tm/upsert.py: batch insert/update of aligned segments."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from core.tm.matcher import TMMatcher
from core.tm.models import (
    BulkAction, BulkItemResult, SegmentPair, StoredSegment,
)
from core.tm.schemas import Action
from core.tm.upsert import UpsertEngine, collapse_duplicates


def stored(source, segment_id):
    return StoredSegment(
        id=segment_id, source_lang="en", target_lang="fr",
        source_text=source, translated_text="old",
    )


@pytest.fixture
def store():
    mock = AsyncMock()
    mock.find_exact.return_value = None
    return mock


@pytest.fixture
def engine(store):
    return UpsertEngine(TMMatcher(store))


class TestCollapseDuplicates:

    def test_case_insensitive_last_translation_wins(self):
        pairs = [
            SegmentPair("Hello.", "Bonjour."),
            SegmentPair("Bye.", "Au revoir."),
            SegmentPair("HELLO.", "Salut."),
        ]
        assert collapse_duplicates(pairs) == [
            SegmentPair("Hello.", "Salut."),
            SegmentPair("Bye.", "Au revoir."),
        ]

    def test_no_duplicates_unchanged(self):
        pairs = [SegmentPair("A.", "X."), SegmentPair("B.", "Y.")]
        assert collapse_duplicates(pairs) == pairs


class TestUpsert:

    @pytest.mark.asyncio
    async def test_new_segments_are_inserted(self, engine, store):
        store.bulk.return_value = [BulkItemResult(id="id-1"), BulkItemResult(id="id-2")]

        results = await engine.upsert("en", "fr", [
            SegmentPair("Hello.", "Bonjour."),
            SegmentPair("How are you?", "Comment allez-vous ?"),
        ])

        store.ensure_collection.assert_awaited_once_with("translations(fr)")
        assert [r.action for r in results] == [Action.INSERTED, Action.INSERTED]
        assert [r.id for r in results] == ["id-1", "id-2"]
        assert [r.segment for r in results] == ["Hello.", "How are you?"]

        collection, operations = store.bulk.await_args.args
        assert collection == "translations(fr)"
        assert [op.action for op in operations] == [BulkAction.INSERT, BulkAction.INSERT]
        assert operations[0].source_text == "Hello."
        assert operations[0].translated_text == "Bonjour."

    @pytest.mark.asyncio
    async def test_existing_segment_is_updated_with_same_id(self, engine, store):
        store.find_exact.return_value = stored("hello.", "existing-id")
        store.bulk.return_value = [BulkItemResult(id="existing-id")]

        results = await engine.upsert("en", "fr", [SegmentPair("Hello.", "Salut.")])

        assert results[0].action == Action.UPDATED
        assert results[0].id == "existing-id"
        _, operations = store.bulk.await_args.args
        assert operations[0].action == BulkAction.UPDATE
        assert operations[0].id == "existing-id"
        assert operations[0].translated_text == "Salut."

    @pytest.mark.asyncio
    async def test_single_bulk_call(self, engine, store):
        store.bulk.return_value = [BulkItemResult(id=str(i)) for i in range(3)]
        await engine.upsert("en", "fr", [
            SegmentPair("One.", "Un."), SegmentPair("Two.", "Deux."), SegmentPair("Three.", "Trois."),
        ])
        assert store.bulk.await_count == 1
        assert store.find_exact.await_count == 3

    @pytest.mark.asyncio
    async def test_ids_resolved_positionally_with_mixed_actions(self, engine, store):
        async def find_exact(collection, source_lang, target_lang, text):
            return stored(text, "known") if text == "Known." else None

        store.find_exact.side_effect = find_exact
        store.bulk.return_value = [
            BulkItemResult(id="new-1"),
            BulkItemResult(id="known"),
            BulkItemResult(id="new-2"),
        ]

        results = await engine.upsert("en", "fr", [
            SegmentPair("First.", "Premier."),
            SegmentPair("Known.", "Connu."),
            SegmentPair("Last.", "Dernier."),
        ])

        assert [(r.id, r.action) for r in results] == [
            ("new-1", Action.INSERTED),
            ("known", Action.UPDATED),
            ("new-2", Action.INSERTED),
        ]

    @pytest.mark.asyncio
    async def test_repeated_segment_in_one_request_writes_once(self, engine, store):
        store.bulk.return_value = [BulkItemResult(id="only-id")]

        results = await engine.upsert("en", "fr", [
            SegmentPair("Yes.", "Oui."),
            SegmentPair("yes.", "Ouais."),
        ])

        _, operations = store.bulk.await_args.args
        assert len(operations) == 1
        assert operations[0].translated_text == "Ouais."
        assert [r.segment for r in results] == ["Yes.", "yes."]
        assert {r.id for r in results} == {"only-id"}

    @pytest.mark.asyncio
    async def test_per_item_error_is_reported(self, engine, store):
        error = {"type": "mapper_parsing_exception", "reason": "failed to parse"}
        store.bulk.return_value = [BulkItemResult(id="ok-id"), BulkItemResult(id=None, error=error)]

        results = await engine.upsert("en", "fr", [
            SegmentPair("Good.", "Bon."),
            SegmentPair("Bad.", "Mauvais."),
        ])

        assert results[0].error is None
        assert results[1].error == error
        assert results[1].id is None

    @pytest.mark.asyncio
    async def test_empty_input_touches_nothing(self, engine, store):
        assert await engine.upsert("en", "fr", []) == []
        store.ensure_collection.assert_not_called()
        store.bulk.assert_not_called()


class TestSerializedWrites:

    @pytest.mark.asyncio
    async def test_lock_serializes_same_pair(self, store):
        engine = UpsertEngine(TMMatcher(store), serialize_writes=True)
        active = 0
        peak = 0

        async def slow_bulk(collection, operations):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return [BulkItemResult(id="x") for _ in operations]

        store.bulk.side_effect = slow_bulk

        await asyncio.gather(
            engine.upsert("en", "fr", [SegmentPair("A.", "X.")]),
            engine.upsert("en", "fr", [SegmentPair("B.", "Y.")]),
        )
        assert peak == 1

    def test_lock_per_language_pair(self, store):
        engine = UpsertEngine(TMMatcher(store), serialize_writes=True)
        assert engine._lock_for("en", "fr") is engine._lock_for("en", "fr")
        assert engine._lock_for("en", "fr") is not engine._lock_for("en", "de")
