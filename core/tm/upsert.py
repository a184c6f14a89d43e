"""
Upsert Engine
Idempotent batch write of aligned segments into the store.
"""
import asyncio
import logging
from collections import OrderedDict
from typing import Dict, List, Sequence, Tuple

from .matcher import TMMatcher
from .models import BulkOperation, ExactHit, SegmentPair, collection_name
from .schemas import Action, SegmentUpsertResult

logger = logging.getLogger(__name__)


def collapse_duplicates(pairs: Sequence[SegmentPair]) -> List[SegmentPair]:
    """
    Merge pairs whose source differs only by case.

    The first spelling of the source is kept, the last translation wins,
    and first-occurrence order is preserved.
    """
    merged: "OrderedDict[str, SegmentPair]" = OrderedDict()
    for pair in pairs:
        key = pair.source.lower()
        if key in merged:
            merged[key] = SegmentPair(source=merged[key].source, translated=pair.translated)
        else:
            merged[key] = pair
    return list(merged.values())


class UpsertEngine:
    """
    Inserts new segments and overwrites translations of existing ones.

    Every call looks up all segments first, then applies a single bulk
    write. Repeating a call with the same input yields only updates with
    the ids from the first call.
    """

    def __init__(self, matcher: TMMatcher, serialize_writes: bool = False):
        self.matcher = matcher
        self.serialize_writes = serialize_writes
        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}

    @property
    def store(self):
        return self.matcher.store

    def _lock_for(self, source_lang: str, target_lang: str) -> asyncio.Lock:
        key = (source_lang, target_lang)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def upsert(
        self,
        source_lang: str,
        target_lang: str,
        pairs: Sequence[SegmentPair],
    ) -> List[SegmentUpsertResult]:
        """
        Upsert aligned pairs for one language pair.

        Args:
            source_lang: Normalized source language
            target_lang: Normalized target language
            pairs: Aligned source/translation segments

        Returns:
            One result per input pair, in input order; repeated
            segments share the result of their merged directive
        """
        if not pairs:
            return []

        if self.serialize_writes:
            async with self._lock_for(source_lang, target_lang):
                return await self._upsert(source_lang, target_lang, pairs)
        return await self._upsert(source_lang, target_lang, pairs)

    async def _upsert(
        self,
        source_lang: str,
        target_lang: str,
        pairs: Sequence[SegmentPair],
    ) -> List[SegmentUpsertResult]:
        collection = collection_name(target_lang)
        await self.store.ensure_collection(collection)

        distinct = collapse_duplicates(pairs)

        matches = await asyncio.gather(*[
            self.matcher.find_exact(collection, source_lang, target_lang, pair.source)
            for pair in distinct
        ])

        operations = []
        actions = []
        for pair, match in zip(distinct, matches):
            if isinstance(match, ExactHit):
                operations.append(BulkOperation.update(match.id, pair.translated))
                actions.append(Action.UPDATED)
            else:
                operations.append(BulkOperation.insert(
                    source_lang, target_lang, pair.source, pair.translated,
                ))
                actions.append(Action.INSERTED)

        items = await self.store.bulk(collection, operations)

        by_source = {}
        for pair, operation, action, item in zip(distinct, operations, actions, items):
            segment_id = operation.id or item.id
            if not item.ok:
                logger.warning(
                    "Bulk %s failed for segment in %s: %s",
                    operation.action.value, collection, item.error,
                )
            by_source[pair.source.lower()] = (segment_id, action, item.error)

        inserted = sum(1 for a in actions if a == Action.INSERTED)
        logger.info(
            "Upserted %d segments into %s (%d inserted, %d updated)",
            len(distinct), collection, inserted, len(distinct) - inserted,
        )

        results = []
        for pair in pairs:
            segment_id, action, error = by_source[pair.source.lower()]
            results.append(SegmentUpsertResult(
                segment=pair.source, id=segment_id, action=action, error=error,
            ))
        return results
