"""
SegmentStore protocol: the contract every store backend must satisfy.

The store is an opaque retrieval oracle: it keeps segments grouped in
collections, answers exact and ranked fuzzy lookups, and applies batch
writes that are visible to reads as soon as bulk() returns.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from core.tm.models import BulkItemResult, BulkOperation, StoredSegment


@runtime_checkable
class SegmentStore(Protocol):
    """
    Protocol that all segment store backends must implement.

    Backends raise core.tm.errors.StorageError subclasses on failure.
    """

    async def ensure_collection(self, name: str) -> None:
        """Create the collection with the fixed schema if it does not exist."""
        ...

    async def find_exact(
        self, name: str, source_lang: str, target_lang: str, source_text: str
    ) -> Optional[StoredSegment]:
        """Case-insensitive full-string match on source_text within the pair."""
        ...

    async def find_fuzzy(
        self, name: str, source_lang: str, target_lang: str, source_text: str
    ) -> Optional[StoredSegment]:
        """Top-ranked segment of the pair matching at least one fuzzy strategy."""
        ...

    async def bulk(
        self, name: str, operations: List[BulkOperation]
    ) -> List[BulkItemResult]:
        """Apply all operations in one batch; results align with operations."""
        ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...
