"""
Segment store abstraction.

Usage:
    from core.store import get_segment_store

    store = get_segment_store()
    await store.ensure_collection("translations(french)")
    hit = await store.find_exact("translations(french)", "en", "french", "Hello.")
"""

from .config import get_segment_store
from .protocol import SegmentStore
from .elasticsearch_backend import ElasticsearchStore
from .sql_backend import SQLSegmentStore

__all__ = [
    "get_segment_store",
    "SegmentStore",
    "ElasticsearchStore",
    "SQLSegmentStore",
]
