"""
Store configuration: reads STORE_BACKEND from settings
and returns the appropriate backend instance.
"""

from __future__ import annotations

from typing import Optional

from .protocol import SegmentStore


def get_segment_store(backend_type: Optional[str] = None) -> SegmentStore:
    """
    Factory: return a SegmentStore for the configured backend.

    Args:
        backend_type: "elasticsearch" or "sqlite". Defaults to settings.store_backend.
    """
    from config.settings import settings

    backend_type = backend_type or settings.store_backend

    if backend_type == "elasticsearch":
        from .elasticsearch_backend import ElasticsearchStore
        return ElasticsearchStore(
            node=settings.es_node,
            api_key=settings.es_api_key,
            timeout=settings.es_timeout,
        )

    if backend_type == "sqlite":
        from .sql_backend import SQLSegmentStore
        return SQLSegmentStore(settings.get_database_url())

    raise ValueError(f"Unsupported store backend: {backend_type}")
