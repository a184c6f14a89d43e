"""
Translation Memory Module
Store and reuse previously translated segments.

Key components:
- TMService: Add-translation, translate and batch import flows
- Segmenter: Split text into sentences and align source/target
- TMMatcher: Exact and fuzzy lookups with similarity filtering
- MatchPolicy: Reuse a stored translation or fall back to MT
- UpsertEngine: Idempotent batch writes
"""

from .service import TMService, get_tm_service
from .matcher import TMMatcher, SIMILARITY_THRESHOLD
from .policy import MatchPolicy
from .upsert import UpsertEngine
from .segmenter import Segmenter, get_segmenter
from .scorer import similarity
from .errors import TMError

__all__ = [
    "TMService",
    "get_tm_service",
    "TMMatcher",
    "SIMILARITY_THRESHOLD",
    "MatchPolicy",
    "UpsertEngine",
    "Segmenter",
    "get_segmenter",
    "similarity",
    "TMError",
]
