"""
TM Matcher
Exact and fuzzy segment lookups against the store, with the
post-retrieval similarity filter.
"""
import logging
from typing import TYPE_CHECKING

from .models import ExactHit, FuzzyHit, MatchResult, Miss
from .scorer import similarity

if TYPE_CHECKING:
    from core.store.protocol import SegmentStore

logger = logging.getLogger(__name__)

# Fuzzy hits scoring below this are treated as misses
SIMILARITY_THRESHOLD = 50.0


class TMMatcher:
    """
    Translation Memory Matcher.

    The store ranks fuzzy candidates by its own relevance; the top hit is
    then re-scored with the bigram similarity and kept only at or above
    SIMILARITY_THRESHOLD. The two scores are independent.
    """

    def __init__(self, store: "SegmentStore", threshold: float = SIMILARITY_THRESHOLD):
        self.store = store
        self.threshold = threshold

    async def find_exact(
        self,
        collection: str,
        source_lang: str,
        target_lang: str,
        source_text: str,
    ) -> MatchResult:
        """Case-insensitive exact match within the language pair."""
        segment = await self.store.find_exact(collection, source_lang, target_lang, source_text)
        if segment is None:
            return Miss()
        return ExactHit(id=segment.id, translated_text=segment.translated_text)

    async def find_fuzzy(
        self,
        collection: str,
        source_lang: str,
        target_lang: str,
        source_text: str,
    ) -> MatchResult:
        """
        Best fuzzy match within the language pair.

        Returns:
            FuzzyHit with its similarity score, or Miss when there is no
            hit, the hit has no translation, or it scores below threshold
        """
        segment = await self.store.find_fuzzy(collection, source_lang, target_lang, source_text)
        if segment is None or not segment.translated_text:
            return Miss()

        score = similarity(source_text, segment.source_text)
        if score < self.threshold:
            logger.debug("Fuzzy hit %s below threshold (%.2f)", segment.id, score)
            return Miss()

        return FuzzyHit(
            id=segment.id,
            translated_text=segment.translated_text,
            source_text=segment.source_text,
            score=score,
        )
