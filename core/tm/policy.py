"""
Match Policy
Reuse a stored translation or fall back to machine translation.
"""
import logging
from enum import Enum

from core.translation.engines.base import TranslationEngine

from .errors import FallbackOracleError
from .models import ExactHit, FuzzyHit, MatchResult
from .schemas import Origin, TranslatedSegment

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    REUSE = "reuse"
    FALLBACK = "fallback"


def decide(match: MatchResult) -> Decision:
    """Hits (already filtered by the matcher threshold) are reused; misses fall back."""
    if isinstance(match, (FuzzyHit, ExactHit)):
        return Decision.REUSE
    return Decision.FALLBACK


class MatchPolicy:
    """
    Turns a match into a segment translation.

    Fallback output is returned to the caller only; it is never written
    back to the store.
    """

    def __init__(self, engine: TranslationEngine):
        self.engine = engine

    async def resolve(
        self,
        match: MatchResult,
        segment: str,
        source_lang: str,
        target_lang: str,
    ) -> TranslatedSegment:
        if decide(match) == Decision.REUSE:
            if isinstance(match, FuzzyHit):
                source_text, score = match.source_text, match.score
            else:
                source_text, score = segment, 100.0
            return TranslatedSegment(
                segment=segment,
                translated_text=match.translated_text,
                source_text=source_text,
                similarity=score,
                origin=Origin.STORED,
            )

        logger.info("No stored match, machine translating segment (%d chars)", len(segment))
        result = await self.engine.translate(segment, source_lang, target_lang)
        if not result.success:
            logger.error("Fallback translation failed: %s", result.error)
            raise FallbackOracleError(
                f"Machine translation failed: {result.error}",
                segment=segment,
            )

        return TranslatedSegment(
            segment=segment,
            translated_text=result.translated_text,
            similarity=0.0,
            origin=Origin.FALLBACK,
        )
