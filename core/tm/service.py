"""
Translation Memory Service
Business logic layer for TM operations.
"""
import asyncio
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from core.translation.engines.base import TranslationEngine

from .errors import ValidationError
from .matcher import TMMatcher
from .models import SegmentPair, collection_name
from .normalizer import normalize_language, normalize_text
from .policy import MatchPolicy
from .schemas import (
    Action,
    AddTranslationRequest,
    AddTranslationResponse,
    ImportResult,
    TranslatedSegment,
    TranslateRequest,
    TranslateResponse,
)
from .segmenter import Segmenter, get_segmenter
from .upsert import UpsertEngine

if TYPE_CHECKING:
    from core.store.protocol import SegmentStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields are required"


class TMService:
    """
    Service layer for Translation Memory operations.

    Handles validation, segmentation, matching and writes. Dependencies
    default to the configured store and fallback engine.
    """

    def __init__(
        self,
        store: Optional["SegmentStore"] = None,
        engine: Optional[TranslationEngine] = None,
        segmenter: Optional[Segmenter] = None,
        serialize_writes: Optional[bool] = None,
    ):
        """Initialize service."""
        if store is None:
            from core.store.config import get_segment_store
            store = get_segment_store()
        if engine is None:
            from core.translation import get_translation_engine
            engine = get_translation_engine()
        if serialize_writes is None:
            from config.settings import settings
            serialize_writes = settings.tm_serialize_writes

        self.store = store
        self.engine = engine
        self.segmenter = segmenter or get_segmenter()
        self.matcher = TMMatcher(store)
        self.policy = MatchPolicy(engine)
        self.upserter = UpsertEngine(self.matcher, serialize_writes=serialize_writes)

    # ==================== ADD TRANSLATION ====================

    async def add_translation(self, request: AddTranslationRequest) -> AddTranslationResponse:
        """
        Store a source text and its translation, sentence by sentence.

        Raises:
            ValidationError: If any field is empty after normalization
        """
        source_lang = normalize_language(request.source_lang)
        target_lang = normalize_language(request.target_lang)
        source_text = normalize_text(request.source_text)
        translated_text = normalize_text(request.translated_text)

        if not all([source_lang, target_lang, source_text, translated_text]):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        pairs = self.segmenter.align(source_text, translated_text, source_lang, target_lang)
        results = await self.upserter.upsert(source_lang, target_lang, pairs)

        return AddTranslationResponse(segments=results)

    # ==================== TRANSLATE ====================

    async def translate(self, request: TranslateRequest) -> TranslateResponse:
        """
        Translate a text segment by segment, reusing stored translations.

        Nothing is written to the store. If the fallback engine fails for
        any segment the whole request fails.

        Raises:
            ValidationError: If any field is empty after normalization
            FallbackOracleError: If machine translation of a segment fails
        """
        source_lang = normalize_language(request.source_lang)
        target_lang = normalize_language(request.target_lang)
        source_text = normalize_text(request.source_text)

        if not all([source_lang, target_lang, source_text]):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        collection = collection_name(target_lang)
        await self.store.ensure_collection(collection)

        segments = self.segmenter.segment(source_text, source_lang, target_lang)
        translated = await asyncio.gather(*[
            self._translate_segment(collection, source_lang, target_lang, segment)
            for segment in segments
        ])

        return TranslateResponse(
            translated_text=" ".join(item.translated_text for item in translated),
            segments=list(translated),
        )

    async def _translate_segment(
        self,
        collection: str,
        source_lang: str,
        target_lang: str,
        segment: str,
    ) -> TranslatedSegment:
        match = await self.matcher.find_fuzzy(collection, source_lang, target_lang, segment)
        return await self.policy.resolve(match, segment, source_lang, target_lang)

    # ==================== BATCH IMPORT ====================

    async def import_rows(
        self,
        source_lang: str,
        target_lang: str,
        rows: Iterable[SegmentPair],
    ) -> ImportResult:
        """
        Import source/translation rows for one language pair in one batch.

        Rows with an empty side after normalization are skipped. Each row
        is aligned like add_translation; repeated sources across the whole
        import collapse to the last translation.

        Raises:
            ValidationError: If a language is empty after normalization
        """
        source_lang = normalize_language(source_lang)
        target_lang = normalize_language(target_lang)
        if not source_lang or not target_lang:
            raise ValidationError("Source and target languages are required")

        pairs: List[SegmentPair] = []
        skipped = 0
        for row in rows:
            source = normalize_text(row.source)
            translated = normalize_text(row.translated)
            if not source or not translated:
                skipped += 1
                continue
            pairs.extend(self.segmenter.align(source, translated, source_lang, target_lang))

        results = await self.upserter.upsert(source_lang, target_lang, pairs)
        distinct = {result.segment.lower(): result for result in results}.values()

        errors = [
            {"segment": result.segment, "error": result.error}
            for result in distinct if result.error is not None
        ]
        written = [result for result in distinct if result.error is None]

        logger.info(
            "Imported %d rows into %s (%d skipped, %d errors)",
            len(written), collection_name(target_lang), skipped, len(errors),
        )
        return ImportResult(
            inserted=sum(1 for r in written if r.action == Action.INSERTED),
            updated=sum(1 for r in written if r.action == Action.UPDATED),
            skipped=skipped,
            errors=errors,
        )

    # ==================== LIFECYCLE ====================

    async def health(self) -> bool:
        """Ping the store; raises StorageError when it cannot be reached."""
        return await self.store.ping()

    async def close(self):
        await self.store.close()
        await self.engine.close()


# Global instance
_service: Optional[TMService] = None


def get_tm_service() -> TMService:
    """Get TM service instance."""
    global _service
    if _service is None:
        _service = TMService()
    return _service
