"""
Translation Memory API Router
FastAPI endpoints for storing and reusing segment translations.
"""
from fastapi import APIRouter, File, Form, HTTPException, UploadFile
import logging

from core.tm.errors import StorageError
from core.tm.io import parse_rows
from core.tm.service import get_tm_service, TMService
from core.tm.schemas import (
    AddTranslationRequest, AddTranslationResponse,
    TranslateRequest, TranslateResponse,
    ImportResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Translation Memory"])


def get_service() -> TMService:
    """Get TM service instance."""
    return get_tm_service()


# =============================================================================
# ADD / TRANSLATE
# =============================================================================

@router.post(
    "/add-translation",
    response_model=AddTranslationResponse,
    response_model_exclude_none=True,
)
async def add_translation(data: AddTranslationRequest):
    """
    Store a translation, split into aligned sentences.

    - **source_lang**: Source language tag
    - **target_lang**: Target language tag (one collection per target)
    - **source_text**: Original text
    - **translated_text**: Its translation

    Existing sentences (case-insensitive) get their translation overwritten
    and keep their id; new ones are inserted.
    """
    service = get_service()
    return await service.add_translation(data)


@router.post(
    "/translate",
    response_model=TranslateResponse,
    response_model_exclude_none=True,
)
async def translate(data: TranslateRequest):
    """
    Translate text sentence by sentence.

    Stored translations with a similarity of at least 50 are reused; other
    sentences are machine translated. Nothing is written to the store.
    """
    service = get_service()
    return await service.translate(data)


# =============================================================================
# IMPORT
# =============================================================================

@router.post("/import-translations", response_model=ImportResult)
async def import_translations(
    file: UploadFile = File(...),
    source_lang: str = Form(...),
    target_lang: str = Form(...),
):
    """
    Import translations from a file.

    Supported formats: CSV, TMX

    CSV format: header row, then source text in the first column and its
    translation in the second
    TMX: Standard TMX format, units carrying both languages
    """
    service = get_service()

    content = await file.read()
    try:
        rows = parse_rows(
            content.decode("utf-8-sig"),
            file.filename or "",
            source_lang,
            target_lang,
        )
    except (UnicodeDecodeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return await service.import_rows(source_lang, target_lang, rows)


# =============================================================================
# HEALTH
# =============================================================================

@router.get("/es-health")
async def store_health():
    """Check that the segment store answers."""
    service = get_service()
    try:
        await service.health()
    except StorageError as e:
        logger.error(f"Store health check failed ({e.kind}): {e.message}")
        error = StorageError("Elasticsearch connection failed", details=e.details)
        error.status_code = e.status_code
        error.kind = e.kind
        raise error from e
    return {"status": "Elasticsearch connection OK"}
