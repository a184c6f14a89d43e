"""
Translation Memory Pydantic Schemas
Request/response shapes of the add-translation and translate flows.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field
from enum import Enum


# ==================== ENUMS ====================

class Action(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"


class Origin(str, Enum):
    STORED = "stored"       # Reused from the translation memory
    FALLBACK = "fallback"   # Machine translated


# ==================== ADD TRANSLATION ====================

class AddTranslationRequest(BaseModel):
    """
    Source text and its translation for one language pair.

    Fields are optional here so that missing and empty values are both
    rejected after normalization with the same ValidationError.
    """
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    source_text: Optional[str] = None
    translated_text: Optional[str] = None


class SegmentUpsertResult(BaseModel):
    """Outcome for one source segment."""
    segment: str
    id: Optional[str] = None
    action: Action
    error: Optional[Any] = None


class AddTranslationResponse(BaseModel):
    segments: List[SegmentUpsertResult]


# ==================== TRANSLATE ====================

class TranslateRequest(BaseModel):
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    source_text: Optional[str] = None


class TranslatedSegment(BaseModel):
    """Translation of one input segment and where it came from."""
    segment: str
    translated_text: str
    source_text: Optional[str] = None  # Stored source of a reused segment
    similarity: float = Field(..., ge=0.0, le=100.0)
    origin: Origin


class TranslateResponse(BaseModel):
    translated_text: str
    segments: List[TranslatedSegment]


# ==================== IMPORT ====================

class ImportResult(BaseModel):
    """Result of a batch import."""
    inserted: int
    updated: int
    skipped: int
    errors: List[dict]
