"""
Translation Memory Domain Models
Plain data carried between the segmenter, store adapters and service.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


def collection_name(target_lang: str) -> str:
    """One collection per target language."""
    return f"translations({target_lang})"


@dataclass(frozen=True)
class StoredSegment:
    """A segment as held by the store."""
    id: str
    source_lang: str
    target_lang: str
    source_text: str
    translated_text: str


@dataclass(frozen=True)
class SegmentPair:
    """Aligned source/translation sentence from one add-translation request."""
    source: str
    translated: str


# ==================== MATCH RESULTS ====================

@dataclass(frozen=True)
class ExactHit:
    id: str
    translated_text: str


@dataclass(frozen=True)
class FuzzyHit:
    id: str
    translated_text: str
    source_text: str
    score: float


@dataclass(frozen=True)
class Miss:
    pass


MatchResult = Union[ExactHit, FuzzyHit, Miss]


# ==================== BULK WRITES ====================

class BulkAction(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


@dataclass
class BulkOperation:
    """
    One directive of a batch write.

    Inserts carry the full document; updates only overwrite
    translated_text of the segment with the given id.
    """
    action: BulkAction
    translated_text: str
    source_lang: Optional[str] = None
    target_lang: Optional[str] = None
    source_text: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def insert(cls, source_lang: str, target_lang: str, source_text: str, translated_text: str):
        return cls(
            action=BulkAction.INSERT,
            source_lang=source_lang,
            target_lang=target_lang,
            source_text=source_text,
            translated_text=translated_text,
        )

    @classmethod
    def update(cls, segment_id: str, translated_text: str):
        return cls(action=BulkAction.UPDATE, id=segment_id, translated_text=translated_text)


@dataclass
class BulkItemResult:
    """Outcome of one directive, in the same position as the directive."""
    id: Optional[str]
    error: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.error is None
