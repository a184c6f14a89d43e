"""
Segment Store Database Models
SQLAlchemy models for collections and segments of the SQL backend.
"""
from datetime import datetime
from typing import List

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column, declarative_base
import uuid

Base = declarative_base()


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Collection(Base):
    """
    A per-target-language group of segments, e.g. "translations(french)".

    Created lazily on first use and never dropped.
    """

    __tablename__ = "tm_collections"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    segments: Mapped[List["SegmentRecord"]] = relationship(
        "SegmentRecord",
        back_populates="collection",
    )

    def __repr__(self):
        return f"<Collection {self.name}>"


class SegmentRecord(Base):
    """
    A stored source/translation sentence pair.

    source_key holds the lowercased source text for exact lookups. It is
    indexed but not unique: deduplication happens before writes.
    """

    __tablename__ = "tm_segments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )

    collection_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tm_collections.id"), nullable=False
    )

    # Language pair
    source_lang: Mapped[str] = mapped_column(String(64), nullable=False)
    target_lang: Mapped[str] = mapped_column(String(64), nullable=False)

    # Text content
    source_text: Mapped[str] = mapped_column(Text, nullable=False)
    source_key: Mapped[str] = mapped_column(Text, nullable=False)
    translated_text: Mapped[str] = mapped_column(Text, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    collection: Mapped["Collection"] = relationship(
        "Collection", back_populates="segments"
    )

    __table_args__ = (
        Index("idx_segment_pair", "collection_id", "source_lang", "target_lang"),
        Index("idx_segment_exact", "collection_id", "source_lang", "target_lang", "source_key"),
    )

    def __repr__(self):
        src = self.source_text[:30] + "..." if len(self.source_text) > 30 else self.source_text
        return f"<Segment {src}>"
