"""
SQLAlchemy implementation of SegmentStore.

Keeps segments in a relational database (SQLite by default). Exact
lookups use the indexed lowercase key; fuzzy lookups rank the pair's
segments in Python with the same three weighted strategies as the
Elasticsearch query.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Iterator, List, Optional

from rapidfuzz.distance import Levenshtein
from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.tm.errors import StorageProtocolError, StorageUnavailable
from core.tm.models import BulkAction, BulkItemResult, BulkOperation, StoredSegment

from .models import Base, Collection, SegmentRecord, generate_uuid
from .queries import ALL_TERMS_BOOST, FUZZY_BOOST, PHRASE_BOOST

logger = logging.getLogger(__name__)

_TERM = re.compile(r"\w+")
_SPACES = re.compile(r"\s+")


def _terms(value: str) -> List[str]:
    return _TERM.findall(value.lower())


def _max_edits(term: str) -> int:
    """Edit distance allowed for a term, as fuzziness AUTO."""
    if len(term) <= 2:
        return 0
    if len(term) <= 5:
        return 1
    return 2


def fuzzy_relevance(query: str, candidate: str) -> float:
    """
    Weighted relevance of candidate for query; 0 means no strategy matched.

    Exact phrase (PHRASE_BOOST) + every query term present (ALL_TERMS_BOOST)
    + share of query terms within fuzzy edit distance (FUZZY_BOOST).
    """
    query_terms = _terms(query)
    candidate_terms = _terms(candidate)
    if not query_terms or not candidate_terms:
        return 0.0

    relevance = 0.0

    phrase = _SPACES.sub(" ", query.lower().strip())
    if phrase and phrase in _SPACES.sub(" ", candidate.lower()):
        relevance += PHRASE_BOOST

    candidate_set = set(candidate_terms)
    if all(term in candidate_set for term in query_terms):
        relevance += ALL_TERMS_BOOST

    fuzzy_matched = 0
    for term in query_terms:
        max_edits = _max_edits(term)
        if any(
            Levenshtein.distance(term, other, score_cutoff=max_edits) <= max_edits
            for other in candidate_set
        ):
            fuzzy_matched += 1
    relevance += FUZZY_BOOST * fuzzy_matched / len(query_terms)

    return relevance


class SQLSegmentStore:
    """
    SegmentStore over SQLAlchemy.

    Each bulk() runs in one transaction and commits before returning,
    so the batch is all-or-nothing and immediately readable.
    """

    def __init__(self, database_url: str = "sqlite:///data/tm.db"):
        self.database_url = database_url
        self._engine = None
        self._session_factory = None

    @property
    def engine(self):
        """Get or create SQLAlchemy engine."""
        if self._engine is None:
            kwargs = {"echo": False}
            if self.database_url.startswith("sqlite"):
                kwargs["connect_args"] = {"check_same_thread": False}
                if self.database_url in ("sqlite://", "sqlite:///:memory:"):
                    kwargs["poolclass"] = StaticPool
            self._engine = create_engine(self.database_url, **kwargs)
            Base.metadata.create_all(self._engine)
        return self._engine

    @property
    def session_factory(self):
        """Get session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Session scope that maps database failures onto storage errors."""
        try:
            with self.session_factory() as session:
                yield session
        except OperationalError as e:
            logger.error("Database unavailable: %s", e)
            raise StorageUnavailable("Database unavailable", details=str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error("Database error: %s", e)
            raise StorageProtocolError("Database error", details=str(e)) from e

    def _collection_id(self, session: Session, name: str) -> Optional[str]:
        collection = session.query(Collection).filter(Collection.name == name).first()
        return collection.id if collection else None

    @staticmethod
    def _to_segment(record: SegmentRecord) -> StoredSegment:
        return StoredSegment(
            id=record.id,
            source_lang=record.source_lang,
            target_lang=record.target_lang,
            source_text=record.source_text,
            translated_text=record.translated_text,
        )

    # ==================== COLLECTIONS ====================

    async def ensure_collection(self, name: str) -> None:
        with self.get_session() as session:
            if self._collection_id(session, name):
                return
            session.add(Collection(id=generate_uuid(), name=name))
            try:
                session.commit()
                logger.info("Created collection %s", name)
            except IntegrityError:
                session.rollback()
                logger.debug("Collection %s created concurrently", name)

    # ==================== LOOKUPS ====================

    def _pair_query(self, session: Session, name: str, source_lang: str, target_lang: str):
        return session.query(SegmentRecord).join(Collection).filter(
            Collection.name == name,
            SegmentRecord.source_lang == source_lang,
            SegmentRecord.target_lang == target_lang,
        )

    async def find_exact(
        self, name: str, source_lang: str, target_lang: str, source_text: str
    ) -> Optional[StoredSegment]:
        with self.get_session() as session:
            record = self._pair_query(session, name, source_lang, target_lang).filter(
                SegmentRecord.source_key == source_text.lower()
            ).order_by(SegmentRecord.created_at).first()
            return self._to_segment(record) if record else None

    async def find_fuzzy(
        self, name: str, source_lang: str, target_lang: str, source_text: str
    ) -> Optional[StoredSegment]:
        with self.get_session() as session:
            records = self._pair_query(session, name, source_lang, target_lang).order_by(
                SegmentRecord.created_at
            ).all()

        best = None
        best_relevance = 0.0
        for record in records:
            relevance = fuzzy_relevance(source_text, record.source_text)
            if relevance > best_relevance:
                best, best_relevance = record, relevance

        return self._to_segment(best) if best else None

    # ==================== WRITES ====================

    async def bulk(self, name: str, operations: List[BulkOperation]) -> List[BulkItemResult]:
        if not operations:
            return []

        results = []
        with self.get_session() as session:
            collection_id = self._collection_id(session, name)
            if collection_id is None:
                raise StorageProtocolError(
                    f"Collection {name} does not exist", status_code=404
                )

            for op in operations:
                if op.action == BulkAction.UPDATE:
                    record = session.query(SegmentRecord).filter(
                        SegmentRecord.collection_id == collection_id,
                        SegmentRecord.id == op.id,
                    ).first()
                    if record is None:
                        results.append(BulkItemResult(
                            id=op.id,
                            error={
                                "type": "document_missing_exception",
                                "reason": f"[{op.id}]: document missing",
                            },
                        ))
                        continue
                    record.translated_text = op.translated_text
                    results.append(BulkItemResult(id=record.id))
                else:
                    record = SegmentRecord(
                        id=generate_uuid(),
                        collection_id=collection_id,
                        source_lang=op.source_lang,
                        target_lang=op.target_lang,
                        source_text=op.source_text,
                        source_key=op.source_text.lower(),
                        translated_text=op.translated_text,
                    )
                    session.add(record)
                    results.append(BulkItemResult(id=record.id))

            session.commit()

        return results

    # ==================== HEALTH ====================

    async def ping(self) -> bool:
        with self.get_session() as session:
            session.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
