"""
Shared fixtures for translation memory unit tests.

Provides a file-backed SQLite segment store and a scripted fallback engine,
so the service flows run end to end without network access.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from core.store.sql_backend import SQLSegmentStore
from core.tm.segmenter import Segmenter
from core.tm.service import TMService
from core.translation.engines.base import TranslationEngine, TranslationResult


class FakeEngine(TranslationEngine):
    """Fallback engine returning canned translations and recording calls."""

    def __init__(self, translations: Optional[Dict[str, str]] = None, fail_on: Tuple[str, ...] = ()):
        self.translations = translations or {}
        self.fail_on = fail_on
        self.calls: List[Tuple[str, str, str]] = []
        self.closed = False

    @property
    def engine_id(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return True

    async def translate(self, text, source_lang, target_lang, **kwargs):
        self.calls.append((text, source_lang, target_lang))
        if text in self.fail_on:
            return TranslationResult(
                translated_text="",
                source_lang=source_lang,
                target_lang=target_lang,
                engine=self.engine_id,
                success=False,
                error="Server error: 500",
            )
        return TranslationResult(
            translated_text=self.translations.get(text, f"[{target_lang}] {text}"),
            source_lang=source_lang,
            target_lang=target_lang,
            engine=self.engine_id,
        )

    async def close(self):
        self.closed = True


@pytest.fixture
def sql_store(tmp_path):
    """SQLite store in a temporary directory."""
    return SQLSegmentStore(f"sqlite:///{tmp_path / 'tm.db'}")


@pytest.fixture
def make_engine():
    """Factory for engines with custom translations or failures."""
    return FakeEngine


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def service(sql_store, fake_engine):
    """TM service over the SQLite store and the fake engine."""
    return TMService(
        store=sql_store,
        engine=fake_engine,
        segmenter=Segmenter(),
        serialize_writes=False,
    )
