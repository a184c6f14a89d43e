"""
Machine translation used as the fallback when the translation memory
has no usable match.
"""

from typing import Optional

from .engines.base import TranslationEngine, TranslationResult
from .engines.openai_engine import OpenAIEngine

__all__ = [
    "TranslationEngine",
    "TranslationResult",
    "OpenAIEngine",
    "get_translation_engine",
]

_engine: Optional[TranslationEngine] = None


def get_translation_engine() -> TranslationEngine:
    """Get or create the configured fallback engine."""
    global _engine
    if _engine is None:
        from config.settings import settings
        _engine = OpenAIEngine(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            temperature=settings.openai_temperature,
            max_completion_tokens=settings.openai_max_completion_tokens,
        )
    return _engine
