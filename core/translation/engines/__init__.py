"""Translation Engines Package"""

from .base import TranslationEngine, TranslationResult
from .openai_engine import OpenAIEngine

__all__ = [
    "TranslationEngine",
    "TranslationResult",
    "OpenAIEngine",
]
