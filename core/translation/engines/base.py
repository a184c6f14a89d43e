"""
Base Translation Engine Abstract Class
Machine translation backends used when no stored segment is close enough.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TranslationResult:
    """Result of a translation operation"""
    translated_text: str
    source_lang: str
    target_lang: str
    engine: str
    success: bool = True
    tokens_used: Optional[int] = None
    error: Optional[str] = None
    metadata: dict = field(default_factory=dict)


class TranslationEngine(ABC):
    """
    Abstract base class for machine translation engines.

    translate() must not raise for provider failures: it reports them
    through TranslationResult.success and TranslationResult.error.
    Engines have no side effects, so repeated calls are safe.
    """

    @property
    @abstractmethod
    def engine_id(self) -> str:
        """Unique engine identifier"""
        pass

    @abstractmethod
    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        **kwargs
    ) -> TranslationResult:
        """
        Translate text from source to target language.

        Args:
            text: Text to translate
            source_lang: Normalized source language tag ("english", "en", ...)
            target_lang: Normalized target language tag

        Returns:
            TranslationResult with translated text or error
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """True if the engine is configured to accept requests"""
        pass

    async def close(self) -> None:
        """Release network resources."""
