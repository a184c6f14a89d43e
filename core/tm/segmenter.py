"""
Text Segmenter
Split text into sentence-level translation units and align source/target.
"""
import re
import logging
from typing import List, Optional

from .models import SegmentPair

logger = logging.getLogger(__name__)

# Writing systems that do not split reliably on sentence punctuation.
# Tags are compared after normalize_language().
NON_SEGMENT_LANGUAGES = frozenset({
    "arabic",
    "japanese",
    "korean",
    "simplified-chinese",
    "traditional-chinese",
    "ar",
    "ja",
    "ko",
    "zh",
    "zh-cn",
    "zh-tw",
    "zh-hans",
    "zh-hant",
})


class Segmenter:
    """
    Sentence segmenter for Translation Memory.

    Splits on terminal punctuation followed by whitespace, keeping the
    punctuation (and any closing quote or bracket) with its sentence.
    """

    # Terminal punctuation, optional closers, then whitespace
    SENTENCE_BOUNDARY = re.compile(r'([.!?…]+)["\'”’»)\]]*\s+')

    # Tokens whose trailing period does not end a sentence
    ABBREVIATIONS = frozenset({
        "mr", "mrs", "ms", "dr", "prof", "sr", "jr", "st", "vs",
        "e.g", "i.e", "fig", "no", "approx", "dept", "est", "mt",
    })

    def __init__(self, non_segment_languages: Optional[frozenset] = None):
        self.non_segment_languages = (
            NON_SEGMENT_LANGUAGES if non_segment_languages is None
            else non_segment_languages
        )

    def is_non_segmenting(self, language: Optional[str]) -> bool:
        return bool(language) and language in self.non_segment_languages

    def segment(self, text: str, *languages: str) -> List[str]:
        """
        Split text into trimmed, non-empty sentences in source order.

        Args:
            text: Normalized text
            *languages: Language tags of the request; if any of them is
                non-segmenting the whole text is one segment

        Returns:
            List of sentence strings
        """
        text = (text or "").strip()
        if not text:
            return []

        if any(self.is_non_segmenting(lang) for lang in languages):
            return [text]

        segments = []
        start = 0

        for match in self.SENTENCE_BOUNDARY.finditer(text):
            if not self._is_boundary(text, match):
                continue
            sentence = text[start:match.end()].strip()
            if sentence:
                segments.append(sentence)
            start = match.end()

        tail = text[start:].strip()
        if tail:
            segments.append(tail)

        return segments

    def align(
        self,
        source_text: str,
        translated_text: str,
        source_lang: str,
        target_lang: str,
    ) -> List[SegmentPair]:
        """
        Segment source and translation independently and pair them up.

        When the segment counts differ, both texts are kept whole: a
        count mismatch means the sentences cannot be paired safely.
        """
        source_segments = self.segment(source_text, source_lang, target_lang)
        translated_segments = self.segment(translated_text, source_lang, target_lang)

        if len(source_segments) != len(translated_segments):
            logger.debug(
                "Segment count mismatch (%d vs %d), storing whole texts",
                len(source_segments), len(translated_segments),
            )
            return [SegmentPair(source_text.strip(), translated_text.strip())]

        return [
            SegmentPair(source, translated)
            for source, translated in zip(source_segments, translated_segments)
        ]

    def _is_boundary(self, text: str, match: re.Match) -> bool:
        """Reject abbreviations and breaks followed by a lowercase word."""
        next_char = text[match.end():match.end() + 1]
        if next_char.islower():
            return False

        if match.group(1) == ".":
            before = text[:match.start()].rsplit(None, 1)
            token = before[-1].lstrip("\"'“‘«([") if before else ""
            if token.lower() in self.ABBREVIATIONS:
                return False

        return True


# Global instance
_segmenter: Optional[Segmenter] = None


def get_segmenter() -> Segmenter:
    """Get segmenter instance."""
    global _segmenter
    if _segmenter is None:
        _segmenter = Segmenter()
    return _segmenter
