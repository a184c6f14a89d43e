"""
Translation Memory Import Module

Reads source/translation rows for a batch import.

Supports:
- CSV (spreadsheet export: header row, source in column 1, translation in column 2)
- TMX 1.4b (Translation Memory eXchange)
"""

import csv
import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Union

from .models import SegmentPair

logger = logging.getLogger(__name__)

XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"


class TMImporter:
    """Import Translation Memory rows from various formats"""

    @staticmethod
    def from_csv(content: str) -> List[SegmentPair]:
        """
        Import rows from CSV content.

        The first row is a header and is skipped. Columns are positional;
        a short row is padded with empty strings. Rows are returned as-is,
        empty ones included, so the caller can count them as skipped.

        Args:
            content: CSV string

        Returns:
            List of SegmentPair in file order
        """
        rows = []
        reader = csv.reader(io.StringIO(content))

        for index, row in enumerate(reader):
            if index == 0:
                continue
            cells = list(row) + ["", ""]
            rows.append(SegmentPair(source=cells[0], translated=cells[1]))

        logger.info(f"Read {len(rows)} rows from CSV")
        return rows

    @staticmethod
    def from_tmx(content: str, source_lang: str, target_lang: str) -> List[SegmentPair]:
        """
        Import rows from TMX content.

        Only translation units carrying both languages are returned.
        Language tags are compared case-insensitively on their primary
        subtag as well, so "en-US" matches "en".

        Args:
            content: TMX XML string
            source_lang: Source language code
            target_lang: Target language code

        Raises:
            ValueError: If the XML cannot be parsed
        """
        rows = []

        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            logger.error(f"TMX parse error: {e}")
            raise ValueError(f"Invalid TMX format: {e}")

        body = root.find("body")
        if body is None:
            return rows

        for tu in body.findall("tu"):
            source_text = ""
            target_text = ""

            # Parse TUVs (translation unit variants)
            for tuv in tu.findall("tuv"):
                lang = tuv.get(XML_LANG) or tuv.get("lang") or ""
                seg = tuv.find("seg")
                if seg is None:
                    continue

                text = "".join(seg.itertext())
                if _same_language(lang, source_lang):
                    source_text = text
                elif _same_language(lang, target_lang):
                    target_text = text

            if source_text and target_text:
                rows.append(SegmentPair(source=source_text, translated=target_text))

        logger.info(f"Read {len(rows)} rows from TMX")
        return rows


def _same_language(tag: str, lang: str) -> bool:
    tag = tag.lower()
    lang = lang.lower()
    return tag == lang or tag.split("-")[0] == lang.split("-")[0]


# ==================== CONVENIENCE FUNCTIONS ====================

def parse_rows(
    content: str,
    filename: str,
    source_lang: str,
    target_lang: str,
) -> List[SegmentPair]:
    """
    Parse rows from file content, format picked by the filename extension.

    Raises:
        ValueError: If the extension is not supported or the content is invalid
    """
    suffix = Path(filename).suffix.lower()
    if suffix == ".tmx":
        return TMImporter.from_tmx(content, source_lang, target_lang)
    if suffix == ".csv":
        return TMImporter.from_csv(content)
    raise ValueError(f"Unsupported file format: {suffix or filename}. Use CSV or TMX.")


def read_rows(
    path: Union[str, Path],
    source_lang: str,
    target_lang: str,
) -> List[SegmentPair]:
    """Read rows from a .csv or .tmx file."""
    path = Path(path)
    content = path.read_text(encoding="utf-8-sig")
    return parse_rows(content, path.name, source_lang, target_lang)
