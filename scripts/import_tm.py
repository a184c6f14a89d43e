#!/usr/bin/env python3
"""
Batch import of translations into the segment store.

Reads a spreadsheet export (CSV: header row, source in the first column,
translation in the second) or a TMX file and upserts every row for one
language pair in a single batch.

Usage:
    python -m scripts.import_tm glossary.csv --source-lang en --target-lang fr
    python -m scripts.import_tm memory.tmx --source-lang en --target-lang de --backend sqlite
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.logging_config import setup_logging
from core.tm.errors import TMError
from core.tm.io import read_rows
from core.tm.schemas import ImportResult
from core.tm.service import TMService

logger = logging.getLogger(__name__)


async def run_import(
    path: Path,
    source_lang: str,
    target_lang: str,
    service: TMService,
) -> ImportResult:
    """Read the file and import it, closing the service afterwards."""
    try:
        rows = read_rows(path, source_lang, target_lang)
        logger.info(f"Importing {len(rows)} rows from {path.name}")
        return await service.import_rows(source_lang, target_lang, rows)
    finally:
        await service.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Segment Translation Memory - Batch Import")
    parser.add_argument("file", type=Path, help="CSV or TMX file to import")
    parser.add_argument("--source-lang", required=True, help="Source language tag")
    parser.add_argument("--target-lang", required=True, help="Target language tag")
    parser.add_argument(
        "--backend",
        choices=["elasticsearch", "sqlite"],
        help="Store backend (defaults to STORE_BACKEND)",
    )
    args = parser.parse_args(argv)

    setup_logging("INFO")

    if not args.file.is_file():
        print(f"File not found: {args.file}")
        return 1

    from core.store.config import get_segment_store
    service = TMService(store=get_segment_store(args.backend))

    try:
        result = asyncio.run(run_import(args.file, args.source_lang, args.target_lang, service))
    except (TMError, ValueError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    print(f"Inserted: {result.inserted}")
    print(f"Updated:  {result.updated}")
    print(f"Skipped:  {result.skipped}")
    if result.errors:
        print(f"Errors:   {len(result.errors)}")
        for error in result.errors:
            print(f"  - {error['segment']}: {error['error']}")
    return 0 if not result.errors else 2


if __name__ == "__main__":
    sys.exit(main())
