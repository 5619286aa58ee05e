"""
Command-line entry point: run a research query, or recover a saved raw response.

Usage:
    yt-research --query "react hooks" [--format summary] [--output report.json]
    yt-research --raw-file response.txt
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import recovery, research
from .config import get_app_config
from .errors import ResearchError
from .export import to_csv, to_json, to_markdown
from .query_input import classify_query
from .types import OUTPUT_FORMATS

logger = logging.getLogger("yt_research.cli")

RENDERERS = {"json": to_json, "csv": to_csv, "markdown": to_markdown}


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cross-video YouTube transcript research.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--query", help="Topic, @handle, or comma-separated video URLs.")
    source.add_argument(
        "--raw-file",
        type=Path,
        help="Recover a saved raw model response instead of calling Gemini.",
    )
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="detailed", help="Report style.")
    parser.add_argument(
        "--render",
        choices=sorted(RENDERERS),
        default="json",
        help="Output rendering for research results.",
    )
    parser.add_argument("--output", type=Path, help="Write the result here instead of stdout.")
    return parser.parse_args(argv)


def _emit(text: str, output: Optional[Path]) -> None:
    if output is None:
        print(text)
        return
    output.write_text(text, encoding="utf-8")
    logger.info("Wrote %d chars to %s", len(text), output)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=get_app_config().log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        if args.raw_file is not None:
            parsed = recovery.parse(args.raw_file.read_text(encoding="utf-8"))
            _emit(json.dumps(parsed, indent=2, ensure_ascii=False), args.output)
            return 0

        validated = classify_query(args.query)
        if not args.query.strip() or not validated.all_valid:
            bad = ", ".join(item.text for item in validated.invalid_items) or "(empty)"
            logger.error("Invalid query: %s", bad)
            return 2

        result = research.analyse_topic(args.query, args.format)
    except ResearchError as exc:
        logger.error("%s", exc.user_message)
        return 1

    _emit(RENDERERS[args.render](result), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
