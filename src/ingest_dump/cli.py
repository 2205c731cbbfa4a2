"""CLI for generating a history StaticMCP from a Wikipedia dump."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv

from classify_articles.history import HistoryCategorizer
from common.cli_helpers import setup_logging
from ingest_dump.helpers import build_pipeline_config, parse_ingest_dump_args
from ingest_dump.pipeline import run_pipeline

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_ingest_dump_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_pipeline_config(args)
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    logger.info("Wikipedia History StaticMCP Generator")
    logger.info("Language: %s", config.language)
    logger.info("Input: %s", config.input)
    logger.info("Output: %s", config.output_dir)
    if config.max_articles:
        logger.info("Max articles: %d", config.max_articles)

    outcome = asyncio.run(run_pipeline(config, HistoryCategorizer()))
    if not outcome.succeeded:
        logger.error(outcome.message)
        return 1

    logger.info("History StaticMCP generated successfully: %s", outcome.message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
