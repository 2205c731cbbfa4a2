"""Helper functions for ingest_dump CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from common.cli_helpers import parse_language, parse_positive_int
from ingest_dump.config import PipelineConfig, load_http_settings


def parse_ingest_dump_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for ingest_dump."""

    parser = argparse.ArgumentParser(
        prog="wikipedia-history-smg",
        description="Generate History-focused Wikipedia StaticMCP",
    )

    # Input options
    parser.add_argument("-i", "--input", required=True, help="Input Wikipedia dump file or URL")
    parser.add_argument(
        "-l",
        "--language",
        type=parse_language,
        default="en",
        help="Language code (default: en)",
    )
    parser.add_argument(
        "-m",
        "--max-articles",
        type=lambda v: parse_positive_int(v, "max-articles"),
        default=None,
        help="Maximum number of articles to process",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with an 'http' section (timeouts, chunk size, user agent)",
    )

    # Output options
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output directory for StaticMCP files")
    parser.add_argument(
        "--exact-matches",
        action="store_true",
        help="Generate exact match searches for all articles",
    )
    parser.add_argument(
        "--include-uncategorized",
        action="store_true",
        help="Also write articles that match no history category",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def build_pipeline_config(args: argparse.Namespace) -> PipelineConfig:
    """Build the run configuration from parsed CLI arguments."""
    return PipelineConfig(
        input=args.input,
        output_dir=args.output,
        language=args.language,
        max_articles=args.max_articles,
        exact_matches=args.exact_matches,
        include_uncategorized=args.include_uncategorized,
        http=load_http_settings(args.config),
    )
