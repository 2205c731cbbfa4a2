"""Bulk generation from a local dump file."""

import logging
import threading
from typing import Optional

from classify_articles.classify_articles import Categorizer
from common.errors import SourceResolutionError
from generate_static.generator import StaticMcpGenerator
from generate_static.sink import ArticleSink
from ingest_dump.config import PipelineConfig
from ingest_dump.ingest_dump import ingest_articles
from ingest_dump.models import IngestStats, LocalSource
from ingest_dump.resolve_source import resolve_source

logger = logging.getLogger(__name__)


def generate(
    config: PipelineConfig,
    categorizer: Categorizer,
    cancel_event: Optional[threading.Event] = None,
) -> IngestStats:
    """
    Build a full artifact set from a local dump in one blocking call.

    Resolves the input, writes every accepted article and finishes with the
    metadata pass.

    Args:
        config: Run configuration; ``config.input`` must be a local file
        categorizer: Assigns topic labels
        cancel_event: When set, the run stops before the next article

    Returns:
        IngestStats for the run

    Raises:
        PipelineError: Subclass naming the phase that failed
    """
    source = resolve_source(config.input, config.output_dir, config.language)
    if not isinstance(source, LocalSource):
        raise SourceResolutionError(f"Bulk generation needs a local file, got {config.input}")

    generator = StaticMcpGenerator(config.output_dir, config.language, categorizer)
    sink = ArticleSink(generator, include_uncategorized=config.include_uncategorized)

    try:
        dump = source.path.open("rb")
    except OSError as exc:
        raise SourceResolutionError(f"Cannot open {source.path}: {exc}") from exc

    logger.info("Generating from local file %s", source.path)
    with dump:
        stats = ingest_articles(
            dump,
            is_compressed=source.compressed,
            topic_filter=config.topic_filter,
            categorizer=categorizer,
            sink=sink,
            max_articles=config.max_articles,
            cancel_event=cancel_event,
        )

    sink.finalize(config.exact_matches)
    return stats
