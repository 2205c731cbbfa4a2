"""Parse, classify and write articles from a dump byte source."""

import logging
import threading
from typing import BinaryIO, Optional

from classify_articles.classify_articles import Categorizer, categorize_article
from common.errors import IngestionCancelled
from generate_static.sink import ArticleSink
from ingest_dump.models import IngestStats
from parse_dump.models import Article, TopicFilter
from parse_dump.parse_dump import parse_streaming

logger = logging.getLogger(__name__)

LOG_EVERY = 10_000


def ingest_articles(
    source: BinaryIO,
    *,
    is_compressed: bool,
    topic_filter: Optional[TopicFilter],
    categorizer: Categorizer,
    sink: ArticleSink,
    max_articles: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> IngestStats:
    """
    Run the parse-classify-write loop to completion. Blocks; call it from a
    worker thread (``asyncio.to_thread``) when an event loop is running.

    Every accepted article is classified once and offered to the sink once,
    in dump order. Errors from the sink abort the loop and propagate; nothing
    is retried.

    Args:
        source: Binary dump stream (file handle or bridged HTTP reader)
        is_compressed: Source is bz2
        topic_filter: Parser pre-filter, passed through untouched
        categorizer: Assigns topic labels
        sink: Receives every classified article
        max_articles: Stop after this many accepted articles
        cancel_event: When set, the next article aborts the run

    Returns:
        IngestStats for the pass
    """
    stats = IngestStats()

    def handle_article(title: str, article: Article) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise IngestionCancelled(f"Cancelled after {stats.processed} articles")

        categorize_article(categorizer, article)
        stats.processed += 1

        if sink.write(title, article) is None:
            stats.skipped += 1
        else:
            stats.written += 1

        if stats.processed % LOG_EVERY == 0:
            logger.info(
                "Processed %d articles (%d written, %d skipped)",
                stats.processed,
                stats.written,
                stats.skipped,
            )

    parse_streaming(source, is_compressed, topic_filter, handle_article, limit=max_articles)

    logger.info(
        "Ingestion complete: %d processed, %d written, %d skipped",
        stats.processed,
        stats.written,
        stats.skipped,
    )
    return stats
