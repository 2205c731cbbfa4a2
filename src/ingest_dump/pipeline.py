"""Top-level control of a generation run.

A run resolves its input once and then takes one of two paths:

* local file: the bulk ``generate`` call does parse, write and finalize in a
  worker thread;
* remote URL: the response is streamed on the event loop, bridged to a
  blocking reader and consumed by ``ingest_articles`` in a worker thread;
  the metadata pass runs only after that thread has finished.

Every ``PipelineError`` ends the run as a failed ``RunOutcome`` tagged with
the phase it came from. Files written before a failure are left in place.
Cancelling the task running ``run_pipeline`` signals the worker to stop
before its next article and skips the metadata pass.
"""

import asyncio
import logging
import threading
from typing import Optional

import httpx

from classify_articles.classify_articles import Categorizer
from common.errors import PipelineError
from generate_static.generate import generate
from generate_static.generator import StaticMcpGenerator
from generate_static.sink import ArticleSink
from ingest_dump.config import PipelineConfig
from ingest_dump.ingest_dump import ingest_articles
from ingest_dump.models import IngestStats, LocalSource, RemoteSource, RunOutcome
from ingest_dump.resolve_source import prepare_output_dirs, resolve_source
from ingest_dump.stream_bridge import open_remote_stream

logger = logging.getLogger(__name__)


async def _in_worker(func, *args, cancel_event: threading.Event, **kwargs):
    """Run ``func`` on a worker thread; cancelling the caller tells it to stop."""
    try:
        return await asyncio.to_thread(func, *args, cancel_event=cancel_event, **kwargs)
    except asyncio.CancelledError:
        logger.warning("Run cancelled, stopping ingestion before the next article")
        cancel_event.set()
        raise


async def _run_local(config: PipelineConfig, categorizer: Categorizer) -> IngestStats:
    return await _in_worker(generate, config, categorizer, cancel_event=threading.Event())


async def _run_streamed(
    source: RemoteSource,
    config: PipelineConfig,
    categorizer: Categorizer,
    client: Optional[httpx.AsyncClient],
) -> IngestStats:
    prepare_output_dirs(config.output_dir)

    generator = StaticMcpGenerator.new_streaming(config.output_dir, source.language, categorizer)
    sink = ArticleSink(generator, include_uncategorized=config.include_uncategorized)

    async with open_remote_stream(source.url, settings=config.http, client=client) as reader:
        stats = await _in_worker(
            ingest_articles,
            reader,
            is_compressed=source.compressed,
            topic_filter=config.topic_filter,
            categorizer=categorizer,
            sink=sink,
            max_articles=config.max_articles,
            cancel_event=threading.Event(),
        )

    await asyncio.to_thread(sink.finalize, config.exact_matches)
    return stats


async def run_pipeline(
    config: PipelineConfig,
    categorizer: Categorizer,
    client: Optional[httpx.AsyncClient] = None,
) -> RunOutcome:
    """
    Generate a StaticMCP artifact set from a local dump or a dump URL.

    Args:
        config: Run configuration
        categorizer: Assigns topic labels to every accepted article
        client: Optional HTTP client for remote sources

    Returns:
        RunOutcome; failures carry the phase and the original error
    """
    try:
        source = resolve_source(config.input, config.output_dir, config.language)
        if isinstance(source, LocalSource):
            stats = await _run_local(config, categorizer)
        else:
            stats = await _run_streamed(source, config, categorizer, client)
    except PipelineError as exc:
        logger.error("Generation failed during %s: %s", exc.phase, exc)
        return RunOutcome.failed(exc)

    logger.info(
        "Generated %d articles (%d processed, %d skipped)",
        stats.written,
        stats.processed,
        stats.skipped,
    )
    return RunOutcome.success(stats)
