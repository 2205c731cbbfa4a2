"""Tests for ingest_dump.pipeline orchestration."""

import asyncio
import bz2
import json
import threading
from unittest.mock import patch

import httpx
import pytest

from classify_articles.history import HistoryCategorizer
from common.errors import IngestionCancelled
from generate_static.sink import ArticleSink
from ingest_dump.config import HttpSettings, PipelineConfig
from ingest_dump.pipeline import run_pipeline

URL = "https://dumps.example.org/enwiki-latest-pages-articles.xml.bz2"


class DroppedConnection(httpx.AsyncByteStream):
    """Sends the first ``limit`` bytes of ``data`` and then fails."""

    def __init__(self, data: bytes, limit: int):
        self.data = data
        self.limit = limit

    async def __aiter__(self):
        yield self.data[: self.limit]
        raise httpx.RemoteProtocolError("peer closed connection without sending complete message body")


class RecordingSink(ArticleSink):
    """ArticleSink that logs every call with the thread it ran on."""

    events: list[tuple[str, str]] = []

    def write(self, title, article):
        result = super().write(title, article)
        RecordingSink.events.append(("write", threading.current_thread().name))
        return result

    def finalize(self, exact_matches=False):
        RecordingSink.events.append(("finalize", threading.current_thread().name))
        return super().finalize(exact_matches)


def _config(input_value, output_dir, **overrides) -> PipelineConfig:
    overrides.setdefault("http", HttpSettings(chunk_size=64))
    return PipelineConfig(input=str(input_value), output_dir=output_dir, **overrides)


def _run(config, handler=None):
    async def run():
        if handler is None:
            return await run_pipeline(config, HistoryCategorizer())
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await run_pipeline(config, HistoryCategorizer(), client=client)

    return asyncio.run(run())


class TestLocalRun:
    def test_history_scenario(self, history_dump_file, tmp_path) -> None:
        out = tmp_path / "out"
        outcome = _run(_config(history_dump_file, out, topic_filter=None))

        assert outcome.succeeded
        assert outcome.stats.written == 2
        assert outcome.stats.skipped == 1
        assert json.loads((out / "mcp.json").read_text())["stats"]["articles"] == 2

    def test_unknown_descriptor_fails_resolution(self, tmp_path) -> None:
        outcome = _run(_config(tmp_path / "no-such-dump.xml", tmp_path / "out"))

        assert not outcome.succeeded
        assert outcome.phase == "resolution"
        assert "no-such-dump.xml" in outcome.message
        assert not (tmp_path / "out").exists()

    def test_malformed_dump_fails_parse(self, tmp_path) -> None:
        dump = tmp_path / "broken.xml"
        dump.write_bytes(b"<mediawiki><page><title>Broken</page>")

        outcome = _run(_config(dump, tmp_path / "out"))

        assert outcome.phase == "parse"
        assert not (tmp_path / "out" / "mcp.json").exists()


class TestStreamedRun:
    @pytest.mark.parametrize(
        "url",
        ["http://[::1/dump.xml", "http://a.org:notaport/d.xml", "http://ex\tample.org/d.xml"],
    )
    def test_malformed_url_fails_resolution(self, url: str, tmp_path) -> None:
        outcome = _run(_config(url, tmp_path / "out"))

        assert not outcome.succeeded
        assert outcome.phase == "resolution"
        assert not (tmp_path / "out").exists()

    def test_streams_compressed_dump(self, history_dump, tmp_path) -> None:
        out = tmp_path / "out"
        body = bz2.compress(history_dump)

        outcome = _run(_config(URL, out), lambda request: httpx.Response(200, content=body))

        assert outcome.succeeded, outcome.message
        assert outcome.stats.written == 2
        assert (out / "tools" / "get_article" / "battle-of-hastings.json").exists()
        assert (out / "tools" / "get_article" / "ancient-rome.json").exists()
        assert not (out / "tools" / "get_article" / "python-programming.json").exists()
        manifest = json.loads((out / "mcp.json").read_text())
        assert manifest["stats"]["articles"] == 2

    def test_uncompressed_url(self, history_dump, tmp_path) -> None:
        out = tmp_path / "out"
        config = _config("https://dumps.example.org/sample.xml", out, topic_filter=None, exact_matches=True)

        outcome = _run(config, lambda request: httpx.Response(200, content=history_dump))

        assert outcome.succeeded, outcome.message
        assert outcome.stats.processed == 3
        assert (out / "tools" / "exact_match" / "ancient-rome.json").exists()

    def test_http_error_fails_before_any_record(self, tmp_path) -> None:
        out = tmp_path / "out"
        outcome = _run(_config(URL, out), lambda request: httpx.Response(503))

        assert outcome.phase == "network"
        assert list((out / "tools" / "get_article").iterdir()) == []
        assert not (out / "mcp.json").exists()

    def test_mid_stream_failure_skips_finalization(self, make_dump, tmp_path) -> None:
        out = tmp_path / "out"
        pages = [{"title": f"Battle {i}", "text": "x" * 500} for i in range(1000)]
        dump = make_dump(pages)

        def handler(request):
            return httpx.Response(200, stream=DroppedConnection(dump, len(dump) // 2))

        config = _config("https://dumps.example.org/sample.xml", out, http=HttpSettings(chunk_size=16 * 1024))
        outcome = _run(config, handler)

        assert not outcome.succeeded
        assert outcome.phase == "network"
        assert not (out / "mcp.json").exists()
        assert not (out / "resources").exists()
        # partial output stays on disk
        assert len(list((out / "tools" / "get_article").iterdir())) > 0

    def test_finalize_follows_last_write(self, make_dump, tmp_path) -> None:
        RecordingSink.events = []
        pages = [{"title": f"Siege {i}"} for i in range(200)]
        body = make_dump(pages)

        with patch("ingest_dump.pipeline.ArticleSink", RecordingSink):
            outcome = _run(_config(URL.removesuffix(".bz2"), tmp_path / "out"), lambda r: httpx.Response(200, content=body))

        assert outcome.succeeded, outcome.message
        kinds = [kind for kind, _ in RecordingSink.events]
        assert kinds.count("write") == 200
        assert kinds.count("finalize") == 1
        assert kinds[-1] == "finalize"

        main_thread = threading.main_thread().name
        assert all(thread != main_thread for _, thread in RecordingSink.events)


class TestCancellation:
    def test_cancelling_run_stops_worker(self, tmp_path) -> None:
        out = tmp_path / "out"
        started = threading.Event()
        events: list[threading.Event] = []

        def blocking_ingest(reader, *, cancel_event, **kwargs):
            events.append(cancel_event)
            started.set()
            if not cancel_event.wait(5):
                raise AssertionError("worker was never told to stop")
            raise IngestionCancelled("stopped")

        async def run() -> None:
            handler = lambda request: httpx.Response(200, content=b"<mediawiki/>")
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                task = asyncio.create_task(run_pipeline(_config(URL, out), HistoryCategorizer(), client=client))
                await asyncio.to_thread(started.wait, 5)
                task.cancel()
                with pytest.raises(asyncio.CancelledError):
                    await task

        with patch("ingest_dump.pipeline.ingest_articles", blocking_ingest):
            asyncio.run(run())

        assert len(events) == 1
        assert events[0].is_set()
        assert not (out / "mcp.json").exists()
