"""Expose an async HTTP download as a blocking, file-like byte source.

The event loop keeps ownership of the connection. A worker thread reading
from ``AsyncStreamReader`` schedules "fetch the next chunk" on that loop and
blocks until it completes, so the loop is never blocked and the parser sees
an ordinary binary file.
"""

from __future__ import annotations

import asyncio
import io
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from common.errors import NetworkError, StreamReadError
from ingest_dump.config import HttpSettings

logger = logging.getLogger(__name__)


class AsyncStreamReader(io.RawIOBase):
    """
    Blocking ``readinto`` over an async iterator of byte chunks.

    Must be read from a thread other than the one running ``loop``. Any
    failure on the async side surfaces as ``StreamReadError``.
    """

    def __init__(self, chunks: AsyncIterator[bytes], loop: asyncio.AbstractEventLoop):
        super().__init__()
        self._chunks = chunks
        self._loop = loop
        self._pending = b""
        self._eof = False
        self.bytes_read = 0

    def readable(self) -> bool:
        return True

    async def _pull(self) -> Optional[bytes]:
        async for chunk in self._chunks:
            if chunk:
                return chunk
        return None

    def _check_thread(self) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            return
        if running is self._loop:
            raise RuntimeError("AsyncStreamReader cannot be read from its event loop thread")

    def _next_chunk(self) -> bytes:
        self._check_thread()
        future = asyncio.run_coroutine_threadsafe(self._pull(), self._loop)
        try:
            chunk = future.result()
        except Exception as exc:
            raise StreamReadError(f"Stream failed after {self.bytes_read} bytes: {exc}") from exc

        if chunk is None:
            self._eof = True
            return b""
        self.bytes_read += len(chunk)
        return chunk

    def readinto(self, buffer) -> int:
        if not self._pending and not self._eof:
            self._pending = self._next_chunk()
        if not self._pending:
            return 0

        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


@asynccontextmanager
async def open_remote_stream(
    url: str,
    settings: Optional[HttpSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
):
    """
    GET ``url`` and yield a buffered, blocking reader over the response body.

    Headers are awaited before yielding, so connection failures and non-2xx
    responses raise ``NetworkError`` before any byte reaches the parser.
    The response, and the client if one was created here, are closed on exit.

    Args:
        url: http(s) URL of the dump
        settings: Timeouts, chunk size and user agent
        client: Existing client to use (tests pass one with a mock transport)
    """
    settings = settings or HttpSettings()
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout, connect=settings.connect_timeout),
            headers={"User-Agent": settings.user_agent, "Accept-Encoding": "identity"},
            follow_redirects=True,
        )

    try:
        logger.info("Streaming from URL: %s", url)
        try:
            response = await client.send(client.build_request("GET", url), stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(f"Failed to fetch {url}: {exc}") from exc

        try:
            if response.is_error:
                raise NetworkError(f"Failed to fetch {url}: HTTP {response.status_code}")

            raw = AsyncStreamReader(
                response.aiter_bytes(settings.chunk_size), asyncio.get_running_loop()
            )
            yield io.BufferedReader(raw, buffer_size=settings.chunk_size)
            logger.info("Stream closed after %d bytes", raw.bytes_read)
        finally:
            await response.aclose()
    finally:
        if owns_client:
            await client.aclose()
