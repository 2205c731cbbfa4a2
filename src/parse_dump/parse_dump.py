"""Streaming parser for MediaWiki XML dumps."""

import bz2
import logging
from contextlib import closing
from typing import BinaryIO, Callable, Iterator, Optional

from lxml import etree

from common.errors import NetworkError, ParseError, StreamReadError
from parse_dump.models import Article, TopicFilter

logger = logging.getLogger(__name__)

MAIN_NAMESPACE = "0"

RecordHandler = Callable[[str, Article], None]


def _localname(elem) -> str:
    return etree.QName(elem).localname


def _child(elem, name: str):
    for child in elem:
        if isinstance(child.tag, str) and _localname(child) == name:
            return child
    return None


def _child_text(elem, name: str) -> Optional[str]:
    child = _child(elem, name) if elem is not None else None
    return child.text if child is not None else None


def _release(elem) -> None:
    """Free a processed element and any siblings lxml kept before it."""
    elem.clear()
    parent = elem.getparent()
    if parent is None:
        return
    while elem.getprevious() is not None:
        del parent[0]


def _article_from_page(page) -> Optional[Article]:
    """Build an Article from a <page> element; None for redirects and non-article pages."""
    title = _child_text(page, "title")
    if not title:
        return None

    namespace = _child_text(page, "ns")
    if namespace is not None and namespace.strip() != MAIN_NAMESPACE:
        return None

    if _child(page, "redirect") is not None:
        return None

    text = _child_text(_child(page, "revision"), "text") or ""
    return Article(title=title, content=text, page_id=_child_text(page, "id"))


def _stream_failure(exc: BaseException) -> Optional[StreamReadError]:
    """Return the bridge failure behind ``exc``, if the bytes stopped arriving."""
    while exc is not None:
        if isinstance(exc, StreamReadError):
            return exc
        exc = exc.__cause__ or exc.__context__
    return None


def iter_articles(source: BinaryIO, is_compressed: bool = False) -> Iterator[Article]:
    """
    Yield main-namespace, non-redirect articles from a dump in document order.

    Args:
        source: Binary file-like object with the dump bytes
        is_compressed: Treat ``source`` as bz2 (multistream dumps are supported)

    Raises:
        NetworkError: If a streamed source lost its connection
        ParseError: If the bytes cannot be read, decompressed or parsed
    """
    stream = bz2.BZ2File(source) if is_compressed else source
    context = etree.iterparse(stream, events=("end",), tag="{*}page", huge_tree=True)
    try:
        for _event, page in context:
            article = _article_from_page(page)
            _release(page)
            if article is not None:
                yield article
    except (OSError, EOFError, etree.XMLSyntaxError) as exc:
        lost = _stream_failure(exc)
        if lost is not None:
            raise NetworkError(f"Connection lost while reading dump: {lost}") from lost
        raise ParseError(f"Failed to parse dump: {exc}") from exc
    finally:
        if is_compressed:
            stream.close()


def parse_streaming(
    source: BinaryIO,
    is_compressed: bool,
    topic_filter: Optional[TopicFilter],
    on_record: RecordHandler,
    limit: Optional[int] = None,
) -> int:
    """
    Parse a dump and hand each accepted article to ``on_record``.

    The topic filter is applied before the callback. Errors raised by the
    callback propagate unchanged and stop parsing.

    Args:
        source: Binary file-like object with the dump bytes
        is_compressed: Decompress ``source`` as bz2 while parsing
        topic_filter: Optional pre-filter; None accepts every article
        on_record: Called as ``on_record(title, article)``
        limit: Stop after this many accepted articles

    Returns:
        Number of articles passed to the callback
    """
    accepted = 0
    filtered = 0

    with closing(iter_articles(source, is_compressed)) as articles:
        for article in articles:
            if topic_filter is not None and not topic_filter.matches(article.title, article.content):
                filtered += 1
                continue

            on_record(article.title, article)
            accepted += 1

            if limit is not None and accepted >= limit:
                logger.info("Reached article limit of %d", limit)
                break

    logger.info("Parsed %d articles (%d filtered out)", accepted, filtered)
    return accepted
