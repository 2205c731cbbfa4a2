"""Decide whether an input descriptor is a local dump or a remote stream."""

import logging
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from common.errors import SourceResolutionError
from generate_static.generator import GET_ARTICLE_DIR
from ingest_dump.models import LocalSource, RemoteSource, SourceDescriptor

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://")
COMPRESSED_SUFFIX = ".bz2"


def is_remote(descriptor: str) -> bool:
    return descriptor.startswith(REMOTE_PREFIXES)


def is_compressed(descriptor: str) -> bool:
    """True if the descriptor names a bz2 file. URLs are judged by their path only."""
    name = urlsplit(descriptor).path if is_remote(descriptor) else descriptor
    return name.lower().endswith(COMPRESSED_SUFFIX)


def resolve_source(descriptor: str, output_dir: Path, language: str = "en") -> SourceDescriptor:
    """
    Resolve an input descriptor into a local or remote source.

    Touches nothing on disk apart from checking that a local path exists;
    output directories are prepared by the caller.

    Args:
        descriptor: File path or http(s) URL of the dump
        output_dir: Target directory; must not be the dump itself
        language: Wikipedia language code carried on the descriptor

    Returns:
        LocalSource or RemoteSource

    Raises:
        SourceResolutionError: If the descriptor is empty, is a malformed URL
            or names no existing file
    """
    descriptor = (descriptor or "").strip()
    if not descriptor:
        raise SourceResolutionError("No input given")

    if is_remote(descriptor):
        try:
            urlsplit(descriptor)
            host = httpx.URL(descriptor).host
        except (ValueError, httpx.InvalidURL) as exc:
            raise SourceResolutionError(f"Invalid URL {descriptor!r}: {exc}") from exc
        if not host:
            raise SourceResolutionError(f"URL has no host: {descriptor}")
        source = RemoteSource(url=descriptor, compressed=is_compressed(descriptor), language=language)
        logger.info("Resolved remote source %s (compressed=%s)", source.url, source.compressed)
        return source

    path = Path(descriptor).expanduser()
    if not path.is_file():
        raise SourceResolutionError(f"Input is neither an http(s) URL nor an existing file: {descriptor}")
    if Path(output_dir).resolve() == path.resolve():
        raise SourceResolutionError(f"Output directory cannot be the input file: {path}")

    source = LocalSource(path=path, compressed=is_compressed(descriptor), language=language)
    logger.info("Resolved local source %s (compressed=%s)", source.path, source.compressed)
    return source


def prepare_output_dirs(output_dir: Path) -> None:
    """Create the output root and the fixed subpaths streamed writes go to."""
    try:
        (Path(output_dir) / GET_ARTICLE_DIR).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SourceResolutionError(f"Cannot create output directory {output_dir}: {exc}") from exc
