"""Serialized access to the single artifact generator of a run."""

import logging
import threading
from typing import Optional

from common.errors import FinalizationError, WriteError
from generate_static.generator import StaticMcpGenerator
from parse_dump.models import Article

logger = logging.getLogger(__name__)


class ArticleSink:
    """
    Owns a ``StaticMcpGenerator`` and gates every call to it behind one lock.

    The lock is taken per call and released before returning, so no caller
    holds it across an ``await``. ``finalize`` may run exactly once; writes
    after it are rejected.

    Args:
        generator: The run's generator; nothing else should touch it
        include_uncategorized: Write articles with no category labels
            instead of dropping them
    """

    def __init__(self, generator: StaticMcpGenerator, include_uncategorized: bool = False):
        self._generator = generator
        self._lock = threading.Lock()
        self._finalized = False
        self.include_uncategorized = include_uncategorized
        self.written = 0
        self.rejected = 0

    @property
    def finalized(self) -> bool:
        return self._finalized

    def write(self, title: str, article: Article) -> Optional[str]:
        """Write an article; returns its slug, or None if it was rejected."""
        with self._lock:
            if self._finalized:
                raise WriteError(f"Cannot write {title!r}: sink already finalized")

            if not article.categories and not self.include_uncategorized:
                self.rejected += 1
                logger.debug("Skipping uncategorized article: %s", title)
                return None

            try:
                slug = self._generator.write_article_with_collision_handling(title, article)
            except OSError as exc:
                raise WriteError(f"Failed to write article {title!r}: {exc}") from exc

            self.written += 1
            return slug

    def finalize(self, exact_matches: bool = False) -> None:
        """Run the generator's metadata pass. Must follow the last ``write``."""
        with self._lock:
            if self._finalized:
                raise FinalizationError("Sink already finalized")
            self._finalized = True

            try:
                self._generator.generate_metadata_only(exact_matches)
            except OSError as exc:
                raise FinalizationError(f"Metadata generation failed: {exc}") from exc

        logger.info("Finalized output: %d written, %d rejected", self.written, self.rejected)
