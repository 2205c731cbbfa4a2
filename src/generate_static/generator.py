"""StaticMCP artifact generator.

Articles are written one JSON file at a time as they arrive; everything that
summarizes the run (category listings, the article index, exact-match lookups
and the ``mcp.json`` manifest) is produced by a single metadata pass at the
end. Layout::

    mcp.json
    tools/get_article/<slug>.json
    tools/list_category/<category>.json
    tools/exact_match/<base-slug>.json      (only with exact matches)
    resources/articles.json
    resources/categories.json
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from classify_articles.classify_articles import Categorizer, categorize_article
from common.errors import CollisionError, FinalizationError, WriteError
from common.local_io import write_json
from generate_static.models import ArticleEntry
from generate_static.slugs import slugify
from parse_dump.clean import clean_wikitext
from parse_dump.models import Article

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_VERSION = "1.0.0"

MANIFEST_NAME = "mcp.json"
GET_ARTICLE_DIR = Path("tools") / "get_article"
LIST_CATEGORY_DIR = Path("tools") / "list_category"
EXACT_MATCH_DIR = Path("tools") / "exact_match"
RESOURCES_DIR = Path("resources")

MAX_COLLISION_SUFFIX = 10_000


class StaticMcpGenerator:
    """
    Writes the static artifact set for one run.

    Not thread-safe; concurrent callers must go through ``ArticleSink``.

    Args:
        output_dir: Root of the artifact tree
        language: Wikipedia language code recorded in every artifact
        categorizer: Used for articles that reach the generator unclassified
        streaming: When True the generator creates no directories for
            article writes; the caller prepares ``tools/get_article`` first
    """

    def __init__(
        self,
        output_dir: Path,
        language: str = "en",
        categorizer: Optional[Categorizer] = None,
        streaming: bool = False,
    ):
        self.output_dir = Path(output_dir)
        self.language = language
        self.categorizer = categorizer
        self.streaming = streaming
        self._used_slugs: set[str] = set()
        self._entries: list[ArticleEntry] = []
        self._finalized = False

        if not streaming:
            try:
                (self.output_dir / GET_ARTICLE_DIR).mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise WriteError(f"Cannot create output directory {self.output_dir}: {exc}") from exc

    @classmethod
    def new_streaming(
        cls,
        output_dir: Path,
        language: str,
        categorizer: Optional[Categorizer] = None,
    ) -> StaticMcpGenerator:
        return cls(output_dir, language, categorizer, streaming=True)

    @property
    def entries(self) -> list[ArticleEntry]:
        return list(self._entries)

    def _claim_slug(self, title: str) -> tuple[str, str]:
        """Reserve an unused slug for ``title``; returns (slug, base_slug)."""
        base = slugify(title)
        if base not in self._used_slugs:
            self._used_slugs.add(base)
            return base, base

        for suffix in range(2, MAX_COLLISION_SUFFIX + 1):
            candidate = f"{base}-{suffix}"
            if candidate not in self._used_slugs:
                self._used_slugs.add(candidate)
                logger.debug("Slug collision for %r, using %s", title, candidate)
                return candidate, base

        raise CollisionError(f"No free slug for {title!r} after {MAX_COLLISION_SUFFIX} attempts")

    def write_article_with_collision_handling(self, title: str, article: Article) -> str:
        """
        Write one article file and return the slug it was stored under.

        A title whose slug is already taken in this run gets the next free
        numeric suffix instead of overwriting the earlier file.
        """
        if self._finalized:
            raise WriteError(f"Cannot write {title!r}: metadata already generated")

        categories = article.categories
        if categories is None:
            if self.categorizer is None:
                raise WriteError(f"Article {title!r} is unclassified and no categorizer is set")
            categories = categorize_article(self.categorizer, article)

        slug, base_slug = self._claim_slug(title)
        payload = {
            "title": title,
            "language": self.language,
            "page_id": article.page_id,
            "categories": categories,
            "content": [{"type": "text", "text": clean_wikitext(article.content)}],
        }

        path = self.output_dir / GET_ARTICLE_DIR / f"{slug}.json"
        try:
            write_json(path, payload, create_parents=not self.streaming)
        except OSError as exc:
            self._used_slugs.discard(slug)
            raise WriteError(f"Failed to write article {title!r} to {path}: {exc}") from exc

        self._entries.append(
            ArticleEntry(title=title, slug=slug, base_slug=base_slug, categories=list(categories))
        )
        return slug

    def _group_by_category(self) -> dict[str, list[ArticleEntry]]:
        grouped: dict[str, list[ArticleEntry]] = defaultdict(list)
        for entry in self._entries:
            for category in entry.categories:
                grouped[category].append(entry)
        return dict(grouped)

    def _write_category_listings(self, by_category: dict[str, list[ArticleEntry]]) -> None:
        for category, entries in by_category.items():
            write_json(
                self.output_dir / LIST_CATEGORY_DIR / f"{slugify(category)}.json",
                {
                    "category": category,
                    "count": len(entries),
                    "articles": [{"title": e.title, "slug": e.slug} for e in entries],
                },
            )

        write_json(
            self.output_dir / RESOURCES_DIR / "categories.json",
            {category: len(entries) for category, entries in sorted(by_category.items())},
        )

    def _write_article_index(self) -> None:
        write_json(
            self.output_dir / RESOURCES_DIR / "articles.json",
            {
                "language": self.language,
                "count": len(self._entries),
                "articles": [
                    {"title": e.title, "slug": e.slug, "categories": e.categories}
                    for e in self._entries
                ],
            },
        )

    def _write_exact_matches(self) -> None:
        by_base: dict[str, list[ArticleEntry]] = defaultdict(list)
        for entry in self._entries:
            by_base[entry.base_slug].append(entry)

        for base_slug, entries in by_base.items():
            write_json(
                self.output_dir / EXACT_MATCH_DIR / f"{base_slug}.json",
                {
                    "query": base_slug,
                    "matches": [{"title": e.title, "slug": e.slug} for e in entries],
                },
            )
        logger.info("Wrote %d exact-match entries", len(by_base))

    def _manifest(self, by_category: dict[str, list[ArticleEntry]], exact_matches: bool) -> dict:
        tools = [
            {
                "name": "get_article",
                "description": "Get a Wikipedia article by its slug",
                "inputSchema": {
                    "type": "object",
                    "properties": {"slug": {"type": "string"}},
                    "required": ["slug"],
                },
            },
            {
                "name": "list_category",
                "description": "List articles in a category",
                "inputSchema": {
                    "type": "object",
                    "properties": {"category": {"type": "string", "enum": sorted(by_category)}},
                    "required": ["category"],
                },
            },
        ]
        if exact_matches:
            tools.append(
                {
                    "name": "exact_match",
                    "description": "Find articles whose title maps exactly to a slug",
                    "inputSchema": {
                        "type": "object",
                        "properties": {"query": {"type": "string"}},
                        "required": ["query"],
                    },
                }
            )

        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": f"wikipedia-{self.language}", "version": SERVER_VERSION},
            "capabilities": {
                "tools": tools,
                "resources": [
                    {
                        "uri": "wikipedia://articles",
                        "name": "Article index",
                        "mimeType": "application/json",
                    },
                    {
                        "uri": "wikipedia://categories",
                        "name": "Category counts",
                        "mimeType": "application/json",
                    },
                ],
            },
            "stats": {
                "language": self.language,
                "articles": len(self._entries),
                "categories": {c: len(e) for c, e in sorted(by_category.items())},
                "generated_at": datetime.now(timezone.utc).isoformat(),
            },
        }

    def generate_metadata_only(self, exact_matches: bool = False) -> None:
        """Write every aggregate artifact for the articles written so far. Runs once."""
        if self._finalized:
            raise FinalizationError("Metadata already generated for this run")

        by_category = self._group_by_category()
        try:
            self._write_category_listings(by_category)
            self._write_article_index()
            if exact_matches:
                self._write_exact_matches()
            write_json(self.output_dir / MANIFEST_NAME, self._manifest(by_category, exact_matches))
        except OSError as exc:
            raise FinalizationError(f"Failed to write metadata to {self.output_dir}: {exc}") from exc
        finally:
            self._finalized = True

        logger.info(
            "Generated metadata for %d articles in %d categories",
            len(self._entries),
            len(by_category),
        )
