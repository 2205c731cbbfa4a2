"""Data models for generate_static pipeline stage."""

from dataclasses import dataclass


@dataclass
class ArticleEntry:
    """Index record kept for every written article until the metadata pass."""
    title: str
    slug: str
    base_slug: str
    categories: list[str]
