"""Core article classification logic."""

import logging
from typing import Mapping, Protocol, Sequence, runtime_checkable

from parse_dump.models import Article

logger = logging.getLogger(__name__)


@runtime_checkable
class Categorizer(Protocol):
    """Anything that maps a title and body to an ordered list of topic labels."""

    def categorize(self, title: str, content: str) -> list[str]:
        ...


class KeywordCategorizer:
    """
    Categorize articles by keyword substrings in the lowercased title.

    Rules are checked in insertion order and each category is emitted at most
    once, so the output order is stable for a given rule table. Content is
    accepted for interface compatibility but not inspected.
    """

    def __init__(self, rules: Mapping[str, Sequence[str]]):
        self.rules = {category: tuple(k.lower() for k in keywords) for category, keywords in rules.items()}

    def categorize(self, title: str, content: str = "") -> list[str]:
        title_lower = (title or "").casefold()
        return [
            category
            for category, keywords in self.rules.items()
            if any(keyword in title_lower for keyword in keywords)
        ]


def categorize_article(categorizer: Categorizer, article: Article) -> list[str]:
    """
    Classify an article and store the labels on it.

    Args:
        categorizer: Categorizer to apply
        article: Article that has not been classified yet

    Returns:
        The assigned category labels (possibly empty)

    Raises:
        ValueError: If the article already carries categories
    """
    if article.categories is not None:
        raise ValueError(f"Article already classified: {article.title!r}")

    categories = list(categorizer.categorize(article.title, article.content))
    article.categories = categories
    logger.debug("Classified %r as %s", article.title, categories)
    return categories
