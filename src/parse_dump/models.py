"""Data models for parse_dump pipeline stage."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from parse_dump.clean import extract_categories


@dataclass
class Article:
    """One page from a Wikipedia dump. ``categories`` stays None until classified."""
    title: str
    content: str
    page_id: Optional[str] = None
    categories: Optional[list[str]] = None


class TopicFilter(Enum):
    """Coarse pre-filter applied by the parser before records reach the pipeline.

    A page passes when a keyword appears in its title or in one of its
    ``[[Category:...]]`` links.
    """

    HISTORY = "history"

    @property
    def keywords(self) -> tuple[str, ...]:
        return TOPIC_KEYWORDS[self]

    def matches(self, title: str, content: str) -> bool:
        haystacks = [title.casefold()]
        haystacks.extend(c.casefold() for c in extract_categories(content))
        return any(keyword in text for text in haystacks for keyword in self.keywords)


TOPIC_KEYWORDS = {
    TopicFilter.HISTORY: (
        "history", "historical", "war", "battle", "siege", "empire", "kingdom",
        "dynasty", "emperor", "ancient", "medieval", "century", "revolution",
        "treaty", "civilization", "archaeolog", "monarch", "crusade",
    ),
}
