"""Wikitext cleanup for article bodies."""

import re
from typing import Optional

# Nested constructs are removed innermost-first; this bounds the passes.
MAX_NESTING_PASSES = 20

_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_REF_BLOCK = re.compile(r"<ref[^>/]*>.*?</ref\s*>", re.DOTALL | re.IGNORECASE)
_REF_EMPTY = re.compile(r"<ref[^>]*/>", re.IGNORECASE)
_TEMPLATE = re.compile(r"\{\{[^{}]*\}\}")
_TABLE = re.compile(r"\{\|(?:(?!\{\|).)*?\|\}", re.DOTALL)
_CATEGORY_LINK = re.compile(r"\[\[\s*Category\s*:\s*([^\]|]+)(?:\|[^\]]*)?\]\]", re.IGNORECASE)
_FILE_LINK = re.compile(r"\[\[\s*(?:File|Image)\s*:[^\[\]]*\]\]", re.IGNORECASE)
_INTERNAL_LINK = re.compile(r"\[\[(?:[^\[\]]*\|)?([^\[\]|]*)\]\]")
_EXTERNAL_LINK = re.compile(r"\[(?:https?:)?//[^\s\]]+(?:\s+([^\]]*))?\]")
_HEADING = re.compile(r"^(=+)\s*(.*?)\s*\1\s*$", re.MULTILINE)
_EMPHASIS = re.compile(r"'{2,}")
_HTML_TAG = re.compile(r"<[^>]+>")
_INLINE_SPACE = re.compile(r"[ \t\f\v]+")
_BLANK_LINES = re.compile(r"\n\s*\n+")


def _strip_nested(pattern: re.Pattern, text: str) -> str:
    for _ in range(MAX_NESTING_PASSES):
        text, count = pattern.subn("", text)
        if not count:
            break
    return text


def extract_categories(text: Optional[str]) -> list[str]:
    """Return the names of all ``[[Category:...]]`` links in wikitext."""
    if not text:
        return []
    return [name.strip() for name in _CATEGORY_LINK.findall(text)]


def clean_wikitext(text: Optional[str]) -> str:
    """Reduce wikitext to readable plain text.

    Drops comments, references, templates, tables, files and category links,
    unwraps internal and external links, and collapses whitespace while
    keeping paragraph breaks.
    """
    if not text:
        return ""
    text = _COMMENT.sub("", text)
    text = _REF_BLOCK.sub("", text)
    text = _REF_EMPTY.sub("", text)
    text = _strip_nested(_TEMPLATE, text)
    text = _strip_nested(_TABLE, text)
    text = _CATEGORY_LINK.sub("", text)

    # Links inside file captions must be unwrapped before the file link itself
    for _ in range(MAX_NESTING_PASSES):
        text = _FILE_LINK.sub("", text)
        text, count = _INTERNAL_LINK.subn(r"\1", text)
        if not count:
            break

    text = _EXTERNAL_LINK.sub(lambda m: m.group(1) or "", text)
    text = _HEADING.sub(r"\2", text)
    text = _EMPHASIS.sub("", text)
    text = _HTML_TAG.sub(" ", text)
    text = _INLINE_SPACE.sub(" ", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return "\n".join(line.strip() for line in text.strip().split("\n"))
