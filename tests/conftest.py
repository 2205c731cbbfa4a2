"""Shared fixtures: small in-memory MediaWiki dumps."""

from xml.sax.saxutils import escape

import pytest

EXPORT_NS = "http://www.mediawiki.org/xml/export-0.11/"


def build_dump(pages: list[dict]) -> bytes:
    """Render page dicts (title, text, ns, redirect) as a MediaWiki export document."""
    parts = [
        f'<mediawiki xmlns="{EXPORT_NS}" version="0.11" xml:lang="en">',
        "<siteinfo><sitename>Wikipedia</sitename><dbname>enwiki</dbname></siteinfo>",
    ]
    for page_id, page in enumerate(pages, start=1):
        redirect = f'<redirect title="{escape(page["redirect"])}" />' if page.get("redirect") else ""
        parts.append(
            "<page>"
            f"<title>{escape(page['title'])}</title>"
            f"<ns>{page.get('ns', 0)}</ns>"
            f"<id>{page_id}</id>"
            f"{redirect}"
            f"<revision><id>{page_id * 100}</id>"
            f'<text xml:space="preserve">{escape(page.get("text", ""))}</text>'
            "</revision></page>"
        )
    parts.append("</mediawiki>")
    return "\n".join(parts).encode("utf-8")


HISTORY_PAGES = [
    {"title": "Battle of Hastings", "text": "The '''Battle of Hastings''' was fought in [[1066]]."},
    {"title": "Python Programming", "text": "Python is a [[programming language]]."},
    {"title": "Ancient Rome", "text": "'''Ancient Rome''' was a civilization.\n[[Category:Ancient Rome]]"},
]


@pytest.fixture
def make_dump():
    return build_dump


@pytest.fixture
def history_dump() -> bytes:
    """Three records; two match the history categorizer."""
    return build_dump(HISTORY_PAGES)


@pytest.fixture
def history_dump_file(tmp_path, history_dump):
    path = tmp_path / "enwiki-sample.xml"
    path.write_bytes(history_dump)
    return path
