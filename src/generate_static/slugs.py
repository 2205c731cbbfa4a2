"""Title to filename mapping."""

import re
import unicodedata

from common.hashing import generate_title_hash

MAX_SLUG_LENGTH = 120

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """
    Derive the base output identifier for a title.

    Accents are folded to ASCII, everything is lowercased and runs of other
    characters become a single dash. Titles with no usable characters (e.g.
    pure CJK or punctuation) fall back to a hash of the title.
    """
    folded = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", folded.lower()).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or generate_title_hash(title)
