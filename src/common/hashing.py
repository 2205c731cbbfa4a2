"""Hashing utilities."""

import hashlib


def generate_title_hash(title: str) -> str:
    """Generate a stable 16-char identifier from an article title."""
    return hashlib.sha256(title.encode("utf-8")).hexdigest()[:16]
