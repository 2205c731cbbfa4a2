"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging(verbose: bool = False) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_positive_int(value: str, field_name: str = "value") -> int:
    """Parse a strictly positive integer for argparse arguments.

    Args:
        value: Raw string from the command line.
        field_name: Name of the field for error messages.

    Returns:
        Parsed integer.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{field_name} must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{field_name} must be greater than zero")
    return parsed


def parse_language(value: str) -> str:
    """Validate a Wikipedia language code (e.g. "en", "de", "zh-yue")."""
    code = value.strip().lower()
    if not code or not all(part.isalpha() for part in code.split("-")):
        raise argparse.ArgumentTypeError(f"invalid language code: {value!r}")
    return code
