"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def write_json(path: Path, payload: Any, create_parents: bool = True) -> Path:
    """
    Write a JSON document to a local file.

    Args:
        path: Destination file
        payload: JSON-serializable object
        create_parents: Create missing parent directories first. Streaming
            writers pass False and rely on directories prepared up front.

    Returns:
        The path written to.
    """
    if create_parents:
        path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, default=str, ensure_ascii=False)

    logger.debug("Wrote %s", path)
    return path
