"""Shared configuration utilities."""

import os
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

T = TypeVar("T")


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict (empty for an empty file)."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def env_override(name: str, default: T, cast: Callable[[str], Any] = str) -> T:
    """Return the environment value for ``name`` cast with ``cast``, else ``default``.

    Empty strings count as unset.
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
