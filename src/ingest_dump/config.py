"""Configuration for dump ingestion runs."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from common.config import env_override, load_yaml
from parse_dump.models import TopicFilter

DEFAULT_USER_AGENT = "wikipedia-history-smg/1.0 (StaticMCP generator)"


@dataclass
class HttpSettings:
    timeout: float = 30.0
    connect_timeout: float = 10.0
    chunk_size: int = 512 * 1024
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class PipelineConfig:
    input: str
    output_dir: Path
    language: str = "en"
    max_articles: Optional[int] = None
    exact_matches: bool = False
    topic_filter: Optional[TopicFilter] = TopicFilter.HISTORY
    include_uncategorized: bool = False
    http: HttpSettings = field(default_factory=HttpSettings)


def _parse_http_settings(data: dict) -> HttpSettings:
    """Parse the ``http`` section of a config dict into HttpSettings."""
    defaults = HttpSettings()
    return HttpSettings(
        timeout=float(data.get("timeout", defaults.timeout)),
        connect_timeout=float(data.get("connect_timeout", defaults.connect_timeout)),
        chunk_size=int(data.get("chunk_size", defaults.chunk_size)),
        user_agent=str(data.get("user_agent", defaults.user_agent)),
    )


def load_http_settings(config_path: Optional[Path] = None) -> HttpSettings:
    """Load HTTP settings.

    Precedence, lowest first: built-in defaults, the ``http`` section of the
    YAML file at ``config_path``, then ``WIKI_HTTP_*`` environment variables.

    Args:
        config_path: Optional YAML file

    Returns:
        Resolved HttpSettings
    """
    data = {}
    if config_path is not None:
        data = load_yaml(config_path).get("http") or {}
        if not isinstance(data, dict):
            raise ValueError(f"'http' section must be a mapping in {config_path}")

    settings = _parse_http_settings(data)
    return HttpSettings(
        timeout=env_override("WIKI_HTTP_TIMEOUT", settings.timeout, float),
        connect_timeout=env_override("WIKI_HTTP_CONNECT_TIMEOUT", settings.connect_timeout, float),
        chunk_size=env_override("WIKI_HTTP_CHUNK_SIZE", settings.chunk_size, int),
        user_agent=env_override("WIKI_HTTP_USER_AGENT", settings.user_agent),
    )
