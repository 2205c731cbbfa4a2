"""Data models for ingest_dump pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from common.errors import PipelineError


@dataclass(frozen=True)
class LocalSource:
    """Dump file on the local filesystem."""
    path: Path
    compressed: bool
    language: str


@dataclass(frozen=True)
class RemoteSource:
    """Dump streamed over HTTP(S)."""
    url: str
    compressed: bool
    language: str


SourceDescriptor = Union[LocalSource, RemoteSource]


@dataclass
class IngestStats:
    """Counters for one ingestion pass."""
    processed: int = 0
    written: int = 0
    skipped: int = 0


@dataclass
class RunOutcome:
    """Terminal state of a pipeline run."""
    succeeded: bool
    phase: Optional[str] = None
    error: Optional[BaseException] = None
    stats: Optional[IngestStats] = None

    @classmethod
    def success(cls, stats: IngestStats) -> RunOutcome:
        return cls(succeeded=True, stats=stats)

    @classmethod
    def failed(cls, error: PipelineError, stats: Optional[IngestStats] = None) -> RunOutcome:
        return cls(succeeded=False, phase=error.phase, error=error, stats=stats)

    @property
    def message(self) -> str:
        if self.succeeded:
            written = self.stats.written if self.stats else 0
            return f"Generated {written} articles"
        return f"Failed during {self.phase}: {self.error}"
