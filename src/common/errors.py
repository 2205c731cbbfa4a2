"""Error types shared across pipeline stages.

Each ``PipelineError`` subclass names the phase of a run it belongs to so the
orchestrator can report where a run stopped without inspecting messages.
"""


class PipelineError(Exception):
    """Base class for errors that terminate a pipeline run."""

    phase = "pipeline"


class SourceResolutionError(PipelineError):
    """Input descriptor is neither a URL nor an existing local file."""

    phase = "resolution"


class NetworkError(PipelineError):
    """Remote fetch failed before any record was processed."""

    phase = "network"


class ParseError(PipelineError):
    """Corpus bytes could not be read, decompressed or parsed."""

    phase = "parse"


class WriteError(PipelineError):
    """Writing an article artifact failed."""

    phase = "write"


class CollisionError(WriteError):
    """No free output identifier left for a title."""


class FinalizationError(PipelineError):
    """Metadata pass failed or was attempted more than once."""

    phase = "finalize"


class IngestionCancelled(PipelineError):
    """Run was cancelled between records."""

    phase = "cancelled"


class StreamReadError(OSError):
    """Generic I/O failure raised by the blocking side of a stream bridge."""
