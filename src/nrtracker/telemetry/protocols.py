# src/nrtracker/telemetry/protocols.py
"""Protocol for the diagnostic sink (the logging collaborator).

Batches, deliveries and executors report what they do through an explicit
sink handed to them at construction, never through global logging state.

Error handling:
    - log_with_fields() is observability only: callers emit and continue,
      the outcome of the operation never depends on it.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

# Attribute keys shared by every diagnostic emission
ATTR_COMPONENT = "tracker.component"
ATTR_ERROR = "tracker.error"


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receives structured diagnostics: a severity, a fixed message tag, flat attributes."""

    def log_with_fields(self, level: int, message: str, attributes: Mapping[str, str]) -> None:
        """Record one diagnostic.

        Args:
            level: stdlib logging level (logging.DEBUG, logging.ERROR)
            message: Fixed message tag, e.g. "http request has failed"
            attributes: Flat string attributes, e.g. tracker.error
        """
        ...


class NullSink:
    """Sink that discards everything.

    Used where emitting would feed back into the emitter, e.g. the log
    batch delivering the logger's own records.
    """

    def log_with_fields(self, level: int, message: str, attributes: Mapping[str, str]) -> None:
        pass
