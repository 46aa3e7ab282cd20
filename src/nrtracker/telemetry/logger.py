# src/nrtracker/telemetry/logger.py
"""Diagnostic logger that also forwards its own entries as logs.

TrackerLogger renders every entry as a JSON line on stdout through
structlog, and a processor in the same chain captures the entry into a
LogBatch. flush() ships the captured entries to the logs endpoint.

Only entries that pass the level filter reach the processor chain, so only
those are forwarded.

Usage:
    batch = LogBatch(license_key, logs_endpoint, merger.merge(attrs))
    tracker_logger = TrackerLogger(batch, level="DEBUG")
    metric_batch = MetricBatch(..., sink=tracker_logger)
    ...
    tracker_logger.flush()
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any, TextIO

import structlog

from nrtracker.contracts.records import LogRecord, now_micros
from nrtracker.telemetry.batch import LogBatch


# Keys the rendering chain owns; caller attributes with these names are
# prefixed with "fields." instead of clobbering or colliding with them
_RESERVED_KEYS = frozenset({"event", "level", "timestamp"})


def resolve_level(name: str) -> int:
    """Map a configured level name to a stdlib level: DEBUG, otherwise ERROR."""
    return logging.DEBUG if name.upper() == "DEBUG" else logging.ERROR


class LogForwardingProcessor:
    """structlog processor that captures each entry into a LogBatch.

    Must run before any processor that adds rendering-only keys
    (level, timestamp), so only the caller's fields become attributes.
    """

    def __init__(self, batch: LogBatch) -> None:
        self._batch = batch

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        fields = {key: value for key, value in event_dict.items() if key != "event"}
        self._batch.add(LogRecord.from_fields(now_micros(), str(event_dict.get("event", "")), fields))
        return event_dict


class TrackerLogger:
    """DiagnosticSink writing JSON lines and capturing entries for forwarding.

    Args:
        batch: Log batch receiving captured entries
        level: "DEBUG" enables debug entries; anything else means ERROR only
        stream: Output stream for rendered lines (default: sys.stdout)
    """

    def __init__(self, batch: LogBatch, *, level: str = "ERROR", stream: TextIO | None = None) -> None:
        self._batch = batch
        self._level = resolve_level(level)
        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(stream if stream is not None else sys.stdout),
            processors=[
                LogForwardingProcessor(batch),
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(self._level),
            context_class=dict,
        )

    @property
    def level(self) -> int:
        return self._level

    @property
    def batch(self) -> LogBatch:
        return self._batch

    def log_with_fields(self, level: int, message: str, attributes: Mapping[str, str]) -> None:
        """Emit one entry at ERROR (for ERROR and above) or DEBUG (everything else)."""
        effective = logging.ERROR if level >= logging.ERROR else logging.DEBUG
        fields = {f"fields.{key}" if key in _RESERVED_KEYS else key: value for key, value in attributes.items()}
        self._logger.log(effective, message, **fields)

    def flush(self) -> None:
        """Ship captured entries. See TelemetryBatch.flush for errors raised."""
        self._batch.flush()

    def close(self) -> None:
        """Release the log batch's HTTP client."""
        self._batch.close()
