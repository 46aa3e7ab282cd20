# src/nrtracker/contracts/records.py
"""Record types accumulated by telemetry batches.

Records are immutable once created. Each record knows its own wire form;
the batch only wraps the records with the shared common block.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Protocol

# Metric type sent on the wire. The backend supports more, this system only emits gauges.
GAUGE = "gauge"


def now_micros() -> int:
    """Current wall-clock time in integer microseconds since the epoch."""
    return time.time_ns() // 1_000


class WireRecord(Protocol):
    """A record that can render itself as a JSON-ready dict."""

    def to_wire(self) -> dict[str, Any]: ...


# =============================================================================
# Metric Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class MetricRecord:
    """A single metric point.

    Attributes:
        timestamp: Microseconds since epoch. 0 means "stamp at insertion".
        name: Metric name
        kind: Metric type on the wire (``type`` field), "gauge" here
        value: Metric value
        attributes: Per-point dimensions
    """

    timestamp: int
    name: str
    kind: str
    value: float
    attributes: dict[str, str] = field(default_factory=dict)

    def stamped(self) -> "MetricRecord":
        """Return this record with a zero timestamp replaced by now."""
        if self.timestamp != 0:
            return self
        return MetricRecord(
            timestamp=now_micros(),
            name=self.name,
            kind=self.kind,
            value=self.value,
            attributes=self.attributes,
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "name": self.name,
            "type": self.kind,
            "value": self.value,
            "attributes": dict(self.attributes),
        }


# =============================================================================
# Log Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A single log line captured by the logging hook.

    Attributes:
        timestamp: Microseconds since epoch
        message: The log message
        attributes: Structured fields, values already coerced to str
    """

    timestamp: int
    message: str
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_fields(cls, timestamp: int, message: str, fields: dict[str, Any]) -> "LogRecord":
        """Build a record, coercing every field value to its string form."""
        return cls(
            timestamp=timestamp,
            message=message,
            attributes={key: str(value) for key, value in fields.items()},
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "message": self.message,
            "attributes": dict(self.attributes),
        }
