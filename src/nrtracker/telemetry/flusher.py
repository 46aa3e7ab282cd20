# src/nrtracker/telemetry/flusher.py
"""Flush a set of freshly collected gauges in one call."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from nrtracker.contracts.records import GAUGE, now_micros
from nrtracker.telemetry.batch import MetricBatch


@dataclass(frozen=True, slots=True)
class FlushMetric:
    """A named gauge value collected by the caller."""

    name: str
    value: float
    attributes: dict[str, str] = field(default_factory=dict)


def flush_metrics(batch: MetricBatch, metrics: Iterable[FlushMetric]) -> None:
    """Add every metric as a gauge stamped with the current time, then flush.

    Errors from the flush propagate unchanged.
    """
    for metric in metrics:
        batch.add_metric(
            metric.name,
            metric.value,
            metric.attributes,
            timestamp=now_micros(),
            kind=GAUGE,
        )

    batch.flush()
