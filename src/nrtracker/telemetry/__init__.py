# src/nrtracker/telemetry/__init__.py
"""Metric and log forwarding.

Components:
- attributes: AttributeMerger for common attributes (fixed keys win)
- codec: PayloadCodec (canonical JSON + gzip)
- delivery: HttpDelivery (single POST, status classification)
- batch: TelemetryBatch, MetricBatch, LogBatch
- logger: TrackerLogger, the diagnostic sink that forwards its own entries
- flusher: flush_metrics() for one-shot gauge collection
- protocols: DiagnosticSink, NullSink
- factory: create_* helpers wiring settings (import from
  nrtracker.telemetry.factory; it depends on nrtracker.graphql)

Usage:
    from nrtracker.telemetry import AttributeMerger, MetricBatch

    batch = MetricBatch(license_key, endpoint, AttributeMerger(environment).merge({}))
    batch.add_metric("queue.depth", 3.0)
    batch.flush()
"""

from nrtracker.telemetry.attributes import AttributeMerger
from nrtracker.telemetry.batch import LogBatch, MetricBatch, TelemetryBatch
from nrtracker.telemetry.codec import PayloadCodec
from nrtracker.telemetry.delivery import HttpDelivery
from nrtracker.telemetry.flusher import FlushMetric, flush_metrics
from nrtracker.telemetry.logger import TrackerLogger
from nrtracker.telemetry.protocols import DiagnosticSink, NullSink

__all__ = [
    "AttributeMerger",
    "DiagnosticSink",
    "FlushMetric",
    "HttpDelivery",
    "LogBatch",
    "MetricBatch",
    "NullSink",
    "PayloadCodec",
    "TelemetryBatch",
    "TrackerLogger",
    "flush_metrics",
]
