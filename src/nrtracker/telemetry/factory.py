# src/nrtracker/telemetry/factory.py
"""Factory functions wiring settings into batches, logger and executor.

This module is the glue between configuration (TrackerSettings plus the
captured EnvironmentSettings) and runtime objects.

Usage:
    settings = load_settings(Path("tracker.yaml"))
    environment = EnvironmentSettings.from_environ()

    tracker_logger = create_tracker_logger(settings, environment)
    metrics = create_metric_batch(settings, environment, sink=tracker_logger)
    executor = create_graphql_executor(settings, environment, sink=tracker_logger)
"""

from __future__ import annotations

import structlog

from nrtracker.core.config import EnvironmentSettings, TrackerSettings
from nrtracker.core.templates import NRQL_QUERY_TEMPLATE
from nrtracker.graphql.executor import GraphQlExecutor
from nrtracker.telemetry.attributes import AttributeMerger
from nrtracker.telemetry.batch import LogBatch, MetricBatch
from nrtracker.telemetry.codec import PayloadCodec
from nrtracker.telemetry.delivery import HttpDelivery
from nrtracker.telemetry.logger import TrackerLogger
from nrtracker.telemetry.protocols import DiagnosticSink, NullSink

logger = structlog.get_logger(__name__)


def create_metric_batch(
    settings: TrackerSettings,
    environment: EnvironmentSettings,
    sink: DiagnosticSink | None = None,
) -> MetricBatch:
    """Create a MetricBatch with merged common attributes."""
    merger = AttributeMerger(environment)
    batch = MetricBatch(
        settings.license_key,
        settings.metrics_endpoint,
        merger.merge(settings.common_attributes),
        delivery=HttpDelivery(timeout=settings.timeout_seconds, sink=sink),
        codec=PayloadCodec(settings.compress_level),
        sink=sink,
    )
    logger.debug("metric batch created", endpoint=settings.metrics_endpoint)
    return batch


def create_log_batch(settings: TrackerSettings, environment: EnvironmentSettings) -> LogBatch:
    """Create a LogBatch.

    Its delivery reports to a NullSink: shipping logs must not log into the
    batch being shipped.
    """
    merger = AttributeMerger(environment)
    return LogBatch(
        settings.license_key,
        settings.logs_endpoint,
        merger.merge(settings.common_attributes),
        delivery=HttpDelivery(timeout=settings.timeout_seconds, sink=NullSink()),
        codec=PayloadCodec(settings.compress_level),
        sink=NullSink(),
    )


def create_tracker_logger(settings: TrackerSettings, environment: EnvironmentSettings) -> TrackerLogger:
    """Create a TrackerLogger forwarding its entries through a new LogBatch."""
    return TrackerLogger(create_log_batch(settings, environment), level=settings.log_level)


def create_graphql_executor(
    settings: TrackerSettings,
    environment: EnvironmentSettings,
    sink: DiagnosticSink | None = None,
    *,
    template_name: str = "nrql",
    template_body: str = NRQL_QUERY_TEMPLATE,
) -> GraphQlExecutor:
    """Create a GraphQlExecutor authenticated with the captured API key."""
    if not environment.api_key:
        logger.warning("graphql executor created without an API key", endpoint=settings.graphql_endpoint)
    return GraphQlExecutor(
        settings.graphql_endpoint,
        template_name,
        template_body,
        api_key=environment.api_key,
        sink=sink,
        delivery=HttpDelivery(timeout=settings.timeout_seconds, sink=sink),
    )
