# src/nrtracker/contracts/__init__.py
"""Shared types crossing component boundaries: errors, records, envelope."""

from nrtracker.contracts.envelope import GraphQlEnvelope
from nrtracker.contracts.errors import (
    BackendReportedError,
    CompressionError,
    ConfigurationError,
    DecodeError,
    DeliveryError,
    ExtractError,
    PayloadError,
    RequestConstructionError,
    SerializationError,
    TemplateError,
    TemplateExecutionError,
    TemplateParseError,
    TrackerError,
    TransportError,
    UnexpectedStatusError,
)
from nrtracker.contracts.records import GAUGE, LogRecord, MetricRecord, now_micros

__all__ = [
    "GAUGE",
    "BackendReportedError",
    "CompressionError",
    "ConfigurationError",
    "DecodeError",
    "DeliveryError",
    "ExtractError",
    "GraphQlEnvelope",
    "LogRecord",
    "MetricRecord",
    "PayloadError",
    "RequestConstructionError",
    "SerializationError",
    "TemplateError",
    "TemplateExecutionError",
    "TemplateParseError",
    "TrackerError",
    "TransportError",
    "UnexpectedStatusError",
    "now_micros",
]
