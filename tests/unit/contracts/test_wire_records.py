# tests/unit/contracts/test_wire_records.py
"""Tests for MetricRecord/LogRecord wire forms and the error taxonomy."""

import dataclasses

import pytest

from nrtracker.contracts.errors import (
    BackendReportedError,
    DeliveryError,
    ExtractError,
    TrackerError,
    UnexpectedStatusError,
)
from nrtracker.contracts.records import GAUGE, LogRecord, MetricRecord, now_micros


class TestMetricRecord:
    def test_wire_form(self) -> None:
        record = MetricRecord(timestamp=5, name="cpu", kind=GAUGE, value=0.25, attributes={"host": "a"})
        assert record.to_wire() == {"timestamp": 5, "name": "cpu", "type": "gauge", "value": 0.25, "attributes": {"host": "a"}}

    def test_stamped_replaces_zero_timestamp(self) -> None:
        before = now_micros()
        stamped = MetricRecord(timestamp=0, name="m", kind=GAUGE, value=1.0).stamped()
        assert stamped.timestamp >= before

    def test_stamped_keeps_explicit_timestamp(self) -> None:
        record = MetricRecord(timestamp=42, name="m", kind=GAUGE, value=1.0)
        assert record.stamped() is record

    def test_is_frozen(self) -> None:
        record = MetricRecord(timestamp=1, name="m", kind=GAUGE, value=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.value = 2.0  # type: ignore[misc]


class TestLogRecord:
    def test_from_fields_coerces_values_to_str(self) -> None:
        record = LogRecord.from_fields(7, "started", {"count": 3, "ok": True, "none": None})
        assert record.attributes == {"count": "3", "ok": "True", "none": "None"}

    def test_wire_form(self) -> None:
        assert LogRecord(timestamp=7, message="m", attributes={"a": "b"}).to_wire() == {
            "timestamp": 7,
            "message": "m",
            "attributes": {"a": "b"},
        }


def test_now_micros_is_microseconds() -> None:
    # Microseconds since the epoch have 16 digits until the year 2286
    assert len(str(now_micros())) == 16


class TestErrorTaxonomy:
    def test_unexpected_status_carries_codes(self) -> None:
        error = UnexpectedStatusError(400, 202)
        assert isinstance(error, DeliveryError)
        assert isinstance(error, TrackerError)
        assert (error.status, error.expected) == (400, 202)
        assert "400" in str(error)

    def test_backend_reported_error_keeps_errors_verbatim(self) -> None:
        errors = [{"message": "NRQL syntax error"}]
        error = BackendReportedError(errors)
        assert isinstance(error, ExtractError)
        assert error.errors is errors
