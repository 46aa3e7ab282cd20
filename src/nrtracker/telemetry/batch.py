# src/nrtracker/telemetry/batch.py
"""In-memory batches of metric and log records.

A batch accumulates records in append order and ships all of them as ONE
wire object per flush:

    [{"common": {"attributes": {...}}, "metrics": [...]}]

Metrics and logs share the envelope, compression and delivery; they differ
only in the records field name and the record shape, so both are the same
generic TelemetryBatch.

Thread Safety:
    NOT thread-safe. The host must serialize add()/flush() on one instance
    or use one instance per worker.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType, TracebackType
from typing import Any, ClassVar, Generic, TypeVar

from nrtracker.contracts.errors import CompressionError, SerializationError
from nrtracker.contracts.records import GAUGE, LogRecord, MetricRecord, WireRecord
from nrtracker.telemetry.codec import PayloadCodec
from nrtracker.telemetry.delivery import HttpDelivery
from nrtracker.telemetry.protocols import ATTR_COMPONENT, ATTR_ERROR, DiagnosticSink, NullSink

R = TypeVar("R", bound=WireRecord)

INGEST_ACCEPTED_STATUS = 202

CREATING_PAYLOAD = "creating payload"
PAYLOAD_COULD_NOT_BE_CREATED = "payload could not be created"
PAYLOAD_COULD_NOT_BE_ZIPPED = "payload could not be zipped"


class TelemetryBatch(Generic[R]):
    """Append-only batch of records sharing one common-attributes block.

    Subclasses set ``records_field`` (wire key) and ``kind`` (used in
    diagnostic tags).

    Args:
        license_key: Ingest key sent as the Api-Key header
        endpoint: Ingest endpoint URL
        common_attributes: Already-merged common attributes (see AttributeMerger)
        delivery: HTTP delivery (default: a new HttpDelivery reporting to sink)
        codec: Payload codec (default: PayloadCodec())
        sink: Diagnostic sink (default: discard)
    """

    records_field: ClassVar[str]
    kind: ClassVar[str]

    def __init__(
        self,
        license_key: str,
        endpoint: str,
        common_attributes: Mapping[str, str],
        *,
        delivery: HttpDelivery | None = None,
        codec: PayloadCodec | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self._license_key = license_key
        self._endpoint = endpoint
        self._common: Mapping[str, str] = MappingProxyType(dict(common_attributes))
        self._sink: DiagnosticSink = sink if sink is not None else NullSink()
        self._delivery = delivery if delivery is not None else HttpDelivery(sink=self._sink)
        self._codec = codec if codec is not None else PayloadCodec()
        self._records: list[R] = []

    @property
    def common_attributes(self) -> Mapping[str, str]:
        """Read-only view of the common attributes."""
        return self._common

    @property
    def records(self) -> tuple[R, ...]:
        """Snapshot of the pending records in append order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: R) -> None:
        """Append a record. In-memory only, no I/O."""
        self._records.append(record)

    def wire_object(self) -> list[dict[str, Any]]:
        """The wire payload for the pending records: exactly one common/records pair."""
        return self._wire_object(self._records)

    def _wire_object(self, records: list[R]) -> list[dict[str, Any]]:
        return [
            {
                "common": {"attributes": dict(self._common)},
                self.records_field: [record.to_wire() for record in records],
            }
        ]

    def flush(self) -> None:
        """Serialize, compress and deliver all pending records.

        An empty batch is skipped without I/O. On success the pending records
        are cleared; on failure they are kept and the error propagates
        unchanged. No retry.

        Raises:
            SerializationError: Records cannot be encoded
            CompressionError: Payload cannot be gzipped
            DeliveryError: Any delivery failure (see HttpDelivery.post)
        """
        self._debug(f"forwarding {self.kind}")

        if not self._records:
            self._debug(f"there are no {self.kind} to send")
            return

        # Records added after this point belong to the next flush
        pending = list(self._records)
        payload = self._create_payload(pending)

        self._delivery.post(
            self._endpoint,
            {
                "Content-Type": "application/json",
                "Content-Encoding": "gzip",
                "Api-Key": self._license_key,
            },
            payload,
            expected_status=INGEST_ACCEPTED_STATUS,
        )

        del self._records[: len(pending)]
        self._debug(f"{self.kind} are forwarded")

    def _create_payload(self, records: list[R]) -> bytes:
        self._debug(CREATING_PAYLOAD)
        try:
            encoded = self._codec.encode(self._wire_object(records))
        except SerializationError as e:
            self._error(PAYLOAD_COULD_NOT_BE_CREATED, e)
            raise
        try:
            return self._codec.compress(encoded)
        except CompressionError as e:
            self._error(PAYLOAD_COULD_NOT_BE_ZIPPED, e)
            raise

    def close(self) -> None:
        """Release the delivery's HTTP client. Pending records are not flushed."""
        self._delivery.close()

    def __enter__(self) -> TelemetryBatch[R]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _debug(self, tag: str) -> None:
        self._sink.log_with_fields(logging.DEBUG, tag, {ATTR_COMPONENT: self._component})

    def _error(self, tag: str, error: Exception) -> None:
        self._sink.log_with_fields(logging.ERROR, tag, {ATTR_COMPONENT: self._component, ATTR_ERROR: str(error)})

    @property
    def _component(self) -> str:
        return f"telemetry.{self.kind}"


class MetricBatch(TelemetryBatch[MetricRecord]):
    """Batch of metric points, shipped under ``metrics``."""

    records_field = "metrics"
    kind = "metrics"

    def add(self, record: MetricRecord) -> None:
        """Append a metric, stamping a zero timestamp with the current time."""
        super().add(record.stamped())

    def add_metric(
        self,
        name: str,
        value: float,
        attributes: Mapping[str, str] | None = None,
        *,
        timestamp: int = 0,
        kind: str = GAUGE,
    ) -> None:
        """Build and append a MetricRecord.

        Args:
            name: Metric name
            value: Metric value
            attributes: Per-point dimensions
            timestamp: Microseconds since epoch, 0 for "now"
            kind: Metric type on the wire (default: gauge)
        """
        self.add(
            MetricRecord(
                timestamp=timestamp,
                name=name,
                kind=kind,
                value=value,
                attributes=dict(attributes or {}),
            )
        )


class LogBatch(TelemetryBatch[LogRecord]):
    """Batch of log lines, shipped under ``logs``."""

    records_field = "logs"
    kind = "logs"
