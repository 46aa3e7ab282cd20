# src/nrtracker/telemetry/delivery.py
"""Single-shot HTTP delivery of a prepared payload.

One POST per call, classified by exactly one expected status:
202 for metrics/logs ingest, 200 for GraphQL queries. No retry here or
anywhere above.

Failure branches emit an ERROR diagnostic to the sink, then raise:
    - malformed endpoint       -> RequestConstructionError (before any I/O)
    - network failure/timeout  -> TransportError
    - undecodable response     -> TransportError
    - any other status         -> UnexpectedStatusError (body discarded)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType

import httpx
import structlog

from nrtracker.contracts.errors import RequestConstructionError, TransportError, UnexpectedStatusError
from nrtracker.telemetry.protocols import ATTR_COMPONENT, ATTR_ERROR, DiagnosticSink, NullSink

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

HTTP_REQUEST_COULD_NOT_BE_CREATED = "http request could not be created"
HTTP_REQUEST_HAS_FAILED = "http request has failed"
HTTP_REQUEST_RETURNED_NOT_OK_STATUS = "http request has returned not OK status"

_COMPONENT = "telemetry.delivery"
_ALLOWED_SCHEMES = frozenset({"http", "https"})


def _validate_endpoint(endpoint: str) -> httpx.URL:
    """Parse endpoint into an absolute http(s) URL.

    Raises:
        RequestConstructionError: If the endpoint cannot be a request target
    """
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise RequestConstructionError(f"invalid endpoint {endpoint!r}: {e}") from e
    if url.scheme not in _ALLOWED_SCHEMES or not url.host:
        raise RequestConstructionError(f"invalid endpoint {endpoint!r}: an absolute http(s) URL with a host is required")
    return url


class HttpDelivery:
    """POST prepared payloads and classify the outcome.

    Wraps a single httpx.Client. Connection pooling is whatever httpx
    provides; no other state survives between calls.

    Thread Safety:
        httpx.Client is thread-safe, but the delivery is normally owned by
        one batch or executor, which are not.

    Example:
        with HttpDelivery(sink=sink) as delivery:
            delivery.post(endpoint, {"Api-Key": key}, body, expected_status=202)
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        sink: DiagnosticSink | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize delivery.

        Args:
            timeout: Request timeout in seconds (default: 30.0)
            sink: Diagnostic sink for failure reports (default: discard)
            client: Pre-built httpx.Client, mainly for tests
        """
        self._timeout = timeout
        self._sink: DiagnosticSink = sink if sink is not None else NullSink()
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def timeout(self) -> float:
        return self._timeout

    def post(
        self,
        endpoint: str,
        headers: Mapping[str, str],
        body: bytes,
        *,
        expected_status: int,
    ) -> bytes:
        """Send one POST and return the response body on success.

        Args:
            endpoint: Absolute http(s) URL
            headers: Request headers (content type, encoding, API key)
            body: Prepared payload bytes
            expected_status: The single status code that means success

        Returns:
            Raw response body bytes

        Raises:
            RequestConstructionError: Malformed endpoint, raised before any I/O
            TransportError: Connection refused, DNS failure, timeout, or a
                response body that cannot be decoded
            UnexpectedStatusError: Any status other than expected_status
        """
        try:
            url = _validate_endpoint(endpoint)
            request = self._client.build_request("POST", url, headers=dict(headers), content=body)
        except RequestConstructionError as e:
            self._report(HTTP_REQUEST_COULD_NOT_BE_CREATED, str(e))
            raise
        except (httpx.InvalidURL, httpx.LocalProtocolError, ValueError, TypeError) as e:
            # Header values that cannot be encoded land here
            self._report(HTTP_REQUEST_COULD_NOT_BE_CREATED, str(e))
            raise RequestConstructionError(f"request to {endpoint!r} could not be created: {e}") from e

        try:
            response = self._client.send(request)
        except httpx.RequestError as e:
            # Transport failures plus bodies that cannot be decoded (DecodingError)
            self._report(HTTP_REQUEST_HAS_FAILED, str(e))
            raise TransportError(f"request to {url.host} failed: {e}") from e

        try:
            if response.status_code != expected_status:
                self._report(
                    HTTP_REQUEST_RETURNED_NOT_OK_STATUS,
                    f"status {response.status_code}, expected {expected_status}",
                )
                raise UnexpectedStatusError(response.status_code, expected_status)
            content = response.content
        finally:
            response.close()

        logger.debug("http request completed", host=url.host, status_code=response.status_code)
        return content

    def _report(self, tag: str, error: str) -> None:
        self._sink.log_with_fields(
            logging.ERROR,
            tag,
            {ATTR_COMPONENT: _COMPONENT, ATTR_ERROR: error},
        )

    def close(self) -> None:
        """Close the underlying httpx client and release connections."""
        self._client.close()

    def __enter__(self) -> HttpDelivery:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
