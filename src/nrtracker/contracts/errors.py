# src/nrtracker/contracts/errors.py
"""Exception taxonomy for nrtracker.

Every component raises the first error it meets. Library exceptions
(httpx, jinja2, pydantic, rfc8785) are chained with ``raise ... from e``
so the originating error stays available on ``__cause__``.

Hierarchy:
    TrackerError
    ├── ConfigurationError
    ├── TemplateError
    │   ├── TemplateParseError
    │   └── TemplateExecutionError
    ├── PayloadError
    │   ├── SerializationError
    │   └── CompressionError
    ├── DeliveryError
    │   ├── RequestConstructionError
    │   ├── TransportError
    │   └── UnexpectedStatusError
    └── ExtractError
        ├── DecodeError
        └── BackendReportedError
"""

from typing import Any


class TrackerError(Exception):
    """Base class for all nrtracker errors."""


class ConfigurationError(TrackerError):
    """Raised when tracker settings cannot be loaded or validated."""


class TemplateError(TrackerError):
    """Error while turning a query template into query text."""


class TemplateParseError(TemplateError):
    """The template body is not valid template syntax."""


class TemplateExecutionError(TemplateError):
    """The variables do not supply what the template references.

    This is a caller error: e.g. a bare string passed where a structure
    with named fields is expected.
    """


class PayloadError(TrackerError):
    """Error while building a wire payload."""


class SerializationError(PayloadError):
    """The object graph cannot be serialized to canonical JSON."""


class CompressionError(PayloadError):
    """The gzip writer failed."""


class DeliveryError(TrackerError):
    """Error while delivering a payload over HTTP."""


class RequestConstructionError(DeliveryError):
    """The request could not be built (malformed endpoint). No I/O happened."""


class TransportError(DeliveryError):
    """Network failure: connection refused, DNS failure, timeout."""


class UnexpectedStatusError(DeliveryError):
    """The backend answered with a status other than the expected one.

    The response body is discarded, not parsed for a structured error.

    Attributes:
        status: The observed HTTP status code
        expected: The status code that would have meant success
    """

    def __init__(self, status: int, expected: int) -> None:
        self.status = status
        self.expected = expected
        super().__init__(f"http request has returned not OK status: {status} (expected {expected})")


class ExtractError(TrackerError):
    """Error while extracting result rows from a GraphQL response."""


class DecodeError(ExtractError):
    """The response body is not a decodable GraphQL envelope."""


class BackendReportedError(ExtractError):
    """The GraphQL envelope carries a non-null ``errors`` field.

    Attributes:
        errors: The opaque ``errors`` value exactly as decoded
    """

    def __init__(self, errors: Any) -> None:
        self.errors = errors
        super().__init__(f"graphql has returned errors: {errors}")
