# src/nrtracker/graphql/extract.py
"""Typed result extraction from GraphQL NRQL responses.

Rules:
- Undecodable body -> DecodeError
- ``errors`` not null (any shape) -> BackendReportedError, even when
  results are present; backend errors always take precedence
- Otherwise the results list verbatim; an empty list is success
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from nrtracker.contracts.envelope import GraphQlEnvelope
from nrtracker.contracts.errors import BackendReportedError, DecodeError
from nrtracker.graphql.executor import GraphQlExecutor
from nrtracker.telemetry.protocols import ATTR_COMPONENT, ATTR_ERROR, DiagnosticSink, NullSink

T = TypeVar("T")

PARSING_RESPONSE_BODY_HAS_FAILED = "parsing response body has failed"
GRAPHQL_HAS_RETURNED_ERRORS = "graphql has returned errors"

_COMPONENT = "graphql.extract"


class ResultExtractor(Generic[T]):
    """Decode a response body into GraphQlEnvelope[T] and return its rows.

    Args:
        row_type: Type of one result row (a pydantic model, a primitive,
            dict[str, Any], ...). Defaults to Any (rows as decoded JSON).
        sink: Diagnostic sink (default: discard)

    Example:
        rows = ResultExtractor(CountRow).extract(executor.execute(variables))
    """

    def __init__(self, row_type: Any = Any, *, sink: DiagnosticSink | None = None) -> None:
        self._envelope_type: type[GraphQlEnvelope[Any]] = GraphQlEnvelope[row_type]
        self._sink: DiagnosticSink = sink if sink is not None else NullSink()

    def decode(self, body: bytes) -> GraphQlEnvelope[T]:
        """Decode body into the typed envelope without judging its errors.

        Raises:
            DecodeError: Invalid JSON or a shape that does not fit the envelope
        """
        try:
            envelope: GraphQlEnvelope[T] = self._envelope_type.model_validate_json(body)
        except ValidationError as e:
            self._sink.log_with_fields(
                logging.ERROR,
                PARSING_RESPONSE_BODY_HAS_FAILED,
                {ATTR_COMPONENT: _COMPONENT, ATTR_ERROR: str(e)},
            )
            raise DecodeError(f"response body is not a GraphQL envelope: {e}") from e
        return envelope

    def extract(self, body: bytes) -> list[T]:
        """Return the result rows of a successful response.

        Raises:
            DecodeError: Body cannot be decoded
            BackendReportedError: Envelope carries a non-null ``errors``
        """
        envelope = self.decode(body)
        if envelope.has_errors:
            self._sink.log_with_fields(
                logging.DEBUG,
                GRAPHQL_HAS_RETURNED_ERRORS,
                {ATTR_COMPONENT: _COMPONENT, ATTR_ERROR: str(envelope.errors)},
            )
            raise BackendReportedError(envelope.errors)
        return envelope.results


def fetch(
    executor: GraphQlExecutor,
    variables: Any,
    row_type: Any = Any,
    *,
    sink: DiagnosticSink | None = None,
) -> list[Any]:
    """Execute a templated query and extract its typed result rows.

    Raises:
        Anything GraphQlExecutor.execute or ResultExtractor.extract raises
    """
    body = executor.execute(variables)
    return ResultExtractor(row_type, sink=sink).extract(body)
