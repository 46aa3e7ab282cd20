# src/nrtracker/contracts/envelope.py
"""Generic GraphQL response envelope for NRQL queries.

Shape returned by the backend:

    {"data": {"actor": {"nrql": {"results": [...]}}}, "errors": <any>}

The envelope is parameterized over the row type so callers get typed rows:

    envelope = GraphQlEnvelope[MyRow].model_validate_json(body)

``errors`` is opaque. A non-null value means the whole response failed,
whatever ``results`` holds.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class NrqlResult(BaseModel, Generic[T]):
    """``nrql`` block holding the flat result rows."""

    results: list[T] | None = None


class Actor(BaseModel, Generic[T]):
    """``actor`` block."""

    nrql: NrqlResult[T] | None = None


class EnvelopeData(BaseModel, Generic[T]):
    """``data`` block. GraphQL may send ``null`` here when errors occur."""

    actor: Actor[T] | None = None


class GraphQlEnvelope(BaseModel, Generic[T]):
    """Top-level decode target for a GraphQL NRQL response."""

    data: EnvelopeData[T] | None = None
    errors: Any = None

    @property
    def has_errors(self) -> bool:
        """True when the backend reported errors (any non-null value)."""
        return self.errors is not None

    @property
    def results(self) -> list[T]:
        """Result rows, empty when any level of the data path is missing."""
        if self.data is None or self.data.actor is None or self.data.actor.nrql is None:
            return []
        return self.data.actor.nrql.results or []
