# tests/unit/graphql/test_extract.py
"""Tests for ResultExtractor and fetch."""

import json
import logging
from typing import Any

import httpx
import pytest
import respx
from pydantic import BaseModel

from nrtracker.contracts.errors import BackendReportedError, DecodeError
from nrtracker.core.templates import NRQL_QUERY_TEMPLATE, NrqlQueryVariables
from nrtracker.graphql.executor import GraphQlExecutor
from nrtracker.graphql.extract import (
    GRAPHQL_HAS_RETURNED_ERRORS,
    PARSING_RESPONSE_BODY_HAS_FAILED,
    ResultExtractor,
    fetch,
)
from tests.conftest import RecordingSink


class CountRow(BaseModel):
    count: int


def envelope(results: Any = None, errors: Any = None) -> bytes:
    return json.dumps({"data": {"actor": {"nrql": {"results": results}}}, "errors": errors}).encode()


class TestExtract:
    def test_returns_results_verbatim(self) -> None:
        assert ResultExtractor().extract(envelope(["data"])) == ["data"]

    def test_empty_results_is_success(self) -> None:
        assert ResultExtractor().extract(envelope([])) == []

    def test_missing_data_path_yields_empty(self) -> None:
        assert ResultExtractor().extract(b'{"data": null}') == []
        assert ResultExtractor().extract(b"{}") == []

    def test_rows_validated_into_model(self) -> None:
        rows = ResultExtractor(CountRow).extract(envelope([{"count": 3}, {"count": 4}]))
        assert rows == [CountRow(count=3), CountRow(count=4)]

    def test_row_shape_mismatch_is_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            ResultExtractor(CountRow).extract(envelope([{"count": "many"}]))


class TestBackendErrors:
    """A non-null errors field fails the response whatever results holds."""

    @pytest.mark.parametrize("errors", [[{"message": "bad NRQL"}], "boom", {"code": 1}, []])
    def test_errors_take_precedence_over_results(self, errors: Any, sink: RecordingSink) -> None:
        with pytest.raises(BackendReportedError) as exc_info:
            ResultExtractor(sink=sink).extract(envelope(["data"], errors))

        assert exc_info.value.errors == errors
        assert sink.find(GRAPHQL_HAS_RETURNED_ERRORS).level == logging.DEBUG

    def test_errors_with_null_data(self) -> None:
        with pytest.raises(BackendReportedError):
            ResultExtractor().extract(b'{"data": null, "errors": [{"message": "x"}]}')

    def test_decode_exposes_errors_without_raising(self) -> None:
        decoded = ResultExtractor().decode(envelope(["data"], ["e"]))
        assert decoded.has_errors
        assert decoded.results == ["data"]


class TestDecodeErrors:
    @pytest.mark.parametrize("body", [b"not json", b"", b"[1, 2]", b'{"data": {"actor": {"nrql": {"results": 5}}}}'])
    def test_undecodable_body(self, body: bytes, sink: RecordingSink) -> None:
        with pytest.raises(DecodeError):
            ResultExtractor(sink=sink).extract(body)

        assert sink.find(PARSING_RESPONSE_BODY_HAS_FAILED).level == logging.ERROR


class TestFetch:
    @respx.mock
    def test_executes_and_extracts(self) -> None:
        respx.post("https://api.example.com/graphql").mock(
            return_value=httpx.Response(200, content=envelope([{"count": 7}]))
        )
        executor = GraphQlExecutor("https://api.example.com/graphql", "nrql", NRQL_QUERY_TEMPLATE, api_key="k")

        rows = fetch(executor, NrqlQueryVariables(account_id=1, nrql_query="FROM Metric SELECT count(*)"), CountRow)

        assert rows == [CountRow(count=7)]

    @respx.mock
    def test_backend_errors_propagate(self) -> None:
        respx.post("https://api.example.com/graphql").mock(
            return_value=httpx.Response(200, content=envelope(["data"], [{"message": "x"}]))
        )
        executor = GraphQlExecutor("https://api.example.com/graphql", "nrql", NRQL_QUERY_TEMPLATE, api_key="k")

        with pytest.raises(BackendReportedError):
            fetch(executor, {"account_id": 1, "nrql_query": "q"})
