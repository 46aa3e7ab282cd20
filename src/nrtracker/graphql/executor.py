# src/nrtracker/graphql/executor.py
"""GraphQL request/response cycle for templated NRQL queries.

Sequence per execute():
    render template -> {"query": rendered} -> JSON (no gzip)
    -> POST with Api-Key -> 200 -> raw body bytes

Variables are substituted into the query text; they are never sent as a
separate GraphQL ``variables`` field.
"""

from __future__ import annotations

import logging
from typing import Any

from nrtracker.contracts.errors import SerializationError, TemplateError
from nrtracker.core.templates import QueryTemplate
from nrtracker.telemetry.codec import PayloadCodec
from nrtracker.telemetry.delivery import HttpDelivery
from nrtracker.telemetry.protocols import ATTR_COMPONENT, ATTR_ERROR, DiagnosticSink, NullSink

GRAPHQL_OK_STATUS = 200

SUBSTITUTING_TEMPLATE_VARIABLES = "substituting template variables"
SUBSTITUTING_TEMPLATE_VARIABLES_HAS_FAILED = "substituting template variables has failed"
EXECUTING_REQUEST = "executing request"
CREATING_PAYLOAD_HAS_FAILED = "creating payload has failed"

_COMPONENT = "graphql.executor"


class GraphQlExecutor:
    """Execute one templated query against a GraphQL endpoint.

    Args:
        endpoint: GraphQL endpoint URL
        template_name: Template name, used in error messages
        template_body: jinja2 query template
        api_key: User API key sent as Api-Key (captured from the environment
            by the caller, see EnvironmentSettings)
        sink: Diagnostic sink (default: discard)
        delivery: HTTP delivery (default: a new HttpDelivery reporting to sink)
        codec: JSON codec (default: PayloadCodec())

    Example:
        executor = GraphQlExecutor(
            settings.graphql_endpoint,
            "nrql",
            NRQL_QUERY_TEMPLATE,
            api_key=environment.api_key,
            sink=tracker_logger,
        )
        body = executor.execute(NrqlQueryVariables(account_id=1, nrql_query="FROM Metric SELECT count(*)"))
    """

    def __init__(
        self,
        endpoint: str,
        template_name: str,
        template_body: str,
        *,
        api_key: str,
        sink: DiagnosticSink | None = None,
        delivery: HttpDelivery | None = None,
        codec: PayloadCodec | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._template = QueryTemplate(template_name, template_body)
        self._api_key = api_key
        self._sink: DiagnosticSink = sink if sink is not None else NullSink()
        self._delivery = delivery if delivery is not None else HttpDelivery(sink=self._sink)
        self._codec = codec if codec is not None else PayloadCodec()

    @property
    def template(self) -> QueryTemplate:
        return self._template

    def render(self, variables: Any) -> str:
        """Render the query text for variables.

        Raises:
            TemplateParseError: Template body is malformed
            TemplateExecutionError: Variables lack a referenced field
        """
        self._emit(logging.DEBUG, SUBSTITUTING_TEMPLATE_VARIABLES)
        try:
            return self._template.render(variables)
        except TemplateError as e:
            self._emit(logging.ERROR, SUBSTITUTING_TEMPLATE_VARIABLES_HAS_FAILED, e)
            raise

    def create_payload(self, query: str) -> bytes:
        """JSON body ``{"query": query}``.

        Raises:
            SerializationError: If the query cannot be encoded
        """
        try:
            return self._codec.encode({"query": query})
        except SerializationError as e:
            self._emit(logging.ERROR, CREATING_PAYLOAD_HAS_FAILED, e)
            raise

    def execute(self, variables: Any) -> bytes:
        """Run one request/response cycle and return the raw response body.

        Raises:
            TemplateError: Rendering failed
            SerializationError: Payload could not be created
            DeliveryError: RequestConstructionError, TransportError or
                UnexpectedStatusError (anything but 200)
        """
        query = self.render(variables)
        payload = self.create_payload(query)

        self._emit(logging.DEBUG, EXECUTING_REQUEST)
        return self._delivery.post(
            self._endpoint,
            {
                "Content-Type": "application/json",
                "Api-Key": self._api_key,
            },
            payload,
            expected_status=GRAPHQL_OK_STATUS,
        )

    def close(self) -> None:
        """Release the underlying HTTP client."""
        self._delivery.close()

    def _emit(self, level: int, tag: str, error: Exception | None = None) -> None:
        attributes = {ATTR_COMPONENT: _COMPONENT}
        if error is not None:
            attributes[ATTR_ERROR] = str(error)
        self._sink.log_with_fields(level, tag, attributes)
