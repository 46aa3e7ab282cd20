# src/nrtracker/core/templates.py
"""Jinja2-based GraphQL query templating.

Templates reference query variables by name at the top level:

    {
      actor {
        nrql(accounts: {{ account_id }}, query: "{{ nrql_query }}") {
          results
        }
      }
    }

Variables must be a structure with named fields: a pydantic model, a
dataclass instance, or a mapping. Supplying anything else, or a structure
missing a referenced field, is a caller error and raises
TemplateExecutionError.

No escaping is applied. The rendered string is used verbatim as GraphQL
query text, so callers are responsible for producing safe values.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from jinja2 import StrictUndefined, TemplateSyntaxError, UndefinedError, meta
from jinja2.exceptions import SecurityError
from jinja2.sandbox import SandboxedEnvironment
from pydantic import BaseModel

from nrtracker.contracts.errors import TemplateExecutionError, TemplateParseError

__all__ = [
    "NRQL_QUERY_TEMPLATE",
    "NrqlQueryVariables",
    "QueryTemplate",
    "referenced_fields",
    "render_query",
]

NRQL_QUERY_TEMPLATE = """
{
  actor {
    nrql(
      accounts: {{ account_id }},
      query: "{{ nrql_query }}"
    ) {
      results
    }
  }
}
"""


class NrqlQueryVariables(BaseModel):
    """Variables for NRQL_QUERY_TEMPLATE."""

    model_config = {"frozen": True}

    account_id: int
    nrql_query: str


def _new_environment() -> SandboxedEnvironment:
    return SandboxedEnvironment(
        undefined=StrictUndefined,  # Raise on undefined variables
        autoescape=False,  # Query text, not HTML
    )


def referenced_fields(template_body: str) -> frozenset[str]:
    """Top-level variable names a template needs.

    Raises:
        TemplateParseError: If template syntax is invalid
    """
    env = _new_environment()
    try:
        ast = env.parse(template_body)
    except TemplateSyntaxError as e:
        raise TemplateParseError(f"Invalid template syntax: {e}") from e
    return frozenset(meta.find_undeclared_variables(ast) - env.globals.keys())


def _as_context(variables: Any) -> dict[str, Any]:
    """Convert a named-fields structure into a template context."""
    if isinstance(variables, BaseModel):
        return variables.model_dump()
    if dataclasses.is_dataclass(variables) and not isinstance(variables, type):
        return {f.name: getattr(variables, f.name) for f in dataclasses.fields(variables)}
    if isinstance(variables, Mapping):
        return dict(variables)
    raise TemplateExecutionError(
        f"Query variables must be a model, dataclass or mapping with named fields, got {type(variables).__name__}"
    )


class QueryTemplate:
    """Named query template rendered against caller variables.

    The body is parsed on every render; query volume is low and a template
    object stays cheap to construct.

    Example:
        template = QueryTemplate("nrql", NRQL_QUERY_TEMPLATE)
        query = template.render(NrqlQueryVariables(account_id=1, nrql_query="FROM Metric SELECT count(*)"))
    """

    def __init__(self, name: str, body: str) -> None:
        self._name = name
        self._body = body

    @property
    def name(self) -> str:
        return self._name

    @property
    def body(self) -> str:
        return self._body

    def render(self, variables: Any) -> str:
        """Render the template with the given variables.

        Raises:
            TemplateParseError: If the template body is malformed
            TemplateExecutionError: If the variables lack a referenced field
                or are not a named-fields structure
        """
        env = _new_environment()
        try:
            ast = env.parse(self._body, name=self._name)
            template = env.from_string(ast)
        except TemplateSyntaxError as e:
            raise TemplateParseError(f"Invalid syntax in template '{self._name}': {e}") from e

        context = _as_context(variables)
        missing = sorted(meta.find_undeclared_variables(ast) - context.keys() - env.globals.keys())
        if missing:
            raise TemplateExecutionError(f"Template '{self._name}' references fields not supplied: {', '.join(missing)}")

        try:
            return template.render(**context)
        except UndefinedError as e:
            raise TemplateExecutionError(f"Undefined variable in template '{self._name}': {e}") from e
        except SecurityError as e:
            raise TemplateExecutionError(f"Sandbox violation in template '{self._name}': {e}") from e


def render_query(template_name: str, template_body: str, variables: Any) -> str:
    """Render a query template in one call. See QueryTemplate.render."""
    return QueryTemplate(template_name, template_body).render(variables)
