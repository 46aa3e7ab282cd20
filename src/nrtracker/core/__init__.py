# src/nrtracker/core/__init__.py
"""Core infrastructure: configuration, canonical JSON, query templates."""

from nrtracker.core.canonical import canonical_json, canonical_json_bytes
from nrtracker.core.config import EnvironmentSettings, TrackerSettings, load_settings
from nrtracker.core.templates import NRQL_QUERY_TEMPLATE, NrqlQueryVariables, QueryTemplate, render_query

__all__ = [
    "NRQL_QUERY_TEMPLATE",
    "EnvironmentSettings",
    "NrqlQueryVariables",
    "QueryTemplate",
    "TrackerSettings",
    "canonical_json",
    "canonical_json_bytes",
    "load_settings",
    "render_query",
]
