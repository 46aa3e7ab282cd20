# src/nrtracker/graphql/__init__.py
"""Templated NRQL queries over GraphQL: execution and typed result extraction."""

from nrtracker.graphql.executor import GraphQlExecutor
from nrtracker.graphql.extract import ResultExtractor, fetch

__all__ = [
    "GraphQlExecutor",
    "ResultExtractor",
    "fetch",
]
