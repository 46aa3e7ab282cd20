"""
nrtracker: Forward metrics and logs to New Relic and run templated NRQL queries.

Metric and log records are batched, serialized to canonical JSON, gzipped
and shipped over HTTP. NRQL queries are rendered from templates, executed
over GraphQL and decoded into typed result rows.
"""

__version__ = "0.1.0"
