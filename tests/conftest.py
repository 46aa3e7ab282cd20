# tests/conftest.py
"""Shared test fixtures and helpers.

Test Doubles:
- RecordingSink: DiagnosticSink that records every emission, so tests can
  assert on message tags and attributes.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest
import respx
from hypothesis import Phase, Verbosity, settings

from nrtracker.core.config import EnvironmentSettings, TrackerSettings

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass(frozen=True)
class Emission:
    """One recorded diagnostic."""

    level: int
    message: str
    attributes: dict[str, str]


@dataclass
class RecordingSink:
    """DiagnosticSink that keeps every emission in order."""

    emissions: list[Emission] = field(default_factory=list)

    def log_with_fields(self, level: int, message: str, attributes: Mapping[str, str]) -> None:
        self.emissions.append(Emission(level, message, dict(attributes)))

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.emissions]

    def find(self, message: str) -> Emission:
        """Return the first emission with this tag, failing the test if absent."""
        for emission in self.emissions:
            if emission.message == message:
                return emission
        raise AssertionError(f"no emission {message!r}, got {self.messages}")


@pytest.fixture(autouse=True)
def _isolate_respx_global_router():
    """Drop routes left on respx's global router so they cannot leak across tests."""
    yield
    respx.mock.clear()
    respx.mock.reset()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def environment() -> EnvironmentSettings:
    """Environment as seen inside a Kubernetes pod."""
    return EnvironmentSettings(
        api_key="NRAK-test",
        node_name="node-1",
        namespace_name="monitoring",
        pod_name="tracker-0",
    )


@pytest.fixture
def tracker_settings() -> TrackerSettings:
    return TrackerSettings(
        license_key="license-123",
        metrics_endpoint="https://metrics.example.com/metric/v1",
        logs_endpoint="https://logs.example.com/log/v1",
        graphql_endpoint="https://api.example.com/graphql",
        common_attributes={"service.name": "tracker"},
    )


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
