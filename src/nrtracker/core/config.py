# src/nrtracker/core/config.py
"""
Configuration schema and loading for nrtracker.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Two kinds of configuration exist:
- TrackerSettings: endpoints, license key, log level. Loaded from YAML
  and NRTRACKER_* environment variables via load_settings().
- EnvironmentSettings: values the execution environment injects (API key,
  Kubernetes node/namespace/pod names). Captured ONCE via from_environ()
  and passed explicitly; nothing re-reads os.environ per call.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from nrtracker.contracts.errors import ConfigurationError

DEFAULT_METRICS_ENDPOINT = "https://metric-api.newrelic.com/metric/v1"
DEFAULT_LOGS_ENDPOINT = "https://log-api.newrelic.com/log/v1"
DEFAULT_GRAPHQL_ENDPOINT = "https://api.newrelic.com/graphql"

# Environment variable names captured by EnvironmentSettings.from_environ()
API_KEY_ENV = "NEWRELIC_API_KEY"
NODE_NAME_ENV = "NODE_NAME"
NAMESPACE_NAME_ENV = "NAMESPACE_NAME"
POD_NAME_ENV = "POD_NAME"


class EnvironmentSettings(BaseModel):
    """Values sourced from the process environment.

    Empty strings mean "not provided"; the attribute merger skips them.
    """

    model_config = {"frozen": True}

    api_key: str = ""
    node_name: str = ""
    namespace_name: str = ""
    pod_name: str = ""

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "EnvironmentSettings":
        """Capture environment values once.

        Args:
            environ: Mapping to read from (default: os.environ)
        """
        source = os.environ if environ is None else environ
        return cls(
            api_key=source.get(API_KEY_ENV, ""),
            node_name=source.get(NODE_NAME_ENV, ""),
            namespace_name=source.get(NAMESPACE_NAME_ENV, ""),
            pod_name=source.get(POD_NAME_ENV, ""),
        )


class TrackerSettings(BaseModel):
    """Forwarding and query settings.

    Example YAML (license key usually supplied as NRTRACKER_LICENSE_KEY):
        metrics_endpoint: https://metric-api.eu.newrelic.com/metric/v1
        log_level: DEBUG
        common_attributes:
          service.name: my-tracker
    """

    model_config = {"frozen": True}

    license_key: str = Field(default="", description="Ingest license key sent as Api-Key on metrics/logs")
    metrics_endpoint: str = DEFAULT_METRICS_ENDPOINT
    logs_endpoint: str = DEFAULT_LOGS_ENDPOINT
    graphql_endpoint: str = DEFAULT_GRAPHQL_ENDPOINT
    log_level: Literal["DEBUG", "ERROR"] = "ERROR"
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request transport timeout")
    compress_level: int = Field(default=9, ge=1, le=9, description="gzip compression level")
    common_attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept any casing; anything other than DEBUG means ERROR."""
        if isinstance(v, str):
            return "DEBUG" if v.upper() == "DEBUG" else "ERROR"
        return v


def load_settings(config_path: Path) -> TrackerSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (NRTRACKER_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated TrackerSettings instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If configuration fails Pydantic validation
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="NRTRACKER",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; filter its internal settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    try:
        return TrackerSettings(**raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid tracker settings in {config_path}: {e}") from e
