# tests/unit/core/test_config.py
"""Tests for settings models, environment capture and YAML loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nrtracker.contracts.errors import ConfigurationError
from nrtracker.core.config import (
    DEFAULT_GRAPHQL_ENDPOINT,
    DEFAULT_METRICS_ENDPOINT,
    EnvironmentSettings,
    TrackerSettings,
    load_settings,
)


class TestEnvironmentSettings:
    def test_from_environ_reads_known_variables(self) -> None:
        env = EnvironmentSettings.from_environ(
            {
                "NEWRELIC_API_KEY": "NRAK-1",
                "NODE_NAME": "node-a",
                "NAMESPACE_NAME": "ns",
                "POD_NAME": "pod-a",
                "UNRELATED": "ignored",
            }
        )
        assert env == EnvironmentSettings(api_key="NRAK-1", node_name="node-a", namespace_name="ns", pod_name="pod-a")

    def test_missing_variables_are_empty(self) -> None:
        env = EnvironmentSettings.from_environ({})
        assert env.api_key == ""
        assert env.node_name == ""

    def test_from_environ_defaults_to_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEWRELIC_API_KEY", "NRAK-process")
        assert EnvironmentSettings.from_environ().api_key == "NRAK-process"

    def test_captured_values_do_not_follow_later_changes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POD_NAME", "before")
        env = EnvironmentSettings.from_environ()
        monkeypatch.setenv("POD_NAME", "after")
        assert env.pod_name == "before"

    def test_is_frozen(self) -> None:
        env = EnvironmentSettings()
        with pytest.raises(ValidationError):
            env.api_key = "changed"  # type: ignore[misc]


class TestTrackerSettings:
    def test_defaults(self) -> None:
        settings = TrackerSettings()
        assert settings.metrics_endpoint == DEFAULT_METRICS_ENDPOINT
        assert settings.graphql_endpoint == DEFAULT_GRAPHQL_ENDPOINT
        assert settings.timeout_seconds == 30.0
        assert settings.log_level == "ERROR"

    @pytest.mark.parametrize(("given", "expected"), [("debug", "DEBUG"), ("DEBUG", "DEBUG"), ("info", "ERROR"), ("ERROR", "ERROR")])
    def test_log_level_normalized(self, given: str, expected: str) -> None:
        assert TrackerSettings(log_level=given).log_level == expected  # type: ignore[arg-type]

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TrackerSettings(timeout_seconds=0)

    def test_compress_level_bounds(self) -> None:
        with pytest.raises(ValidationError):
            TrackerSettings(compress_level=10)


class TestLoadSettings:
    def test_loads_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "tracker.yaml"
        config.write_text(
            "license_key: from-file\nlog_level: DEBUG\ncommon_attributes:\n  team: platform\n",
            encoding="utf-8",
        )
        settings = load_settings(config)
        assert settings.license_key == "from-file"
        assert settings.log_level == "DEBUG"
        assert settings.common_attributes == {"team": "platform"}

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "tracker.yaml"
        config.write_text("license_key: from-file\n", encoding="utf-8")
        monkeypatch.setenv("NRTRACKER_LICENSE_KEY", "from-env")
        assert load_settings(config).license_key == "from-env"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.yaml")

    def test_invalid_values_raise_configuration_error(self, tmp_path: Path) -> None:
        config = tmp_path / "tracker.yaml"
        config.write_text("timeout_seconds: -5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            load_settings(config)
