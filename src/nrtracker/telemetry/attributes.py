# src/nrtracker/telemetry/attributes.py
"""Common-attribute merging.

Fixed attributes are applied after the caller's so they can never be
overridden: every record carries a trustworthy provider and, when running
in Kubernetes, the node/namespace/pod it came from.
"""

from collections.abc import Mapping

from nrtracker.core.config import EnvironmentSettings

DEFAULT_PROVIDER = "nrtracker"

PROVIDER_KEY = "instrumentation.provider"
NODE_NAME_KEY = "nodeName"
NAMESPACE_NAME_KEY = "namespaceName"
POD_NAME_KEY = "podName"


class AttributeMerger:
    """Merge caller attributes with fixed environment-derived attributes.

    Pure function of its inputs plus the environment captured at construction.

    Example:
        merger = AttributeMerger(EnvironmentSettings.from_environ())
        common = merger.merge({"service.name": "tracker"})
    """

    def __init__(self, environment: EnvironmentSettings, provider: str = DEFAULT_PROVIDER) -> None:
        fixed = {PROVIDER_KEY: provider}
        if environment.node_name:
            fixed[NODE_NAME_KEY] = environment.node_name
        if environment.namespace_name:
            fixed[NAMESPACE_NAME_KEY] = environment.namespace_name
        if environment.pod_name:
            fixed[POD_NAME_KEY] = environment.pod_name
        self._fixed = fixed

    @property
    def fixed_attributes(self) -> dict[str, str]:
        """Copy of the attributes that always win."""
        return dict(self._fixed)

    def merge(self, caller_attributes: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return a fresh mapping of caller attributes overlaid with the fixed ones."""
        merged = dict(caller_attributes or {})
        merged.update(self._fixed)
        return merged
