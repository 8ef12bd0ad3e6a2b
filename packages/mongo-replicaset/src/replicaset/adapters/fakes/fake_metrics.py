"""Fake metrics adapter for testing.

Provides a test double for MetricsPort that records all metric updates
for assertion in tests.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MetricCall:
    """Record of a single metric update.

    Attributes:
        metric_name: Name of the metric that was updated.
        value: Value that was set or recorded.
    """

    metric_name: str
    value: float | int | bool | str | tuple[str, bool]


class FakeMetricsAdapter:
    """Fake implementation of MetricsPort for testing.

    Records all metric updates for later assertion. Provides methods
    to inspect current state and call history.

    Example:
        >>> fake = FakeMetricsAdapter()
        >>> fake.set_ready(True)
        >>> fake.current_ready
        True
        >>> fake.calls
        [MetricCall(metric_name='ready', value=True)]
    """

    def __init__(self) -> None:
        """Initialize with no recorded state."""
        self._reconfigurations: list[tuple[str, bool]] = []
        self._config_version: int | None = None
        self._ready: bool | None = None
        self._healthy_members: int | None = None
        self._calls: list[MetricCall] = []

    @property
    def calls(self) -> list[MetricCall]:
        """Get a copy of all recorded metric calls."""
        return list(self._calls)

    @property
    def reconfigurations(self) -> list[tuple[str, bool]]:
        """Get (operation, succeeded) for every recorded reconfiguration."""
        return list(self._reconfigurations)

    @property
    def current_config_version(self) -> int | None:
        """Get the most recently set config version, or None."""
        return self._config_version

    @property
    def current_ready(self) -> bool | None:
        """Get the most recently set readiness, or None."""
        return self._ready

    @property
    def current_healthy_members(self) -> int | None:
        """Get the most recently set healthy member count, or None."""
        return self._healthy_members

    def record_reconfiguration(self, operation: str, succeeded: bool) -> None:
        """Record a reconfiguration."""
        self._reconfigurations.append((operation, succeeded))
        self._calls.append(MetricCall("reconfiguration", (operation, succeeded)))

    def set_config_version(self, version: int) -> None:
        """Record config version."""
        self._config_version = version
        self._calls.append(MetricCall("config_version", version))

    def set_ready(self, ready: bool) -> None:
        """Record readiness."""
        self._ready = ready
        self._calls.append(MetricCall("ready", ready))

    def set_healthy_members(self, count: int) -> None:
        """Record healthy member count."""
        self._healthy_members = count
        self._calls.append(MetricCall("healthy_members", count))

    def reset(self) -> None:
        """Clear all recorded state and calls."""
        self._reconfigurations.clear()
        self._config_version = None
        self._ready = None
        self._healthy_members = None
        self._calls.clear()
