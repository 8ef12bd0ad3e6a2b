"""Port interface and no-op implementation for metrics collection.

Metrics ports follow fire-and-forget semantics: implementations may
buffer, sample, or drop metrics as needed. No exceptions should propagate.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsPort(Protocol):
    """Port interface for metrics collection.

    Implementations handle metrics recording to various backends
    (Prometheus, StatsD, etc.). Abstracts the metrics mechanism from
    use cases that need to emit metrics.

    Contract:
        - All methods are fire-and-forget (no return value, no exceptions)
        - record_* methods increment counters
        - set_* methods update gauges to specific values
        - Implementations may no-op if metrics are disabled
    """

    def record_reconfiguration(self, operation: str, succeeded: bool) -> None:
        """Count one reconfiguration submission.

        Args:
            operation: "initiate", "add", "remove" or "set".
            succeeded: Whether the store accepted the new config.
        """
        ...

    def set_config_version(self, version: int) -> None:
        """Set the gauge for the most recently submitted config version."""
        ...

    def set_ready(self, ready: bool) -> None:
        """Set the readiness gauge (1 ready, 0 not ready)."""
        ...

    def set_healthy_members(self, count: int) -> None:
        """Set the gauge counting healthy members in the last status."""
        ...


class NoOpMetricsAdapter:
    """No-operation metrics adapter for when metrics are disabled.

    All methods are no-ops. This allows use cases to unconditionally
    call metrics methods without checking if metrics are enabled.
    """

    def record_reconfiguration(self, operation: str, succeeded: bool) -> None:
        """No-op."""
        pass

    def set_config_version(self, version: int) -> None:
        """No-op."""
        pass

    def set_ready(self, ready: bool) -> None:
        """No-op."""
        pass

    def set_healthy_members(self, count: int) -> None:
        """No-op."""
        pass
