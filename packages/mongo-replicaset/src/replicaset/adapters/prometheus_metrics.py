"""Prometheus metrics adapter for the replica set controller.

Implements MetricsPort using prometheus-client library.
Gracefully handles missing prometheus-client (raises ImportError at init).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prometheus_client import CollectorRegistry, Counter, Gauge


class PrometheusMetricsAdapter:
    """Prometheus implementation of MetricsPort.

    Creates and manages Prometheus collectors for membership changes and
    readiness. All metric names use a configurable prefix (default
    'replicaset_') for namespace clarity.

    This adapter requires prometheus-client to be installed:
        pip install mongo-replicaset[metrics]

    Example:
        >>> adapter = PrometheusMetricsAdapter(prefix="myapp_rs")
        >>> adapter.record_reconfiguration("add", succeeded=True)
        >>> adapter.set_ready(True)  # Sets myapp_rs_ready to 1

    Raises:
        ImportError: If prometheus-client is not installed.
    """

    def __init__(
        self,
        prefix: str = "replicaset",
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize Prometheus collectors.

        Args:
            prefix: Metric name prefix. Defaults to "replicaset".
            registry: Registry to register with. Defaults to the global one.

        Raises:
            ImportError: If prometheus-client is not installed.
        """
        # Import here to make prometheus-client optional
        from prometheus_client import REGISTRY, Counter, Gauge

        registry = registry if registry is not None else REGISTRY

        self._reconfigurations: Counter = Counter(
            f"{prefix}_reconfigurations",
            "Replica set reconfigurations submitted, by operation and outcome",
            ["operation", "outcome"],
            registry=registry,
        )
        self._config_version: Gauge = Gauge(
            f"{prefix}_config_version",
            "Most recently submitted replica set config version",
            registry=registry,
        )
        self._ready: Gauge = Gauge(
            f"{prefix}_ready",
            "Replica set readiness: 1=majority healthy, 0=not ready",
            registry=registry,
        )
        self._healthy_members: Gauge = Gauge(
            f"{prefix}_healthy_members",
            "Healthy members in the last status snapshot",
            registry=registry,
        )

    def record_reconfiguration(self, operation: str, succeeded: bool) -> None:
        """Increment the reconfiguration counter.

        Args:
            operation: Operation label.
            succeeded: Maps to outcome="success" or outcome="failure".
        """
        outcome = "success" if succeeded else "failure"
        self._reconfigurations.labels(operation=operation, outcome=outcome).inc()

    def set_config_version(self, version: int) -> None:
        """Set config version gauge."""
        self._config_version.set(version)

    def set_ready(self, ready: bool) -> None:
        """Set readiness gauge.

        Args:
            ready: True for ready (1), False otherwise (0).
        """
        self._ready.set(1 if ready else 0)

    def set_healthy_members(self, count: int) -> None:
        """Set healthy member count gauge."""
        self._healthy_members.set(count)
