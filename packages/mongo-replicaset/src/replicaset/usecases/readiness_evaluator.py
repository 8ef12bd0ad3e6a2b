"""Readiness evaluator use case for determining replica set readiness."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from replicaset.domain.retry import is_connection_error
from replicaset.usecases.reconfiguration_submitter import StatusFetcherProtocol

if TYPE_CHECKING:
    from replicaset.adapters.metrics_port import MetricsPort

logger = logging.getLogger(__name__)


class ReadinessEvaluator:
    """Decides whether the replica set has a healthy majority.

    The set is ready when strictly more than half of its members report
    healthy. A single-member set is ready iff that member is healthy; an
    empty set is never ready.

    Connection-class failures while fetching status (timeouts, resets,
    refusals, closed streams) mean "not ready" rather than an error,
    because they are what a leader election in progress looks like. Any
    other failure propagates unchanged.
    """

    def __init__(
        self,
        status_fetcher: StatusFetcherProtocol,
        metrics: MetricsPort | None = None,
    ) -> None:
        """Initialize the readiness evaluator.

        Args:
            status_fetcher: Source of status snapshots.
            metrics: Optional port for emitting readiness metrics.
        """
        self._status_fetcher = status_fetcher
        self._metrics = metrics

    def is_ready(self) -> bool:
        """Check if a majority of members is healthy.

        Returns:
            True if strictly more than half of the members are healthy.
            False if not, or if the connection is currently unavailable.

        Raises:
            Exception: Any non-connection failure from the status fetcher,
                unchanged.
        """
        try:
            status = self._status_fetcher.current_status()
        except Exception as e:
            if not is_connection_error(e):
                raise
            logger.debug("replica set status unavailable, not ready: %s", e)
            if self._metrics is not None:
                self._metrics.set_ready(False)
            return False

        ready = status.has_majority_healthy

        if self._metrics is not None:
            self._metrics.set_healthy_members(status.healthy_count)
            self._metrics.set_ready(ready)

        return ready
