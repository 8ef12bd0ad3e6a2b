"""Readiness poller use case (WaitUntilReady)."""

from __future__ import annotations

from typing import Protocol

from replicaset.adapters.ports import RealTimeProvider, TimeProvider
from replicaset.domain.exceptions import ReadinessTimeoutError
from replicaset.domain.retry import AttemptStrategy
from replicaset.usecases.bounded_retry import Attempt


class ReadinessCheckerProtocol(Protocol):
    """Protocol for readiness checking."""

    def is_ready(self) -> bool:
        """Check whether the replica set is ready."""
        ...


class ReadinessPoller:
    """Waits for a replica set to become ready.

    Polls the readiness checker at a fixed interval. The first poll is
    always made, so a set that is ready immediately succeeds even with a
    zero timeout.
    """

    def __init__(
        self,
        readiness_checker: ReadinessCheckerProtocol,
        time_provider: TimeProvider | None = None,
        interval: float = 1.0,
    ) -> None:
        """Initialize the poller.

        Args:
            readiness_checker: Evaluates readiness once per poll.
            time_provider: Clock for elapsed time and sleeping.
            interval: Seconds between polls.
        """
        self._readiness_checker = readiness_checker
        self._time = time_provider or RealTimeProvider()
        self._interval = interval

    def wait_until_ready(self, timeout_seconds: int | float) -> None:
        """Block until the replica set is ready.

        Args:
            timeout_seconds: Time budget. Zero still allows one poll.

        Raises:
            ReadinessTimeoutError: If the budget ran out first.
            Exception: Any error from the readiness checker, immediately.
        """
        strategy = AttemptStrategy(total=timeout_seconds, delay=self._interval)
        attempt = Attempt(strategy, self._time)
        while attempt.next():
            if self._readiness_checker.is_ready():
                return
        raise ReadinessTimeoutError(timeout_seconds)
