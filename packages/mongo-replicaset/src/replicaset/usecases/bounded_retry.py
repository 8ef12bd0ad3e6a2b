"""Bounded retry poller use case.

Drives repeated attempts under an AttemptStrategy. Used by Initiate's
status polling, by WaitUntilReady, and by callers wrapping Add, Remove
and Set, since a reconfiguration can be rejected or disconnected while
the set renegotiates its primary.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from replicaset.adapters.ports import RealTimeProvider, TimeProvider
from replicaset.domain.exceptions import RetryExhaustedError, ValidationError
from replicaset.domain.retry import AttemptStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Attempt:
    """One run through an AttemptStrategy.

    Usage::

        attempt = Attempt(strategy, time_provider)
        while attempt.next():
            if try_something():
                break

    next() sleeps ``strategy.delay`` before every attempt but the first.
    """

    def __init__(
        self,
        strategy: AttemptStrategy,
        time_provider: TimeProvider | None = None,
    ) -> None:
        self._strategy = strategy
        self._time = time_provider or RealTimeProvider()
        self._start: float | None = None
        self._count = 0

    @property
    def count(self) -> int:
        """Number of attempts started so far."""
        return self._count

    def _elapsed(self) -> float:
        if self._start is None:
            return 0.0
        return self._time.get_time_seconds() - self._start

    def has_next(self) -> bool:
        """True if another attempt would be allowed."""
        return self._strategy.allows(self._count, self._elapsed())

    def next(self) -> bool:
        """Start the next attempt if the strategy allows it.

        Returns:
            True if an attempt was started, False when exhausted.
        """
        if self._start is None:
            self._start = self._time.get_time_seconds()

        if not self.has_next():
            return False

        if self._count > 0:
            self._time.sleep(self._strategy.delay)

        self._count += 1
        return True


class BoundedRetry:
    """Runs a callable until it succeeds or the strategy is exhausted.

    Every failure is retried except ValidationError, which no amount of
    retrying fixes. When attempts run out, RetryExhaustedError is raised
    chained to the final failure so callers can tell root cause from
    exhaustion.

    Example:
        >>> retry = BoundedRetry(settings.operation_strategy())
        >>> retry.run(lambda: replicaset.add(client, member), "add")
    """

    def __init__(
        self,
        strategy: AttemptStrategy,
        time_provider: TimeProvider | None = None,
    ) -> None:
        """Initialize the retry driver.

        Args:
            strategy: Time budget, delay and attempt bounds.
            time_provider: Clock used for elapsed time and sleeping.
        """
        self._strategy = strategy
        self._time = time_provider or RealTimeProvider()

    def run(self, func: Callable[[], T], description: str) -> T:
        """Call ``func`` until it returns without raising.

        Args:
            func: The operation to attempt.
            description: Label for log messages and errors.

        Returns:
            Whatever ``func`` returned on the successful attempt.

        Raises:
            ValidationError: Immediately, if ``func`` raises one.
            RetryExhaustedError: If every allowed attempt failed.
        """
        attempt = Attempt(self._strategy, self._time)
        started = self._time.get_time_seconds()
        last_error: Exception | None = None

        while attempt.next():
            try:
                result = func()
            except ValidationError:
                raise
            except Exception as e:
                last_error = e
                logger.debug("%s failed: %s", description, e)
                continue

            logger.debug(
                "%s: %d attempts in %.1fs",
                description,
                attempt.count,
                self._time.get_time_seconds() - started,
            )
            return result

        assert last_error is not None
        logger.warning(
            "%s: giving up after %d attempts: %s",
            description,
            attempt.count,
            last_error,
        )
        raise RetryExhaustedError(description, attempt.count, last_error) from last_error
