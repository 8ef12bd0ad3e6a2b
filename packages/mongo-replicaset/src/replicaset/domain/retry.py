"""Attempt strategy value object and connection-error classification."""

from __future__ import annotations

import errno
from dataclasses import dataclass

from replicaset.domain.exceptions import SettingsError

# errno codes that mean the connection went away rather than the
# command being rejected. Leader elections routinely produce these.
_CONNECTION_ERRNOS = frozenset(
    {
        errno.ECONNABORTED,
        errno.ECONNREFUSED,
        errno.ECONNRESET,
        errno.ENETUNREACH,
        errno.ETIMEDOUT,
    }
)


@dataclass(frozen=True)
class AttemptStrategy:
    """Bounded retry configuration.

    Attempts continue while the next one would start before ``total``
    seconds have elapsed, or while fewer than ``min_attempts`` have been
    made. The first attempt is always made, so a zero total still gets
    one try. ``max_attempts`` caps the count regardless of time.

    Attributes:
        total: Time budget in seconds. Must be non-negative.
        delay: Pause between attempts in seconds. Must be non-negative.
        min_attempts: Attempts made even if the budget is spent.
        max_attempts: Hard cap on attempts, or None for no cap.
    """

    total: float = 0.0
    delay: float = 0.0
    min_attempts: int = 0
    max_attempts: int | None = None

    def __post_init__(self) -> None:
        """Validate attempt strategy configuration."""
        if self.total < 0:
            raise SettingsError("total cannot be negative")
        if self.delay < 0:
            raise SettingsError("delay cannot be negative")
        if self.min_attempts < 0:
            raise SettingsError("min_attempts cannot be negative")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise SettingsError("max_attempts must be at least 1")

    @classmethod
    def fixed(cls, attempts: int, delay: float) -> AttemptStrategy:
        """Strategy making exactly ``attempts`` tries, ``delay`` apart."""
        return cls(delay=delay, min_attempts=attempts, max_attempts=attempts)

    def allows(self, count: int, elapsed: float) -> bool:
        """Decide whether another attempt may start.

        Args:
            count: Attempts made so far.
            elapsed: Seconds since the first attempt started.

        Returns:
            True if attempt number ``count + 1`` may be made.
        """
        if count == 0:
            return True
        if self.max_attempts is not None and count >= self.max_attempts:
            return False
        if count < self.min_attempts:
            return True
        return elapsed + self.delay < self.total


def is_connection_error(error: BaseException | None) -> bool:
    """Determine if an error means the connection is unavailable.

    Connection-class errors are timeouts, resets, refusals and closed
    streams. They are expected while a new primary is being elected.

    Args:
        error: The exception to classify.

    Returns:
        True for connection-class errors, False otherwise.
    """
    if error is None:
        return False

    if isinstance(error, (ConnectionError, TimeoutError, EOFError)):
        return True

    if isinstance(error, OSError) and error.errno is not None:
        return error.errno in _CONNECTION_ERRNOS

    return False
