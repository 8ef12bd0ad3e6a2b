"""Port interfaces for the replica set controller.

Ports define the contracts that adapters must implement.
These are Protocol classes (structural subtyping) for flexible testing.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class ReadConsistency(Enum):
    """Read consistency requested for a single command.

    Attributes:
        STRONG: Read from the primary. Needed to observe a configuration
                that was just written.
        MONOTONIC: Prefer the primary, fall back to a secondary. Good
                   enough for ordinary polling.
        EVENTUAL: Read from the nearest member.
    """

    STRONG = "strong"
    MONOTONIC = "monotonic"
    EVENTUAL = "eventual"


@runtime_checkable
class AdminSessionPort(Protocol):
    """Port interface for issuing administrative commands to the store.

    The session is owned by the caller; the controller never closes it.

    Contract:
        - run_command() runs one command against the admin database and
          returns the reply document
        - Rejected commands raise CommandFailedError (or a subclass)
        - Transport failures raise StoreConnectionError
        - ping() raises StoreConnectionError if the store is unreachable
    """

    def run_command(
        self,
        name: str,
        value: Any = 1,
        *,
        consistency: ReadConsistency = ReadConsistency.STRONG,
    ) -> dict[str, Any]:
        """Run an administrative command.

        Args:
            name: Command name (e.g. "replSetGetStatus").
            value: Command argument (e.g. a config document).
            consistency: Read consistency for this command only.

        Returns:
            The reply document.

        Raises:
            CommandFailedError: If the store rejected the command.
            StoreConnectionError: If the connection failed.
        """
        ...

    def ping(self) -> None:
        """Check that the store is reachable.

        Raises:
            StoreConnectionError: If the connection failed.
        """
        ...


@runtime_checkable
class TimeProvider(Protocol):
    """Port interface for time operations.

    Implementations provide a monotonic clock and sleeping. This
    abstraction enables deterministic testing of polling and retry loops
    through fake implementations.

    Contract:
        - get_time_seconds() returns non-decreasing values
        - sleep(seconds) blocks for at least ``seconds``
    """

    def get_time_seconds(self) -> float:
        """Return the current monotonic time in seconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...


class RealTimeProvider:
    """Default implementation: provides real system time.

    Uses time.monotonic() so elapsed times are immune to clock changes.
    """

    def get_time_seconds(self) -> float:
        """Return current monotonic time in seconds."""
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        """Sleep for the given number of seconds."""
        if seconds > 0:
            time.sleep(seconds)
