"""Fake time provider for testing."""

from __future__ import annotations


class FakeTimeProvider:
    """Fake implementation of TimeProvider for testing.

    Time only moves when advanced or slept on, so polling and retry
    loops run instantly and deterministically. Every sleep is recorded.
    """

    def __init__(self, initial_time: float = 0.0) -> None:
        self._time = initial_time
        self.sleep_calls: list[float] = []

    def get_time_seconds(self) -> float:
        return self._time

    def sleep(self, seconds: float) -> None:
        self.sleep_calls.append(seconds)
        self._time += seconds

    def advance(self, seconds: float) -> None:
        """Move the clock forward without recording a sleep."""
        self._time += seconds
