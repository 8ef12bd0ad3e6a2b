"""Replica set controller settings domain entity."""

from __future__ import annotations

from dataclasses import dataclass, fields

from replicaset.domain.exceptions import SettingsError
from replicaset.domain.retry import AttemptStrategy


@dataclass(frozen=True)
class ReplicaSetSettings:
    """Tuning for the membership controller.

    Value object with zero external dependencies. The defaults suit a
    small replica set on a local network.

    Attributes:
        initiate_attempts: Tries of replSetInitiate while proposed members
                           have not all responded.
        initiate_attempt_delay: Seconds between those tries.
        initiate_status_attempts: Status polls after replSetInitiate.
        initiate_status_delay: Seconds between status polls.
        reconfig_ping_attempts: Pings used to verify the connection after
                                replSetReconfig.
        ready_poll_interval: Seconds between readiness checks.
        step_down_seconds: Minimum time a stepped-down primary stays
                           ineligible for election.
        operation_total: Seconds callers should allow per reconfiguration.
                         Primary renegotiation can take a minute or more.
        operation_delay: Seconds between caller retries.
    """

    initiate_attempts: int = 10
    initiate_attempt_delay: float = 0.1
    initiate_status_attempts: int = 50
    initiate_status_delay: float = 0.5
    reconfig_ping_attempts: int = 2
    ready_poll_interval: float = 1.0
    step_down_seconds: int = 60
    operation_total: float = 120.0
    operation_delay: float = 0.5

    def __post_init__(self) -> None:
        """Validate settings."""
        self._validate_counts()
        self._validate_durations()

    def _validate_counts(self) -> None:
        """Validate attempt counts are at least one."""
        for name in (
            "initiate_attempts",
            "initiate_status_attempts",
            "reconfig_ping_attempts",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise SettingsError(f"{name} must be an integer, got: {value!r}")
            if value < 1:
                raise SettingsError(f"{name} must be at least 1, got: {value}")

    def _validate_durations(self) -> None:
        """Validate durations are non-negative numbers."""
        for name in (
            "initiate_attempt_delay",
            "initiate_status_delay",
            "ready_poll_interval",
            "step_down_seconds",
            "operation_total",
            "operation_delay",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SettingsError(f"{name} must be a number, got: {value!r}")
            if value < 0:
                raise SettingsError(f"{name} cannot be negative, got: {value}")

        if self.ready_poll_interval == 0:
            raise SettingsError("ready_poll_interval must be positive")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Names accepted by the settings parser."""
        return frozenset(f.name for f in fields(cls))

    def operation_strategy(self) -> AttemptStrategy:
        """Recommended caller-side strategy around Add/Remove/Set."""
        return AttemptStrategy(total=self.operation_total, delay=self.operation_delay)
