"""Replica set controller facade.

Composes the use cases over one caller-owned connection. Each public
method is a single operation; nothing is cached between calls.
"""

from __future__ import annotations

from typing import Any, Sequence

from pymongo import MongoClient

from replicaset.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter
from replicaset.adapters.ports import (
    AdminSessionPort,
    ReadConsistency,
    RealTimeProvider,
    TimeProvider,
)
from replicaset.adapters.pymongo_session import PyMongoSession
from replicaset.domain.members import Config, Member
from replicaset.domain.settings import ReplicaSetSettings
from replicaset.domain.status import IsMasterResults, Status
from replicaset.usecases.config_reader import ConfigReader
from replicaset.usecases.leader_discovery import LeaderDiscovery
from replicaset.usecases.readiness_evaluator import ReadinessEvaluator
from replicaset.usecases.readiness_poller import ReadinessPoller
from replicaset.usecases.reconfiguration_submitter import ReconfigurationSubmitter
from replicaset.usecases.step_down_controller import StepDownController


def as_session(conn: Any) -> AdminSessionPort:
    """Coerce a connection into an AdminSessionPort.

    Args:
        conn: A MongoClient or anything implementing AdminSessionPort.

    Raises:
        TypeError: If ``conn`` is neither.
    """
    # MongoClient answers every attribute lookup with a Database, so it
    # satisfies the runtime protocol check; test for it first.
    if isinstance(conn, MongoClient):
        return PyMongoSession(conn)
    if isinstance(conn, AdminSessionPort):
        return conn
    raise TypeError(
        f"expected a MongoClient or AdminSessionPort, got {type(conn).__name__}"
    )


class ReplicaSetController:
    """Membership and readiness controller for one replica set connection.

    The connection stays owned by the caller and is never closed here.

    Example:
        >>> client = MongoClient("10.0.0.1", 27017, directConnection=True)
        >>> controller = ReplicaSetController(client)
        >>> controller.initiate("10.0.0.1:27017", "rs0")
        >>> controller.add(Member(address="10.0.0.2:27017"))
        >>> controller.wait_until_ready(60)
    """

    def __init__(
        self,
        conn: Any,
        settings: ReplicaSetSettings | None = None,
        metrics: MetricsPort | None = None,
        time_provider: TimeProvider | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            conn: MongoClient or AdminSessionPort implementation.
            settings: Attempt counts and delays.
            metrics: Optional metrics port.
            time_provider: Clock for polling loops.
        """
        self._session = as_session(conn)
        self._settings = settings or ReplicaSetSettings()
        self._metrics = metrics or NoOpMetricsAdapter()
        self._time = time_provider or RealTimeProvider()

        self._reader = ConfigReader(self._session)
        self._submitter = ReconfigurationSubmitter(
            self._session,
            settings=self._settings,
            reader=self._reader,
            time_provider=self._time,
            metrics=self._metrics,
        )
        self._evaluator = ReadinessEvaluator(self._reader, metrics=self._metrics)
        self._poller = ReadinessPoller(
            self._evaluator,
            time_provider=self._time,
            interval=self._settings.ready_poll_interval,
        )
        self._leader = LeaderDiscovery(self._session)
        self._step_down = StepDownController(
            self._session, step_down_seconds=self._settings.step_down_seconds
        )

    @property
    def session(self) -> AdminSessionPort:
        """The admin session commands are issued on."""
        return self._session

    @property
    def settings(self) -> ReplicaSetSettings:
        """The controller settings."""
        return self._settings

    def initiate(
        self, address: str, name: str, tags: dict[str, str] | None = None
    ) -> None:
        """Bootstrap a one-member replica set. See ReconfigurationSubmitter.initiate."""
        self._submitter.initiate(address, name, tags)

    def add(self, *members: Member) -> None:
        """Add members, keeping the ids of those already configured."""
        self._submitter.add(*members)

    def remove(self, *addresses: str) -> None:
        """Remove members by address."""
        self._submitter.remove(*addresses)

    def set_members(self, members: Sequence[Member]) -> None:
        """Replace the member list."""
        self._submitter.set(members)

    def current_config(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> Config:
        return self._reader.current_config(consistency)

    def current_members(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> list[Member]:
        return self._reader.current_members(consistency)

    def current_status(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> Status:
        return self._reader.current_status(consistency)

    def is_master(self) -> IsMasterResults:
        return self._leader.is_master()

    def master_host_port(self) -> str:
        return self._leader.master_host_port()

    def is_ready(self) -> bool:
        """True if a strict majority of members is healthy."""
        return self._evaluator.is_ready()

    def wait_until_ready(self, timeout_seconds: int | float) -> None:
        """Block until ready or raise ReadinessTimeoutError."""
        self._poller.wait_until_ready(timeout_seconds)

    def step_down_primary(self) -> None:
        """Ask the primary to step down. The connection may be severed."""
        self._step_down.step_down_primary()
