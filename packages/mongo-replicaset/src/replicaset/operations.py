"""Caller-facing replica set operations.

Each function takes the caller's connection (a MongoClient or an
AdminSessionPort) and performs one operation with default settings.
Build a ReplicaSetController directly to change settings or attach
metrics.
"""

from __future__ import annotations

from typing import Any, Sequence

from replicaset.adapters.ports import ReadConsistency
from replicaset.controller import ReplicaSetController
from replicaset.domain.members import Config, Member
from replicaset.domain.status import IsMasterResults, Status


def initiate(
    conn: Any, address: str, name: str, tags: dict[str, str] | None = None
) -> None:
    """Bootstrap a one-member replica set named ``name`` at ``address``.

    Raises:
        CommandFailedError: If replSetInitiate was rejected.
        InitiateTimeoutError: If status never listed a member.
    """
    ReplicaSetController(conn).initiate(address, name, tags)


def add(conn: Any, *members: Member) -> None:
    """Add members to the replica set.

    Raises:
        ValidationError: On duplicate addresses or conflicting ids.
    """
    ReplicaSetController(conn).add(*members)


def remove(conn: Any, *addresses: str) -> None:
    """Remove the members with the given addresses."""
    ReplicaSetController(conn).remove(*addresses)


def set_members(conn: Any, members: Sequence[Member]) -> None:
    """Make ``members`` the complete member list.

    Raises:
        ValidationError: On duplicate addresses or conflicting ids.
    """
    ReplicaSetController(conn).set_members(members)


def current_config(
    conn: Any, consistency: ReadConsistency = ReadConsistency.MONOTONIC
) -> Config:
    """Read the current replica set configuration."""
    return ReplicaSetController(conn).current_config(consistency)


def current_members(
    conn: Any, consistency: ReadConsistency = ReadConsistency.MONOTONIC
) -> list[Member]:
    """Read the members of the current configuration."""
    return ReplicaSetController(conn).current_members(consistency)


def current_status(
    conn: Any, consistency: ReadConsistency = ReadConsistency.MONOTONIC
) -> Status:
    """Read the current replica set status."""
    return ReplicaSetController(conn).current_status(consistency)


def is_master(conn: Any) -> IsMasterResults:
    """Run the isMaster handshake on the connected node."""
    return ReplicaSetController(conn).is_master()


def master_host_port(conn: Any) -> str:
    """Get the primary's address.

    Raises:
        MasterNotConfiguredError: If no primary is designated.
    """
    return ReplicaSetController(conn).master_host_port()


def is_ready(conn: Any) -> bool:
    """Check whether a strict majority of members is healthy."""
    return ReplicaSetController(conn).is_ready()


def wait_until_ready(conn: Any, timeout_seconds: int | float) -> None:
    """Block until the replica set is ready.

    Raises:
        ReadinessTimeoutError: If ``timeout_seconds`` elapsed first.
    """
    ReplicaSetController(conn).wait_until_ready(timeout_seconds)


def step_down_primary(conn: Any) -> None:
    """Ask the connected primary to step down for 60 seconds."""
    ReplicaSetController(conn).step_down_primary()
