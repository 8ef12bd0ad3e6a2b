"""Status and leader-discovery snapshot value objects.

These are point-in-time observations. They are recomputed on every
query and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any

from replicaset.domain.address import normalize_address, normalize_addresses


class MemberState(IntEnum):
    """Replica set member states as reported by replSetGetStatus.

    Only PRIMARY and SECONDARY are interpreted by readiness logic.
    """

    STARTUP = 0
    PRIMARY = 1
    SECONDARY = 2
    RECOVERING = 3
    FATAL = 4
    STARTUP2 = 5
    UNKNOWN = 6
    ARBITER = 7
    DOWN = 8
    ROLLBACK = 9
    REMOVED = 10
    SHUNNED = 10

    @classmethod
    def from_code(cls, code: Any) -> MemberState:
        """Map a server state code to a MemberState, defaulting to UNKNOWN."""
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.UNKNOWN

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MemberStatus:
    """Observation of one member's operational state.

    Attributes:
        id: Member id.
        address: Normalized host:port.
        self: True if this member answered the status query.
        healthy: True if the member is reachable and up.
        state: Replication state.
        uptime: Seconds the member has been up.
        ping_ms: Heartbeat round trip in milliseconds.
        err_msg: Last error or heartbeat message, if any.
    """

    id: int
    address: str = ""
    self: bool = False
    healthy: bool = False
    state: MemberState = MemberState.UNKNOWN
    uptime: int = 0
    ping_ms: int = 0
    err_msg: str = ""

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> MemberStatus:
        """Deserialize one entry of replSetGetStatus ``members``."""
        return cls(
            id=int(doc["_id"]),
            address=normalize_address(doc.get("name", "")),
            self=bool(doc.get("self", False)),
            healthy=doc.get("health") == 1,
            state=MemberState.from_code(doc.get("state")),
            uptime=int(doc.get("uptime", 0)),
            ping_ms=int(doc.get("pingMs", 0)),
            err_msg=doc.get("errmsg") or doc.get("lastHeartbeatMessage") or "",
        )


@dataclass(frozen=True)
class Status:
    """Snapshot of the whole replica set's status.

    Attributes:
        name: Replica set name.
        members: Member observations in server order.
    """

    name: str = ""
    members: list[MemberStatus] = field(default_factory=list)

    @property
    def healthy_count(self) -> int:
        """Number of members reporting healthy."""
        return sum(1 for member in self.members if member.healthy)

    @property
    def has_majority_healthy(self) -> bool:
        """True if strictly more than half of the members are healthy.

        An empty member list never has a healthy majority.
        """
        return self.healthy_count * 2 > len(self.members)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Status:
        """Deserialize a replSetGetStatus reply."""
        return cls(
            name=doc.get("set", ""),
            members=[MemberStatus.from_document(m) for m in doc.get("members", [])],
        )


@dataclass(frozen=True)
class IsMasterResults:
    """Leader discovery snapshot from the isMaster handshake.

    The first group of fields describes the node that answered; the
    second group describes the replica set as that node sees it.

    Attributes:
        is_master: True if the answering node is primary.
        secondary: True if the answering node is a secondary.
        arbiter: True if the answering node is an arbiter.
        address: The answering node's own address.
        local_time: The answering node's clock reading.
        replica_set_name: Name of the replica set.
        addresses: Every data-bearing member address.
        arbiters: Arbiter addresses.
        primary_address: Address of the current primary, or "".
    """

    is_master: bool = False
    secondary: bool = False
    arbiter: bool = False
    address: str = ""
    local_time: datetime | None = None
    replica_set_name: str = ""
    addresses: list[str] = field(default_factory=list)
    arbiters: list[str] = field(default_factory=list)
    primary_address: str = ""

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> IsMasterResults:
        """Deserialize an isMaster (or hello) reply."""
        is_master = doc.get("ismaster", doc.get("isWritablePrimary", False))
        primary = doc.get("primary", "")
        return cls(
            is_master=bool(is_master),
            secondary=bool(doc.get("secondary", False)),
            arbiter=bool(doc.get("arbiterOnly", False)),
            address=normalize_address(doc.get("me", "")),
            local_time=doc.get("localTime"),
            replica_set_name=doc.get("setName", ""),
            addresses=normalize_addresses(doc.get("hosts")),
            arbiters=normalize_addresses(doc.get("arbiters")),
            primary_address=normalize_address(primary) if primary else "",
        )
