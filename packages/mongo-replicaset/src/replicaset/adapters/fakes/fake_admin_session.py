"""Fake admin session for testing.

Provides an in-memory replica set that implements AdminSessionPort,
so use cases can be exercised without a running mongod.
"""

from __future__ import annotations

import copy
from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from replicaset.adapters.ports import ReadConsistency
from replicaset.domain.exceptions import (
    AlreadyInitiatedError,
    CommandFailedError,
    NotInitiatedError,
    StoreConnectionError,
)

# Defaults the server fills into every config member document.
_MEMBER_DEFAULTS = {
    "arbiterOnly": False,
    "buildIndexes": True,
    "hidden": False,
    "priority": 1.0,
    "votes": 1,
    "secondaryDelaySecs": 0,
}

_STATE_NAMES = {1: "PRIMARY", 2: "SECONDARY", 7: "ARBITER", 8: "(not reachable/healthy)"}


@dataclass(frozen=True)
class CommandCall:
    """Record of a single command issued to the fake.

    Attributes:
        name: Command name.
        value: Command argument (deep-copied).
        consistency: Requested read consistency.
    """

    name: str
    value: Any
    consistency: ReadConsistency


class FakeAdminSession:
    """Fake implementation of AdminSessionPort for testing.

    Simulates one mongod node (``address``) attached to a replica set:
    initiate, version-checked reconfiguration, status with per-member
    health, isMaster, and step-down with re-election. Failures can be
    queued per command, and the connection drop that accompanies a new
    primary election can be switched on for reconfig and step-down.

    Example:
        >>> fake = FakeAdminSession("node0:27017")
        >>> fake.run_command("replSetInitiate", {...})
        >>> fake.set_member_health("node1:27017", healthy=False)
        >>> fake.fail_next("replSetGetStatus", StoreConnectionError("reset"))
    """

    def __init__(self, address: str = "localhost:27017") -> None:
        """Initialize an uninitiated node.

        Args:
            address: host:port of the node this session is attached to.
        """
        self.address = address
        self.drop_connection_on_reconfig = False
        self.drop_connection_on_step_down = True
        self._config: dict[str, Any] | None = None
        self._term = 0
        self._primary: str | None = None
        self._health: dict[str, bool] = {}
        self._empty_status_polls = 0
        self._failures: dict[str, deque[Exception]] = defaultdict(deque)
        self._calls: list[CommandCall] = []
        self._handlers: dict[str, Callable[[Any], dict[str, Any]]] = {
            "ping": self._ping,
            "replSetInitiate": self._initiate,
            "replSetGetConfig": self._get_config,
            "replSetGetStatus": self._get_status,
            "replSetReconfig": self._reconfig,
            "isMaster": self._is_master,
            "replSetStepDown": self._step_down,
        }

    # Test controls

    def fail_next(self, command: str, error: Exception, times: int = 1) -> None:
        """Queue an error to raise the next ``times`` runs of ``command``."""
        for _ in range(times):
            self._failures[command].append(error)

    def set_member_health(self, address: str, healthy: bool) -> None:
        """Mark a configured member healthy or unhealthy."""
        self._health[address] = healthy

    def delay_status(self, polls: int) -> None:
        """Report an empty member list for the next ``polls`` status queries."""
        self._empty_status_polls = polls

    @property
    def calls(self) -> list[CommandCall]:
        """Get a copy of every command issued, in order."""
        return list(self._calls)

    def calls_named(self, name: str) -> list[CommandCall]:
        """Get the calls of one command."""
        return [call for call in self._calls if call.name == name]

    @property
    def primary(self) -> str | None:
        """Address of the current primary, or None before initiate."""
        return self._primary

    @property
    def stored_config(self) -> dict[str, Any] | None:
        """Get a copy of the stored config document."""
        return copy.deepcopy(self._config)

    # AdminSessionPort

    def run_command(
        self,
        name: str,
        value: Any = 1,
        *,
        consistency: ReadConsistency = ReadConsistency.STRONG,
    ) -> dict[str, Any]:
        """Run a command against the in-memory replica set."""
        self._calls.append(CommandCall(name, copy.deepcopy(value), consistency))

        if self._failures[name]:
            raise self._failures[name].popleft()

        handler = self._handlers.get(name)
        if handler is None:
            raise CommandFailedError(
                f"no such command: '{name}'", command=name, code=59
            )
        return handler(value)

    def ping(self) -> None:
        """Ping the fake store."""
        self.run_command("ping")

    # Command handlers

    def _ping(self, value: Any) -> dict[str, Any]:
        return {"ok": 1.0}

    def _require_config(self, command: str) -> dict[str, Any]:
        if self._config is None:
            raise NotInitiatedError(
                "no replset config has been received",
                command=command,
                code=94,
            )
        return self._config

    def _validate(self, command: str, doc: dict[str, Any]) -> None:
        members = doc.get("members", [])
        ids = [m["_id"] for m in members]
        hosts = [m["host"] for m in members]
        if len(set(ids)) != len(ids) or len(set(hosts)) != len(hosts):
            raise CommandFailedError(
                "duplicate member _id or host", command=command, code=93
            )
        if self.address not in hosts:
            raise CommandFailedError(
                f"no member config matches this node: {self.address}",
                command=command,
                code=93,
            )

    def _store(self, doc: dict[str, Any]) -> None:
        stored = copy.deepcopy(doc)
        stored["members"] = [
            {**_MEMBER_DEFAULTS, **member} for member in stored.get("members", [])
        ]
        stored.setdefault("protocolVersion", 1)
        stored.pop("term", None)
        self._config = stored
        self._term += 1
        hosts = {m["host"] for m in stored["members"]}
        self._health = {h: self._health.get(h, True) for h in hosts}

    def _initiate(self, doc: dict[str, Any]) -> dict[str, Any]:
        if self._config is not None:
            raise AlreadyInitiatedError(
                "already initialized", command="replSetInitiate", code=23
            )
        self._validate("replSetInitiate", doc)
        self._store(doc)
        self._primary = self.address
        return {"ok": 1.0}

    def _get_config(self, value: Any) -> dict[str, Any]:
        config = copy.deepcopy(self._require_config("replSetGetConfig"))
        config["term"] = self._term
        return {"config": config, "ok": 1.0}

    def _state_of(self, member: dict[str, Any]) -> int:
        host = member["host"]
        if not self._health.get(host, False):
            return 8
        if member.get("arbiterOnly"):
            return 7
        if host == self._primary:
            return 1
        return 2

    def _get_status(self, value: Any) -> dict[str, Any]:
        config = self._require_config("replSetGetStatus")
        if self._empty_status_polls > 0:
            self._empty_status_polls -= 1
            return {"set": config["_id"], "members": [], "ok": 1.0}

        members = []
        for member in config["members"]:
            state = self._state_of(member)
            doc: dict[str, Any] = {
                "_id": member["_id"],
                "name": member["host"],
                "health": 1.0 if self._health.get(member["host"]) else 0.0,
                "state": state,
                "stateStr": _STATE_NAMES[state],
                "uptime": 100,
            }
            if member["host"] == self.address:
                doc["self"] = True
            else:
                doc["pingMs"] = 0
                doc["lastHeartbeatMessage"] = ""
            members.append(doc)
        return {"set": config["_id"], "members": members, "ok": 1.0}

    def _reconfig(self, doc: dict[str, Any]) -> dict[str, Any]:
        current = self._require_config("replSetReconfig")
        if doc.get("_id") != current["_id"]:
            raise CommandFailedError(
                f"replica set name cannot change from {current['_id']}",
                command="replSetReconfig",
                code=103,
            )
        if doc.get("version") != current["version"] + 1:
            raise CommandFailedError(
                f"version field value of {doc.get('version')} is not "
                f"{current['version'] + 1}",
                command="replSetReconfig",
                code=103,
            )
        self._validate("replSetReconfig", doc)
        self._store(doc)
        if self.drop_connection_on_reconfig:
            raise StoreConnectionError("connection closed by peer")
        return {"ok": 1.0}

    def _is_master(self, value: Any) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        if self._config is None:
            return {
                "ismaster": False,
                "secondary": False,
                "isreplicaset": True,
                "localTime": now,
                "ok": 1.0,
            }

        members = self._config["members"]
        arbiters = [m["host"] for m in members if m.get("arbiterOnly")]
        reply: dict[str, Any] = {
            "ismaster": self._primary == self.address,
            "secondary": self._primary != self.address
            and self._health.get(self.address, False),
            "me": self.address,
            "setName": self._config["_id"],
            "hosts": [m["host"] for m in members if not m.get("arbiterOnly")],
            "localTime": now,
            "ok": 1.0,
        }
        if arbiters:
            reply["arbiters"] = arbiters
        if self._primary is not None:
            reply["primary"] = self._primary
        return reply

    def _step_down(self, seconds: Any) -> dict[str, Any]:
        config = self._require_config("replSetStepDown")
        if self._primary != self.address:
            raise CommandFailedError(
                "not primary so can't step down",
                command="replSetStepDown",
                code=10107,
            )
        candidates = [
            m["host"]
            for m in config["members"]
            if m["host"] != self.address
            and not m.get("arbiterOnly")
            and self._health.get(m["host"], False)
        ]
        if not candidates:
            raise CommandFailedError(
                "No electable secondaries caught up",
                command="replSetStepDown",
                code=262,
            )
        self._primary = candidates[0]
        self._term += 1
        if self.drop_connection_on_step_down:
            raise StoreConnectionError("connection closed by peer")
        return {"ok": 1.0}
