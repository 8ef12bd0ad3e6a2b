"""Member and Config domain value objects.

A Config is the replica set's membership document. It is never patched:
every Add/Remove/Set builds a complete replacement with the version
bumped by one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from replicaset.domain.address import normalize_address
from replicaset.domain.exceptions import ValidationError

# Maximum number of voting members a replica set supports.
MAX_PEERS = 7

# Optional member attributes passed through to the store untouched,
# keyed by document field name.
_MEMBER_OPTIONS = {
    "arbiterOnly": "arbiter",
    "buildIndexes": "build_indexes",
    "hidden": "hidden",
    "priority": "priority",
    "votes": "votes",
    "secondaryDelaySecs": "secondary_delay_secs",
}

# Config fields owned by the server that must not be resubmitted.
_SERVER_OWNED_CONFIG_FIELDS = frozenset({"term"})


@dataclass(frozen=True)
class Member:
    """A desired or actual participant in the replica set.

    Attributes:
        address: host:port of the member. Must be non-empty.
        id: Member id, unique within a Config. 0 means "assign one".
        tags: Arbitrary string metadata.
        arbiter: Whether the member is an arbiter (pass-through).
        build_indexes: Whether the member builds indexes (pass-through).
        hidden: Whether the member is hidden (pass-through).
        priority: Election priority (pass-through).
        votes: Number of votes, 0 or 1 (pass-through).
        secondary_delay_secs: Replication delay (pass-through).
    """

    address: str
    id: int = 0
    tags: dict[str, str] = field(default_factory=dict)
    arbiter: bool | None = None
    build_indexes: bool | None = None
    hidden: bool | None = None
    priority: float | None = None
    votes: int | None = None
    secondary_delay_secs: int | None = None

    def __post_init__(self) -> None:
        """Validate member fields."""
        self._validate_address()
        self._validate_id()

    def _validate_address(self) -> None:
        """Validate address is non-empty and not whitespace-only."""
        if not self.address or not self.address.strip():
            raise ValidationError("member address cannot be empty")

    def _validate_id(self) -> None:
        """Validate id is non-negative."""
        if self.id < 0:
            raise ValidationError(f"member id cannot be negative, got: {self.id}")

    @property
    def is_voting(self) -> bool:
        """True unless the member was explicitly given zero votes."""
        return self.votes is None or self.votes > 0

    def with_id(self, member_id: int) -> Member:
        """Return a copy of this member carrying the given id."""
        return replace(self, id=member_id)

    def to_document(self) -> dict[str, Any]:
        """Serialize to a replica set config member document."""
        doc: dict[str, Any] = {"_id": self.id, "host": self.address}
        if self.tags:
            doc["tags"] = dict(self.tags)
        for key, attr in _MEMBER_OPTIONS.items():
            value = getattr(self, attr)
            if value is not None:
                doc[key] = value
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Member:
        """Deserialize a config member document, normalizing its address."""
        options = {
            attr: doc[key] for key, attr in _MEMBER_OPTIONS.items() if key in doc
        }
        return cls(
            address=normalize_address(doc["host"]),
            id=int(doc["_id"]),
            tags=dict(doc.get("tags") or {}),
            **options,
        )


@dataclass(frozen=True)
class Config:
    """The replica set's current membership document.

    Attributes:
        name: Replica set name, fixed at initiate time.
        version: Monotonic version, bumped by exactly one per reconfig.
        members: Members in server order. Order carries no meaning.
        options: Other top-level config fields, carried through unchanged.
    """

    name: str
    version: int
    members: list[Member] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)

    def successor(self, members: list[Member]) -> Config:
        """Build the replacement config for a reconfiguration.

        Args:
            members: The complete, id-resolved member list to submit.

        Returns:
            A Config with the same name and options, version + 1.
        """
        return Config(
            name=self.name,
            version=self.version + 1,
            members=list(members),
            options=dict(self.options),
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to a replica set config document."""
        doc: dict[str, Any] = {
            "_id": self.name,
            "version": self.version,
            "members": [member.to_document() for member in self.members],
        }
        doc.update(self.options)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Config:
        """Deserialize a replica set config document."""
        options = {
            key: value
            for key, value in doc.items()
            if key not in ("_id", "version", "members")
            and key not in _SERVER_OWNED_CONFIG_FIELDS
        }
        return cls(
            name=doc["_id"],
            version=int(doc["version"]),
            members=[Member.from_document(m) for m in doc.get("members", [])],
            options=options,
        )
