"""Reconfiguration submitter use case.

Bootstraps a replica set and replaces its membership document. Every
change is a read-modify-write: read the current config, build a complete
replacement with the version bumped by one, and submit it in a single
replSetReconfig. The store rejects a version that does not directly
follow the one it holds.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Protocol, Sequence

from replicaset.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter
from replicaset.adapters.ports import (
    AdminSessionPort,
    ReadConsistency,
    RealTimeProvider,
    TimeProvider,
)
from replicaset.domain.address import normalize_address
from replicaset.domain.exceptions import (
    AlreadyInitiatedError,
    CommandFailedError,
    InitiateMembersPendingError,
    InitiateStatusUnavailableError,
    ReplicaSetError,
    ValidationError,
)
from replicaset.domain.members import MAX_PEERS, Config, Member
from replicaset.domain.retry import AttemptStrategy, is_connection_error
from replicaset.domain.settings import ReplicaSetSettings
from replicaset.domain.status import Status
from replicaset.usecases.bounded_retry import Attempt
from replicaset.usecases.config_reader import ConfigReader
from replicaset.usecases.member_id_allocator import MemberIdAllocator

logger = logging.getLogger(__name__)

# Prefix of the replSetInitiate error returned while proposed members
# have not yet answered the quorum check.
_MEMBERS_UNREACHABLE = "replSetInitiate quorum check failed"


class StatusFetcherProtocol(Protocol):
    """Protocol for reading replica set status."""

    def current_status(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> Status:
        """Read the current status."""
        ...


class ReconfigurationSubmitter:
    """Initiates a replica set and submits membership changes.

    Submitting a new config may force the primary to step down and a new
    one to be elected, which drops the calling connection. That drop is
    absorbed here and the connection is verified with a ping. No other
    retry happens: callers wrap add/remove/set in a BoundedRetry because
    a concurrent reconfiguration, a reconnect after election, or an
    unfinished stabilization can all make one submission fail.

    Dependencies:
        - AdminSessionPort: Caller-owned connection, never closed here.
        - ConfigReader: Reads the config being replaced.
        - StatusFetcherProtocol: Polled by initiate until members appear.
        - MemberIdAllocator: Resolves ids for the submitted members.
        - TimeProvider: Sleeps between initiate attempts.
        - MetricsPort (optional): Counts submissions.
    """

    def __init__(
        self,
        session: AdminSessionPort,
        settings: ReplicaSetSettings | None = None,
        reader: ConfigReader | None = None,
        status_fetcher: StatusFetcherProtocol | None = None,
        allocator: MemberIdAllocator | None = None,
        time_provider: TimeProvider | None = None,
        metrics: MetricsPort | None = None,
    ) -> None:
        """Initialize the submitter.

        Args:
            session: Admin session to issue commands on.
            settings: Attempt counts and delays. Defaults to ReplicaSetSettings().
            reader: Config reader. Defaults to one over ``session``.
            status_fetcher: Status source polled by initiate. Defaults to ``reader``.
            allocator: Member id allocator.
            time_provider: Clock for initiate's polling.
            metrics: Optional port for emitting reconfiguration metrics.
        """
        self._session = session
        self._settings = settings or ReplicaSetSettings()
        self._reader = reader or ConfigReader(session)
        self._status_fetcher = status_fetcher or self._reader
        self._allocator = allocator or MemberIdAllocator()
        self._time = time_provider or RealTimeProvider()
        self._metrics = metrics or NoOpMetricsAdapter()

    def initiate(
        self,
        address: str,
        name: str,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Bootstrap a one-member replica set on an uninitiated node.

        The new member gets id 1, so assigned ids never collide with an
        unset (zero) id. After replSetInitiate, status is polled because
        a freshly initiated node may briefly report no members.

        Args:
            address: This node's host:port, as the other members reach it.
            name: Replica set name. Fixed from now on.
            tags: Tags for the first member.

        Raises:
            CommandFailedError: If replSetInitiate was rejected.
            InitiateStatusUnavailableError: If the last status poll failed.
            InitiateMembersPendingError: If status never listed a member.
        """
        config = Config(
            name=name,
            version=1,
            members=[Member(address=address, id=1, tags=dict(tags or {}))],
        )
        logger.info("Initiating replica set with config %s", _format_config(config))

        self._recorded("initiate", lambda: self._initiate(config))
        self._metrics.set_config_version(config.version)

    def add(self, *members: Member) -> None:
        """Add members to the replica set.

        A member whose address is already configured replaces that entry
        in place and keeps its id, so re-adding a member updates its tags
        and other fields without duplicating it.

        Raises:
            ValidationError: If ``members`` names an address twice.
        """
        additions = _canonical(members)
        self._allocator.check_unique_addresses(additions)

        def change(config: Config) -> list[Member]:
            by_address = {m.address: m for m in additions}
            present = {member.address for member in config.members}
            desired = [by_address.get(m.address, m) for m in config.members]
            desired += [m for m in additions if m.address not in present]
            return self._allocator.allocate(config.members, desired)

        self._change("add", change)

    def remove(self, *addresses: str) -> None:
        """Remove members by address.

        Addresses that are not configured are ignored; the submission
        still happens and still bumps the version.
        """
        targets = {normalize_address(address) for address in addresses}

        def change(config: Config) -> list[Member]:
            return [m for m in config.members if m.address not in targets]

        self._change("remove", change)

    def set(self, members: Sequence[Member]) -> None:
        """Replace the whole member list.

        The current config is read only to keep the ids of members that
        remain. Members left out are dropped.

        Raises:
            ValidationError: If ``members`` is empty or malformed.
        """
        desired = _canonical(members)
        if not desired:
            raise ValidationError("cannot set an empty member list")

        def change(config: Config) -> list[Member]:
            return self._allocator.allocate(config.members, desired)

        self._change("set", change)

    def _change(
        self, operation: str, change: Callable[[Config], list[Member]]
    ) -> None:
        old = self._reader.current_config(ReadConsistency.STRONG)
        new = old.successor(change(old))
        _check_voting_members(new.members)

        logger.debug(
            "%s() changing replica set\nfrom %s\n  to %s",
            operation,
            _format_config(old),
            _format_config(new),
        )
        self._recorded(operation, lambda: self._submit(operation, new))
        self._metrics.set_config_version(new.version)

    def _recorded(self, operation: str, func: Callable[[], None]) -> None:
        try:
            func()
        except Exception:
            self._metrics.record_reconfiguration(operation, succeeded=False)
            raise
        self._metrics.record_reconfiguration(operation, succeeded=True)

    def _submit(self, operation: str, config: Config) -> None:
        try:
            self._session.run_command("replSetReconfig", config.to_document())
        except Exception as e:
            if not is_connection_error(e):
                raise
            # A new primary was negotiated and our connection went with the old one.
            logger.debug(
                "connection lost while running %s(), verifying connection: %s",
                operation,
                e,
            )
        self._verify_connection()

    def _verify_connection(self) -> None:
        last_error: Exception | None = None
        for attempt in range(self._settings.reconfig_ping_attempts):
            if attempt:
                self._time.sleep(self._settings.initiate_attempt_delay)
            try:
                self._session.ping()
                return
            except Exception as e:
                if not is_connection_error(e):
                    raise
                last_error = e
        assert last_error is not None
        raise last_error

    def _initiate(self, config: Config) -> None:
        self._run_initiate_command(config)
        self._wait_for_members()

    def _run_initiate_command(self, config: Config) -> None:
        strategy = AttemptStrategy.fixed(
            self._settings.initiate_attempts, self._settings.initiate_attempt_delay
        )
        attempt = Attempt(strategy, self._time)
        while attempt.next():
            try:
                self._session.run_command(
                    "replSetInitiate",
                    config.to_document(),
                    consistency=ReadConsistency.MONOTONIC,
                )
                return
            except AlreadyInitiatedError as e:
                logger.warning("Initiate: replica set already initiated: %s", e)
                return
            except CommandFailedError as e:
                if _MEMBERS_UNREACHABLE not in str(e) or not attempt.has_next():
                    raise
                logger.debug("Initiate: members not yet reachable, retrying: %s", e)
            except Exception as e:
                if not is_connection_error(e):
                    raise
                # replSetInitiate may still be in progress; status polling decides.
                logger.warning("Initiate: connection lost during replSetInitiate: %s", e)
                return

    def _wait_for_members(self) -> None:
        strategy = AttemptStrategy.fixed(
            self._settings.initiate_status_attempts,
            self._settings.initiate_status_delay,
        )
        attempt = Attempt(strategy, self._time)
        last_error: Exception | None = None

        while attempt.next():
            try:
                status = self._status_fetcher.current_status(ReadConsistency.MONOTONIC)
            except (ReplicaSetError, OSError) as e:
                logger.warning("Initiate: fetching replication status failed: %s", e)
                last_error = e
                continue
            last_error = None
            if status.members:
                return

        if last_error is not None:
            raise InitiateStatusUnavailableError(
                f"replica set status unavailable after {attempt.count} "
                f"attempts: {last_error}",
                attempts=attempt.count,
                original_error=last_error,
            ) from last_error
        raise InitiateMembersPendingError(
            f"replica set status listed no members after {attempt.count} attempts",
            attempts=attempt.count,
        )


def _canonical(members: Sequence[Member]) -> list[Member]:
    """Normalize member addresses so they compare equal to stored ones."""
    return [replace(m, address=normalize_address(m.address)) for m in members]


def _check_voting_members(members: Sequence[Member]) -> None:
    voting = sum(1 for member in members if member.is_voting)
    if voting > MAX_PEERS:
        raise ValidationError(
            f"{voting} voting members exceeds the maximum of {MAX_PEERS}"
        )


def _format_config(config: Config) -> str:
    members = ", ".join(
        f"{{id={m.id} address={m.address} tags={m.tags}}}" for m in config.members
    )
    return f"{{name={config.name} version={config.version} members=[{members}]}}"
