"""Leader discovery use case."""

from __future__ import annotations

from replicaset.adapters.ports import AdminSessionPort, ReadConsistency
from replicaset.domain.exceptions import MasterNotConfiguredError
from replicaset.domain.status import IsMasterResults


class LeaderDiscovery:
    """Resolves the primary and topology via the isMaster handshake.

    Answers come from whichever node the session is attached to, and
    need no replSetGetStatus privileges.
    """

    def __init__(self, session: AdminSessionPort) -> None:
        """Initialize leader discovery.

        Args:
            session: Caller-owned admin session.
        """
        self._session = session

    def is_master(self) -> IsMasterResults:
        """Run the isMaster handshake.

        Returns:
            Node-local and replica-set-wide facts, addresses normalized.
        """
        reply = self._session.run_command(
            "isMaster", consistency=ReadConsistency.MONOTONIC
        )
        return IsMasterResults.from_document(reply)

    def master_host_port(self) -> str:
        """Get the address of the current primary.

        Returns:
            The primary's host:port.

        Raises:
            MasterNotConfiguredError: If no primary has been designated,
                e.g. on a node that was never initiated.
        """
        results = self.is_master()
        if not results.primary_address:
            raise MasterNotConfiguredError()
        return results.primary_address
