"""Config/Status reader use case.

Issues the two read-only administrative queries and deserializes the
replies into domain value objects.
"""

from __future__ import annotations

from replicaset.adapters.ports import AdminSessionPort, ReadConsistency
from replicaset.domain.members import Config, Member
from replicaset.domain.status import Status


class ConfigReader:
    """Reads the replica set's current configuration and status.

    Consistency is chosen per call. Ordinary polling can use MONOTONIC;
    reading back a configuration that was just written needs STRONG.
    """

    def __init__(self, session: AdminSessionPort) -> None:
        """Initialize the reader.

        Args:
            session: Caller-owned admin session.
        """
        self._session = session

    def current_config(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> Config:
        """Read the current replica set configuration.

        Raises:
            NotInitiatedError: If the replica set has not been initiated.
        """
        reply = self._session.run_command(
            "replSetGetConfig", consistency=consistency
        )
        return Config.from_document(reply["config"])

    def current_members(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> list[Member]:
        """Read the members of the current configuration."""
        return self.current_config(consistency).members

    def current_status(
        self, consistency: ReadConsistency = ReadConsistency.MONOTONIC
    ) -> Status:
        """Read the current replica set status.

        Raises:
            NotInitiatedError: If the replica set has not been initiated.
        """
        reply = self._session.run_command(
            "replSetGetStatus", consistency=consistency
        )
        return Status.from_document(reply)
