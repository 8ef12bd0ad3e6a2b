"""PyMongo-based implementation of the AdminSessionPort.

Runs administrative commands through a caller-owned MongoClient and
translates driver errors into the domain exception hierarchy, keeping
the driver exception as ``original_error`` and as ``__cause__``.
"""

from __future__ import annotations

from typing import Any, Mapping

from pymongo import MongoClient, ReadPreference
from pymongo.errors import (
    ConnectionFailure,
    NotPrimaryError,
    OperationFailure,
    PyMongoError,
)

from replicaset.adapters.ports import ReadConsistency
from replicaset.domain.exceptions import (
    AlreadyInitiatedError,
    CommandFailedError,
    NotInitiatedError,
    StoreConnectionError,
)

# Server error codes with a dedicated domain exception.
_ALREADY_INITIALIZED = 23
_NOT_YET_INITIALIZED = 94

# Replies sent when a node changes state mid-command (InterruptedAtShutdown,
# InterruptedDueToReplStateChange, PrimarySteppedDown, ShutdownInProgress).
# The connection is about to go away, so these count as connection loss.
_STATE_CHANGE_CODES = frozenset({11600, 11602, 189, 91})

_READ_PREFERENCES = {
    ReadConsistency.STRONG: ReadPreference.PRIMARY,
    ReadConsistency.MONOTONIC: ReadPreference.PRIMARY_PREFERRED,
    ReadConsistency.EVENTUAL: ReadPreference.NEAREST,
}


class PyMongoSession:
    """PyMongo adapter for administrative replica set commands.

    Wraps a MongoClient that the caller owns. The client is never closed
    here, and no state is shared between calls beyond the client itself.

    Example:
        >>> client = MongoClient("localhost", 27017, directConnection=True)
        >>> session = PyMongoSession(client)
        >>> session.run_command("replSetGetStatus")
    """

    def __init__(self, client: MongoClient) -> None:  # type: ignore[type-arg]
        """Initialize the session adapter.

        Args:
            client: Connected MongoClient. Ownership stays with the caller.
        """
        self._client = client

    @property
    def client(self) -> MongoClient:  # type: ignore[type-arg]
        """The wrapped MongoClient."""
        return self._client

    def run_command(
        self,
        name: str,
        value: Any = 1,
        *,
        consistency: ReadConsistency = ReadConsistency.STRONG,
    ) -> dict[str, Any]:
        """Run an administrative command against the admin database.

        Args:
            name: Command name.
            value: Command argument.
            consistency: Read consistency for this command only.

        Returns:
            The reply document.

        Raises:
            NotInitiatedError: If the node has no replica set config.
            AlreadyInitiatedError: If replSetInitiate hit an initiated node.
            CommandFailedError: For any other rejection, including a
                "not primary" reply from a secondary.
            StoreConnectionError: If the connection failed.
        """
        try:
            reply = self._client.admin.command(
                name,
                value,
                read_preference=_READ_PREFERENCES[consistency],
            )
        except ConnectionFailure as e:
            # NotPrimaryError is a ConnectionFailure but carries a server reply.
            code = _server_code(e)
            if code not in _STATE_CHANGE_CODES and (
                isinstance(e, NotPrimaryError) or code is not None
            ):
                raise _command_error(name, e, code) from e
            raise StoreConnectionError(
                f"{name} failed: connection unavailable: {e}",
                original_error=e,
            ) from e
        except OperationFailure as e:
            raise _command_error(name, e, e.code) from e
        except PyMongoError as e:
            raise CommandFailedError(
                f"{name} failed: {e}",
                command=name,
                original_error=e,
            ) from e
        return dict(reply)

    def ping(self) -> None:
        """Ping the store.

        Raises:
            StoreConnectionError: If the store is unreachable.
        """
        self.run_command("ping")


def _server_code(error: PyMongoError) -> int | None:
    """Return the server error code carried by a driver error, if any."""
    details = getattr(error, "details", None)
    if isinstance(details, Mapping):
        return details.get("code")
    return None


def _command_error(
    name: str, error: PyMongoError, code: int | None
) -> CommandFailedError:
    """Translate a server rejection into the matching domain error."""
    message = f"{name} failed: {error}"
    if code == _NOT_YET_INITIALIZED:
        return NotInitiatedError(message, command=name, code=code, original_error=error)
    if code == _ALREADY_INITIALIZED:
        return AlreadyInitiatedError(
            message, command=name, code=code, original_error=error
        )
    return CommandFailedError(message, command=name, code=code, original_error=error)
