"""Domain exceptions.

Exception hierarchy:
- ReplicaSetError: Base exception for everything raised by this package.
  - ValidationError: A desired member list is malformed. Not retryable.
  - SettingsError: Controller settings or YAML config are invalid.
  - CommandFailedError: The store rejected an administrative command.
    - NotInitiatedError: The replica set has not been initiated yet.
    - AlreadyInitiatedError: replSetInitiate on an initiated node.
  - StoreConnectionError: Transport failure talking to the store.
  - MasterNotConfiguredError: No primary has been designated.
  - ReadinessTimeoutError: WaitUntilReady ran out of time.
  - InitiateTimeoutError: Initiate gave up waiting for status.
  - RetryExhaustedError: A bounded retry ran out of attempts.
"""

from __future__ import annotations


class ReplicaSetError(Exception):
    """Base exception for replica set membership errors."""

    pass


class ValidationError(ReplicaSetError):
    """Raised when a desired member list cannot be submitted.

    Covers duplicate addresses, conflicting explicit member ids and more
    voting members than the store supports. Retrying will not help.
    """

    pass


class SettingsError(ReplicaSetError):
    """Raised when ReplicaSetSettings or their YAML source are invalid."""

    pass


class CommandFailedError(ReplicaSetError):
    """Raised when the store rejects an administrative command.

    Version conflicts from concurrent reconfigurations surface as this
    error, so callers may re-read the config and resubmit.

    Attributes:
        message: Human-readable error description.
        command: Name of the command that failed (optional).
        code: Server error code (optional).
        original_error: The underlying driver exception (optional).
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize CommandFailedError.

        Args:
            message: Human-readable error description.
            command: Name of the command that failed.
            code: Numeric error code reported by the server.
            original_error: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.message = message
        self.command = command
        self.code = code
        self.original_error = original_error


class NotInitiatedError(CommandFailedError):
    """Raised when the node has no replica set configuration yet."""

    pass


class AlreadyInitiatedError(CommandFailedError):
    """Raised when replSetInitiate targets an already initiated node."""

    pass


class StoreConnectionError(ReplicaSetError, ConnectionError):
    """Raised when the connection to the store fails or is dropped.

    Leader elections routinely manifest this way, so it is always
    classified as a connection-class error.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying driver exception (optional).
    """

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class MasterNotConfiguredError(ReplicaSetError):
    """Raised when the replica set has not designated a primary."""

    def __init__(self, message: str = "mongo master not configured") -> None:
        super().__init__(message)


class ReadinessTimeoutError(ReplicaSetError):
    """Raised when a replica set does not become ready in time.

    Attributes:
        timeout_seconds: The budget that was exhausted.
    """

    def __init__(self, timeout_seconds: int | float) -> None:
        super().__init__(f"timed out after {timeout_seconds} seconds")
        self.timeout_seconds = timeout_seconds


class InitiateTimeoutError(ReplicaSetError):
    """Raised when Initiate gives up waiting for the new set's status.

    Attributes:
        attempts: Number of status polls made.
        original_error: The last poll failure, if the last poll failed.
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.original_error = original_error


class InitiateStatusUnavailableError(InitiateTimeoutError):
    """The last status poll after replSetInitiate failed."""

    pass


class InitiateMembersPendingError(InitiateTimeoutError):
    """Status was readable but still listed no members."""

    pass


class RetryExhaustedError(ReplicaSetError):
    """Raised when a bounded retry runs out of attempts or time.

    Attributes:
        description: What was being attempted.
        attempts: Number of attempts made.
        original_error: The error from the final attempt.
    """

    def __init__(
        self,
        description: str,
        attempts: int,
        original_error: Exception,
    ) -> None:
        super().__init__(
            f"{description} failed after {attempts} attempts: {original_error}"
        )
        self.description = description
        self.attempts = attempts
        self.original_error = original_error

