"""Domain layer: Entities with zero external dependencies."""

from replicaset.domain.address import normalize_address
from replicaset.domain.exceptions import (
    ReplicaSetError,
    ValidationError,
    SettingsError,
    CommandFailedError,
    NotInitiatedError,
    AlreadyInitiatedError,
    StoreConnectionError,
    MasterNotConfiguredError,
    ReadinessTimeoutError,
    InitiateTimeoutError,
    InitiateStatusUnavailableError,
    InitiateMembersPendingError,
    RetryExhaustedError,
)
from replicaset.domain.members import MAX_PEERS, Config, Member
from replicaset.domain.retry import AttemptStrategy, is_connection_error
from replicaset.domain.settings import ReplicaSetSettings
from replicaset.domain.status import (
    IsMasterResults,
    MemberState,
    MemberStatus,
    Status,
)

__all__ = [
    "normalize_address",
    "ReplicaSetError",
    "ValidationError",
    "SettingsError",
    "CommandFailedError",
    "NotInitiatedError",
    "AlreadyInitiatedError",
    "StoreConnectionError",
    "MasterNotConfiguredError",
    "ReadinessTimeoutError",
    "InitiateTimeoutError",
    "InitiateStatusUnavailableError",
    "InitiateMembersPendingError",
    "RetryExhaustedError",
    "MAX_PEERS",
    "Config",
    "Member",
    "AttemptStrategy",
    "is_connection_error",
    "ReplicaSetSettings",
    "IsMasterResults",
    "MemberState",
    "MemberStatus",
    "Status",
]
