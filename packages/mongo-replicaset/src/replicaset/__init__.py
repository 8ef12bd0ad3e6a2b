"""mongo-replicaset: Membership and readiness control for MongoDB replica sets."""

__version__ = "0.1.0"

from replicaset.adapters.ports import AdminSessionPort, ReadConsistency
from replicaset.controller import ReplicaSetController, as_session
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
from replicaset.domain.settings import ReplicaSetSettings
from replicaset.domain.status import (
    IsMasterResults,
    MemberState,
    MemberStatus,
    Status,
)
from replicaset.operations import (
    initiate,
    add,
    remove,
    set_members,
    current_config,
    current_members,
    current_status,
    is_master,
    master_host_port,
    is_ready,
    wait_until_ready,
    step_down_primary,
)
from replicaset.usecases.bounded_retry import BoundedRetry
from replicaset.usecases.settings_parser import SettingsParser

__all__ = [
    "AdminSessionPort",
    "ReadConsistency",
    "ReplicaSetController",
    "as_session",
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
    "ReplicaSetSettings",
    "IsMasterResults",
    "MemberState",
    "MemberStatus",
    "Status",
    "initiate",
    "add",
    "remove",
    "set_members",
    "current_config",
    "current_members",
    "current_status",
    "is_master",
    "master_host_port",
    "is_ready",
    "wait_until_ready",
    "step_down_primary",
    "BoundedRetry",
    "SettingsParser",
]
