"""Use cases: Application logic layer."""

from replicaset.usecases.bounded_retry import Attempt, BoundedRetry
from replicaset.usecases.config_reader import ConfigReader
from replicaset.usecases.member_id_allocator import MemberIdAllocator
from replicaset.usecases.reconfiguration_submitter import (
    ReconfigurationSubmitter,
    StatusFetcherProtocol,
)
from replicaset.usecases.readiness_evaluator import ReadinessEvaluator
from replicaset.usecases.readiness_poller import (
    ReadinessCheckerProtocol,
    ReadinessPoller,
)
from replicaset.usecases.leader_discovery import LeaderDiscovery
from replicaset.usecases.step_down_controller import StepDownController
from replicaset.usecases.settings_parser import SettingsParser

__all__ = [
    "Attempt",
    "BoundedRetry",
    "ConfigReader",
    "MemberIdAllocator",
    "ReconfigurationSubmitter",
    "StatusFetcherProtocol",
    "ReadinessEvaluator",
    "ReadinessCheckerProtocol",
    "ReadinessPoller",
    "LeaderDiscovery",
    "StepDownController",
    "SettingsParser",
]
