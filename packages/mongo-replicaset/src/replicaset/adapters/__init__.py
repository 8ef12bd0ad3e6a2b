"""Interface adapters: Store session, time and metrics ports."""

from replicaset.adapters.ports import (
    AdminSessionPort,
    ReadConsistency,
    TimeProvider,
    RealTimeProvider,
)
from replicaset.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter
from replicaset.adapters.pymongo_session import PyMongoSession

__all__ = [
    "AdminSessionPort",
    "ReadConsistency",
    "TimeProvider",
    "RealTimeProvider",
    "MetricsPort",
    "NoOpMetricsAdapter",
    "PyMongoSession",
]
