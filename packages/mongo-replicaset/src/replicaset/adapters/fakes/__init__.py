"""Fake adapters for testing."""

from replicaset.adapters.fakes.fake_admin_session import CommandCall, FakeAdminSession
from replicaset.adapters.fakes.fake_metrics import FakeMetricsAdapter, MetricCall
from replicaset.adapters.fakes.fake_time import FakeTimeProvider

__all__ = [
    "CommandCall",
    "FakeAdminSession",
    "FakeMetricsAdapter",
    "MetricCall",
    "FakeTimeProvider",
]
