"""Pytest configuration for replica set core unit tests."""

from typing import Any

import pytest

from replicaset.adapters.fakes import (
    FakeAdminSession,
    FakeMetricsAdapter,
    FakeTimeProvider,
)


def pytest_configure(config: Any) -> None:
    """Register custom markers for unit tests."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


@pytest.fixture
def fake_clock() -> FakeTimeProvider:
    """Clock that only moves when slept on."""
    return FakeTimeProvider()


@pytest.fixture
def fake_metrics() -> FakeMetricsAdapter:
    return FakeMetricsAdapter()


@pytest.fixture
def session() -> FakeAdminSession:
    """An uninitiated fake node at node0:27017."""
    return FakeAdminSession("node0:27017")


@pytest.fixture
def initiated_session(session: FakeAdminSession) -> FakeAdminSession:
    """A fake node holding a one-member config, version 1, named rs0."""
    session.run_command(
        "replSetInitiate",
        {
            "_id": "rs0",
            "version": 1,
            "members": [{"_id": 1, "host": "node0:27017", "tags": {"dc": "a"}}],
        },
    )
    return session
