"""Unit tests for the ReplicaSetController facade and module operations."""

from __future__ import annotations

import pytest
from pymongo import MongoClient

import replicaset
from replicaset.adapters.fakes import (
    FakeAdminSession,
    FakeMetricsAdapter,
    FakeTimeProvider,
)
from replicaset.adapters.ports import ReadConsistency
from replicaset.adapters.pymongo_session import PyMongoSession
from replicaset.controller import ReplicaSetController, as_session
from replicaset.domain.exceptions import (
    MasterNotConfiguredError,
    ReadinessTimeoutError,
)
from replicaset.domain.members import Member
from replicaset.domain.settings import ReplicaSetSettings


@pytest.fixture
def mongo_client():
    client = MongoClient("mongodb://localhost:1", connect=False)
    yield client
    client.close()


@pytest.mark.unit
@pytest.mark.tier(1)
@pytest.mark.tra("Contract.AsSession")
class TestAsSession:
    """Tests for connection coercion."""

    def test_wraps_mongo_client(self, mongo_client) -> None:
        session = as_session(mongo_client)

        assert isinstance(session, PyMongoSession)
        assert session.client is mongo_client

    def test_passes_port_through(self, session: FakeAdminSession) -> None:
        assert as_session(session) is session

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError, match="got str"):
            as_session("mongodb://localhost")


@pytest.mark.unit
@pytest.mark.tier(1)
@pytest.mark.tra("Contract.ReplicaSetController")
class TestReplicaSetController:
    """The facade wires every operation to one session."""

    @pytest.fixture
    def controller(
        self,
        session: FakeAdminSession,
        fake_clock: FakeTimeProvider,
        fake_metrics: FakeMetricsAdapter,
    ) -> ReplicaSetController:
        return ReplicaSetController(
            session,
            settings=ReplicaSetSettings(step_down_seconds=10),
            metrics=fake_metrics,
            time_provider=fake_clock,
        )

    def test_membership_lifecycle(self, controller: ReplicaSetController) -> None:
        controller.initiate("node0:27017", "rs0")
        controller.add(Member("node1:27017"), Member("node2:27017"))
        controller.remove("node2:27017")
        controller.set_members([Member("node0:27017"), Member("node3:27017")])

        config = controller.current_config(ReadConsistency.STRONG)
        assert config.version == 4
        assert [(m.id, m.address) for m in config.members] == [
            (1, "node0:27017"),
            (3, "node3:27017"),
        ]

    def test_readiness(
        self,
        controller: ReplicaSetController,
        session: FakeAdminSession,
        fake_metrics: FakeMetricsAdapter,
    ) -> None:
        controller.initiate("node0:27017", "rs0")
        controller.add(Member("node1:27017"), Member("node2:27017"))

        assert controller.is_ready() is True
        controller.wait_until_ready(0)
        assert fake_metrics.current_healthy_members == 3

        session.set_member_health("node1:27017", False)
        session.set_member_health("node2:27017", False)
        assert controller.is_ready() is False
        with pytest.raises(ReadinessTimeoutError, match="timed out after 3 seconds"):
            controller.wait_until_ready(3)

    def test_status_and_members(self, controller: ReplicaSetController) -> None:
        controller.initiate("node0:27017", "rs0", {"dc": "east"})

        assert [m.tags for m in controller.current_members()] == [{"dc": "east"}]
        assert controller.current_status().healthy_count == 1

    def test_leader_and_step_down(
        self, controller: ReplicaSetController, session: FakeAdminSession
    ) -> None:
        with pytest.raises(MasterNotConfiguredError):
            controller.master_host_port()

        controller.initiate("node0:27017", "rs0")
        controller.add(Member("node1:27017"))
        assert controller.is_master().is_master is True

        controller.step_down_primary()

        assert session.calls_named("replSetStepDown")[0].value == 10
        assert controller.master_host_port() == "node1:27017"

    def test_exposes_session_and_settings(
        self, controller: ReplicaSetController, session: FakeAdminSession
    ) -> None:
        assert controller.session is session
        assert controller.settings.step_down_seconds == 10


@pytest.mark.unit
@pytest.mark.tier(1)
@pytest.mark.tra("Contract.Operations")
class TestOperations:
    """Module-level operations re-exported from the package root."""

    def test_end_to_end_through_package_functions(
        self, session: FakeAdminSession
    ) -> None:
        replicaset.initiate(session, "node0:27017", "rs0", {"foo": "bar"})
        replicaset.add(session, Member("node1:27017"), Member("node2:27017"))
        replicaset.remove(session, "node2:27017")

        members = replicaset.current_members(session, ReadConsistency.STRONG)
        assert [(m.id, m.address) for m in members] == [
            (1, "node0:27017"),
            (2, "node1:27017"),
        ]
        assert replicaset.current_config(session).version == 3
        assert len(replicaset.current_status(session).members) == 2
        assert replicaset.is_ready(session) is True
        replicaset.wait_until_ready(session, 0)
        assert replicaset.is_master(session).replica_set_name == "rs0"
        assert replicaset.master_host_port(session) == "node0:27017"

        replicaset.set_members(session, [Member("node0:27017")])
        assert [m.address for m in replicaset.current_members(session)] == [
            "node0:27017"
        ]

    def test_step_down_primary(self, initiated_session: FakeAdminSession) -> None:
        replicaset.add(initiated_session, Member("node1:27017"))

        replicaset.step_down_primary(initiated_session)

        assert initiated_session.calls_named("replSetStepDown")[0].value == 60
        assert initiated_session.primary == "node1:27017"

    def test_version_exported(self) -> None:
        assert replicaset.__version__ == "0.1.0"
