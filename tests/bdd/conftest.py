"""Shared fixtures and steps for BDD tests."""

import pytest
from pytest_bdd import given, when, then, parsers

from replicaset.adapters.fakes import FakeAdminSession, FakeTimeProvider
from replicaset.adapters.ports import ReadConsistency
from replicaset.controller import ReplicaSetController
from replicaset.domain.exceptions import ValidationError
from replicaset.domain.members import Member


def parse_addresses(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def parse_members(text: str) -> list[Member]:
    """Parse "host:port" or "host:port#id" entries."""
    members = []
    for entry in parse_addresses(text):
        address, _, member_id = entry.partition("#")
        members.append(Member(address=address, id=int(member_id or 0)))
    return members


@pytest.fixture
def context() -> dict:
    """Shared context for passing state between steps."""
    return {}


@pytest.fixture
def fake_clock() -> FakeTimeProvider:
    """Clock that only moves when slept on."""
    return FakeTimeProvider()


# Given steps

@given(parsers.parse('a freshly started node at "{address}"'))
def fresh_node(address: str, context: dict, fake_clock: FakeTimeProvider):
    """Start an uninitiated in-memory node and a controller bound to it."""
    node = FakeAdminSession(address)
    context["node"] = node
    context["controller"] = ReplicaSetController(node, time_provider=fake_clock)
    context["error"] = None


@given(parsers.parse('replica set "{name}" is initiated at "{address}"'))
def initiated(name: str, address: str, context: dict):
    context["controller"].initiate(address, name)


@given(parsers.parse('I add members "{addresses}"'))
@when(parsers.parse('I add members "{addresses}"'))
def add_members(addresses: str, context: dict):
    context["controller"].add(*parse_members(addresses))


@given(parsers.parse('I remove members "{addresses}"'))
@when(parsers.parse('I remove members "{addresses}"'))
def remove_members(addresses: str, context: dict):
    context["controller"].remove(*parse_addresses(addresses))


@given(parsers.parse('member "{address}" becomes unhealthy'))
@when(parsers.parse('member "{address}" becomes unhealthy'))
def member_unhealthy(address: str, context: dict):
    context["node"].set_member_health(address, False)


# Then steps

@then(parsers.parse("the config version should be {version:d}"))
def config_version_is(version: int, context: dict):
    config = context["controller"].current_config(ReadConsistency.STRONG)
    assert config.version == version


@then(parsers.parse('the member ids should be "{ids}"'))
def member_ids_are(ids: str, context: dict):
    members = context["controller"].current_members(ReadConsistency.STRONG)
    assert [m.id for m in members] == [int(i) for i in parse_addresses(ids)]


@then(parsers.parse('the member addresses should be "{addresses}"'))
def member_addresses_are(addresses: str, context: dict):
    members = context["controller"].current_members(ReadConsistency.STRONG)
    assert [m.address for m in members] == parse_addresses(addresses)


@then(parsers.parse("a {error_name} should be raised"))
def error_raised(error_name: str, context: dict):
    error = context["error"]
    assert error is not None, f"Expected {error_name} but no error was raised"
    assert type(error).__name__ == error_name


# When steps

@when(parsers.parse('I set members "{entries}"'))
def set_members(entries: str, context: dict):
    context["controller"].set_members(parse_members(entries))


@when(parsers.parse('I try to add members "{addresses}"'))
def try_add_members(addresses: str, context: dict):
    try:
        context["controller"].add(*parse_members(addresses))
    except ValidationError as e:
        context["error"] = e
