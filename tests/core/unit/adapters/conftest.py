"""Pytest configuration for core adapter unit tests."""

from __future__ import annotations

from typing import Any

import pytest


class FakeAdminDatabase:
    """Stands in for ``MongoClient.admin``.

    Records every command() call and answers from a queue of replies or
    exceptions.
    """

    def __init__(self) -> None:
        self.commands: list[tuple[str, Any, Any]] = []
        self._responses: list[dict[str, Any] | Exception] = []

    def respond(self, response: dict[str, Any] | Exception) -> None:
        self._responses.append(response)

    def command(self, name: str, value: Any = 1, **kwargs: Any) -> dict[str, Any]:
        self.commands.append((name, value, kwargs.get("read_preference")))
        response = self._responses.pop(0) if self._responses else {"ok": 1.0}
        if isinstance(response, Exception):
            raise response
        return response


class FakeMongoClient:
    """Minimal client exposing an ``admin`` database."""

    def __init__(self) -> None:
        self.admin = FakeAdminDatabase()


@pytest.fixture
def fake_client() -> FakeMongoClient:
    """Provide a FakeMongoClient for PyMongoSession tests.

    Example:
        def test_ping(fake_client):
            fake_client.admin.respond(AutoReconnect("reset"))
    """
    return FakeMongoClient()
