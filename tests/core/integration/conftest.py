"""Pytest fixtures for replica set integration tests.

Each test gets its own mongod processes started with ``--replSet`` on
free local ports. Tests skip when no ``mongod`` binary is on PATH.
"""

from __future__ import annotations

import shutil
import socket
import subprocess
import time
from pathlib import Path
from typing import Any, Generator

import pytest
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests (requires a mongod binary)"
    )


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class MongodCluster:
    """Manages local mongod processes belonging to one replica set.

    Processes are started uninitiated; tests drive initiation through
    the controller.

    Attributes:
        replica_set: Name passed to ``--replSet``.
        base_dir: Directory holding one dbpath and log per node.
        addresses: host:port of every started node, in start order.
    """

    def __init__(self, replica_set: str, base_dir: Path) -> None:
        self.replica_set = replica_set
        self.base_dir = base_dir
        self.addresses: list[str] = []
        self._processes: list[subprocess.Popen] = []
        self._clients: list[MongoClient] = []

    def start_node(self, timeout: float = 30.0) -> str:
        """Start one mongod and wait until it answers ping.

        Returns:
            The node's host:port.
        """
        port = _free_port()
        dbpath = self.base_dir / f"node{len(self._processes)}"
        dbpath.mkdir(parents=True)
        process = subprocess.Popen(
            [
                "mongod",
                "--replSet",
                self.replica_set,
                "--bind_ip",
                "127.0.0.1",
                "--port",
                str(port),
                "--dbpath",
                str(dbpath),
                "--logpath",
                str(dbpath / "mongod.log"),
            ],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        self._processes.append(process)
        address = f"127.0.0.1:{port}"
        self._wait_for_ping(address, timeout)
        self.addresses.append(address)
        return address

    def client(self, address: str) -> MongoClient:
        """Direct connection to one node, closed on cleanup."""
        host, _, port = address.rpartition(":")
        client: MongoClient = MongoClient(
            host,
            int(port),
            directConnection=True,
            serverSelectionTimeoutMS=5000,
        )
        self._clients.append(client)
        return client

    def _wait_for_ping(self, address: str, timeout: float) -> None:
        deadline = time.monotonic() + timeout
        client = self.client(address)
        while True:
            try:
                client.admin.command("ping")
                return
            except ConnectionFailure:
                if time.monotonic() > deadline:
                    raise
                time.sleep(0.2)

    def cleanup(self) -> None:
        """Close clients and stop every mongod."""
        for client in self._clients:
            client.close()
        for process in self._processes:
            process.terminate()
        for process in self._processes:
            try:
                process.wait(timeout=30)
            except subprocess.TimeoutExpired:
                process.kill()


@pytest.fixture
def skip_if_no_mongod() -> None:
    """Fixture that skips test if no mongod binary is available."""
    if shutil.which("mongod") is None:
        pytest.skip("mongod binary not available")


@pytest.fixture
def cluster(skip_if_no_mongod: None, tmp_path: Path) -> Generator[MongodCluster, None, None]:
    """Provide an empty MongodCluster, torn down after the test."""
    mongod_cluster = MongodCluster("rs0", tmp_path)
    try:
        yield mongod_cluster
    finally:
        mongod_cluster.cleanup()
