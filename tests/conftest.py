"""
Root conftest.py for the mongo-replicaset test suite.

Pytest plugin that enforces TRA (Test Responsibility Architecture) and Tier markers.
- Reports tests missing a TRA marker or tier marker
- Enforces tier timeouts when pytest-timeout is installed

Usage:
    @pytest.mark.tier(1)
    @pytest.mark.tra("Domain.Invariant.MemberIdsUnique")
    def test_something():
        ...

Configuration:
    TRA_ENFORCE / TIER_ENFORCE: "warn" (default) prints problems,
    "1" fails collection, "0" disables the check.
    TIER_TIMEOUT_MULTIPLIER scales tier timeouts (default 1.0).
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.nodes import Item


VALID_TRA_PREFIXES = (
    "Domain.Invariant.",
    "Domain.Policy.",
    "UseCase.",
    "Port.",
    "Adapter.",
    "Contract.",
)

# Seconds per tier; 0 means no limit.
TIER_TIMEOUTS: dict[int, float] = {
    0: 0.1,
    1: 2.0,
    2: 30.0,
    3: 300.0,
    4: 0,
}


def pytest_configure(config: Config) -> None:
    """Register custom markers for TRA and Tier enforcement."""
    for line in (
        "tra(anchor): Test Responsibility Anchor naming the single responsibility "
        "a test protects. Must start with one of: " + ", ".join(VALID_TRA_PREFIXES),
        "tier(level): Test tier (0=instant, 1=fast, 2=standard, 3=slow, 4=manual).",
        "unit: Unit tests (fast, no mongod process)",
        "integration: Integration tests (requires a mongod binary)",
        "property: Property-based tests using Hypothesis",
    ):
        config.addinivalue_line("markers", line)


def _get_tier(item: Item) -> int | None:
    """Extract tier level from item's markers."""
    for marker in item.iter_markers(name="tier"):
        if marker.args:
            tier = marker.args[0]
            if isinstance(tier, int) and 0 <= tier <= 4:
                return tier
    return None


def _tra_problem(item: Item) -> str | None:
    markers = list(item.iter_markers(name="tra"))
    if not markers:
        return "missing @pytest.mark.tra('...')"
    if len(markers) > 1:
        return "multiple @tra markers; a test protects exactly one responsibility"
    anchor = markers[0].args[0] if markers[0].args else None
    if not isinstance(anchor, str) or not anchor.strip():
        return "@tra anchor must be a non-empty string"
    if not anchor.startswith(VALID_TRA_PREFIXES):
        return f"invalid TRA anchor '{anchor}'"
    return None


def _tier_problem(item: Item) -> str | None:
    markers = list(item.iter_markers(name="tier"))
    if not markers:
        return "missing @pytest.mark.tier()"
    if len(markers) > 1:
        return "multiple tier markers"
    if _get_tier(item) is None:
        return "invalid tier value"
    return None


def _collect_problems(items: list[Item], env: str, check) -> list[str]:
    if os.environ.get(env, "warn") == "0":
        return []
    problems = []
    for item in items:
        problem = check(item)
        if problem:
            problems.append(f"{item.nodeid}: {problem}")
    return problems


def _apply_tier_timeouts(items: list[Item]) -> None:
    """Add a timeout marker per tier when pytest-timeout is installed."""
    try:
        import pytest_timeout as _  # type: ignore[import-untyped]  # noqa: F401
    except ImportError:
        return

    multiplier = float(os.environ.get("TIER_TIMEOUT_MULTIPLIER", "1.0"))
    for item in items:
        tier = _get_tier(item)
        if tier is None or any(item.iter_markers(name="timeout")):
            continue
        timeout = TIER_TIMEOUTS.get(tier, 0)
        if timeout > 0:
            item.add_marker(pytest.mark.timeout(timeout * multiplier))


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config: Config, items: list[Item]) -> None:
    """Enforce TRA and Tier markers at collection time."""
    problems = _collect_problems(items, "TRA_ENFORCE", _tra_problem)
    problems += _collect_problems(items, "TIER_ENFORCE", _tier_problem)

    if problems:
        strict = (
            os.environ.get("TRA_ENFORCE", "warn") == "1"
            and os.environ.get("TIER_ENFORCE", "warn") == "1"
        )
        if strict:
            pytest.fail(
                "TRA/Tier Enforcement Errors:\n"
                + "\n".join(f"  - {p}" for p in problems),
                pytrace=False,
            )
        print("\nTRA/Tier Enforcement Warnings:")
        for problem in problems:
            print(f"  {problem}")

    _apply_tier_timeouts(items)


@pytest.hookimpl(trylast=True)
def pytest_report_header(config: Config) -> str:
    """Add enforcement info to pytest header."""
    tra_enforce = os.environ.get("TRA_ENFORCE", "warn")
    tier_enforce = os.environ.get("TIER_ENFORCE", "warn")
    return f"TRA enforcement: {tra_enforce} | Tier enforcement: {tier_enforce}"
