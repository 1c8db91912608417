"""Global pytest configuration and shared sample graphs."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from kubegraph.graph.model import GraphScope

Records = List[Dict[str, Any]]


@pytest.fixture
def scope() -> GraphScope:
    return GraphScope(kind="cluster", namespace="default", name="demo")


@pytest.fixture
def scenario_nodes() -> Records:
    """Node 0 holds 20 units at cost 5 each; node 1 can take 10 for free."""
    return [
        {"name": 0, "capacity": 20, "supply": 20, "unit_cost": 5},
        {"name": 1, "capacity": 10, "supply": 0, "unit_cost": 0},
    ]


@pytest.fixture
def scenario_edges() -> Records:
    return [{"src": 0, "sink": 1, "capacity": 20, "unit_cost": 1}]
