"""Tests for the simulator and live runners."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import pytest

from kubegraph.errors import EmptyGraphError, SchemaError
from kubegraph.frame import EmptyLazyFrame, from_records
from kubegraph.graph.db import MemoryNetworkGraphDB
from kubegraph.graph.model import GraphData, GraphScope
from kubegraph.problem import GraphMetadataStandard, ProblemSpec
from kubegraph.runner import (
    RUNNER_REGISTRY,
    FlowAction,
    LiveNetworkRunner,
    NetworkRunnerSimulator,
    TargetSystem,
)

PROBLEM = ProblemSpec(metadata=GraphMetadataStandard())


class RecordingTarget(TargetSystem):
    def __init__(self) -> None:
        self.calls: List[Tuple[GraphScope, List[FlowAction]]] = []

    async def apply(self, scope: GraphScope, actions: Sequence[FlowAction]) -> None:
        self.calls.append((scope, list(actions)))


def _solved(scenario_nodes, flows: List[int]) -> GraphData:
    edges = [
        {"src": 0, "sink": 1, "capacity": 20, "unit_cost": 1, "flow": flows[0]},
        {"src": 1, "sink": 0, "capacity": 20, "unit_cost": 1, "flow": flows[1]},
    ]
    return GraphData(edges=from_records(edges), nodes=from_records(scenario_nodes))


def test_registry() -> None:
    assert RUNNER_REGISTRY["simulator"] is NetworkRunnerSimulator
    assert RUNNER_REGISTRY["live"] is LiveNetworkRunner


@pytest.mark.parametrize("runner_cls", [NetworkRunnerSimulator, LiveNetworkRunner])
@pytest.mark.asyncio
async def test_empty_graph_is_rejected(runner_cls, scope, scenario_nodes) -> None:
    db = MemoryNetworkGraphDB()
    nodes = from_records(scenario_nodes)
    runner = runner_cls()

    for data in (
        GraphData(edges=EmptyLazyFrame(), nodes=nodes),
        GraphData(edges=nodes, nodes=EmptyLazyFrame()),
    ):
        with pytest.raises(EmptyGraphError, match="empty graph"):
            await runner.execute(db.scoped(scope), data, PROBLEM)
    assert await db.get(scope) is None


@pytest.mark.asyncio
async def test_simulator_writes_moved_supply_back(scope, scenario_nodes) -> None:
    db = MemoryNetworkGraphDB()
    solved = _solved(scenario_nodes, [10, 0])

    await NetworkRunnerSimulator().execute(db.scoped(scope), solved, PROBLEM)

    stored = await db.get(scope)
    assert stored is not None
    data = await stored.data.collect()
    assert data.nodes.column_values("supply") == [10, 10]
    assert data.edges.column_values("flow") == [10, 0]


@pytest.mark.asyncio
async def test_simulator_nets_opposite_flows(scope, scenario_nodes) -> None:
    db = MemoryNetworkGraphDB()

    await NetworkRunnerSimulator().execute(
        db.scoped(scope), _solved(scenario_nodes, [6, 4]), PROBLEM
    )

    data = await (await db.get(scope)).data.collect()
    assert data.nodes.column_values("supply") == [18, 2]


@pytest.mark.asyncio
async def test_simulator_requires_flow_column(scope, scenario_nodes, scenario_edges) -> None:
    db = MemoryNetworkGraphDB()
    data = GraphData(edges=from_records(scenario_edges), nodes=from_records(scenario_nodes))

    with pytest.raises(SchemaError, match="flow"):
        await NetworkRunnerSimulator().execute(db.scoped(scope), data, PROBLEM)
    assert await db.get(scope) is None


@pytest.mark.asyncio
async def test_live_runner_sends_positive_flows(scope, scenario_nodes) -> None:
    db = MemoryNetworkGraphDB()
    target = RecordingTarget()

    await LiveNetworkRunner(target).execute(
        db.scoped(scope), _solved(scenario_nodes, [10, 0]), PROBLEM
    )

    assert target.calls == [(scope, [FlowAction(src=0, sink=1, flow=10)])]
    assert await db.get(scope) is None


@pytest.mark.asyncio
async def test_live_runner_default_target_logs(scope, scenario_nodes, caplog) -> None:
    db = MemoryNetworkGraphDB()
    with caplog.at_level("INFO", logger="kubegraph"):
        await LiveNetworkRunner().execute(
            db.scoped(scope), _solved(scenario_nodes, [3, 0]), PROBLEM
        )
    assert "move 3 unit(s) 0 -> 1" in caplog.text


@pytest.mark.asyncio
async def test_simulator_writes_back_under_origin_names(scope, scenario_nodes) -> None:
    db = MemoryNetworkGraphDB()
    origin = GraphMetadataStandard(name="node", supply="stock", flow="moved")

    await NetworkRunnerSimulator().execute(
        db.scoped(scope), _solved(scenario_nodes, [10, 0]), PROBLEM, origin=origin
    )

    data = await (await db.get(scope)).data.collect()
    assert data.nodes.columns == ["node", "capacity", "stock", "unit_cost"]
    assert data.nodes.column_values("stock") == [10, 10]
    assert data.edges.column_values("moved") == [10, 0]
