"""Tests for the network simplex min-cost flow solver."""

from __future__ import annotations

import pytest

from kubegraph.errors import InfeasibleProblemError, SchemaError
from kubegraph.frame import EmptyLazyFrame, from_records
from kubegraph.graph.model import GraphData
from kubegraph.problem import GraphMetadataStandard, ProblemSpec
from kubegraph.solver import SOLVER_REGISTRY, NetworkxSolver, optimize

PROBLEM = ProblemSpec(metadata=GraphMetadataStandard())


def _data(nodes, edges, backend: str = "pandas") -> GraphData:
    return GraphData(
        edges=from_records(edges, backend), nodes=from_records(nodes, backend)
    )


async def _flows(nodes, edges, backend: str = "pandas", problem=PROBLEM):
    solved = await NetworkxSolver().solve(_data(nodes, edges, backend), problem)
    df = await solved.edges.collect()
    return df.column_values("flow")


def test_registry() -> None:
    assert SOLVER_REGISTRY["networkx"] is NetworkxSolver


@pytest.mark.parametrize("backend", ["pandas", "polars"])
@pytest.mark.asyncio
async def test_moves_supply_to_cheaper_node(backend, scenario_nodes, scenario_edges) -> None:
    solved = await NetworkxSolver().solve(
        _data(scenario_nodes, scenario_edges, backend), PROBLEM
    )
    data = await solved.collect()

    assert data.edges.column_values("flow") == [10]
    flow_cost = sum(
        f * c
        for f, c in zip(
            data.edges.column_values("flow"), data.edges.column_values("unit_cost")
        )
    )
    assert flow_cost == 10
    assert data.nodes.to_records() == scenario_nodes


@pytest.mark.asyncio
async def test_accepts_materialized_tables(scenario_nodes, scenario_edges) -> None:
    data = await _data(scenario_nodes, scenario_edges).collect()
    solved = await NetworkxSolver().solve(data, PROBLEM)

    assert (await solved.edges.collect()).column_values("flow") == [10]


@pytest.mark.asyncio
async def test_objective_includes_holding_cost(scenario_nodes, scenario_edges) -> None:
    data = await _data(scenario_nodes, scenario_edges).collect()
    solution = optimize(data.edges, data.nodes, PROBLEM)

    assert solution.flows == [10]
    assert solution.transport_cost == 10
    # 10 units kept at node 0 for 5 each
    assert solution.total_cost == 60


@pytest.mark.asyncio
async def test_supply_beyond_total_capacity_is_infeasible() -> None:
    nodes = [
        {"name": 0, "capacity": 0, "supply": 100, "unit_cost": 0},
        {"name": 1, "capacity": 10, "supply": 0, "unit_cost": 0},
    ]
    edges = [{"src": 0, "sink": 1, "capacity": 100, "unit_cost": 1}]
    with pytest.raises(InfeasibleProblemError):
        await _flows(nodes, edges)


@pytest.mark.asyncio
async def test_unreachable_capacity_is_infeasible() -> None:
    nodes = [
        {"name": 0, "capacity": 0, "supply": 20, "unit_cost": 0},
        {"name": 1, "capacity": 30, "supply": 0, "unit_cost": 0},
    ]
    edges = [{"src": 1, "sink": 0, "capacity": 100, "unit_cost": 1}]
    with pytest.raises(InfeasibleProblemError):
        await _flows(nodes, edges)


@pytest.mark.asyncio
async def test_edge_capacity_limits_flow() -> None:
    nodes = [
        {"name": 0, "capacity": 20, "supply": 20, "unit_cost": 5},
        {"name": 1, "capacity": 20, "supply": 0, "unit_cost": 0},
    ]
    edges = [{"src": 0, "sink": 1, "capacity": 4, "unit_cost": 1}]

    assert await _flows(nodes, edges) == [4]


@pytest.mark.asyncio
async def test_self_loops_carry_no_flow(scenario_nodes) -> None:
    edges = [
        {"src": 0, "sink": 0, "capacity": 50, "unit_cost": 0},
        {"src": 0, "sink": 1, "capacity": 20, "unit_cost": 1},
    ]
    assert await _flows(scenario_nodes, edges) == [0, 10]


@pytest.mark.asyncio
async def test_equal_cost_ties_are_deterministic(scenario_nodes) -> None:
    edges = [
        {"src": 0, "sink": 1, "capacity": 20, "unit_cost": 1},
        {"src": 0, "sink": 1, "capacity": 20, "unit_cost": 1},
    ]
    first = await _flows(scenario_nodes, edges)
    second = await _flows(scenario_nodes, edges)

    assert first == second
    assert sum(first) == 10


@pytest.mark.asyncio
async def test_verbose_does_not_change_result(scenario_nodes, scenario_edges, caplog) -> None:
    verbose = ProblemSpec(metadata=GraphMetadataStandard(), verbose=True)
    with caplog.at_level("INFO", logger="kubegraph"):
        flows = await _flows(scenario_nodes, scenario_edges, problem=verbose)

    assert flows == await _flows(scenario_nodes, scenario_edges)
    assert "Solved min-cost flow" in caplog.text


@pytest.mark.parametrize(
    "edges, match",
    [
        ([{"src": 5, "sink": 1, "capacity": 1, "unit_cost": 0}], "unknown"),
        ([{"src": 0, "sink": 1, "capacity": -1, "unit_cost": 0}], "negative capacity"),
        ([{"src": 0, "sink": 1, "capacity": 1.5, "unit_cost": 0}], "non-integer"),
        ([{"src": 0, "sink": 1, "unit_cost": 0}], "capacity"),
    ],
)
@pytest.mark.asyncio
async def test_invalid_edges(scenario_nodes, edges, match) -> None:
    with pytest.raises(SchemaError, match=match):
        await _flows(scenario_nodes, edges)


@pytest.mark.asyncio
async def test_invalid_nodes(scenario_edges) -> None:
    duplicate = [
        {"name": 0, "capacity": 1, "supply": 0, "unit_cost": 0},
        {"name": 0, "capacity": 1, "supply": 0, "unit_cost": 0},
    ]
    negative = [
        {"name": 0, "capacity": 1, "supply": -1, "unit_cost": 0},
        {"name": 1, "capacity": 1, "supply": 0, "unit_cost": 0},
    ]
    with pytest.raises(SchemaError, match="duplicate"):
        await _flows(duplicate, scenario_edges)
    with pytest.raises(SchemaError, match="negative supply"):
        await _flows(negative, scenario_edges)


@pytest.mark.asyncio
async def test_empty_tables_are_rejected(scenario_nodes) -> None:
    data = GraphData(edges=EmptyLazyFrame(), nodes=from_records(scenario_nodes))
    with pytest.raises(SchemaError):
        await NetworkxSolver().solve(data, PROBLEM)
