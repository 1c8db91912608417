"""End-to-end tests for the analysis pipeline."""

from __future__ import annotations

import pytest

from kubegraph.analyzer import StandardAnalyzer
from kubegraph.config import PipelineConfig
from kubegraph.errors import (
    InfeasibleProblemError,
    PipelineError,
    SchemaError,
    StoreError,
)
from kubegraph.graph.db import MemoryNetworkGraphDB
from kubegraph.graph.model import GraphScope
from kubegraph.pipeline import NetworkPipeline, PipelineState
from kubegraph.problem import GraphMetadataRaw, ProblemSpec
from kubegraph.runner import LiveNetworkRunner, NetworkRunnerSimulator
from kubegraph.solver import NetworkxSolver


def test_from_config_defaults() -> None:
    pipeline = NetworkPipeline.from_config()

    assert isinstance(pipeline.graph_db, MemoryNetworkGraphDB)
    assert isinstance(pipeline.analyzer, StandardAnalyzer)
    assert isinstance(pipeline.solver, NetworkxSolver)
    assert isinstance(pipeline.runner, NetworkRunnerSimulator)
    assert pipeline.frame_backend == "pandas"


def test_from_config_named_components() -> None:
    db = MemoryNetworkGraphDB()
    pipeline = NetworkPipeline.from_config(
        PipelineConfig(runner="live", frame_backend="polars"), graph_db=db
    )
    assert pipeline.graph_db is db
    assert isinstance(pipeline.runner, LiveNetworkRunner)


@pytest.mark.parametrize("field", ["analyzer", "solver", "runner", "graph_db"])
def test_from_config_unknown_component(field: str) -> None:
    config = PipelineConfig(**{field: "bogus"})
    with pytest.raises(ValueError, match="Valid values are"):
        NetworkPipeline.from_config(config)


@pytest.mark.parametrize("backend", ["pandas", "polars"])
@pytest.mark.asyncio
async def test_run_with_declared_edges(backend, scope, scenario_nodes, scenario_edges) -> None:
    pipeline = NetworkPipeline.from_config(PipelineConfig(frame_backend=backend))
    await pipeline.insert_records(scope, scenario_nodes, scenario_edges)

    result = await pipeline.run(scope, ProblemSpec())

    assert result.state is PipelineState.EXECUTED
    assert set(result.durations) == {"analyzed", "solved", "executed"}
    assert result.problem.analyzer == "standard"
    solved = await result.solved.edges.collect()
    assert solved.column_values("flow") == [10]

    stored = await pipeline.graph_db.get(scope)
    nodes = await stored.data.nodes.collect()
    assert nodes.column_values("supply") == [10, 10]


@pytest.mark.asyncio
async def test_run_with_synthesized_edges(scope, scenario_nodes) -> None:
    pipeline = NetworkPipeline.from_config()
    await pipeline.insert_records(scope, scenario_nodes)

    result = await pipeline.run(scope, ProblemSpec())
    edges = await result.solved.edges.collect()

    flows = {
        (src, sink): flow
        for src, sink, flow in zip(
            edges.column_values("src"),
            edges.column_values("sink"),
            edges.column_values("flow"),
        )
    }
    assert len(flows) == 4
    assert flows[(0, 0)] == flows[(1, 1)] == 0
    assert flows[(0, 1)] - flows[(1, 0)] == 10


@pytest.mark.asyncio
async def test_analysis_failure_leaves_store_untouched(scope, scenario_nodes) -> None:
    pipeline = NetworkPipeline.from_config()
    graph = await pipeline.insert_records(scope, scenario_nodes)
    problem = ProblemSpec(metadata=GraphMetadataRaw(capacity=None))

    with pytest.raises(PipelineError) as info:
        await pipeline.run(scope, problem)

    assert info.value.stage == "analyzed"
    assert info.value.scope == scope
    assert isinstance(info.value.__cause__, SchemaError)
    assert await pipeline.graph_db.get(scope) == graph


@pytest.mark.asyncio
async def test_infeasible_problem_fails_at_solve(scope, caplog) -> None:
    pipeline = NetworkPipeline.from_config()
    nodes = [
        {"name": 0, "capacity": 0, "supply": 100},
        {"name": 1, "capacity": 10, "supply": 0},
    ]
    graph = await pipeline.insert_records(scope, nodes)

    with caplog.at_level("INFO", logger="kubegraph"):
        with pytest.raises(PipelineError) as info:
            await pipeline.run(scope, ProblemSpec())

    assert info.value.stage == "solved"
    assert isinstance(info.value.__cause__, InfeasibleProblemError)
    assert await pipeline.graph_db.get(scope) == graph
    assert "Completed pipeline stage: analyzed" in caplog.text
    assert "Failed pipeline stage: solved" in caplog.text


@pytest.mark.asyncio
async def test_missing_scope_fails() -> None:
    pipeline = NetworkPipeline.from_config()
    missing = GraphScope("cluster", "default", "missing")

    with pytest.raises(PipelineError, match="no graph is stored"):
        await pipeline.run(missing, ProblemSpec())


@pytest.mark.asyncio
async def test_close_closes_store(scope, scenario_nodes) -> None:
    pipeline = NetworkPipeline.from_config()
    await pipeline.insert_records(scope, scenario_nodes)
    await pipeline.close()

    with pytest.raises(StoreError):
        await pipeline.run(scope, ProblemSpec())


@pytest.mark.asyncio
async def test_custom_column_names_survive_repeated_runs(scope) -> None:
    pipeline = NetworkPipeline.from_config()
    nodes = [
        {"node": 0, "cap": 20, "stock": 20, "unit_cost": 5},
        {"node": 1, "cap": 10, "stock": 0, "unit_cost": 0},
    ]
    await pipeline.insert_records(scope, nodes)
    problem = ProblemSpec(
        metadata=GraphMetadataRaw(name="node", capacity="cap", supply="stock")
    )

    for expected in ([10, 10], [10, 10]):
        result = await pipeline.run(scope, problem)
        assert result.state is PipelineState.EXECUTED

        stored = await pipeline.graph_db.get(scope)
        data = await stored.data.collect()
        assert data.nodes.columns == ["node", "cap", "stock", "unit_cost"]
        assert data.nodes.column_values("stock") == expected
        assert "cap" in data.edges.columns
        assert "capacity" not in data.edges.columns


@pytest.mark.asyncio
async def test_no_edge_records_synthesizes_fabric(scope, scenario_nodes) -> None:
    pipeline = NetworkPipeline.from_config()
    graph = await pipeline.insert_records(scope, scenario_nodes, edges=[])

    assert graph.data.edges.is_empty()
    result = await pipeline.run(scope, ProblemSpec())
    assert len(await result.solved.edges.collect()) == 4


@pytest.mark.parametrize("backend", ["pandas", "polars"])
@pytest.mark.asyncio
async def test_non_numeric_capacity_fails_with_schema_error(backend, scope) -> None:
    pipeline = NetworkPipeline.from_config(PipelineConfig(frame_backend=backend))
    nodes = [
        {"name": 0, "capacity": "lots", "supply": 0},
        {"name": 1, "capacity": "many", "supply": 0},
    ]
    graph = await pipeline.insert_records(scope, nodes)

    with pytest.raises(PipelineError) as info:
        await pipeline.run(scope, ProblemSpec())

    assert isinstance(info.value.__cause__, SchemaError)
    assert "capacity" in str(info.value)
    assert await pipeline.graph_db.get(scope) == graph
