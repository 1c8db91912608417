"""kubegraph: cost-minimizing flow analysis over resource graphs.

A cluster (or any resource system) is held as scoped node and edge tables in
a graph store. An analyzer refines a stored graph and a problem declaration
into a solver-ready problem, a solver assigns min-cost flow to its edges, and
a runner simulates or applies the result.

Primary API:
    NetworkPipeline - Raw -> Analyzed -> Solved -> Executed orchestration
    MemoryNetworkGraphDB - in-memory graph store
    ProblemSpec, GraphMetadataRaw - problem declaration and column roles
    LazyFrame, from_records - backend-neutral lazy tables

Example:
    from kubegraph import GraphScope, NetworkPipeline, ProblemSpec

    pipeline = NetworkPipeline.from_config()
    scope = GraphScope(kind="cluster", namespace="default", name="edge")
    await pipeline.insert_records(
        scope,
        nodes=[
            {"name": "a", "capacity": 20, "supply": 20, "unit_cost": 5},
            {"name": "b", "capacity": 10, "supply": 0, "unit_cost": 0},
        ],
    )
    result = await pipeline.run(scope, ProblemSpec())
"""

from __future__ import annotations

from kubegraph import logging
from kubegraph._version import __version__
from kubegraph.analyzer import EmptyAnalyzer, StandardAnalyzer, VirtualProblemAnalyzer
from kubegraph.config import PipelineConfig, load_config_yaml
from kubegraph.errors import (
    BackendMismatchError,
    EmptyGraphError,
    InfeasibleProblemError,
    KubegraphError,
    PipelineError,
    SchemaError,
    StoreError,
)
from kubegraph.frame import DataFrame, EmptyLazyFrame, LazyFrame, LazySlice, from_records
from kubegraph.graph import (
    EdgeKey,
    Graph,
    GraphData,
    GraphFilter,
    GraphRow,
    GraphScope,
    NodeKey,
)
from kubegraph.graph.db import MemoryNetworkGraphDB, NetworkGraphDB
from kubegraph.pipeline import NetworkPipeline, PipelineResult, PipelineState
from kubegraph.problem import (
    FunctionMetadata,
    GraphMetadataRaw,
    GraphMetadataStandard,
    ProblemSpec,
    VirtualProblem,
    load_problem_yaml,
)
from kubegraph.runner import LiveNetworkRunner, NetworkRunner, NetworkRunnerSimulator
from kubegraph.solver import NetworkSolver, NetworkxSolver
from kubegraph.types import MAX_CAPACITY

__all__ = [
    # Version
    "__version__",
    # Frames
    "DataFrame",
    "EmptyLazyFrame",
    "LazyFrame",
    "LazySlice",
    "from_records",
    # Graph model and store
    "EdgeKey",
    "Graph",
    "GraphData",
    "GraphFilter",
    "GraphRow",
    "GraphScope",
    "NodeKey",
    "MemoryNetworkGraphDB",
    "NetworkGraphDB",
    # Problem
    "MAX_CAPACITY",
    "FunctionMetadata",
    "GraphMetadataRaw",
    "GraphMetadataStandard",
    "ProblemSpec",
    "VirtualProblem",
    "load_problem_yaml",
    # Pipeline components
    "EmptyAnalyzer",
    "StandardAnalyzer",
    "VirtualProblemAnalyzer",
    "NetworkSolver",
    "NetworkxSolver",
    "LiveNetworkRunner",
    "NetworkRunner",
    "NetworkRunnerSimulator",
    "NetworkPipeline",
    "PipelineResult",
    "PipelineState",
    # Configuration
    "PipelineConfig",
    "load_config_yaml",
    # Errors
    "BackendMismatchError",
    "EmptyGraphError",
    "InfeasibleProblemError",
    "KubegraphError",
    "PipelineError",
    "SchemaError",
    "StoreError",
    # Utilities
    "logging",
]
