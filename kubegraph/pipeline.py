"""Linear analysis pipeline: Raw -> Analyzed -> Solved -> Executed.

`NetworkPipeline.run()` snapshots the stored graph for a scope, then hands it
through the analyzer, the solver and the runner. Each stage is timed and
logged; a failing stage raises `PipelineError` naming the state that was not
reached, with the original error chained. Only the runner writes back to the
store, so a failure before it leaves the store untouched.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, TypeVar

from kubegraph.analyzer import ANALYZER_REGISTRY, VirtualProblemAnalyzer
from kubegraph.config import DEFAULT_CONFIG, PipelineConfig
from kubegraph.errors import PipelineError
from kubegraph.frame import EmptyLazyFrame, LazyFrame, from_records
from kubegraph.graph.db import GRAPH_DB_REGISTRY, NetworkGraphDB
from kubegraph.graph.model import Graph, GraphData, GraphScope
from kubegraph.logging import get_logger
from kubegraph.problem import ProblemSpec, VirtualProblem
from kubegraph.runner import RUNNER_REGISTRY, NetworkRunner
from kubegraph.solver import SOLVER_REGISTRY, NetworkSolver

logger = get_logger(__name__)

T = TypeVar("T")


class PipelineState(str, Enum):
    RAW = "raw"
    ANALYZED = "analyzed"
    SOLVED = "solved"
    EXECUTED = "executed"


@dataclass
class PipelineResult:
    """Outcome of one pipeline run.

    Attributes:
        scope: Scope that was processed.
        state: Last state reached (always EXECUTED for a returned result).
        problem: Analyzer output.
        solved: Solver output (edges carry the flow column).
        durations: Seconds spent per reached state.
    """

    scope: GraphScope
    state: PipelineState = PipelineState.RAW
    problem: Optional[VirtualProblem] = None
    solved: Optional[GraphData[LazyFrame]] = None
    durations: Dict[str, float] = field(default_factory=dict)


def _lookup(registry: Mapping[str, type], kind: str, name: str) -> type:
    try:
        return registry[name]
    except KeyError:
        valid = ", ".join(sorted(registry))
        raise ValueError(f"Unknown {kind} '{name}'. Valid values are: {valid}") from None


class NetworkPipeline:
    """Runs analyzer, solver and runner over graphs of one shared store."""

    def __init__(
        self,
        graph_db: NetworkGraphDB,
        analyzer: VirtualProblemAnalyzer,
        solver: NetworkSolver,
        runner: NetworkRunner,
        *,
        frame_backend: str = DEFAULT_CONFIG.frame_backend,
    ) -> None:
        self.graph_db = graph_db
        self.analyzer = analyzer
        self.solver = solver
        self.runner = runner
        self.frame_backend = frame_backend

    @classmethod
    def from_config(
        cls,
        config: Optional[PipelineConfig] = None,
        graph_db: Optional[NetworkGraphDB] = None,
    ) -> "NetworkPipeline":
        """Instantiate registered components named by `config`.

        Raises:
            ValueError: If a component name is not registered.
        """
        config = config or PipelineConfig()
        if graph_db is None:
            graph_db = _lookup(GRAPH_DB_REGISTRY, "graph_db", config.graph_db)()
        return cls(
            graph_db=graph_db,
            analyzer=_lookup(ANALYZER_REGISTRY, "analyzer", config.analyzer)(),
            solver=_lookup(SOLVER_REGISTRY, "solver", config.solver)(),
            runner=_lookup(RUNNER_REGISTRY, "runner", config.runner)(),
            frame_backend=config.frame_backend,
        )

    async def insert_records(
        self,
        scope: GraphScope,
        nodes: Iterable[Mapping[str, Any]],
        edges: Optional[Iterable[Mapping[str, Any]]] = None,
    ) -> Graph[GraphData[LazyFrame]]:
        """Store node (and optionally edge) records as the graph of `scope`.

        Without edges (None or no records) the edge table stays empty,
        leaving edge synthesis to the analyzer.
        """
        edge_records = list(edges) if edges is not None else []
        graph = Graph(
            scope=scope,
            data=GraphData(
                edges=(
                    from_records(edge_records, self.frame_backend)
                    if edge_records
                    else EmptyLazyFrame()
                ),
                nodes=from_records(nodes, self.frame_backend),
            ),
        )
        await self.graph_db.insert(graph)
        return graph

    async def _stage(
        self,
        state: PipelineState,
        result: PipelineResult,
        action: Callable[[], Awaitable[T]],
    ) -> T:
        display_name = f"{state.value} ({result.scope})"
        logger.info(f"Starting pipeline stage: {display_name}")
        start_time = time.time()
        try:
            value = await action()
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"Failed pipeline stage: {display_name} "
                f"after {duration:.3f} seconds - {type(e).__name__}: {e}"
            )
            raise PipelineError(state.value, str(e), scope=result.scope) from e
        duration = time.time() - start_time
        result.state = state
        result.durations[state.value] = duration
        logger.info(
            f"Completed pipeline stage: {display_name} in {duration:.3f} seconds"
        )
        return value

    async def run(self, scope: GraphScope, problem: ProblemSpec) -> PipelineResult:
        """Analyze, solve and execute the stored graph of `scope`.

        Raises:
            PipelineError: If no graph is stored for `scope` or any stage fails.
        """
        result = PipelineResult(scope=scope)

        # Snapshot first: no store lock is held while solving
        graph = await self.graph_db.get(scope)
        if graph is None:
            raise PipelineError(
                PipelineState.ANALYZED.value, "no graph is stored", scope=scope
            )

        async def analyze() -> VirtualProblem:
            return self.analyzer.analyze(graph, problem)

        virtual = await self._stage(PipelineState.ANALYZED, result, analyze)
        result.problem = virtual

        async def solve() -> GraphData[LazyFrame]:
            return await self.solver.solve(virtual.graph, virtual.problem)

        solved = await self._stage(PipelineState.SOLVED, result, solve)
        result.solved = solved

        async def execute() -> None:
            await self.runner.execute(
                self.graph_db.scoped(scope),
                solved,
                virtual.problem,
                origin=virtual.origin,
            )

        await self._stage(PipelineState.EXECUTED, result, execute)
        return result

    async def close(self) -> None:
        await self.graph_db.close()
