"""Dry-run runner: evaluates the outcome of a flow and stores it."""

from __future__ import annotations

from typing import Any, Dict

from kubegraph.errors import SchemaError
from kubegraph.frame import LazyFrame
from kubegraph.graph.db.base import ScopedNetworkGraphDB
from kubegraph.graph.model import GraphData
from kubegraph.logging import get_logger
from kubegraph.problem import GraphMetadataStandard, ProblemSpec
from kubegraph.runner.base import NetworkRunner, register_runner
from kubegraph.solver.base import int_column
from kubegraph.types.base import GraphDataType

logger = get_logger(__name__)


@register_runner("simulator")
class NetworkRunnerSimulator(NetworkRunner):
    """Move supply along the solved flows and write the result back.

    Each node's supply becomes ``supply - outflow + inflow``. The simulated
    graph replaces the stored graph of the runner's scope; nothing outside
    the store is touched. Columns are renamed back to the `origin` names
    before the write, so the same problem declaration can run again.
    """

    async def run(
        self,
        graph_db: ScopedNetworkGraphDB,
        graph: GraphData[Any],
        problem: ProblemSpec[GraphMetadataStandard],
        origin: GraphMetadataStandard,
    ) -> None:
        metadata = problem.metadata
        data = await graph.lazy().collect()
        data.edges.require_columns([metadata.src, metadata.sink, metadata.flow], "edge")
        data.nodes.require_columns([metadata.name, metadata.supply], "node")

        names = data.nodes.column_values(metadata.name)
        supply = int_column(data.nodes, metadata.supply, "node")
        net: Dict[Any, int] = {name: 0 for name in names}

        moved = 0
        srcs = data.edges.column_values(metadata.src)
        sinks = data.edges.column_values(metadata.sink)
        flows = int_column(data.edges, metadata.flow, "edge")
        for row, (src, sink, flow) in enumerate(zip(srcs, sinks, flows)):
            if src not in net or sink not in net:
                raise SchemaError(
                    f"edge row {row}: flow between unknown nodes {src!r} -> {sink!r}"
                )
            if flow < 0:
                raise SchemaError(f"edge row {row}: negative flow {flow}")
            net[src] -= flow
            net[sink] += flow
            moved += flow

        nodes = data.nodes.with_column(
            metadata.supply, [value + net[name] for name, value in zip(names, supply)]
        )
        await graph_db.insert(
            _with_origin_names(data.edges.lazy(), nodes.lazy(), metadata, origin)
        )
        if problem.verbose:
            for name, delta in net.items():
                if delta:
                    logger.info("Simulated %s: supply %+d", name, delta)
        logger.info("Simulated %d unit(s) of flow on %s", moved, graph_db.scope)


def _with_origin_names(
    edges: LazyFrame,
    nodes: LazyFrame,
    metadata: GraphMetadataStandard,
    origin: GraphMetadataStandard,
) -> GraphData[LazyFrame]:
    if origin == metadata:
        return GraphData(edges=edges, nodes=nodes)
    target = ProblemSpec(metadata=origin)
    return GraphData(
        edges=edges.cast(GraphDataType.EDGE, metadata, target),
        nodes=nodes.cast(GraphDataType.NODE, metadata, target),
    )
