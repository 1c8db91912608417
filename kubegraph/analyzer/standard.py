"""Analyzer that validates columns, fills defaults and normalizes names."""

from __future__ import annotations

from typing import List, Sequence

from kubegraph.analyzer.base import VirtualProblemAnalyzer, register_analyzer
from kubegraph.errors import SchemaError
from kubegraph.graph.db.base import StoredGraph
from kubegraph.graph.model import GraphData, GraphScope
from kubegraph.logging import get_logger
from kubegraph.problem import GraphMetadataStandard, ProblemSpec, VirtualProblem
from kubegraph.types.base import GraphDataType

logger = get_logger(__name__)

#: Value filled into a missing ``unit_cost`` column of either table.
DEFAULT_UNIT_COST = 0


def _require(columns: List[str], required: Sequence[str], what: str, scope: GraphScope):
    missing = [column for column in required if column not in columns]
    if missing:
        raise SchemaError(
            f"{what} table of graph {scope} is missing required column(s): "
            f"{', '.join(missing)}"
        )


@register_analyzer("standard")
class StandardAnalyzer(VirtualProblemAnalyzer):
    """Refine a raw graph into standard column names.

    Steps:
      1. Resolve the metadata (required roles must be mapped).
      2. Require a node table with name, capacity and supply columns;
         default a missing node unit cost to ``DEFAULT_UNIT_COST``.
      3. Without an edge table, synthesize a fully-connected one via
         `LazyFrame.fabric`.
      4. Require src, sink and capacity edge columns; default a missing edge
         unit cost.
      5. Cast both tables onto `GraphMetadataStandard` names, keeping the
         declared names as the origin for write-back.
    """

    def analyze(self, graph: StoredGraph, problem: ProblemSpec) -> VirtualProblem:
        resolved = problem.resolve()
        metadata = resolved.metadata
        data = self.graph_data(graph)
        scope = graph.scope

        nodes = data.nodes
        if nodes.is_empty():
            raise SchemaError(f"graph {scope} has no node table")
        node_columns = nodes.columns()
        _require(
            node_columns,
            [metadata.name, metadata.capacity, metadata.supply],
            "node",
            scope,
        )
        if metadata.unit_cost not in node_columns:
            nodes = nodes.fill_column_with_value(metadata.unit_cost, DEFAULT_UNIT_COST)

        edges = data.edges
        if edges.is_empty():
            logger.debug("No edges for %s; building fully-connected fabric", scope)
            edges = nodes.fabric(resolved)
        edge_columns = edges.columns()
        _require(
            edge_columns,
            [metadata.src, metadata.sink, metadata.capacity],
            "edge",
            scope,
        )
        if metadata.unit_cost not in edge_columns:
            edges = edges.fill_column_with_value(metadata.unit_cost, DEFAULT_UNIT_COST)

        standard = ProblemSpec(metadata=GraphMetadataStandard(), verbose=resolved.verbose)
        return VirtualProblem(
            analyzer=self.name,
            scope=scope,
            graph=GraphData(
                edges=edges.cast(GraphDataType.EDGE, metadata, standard),
                nodes=nodes.cast(GraphDataType.NODE, metadata, standard),
            ),
            problem=standard,
            origin=metadata,
        )
