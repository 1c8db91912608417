"""Pass-through analyzer."""

from __future__ import annotations

from kubegraph.analyzer.base import VirtualProblemAnalyzer, register_analyzer
from kubegraph.graph.db.base import StoredGraph
from kubegraph.problem import ProblemSpec, VirtualProblem


@register_analyzer("empty")
class EmptyAnalyzer(VirtualProblemAnalyzer):
    """Resolve the metadata and hand the graph through untouched."""

    def analyze(self, graph: StoredGraph, problem: ProblemSpec) -> VirtualProblem:
        resolved = problem.resolve()
        return VirtualProblem(
            analyzer=self.name,
            scope=graph.scope,
            graph=self.graph_data(graph),
            problem=resolved,
            origin=resolved.metadata,
        )
