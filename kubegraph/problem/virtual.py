"""Analyzer output: a solver-ready problem."""

from __future__ import annotations

from dataclasses import dataclass, field

from kubegraph.frame import LazyFrame
from kubegraph.graph.model import GraphData, GraphScope
from kubegraph.problem.metadata import GraphMetadataStandard
from kubegraph.problem.spec import ProblemSpec


@dataclass(frozen=True)
class VirtualProblem:
    """A raw graph and problem refined by an analyzer.

    Attributes:
        analyzer: Registry name of the analyzer that produced this problem.
        scope: Scope of the raw graph.
        graph: Solver-ready edge and node tables.
        problem: Problem with fully-resolved metadata.
        origin: Column names of the raw graph, used when results are
            written back to the store.
    """

    analyzer: str
    scope: GraphScope
    graph: GraphData[LazyFrame]
    problem: ProblemSpec[GraphMetadataStandard]
    origin: GraphMetadataStandard = field(default_factory=GraphMetadataStandard)
