"""Analyzer contract and registry.

An analyzer refines a raw stored graph and a declared problem into a
`VirtualProblem`. Analysis only builds lazy plans, so it does not suspend,
and it is idempotent: the same inputs give a structurally identical result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, Type

from kubegraph.errors import SchemaError
from kubegraph.graph.db.base import StoredGraph
from kubegraph.graph.model import GraphData
from kubegraph.problem import ProblemSpec, VirtualProblem

#: Registry of analyzers, keyed by configuration name.
ANALYZER_REGISTRY: Dict[str, Type["VirtualProblemAnalyzer"]] = {}


def register_analyzer(name: str):
    """Return a class decorator adding a `VirtualProblemAnalyzer` to the registry."""

    def decorator(cls: Type["VirtualProblemAnalyzer"]) -> Type["VirtualProblemAnalyzer"]:
        cls.name = name
        ANALYZER_REGISTRY[name] = cls
        return cls

    return decorator


class VirtualProblemAnalyzer(ABC):
    name: ClassVar[str] = ""

    @abstractmethod
    def analyze(self, graph: StoredGraph, problem: ProblemSpec) -> VirtualProblem:
        """Return the solver-ready refinement of `graph` under `problem`.

        Raises:
            SchemaError: If a required role is unmapped or a required column
                is missing.
        """

    @staticmethod
    def graph_data(graph: StoredGraph) -> GraphData:
        if not isinstance(graph.data, GraphData):
            raise SchemaError(
                f"graph {graph.scope} does not hold edge and node tables"
            )
        return graph.data.lazy()
