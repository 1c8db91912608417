"""Runner contract and registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Type

from kubegraph.errors import EmptyGraphError
from kubegraph.graph.db.base import ScopedNetworkGraphDB
from kubegraph.graph.model import GraphData
from kubegraph.problem import GraphMetadataStandard, ProblemSpec

#: Registry of runners, keyed by configuration name.
RUNNER_REGISTRY: Dict[str, Type["NetworkRunner"]] = {}


def register_runner(name: str):
    """Return a class decorator adding a `NetworkRunner` to the registry."""

    def decorator(cls: Type["NetworkRunner"]) -> Type["NetworkRunner"]:
        cls.name = name
        RUNNER_REGISTRY[name] = cls
        return cls

    return decorator


class NetworkRunner(ABC):
    """Apply or simulate a solved graph."""

    name: ClassVar[str] = ""

    async def execute(
        self,
        graph_db: ScopedNetworkGraphDB,
        graph: GraphData[Any],
        problem: ProblemSpec[GraphMetadataStandard],
        origin: Optional[GraphMetadataStandard] = None,
    ) -> None:
        """Run the solved `graph`.

        Args:
            origin: Column names to use for tables written back to the
                store. Defaults to the names of `problem`.

        Raises:
            EmptyGraphError: If the edges or nodes frame is the empty sentinel.
        """
        if graph.edges.is_empty() or graph.nodes.is_empty():
            raise EmptyGraphError(
                f"cannot execute {self.name or type(self).__name__} runner "
                f"with empty graph on {graph_db.scope}"
            )
        problem = problem.resolve()
        await self.run(graph_db, graph, problem, origin or problem.metadata)

    @abstractmethod
    async def run(
        self,
        graph_db: ScopedNetworkGraphDB,
        graph: GraphData[Any],
        problem: ProblemSpec[GraphMetadataStandard],
        origin: GraphMetadataStandard,
    ) -> None:
        """Runner-specific execution over a non-empty graph."""
