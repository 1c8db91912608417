"""Runner applying flow decisions to an external target system."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from kubegraph.graph.db.base import ScopedNetworkGraphDB
from kubegraph.graph.model import GraphData, GraphScope
from kubegraph.logging import get_logger
from kubegraph.problem import GraphMetadataStandard, ProblemSpec
from kubegraph.runner.base import NetworkRunner, register_runner
from kubegraph.solver.base import int_column

logger = get_logger(__name__)


@dataclass(frozen=True)
class FlowAction:
    """Move `flow` units from node `src` to node `sink`."""

    src: Any
    sink: Any
    flow: int


class TargetSystem(ABC):
    """The system that realizes flow decisions (scaling, rerouting, ...)."""

    @abstractmethod
    async def apply(self, scope: GraphScope, actions: Sequence[FlowAction]) -> None: ...


class LoggingTargetSystem(TargetSystem):
    """Target that only reports the actions it receives."""

    async def apply(self, scope: GraphScope, actions: Sequence[FlowAction]) -> None:
        for action in actions:
            logger.info(
                "%s: move %d unit(s) %s -> %s", scope, action.flow, action.src, action.sink
            )


@register_runner("live")
class LiveNetworkRunner(NetworkRunner):
    """Hand every positive edge flow to the target system as a `FlowAction`."""

    def __init__(self, target: Optional[TargetSystem] = None) -> None:
        self.target = target or LoggingTargetSystem()

    async def run(
        self,
        graph_db: ScopedNetworkGraphDB,
        graph: GraphData[Any],
        problem: ProblemSpec[GraphMetadataStandard],
        origin: GraphMetadataStandard,
    ) -> None:
        metadata = problem.metadata
        edges = await graph.lazy().edges.collect()
        edges.require_columns([metadata.src, metadata.sink, metadata.flow], "edge")

        actions: List[FlowAction] = [
            FlowAction(src=src, sink=sink, flow=flow)
            for src, sink, flow in zip(
                edges.column_values(metadata.src),
                edges.column_values(metadata.sink),
                int_column(edges, metadata.flow, "edge"),
            )
            if flow > 0
        ]
        logger.debug("Applying %d action(s) on %s", len(actions), graph_db.scope)
        await self.target.apply(graph_db.scope, actions)
