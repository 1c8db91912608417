"""Reference min-cost-flow solver on `networkx.network_simplex`.

Model:
    * every node ``i`` has demand ``-supply_i``;
    * a terminal vertex demands ``sum(supply)`` and is reached from each
      node ``i`` through an arc of capacity ``capacity_i`` and weight
      ``unit_cost_i`` (what it costs to keep a unit at ``i``);
    * every edge row becomes an arc with its capacity and unit cost.

Flow on the node -> terminal arcs is what each node keeps; flow on edge arcs
is the answer. Self-loop rows carry no flow.

Tie-break: arcs are added in node-table order followed by edge-table row
order; among equal-cost optima the network simplex result for that order is
returned, so identical inputs always give identical flows.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List

import networkx as nx

from kubegraph.errors import InfeasibleProblemError, SchemaError
from kubegraph.frame import DataFrame
from kubegraph.graph.model import GraphData
from kubegraph.logging import get_logger
from kubegraph.problem import GraphMetadataStandard, ProblemSpec
from kubegraph.solver.base import NetworkSolver, int_column, register_solver

logger = get_logger(__name__)


@dataclass(frozen=True)
class FlowSolution:
    """Flow per edge row plus the objective value."""

    flows: List[int]
    total_cost: int
    transport_cost: int


@register_solver("networkx")
class NetworkxSolver(NetworkSolver):
    """Min-cost flow via network simplex."""

    async def solve(self, graph, problem):
        problem = problem.resolve()
        data = await graph.lazy().collect()
        if data.edges.is_empty() or data.nodes.is_empty():
            raise SchemaError("cannot solve a graph with an empty edges or nodes frame")

        solution = await asyncio.to_thread(
            optimize, data.edges, data.nodes, problem
        )
        edges = data.edges.with_column(problem.metadata.flow, solution.flows)
        return GraphData(edges=edges.lazy(), nodes=data.nodes.lazy())


def optimize(
    edges: DataFrame,
    nodes: DataFrame,
    problem: ProblemSpec[GraphMetadataStandard],
) -> FlowSolution:
    """Validate both tables and solve the min-cost flow.

    Raises:
        SchemaError: On missing columns, duplicate or unknown nodes, or
            negative capacities/supplies.
        InfeasibleProblemError: If supply cannot be absorbed.
    """
    metadata = problem.metadata
    nodes.require_columns(
        [metadata.name, metadata.capacity, metadata.supply, metadata.unit_cost], "node"
    )
    edges.require_columns(
        [metadata.src, metadata.sink, metadata.capacity, metadata.unit_cost], "edge"
    )

    names = nodes.column_values(metadata.name)
    node_capacity = int_column(nodes, metadata.capacity, "node")
    node_supply = int_column(nodes, metadata.supply, "node")
    node_cost = int_column(nodes, metadata.unit_cost, "node")

    index: Dict[Any, int] = {}
    for i, name in enumerate(names):
        if name in index:
            raise SchemaError(f"duplicate node name: {name!r}")
        index[name] = i
        if node_capacity[i] < 0:
            raise SchemaError(f"node {name!r} has negative capacity {node_capacity[i]}")
        if node_supply[i] < 0:
            raise SchemaError(f"node {name!r} has negative supply {node_supply[i]}")

    srcs = edges.column_values(metadata.src)
    sinks = edges.column_values(metadata.sink)
    edge_capacity = int_column(edges, metadata.capacity, "edge")
    edge_cost = int_column(edges, metadata.unit_cost, "edge")
    for row, (src, sink) in enumerate(zip(srcs, sinks)):
        for role, value in ((metadata.src, src), (metadata.sink, sink)):
            if value not in index:
                raise SchemaError(f"edge row {row}: unknown {role} node {value!r}")
        if edge_capacity[row] < 0:
            raise SchemaError(
                f"edge row {row} ({src!r} -> {sink!r}) has negative capacity "
                f"{edge_capacity[row]}"
            )

    total_supply = sum(node_supply)
    total_capacity = sum(node_capacity)
    if total_supply > total_capacity:
        raise InfeasibleProblemError(
            f"total node capacity {total_capacity} cannot absorb total supply "
            f"{total_supply}"
        )

    terminal = len(names)
    flow_graph = nx.MultiDiGraph()
    for i in range(len(names)):
        flow_graph.add_node(i, demand=-node_supply[i])
    flow_graph.add_node(terminal, demand=total_supply)
    for i in range(len(names)):
        flow_graph.add_edge(
            i, terminal, key=("keep", i), capacity=node_capacity[i], weight=node_cost[i]
        )
    for row, (src, sink) in enumerate(zip(srcs, sinks)):
        u, v = index[src], index[sink]
        if u == v:
            continue
        flow_graph.add_edge(
            u, v, key=row, capacity=edge_capacity[row], weight=edge_cost[row]
        )

    logger.debug(
        "Solving min-cost flow: nodes=%d, edges=%d, supply=%d",
        len(names),
        len(srcs),
        total_supply,
    )
    try:
        total_cost, flow_dict = nx.network_simplex(flow_graph)
    except nx.NetworkXUnfeasible as exc:
        raise InfeasibleProblemError(
            f"no flow moves all supply {total_supply} within capacities: {exc}"
        ) from exc

    flows = [0] * len(srcs)
    for row, (src, sink) in enumerate(zip(srcs, sinks)):
        u, v = index[src], index[sink]
        if u != v:
            flows[row] = int(flow_dict[u][v][row])
    transport_cost = sum(flow * cost for flow, cost in zip(flows, edge_cost))

    if problem.verbose:
        logger.info(
            "Solved min-cost flow: total_cost=%d, transport_cost=%d, moved=%d",
            total_cost,
            transport_cost,
            sum(flows),
        )
    return FlowSolution(
        flows=flows, total_cost=int(total_cost), transport_cost=transport_cost
    )
