"""Graph data model and graph stores."""

from kubegraph.graph.model import (
    EdgeKey,
    EdgeValue,
    Graph,
    GraphData,
    GraphFilter,
    GraphRow,
    GraphScope,
    NodeKey,
    ScopePredicate,
    rows_to_frame,
)

__all__ = [
    "EdgeKey",
    "EdgeValue",
    "Graph",
    "GraphData",
    "GraphFilter",
    "GraphRow",
    "GraphScope",
    "NodeKey",
    "ScopePredicate",
    "rows_to_frame",
]
