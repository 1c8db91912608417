"""Graph store contract and backends."""

from kubegraph.graph.db.base import (
    GRAPH_DB_REGISTRY,
    NetworkGraphDB,
    ScopedNetworkGraphDB,
    StoredGraph,
    register_graph_db,
)
from kubegraph.graph.db.memory import MemoryNetworkGraphDB

__all__ = [
    "GRAPH_DB_REGISTRY",
    "MemoryNetworkGraphDB",
    "NetworkGraphDB",
    "ScopedNetworkGraphDB",
    "StoredGraph",
    "register_graph_db",
]
