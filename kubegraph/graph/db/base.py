"""Graph store contract.

Every backend keeps the latest `Graph` per `GraphScope`. Implementations must
make `insert` atomic per scope and `get`/`list` linearizable with respect to
completed inserts. Callers always receive clones, never live store state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from kubegraph.frame import LazyFrame
from kubegraph.graph.model import Graph, GraphData, GraphScope, ScopePredicate

#: Registry of graph store backends, keyed by configuration name.
GRAPH_DB_REGISTRY: Dict[str, Type["NetworkGraphDB"]] = {}

StoredGraph = Graph[GraphData[LazyFrame]]


def register_graph_db(name: str):
    """Return a class decorator adding a `NetworkGraphDB` to the registry."""

    def decorator(cls: Type["NetworkGraphDB"]) -> Type["NetworkGraphDB"]:
        GRAPH_DB_REGISTRY[name] = cls
        return cls

    return decorator


class NetworkGraphDB(ABC):
    """Concurrent scoped storage of named graphs."""

    @abstractmethod
    async def get(self, scope: GraphScope) -> Optional[StoredGraph]:
        """Return a clone of the graph stored for `scope`, or None."""

    @abstractmethod
    async def insert(self, graph: StoredGraph) -> None:
        """Store `graph` under its scope, replacing any previous graph.

        Raises:
            StoreError: On backend failure; the previous graph stays intact.
        """

    @abstractmethod
    async def list(self, filter: Optional[ScopePredicate] = None) -> List[StoredGraph]:
        """Return clones of all graphs whose scope satisfies `filter`."""

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources (flush for durable backends)."""

    def scoped(self, scope: GraphScope) -> "ScopedNetworkGraphDB":
        return ScopedNetworkGraphDB(self, scope)


class ScopedNetworkGraphDB:
    """A store view bound to a single scope, handed to runners."""

    def __init__(self, db: NetworkGraphDB, scope: GraphScope) -> None:
        self._db = db
        self._scope = scope

    @property
    def scope(self) -> GraphScope:
        return self._scope

    async def get(self) -> Optional[StoredGraph]:
        return await self._db.get(self._scope)

    async def insert(self, data: GraphData[LazyFrame]) -> None:
        await self._db.insert(Graph(scope=self._scope, data=data))

    def __repr__(self) -> str:
        return f"ScopedNetworkGraphDB(scope={self._scope})"
