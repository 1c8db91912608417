"""In-memory graph store.

Writers serialize on an `asyncio.Lock` and publish a new scope map by
swapping a single reference, so readers never take the lock and never see a
half-applied insert.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from kubegraph.errors import StoreError
from kubegraph.graph.db.base import (
    NetworkGraphDB,
    StoredGraph,
    register_graph_db,
)
from kubegraph.graph.model import Graph, GraphScope, ScopePredicate
from kubegraph.logging import get_logger

logger = get_logger(__name__)


@register_graph_db("memory")
class MemoryNetworkGraphDB(NetworkGraphDB):
    def __init__(self) -> None:
        self._map: Dict[GraphScope, StoredGraph] = {}
        self._write_lock = asyncio.Lock()
        self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError("in-memory graph db is closed")

    async def get(self, scope: GraphScope) -> Optional[StoredGraph]:
        self._ensure_open()
        graph = self._map.get(scope)
        logger.debug("get %s: %s", scope, "hit" if graph is not None else "miss")
        return graph.clone() if graph is not None else None

    async def insert(self, graph: StoredGraph) -> None:
        self._ensure_open()
        if not isinstance(graph, Graph) or not isinstance(graph.scope, GraphScope):
            raise StoreError(f"cannot store {type(graph).__name__} as a scoped graph")
        async with self._write_lock:
            updated = dict(self._map)
            updated[graph.scope] = graph.clone()
            self._map = updated
        logger.debug("insert %s", graph.scope)

    async def list(self, filter: Optional[ScopePredicate] = None) -> List[StoredGraph]:
        self._ensure_open()
        snapshot = self._map
        return [
            snapshot[scope].clone()
            for scope in sorted(snapshot)
            if filter is None or filter(scope)
        ]

    async def close(self) -> None:
        if self._closed:
            return
        logger.info("Closing in-memory graph db...")
        self._closed = True

    def __len__(self) -> int:
        return len(self._map)
