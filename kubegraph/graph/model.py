"""Content-addressed graph rows and scoped graphs.

An edge observation is keyed by `EdgeKey` (interval plus link/sink/src node
keys) and carries a non-negative integer weight. `GraphRow.new()` derives the
row id from the key alone:

    id = sha256(canonical_json(key)).hexdigest()

The canonical JSON is compact UTF-8 with this frozen field order, each node
key flattened under its role prefix::

    le, link_kind, link_name, link_namespace,
        sink_kind, sink_name, sink_namespace,
        src_kind, src_name, src_namespace

Changing that form changes every id, so it must not drift.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    TypeVar,
)

from kubegraph.errors import SchemaError
from kubegraph.frame import EmptyLazyFrame, LazyFrame, from_records

#: Role prefixes used when node keys are flattened into one record.
EDGE_ROLE_PREFIXES = ("link", "sink", "src")


class SerializableNodeKey(Protocol):
    """Node keys usable inside `EdgeKey`: ordered and flattenable."""

    def to_record(self) -> Dict[str, Any]: ...

    def __lt__(self, other: Any) -> bool: ...


K = TypeVar("K", bound=SerializableNodeKey)
F = TypeVar("F")


@dataclass(frozen=True, order=True)
class NodeKey:
    """Identity of a resource node; ordered by ``(kind, name, namespace)``."""

    kind: str
    name: str
    namespace: str

    def to_record(self) -> Dict[str, Any]:
        return {"kind": self.kind, "name": self.name, "namespace": self.namespace}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "NodeKey":
        return cls(
            kind=str(record["kind"]),
            name=str(record["name"]),
            namespace=str(record["namespace"]),
        )

    def __str__(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"


@dataclass(frozen=True, order=True)
class EdgeKey(Generic[K]):
    """Key of one observed edge.

    Ordered field-wise in declaration order so stores can iterate
    deterministically.
    """

    interval_ms: int
    link: K
    sink: K
    src: K

    def to_record(self) -> Dict[str, Any]:
        """Flatten into the wire layout (``le`` then role-prefixed node fields)."""
        record: Dict[str, Any] = {"le": self.interval_ms}
        for role in EDGE_ROLE_PREFIXES:
            node: SerializableNodeKey = getattr(self, role)
            for name, value in node.to_record().items():
                record[f"{role}_{name}"] = value
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EdgeKey[NodeKey]":
        def node(role: str) -> NodeKey:
            prefix = f"{role}_"
            return NodeKey.from_record(
                {
                    key[len(prefix) :]: value
                    for key, value in record.items()
                    if key.startswith(prefix)
                }
            )

        try:
            return cls(
                interval_ms=int(record["le"]),
                link=node("link"),
                sink=node("sink"),
                src=node("src"),
            )
        except KeyError as exc:
            raise SchemaError(f"edge key record is missing field {exc}") from exc

    def canonical_bytes(self) -> bytes:
        return json.dumps(
            self.to_record(), ensure_ascii=False, separators=(",", ":")
        ).encode("utf-8")

    def digest(self) -> str:
        """Return the 64-character hex content address of this key."""
        return hashlib.sha256(self.canonical_bytes()).hexdigest()


#: Observed edge weight (e.g. traffic count); never negative.
EdgeValue = int


@dataclass(frozen=True)
class GraphRow(Generic[K]):
    """Immutable edge observation addressed by the hash of its key."""

    id: str
    key: EdgeKey[K]
    value: EdgeValue

    @classmethod
    def new(cls, key: EdgeKey[K], value: EdgeValue) -> "GraphRow[K]":
        """Create a row, deriving `id` from `key`.

        Raises:
            ValueError: If `value` is negative or not an integer.
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"edge value must be a non-negative integer, got {value!r}")
        return cls(id=key.digest(), key=key, value=value)

    def to_record(self) -> Dict[str, Any]:
        return {"id": self.id, **self.key.to_record(), "value": self.value}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "GraphRow[NodeKey]":
        """Parse a wire record.

        Raises:
            SchemaError: If fields are missing or `id` does not address the key.
        """
        try:
            value = record["value"]
        except KeyError:
            raise SchemaError("graph row record is missing field 'value'") from None
        row = cls.new(EdgeKey.from_record(record), int(value))
        if "id" in record and record["id"] != row.id:
            raise SchemaError(
                f"graph row id {record['id']!r} does not match its key ({row.id})"
            )
        return row


def rows_to_frame(rows: Iterable[GraphRow], backend: str = "pandas") -> LazyFrame:
    """Return a lazy frame of `rows` in wire layout, one record per row."""
    return from_records((row.to_record() for row in rows), backend=backend)


@dataclass(frozen=True, order=True)
class GraphScope:
    """Names one logical graph instance."""

    kind: str
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"


ScopePredicate = Callable[[GraphScope], bool]


@dataclass(frozen=True)
class GraphFilter:
    """Scope predicate; ``None`` fields match any value."""

    kind: Optional[str] = None
    namespace: Optional[str] = None
    name: Optional[str] = None

    def contains(self, scope: GraphScope) -> bool:
        return (
            (self.kind is None or self.kind == scope.kind)
            and (self.namespace is None or self.namespace == scope.namespace)
            and (self.name is None or self.name == scope.name)
        )

    def __call__(self, scope: GraphScope) -> bool:
        return self.contains(scope)


@dataclass(frozen=True)
class GraphData(Generic[F]):
    """Edge and node tables of one graph."""

    edges: F
    nodes: F

    @classmethod
    def empty(cls) -> "GraphData[LazyFrame]":
        return cls(edges=EmptyLazyFrame(), nodes=EmptyLazyFrame())

    async def collect(self) -> "GraphData[Any]":
        """Materialize both tables (lazy frames only)."""
        return GraphData(
            edges=await self.edges.collect(), nodes=await self.nodes.collect()
        )

    def lazy(self) -> "GraphData[LazyFrame]":
        """Return lazy views of both tables, materialized or not."""
        return GraphData(edges=_as_lazy(self.edges), nodes=_as_lazy(self.nodes))


def _as_lazy(frame: Any) -> LazyFrame:
    return frame if isinstance(frame, LazyFrame) else frame.lazy()


@dataclass(frozen=True)
class Graph(Generic[F]):
    """A graph payload bound to its scope."""

    scope: GraphScope
    data: F = field(default_factory=GraphData.empty)  # type: ignore[arg-type]

    def clone(self) -> "Graph[F]":
        """Return a copy sharing no mutable state (frames are immutable plans)."""
        return replace(self)

