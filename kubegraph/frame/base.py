"""Backend-neutral lazy frame and column-expression interfaces.

`LazyFrame` describes a deferred columnar computation. Every plan-building
method is synchronous and returns a new frame; only `collect()` suspends and
materializes into a `DataFrame`. Concrete engines subclass these interfaces
once each, and `kubegraph.frame.empty` provides the no-backend sentinel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Mapping, Sequence, Tuple

from kubegraph.errors import BackendMismatchError, SchemaError
from kubegraph.types.base import NUMERIC_ROLES, GraphDataType

if TYPE_CHECKING:
    from kubegraph.problem.metadata import FunctionMetadata, GraphMetadataStandard
    from kubegraph.problem.spec import ProblemSpec

#: Python scalars that are lifted to literals by slice operators.
_SCALARS = (bool, int, float, str)


class LazySlice(ABC):
    """A lazy column expression bound to one engine.

    Python scalars on either side of an operator are lifted to literals.
    Combining slices of two engines raises `BackendMismatchError`.
    """

    backend: ClassVar[str] = ""

    def __init__(self, expr: Any) -> None:
        self._expr = expr

    @property
    def expr(self) -> Any:
        """The engine-native expression."""
        return self._expr

    @classmethod
    @abstractmethod
    def literal(cls, value: Any) -> "LazySlice":
        """Return a slice evaluating to the constant `value`."""

    def _operand(self, other: Any) -> Any:
        if isinstance(other, LazySlice):
            if other.backend != self.backend:
                raise BackendMismatchError(
                    f"cannot combine {self.backend} slice with {other.backend} slice"
                )
            return other.expr
        if isinstance(other, _SCALARS):
            return self.literal(other).expr
        raise TypeError(f"unsupported slice operand: {type(other).__name__}")

    def _wrap(self, expr: Any) -> "LazySlice":
        return type(self)(expr)

    def __add__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr + self._operand(other))

    def __radd__(self, other: Any) -> "LazySlice":
        return self._wrap(self._operand(other) + self._expr)

    def __sub__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr - self._operand(other))

    def __rsub__(self, other: Any) -> "LazySlice":
        return self._wrap(self._operand(other) - self._expr)

    def __mul__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr * self._operand(other))

    def __rmul__(self, other: Any) -> "LazySlice":
        return self._wrap(self._operand(other) * self._expr)

    def __truediv__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr / self._operand(other))

    def __rtruediv__(self, other: Any) -> "LazySlice":
        return self._wrap(self._operand(other) / self._expr)

    def __eq__(self, other: Any) -> "LazySlice":  # type: ignore[override]
        return self._wrap(self._expr == self._operand(other))

    def __ne__(self, other: Any) -> "LazySlice":  # type: ignore[override]
        return self._wrap(self._expr != self._operand(other))

    def __ge__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr >= self._operand(other))

    def __gt__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr > self._operand(other))

    def __le__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr <= self._operand(other))

    def __lt__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr < self._operand(other))

    def __and__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr & self._operand(other))

    def __or__(self, other: Any) -> "LazySlice":
        return self._wrap(self._expr | self._operand(other))

    def __neg__(self) -> "LazySlice":
        return self._wrap(-self._expr)

    def __invert__(self) -> "LazySlice":
        return self._wrap(~self._expr)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._expr!r})"


class DataFrame(ABC):
    """A materialized table produced by `LazyFrame.collect()`."""

    backend: ClassVar[str] = ""

    def is_empty(self) -> bool:
        """True only for the no-backend sentinel, not for zero-row tables."""
        return False

    @property
    @abstractmethod
    def columns(self) -> List[str]: ...

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def lazy(self) -> "LazyFrame": ...

    @abstractmethod
    def column_values(self, name: str) -> List[Any]:
        """Return a column as a list of Python values.

        Raises:
            SchemaError: If the column does not exist.
        """

    @abstractmethod
    def to_records(self) -> List[Dict[str, Any]]: ...

    @abstractmethod
    def with_column(self, name: str, values: Sequence[Any]) -> "DataFrame":
        """Return a copy with column `name` set to `values` (one per row)."""

    def require_columns(self, names: Sequence[str], what: str) -> None:
        """Raise `SchemaError` naming every column of `names` missing from `what`."""
        missing = [name for name in names if name not in self.columns]
        if missing:
            raise SchemaError(
                f"{what} table is missing required column(s): {', '.join(missing)}"
            )


class LazyFrame(ABC):
    """Deferred columnar computation over rows.

    Concrete engines implement the abstract methods. The `Empty` sentinel
    fails loudly on every operation except `concat` (identity element) and
    `collect` (yields an empty `DataFrame`).
    """

    backend: ClassVar[str] = ""

    def is_empty(self) -> bool:
        return False

    # ---- selectors -------------------------------------------------------
    @abstractmethod
    def all(self) -> LazySlice:
        """Return a slice selecting every column."""

    @abstractmethod
    def get_column(self, name: str) -> LazySlice:
        """Return a slice referencing column `name`."""

    @abstractmethod
    def columns(self) -> List[str]:
        """Return the output column names of the plan without running it."""

    # ---- plan builders ---------------------------------------------------
    def concat(self, other: "LazyFrame") -> "LazyFrame":
        """Return the row-wise union of both frames.

        `Empty` is the identity element on either side. Two concrete frames
        must share one engine.
        """
        if other.is_empty():
            return self
        if type(other) is not type(self):
            raise BackendMismatchError(
                f"cannot concat {self.backend} frame with {other.backend} frame"
            )
        return self._concat(other)

    @abstractmethod
    def _concat(self, other: "LazyFrame") -> "LazyFrame": ...

    @abstractmethod
    def cast(
        self,
        ty: GraphDataType,
        origin: "GraphMetadataStandard",
        problem: "ProblemSpec[GraphMetadataStandard]",
    ) -> "LazyFrame":
        """Rename role columns to `problem` names and cast numeric roles to ints."""

    @abstractmethod
    def fabric(self, problem: "ProblemSpec[GraphMetadataStandard]") -> "LazyFrame":
        """Cross the node set with itself into candidate edges.

        One row per ``(src, sink)`` pair including self-pairs. The node name
        column becomes the ``src``/``sink`` columns, all other node columns
        are carried under ``"<src>."``/``"<sink>."`` prefixes, and the
        capacity column is filled with `MAX_CAPACITY`.
        """

    @abstractmethod
    def alias(self, key: str, metadata: "FunctionMetadata") -> "LazyFrame":
        """Add literal column `key` holding the function name of `metadata`."""

    @abstractmethod
    def insert_column(self, name: str, column: LazySlice) -> "LazyFrame": ...

    @abstractmethod
    def apply_filter(self, predicate: LazySlice) -> "LazyFrame": ...

    @abstractmethod
    def fill_column_with_feature(self, name: str, value: bool) -> "LazyFrame": ...

    @abstractmethod
    def fill_column_with_value(self, name: str, value: float) -> "LazyFrame":
        """Fill column `name` with `value` rounded to a 64-bit integer."""

    # ---- execution -------------------------------------------------------
    @abstractmethod
    async def collect(self) -> DataFrame:
        """Run the plan and return the materialized table."""

    # ---- helpers for engines ---------------------------------------------
    def _slice_expr(self, column: LazySlice) -> Any:
        if not isinstance(column, LazySlice) or column.backend != self.backend:
            other = getattr(column, "backend", type(column).__name__)
            raise BackendMismatchError(
                f"cannot apply {other} slice to {self.backend} frame"
            )
        return column.expr

    def _cast_plan(
        self,
        ty: GraphDataType,
        origin: "GraphMetadataStandard",
        problem: "ProblemSpec[GraphMetadataStandard]",
    ) -> Tuple[Dict[str, str], List[str]]:
        """Return ``(renames, int_columns)`` for the columns present in this frame."""
        present = set(self.columns())
        source: Mapping[str, str] = origin.role_columns(ty)
        target: Mapping[str, str] = problem.metadata.role_columns(ty)

        renames: Dict[str, str] = {}
        int_columns: List[str] = []
        for role, column in source.items():
            if column not in present:
                continue
            renamed = target[role]
            if renamed != column:
                renames[column] = renamed
            if role in NUMERIC_ROLES:
                int_columns.append(renamed)
        return renames, int_columns

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"
