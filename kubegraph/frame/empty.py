"""The no-backend frame sentinel.

`EmptyLazyFrame` stands for "no engine configured". It is the identity of
`concat` and collects to `EmptyDataFrame`; every other operation raises
`SchemaError` so that a missing backend never passes for an empty result.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from kubegraph.errors import SchemaError
from kubegraph.frame.base import DataFrame, LazyFrame, LazySlice


class EmptyDataFrame(DataFrame):
    backend = "empty"

    def is_empty(self) -> bool:
        return True

    @property
    def columns(self) -> List[str]:
        return []

    def __len__(self) -> int:
        return 0

    def lazy(self) -> "EmptyLazyFrame":
        return EmptyLazyFrame()

    def column_values(self, name: str) -> List[Any]:
        raise SchemaError(f"cannot get column from empty dataframe: {name!r}")

    def to_records(self) -> List[Dict[str, Any]]:
        return []

    def with_column(self, name: str, values: Sequence[Any]) -> DataFrame:
        raise SchemaError(f"cannot insert column into empty dataframe: {name!r}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyDataFrame)

    def __hash__(self) -> int:
        return hash(EmptyDataFrame)


class EmptyLazyFrame(LazyFrame):
    backend = "empty"

    def is_empty(self) -> bool:
        return True

    def all(self) -> LazySlice:
        raise SchemaError("cannot get all columns from empty lazyframe")

    def get_column(self, name: str) -> LazySlice:
        raise SchemaError(f"cannot get column from empty lazyframe: {name!r}")

    def columns(self) -> List[str]:
        raise SchemaError("cannot get schema of empty lazyframe")

    def concat(self, other: LazyFrame) -> LazyFrame:
        return other

    def _concat(self, other: LazyFrame) -> LazyFrame:
        return other

    def cast(self, ty, origin, problem) -> LazyFrame:
        return self

    def fabric(self, problem) -> LazyFrame:
        raise SchemaError("cannot get fabric from empty lazyframe")

    def alias(self, key: str, metadata) -> LazyFrame:
        raise SchemaError(f"cannot make an alias to empty lazyframe: {key!r}")

    def insert_column(self, name: str, column: LazySlice) -> LazyFrame:
        raise SchemaError(f"cannot fill column into empty lazyframe: {name!r}")

    def apply_filter(self, predicate: LazySlice) -> LazyFrame:
        raise SchemaError("cannot apply filter into empty lazyframe")

    def fill_column_with_feature(self, name: str, value: bool) -> LazyFrame:
        raise SchemaError(
            f"cannot fill column with feature into empty lazyframe: {name!r}"
        )

    def fill_column_with_value(self, name: str, value: float) -> LazyFrame:
        raise SchemaError(f"cannot fill column with value into empty lazyframe: {name!r}")

    async def collect(self) -> DataFrame:
        return EmptyDataFrame()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyLazyFrame)

    def __hash__(self) -> int:
        return hash(EmptyLazyFrame)

    def __repr__(self) -> str:
        return "EmptyLazyFrame()"
