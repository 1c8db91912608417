"""polars engine for lazy frames, wrapping `pl.LazyFrame` and `pl.Expr`."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence, Union

import polars as pl

from kubegraph.errors import SchemaError
from kubegraph.frame.base import DataFrame, LazyFrame, LazySlice
from kubegraph.logging import get_logger
from kubegraph.types.base import MAX_CAPACITY

logger = get_logger(__name__)

#: Engine errors raised by plans that do not fit their data.
_PLAN_ERRORS = (
    pl.exceptions.ColumnNotFoundError,
    pl.exceptions.ComputeError,
    pl.exceptions.InvalidOperationError,
    pl.exceptions.SchemaError,
)


class PolarsSlice(LazySlice):
    backend = "polars"

    @classmethod
    def literal(cls, value: Any) -> "PolarsSlice":
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return cls(pl.lit(value))


class PolarsDataFrame(DataFrame):
    backend = "polars"

    def __init__(self, df: pl.DataFrame) -> None:
        self._df = df

    @property
    def df(self) -> pl.DataFrame:
        return self._df

    @property
    def columns(self) -> List[str]:
        return list(self._df.columns)

    def __len__(self) -> int:
        return self._df.height

    def lazy(self) -> "PolarsLazyFrame":
        return PolarsLazyFrame(self._df.lazy())

    def column_values(self, name: str) -> List[Any]:
        if name not in self._df.columns:
            raise SchemaError(f"no such column: {name!r}")
        return self._df.get_column(name).to_list()

    def to_records(self) -> List[Dict[str, Any]]:
        return self._df.to_dicts()

    def with_column(self, name: str, values: Sequence[Any]) -> "PolarsDataFrame":
        return PolarsDataFrame(self._df.with_columns(pl.Series(name, list(values))))

    def __repr__(self) -> str:
        return f"PolarsDataFrame(rows={len(self)}, columns={self.columns})"


class PolarsLazyFrame(LazyFrame):
    backend = "polars"

    def __init__(self, lf: pl.LazyFrame) -> None:
        self._lf = lf

    @classmethod
    def from_polars(cls, df: Union[pl.DataFrame, pl.LazyFrame]) -> "PolarsLazyFrame":
        if isinstance(df, pl.DataFrame):
            df = df.lazy()
        return cls(df)

    @property
    def lf(self) -> pl.LazyFrame:
        return self._lf

    def all(self) -> PolarsSlice:
        return PolarsSlice(pl.all())

    def get_column(self, name: str) -> PolarsSlice:
        return PolarsSlice(pl.col(name))

    def columns(self) -> List[str]:
        try:
            return self._lf.collect_schema().names()
        except _PLAN_ERRORS as exc:
            raise SchemaError(f"invalid polars plan: {exc}") from exc

    def _concat(self, other: LazyFrame) -> "PolarsLazyFrame":
        assert isinstance(other, PolarsLazyFrame)
        return PolarsLazyFrame(pl.concat([self._lf, other._lf], how="diagonal"))

    def cast(self, ty, origin, problem) -> "PolarsLazyFrame":
        renames, int_columns = self._cast_plan(ty, origin, problem)
        lf = self._lf.rename(renames) if renames else self._lf
        if int_columns:
            lf = lf.with_columns([pl.col(c).cast(pl.Int64) for c in int_columns])
        return PolarsLazyFrame(lf)

    def fabric(self, problem) -> "PolarsLazyFrame":
        metadata = problem.metadata
        name = metadata.name
        if name not in self.columns():
            raise SchemaError(f"cannot get fabric without node name column: {name!r}")

        def side(prefix: str) -> pl.LazyFrame:
            return self._lf.select(
                pl.col(name).alias(prefix),
                pl.all().exclude(name).name.prefix(f"{prefix}."),
            )

        return PolarsLazyFrame(
            side(metadata.src)
            .join(side(metadata.sink), how="cross")
            .with_columns(pl.lit(MAX_CAPACITY, dtype=pl.Int64).alias(metadata.capacity))
        )

    def alias(self, key: str, metadata) -> "PolarsLazyFrame":
        return PolarsLazyFrame(self._lf.with_columns(pl.lit(metadata.name).alias(key)))

    def insert_column(self, name: str, column: LazySlice) -> "PolarsLazyFrame":
        expr = self._slice_expr(column)
        return PolarsLazyFrame(self._lf.with_columns(expr.alias(name)))

    def apply_filter(self, predicate: LazySlice) -> "PolarsLazyFrame":
        expr = self._slice_expr(predicate)
        return PolarsLazyFrame(self._lf.filter(expr))

    def fill_column_with_feature(self, name: str, value: bool) -> "PolarsLazyFrame":
        return PolarsLazyFrame(self._lf.with_columns(pl.lit(bool(value)).alias(name)))

    def fill_column_with_value(self, name: str, value: float) -> "PolarsLazyFrame":
        literal = pl.lit(int(round(value)), dtype=pl.Int64)
        return PolarsLazyFrame(self._lf.with_columns(literal.alias(name)))

    async def collect(self) -> PolarsDataFrame:
        try:
            df = await asyncio.to_thread(self._lf.collect)
        except _PLAN_ERRORS as exc:
            raise SchemaError(f"failed to collect polars dataframe: {exc}") from exc
        logger.debug("Collected polars frame: rows=%d", df.height)
        return PolarsDataFrame(df)
