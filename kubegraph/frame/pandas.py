"""pandas engine for lazy frames.

pandas executes eagerly, so the lazy frame records a small plan tree
(`_Scan`, `_Concat`, `_CrossJoin`, `_Map`) and runs it on `collect()`.
Schema queries run the same plan over zero-row inputs.
"""

from __future__ import annotations

import asyncio
import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

import numpy as np
import pandas as pd

from kubegraph.errors import SchemaError
from kubegraph.frame.base import DataFrame, LazyFrame, LazySlice
from kubegraph.logging import get_logger
from kubegraph.types.base import MAX_CAPACITY

logger = get_logger(__name__)


class PandasExpr:
    """Deferred column expression: a function of the input `pd.DataFrame`.

    Evaluates to a `pd.Series`, a whole frame (`all()`), or a scalar for
    literals. Scalars broadcast when combined with series.
    """

    def __init__(self, fn: Callable[[pd.DataFrame], Any], label: str) -> None:
        self._fn = fn
        self.label = label

    @classmethod
    def col(cls, name: str) -> "PandasExpr":
        def select(df: pd.DataFrame) -> pd.Series:
            if name not in df.columns:
                raise SchemaError(f"no such column: {name!r}")
            return df[name]

        return cls(select, f"col({name!r})")

    @classmethod
    def lit(cls, value: Any) -> "PandasExpr":
        return cls(lambda _df: value, f"lit({value!r})")

    @classmethod
    def all(cls) -> "PandasExpr":
        return cls(lambda df: df, "all()")

    def evaluate(self, df: pd.DataFrame) -> Any:
        return self._fn(df)

    def _binary(self, op: Callable[[Any, Any], Any], other: "PandasExpr", symbol: str):
        return PandasExpr(
            lambda df: op(self.evaluate(df), other.evaluate(df)),
            f"({self.label} {symbol} {other.label})",
        )

    def _unary(self, op: Callable[[Any], Any], symbol: str) -> "PandasExpr":
        return PandasExpr(lambda df: op(self.evaluate(df)), f"{symbol}{self.label}")

    def __add__(self, other):
        return self._binary(operator.add, other, "+")

    def __sub__(self, other):
        return self._binary(operator.sub, other, "-")

    def __mul__(self, other):
        return self._binary(operator.mul, other, "*")

    def __truediv__(self, other):
        return self._binary(operator.truediv, other, "/")

    def __eq__(self, other):  # type: ignore[override]
        return self._binary(operator.eq, other, "==")

    def __ne__(self, other):  # type: ignore[override]
        return self._binary(operator.ne, other, "!=")

    def __ge__(self, other):
        return self._binary(operator.ge, other, ">=")

    def __gt__(self, other):
        return self._binary(operator.gt, other, ">")

    def __le__(self, other):
        return self._binary(operator.le, other, "<=")

    def __lt__(self, other):
        return self._binary(operator.lt, other, "<")

    def __and__(self, other):
        return self._binary(operator.and_, other, "&")

    def __or__(self, other):
        return self._binary(operator.or_, other, "|")

    def __neg__(self):
        return self._unary(operator.neg, "-")

    def __invert__(self):
        return self._unary(_invert, "~")

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return self.label


def _invert(value: Any) -> Any:
    # ``~True`` is ``-2`` for Python bools
    if isinstance(value, (bool, np.bool_)):
        return not value
    return ~value


class PandasSlice(LazySlice):
    backend = "pandas"

    @classmethod
    def literal(cls, value: Any) -> "PandasSlice":
        return cls(PandasExpr.lit(value))


# ---- plan tree -----------------------------------------------------------


class _Plan(ABC):
    @abstractmethod
    def execute(self, schema_only: bool = False) -> pd.DataFrame: ...


@dataclass(frozen=True, eq=False)
class _Scan(_Plan):
    df: pd.DataFrame

    def execute(self, schema_only: bool = False) -> pd.DataFrame:
        if schema_only:
            return self.df.head(0).copy()
        return self.df.copy()


@dataclass(frozen=True, eq=False)
class _Concat(_Plan):
    left: _Plan
    right: _Plan

    def execute(self, schema_only: bool = False) -> pd.DataFrame:
        return pd.concat(
            [self.left.execute(schema_only), self.right.execute(schema_only)],
            ignore_index=True,
        )


@dataclass(frozen=True, eq=False)
class _CrossJoin(_Plan):
    left: _Plan
    right: _Plan

    def execute(self, schema_only: bool = False) -> pd.DataFrame:
        return self.left.execute(schema_only).merge(
            self.right.execute(schema_only), how="cross"
        )


@dataclass(frozen=True, eq=False)
class _Map(_Plan):
    child: _Plan
    fn: Callable[[pd.DataFrame], pd.DataFrame]
    label: str

    def execute(self, schema_only: bool = False) -> pd.DataFrame:
        return self.fn(self.child.execute(schema_only))


def _with_column(name: str, expr: PandasExpr) -> Callable[[pd.DataFrame], pd.DataFrame]:
    def apply(df: pd.DataFrame) -> pd.DataFrame:
        value = expr.evaluate(df)
        if isinstance(value, pd.DataFrame):
            raise SchemaError(f"cannot insert a multi-column selection as {name!r}")
        return df.assign(**{name: value})

    return apply


def _filter(expr: PandasExpr) -> Callable[[pd.DataFrame], pd.DataFrame]:
    def apply(df: pd.DataFrame) -> pd.DataFrame:
        mask = expr.evaluate(df)
        if isinstance(mask, pd.Series):
            return df.loc[mask.astype(bool)].reset_index(drop=True)
        if isinstance(mask, (bool, np.bool_)):
            return df if mask else df.head(0)
        raise SchemaError(f"filter predicate is not boolean: {expr!r}")

    return apply


# ---- frames --------------------------------------------------------------


class PandasDataFrame(DataFrame):
    backend = "pandas"

    def __init__(self, df: pd.DataFrame) -> None:
        self._df = df

    @property
    def df(self) -> pd.DataFrame:
        """A copy of the underlying `pd.DataFrame`."""
        return self._df.copy()

    @property
    def columns(self) -> List[str]:
        return [str(column) for column in self._df.columns]

    def __len__(self) -> int:
        return len(self._df)

    def lazy(self) -> "PandasLazyFrame":
        return PandasLazyFrame(_Scan(self._df.copy()))

    def column_values(self, name: str) -> List[Any]:
        if name not in self._df.columns:
            raise SchemaError(f"no such column: {name!r}")
        return self._df[name].tolist()

    def to_records(self) -> List[Dict[str, Any]]:
        return self._df.to_dict(orient="records")

    def with_column(self, name: str, values: Sequence[Any]) -> "PandasDataFrame":
        return PandasDataFrame(self._df.assign(**{name: list(values)}))

    def __repr__(self) -> str:
        return f"PandasDataFrame(rows={len(self)}, columns={self.columns})"


class PandasLazyFrame(LazyFrame):
    backend = "pandas"

    def __init__(self, plan: _Plan) -> None:
        self._plan = plan

    @classmethod
    def from_pandas(cls, df: pd.DataFrame) -> "PandasLazyFrame":
        return cls(_Scan(df.copy()))

    def _map(self, fn: Callable[[pd.DataFrame], pd.DataFrame], label: str):
        return PandasLazyFrame(_Map(self._plan, fn, label))

    def all(self) -> PandasSlice:
        return PandasSlice(PandasExpr.all())

    def get_column(self, name: str) -> PandasSlice:
        return PandasSlice(PandasExpr.col(name))

    def columns(self) -> List[str]:
        return [str(column) for column in self._plan.execute(schema_only=True).columns]

    def _concat(self, other: LazyFrame) -> "PandasLazyFrame":
        assert isinstance(other, PandasLazyFrame)
        return PandasLazyFrame(_Concat(self._plan, other._plan))

    def cast(self, ty, origin, problem) -> "PandasLazyFrame":
        renames, int_columns = self._cast_plan(ty, origin, problem)

        def apply(df: pd.DataFrame) -> pd.DataFrame:
            df = df.rename(columns=renames)
            for column in int_columns:
                try:
                    df[column] = df[column].astype("int64")
                except (ValueError, TypeError) as exc:
                    raise SchemaError(
                        f"column {column!r} cannot be cast to int64: {exc}"
                    ) from exc
            return df

        return self._map(apply, f"cast({ty.value})")

    def fabric(self, problem) -> "PandasLazyFrame":
        metadata = problem.metadata
        name = metadata.name
        if name not in self.columns():
            raise SchemaError(f"cannot get fabric without node name column: {name!r}")

        def side(prefix: str) -> _Plan:
            def apply(df: pd.DataFrame) -> pd.DataFrame:
                others = [column for column in df.columns if column != name]
                df = df[[name] + others]
                return df.rename(
                    columns={
                        column: prefix if column == name else f"{prefix}.{column}"
                        for column in df.columns
                    }
                )

            return _Map(self._plan, apply, f"side({prefix})")

        joined = _CrossJoin(side(metadata.src), side(metadata.sink))
        capacity = metadata.capacity
        return PandasLazyFrame(joined)._map(
            lambda df: df.assign(**{capacity: np.int64(MAX_CAPACITY)}),
            "fabric_capacity",
        )

    def alias(self, key: str, metadata) -> "PandasLazyFrame":
        literal = PandasExpr.lit(metadata.name)
        return self._map(_with_column(key, literal), f"alias({key})")

    def insert_column(self, name: str, column: LazySlice) -> "PandasLazyFrame":
        expr = self._slice_expr(column)
        return self._map(_with_column(name, expr), f"with_column({name})")

    def apply_filter(self, predicate: LazySlice) -> "PandasLazyFrame":
        expr = self._slice_expr(predicate)
        return self._map(_filter(expr), "filter")

    def fill_column_with_feature(self, name: str, value: bool) -> "PandasLazyFrame":
        literal = PandasExpr.lit(bool(value))
        return self._map(_with_column(name, literal), f"fill({name})")

    def fill_column_with_value(self, name: str, value: float) -> "PandasLazyFrame":
        literal = PandasExpr.lit(np.int64(round(value)))
        return self._map(_with_column(name, literal), f"fill({name})")

    async def collect(self) -> PandasDataFrame:
        try:
            df = await asyncio.to_thread(self._plan.execute)
        except SchemaError:
            raise
        except (KeyError, ValueError, TypeError) as exc:
            raise SchemaError(f"failed to collect pandas dataframe: {exc}") from exc
        logger.debug("Collected pandas frame: rows=%d", len(df))
        return PandasDataFrame(df)
