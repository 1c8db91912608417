"""Lazy tabular frames.

Engines:
    empty  - `EmptyLazyFrame`, the no-backend sentinel
    pandas - `PandasLazyFrame`, deferred plan over `pandas.DataFrame`
    polars - `PolarsLazyFrame`, wrapper of `polars.LazyFrame`
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping

import pandas as pd
import polars as pl

from kubegraph.frame.base import DataFrame, LazyFrame, LazySlice
from kubegraph.frame.empty import EmptyDataFrame, EmptyLazyFrame
from kubegraph.frame.pandas import PandasDataFrame, PandasLazyFrame, PandasSlice
from kubegraph.frame.polars import PolarsDataFrame, PolarsLazyFrame, PolarsSlice


def from_pandas(df: pd.DataFrame) -> PandasLazyFrame:
    """Return a lazy frame scanning a copy of `df`."""
    return PandasLazyFrame.from_pandas(df)


def from_polars(df) -> PolarsLazyFrame:
    """Return a lazy frame over a `pl.DataFrame` or `pl.LazyFrame`."""
    return PolarsLazyFrame.from_polars(df)


FRAME_BACKENDS: Dict[str, Callable[[List[Mapping[str, Any]]], LazyFrame]] = {
    "pandas": lambda records: from_pandas(pd.DataFrame.from_records(records)),
    "polars": lambda records: from_polars(
        pl.from_dicts(records) if records else pl.DataFrame()
    ),
}


def from_records(
    records: Iterable[Mapping[str, Any]], backend: str = "pandas"
) -> LazyFrame:
    """Build a lazy frame of `records` on the named engine.

    Raises:
        ValueError: If `backend` is not a known engine name.
    """
    try:
        factory = FRAME_BACKENDS[backend]
    except KeyError:
        valid = ", ".join(sorted(FRAME_BACKENDS))
        raise ValueError(
            f"Unknown frame backend '{backend}'. Valid values are: {valid}"
        ) from None
    return factory([dict(record) for record in records])


__all__ = [
    "DataFrame",
    "LazyFrame",
    "LazySlice",
    "EmptyDataFrame",
    "EmptyLazyFrame",
    "PandasDataFrame",
    "PandasLazyFrame",
    "PandasSlice",
    "PolarsDataFrame",
    "PolarsLazyFrame",
    "PolarsSlice",
    "FRAME_BACKENDS",
    "from_pandas",
    "from_polars",
    "from_records",
]
