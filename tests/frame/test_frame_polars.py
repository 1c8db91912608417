"""Tests for the polars lazy frame engine."""

from __future__ import annotations

import polars as pl
import pytest

from kubegraph.errors import BackendMismatchError, SchemaError
from kubegraph.frame import (
    EmptyLazyFrame,
    PolarsDataFrame,
    PolarsLazyFrame,
    from_polars,
    from_records,
)
from kubegraph.problem import FunctionMetadata, GraphMetadataStandard, ProblemSpec
from kubegraph.types.base import MAX_CAPACITY, GraphDataType


def _nodes(n: int = 3) -> PolarsLazyFrame:
    return from_records(
        [{"name": i, "capacity": 10 * i, "supply": i} for i in range(n)],
        backend="polars",
    )


@pytest.mark.asyncio
async def test_collect_returns_polars_dataframe() -> None:
    df = await _nodes().collect()

    assert isinstance(df, PolarsDataFrame)
    assert len(df) == 3
    assert df.column_values("supply") == [0, 1, 2]


@pytest.mark.asyncio
async def test_from_polars_accepts_eager_and_lazy() -> None:
    eager = pl.DataFrame({"name": [1, 2]})
    for source in (eager, eager.lazy()):
        df = await from_polars(source).collect()
        assert df.column_values("name") == [1, 2]


@pytest.mark.asyncio
async def test_fabric_builds_complete_relation() -> None:
    df = await _nodes(3).fabric(ProblemSpec().resolve()).collect()

    assert len(df) == 9
    assert set(df.column_values("capacity")) == {MAX_CAPACITY}
    assert df.columns[0] == "src"
    assert "sink" in df.columns
    assert "src.capacity" in df.columns
    assert "sink.supply" in df.columns


@pytest.mark.asyncio
async def test_concat_and_identity() -> None:
    frame = _nodes(2)
    assert frame.concat(EmptyLazyFrame()) is frame

    df = await frame.concat(_nodes(1)).collect()
    assert df.column_values("name") == [0, 1, 0]


def test_concat_with_pandas_fails() -> None:
    with pytest.raises(BackendMismatchError):
        _nodes().concat(from_records([{"name": 0}]))


@pytest.mark.asyncio
async def test_expressions_filters_and_fills() -> None:
    frame = _nodes(4)
    supply = frame.get_column("supply")
    frame = frame.insert_column("spare", frame.get_column("capacity") - supply)
    frame = frame.apply_filter((supply >= 1) & (supply < 3))
    frame = frame.fill_column_with_value("unit_cost", 1.4)
    frame = frame.fill_column_with_feature("enabled", False)
    frame = frame.alias("function", FunctionMetadata(name="scaler"))
    df = await frame.collect()

    assert df.column_values("name") == [1, 2]
    assert df.column_values("spare") == [9, 18]
    assert df.column_values("unit_cost") == [1, 1]
    assert df.column_values("enabled") == [False, False]
    assert df.column_values("function") == ["scaler", "scaler"]


def test_pandas_slice_rejected() -> None:
    pandas_frame = from_records([{"a": 1}])
    with pytest.raises(BackendMismatchError):
        _nodes().insert_column("x", pandas_frame.get_column("a"))


@pytest.mark.asyncio
async def test_cast_renames_roles() -> None:
    frame = from_records(
        [{"from": "a", "to": "b", "cap": 3, "cost": 1}], backend="polars"
    )
    origin = GraphMetadataStandard(src="from", sink="to", capacity="cap", unit_cost="cost")
    problem = ProblemSpec(metadata=GraphMetadataStandard())

    df = await frame.cast(GraphDataType.EDGE, origin, problem).collect()

    assert df.columns == ["src", "sink", "capacity", "unit_cost"]
    assert df.df.schema["capacity"] == pl.Int64


@pytest.mark.asyncio
async def test_missing_column_is_schema_error() -> None:
    frame = _nodes()
    frame = frame.insert_column("x", frame.get_column("missing"))
    with pytest.raises(SchemaError):
        await frame.collect()


@pytest.mark.asyncio
async def test_cast_of_non_numeric_role_is_schema_error() -> None:
    frame = from_records(
        [{"name": 0, "capacity": "lots", "supply": 1}], backend="polars"
    )
    problem = ProblemSpec(metadata=GraphMetadataStandard())
    cast = frame.cast(GraphDataType.NODE, GraphMetadataStandard(), problem)

    with pytest.raises(SchemaError, match="capacity"):
        await cast.collect()
