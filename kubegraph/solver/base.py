"""Solver contract and registry.

A solver receives node and edge tables plus a resolved problem and returns
the same edges with a flow column. The flow respects every edge capacity,
keeps each node within its capacity after flow, moves every unit of declared
supply, and minimizes ``sum(flow * unit_cost)`` plus the holding cost of
units left at nodes. Infeasible problems raise `InfeasibleProblemError`;
no partial assignment is ever returned.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Type

from kubegraph.errors import SchemaError
from kubegraph.frame import DataFrame, LazyFrame
from kubegraph.graph.model import GraphData
from kubegraph.problem import GraphMetadataStandard, ProblemSpec

#: Registry of solver backends, keyed by configuration name.
SOLVER_REGISTRY: Dict[str, Type["NetworkSolver"]] = {}


def register_solver(name: str):
    """Return a class decorator adding a `NetworkSolver` to the registry."""

    def decorator(cls: Type["NetworkSolver"]) -> Type["NetworkSolver"]:
        cls.name = name
        SOLVER_REGISTRY[name] = cls
        return cls

    return decorator


class NetworkSolver(ABC):
    name: ClassVar[str] = ""

    @abstractmethod
    async def solve(
        self,
        graph: GraphData[Any],
        problem: ProblemSpec[GraphMetadataStandard],
    ) -> GraphData[LazyFrame]:
        """Return `graph` with a flow column on the edges.

        Raises:
            SchemaError: On missing columns, unknown nodes or invalid values.
            InfeasibleProblemError: If no flow satisfies the constraints.
        """


def int_column(frame: DataFrame, name: str, what: str) -> List[int]:
    """Return column `name` as Python ints.

    Raises:
        SchemaError: If a value is missing or not integral.
    """
    values = []
    for row, value in enumerate(frame.column_values(name)):
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise SchemaError(
                f"{what} row {row}: column {name!r} holds non-integer {value!r}"
            ) from None
        if number != value:
            raise SchemaError(
                f"{what} row {row}: column {name!r} holds non-integer {value!r}"
            )
        values.append(number)
    return values
