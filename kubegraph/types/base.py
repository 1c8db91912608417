"""Base constants and enums shared by frames, problems and solvers."""

from __future__ import annotations

from enum import Enum

#: Ceiling for synthesized capacities. Leaves 32 bits of headroom so that
#: capacity * cost products summed over many edges stay within 64 bits.
MAX_CAPACITY: int = (2**64 - 1) >> 32


class GraphDataType(str, Enum):
    """Which half of a graph a frame holds."""

    EDGE = "edge"
    NODE = "node"


#: Metadata roles whose columns hold integers.
NUMERIC_ROLES = frozenset({"capacity", "flow", "supply", "unit_cost"})
