"""Metadata schema: which column plays which optimizer role.

`GraphMetadataRaw` is what a problem declaration supplies: every role may be
left out (falling back to the conventional column name) or explicitly set
to ``None``. `GraphMetadataRaw.resolve()` turns it into the fully-populated
`GraphMetadataStandard` used by frames, solvers and runners.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

import dacite

from kubegraph.errors import SchemaError
from kubegraph.types.base import GraphDataType

#: Roles that must map to a column for a problem to be solvable.
REQUIRED_ROLES = ("capacity", "name", "sink", "src", "supply", "unit_cost")

#: Roles with a documented fallback when set to ``None``.
OPTIONAL_ROLE_DEFAULTS = {"flow": "flow", "function": "function"}

#: Roles present in each half of a graph.
NODE_ROLES = ("name", "capacity", "supply", "unit_cost", "flow", "function")
EDGE_ROLES = ("src", "sink", "capacity", "unit_cost", "flow", "function")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(key: str) -> str:
    """Return `key` in snake_case (``unitCost`` -> ``unit_cost``)."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True)
class FunctionMetadata:
    """Identity of a function whose output a frame carries."""

    name: str


@dataclass(frozen=True)
class GraphMetadataStandard:
    """Resolved role -> column-name mapping."""

    capacity: str = "capacity"
    flow: str = "flow"
    function: str = "function"
    name: str = "name"
    sink: str = "sink"
    src: str = "src"
    supply: str = "supply"
    unit_cost: str = "unit_cost"

    def role_columns(self, ty: GraphDataType) -> Dict[str, str]:
        """Return ``{role: column}`` for the roles of one graph half."""
        roles = NODE_ROLES if ty == GraphDataType.NODE else EDGE_ROLES
        return {role: getattr(self, role) for role in roles}

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class GraphMetadataRaw:
    """Declared role -> column-name mapping; ``None`` marks an unmapped role."""

    capacity: Optional[str] = "capacity"
    flow: Optional[str] = "flow"
    function: Optional[str] = "function"
    name: Optional[str] = "name"
    sink: Optional[str] = "sink"
    src: Optional[str] = "src"
    supply: Optional[str] = "supply"
    unit_cost: Optional[str] = "unit_cost"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "GraphMetadataRaw":
        """Build from a declaration mapping with camelCase or snake_case keys.

        Raises:
            SchemaError: On unknown roles or non-string column names.
        """
        normalized = {snake_case(str(key)): value for key, value in (data or {}).items()}
        try:
            return dacite.from_dict(
                data_class=cls, data=normalized, config=dacite.Config(strict=True)
            )
        except dacite.DaciteError as exc:
            raise SchemaError(f"invalid problem metadata: {exc}") from exc

    def resolve(self) -> GraphMetadataStandard:
        """Fill optional roles with their defaults and check required ones.

        Raises:
            SchemaError: If a required role has no mapped column.
        """
        resolved: Dict[str, str] = {}
        missing = []
        for field in fields(self):
            column = getattr(self, field.name)
            if column is None:
                if field.name in OPTIONAL_ROLE_DEFAULTS:
                    column = OPTIONAL_ROLE_DEFAULTS[field.name]
                else:
                    missing.append(field.name)
                    continue
            resolved[field.name] = column
        if missing:
            raise SchemaError(
                f"required metadata role(s) without a column: {', '.join(missing)}"
            )
        return GraphMetadataStandard(**resolved)
