"""Problem specification and its declaration loaders."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Generic, Mapping, Optional, TypeVar

import yaml

from kubegraph.errors import SchemaError
from kubegraph.problem.metadata import GraphMetadataRaw, GraphMetadataStandard
from kubegraph.types.base import MAX_CAPACITY

M = TypeVar("M")


@dataclass(frozen=True)
class ProblemSpec(Generic[M]):
    """Optimization problem parameters.

    Attributes:
        metadata: Role -> column mapping (`GraphMetadataRaw` as declared,
            `GraphMetadataStandard` once resolved).
        verbose: Emit extra diagnostics. Never changes results.
    """

    MAX_CAPACITY: ClassVar[int] = MAX_CAPACITY

    metadata: Any = field(default_factory=GraphMetadataRaw)
    verbose: bool = False

    def resolve(self) -> "ProblemSpec[GraphMetadataStandard]":
        """Return a copy whose metadata is a `GraphMetadataStandard`.

        Raises:
            SchemaError: If a required role is unmapped.
        """
        if isinstance(self.metadata, GraphMetadataStandard):
            return self  # type: ignore[return-value]
        return replace(self, metadata=self.metadata.resolve())

    @classmethod
    def from_dict(
        cls, data: Optional[Mapping[str, Any]]
    ) -> "ProblemSpec[GraphMetadataRaw]":
        """Build from a declaration record ``{metadata, verbose}``.

        Raises:
            SchemaError: On unknown keys or mistyped values.
        """
        data = dict(data or {})
        unknown = set(data) - {"metadata", "verbose"}
        if unknown:
            raise SchemaError(
                f"unknown problem field(s): {', '.join(sorted(map(str, unknown)))}"
            )
        verbose = data.get("verbose", False)
        if not isinstance(verbose, bool):
            raise SchemaError(f"'verbose' must be a boolean, got {verbose!r}")
        metadata = data.get("metadata")
        if metadata is not None and not isinstance(metadata, Mapping):
            raise SchemaError("'metadata' must be a mapping")
        return cls(metadata=GraphMetadataRaw.from_dict(metadata), verbose=verbose)

    def to_dict(self) -> Dict[str, Any]:
        return {"metadata": dict(vars(self.metadata)), "verbose": self.verbose}


def load_problem_yaml(yaml_str: str) -> ProblemSpec[GraphMetadataRaw]:
    """Parse a YAML problem declaration.

    Accepts either the bare ``{metadata, verbose}`` record or a resource-like
    document carrying it under ``spec``.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SchemaError("The provided YAML must map to a dictionary at top-level.")
    if isinstance(data.get("spec"), dict):
        data = data["spec"]
    return ProblemSpec.from_dict(data)
