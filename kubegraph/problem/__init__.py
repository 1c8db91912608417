"""Problem specification, metadata schema and analyzer output."""

from kubegraph.problem.metadata import (
    EDGE_ROLES,
    NODE_ROLES,
    OPTIONAL_ROLE_DEFAULTS,
    REQUIRED_ROLES,
    FunctionMetadata,
    GraphMetadataRaw,
    GraphMetadataStandard,
)
from kubegraph.problem.spec import ProblemSpec, load_problem_yaml
from kubegraph.problem.virtual import VirtualProblem

__all__ = [
    "EDGE_ROLES",
    "NODE_ROLES",
    "OPTIONAL_ROLE_DEFAULTS",
    "REQUIRED_ROLES",
    "FunctionMetadata",
    "GraphMetadataRaw",
    "GraphMetadataStandard",
    "ProblemSpec",
    "VirtualProblem",
    "load_problem_yaml",
]
