"""Error taxonomy for graph analysis, solving and execution.

All errors derive from `KubegraphError`. Schema and backend errors also
derive from the builtin exceptions they specialize so callers that only
know about `ValueError`/`TypeError` still catch them.
"""

from __future__ import annotations

from typing import Optional


class KubegraphError(Exception):
    """Base class for all kubegraph errors."""


class SchemaError(KubegraphError, ValueError):
    """A required role or column is missing, or an empty frame was used."""


class BackendMismatchError(KubegraphError, TypeError):
    """Two frame operands originate from different concrete backends."""


class InfeasibleProblemError(KubegraphError):
    """The solver cannot satisfy capacity or conservation constraints."""


class EmptyGraphError(KubegraphError):
    """A runner was invoked with an empty edges or nodes frame."""


class StoreError(KubegraphError):
    """Backend-level failure of a graph store operation."""


class PipelineError(KubegraphError):
    """A pipeline stage failed.

    Attributes:
        stage: Name of the state the pipeline failed to reach
            (e.g. ``"analyzed"``, ``"solved"``, ``"executed"``).
    """

    def __init__(self, stage: str, message: str, *, scope: Optional[object] = None):
        self.stage = stage
        self.scope = scope
        where = f" for {scope}" if scope is not None else ""
        super().__init__(f"pipeline failed at stage '{stage}'{where}: {message}")
