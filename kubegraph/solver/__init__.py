"""Solvers computing min-cost flow over analyzed graphs."""

from kubegraph.solver.base import SOLVER_REGISTRY, NetworkSolver, register_solver
from kubegraph.solver.networkx import FlowSolution, NetworkxSolver, optimize

__all__ = [
    "SOLVER_REGISTRY",
    "FlowSolution",
    "NetworkSolver",
    "NetworkxSolver",
    "optimize",
    "register_solver",
]
