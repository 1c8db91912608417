"""Analyzers turning raw graphs into solver-ready problems."""

from kubegraph.analyzer.base import (
    ANALYZER_REGISTRY,
    VirtualProblemAnalyzer,
    register_analyzer,
)
from kubegraph.analyzer.empty import EmptyAnalyzer
from kubegraph.analyzer.standard import DEFAULT_UNIT_COST, StandardAnalyzer

__all__ = [
    "ANALYZER_REGISTRY",
    "DEFAULT_UNIT_COST",
    "EmptyAnalyzer",
    "StandardAnalyzer",
    "VirtualProblemAnalyzer",
    "register_analyzer",
]
