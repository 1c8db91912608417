"""Shared constants and enums."""

from kubegraph.types.base import MAX_CAPACITY, NUMERIC_ROLES, GraphDataType

__all__ = ["MAX_CAPACITY", "NUMERIC_ROLES", "GraphDataType"]
