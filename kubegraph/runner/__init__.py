"""Runners applying or simulating solved graphs."""

from kubegraph.runner.base import RUNNER_REGISTRY, NetworkRunner, register_runner
from kubegraph.runner.live import (
    FlowAction,
    LiveNetworkRunner,
    LoggingTargetSystem,
    TargetSystem,
)
from kubegraph.runner.simulator import NetworkRunnerSimulator

__all__ = [
    "RUNNER_REGISTRY",
    "FlowAction",
    "LiveNetworkRunner",
    "LoggingTargetSystem",
    "NetworkRunner",
    "NetworkRunnerSimulator",
    "TargetSystem",
    "register_runner",
]
