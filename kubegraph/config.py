"""Configuration for assembling a kubegraph pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

import dacite
import yaml


@dataclass
class PipelineConfig:
    """Registry names of the components a pipeline is built from."""

    # Analyzer turning raw graphs into virtual problems
    analyzer: str = "standard"

    # Min-cost flow backend
    solver: str = "networkx"

    # "simulator" for dry runs, "live" to act on the target system
    runner: str = "simulator"

    # Graph store backend
    graph_db: str = "memory"

    # Engine used when building frames from records
    frame_backend: str = "pandas"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PipelineConfig":
        """Build from a mapping; unknown keys raise `ValueError`."""
        try:
            return dacite.from_dict(
                data_class=cls, data=dict(data or {}), config=dacite.Config(strict=True)
            )
        except dacite.DaciteError as exc:
            raise ValueError(f"Invalid pipeline configuration: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config_yaml(yaml_str: str) -> PipelineConfig:
    """Parse a YAML pipeline configuration (top-level mapping or ``pipeline`` key)."""
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    if isinstance(data.get("pipeline"), dict):
        data = data["pipeline"]
    return PipelineConfig.from_dict(data)


# Global default configuration instance
DEFAULT_CONFIG = PipelineConfig()
