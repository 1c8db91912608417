"""Tests for `kubegraph.config` focusing on behavior and correctness."""

import pytest

from kubegraph.config import DEFAULT_CONFIG, PipelineConfig, load_config_yaml


def test_defaults() -> None:
    """Default config names the reference components."""
    assert DEFAULT_CONFIG.to_dict() == {
        "analyzer": "standard",
        "solver": "networkx",
        "runner": "simulator",
        "graph_db": "memory",
        "frame_backend": "pandas",
    }


def test_from_dict_overrides_and_rejects_unknown_keys() -> None:
    """Known keys override defaults; unknown keys and bad types raise ValueError."""
    config = PipelineConfig.from_dict({"runner": "live"})
    assert config.runner == "live"
    assert config.solver == "networkx"

    with pytest.raises(ValueError, match="Invalid pipeline configuration"):
        PipelineConfig.from_dict({"workers": 4})
    with pytest.raises(ValueError):
        PipelineConfig.from_dict({"solver": 1})


def test_load_config_yaml() -> None:
    """Both a bare mapping and a `pipeline` section are accepted."""
    bare = load_config_yaml("frame_backend: polars\n")
    nested = load_config_yaml("pipeline:\n  frame_backend: polars\n")

    assert bare == nested
    assert bare.frame_backend == "polars"
    assert load_config_yaml("") == PipelineConfig()


def test_load_config_yaml_rejects_lists() -> None:
    """A top-level sequence is not a configuration."""
    with pytest.raises(ValueError, match="top-level"):
        load_config_yaml("- analyzer\n")
