"""Tests for the cache -> resolve -> plan pipeline."""

import logging
from pathlib import Path
from typing import List

import pytest

from buildgraph.config import BuildGraphConfig
from buildgraph.errors import CyclicDependencyError
from buildgraph.graph.codec import load_graph
from buildgraph.graph.store import edge_set
from buildgraph.models import DepNode, Project
from buildgraph.pipeline import load_cached_graph, plan_project

APP = Project(name="app", dependencies=["server"])
DEPS = {
    DepNode("server", "app"): [Project(name="http", dependencies=["router"])],
    DepNode("router", "http"): [Project(name="text", dependencies=["regex"])],
}


def _fetch_factory(calls: List[DepNode]):
    def fetch(node: DepNode) -> List[Project]:
        calls.append(node)
        return DEPS.get(node, [])

    return fetch


def _config(tmp_path: Path, **overrides) -> BuildGraphConfig:
    return BuildGraphConfig(cache_path=tmp_path / "graph.json", **overrides)


def test_plan_project_builds_plan_and_writes_cache(tmp_path: Path) -> None:
    calls: List[DepNode] = []
    config = _config(tmp_path)

    result = plan_project(APP, _fetch_factory(calls), config)

    assert result.from_cache is False
    assert result.plan.ordered() == [
        [DepNode("regex", "text")],
        [DepNode("router", "http")],
        [DepNode("server", "app")],
    ]
    assert edge_set(load_graph(config.cache_path)) == edge_set(result.graph)


def test_second_run_reuses_cache(tmp_path: Path) -> None:
    config = _config(tmp_path)
    plan_project(APP, _fetch_factory([]), config)
    calls: List[DepNode] = []

    result = plan_project(APP, _fetch_factory(calls), config)

    assert result.from_cache is True
    assert calls == []
    assert result.plan.num_phases == 3


def test_corrupt_cache_falls_back_with_warning(tmp_path: Path, caplog) -> None:
    config = _config(tmp_path)
    config.cache_path.write_text('{"vertices": []}', encoding="utf-8")
    calls: List[DepNode] = []

    with caplog.at_level(logging.WARNING, logger="buildgraph.pipeline"):
        result = plan_project(APP, _fetch_factory(calls), config)

    assert result.from_cache is False
    assert DepNode("server", "app") in calls
    assert "Failed to parse dependency graph" in caplog.text
    assert load_graph(config.cache_path).number_of_nodes() == 3


def test_cache_can_be_disabled(tmp_path: Path) -> None:
    config = _config(tmp_path, use_cache=False, write_cache=False)

    plan_project(APP, _fetch_factory([]), config)

    assert not config.cache_path.exists()


def test_load_cached_graph_missing_file_is_none(tmp_path: Path) -> None:
    assert load_cached_graph(tmp_path / "absent.json") is None


def test_cyclic_resolution_is_reported(tmp_path: Path) -> None:
    cyclic = {
        DepNode("a", "app"): [Project(name="lib", dependencies=["b"])],
        DepNode("b", "lib"): [Project(name="app", dependencies=["a"])],
    }

    with pytest.raises(CyclicDependencyError):
        plan_project(
            Project(name="app", dependencies=["a"]),
            lambda node: cyclic.get(node, []),
            _config(tmp_path, write_cache=False),
        )


def test_dependency_dropped_between_runs_leaves_plan_and_cache(tmp_path: Path) -> None:
    deps = {
        DepNode("web", "app"): [Project(name="http", dependencies=["client"])],
        DepNode("cli", "app"): [Project(name="term", dependencies=["tty"])],
    }
    config = _config(tmp_path)
    plan_project(
        Project(name="app", dependencies=["web", "cli"]),
        lambda node: deps.get(node, []),
        config,
    )

    result = plan_project(
        Project(name="app", dependencies=["web"]),
        lambda node: deps.get(node, []),
        config,
    )

    assert result.from_cache is True
    assert DepNode("cli", "app") not in result.plan.nodes()
    assert DepNode("tty", "term") not in result.plan.nodes()
    assert result.plan.nodes() == {DepNode("web", "app"), DepNode("client", "http")}
    cached = load_graph(config.cache_path)
    assert DepNode("cli", "app") not in cached
    assert DepNode("tty", "term") not in cached
