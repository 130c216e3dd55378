"""End-to-end planning: cached graph -> resolution -> build plan -> cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from buildgraph.config import BuildGraphConfig
from buildgraph.errors import GraphParseError
from buildgraph.fs import FileSystem, LocalFileSystem, PathLike
from buildgraph.graph.codec import load_graph, save_graph
from buildgraph.graph.plan import BuildPlan, create_build_plan
from buildgraph.graph.store import DepGraph
from buildgraph.models import Project
from buildgraph.resolver import DependencyResolver, FetchFn

logger = logging.getLogger("buildgraph.pipeline")


@dataclass(frozen=True)
class PlanResult:
    """Resolved graph and the plan compiled from it."""

    graph: DepGraph
    plan: BuildPlan
    from_cache: bool


def load_cached_graph(
    path: PathLike, fs: Optional[FileSystem] = None
) -> Optional[DepGraph]:
    """Load a persisted graph, or None when there is no usable cache.

    A missing file and a corrupt file both mean "no cache"; the latter is
    logged as a warning so the graph is rebuilt from scratch.
    """
    try:
        return load_graph(path, fs)
    except FileNotFoundError:
        logger.debug("No cached dependency graph at %s", path)
        return None
    except GraphParseError as exc:
        logger.warning("%s Rebuilding dependency graph from scratch.", exc)
        return None


def plan_project(
    project: Project,
    fetch: FetchFn,
    config: Optional[BuildGraphConfig] = None,
    fs: Optional[FileSystem] = None,
) -> PlanResult:
    """Resolve ``project`` and compile its build plan.

    Args:
        project: Top-level project.
        fetch: Returns the sub-projects a package depends on.
        config: Run settings; defaults to ``BuildGraphConfig()``.
        fs: File-system collaborator; defaults to the local disk.

    Returns:
        PlanResult with the resolved graph and its plan.

    Raises:
        CyclicDependencyError: If the resolved graph is cyclic.
        MalformedPlanError: If strict checking rejects the plan.
        OSError: If the cache cannot be written.
    """
    config = config or BuildGraphConfig()
    fs = fs or LocalFileSystem()

    cached = load_cached_graph(config.cache_path, fs) if config.use_cache else None
    resolver = DependencyResolver(fetch, max_steps=config.max_resolution_steps)
    result = resolver.resolve_project(project, cached=cached)

    plan = create_build_plan(result.graph, strict=config.strict_plan)

    if config.write_cache:
        save_graph(config.cache_path, result.graph, fs=fs, indent=config.indent)

    return PlanResult(graph=result.graph, plan=plan, from_cache=cached is not None)
