"""Incremental dependency resolution.

Starting from a top-level project, every package node is handed to a
fetch callback that returns the projects the package depends on. The
graph is extended with the answer and any new nodes are queued in turn,
until every node has been resolved.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Sequence, Set

from buildgraph.errors import ResolutionLimitError
from buildgraph.graph.store import (
    DepGraph,
    extend_graph,
    graph_from_project,
    overlay,
    reachable_subgraph,
)
from buildgraph.models import DepNode, Project

logger = logging.getLogger("buildgraph.resolver")

FetchFn = Callable[[DepNode], Sequence[Project]]


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of a resolution run.

    Attributes:
        graph: The fully resolved graph.
        resolved: Every node whose dependencies are known.
        fetched: Nodes fetched during this run, in fetch order.
    """

    graph: DepGraph
    resolved: FrozenSet[DepNode]
    fetched: List[DepNode]


class DependencyResolver:
    """Grows a dependency graph until no node is left unresolved."""

    def __init__(self, fetch: FetchFn, max_steps: int = 10000) -> None:
        """
        Args:
            fetch: Returns the sub-projects a package depends on.
            max_steps: Maximum number of fetch calls per run.
        """
        self._fetch = fetch
        self._max_steps = max_steps

    def resolve(
        self, graph: DepGraph, resolved: FrozenSet[DepNode] = frozenset()
    ) -> ResolutionResult:
        """Fetch every node of ``graph`` not yet in ``resolved``.

        Nodes are processed in sorted order; nodes introduced by a fetch
        are processed after the current batch.

        Raises:
            ResolutionLimitError: If more than ``max_steps`` fetches are needed.
        """
        done: Set[DepNode] = set(resolved)
        fetched: List[DepNode] = []
        pending = deque(sorted(node for node in graph.nodes if node not in done))

        while pending:
            node = pending.popleft()
            if node in done:
                continue
            if len(fetched) >= self._max_steps:
                raise ResolutionLimitError(
                    f"Dependency resolution exceeded {self._max_steps} fetches "
                    f"(next unresolved: {node})"
                )

            projects = list(self._fetch(node))
            logger.debug(
                "Resolved %s: %d project(s)", node, len(projects)
            )
            before = set(graph.nodes)
            graph = extend_graph(node, projects, graph)
            done.add(node)
            fetched.append(node)

            discovered = sorted(set(graph.nodes) - before - done)
            pending.extend(discovered)

        logger.info(
            "Dependency resolution finished: %d node(s), %d fetched",
            graph.number_of_nodes(),
            len(fetched),
        )
        return ResolutionResult(graph=graph, resolved=frozenset(done), fetched=fetched)

    def resolve_project(
        self, project: Project, cached: Optional[DepGraph] = None
    ) -> ResolutionResult:
        """Resolve the full graph for a top-level project.

        Nodes already present in ``cached`` count as resolved, so only
        packages unknown to the cache are fetched. Cached nodes no longer
        reachable from the project's own packages are dropped.
        """
        graph = graph_from_project(project)
        resolved: FrozenSet[DepNode] = frozenset()
        if cached is not None:
            roots = list(graph.nodes)
            graph = reachable_subgraph(overlay(cached, graph), roots)
            resolved = frozenset(node for node in cached.nodes if node in graph)
            logger.debug(
                "Reusing %d cached node(s) for project %s", len(resolved), project.name
            )
        return self.resolve(graph, resolved)
