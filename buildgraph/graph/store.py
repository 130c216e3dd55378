"""Dependency graph construction primitives.

Graphs are ``networkx.MultiDiGraph`` instances whose nodes are
:class:`~buildgraph.models.DepNode` values. An edge ``A -> B`` means
"A depends on B", so B must be built first.

Every function here returns a fresh graph and leaves its inputs
untouched. Parallel edges may appear after an overlay; ``simplify``
collapses them.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, Set, Tuple

import networkx as nx

from buildgraph.models import DepNode, Project

logger = logging.getLogger("buildgraph.graph.store")

DepGraph = nx.MultiDiGraph
Edge = Tuple[DepNode, DepNode]


def empty_graph() -> DepGraph:
    """Return a graph without vertices or edges."""
    return nx.MultiDiGraph()


def vertex_graph(nodes: Iterable[DepNode]) -> DepGraph:
    """Return a graph holding ``nodes`` as isolated vertices."""
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(nodes)
    return graph


def star(center: DepNode, leaves: Iterable[DepNode]) -> DepGraph:
    """Connect ``center`` by one edge to each of ``leaves``.

    The center is a vertex of the result even when ``leaves`` is empty.
    """
    graph = nx.MultiDiGraph()
    graph.add_node(center)
    for leaf in leaves:
        graph.add_edge(center, leaf)
    return graph


def overlay(left: DepGraph, right: DepGraph) -> DepGraph:
    """Union of two graphs; duplicated edges are kept as parallel edges."""
    return overlays([left, right])


def overlays(graphs: Iterable[DepGraph]) -> DepGraph:
    """Union of any number of graphs, no edges added or removed."""
    merged = nx.MultiDiGraph()
    for graph in graphs:
        merged.add_nodes_from(graph.nodes)
        merged.add_edges_from((u, v) for u, v in graph.edges())
    return merged


def simplify(graph: DepGraph) -> DepGraph:
    """Return a copy keeping at most one edge per (source, target) pair."""
    simple = nx.MultiDiGraph()
    simple.add_nodes_from(sorted(graph.nodes))
    simple.add_edges_from(sorted(edge_set(graph)))
    return simple


def transpose(graph: DepGraph) -> DepGraph:
    """Return the graph with every edge reversed."""
    return graph.reverse(copy=True)


def vertex_set(graph: DepGraph) -> Set[DepNode]:
    return set(graph.nodes)


def edge_set(graph: DepGraph) -> Set[Edge]:
    return {(u, v) for u, v in graph.edges()}


def graph_from_project(project: Project) -> DepGraph:
    """Build the initial graph for a top-level project.

    One vertex per declared dependency, labeled with the project's own
    name, and no edges.
    """
    graph = vertex_graph(project.nodes())
    logger.debug(
        "Initial graph for project %s: %d vertices",
        project.name,
        graph.number_of_nodes(),
    )
    return graph


def extend_graph(
    node: DepNode, projects: Sequence[Project], graph: DepGraph
) -> DepGraph:
    """Attach the dependencies of ``node`` to ``graph``.

    For each sub-project, ``node`` gets an edge to one new vertex per
    dependency the sub-project declares (labeled with the sub-project's
    name). The stars are overlaid on ``graph`` and the result simplified,
    so resolving a shared dependency twice adds nothing.

    Args:
        node: Package whose dependencies were just fetched.
        projects: Sub-projects that the package depends on.
        graph: Graph built so far; not modified.

    Returns:
        A new, simplified graph.
    """
    stars = [star(node, project.nodes()) for project in projects]
    merged = simplify(overlays([graph, *stars]))
    logger.debug(
        "Extended graph at %s with %d project(s): %d vertices, %d edges",
        node,
        len(projects),
        merged.number_of_nodes(),
        merged.number_of_edges(),
    )
    return merged


def leaf_nodes(graph: DepGraph) -> Set[DepNode]:
    """Return every vertex without outgoing edges, isolated ones included."""
    return {node for node, degree in graph.out_degree() if degree == 0}


def reachable_subgraph(graph: DepGraph, roots: Iterable[DepNode]) -> DepGraph:
    """Return the part of ``graph`` reachable from ``roots``, roots included.

    Roots missing from ``graph`` are ignored.
    """
    keep: Set[DepNode] = set()
    for root in roots:
        if root in graph:
            keep.add(root)
            keep.update(nx.descendants(graph, root))
    return simplify(graph.subgraph(keep))
