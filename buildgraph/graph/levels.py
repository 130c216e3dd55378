"""Depth analysis over a dependency graph.

A node's depth is the length of the longest edge path from any leaf
(a package without dependencies) up to that node. Depth 0 means the
node can be built first; a node at depth ``n`` depends, directly or
transitively, on something at depth ``n - 1``.

Depths are found by walking the transposed graph from every leaf and
keeping, per node, the maximum depth observed across all walks. Taking
the maximum (rather than the first or smallest value) guarantees that a
node is scheduled after its furthest dependency chain.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import networkx as nx

from buildgraph.errors import CyclicDependencyError
from buildgraph.graph.store import DepGraph, leaf_nodes, transpose
from buildgraph.models import DepNode

logger = logging.getLogger("buildgraph.graph.levels")

DepthMap = Dict[DepNode, int]


def find_cycle(graph: DepGraph) -> Optional[List[DepNode]]:
    """Return one cycle as a closed path (first node repeated last), or None."""
    try:
        raw_cycle = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return None
    cycle_nodes = [raw_cycle[0][0]]
    for edge in raw_cycle:
        cycle_nodes.append(edge[1])
    return cycle_nodes


def ensure_acyclic(graph: DepGraph) -> None:
    """Raise :class:`CyclicDependencyError` if ``graph`` has a cycle."""
    if nx.is_directed_acyclic_graph(graph):
        return
    cycle = find_cycle(graph) or []
    logger.debug(
        "Dependency cycle detected: %s", " -> ".join(str(n) for n in cycle)
    )
    raise CyclicDependencyError(cycle)


def merge_depths(left: DepthMap, right: DepthMap) -> DepthMap:
    """Combine two depth maps, keeping the larger depth for shared nodes."""
    merged = dict(left)
    for node, depth in right.items():
        known = merged.get(node)
        if known is None or depth > known:
            merged[node] = depth
    return merged


def traverse_with_depth(transposed: DepGraph, start: DepNode) -> DepthMap:
    """Walk ``transposed`` depth-first from ``start`` recording max depths.

    ``start`` sits at depth 0 and each step to a neighbour adds one.
    Sibling branches are measured independently: the depth handed to a
    neighbour is always its parent's depth plus one.

    The graph must be acyclic; call :func:`ensure_acyclic` on the
    original graph first. A start node missing from the graph yields an
    empty map.
    """
    depths: DepthMap = {}
    if start not in transposed:
        return depths

    stack = [(start, 0)]
    while stack:
        node, depth = stack.pop()
        known = depths.get(node)
        # Already reached at least this deep: nothing below can grow.
        if known is not None and known >= depth:
            continue
        depths[node] = depth
        for neighbour in transposed.successors(node):
            stack.append((neighbour, depth + 1))
    return depths


def compute_depths(
    graph: DepGraph, leaves: Optional[Iterable[DepNode]] = None
) -> DepthMap:
    """Compute the maximum depth-from-any-leaf for every reachable node.

    Args:
        graph: Dependency graph (edges point from dependent to dependency).
        leaves: Start nodes; defaults to :func:`leaf_nodes` of ``graph``.

    Returns:
        Mapping of node to depth. Nodes reachable from no leaf are absent.

    Raises:
        CyclicDependencyError: If the graph contains a cycle.
    """
    ensure_acyclic(graph)
    if leaves is None:
        leaves = leaf_nodes(graph)

    transposed = transpose(graph)
    depths: DepthMap = {}
    for leaf in sorted(leaves):
        depths = merge_depths(depths, traverse_with_depth(transposed, leaf))

    logger.debug(
        "Computed depths for %d of %d nodes (max depth %d)",
        len(depths),
        graph.number_of_nodes(),
        max(depths.values(), default=-1),
    )
    return depths
