"""Tests for depth analysis."""

import networkx as nx
import pytest

from buildgraph.errors import CyclicDependencyError
from buildgraph.graph.levels import (
    compute_depths,
    ensure_acyclic,
    find_cycle,
    merge_depths,
    traverse_with_depth,
)
from buildgraph.graph.store import overlays, star, transpose, vertex_graph
from buildgraph.models import DepNode

A, B, C, D, E = (DepNode(name, "main") for name in "abcde")


def test_merge_depths_keeps_maximum() -> None:
    """Shared nodes take the larger depth; others are carried over."""
    merged = merge_depths({A: 1, B: 3}, {A: 2, B: 0, C: 5})

    assert merged == {A: 2, B: 3, C: 5}


def test_merge_depths_is_commutative() -> None:
    left = {A: 1, B: 4}
    right = {B: 2, C: 0}

    assert merge_depths(left, right) == merge_depths(right, left)


def test_traverse_with_depth_measures_siblings_independently() -> None:
    """Sibling branches do not accumulate depth from each other."""
    # a depends on b and c, both depend on d.
    graph = overlays([star(A, [B, C]), star(B, [D]), star(C, [D])])

    depths = traverse_with_depth(transpose(graph), D)

    assert depths == {D: 0, B: 1, C: 1, A: 2}


def test_traverse_with_depth_keeps_longest_path_within_one_walk() -> None:
    """A node reached by a short and a long path gets the long one."""
    # a -> e directly, and a -> b -> c -> e.
    graph = overlays([star(A, [B, E]), star(B, [C]), star(C, [E])])

    depths = traverse_with_depth(transpose(graph), E)

    assert depths[A] == 3
    assert depths[C] == 1


def test_traverse_with_depth_unknown_start_is_empty() -> None:
    assert traverse_with_depth(vertex_graph([A]), B) == {}


def test_compute_depths_takes_maximum_across_leaves() -> None:
    """Depth comes from the furthest leaf, not the nearest."""
    # a -> b (leaf); a -> c -> d (leaf)
    graph = overlays([star(A, [B, C]), star(C, [D])])

    depths = compute_depths(graph)

    assert depths == {B: 0, D: 0, C: 1, A: 2}


def test_find_cycle_returns_closed_path() -> None:
    graph = overlays([star(A, [B]), star(B, [C]), star(C, [A])])

    cycle = find_cycle(graph)

    assert cycle is not None
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {A, B, C}


def test_find_cycle_none_for_dag() -> None:
    assert find_cycle(overlays([star(A, [B]), star(B, [C])])) is None


def test_compute_depths_rejects_cycle() -> None:
    """Cyclic input fails fast instead of looping forever."""
    graph = overlays([star(A, [B]), star(B, [C]), star(C, [B]), star(C, [D])])

    with pytest.raises(CyclicDependencyError) as excinfo:
        compute_depths(graph)

    assert set(excinfo.value.cycle) == {B, C}
    assert "->" in str(excinfo.value)


def test_ensure_acyclic_rejects_self_loop() -> None:
    with pytest.raises(CyclicDependencyError):
        ensure_acyclic(star(A, [A]))


def test_compute_depths_handles_long_chain() -> None:
    """Deep chains do not hit the interpreter recursion limit."""
    chain = [DepNode(f"pkg{i}", "main") for i in range(3000)]
    graph = nx.MultiDiGraph()
    graph.add_edges_from(zip(chain, chain[1:]))

    depths = compute_depths(graph)

    assert depths[chain[-1]] == 0
    assert depths[chain[0]] == len(chain) - 1
