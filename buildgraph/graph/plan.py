"""Build plan compilation.

Groups the nodes of a dependency graph into ordered phases. Nodes in the
same phase have no ordering constraint between them and can be built
concurrently; a phase may only start once every earlier phase is done.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Mapping, Set, Tuple

from buildgraph.errors import MalformedPlanError
from buildgraph.graph.levels import DepthMap, compute_depths
from buildgraph.graph.store import DepGraph, leaf_nodes
from buildgraph.models import DepNode

logger = logging.getLogger("buildgraph.graph.plan")

Phase = int


@dataclass(frozen=True)
class BuildPlan:
    """Ordered build phases.

    Attributes:
        num_phases: Number of distinct phases present.
        phase_items: (phase, nodes) pairs sorted by phase number (0-based).
    """

    num_phases: int
    phase_items: Tuple[Tuple[Phase, FrozenSet[DepNode]], ...] = ()

    @property
    def phases(self) -> Mapping[Phase, FrozenSet[DepNode]]:
        """Read-only view of phase number to the nodes built in that phase."""
        return MappingProxyType(dict(self.phase_items))

    def __iter__(self) -> Iterator[Tuple[Phase, FrozenSet[DepNode]]]:
        """Iterate over ``(phase, nodes)`` in execution order."""
        yield from self.phase_items

    def __len__(self) -> int:
        return self.num_phases

    def nodes(self) -> Set[DepNode]:
        """Return every node scheduled by the plan."""
        scheduled: Set[DepNode] = set()
        for _, members in self.phase_items:
            scheduled.update(members)
        return scheduled

    def phase_of(self, node: DepNode) -> Phase:
        """Return the phase ``node`` is scheduled in.

        Raises:
            KeyError: If the node is not part of the plan.
        """
        for phase, members in self.phase_items:
            if node in members:
                return phase
        raise KeyError(node)

    def ordered(self) -> List[List[DepNode]]:
        """Return the phases as sorted node lists, first phase first."""
        return [sorted(members) for _, members in self]


def build_plan_from_depths(depths: DepthMap) -> BuildPlan:
    """Invert a depth map into phase buckets; the phase number is the depth."""
    buckets: Dict[Phase, Set[DepNode]] = {}
    for node, depth in depths.items():
        buckets.setdefault(depth, set()).add(node)
    phase_items = tuple(
        (depth, frozenset(members)) for depth, members in sorted(buckets.items())
    )
    return BuildPlan(num_phases=len(phase_items), phase_items=phase_items)


def verify_build_plan(plan: BuildPlan, graph: DepGraph) -> None:
    """Check that ``plan`` schedules every vertex and respects every edge.

    Raises:
        MalformedPlanError: If vertices are missing, or a dependency is not
            in a strictly earlier phase than its dependent.
    """
    phase_by_node: Dict[DepNode, Phase] = {}
    for phase, members in plan:
        for node in members:
            phase_by_node[node] = phase

    missing = set(graph.nodes) - set(phase_by_node)
    if missing:
        raise MalformedPlanError(
            f"Build plan omits {len(missing)} node(s) reachable from no leaf: "
            + ", ".join(str(n) for n in sorted(missing)),
            missing=missing,
        )

    for dependent, dependency in graph.edges():
        if phase_by_node[dependency] >= phase_by_node[dependent]:
            raise MalformedPlanError(
                f"{dependency} (phase {phase_by_node[dependency]}) is not built "
                f"before {dependent} (phase {phase_by_node[dependent]})"
            )


def create_build_plan(graph: DepGraph, strict: bool = True) -> BuildPlan:
    """Compile a build plan for ``graph``.

    Args:
        graph: Fully resolved dependency graph.
        strict: Verify that the plan covers the whole graph.

    Returns:
        BuildPlan with leaves in phase 0.

    Raises:
        CyclicDependencyError: If the graph contains a cycle.
        MalformedPlanError: If ``strict`` and the plan is incomplete.
    """
    leaves = leaf_nodes(graph)
    depths = compute_depths(graph, leaves)
    plan = build_plan_from_depths(depths)
    if strict:
        verify_build_plan(plan, graph)

    logger.info(
        "Build plan: %d node(s) in %d phase(s)", len(depths), plan.num_phases
    )
    return plan
