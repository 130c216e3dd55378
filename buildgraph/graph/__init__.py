"""Dependency graph core: construction, depth analysis, planning, persistence."""

from buildgraph.graph.codec import (
    GraphInfo,
    NodeRecord,
    dumps_graph,
    from_graph_info,
    load_graph,
    loads_graph,
    save_graph,
    to_graph_info,
)
from buildgraph.graph.levels import (
    DepthMap,
    compute_depths,
    ensure_acyclic,
    find_cycle,
    merge_depths,
    traverse_with_depth,
)
from buildgraph.graph.plan import (
    BuildPlan,
    build_plan_from_depths,
    create_build_plan,
    verify_build_plan,
)
from buildgraph.graph.store import (
    DepGraph,
    edge_set,
    empty_graph,
    extend_graph,
    graph_from_project,
    leaf_nodes,
    overlay,
    overlays,
    reachable_subgraph,
    simplify,
    star,
    transpose,
    vertex_graph,
    vertex_set,
)

__all__ = [
    "BuildPlan",
    "DepGraph",
    "DepthMap",
    "GraphInfo",
    "NodeRecord",
    "build_plan_from_depths",
    "compute_depths",
    "create_build_plan",
    "dumps_graph",
    "edge_set",
    "empty_graph",
    "ensure_acyclic",
    "extend_graph",
    "find_cycle",
    "from_graph_info",
    "graph_from_project",
    "leaf_nodes",
    "load_graph",
    "loads_graph",
    "merge_depths",
    "overlay",
    "overlays",
    "reachable_subgraph",
    "save_graph",
    "simplify",
    "star",
    "to_graph_info",
    "transpose",
    "traverse_with_depth",
    "verify_build_plan",
    "vertex_graph",
    "vertex_set",
]
