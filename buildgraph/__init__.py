"""buildgraph: dependency graph and build-phase scheduling for multi-package builds."""

from buildgraph.config import BuildGraphConfig, load_config
from buildgraph.errors import (
    BuildGraphError,
    ConfigurationError,
    CyclicDependencyError,
    GraphParseError,
    MalformedPlanError,
    RecoverableError,
    ResolutionLimitError,
)
from buildgraph.graph import (
    BuildPlan,
    DepGraph,
    create_build_plan,
    extend_graph,
    graph_from_project,
    leaf_nodes,
    load_graph,
    save_graph,
)
from buildgraph.models import DepNode, Project
from buildgraph.pipeline import PlanResult, load_cached_graph, plan_project
from buildgraph.resolver import DependencyResolver, ResolutionResult

__version__ = "0.1.0"

__all__ = [
    "BuildGraphConfig",
    "BuildGraphError",
    "BuildPlan",
    "ConfigurationError",
    "CyclicDependencyError",
    "DepGraph",
    "DepNode",
    "DependencyResolver",
    "GraphParseError",
    "MalformedPlanError",
    "PlanResult",
    "Project",
    "RecoverableError",
    "ResolutionLimitError",
    "ResolutionResult",
    "create_build_plan",
    "extend_graph",
    "graph_from_project",
    "leaf_nodes",
    "load_cached_graph",
    "load_config",
    "load_graph",
    "plan_project",
    "save_graph",
]
