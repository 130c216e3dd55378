"""Exception hierarchy for the build graph core.

Graph algebra never raises for valid input. Everything that can go wrong
at the edges (persisted data, configuration, cyclic input) is reported
through the classes below so callers can pick what to recover from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, Iterable, List

if TYPE_CHECKING:
    from buildgraph.models import DepNode


class BuildGraphError(Exception):
    """Base class for all buildgraph errors."""
    pass


class RecoverableError(BuildGraphError):
    """Base class for recoverable errors.

    These indicate expected failure conditions; the caller is expected to
    fall back (e.g. rebuild a graph from scratch) instead of aborting.
    """
    pass


class GraphParseError(RecoverableError):
    """Persisted dependency graph could not be decoded.

    Raised for invalid JSON, missing ``vertices``/``edges`` fields and
    records of the wrong shape.
    """

    def __init__(self, diagnostic: str) -> None:
        self.diagnostic = diagnostic
        super().__init__(diagnostic)

    def __str__(self) -> str:
        return f"Failed to parse dependency graph from file: {self.diagnostic}."


class ConfigurationError(RecoverableError):
    """Configuration source is malformed or contains invalid values."""
    pass


class CyclicDependencyError(BuildGraphError):
    """Dependency graph contains a cycle, so no build order exists."""

    def __init__(self, cycle: Iterable["DepNode"]) -> None:
        self.cycle: List["DepNode"] = list(cycle)
        path = " -> ".join(str(node) for node in self.cycle)
        super().__init__(f"Circular dependency detected: {path}")


class MalformedPlanError(BuildGraphError):
    """A compiled build plan does not cover the graph it was built from."""

    def __init__(self, message: str, missing: Iterable["DepNode"] = ()) -> None:
        self.missing: FrozenSet["DepNode"] = frozenset(missing)
        super().__init__(message)


class ResolutionLimitError(BuildGraphError):
    """Dependency resolution exceeded the configured number of fetches."""
    pass
