"""Persisted form of the dependency graph.

The graph is stored as a JSON document with two fields::

    {
      "vertices": [{"package_name": "...", "project_name": "..."}, ...],
      "edges": [[{...source...}, {...target...}], ...]
    }

Vertices and edges are written in sorted order so the same graph always
produces the same bytes. Decoding validates the document with Pydantic;
any missing field or malformed record raises :class:`GraphParseError`
instead of being replaced by a default.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import networkx as nx
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from buildgraph.errors import GraphParseError
from buildgraph.fs import FileSystem, LocalFileSystem, PathLike
from buildgraph.graph.store import DepGraph, edge_set
from buildgraph.models import DepNode

logger = logging.getLogger("buildgraph.graph.codec")


class NodeRecord(BaseModel):
    """Serialized form of a :class:`DepNode`."""

    model_config = ConfigDict(frozen=True)

    package_name: StrictStr
    project_name: StrictStr

    @classmethod
    def from_node(cls, node: DepNode) -> "NodeRecord":
        return cls(package_name=node.package_name, project_name=node.project_name)

    def to_node(self) -> DepNode:
        return DepNode(self.package_name, self.project_name)


class GraphInfo(BaseModel):
    """Structural snapshot of a graph: its vertex list and edge list."""

    vertices: List[NodeRecord]
    edges: List[Tuple[NodeRecord, NodeRecord]]


def to_graph_info(graph: DepGraph) -> GraphInfo:
    """Snapshot ``graph`` with vertices and edges in sorted order."""
    return GraphInfo(
        vertices=[NodeRecord.from_node(node) for node in sorted(graph.nodes)],
        edges=[
            (NodeRecord.from_node(source), NodeRecord.from_node(target))
            for source, target in sorted(edge_set(graph))
        ],
    )


def from_graph_info(info: GraphInfo) -> DepGraph:
    """Rebuild a graph declaring every vertex and edge in ``info``."""
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(record.to_node() for record in info.vertices)
    graph.add_edges_from(
        (source.to_node(), target.to_node()) for source, target in info.edges
    )
    return graph


def dumps_graph(graph: DepGraph, indent: Optional[int] = None) -> bytes:
    """Encode ``graph`` as UTF-8 JSON bytes."""
    return to_graph_info(graph).model_dump_json(indent=indent).encode("utf-8")


def loads_graph(data: bytes) -> DepGraph:
    """Decode JSON bytes produced by :func:`dumps_graph`.

    Raises:
        GraphParseError: If the content is not a valid graph document.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise GraphParseError(f"content is not valid UTF-8 ({exc})") from exc

    try:
        info = GraphInfo.model_validate_json(text)
    except ValidationError as exc:
        raise GraphParseError(str(exc)) from exc
    return from_graph_info(info)


def save_graph(
    path: PathLike,
    graph: DepGraph,
    fs: Optional[FileSystem] = None,
    indent: Optional[int] = None,
) -> None:
    """Persist ``graph`` to ``path``.

    Write failures propagate as ``OSError``.
    """
    fs = fs or LocalFileSystem()
    fs.write_bytes(path, dumps_graph(graph, indent=indent))
    logger.info(
        "Saved dependency graph to %s: %d vertices, %d edges",
        path,
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )


def load_graph(path: PathLike, fs: Optional[FileSystem] = None) -> DepGraph:
    """Load a graph persisted by :func:`save_graph`.

    Raises:
        OSError: If the file cannot be read.
        GraphParseError: If the file content is malformed.
    """
    fs = fs or LocalFileSystem()
    graph = loads_graph(fs.read_bytes(path))
    logger.debug(
        "Loaded dependency graph from %s: %d vertices, %d edges",
        path,
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph
