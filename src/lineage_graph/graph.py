"""Graph module — the immutable input dataset.

A dataset is a JSON object with two ordered arrays:

    {"nodes": [{"id", "label", "generation", "type", "date", "wiki"?, "sections"?}],
     "edges": [{"source", "target", "type"?, "label"?}]}

Nodes and edges are loaded once and never mutated afterwards. Positions
live on ``LayoutNode`` (see ``lineage_graph.layout``), not here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import networkx as nx

logger = logging.getLogger(__name__)

# Node categories seen in the shipped datasets. The set is open: unknown
# categories load unchanged.
KNOWN_NODE_TYPES: frozenset[str] = frozenset(
    {"root", "cynic", "academy", "stoic", "rival", "roman", "modern", "renegade"}
)


class DatasetError(ValueError):
    """Raised when an input dataset does not match the dataset contract."""


class EdgeType(str, Enum):
    """Relationship category of an edge."""

    Student = "student"
    Rival = "rival"
    Influence = "influence"
    Dotted = "dotted"  # legacy spelling of a dashed edge

    @classmethod
    def parse(cls, value: str | None) -> EdgeType:
        if value is None:
            return cls.Student
        try:
            return cls(value)
        except ValueError:
            logger.warning("unknown edge type %r, treating as %r", value, cls.Student.value)
            return cls.Student

    @property
    def is_dashed(self) -> bool:
        return self is not EdgeType.Student


@dataclass(frozen=True)
class Section:
    """A titled block of descriptive text shown in the detail view."""

    title: str
    text: str


@dataclass(frozen=True)
class NodeData:
    """One entity (figure or school) of the dataset."""

    id: str
    label: str
    generation: int
    type: str = "default"
    date: str = ""
    wiki: str | None = None
    sections: tuple[Section, ...] = ()
    desc: str | None = None


@dataclass(frozen=True)
class EdgeData:
    """A directed relationship between two node ids."""

    source: str
    target: str
    edge_type: EdgeType = EdgeType.Student
    label: str | None = None

    def touches(self, node_id: str | None) -> bool:
        return node_id is not None and node_id in (self.source, self.target)

    def other_end(self, node_id: str) -> str:
        """Return the endpoint that is not ``node_id``."""
        return self.target if node_id == self.source else self.source


@dataclass
class GraphData:
    """The loaded dataset.

    ``nodes`` and ``edges`` keep the input order. ``digraph`` is a
    networkx MultiDiGraph over node ids holding only resolvable edges;
    dangling edges stay in ``edges`` but never reach the graph.
    """

    nodes: list[NodeData]
    edges: list[EdgeData]
    digraph: nx.MultiDiGraph = field(default_factory=nx.MultiDiGraph)

    def __post_init__(self) -> None:
        if self.digraph.number_of_nodes() == 0 and self.nodes:
            self.digraph = build_digraph(self.nodes, self.edges)

    def node(self, node_id: str) -> NodeData | None:
        attrs = self.digraph.nodes.get(node_id)
        return attrs["data"] if attrs else None


def build_digraph(nodes: list[NodeData], edges: list[EdgeData]) -> nx.MultiDiGraph:
    """Build the adjacency graph, skipping edges whose endpoints do not resolve."""
    g: nx.MultiDiGraph = nx.MultiDiGraph()
    for node in nodes:
        g.add_node(node.id, data=node)
    for edge in edges:
        if edge.source not in g or edge.target not in g:
            logger.debug("dangling edge %s -> %s skipped", edge.source, edge.target)
            continue
        g.add_edge(edge.source, edge.target, data=edge)
    return g


# ─── Parsing ──────────────────────────────────────────────────────────────────


def _parse_sections(raw: Any, node_id: str) -> tuple[Section, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DatasetError(f"node {node_id!r}: 'sections' must be a list")
    sections: list[Section] = []
    for item in raw:
        if not isinstance(item, dict):
            raise DatasetError(f"node {node_id!r}: each section must be an object")
        text = item.get("text", item.get("content", ""))
        sections.append(Section(title=str(item.get("title", "")), text=str(text)))
    return tuple(sections)


def _parse_node(raw: Any) -> NodeData:
    if not isinstance(raw, dict):
        raise DatasetError(f"node entry must be an object, got {type(raw).__name__}")
    node_id = raw.get("id")
    if node_id is None or node_id == "":
        raise DatasetError(f"node without id: {raw!r}")
    node_id = str(node_id)

    generation = raw.get("generation")
    if isinstance(generation, bool) or not isinstance(generation, int) or generation < 0:
        raise DatasetError(f"node {node_id!r}: generation must be a non-negative integer, got {generation!r}")

    node_type = str(raw.get("type") or "default")
    if node_type not in KNOWN_NODE_TYPES:
        logger.debug("node %r has uncategorised type %r", node_id, node_type)

    wiki = raw.get("wiki") or None
    if wiki is not None and not isinstance(wiki, str):
        raise DatasetError(f"node {node_id!r}: 'wiki' must be a URL string, got {wiki!r}")
    desc = raw.get("desc")

    return NodeData(
        id=node_id,
        label=str(raw.get("label") or node_id),
        generation=generation,
        type=node_type,
        date=str(raw.get("date") or ""),
        wiki=wiki,
        sections=_parse_sections(raw.get("sections"), node_id),
        desc=str(desc) if desc else None,
    )


def _parse_edge(raw: Any) -> EdgeData:
    if not isinstance(raw, dict):
        raise DatasetError(f"edge entry must be an object, got {type(raw).__name__}")
    source, target = raw.get("source"), raw.get("target")
    if source is None or target is None:
        raise DatasetError(f"edge requires source and target: {raw!r}")
    label = raw.get("label")
    return EdgeData(
        source=str(source),
        target=str(target),
        edge_type=EdgeType.parse(raw.get("type")),
        label=str(label) if label is not None else None,
    )


def parse_dataset(payload: Any) -> GraphData:
    """Build a ``GraphData`` from an already-decoded dataset object."""
    if not isinstance(payload, dict):
        raise DatasetError("dataset must be a JSON object with 'nodes' and 'edges'")
    raw_nodes = payload.get("nodes")
    if not isinstance(raw_nodes, list):
        raise DatasetError("dataset is missing a 'nodes' array")
    raw_edges = payload.get("edges")
    if raw_edges is None:
        raw_edges = []
    if not isinstance(raw_edges, list):
        raise DatasetError("'edges' must be an array")

    nodes = [_parse_node(n) for n in raw_nodes]
    seen: set[str] = set()
    for node in nodes:
        if node.id in seen:
            raise DatasetError(f"duplicate node id {node.id!r}")
        seen.add(node.id)

    edges = [_parse_edge(e) for e in raw_edges]
    graph = GraphData(nodes=nodes, edges=edges, digraph=build_digraph(nodes, edges))
    logger.debug(
        "loaded dataset: %d nodes, %d edges (%d resolvable)",
        len(nodes),
        len(edges),
        graph.digraph.number_of_edges(),
    )
    return graph


def loads_dataset(text: str) -> GraphData:
    """Parse a dataset from JSON text."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"invalid JSON: {exc}") from exc
    return parse_dataset(payload)


def load_dataset(source: str | Path) -> GraphData:
    """Load a dataset from a JSON file path."""
    return loads_dataset(Path(source).read_text(encoding="utf-8"))
