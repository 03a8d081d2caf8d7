"""Convenience entry points: dataset text in, SVG or positions out."""

from __future__ import annotations

from typing import Any

from lineage_graph.graph import loads_dataset
from lineage_graph.layout.types import LayoutConfig
from lineage_graph.session import GraphSession


def _session(src: str, width: float, height: float, config: LayoutConfig | None) -> GraphSession:
    session = GraphSession(loads_dataset(src), config=config)
    session.resize(width, height)
    return session


def layout_json(src: str, width: float = 0, config: LayoutConfig | None = None) -> list[dict[str, Any]]:
    """Lay out a JSON dataset and return ``{id, generation, x, y}`` per node."""
    session = _session(src, width, 0, config)
    return [{"id": n.id, "generation": n.generation, "x": n.x, "y": n.y} for n in session.layout.nodes]


def render_svg(
    src: str,
    width: float = 1200,
    height: float = 800,
    config: LayoutConfig | None = None,
    select: str | None = None,
) -> str:
    """Lay out a JSON dataset and render it to SVG, optionally with a node selected."""
    session = _session(src, width, height, config)
    if select is not None:
        session.router.click_node(select)
    return session.render_svg()
