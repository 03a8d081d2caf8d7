"""lineage_graph — generational graph layout with pan/zoom/drag interaction."""

from lineage_graph.api import layout_json, render_svg
from lineage_graph.focus import FocusState
from lineage_graph.graph import (
    DatasetError,
    EdgeData,
    EdgeType,
    GraphData,
    NodeData,
    Section,
    load_dataset,
    loads_dataset,
    parse_dataset,
)
from lineage_graph.interaction import InteractionRouter
from lineage_graph.layout import LayoutConfig, LayoutNode, LayoutResult, full_layout
from lineage_graph.session import GraphSession
from lineage_graph.viewport import ViewportController, ViewportState

__all__ = [
    "DatasetError",
    "EdgeData",
    "EdgeType",
    "FocusState",
    "GraphData",
    "GraphSession",
    "InteractionRouter",
    "LayoutConfig",
    "LayoutNode",
    "LayoutResult",
    "NodeData",
    "Section",
    "ViewportController",
    "ViewportState",
    "full_layout",
    "layout_json",
    "load_dataset",
    "loads_dataset",
    "parse_dataset",
    "render_svg",
]
