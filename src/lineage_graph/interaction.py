"""Interaction router — pointer events to drag / pan / click behaviour.

State machine:

    Idle ──down on node──▶ DraggingNode ──up──▶ Idle
    Idle ──down elsewhere─▶ PanningCanvas ──up──▶ Idle

A press released where it started, with no movement in between, is a
click: on a node it selects the node, on a clickable edge it follows the
edge to its other end.
Hover is tracked independently of the press state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from lineage_graph.focus import (
    EDGE_HIT_WIDTH,
    FocusState,
    curve_distance,
    edge_views,
    node_contains,
)
from lineage_graph.graph import EdgeData
from lineage_graph.layout.types import LayoutNode, LayoutResult
from lineage_graph.viewport import ViewportController

logger = logging.getLogger(__name__)

# ─── States ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class DraggingNode:
    """A node follows the pointer; ``grab_*`` keep it from jumping to the cursor."""

    node_id: str
    grab_dx: float
    grab_dy: float


@dataclass(frozen=True)
class PanningCanvas:
    anchor_x: float
    anchor_y: float


InteractionState = Idle | DraggingNode | PanningCanvas


@dataclass
class _Press:
    screen_x: float
    screen_y: float
    node_id: str | None = None
    edge: EdgeData | None = None
    moved: bool = False


# ─── Search ─────────────────────────────────────────────────────────────────


def find_node(nodes: Iterable[LayoutNode], query: str) -> LayoutNode | None:
    """First node whose label contains ``query``, case-insensitively."""
    needle = query.strip().lower()
    if not needle:
        return None
    for node in nodes:
        if needle in node.label.lower():
            return node
    return None


# ─── Router ─────────────────────────────────────────────────────────────────


class InteractionRouter:
    """Routes pointer and wheel events against a committed layout.

    Node positions are mutated directly during a drag; the layout pipeline
    is never re-run from here.
    """

    def __init__(
        self,
        layout: LayoutResult,
        viewport: ViewportController,
        focus: FocusState | None = None,
    ) -> None:
        self.layout = layout
        self.viewport = viewport
        self.focus = focus or FocusState()
        self.state: InteractionState = Idle()
        self._press: _Press | None = None

    def rebind(self, layout: LayoutResult) -> None:
        """Switch to a freshly computed layout, dropping focus on vanished ids."""
        self.layout = layout
        self.state = Idle()
        self._press = None
        if layout.node(self.focus.selected) is None:
            self.focus.selected = None
        if layout.node(self.focus.hovered) is None:
            self.focus.hovered = None

    # ── Hit testing ──

    def node_at(self, screen_x: float, screen_y: float) -> LayoutNode | None:
        """Top-most node under a screen point (later nodes draw on top)."""
        world_x, world_y = self.viewport.to_world(screen_x, screen_y)
        for node in reversed(self.layout.nodes):
            if node_contains(node, world_x, world_y):
                return node
        return None

    def edge_at(self, screen_x: float, screen_y: float) -> EdgeData | None:
        """Top-most clickable edge whose hit stroke covers a screen point."""
        world_x, world_y = self.viewport.to_world(screen_x, screen_y)
        for view in reversed(edge_views(self.layout, self.focus)):
            if not view.style.clickable:
                continue
            if curve_distance(view.geometry, world_x, world_y) <= EDGE_HIT_WIDTH / 2:
                return view.edge
        return None

    # ── Pointer events ──

    def pointer_down(self, screen_x: float, screen_y: float) -> None:
        node = self.node_at(screen_x, screen_y)
        if node is not None:
            world_x, world_y = self.viewport.to_world(screen_x, screen_y)
            self.state = DraggingNode(node.id, world_x - node.x, world_y - node.y)
            self._press = _Press(screen_x, screen_y, node_id=node.id)
            return
        self.state = PanningCanvas(screen_x, screen_y)
        self._press = _Press(screen_x, screen_y, edge=self.edge_at(screen_x, screen_y))

    def pointer_move(self, screen_x: float, screen_y: float) -> None:
        press = self._press
        if press is not None and (screen_x, screen_y) != (press.screen_x, press.screen_y):
            press.moved = True

        state = self.state
        if isinstance(state, DraggingNode):
            node = self.layout.node(state.node_id)
            if node is not None:
                world_x, world_y = self.viewport.to_world(screen_x, screen_y)
                node.x = world_x - state.grab_dx
                node.y = world_y - state.grab_dy
        elif isinstance(state, PanningCanvas):
            self.viewport.pan_by(screen_x - state.anchor_x, screen_y - state.anchor_y)
            self.state = PanningCanvas(screen_x, screen_y)

        hit = self.node_at(screen_x, screen_y)
        self.focus.hovered = hit.id if hit is not None else None

    def pointer_up(self, screen_x: float, screen_y: float) -> None:
        press = self._press
        self._press = None
        self.state = Idle()
        if press is None or press.moved or (screen_x, screen_y) != (press.screen_x, press.screen_y):
            return
        if press.node_id is not None:
            self.click_node(press.node_id)
        elif press.edge is not None:
            self.click_edge(press.edge)

    def pointer_enter(self, node_id: str) -> None:
        if self.layout.node(node_id) is not None:
            self.focus.hovered = node_id

    def pointer_leave(self, node_id: str) -> None:
        if self.focus.hovered == node_id:
            self.focus.hovered = None

    def wheel(self, screen_x: float, screen_y: float, delta_y: float) -> None:
        self.viewport.wheel(screen_x, screen_y, delta_y)

    # ── Focus actions ──

    def click_node(self, node_id: str) -> bool:
        if self.layout.node(node_id) is None:
            return False
        self.focus.selected = node_id
        logger.debug("selected %s", node_id)
        return True

    def click_edge(self, edge: EdgeData) -> bool:
        """Follow ``edge`` away from the selected node.

        Only edges touching the current selection are clickable; any other
        edge, or a dangling far end, leaves the focus unchanged.
        """
        selected = self.focus.selected
        if selected is None or not edge.touches(selected):
            return False
        return self.click_node(edge.other_end(selected))

    def clear_selection(self) -> None:
        self.focus.selected = None

    def search(self, query: str) -> LayoutNode | None:
        """Select the first node whose label matches ``query``."""
        found = find_node(self.layout.nodes, query)
        if found is not None:
            self.click_node(found.id)
        return found

    def selected_node(self) -> LayoutNode | None:
        return self.layout.node(self.focus.selected)

    def hovered_node(self) -> LayoutNode | None:
        return self.layout.node(self.focus.hovered)
