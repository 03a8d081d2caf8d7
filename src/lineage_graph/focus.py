"""Focus model and the edge highlight/geometry derivation.

Everything here except ``FocusState`` is a pure function of the focus,
an edge and its endpoint positions, recomputed on every render.
"""

from __future__ import annotations

from dataclasses import dataclass

from lineage_graph.graph import EdgeData, EdgeType
from lineage_graph.layout.types import LayoutNode, LayoutResult

# ─── Constants ──────────────────────────────────────────────────────────────

NODE_WIDTH: float = 160
NODE_HEIGHT: float = 70
EDGE_ANCHOR_OFFSET: float = 25  # bottom/top anchor distance from node centre
EDGE_SIDE_OFFSET: float = 70  # side anchor distance for same-generation rival edges
EDGE_HIT_WIDTH: float = 20  # width of the invisible stroke that receives clicks

RIVAL_STROKE = "#fca5a5"
RIVAL_STROKE_ACTIVE = "#ef4444"
NEUTRAL_STROKE = "#cbd5e1"
NEUTRAL_STROKE_ACTIVE = "#3b82f6"
DASH_PATTERN = "5,5"


@dataclass
class FocusState:
    """Selected and hovered node ids.

    Ids, not node copies: the nodes keep moving (drag) after focus is set.
    """

    selected: str | None = None
    hovered: str | None = None

    @property
    def active(self) -> bool:
        return self.selected is not None or self.hovered is not None


@dataclass(frozen=True)
class EdgeFocus:
    highlighted: bool
    clickable: bool
    dimmed: bool


@dataclass(frozen=True)
class EdgeStyle:
    """Resolved drawing style of one edge."""

    stroke: str
    width: float
    opacity: float
    dashed: bool
    show_label: bool
    clickable: bool


@dataclass(frozen=True)
class EdgeGeometry:
    """Endpoints of the drawn curve, in world coordinates."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def path(self) -> str:
        return curve_path(self.x1, self.y1, self.x2, self.y2)

    def control_points(self) -> tuple[tuple[float, float], ...]:
        mid_y = (self.y1 + self.y2) / 2
        return ((self.x1, self.y1), (self.x1, mid_y), (self.x2, mid_y), (self.x2, self.y2))


def edge_focus(edge: EdgeData, focus: FocusState) -> EdgeFocus:
    on_selected = edge.touches(focus.selected)
    highlighted = on_selected or edge.touches(focus.hovered)
    return EdgeFocus(
        highlighted=highlighted,
        clickable=on_selected,
        dimmed=focus.active and not highlighted,
    )


def edge_style(edge: EdgeData, focus: FocusState) -> EdgeStyle:
    state = edge_focus(edge, focus)
    rival = edge.edge_type is EdgeType.Rival
    if state.highlighted:
        stroke = RIVAL_STROKE_ACTIVE if rival else NEUTRAL_STROKE_ACTIVE
        width = 3.0
    else:
        stroke = RIVAL_STROKE if rival else NEUTRAL_STROKE
        width = 1.5 if rival else 2.0
    return EdgeStyle(
        stroke=stroke,
        width=width,
        opacity=1.0 if state.highlighted else 0.6,
        dashed=edge.edge_type.is_dashed,
        show_label=edge.label is not None and state.highlighted,
        clickable=state.clickable,
    )


def edge_geometry(edge: EdgeData, source: LayoutNode, target: LayoutNode) -> EdgeGeometry:
    """Anchor points of an edge.

    Rival edges between contemporaries run side to side; everything else
    leaves the source's bottom anchor and enters the target's top anchor.
    """
    if edge.edge_type is EdgeType.Rival and source.generation == target.generation:
        if source.x < target.x:
            x1, x2 = source.x + EDGE_SIDE_OFFSET, target.x - EDGE_SIDE_OFFSET
        else:
            x1, x2 = source.x - EDGE_SIDE_OFFSET, target.x + EDGE_SIDE_OFFSET
        return EdgeGeometry(x1=x1, y1=source.y, x2=x2, y2=target.y)
    return EdgeGeometry(
        x1=source.x,
        y1=source.y + EDGE_ANCHOR_OFFSET,
        x2=target.x,
        y2=target.y - EDGE_ANCHOR_OFFSET,
    )


def curve_path(x1: float, y1: float, x2: float, y2: float) -> str:
    """Vertical cubic curve with both control points at the mid height."""
    mid_y = (y1 + y2) / 2
    return f"M {x1:g} {y1:g} C {x1:g} {mid_y:g}, {x2:g} {mid_y:g}, {x2:g} {y2:g}"


def node_contains(node: LayoutNode, world_x: float, world_y: float) -> bool:
    """True when the world point lies on the node's body."""
    return abs(world_x - node.x) <= NODE_WIDTH / 2 and abs(world_y - node.y) <= NODE_HEIGHT / 2


def _bezier_point(points: tuple[tuple[float, float], ...], t: float) -> tuple[float, float]:
    (x0, y0), (x1, y1), (x2, y2), (x3, y3) = points
    u = 1 - t
    a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
    return (a * x0 + b * x1 + c * x2 + d * x3, a * y0 + b * y1 + c * y2 + d * y3)


def _segment_distance(px: float, py: float, ax: float, ay: float, bx: float, by: float) -> float:
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return ((px - ax) ** 2 + (py - ay) ** 2) ** 0.5
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / length_sq))
    cx, cy = ax + t * dx, ay + t * dy
    return ((px - cx) ** 2 + (py - cy) ** 2) ** 0.5


def curve_distance(geometry: EdgeGeometry, world_x: float, world_y: float, samples: int = 32) -> float:
    """Approximate distance from a world point to the drawn curve."""
    points = geometry.control_points()
    polyline = [_bezier_point(points, i / samples) for i in range(samples + 1)]
    return min(
        _segment_distance(world_x, world_y, *polyline[i], *polyline[i + 1]) for i in range(samples)
    )


@dataclass(frozen=True)
class EdgeView:
    """An edge with its resolved endpoints, anchors and style."""

    edge: EdgeData
    source: LayoutNode
    target: LayoutNode
    geometry: EdgeGeometry
    style: EdgeStyle


def edge_views(layout: LayoutResult, focus: FocusState) -> list[EdgeView]:
    """Drawable edges in dataset order; dangling edges are skipped."""
    views: list[EdgeView] = []
    for edge in layout.edges:
        ends = layout.endpoints(edge)
        if ends is None:
            continue
        source, target = ends
        views.append(
            EdgeView(
                edge=edge,
                source=source,
                target=target,
                geometry=edge_geometry(edge, source, target),
                style=edge_style(edge, focus),
            )
        )
    return views
