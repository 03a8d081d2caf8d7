"""SVG renderer — renders a Scene to an SVG string."""

from __future__ import annotations

from lineage_graph.focus import (
    DASH_PATTERN,
    NODE_HEIGHT,
    NODE_WIDTH,
    EdgeView,
    edge_views,
)
from lineage_graph.layout.types import LayoutNode
from lineage_graph.renderers.base import Scene

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 12
FONT_FAMILY = "sans-serif"
PADDING = 40  # canvas padding in pixels when the size is derived from content
THUMB_RADIUS = 20
HIT_STROKE_WIDTH = 20
DIM_OPACITY = 0.4
SELECTED_RING = "#3b82f6"

_NODE_STYLE = 'fill="white" stroke="#d1d5db" stroke-width="2"'
_PLACEHOLDER_STYLE = 'fill="#f3f4f6" stroke="#d1d5db" stroke-width="1"'


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE, weight: str = "normal") -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}" font-weight="{weight}"'


def _num(value: float) -> str:
    return f"{value:g}"


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def _render_edge(view: EdgeView) -> str:
    style = view.style
    d = view.geometry.path
    dash = f' stroke-dasharray="{DASH_PATTERN}"' if style.dashed else ""
    attrs = f'data-source="{_escape(view.edge.source)}" data-target="{_escape(view.edge.target)}"'
    if style.clickable:
        attrs += ' class="clickable"'

    parts = [f'<g {attrs} opacity="{_num(style.opacity)}">']
    if style.clickable:
        parts.append(f'  <path d="{d}" fill="none" stroke="transparent" stroke-width="{HIT_STROKE_WIDTH}"/>')
    parts.append(f'  <path d="{d}" fill="none" stroke="{style.stroke}" stroke-width="{_num(style.width)}"{dash}/>')

    if style.show_label and view.edge.label:
        lx = (view.source.x + view.target.x) / 2
        ly = (view.source.y + view.target.y) / 2
        parts.append(
            f'  <text x="{_num(lx)}" y="{_num(ly)}" text-anchor="middle" {_font(weight="bold")} fill="#1e293b">'
            f"{_escape(view.edge.label)}</text>"
        )
    parts.append("</g>")
    return "\n".join(parts)


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _render_node(ln: LayoutNode, scene: Scene) -> str:
    focus = scene.focus
    x = ln.x - NODE_WIDTH / 2
    y = ln.y - NODE_HEIGHT / 2
    is_selected = focus.selected == ln.id
    dimmed = focus.hovered is not None and focus.hovered != ln.id and not is_selected
    opacity = DIM_OPACITY if dimmed else 1

    parts = [f'<g data-id="{_escape(ln.id)}" opacity="{_num(opacity)}">']
    parts.append(
        f'  <rect x="{_num(x)}" y="{_num(y)}" width="{_num(NODE_WIDTH)}" height="{_num(NODE_HEIGHT)}" rx="8" {_NODE_STYLE}/>'
    )
    if is_selected:
        parts.append(
            f'  <rect x="{_num(x - 4)}" y="{_num(y - 4)}" width="{_num(NODE_WIDTH + 8)}" '
            f'height="{_num(NODE_HEIGHT + 8)}" rx="10" fill="none" stroke="{SELECTED_RING}" stroke-width="4"/>'
        )

    cx = x + 8 + THUMB_RADIUS
    cy = ln.y
    thumbnail = scene.thumbnails.get(ln.id)
    if thumbnail:
        parts.append(
            f'  <image href="{_escape(thumbnail)}" x="{_num(cx - THUMB_RADIUS)}" y="{_num(cy - THUMB_RADIUS)}" '
            f'width="{THUMB_RADIUS * 2}" height="{THUMB_RADIUS * 2}" preserveAspectRatio="xMidYMid slice"/>'
        )
    else:
        initial = _escape(ln.label[:1])
        parts.append(f'  <circle cx="{_num(cx)}" cy="{_num(cy)}" r="{THUMB_RADIUS}" {_PLACEHOLDER_STYLE}/>')
        parts.append(
            f'  <text x="{_num(cx)}" y="{_num(cy)}" dominant-baseline="central" text-anchor="middle" '
            f'{_font()} fill="#9ca3af">{initial}</text>'
        )

    tx = cx + THUMB_RADIUS + 8
    parts.append(
        f'  <text x="{_num(tx)}" y="{_num(cy - 4)}" {_font(weight="bold")} fill="#0f172a">{_escape(ln.label)}</text>'
    )
    date = ln.data.date if ln.data is not None else ""
    if date:
        parts.append(
            f'  <text x="{_num(tx)}" y="{_num(cy + 12)}" {_font(FONT_SIZE - 2)} fill="#6b7280">{_escape(date)}</text>'
        )
    parts.append("</g>")
    return "\n".join(parts)


# ─── Canvas Size ────────────────────────────────────────────────────────────


def _canvas_size(scene: Scene) -> tuple[float, float]:
    """Scene size, or the transformed content bounds plus padding when unknown."""
    if scene.width > 0 and scene.height > 0:
        return scene.width, scene.height
    vp = scene.viewport
    max_x = max_y = 0.0
    for n in scene.layout.nodes:
        max_x = max(max_x, (n.x + NODE_WIDTH / 2) * vp.scale + vp.x)
        max_y = max(max_y, (n.y + NODE_HEIGHT / 2) * vp.scale + vp.y)
    return max_x + PADDING, max_y + PADDING


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a Scene, produces an SVG string."""

    def render(self, scene: Scene) -> str:
        w, h = _canvas_size(scene)
        vp = scene.viewport
        transform = f"translate({_num(vp.x)},{_num(vp.y)}) scale({_num(vp.scale)})"

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(w)}" height="{_num(h)}" '
            f'viewBox="0 0 {_num(w)} {_num(h)}">',
            f'<rect width="{_num(w)}" height="{_num(h)}" fill="#f8fafc"/>',
            f'<g transform="{transform}">',
        ]

        # Edges (behind nodes)
        for view in edge_views(scene.layout, scene.focus):
            parts.append(_render_edge(view))

        # Nodes (on top)
        for ln in scene.layout.nodes:
            parts.append(_render_node(ln, scene))

        parts.append("</g>")
        parts.append("</svg>")
        return "\n".join(parts)
