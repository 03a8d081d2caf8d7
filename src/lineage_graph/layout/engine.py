"""Layout engine — generational layout pipeline.

Phases:
  1. Generation index (group nodes by generation, input order kept)
  2. Grid initialisation (deterministic spread over a wide virtual canvas)
  3. Force relaxation (fixed iterations, x-only, y pinned to generation)
  4. Collision resolution (sorted sweeps enforcing a minimum sibling gap)

Every phase is deterministic: the same dataset and width always produce
the same positions. There is no convergence check anywhere; iteration and
pass counts are fixed by ``LayoutConfig``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from lineage_graph.graph import EdgeData, GraphData, NodeData
from lineage_graph.layout.types import LayoutConfig, LayoutNode, LayoutResult

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = LayoutConfig()

# ─── Generation Index ─────────────────────────────────────────────────────────


def group_by_generation(nodes: Iterable[NodeData]) -> dict[int, list[NodeData]]:
    """Map generation → member nodes, each list in input order.

    Keys appear in order of first occurrence. Sibling order here is the
    initial sibling index; it is never sorted by id.
    """
    groups: dict[int, list[NodeData]] = {}
    for node in nodes:
        groups.setdefault(node.generation, []).append(node)
    return groups


def generation_y(generation: int, config: LayoutConfig = _DEFAULT_CONFIG) -> float:
    """The pinned y of a generation band."""
    return generation * config.y_spacing + config.y_offset


def effective_width(width: float | None, config: LayoutConfig = _DEFAULT_CONFIG) -> float:
    """Container width, or the configured fallback when unknown or degenerate."""
    if width is None or not math.isfinite(width) or width <= 0:
        return config.default_width
    return width


# ─── Grid Initialisation ──────────────────────────────────────────────────────


def initial_x(index: int, count: int, width: float, config: LayoutConfig = _DEFAULT_CONFIG) -> float:
    """x of sibling ``index`` out of ``count`` on a container of ``width``.

    A lone node is centred. Otherwise siblings are spaced evenly over
    ``spread_factor × width`` starting at ``start_factor × width``, which
    deliberately overshoots the visible area.
    """
    if count == 1:
        return width / 2
    available = width * config.spread_factor
    start_x = width * config.start_factor
    step = available / (count + 1)
    return start_x + step * (index + 1)


def initial_positions(
    nodes: Sequence[NodeData],
    width: float | None,
    config: LayoutConfig = _DEFAULT_CONFIG,
) -> list[LayoutNode]:
    """Place every node on its generation band at its initial grid x."""
    w = effective_width(width, config)
    groups = group_by_generation(nodes)
    sibling_index: dict[str, int] = {}
    for members in groups.values():
        for i, member in enumerate(members):
            sibling_index[member.id] = i

    placed: list[LayoutNode] = []
    for node in nodes:
        count = len(groups[node.generation])
        placed.append(
            LayoutNode(
                id=node.id,
                generation=node.generation,
                x=initial_x(sibling_index[node.id], count, w, config),
                y=generation_y(node.generation, config),
                data=node,
            )
        )
    return placed


# ─── Force Relaxation ─────────────────────────────────────────────────────────


@dataclass(slots=True)
class _Body:
    """Relaxation-scoped working copy of a node.

    Velocity never leaves this phase, and there is none in y.
    """

    node: LayoutNode
    x: float
    y: float
    vx: float = 0.0


def relax(
    nodes: Sequence[LayoutNode],
    edges: Sequence[EdgeData],
    config: LayoutConfig = _DEFAULT_CONFIG,
) -> None:
    """Run the fixed-iteration physics pass, updating ``x`` in place.

    Each iteration:
      - Repulsion between every pair closer than ``repulsion_range`` and
        within ``band_height`` vertically (in practice: same generation),
        force ``k / (dist² + softening)`` along x.
      - A weak spring along x for each edge whose endpoints resolve.
      - Integration: ``x += vx``, ``vx *= damping``, ``y`` reset to the
        generation band. There is no vertical freedom.
    """
    bodies = [_Body(node=n, x=n.x, y=n.y) for n in nodes]
    by_id = {b.node.id: b for b in bodies}
    springs = [
        (by_id[e.source], by_id[e.target]) for e in edges if e.source in by_id and e.target in by_id
    ]
    n = len(bodies)

    for _ in range(config.iterations):
        # Repulsion
        for a in range(n):
            body_a = bodies[a]
            for b in range(a + 1, n):
                body_b = bodies[b]
                dx = body_a.x - body_b.x
                dy = body_a.y - body_b.y
                dist_sq = dx * dx + dy * dy
                dist = math.sqrt(dist_sq) or 1.0
                if dist < config.repulsion_range and abs(dy) < config.band_height:
                    force = config.repulsion_k / (dist_sq + config.repulsion_softening)
                    fx = (dx / dist) * force
                    body_a.vx += fx
                    body_b.vx -= fx

        # Attraction
        for source, target in springs:
            fx = (target.x - source.x) * config.spring_k
            source.vx += fx
            target.vx -= fx

        # Integration
        for body in bodies:
            body.x += body.vx
            body.vx *= config.damping
            body.y = generation_y(body.node.generation, config)

    for body in bodies:
        body.node.x = body.x
        body.node.y = body.y


# ─── Collision Resolution ─────────────────────────────────────────────────────


def resolve_collisions(nodes: Sequence[LayoutNode], config: LayoutConfig = _DEFAULT_CONFIG) -> None:
    """Enforce ``min_gap`` between x-adjacent siblings, in place.

    Runs ``collision_passes`` passes; each pass sorts every generation by
    x and pushes any too-close adjacent pair apart symmetrically. Fixing
    one pair can break its neighbour, so the fixed pass count is a
    heuristic bound. With ``enforce_min_gap`` a final one-sided sweep
    moves any remaining offender right until the gap holds exactly.
    """
    groups: dict[int, list[LayoutNode]] = {}
    for node in nodes:
        groups.setdefault(node.generation, []).append(node)

    for _pass in range(config.collision_passes):
        for group in groups.values():
            members = sorted(group, key=lambda m: m.x)
            for i in range(len(members) - 1):
                left, right = members[i], members[i + 1]
                gap = right.x - left.x
                if gap < config.min_gap:
                    push = (config.min_gap - gap) / 2
                    left.x -= push
                    right.x += push

    if not config.enforce_min_gap:
        return

    settled = 0
    for group in groups.values():
        members = sorted(group, key=lambda m: m.x)
        for i in range(len(members) - 1):
            left, right = members[i], members[i + 1]
            if right.x - left.x < config.min_gap:
                right.x = left.x + config.min_gap
                settled += 1
    if settled:
        logger.debug("settle sweep moved %d node(s) left unresolved by %d passes", settled, config.collision_passes)


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def full_layout(
    graph: GraphData,
    width: float | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Run grid initialisation, relaxation and collision resolution."""
    config = config or _DEFAULT_CONFIG
    w = effective_width(width, config)
    nodes = initial_positions(graph.nodes, w, config)
    relax(nodes, graph.edges, config)
    resolve_collisions(nodes, config)
    logger.debug(
        "layout committed: %d nodes, %d generations, width=%s",
        len(nodes),
        len({n.generation for n in nodes}),
        w,
    )
    return LayoutResult(nodes=nodes, edges=list(graph.edges), width=w)
