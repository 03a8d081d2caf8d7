"""Layout types and tuning constants."""

from __future__ import annotations

from dataclasses import dataclass, field

from lineage_graph.graph import EdgeData, NodeData

# ─── Constants ──────────────────────────────────────────────────────────────

Y_SPACING: float = 180  # vertical distance between generation bands
Y_OFFSET: float = 100  # y of generation 0
SPREAD_FACTOR: float = 3.0  # initial spread, as a multiple of container width
START_FACTOR: float = -1.0  # left edge of the initial spread, as a multiple of width
DEFAULT_WIDTH: float = 1200  # fallback container width before first measurement

ITERATIONS: int = 120
REPULSION_K: float = 2000
REPULSION_SOFTENING: float = 50
REPULSION_RANGE: float = 500
BAND_HEIGHT: float = 100  # pairs further apart vertically exert no repulsion
SPRING_K: float = 0.015
DAMPING: float = 0.5

COLLISION_PASSES: int = 3
MIN_GAP: float = 450


@dataclass(frozen=True)
class LayoutConfig:
    """Named configuration for the layout pipeline.

    Defaults reproduce the module constants. ``enforce_min_gap`` adds a
    single left-to-right settle sweep after the symmetric collision
    passes so the minimum sibling gap always holds; turn it off to get
    the bare fixed-pass heuristic.
    """

    y_spacing: float = Y_SPACING
    y_offset: float = Y_OFFSET
    spread_factor: float = SPREAD_FACTOR
    start_factor: float = START_FACTOR
    default_width: float = DEFAULT_WIDTH
    iterations: int = ITERATIONS
    repulsion_k: float = REPULSION_K
    repulsion_softening: float = REPULSION_SOFTENING
    repulsion_range: float = REPULSION_RANGE
    band_height: float = BAND_HEIGHT
    spring_k: float = SPRING_K
    damping: float = DAMPING
    collision_passes: int = COLLISION_PASSES
    min_gap: float = MIN_GAP
    enforce_min_gap: bool = True


@dataclass
class LayoutNode:
    """A positioned node.

    ``x`` and ``y`` are world coordinates of the node's centre. They are
    written by the layout pipeline and afterwards only by a drag.
    """

    id: str
    generation: int
    x: float
    y: float
    data: NodeData | None = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return self.data.label if self.data is not None else self.id


@dataclass
class LayoutResult:
    """Committed output of the layout pipeline.

    Attributes:
        nodes: Positioned nodes in dataset order.
        edges: The dataset edges, dangling ones included.
        width: The container width the layout was computed for.
    """

    nodes: list[LayoutNode]
    edges: list[EdgeData]
    width: float
    _index: dict[str, LayoutNode] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._index = {n.id: n for n in self.nodes}

    def node(self, node_id: str | None) -> LayoutNode | None:
        if node_id is None:
            return None
        return self._index.get(node_id)

    def endpoints(self, edge: EdgeData) -> tuple[LayoutNode, LayoutNode] | None:
        """Return (source, target) nodes, or None for a dangling edge."""
        source = self._index.get(edge.source)
        target = self._index.get(edge.target)
        if source is None or target is None:
            return None
        return source, target

    def positions(self) -> dict[str, tuple[float, float]]:
        return {n.id: (n.x, n.y) for n in self.nodes}
