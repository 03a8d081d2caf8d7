"""Generational layout: grid initialisation, force relaxation, collision resolution."""

from lineage_graph.layout.engine import (
    effective_width,
    full_layout,
    generation_y,
    group_by_generation,
    initial_positions,
    initial_x,
    relax,
    resolve_collisions,
)
from lineage_graph.layout.types import (
    BAND_HEIGHT,
    COLLISION_PASSES,
    DAMPING,
    DEFAULT_WIDTH,
    ITERATIONS,
    MIN_GAP,
    REPULSION_K,
    REPULSION_RANGE,
    REPULSION_SOFTENING,
    SPREAD_FACTOR,
    SPRING_K,
    START_FACTOR,
    Y_OFFSET,
    Y_SPACING,
    LayoutConfig,
    LayoutNode,
    LayoutResult,
)

__all__ = [
    "BAND_HEIGHT",
    "COLLISION_PASSES",
    "DAMPING",
    "DEFAULT_WIDTH",
    "ITERATIONS",
    "MIN_GAP",
    "REPULSION_K",
    "REPULSION_RANGE",
    "REPULSION_SOFTENING",
    "SPREAD_FACTOR",
    "SPRING_K",
    "START_FACTOR",
    "Y_OFFSET",
    "Y_SPACING",
    "LayoutConfig",
    "LayoutNode",
    "LayoutResult",
    "effective_width",
    "full_layout",
    "generation_y",
    "group_by_generation",
    "initial_positions",
    "initial_x",
    "relax",
    "resolve_collisions",
]
