"""Viewport — scale/pan state and screen ↔ world conversion.

The transform is ``screen = world × scale + (x, y)``; its inverse is
``world = (screen − (x, y)) / scale``. ``scale`` is kept inside
[MIN_SCALE, MAX_SCALE] on every path, so the inverse is always defined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_SCALE: float = 0.1
MAX_SCALE: float = 4.0
WHEEL_SENSITIVITY: float = 0.001
BUTTON_STEP: float = 0.1  # toolbar zoom in/out increment

# Initial framing applied on the first container measurement.
INITIAL_SCALE: float = 0.6
INITIAL_X_SHIFT: float = 600


@dataclass
class ViewportState:
    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ValueError(f"viewport scale must be positive, got {self.scale!r}")


def clamp_scale(scale: float, low: float = MIN_SCALE, high: float = MAX_SCALE) -> float:
    return min(max(low, scale), high)


class ViewportController:
    """Owns a ``ViewportState`` and every operation that changes it."""

    def __init__(
        self,
        state: ViewportState | None = None,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
    ) -> None:
        if not 0 < min_scale <= max_scale:
            raise ValueError(f"invalid scale range [{min_scale}, {max_scale}]")
        self.state = state or ViewportState()
        self.min_scale = min_scale
        self.max_scale = max_scale

    @property
    def scale(self) -> float:
        return self.state.scale

    def to_world(self, screen_x: float, screen_y: float) -> tuple[float, float]:
        s = self.state
        return ((screen_x - s.x) / s.scale, (screen_y - s.y) / s.scale)

    def to_screen(self, world_x: float, world_y: float) -> tuple[float, float]:
        s = self.state
        return (world_x * s.scale + s.x, world_y * s.scale + s.y)

    def zoom_at(self, cursor_x: float, cursor_y: float, delta: float) -> None:
        """Change scale by ``delta`` keeping the world point under the cursor fixed."""
        world_x, world_y = self.to_world(cursor_x, cursor_y)
        new_scale = clamp_scale(self.state.scale + delta, self.min_scale, self.max_scale)
        self.state.scale = new_scale
        self.state.x = cursor_x - world_x * new_scale
        self.state.y = cursor_y - world_y * new_scale

    def wheel(self, cursor_x: float, cursor_y: float, delta_y: float) -> None:
        """Zoom from a raw wheel delta; scrolling up (negative ``delta_y``) zooms in."""
        self.zoom_at(cursor_x, cursor_y, -delta_y * WHEEL_SENSITIVITY)

    def pan_by(self, dx: float, dy: float) -> None:
        self.state.x += dx
        self.state.y += dy

    def set_scale(self, delta: float) -> None:
        """Toolbar zoom: change scale by ``delta`` around the transform origin.

        Clamped to the same range as wheel zoom.
        """
        self.state.scale = clamp_scale(self.state.scale + delta, self.min_scale, self.max_scale)

    def zoom_in(self) -> None:
        self.set_scale(BUTTON_STEP)

    def zoom_out(self) -> None:
        self.set_scale(-BUTTON_STEP)

    def center_on(self, width: float) -> None:
        """Initial framing for a container of ``width``."""
        self.state.scale = clamp_scale(INITIAL_SCALE, self.min_scale, self.max_scale)
        self.state.x = width / 2 - INITIAL_X_SHIFT
        self.state.y = 0.0
        logger.debug("viewport centred for width %s: %s", width, self.state)

    def svg_transform(self) -> str:
        s = self.state
        return f"translate({s.x:g},{s.y:g}) scale({s.scale:g})"
