"""Base renderer protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from lineage_graph.focus import FocusState
from lineage_graph.layout.types import LayoutResult
from lineage_graph.viewport import ViewportState


@dataclass
class Scene:
    """Everything a renderer needs for one frame."""

    layout: LayoutResult
    viewport: ViewportState = field(default_factory=ViewportState)
    focus: FocusState = field(default_factory=FocusState)
    thumbnails: dict[str, str] = field(default_factory=dict)
    width: float = 0
    height: float = 0


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, scene: Scene) -> str:
        """Render a laid-out scene to an output string."""
        ...
