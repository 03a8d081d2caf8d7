"""Session — wires dataset, layout, viewport, focus and interaction together.

Re-layout policy: the full pipeline runs when the session starts and
whenever the container width changes. Pan, zoom, drag, focus changes and
height-only resizes never re-run it.
"""

from __future__ import annotations

import logging

from lineage_graph.enrichment import ImageSource
from lineage_graph.focus import FocusState
from lineage_graph.graph import GraphData
from lineage_graph.interaction import InteractionRouter
from lineage_graph.layout.engine import full_layout
from lineage_graph.layout.types import LayoutConfig, LayoutResult
from lineage_graph.renderers.base import Renderer, Scene
from lineage_graph.renderers.svg import SvgRenderer
from lineage_graph.viewport import ViewportController

logger = logging.getLogger(__name__)


class GraphSession:
    """One interactive view over an immutable dataset."""

    def __init__(
        self,
        graph: GraphData,
        config: LayoutConfig | None = None,
        image_source: ImageSource | None = None,
    ) -> None:
        self.graph = graph
        self.config = config or LayoutConfig()
        self.image_source = image_source
        self.width: float = 0
        self.height: float = 0
        self._measured = False

        self.viewport = ViewportController()
        self.focus = FocusState()
        self.layout: LayoutResult = full_layout(graph, None, self.config)
        self.router = InteractionRouter(self.layout, self.viewport, self.focus)
        self.thumbnails: dict[str, str] = {}
        self.detail_image: str | None = None

    def resize(self, width: float, height: float) -> bool:
        """Apply a container measurement; returns True when the layout was recomputed."""
        width_changed = width != self.width
        self.width, self.height = width, height

        if not self._measured and width > 0:
            self._measured = True
            self.viewport.center_on(width)

        if width_changed:
            self.relayout()
        return width_changed

    def relayout(self) -> LayoutResult:
        self.layout = full_layout(self.graph, self.width, self.config)
        self.router.rebind(self.layout)
        logger.info("layout recomputed for width %s (%d nodes)", self.layout.width, len(self.layout.nodes))
        return self.layout

    async def load_thumbnails(self) -> dict[str, str]:
        """Fetch graph thumbnails; an empty result leaves placeholders in place."""
        if self.image_source is None:
            return self.thumbnails
        self.thumbnails = await self.image_source.thumbnails(self.graph.nodes)
        return self.thumbnails

    async def load_detail_image(self) -> str | None:
        """Fetch the high-resolution image of the selected node."""
        self.detail_image = None
        selected = self.graph.node(self.focus.selected) if self.focus.selected else None
        if selected is None or self.image_source is None:
            return None
        self.detail_image = await self.image_source.detail_image(selected)
        return self.detail_image

    def scene(self) -> Scene:
        return Scene(
            layout=self.layout,
            viewport=self.viewport.state,
            focus=self.focus,
            thumbnails=self.thumbnails,
            width=self.width,
            height=self.height,
        )

    def render(self, renderer: Renderer | None = None) -> str:
        return (renderer or SvgRenderer()).render(self.scene())

    def render_svg(self) -> str:
        return self.render(SvgRenderer())
