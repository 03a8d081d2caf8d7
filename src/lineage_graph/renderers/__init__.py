"""Scene renderers."""

from lineage_graph.renderers.base import Renderer, Scene
from lineage_graph.renderers.svg import SvgRenderer

__all__ = ["Renderer", "Scene", "SvgRenderer"]
