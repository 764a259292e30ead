"""Draw a graph model onto a surface through a viewport."""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING

from forcegraph.config import NodeStyleConfig
from forcegraph.exceptions import SurfaceUnavailableError
from forcegraph.hit_test import node_radius
from forcegraph.render import styles

if TYPE_CHECKING:
    from forcegraph.graph.model import GraphModel
    from forcegraph.render.surface import Surface
    from forcegraph.viewport import Viewport


class GraphRenderer:
    """Paints one frame: edges under nodes, nodes in draw order, labels below each node.

    Args:
        style: Node sizing and label length (default: NodeStyleConfig())
    """

    def __init__(self, style: NodeStyleConfig | None = None) -> None:
        self.style = style or NodeStyleConfig()

    def draw(
        self,
        surface: Surface,
        model: GraphModel,
        viewport: Viewport,
        *,
        selected_ids: Collection[str] = (),
        hovered_id: str | None = None,
    ) -> None:
        """Clear the surface and draw the whole graph.

        Raises:
            SurfaceUnavailableError: If the surface has no positive size yet.
        """
        if surface.width <= 0 or surface.height <= 0:
            raise SurfaceUnavailableError(surface.width, surface.height)

        surface.clear()
        surface.save()
        surface.translate(viewport.pan_x, viewport.pan_y)
        surface.scale(viewport.zoom)
        try:
            self._draw_edges(surface, model)
            self._draw_nodes(surface, model, selected_ids, hovered_id)
        finally:
            surface.restore()

    def _draw_edges(self, surface: Surface, model: GraphModel) -> None:
        for edge, source, target in model.resolved_edges():
            stroke = styles.edge_stroke(edge.strength)
            surface.line(source.x, source.y, target.x, target.y, color=stroke.color, width=stroke.width)

    def _draw_nodes(
        self,
        surface: Surface,
        model: GraphModel,
        selected_ids: Collection[str],
        hovered_id: str | None,
    ) -> None:
        for node in model.nodes:
            r = node_radius(node.mention_count, self.style)
            hovered = node.id == hovered_id
            border = styles.border_for(selected=node.id in selected_ids, pinned=node.pinned, hovered=hovered)
            surface.circle(
                node.x,
                node.y,
                r,
                fill=styles.fill_for(node.type_tag),
                stroke=border.color if border else None,
                stroke_width=border.width if border else 0.0,
            )

            if node.pinned:
                pin_x = node.x + r * styles.PIN_OFFSET
                pin_y = node.y - r * styles.PIN_OFFSET
                surface.circle(pin_x, pin_y, styles.PIN_RADIUS, fill=styles.PIN_COLOR)
                surface.circle(pin_x, pin_y, styles.PIN_DOT_RADIUS, fill=styles.PIN_DOT_COLOR)

            surface.text(
                node.x,
                node.y + r + styles.LABEL_GAP,
                styles.truncate_label(node.label, self.style.label_max),
                color=styles.LABEL_COLOR,
                size=styles.LABEL_SIZE,
                bold=hovered,
            )


def render_svg(
    model: GraphModel,
    viewport: Viewport,
    width: float,
    height: float,
    *,
    style: NodeStyleConfig | None = None,
    selected_ids: Collection[str] = (),
    hovered_id: str | None = None,
) -> str:
    """Render a model to an SVG document string."""
    from forcegraph.render.surface import SvgSurface

    surface = SvgSurface(width, height)
    GraphRenderer(style).draw(surface, model, viewport, selected_ids=selected_ids, hovered_id=hovered_id)
    return surface.to_svg()
