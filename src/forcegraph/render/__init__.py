"""Rendering: surfaces, styles and the graph renderer."""

from forcegraph.render.renderer import GraphRenderer, render_svg
from forcegraph.render.styles import TYPE_COLORS, Stroke, border_for, edge_stroke, fill_for, truncate_label
from forcegraph.render.surface import DrawCommand, RecordingSurface, Surface, SvgSurface

__all__ = [
    "DrawCommand",
    "GraphRenderer",
    "RecordingSurface",
    "Stroke",
    "Surface",
    "SvgSurface",
    "TYPE_COLORS",
    "border_for",
    "edge_stroke",
    "fill_for",
    "render_svg",
    "truncate_label",
]
