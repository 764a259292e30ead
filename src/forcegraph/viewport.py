"""Coordinate space transformations between the screen and the graph.

The viewport is the single conversion authority: the simulator and the
persistence layer only ever see graph coordinates, pointer events only ever
arrive in screen coordinates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from forcegraph.exceptions import MalformedInputError


@dataclass(frozen=True)
class Point:
    """Immutable 2D point.

    Example:
        >>> Point(1, 2) + Point(3, 4)
        Point(x=4, y=6)
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: Point) -> float:
        """Euclidean distance between two points."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Bounds:
    """Extent of the visible surface in graph units, anchored at the origin."""

    width: float
    height: float

    @property
    def center(self) -> Point:
        """Centre of the extent - the target of the centring force."""
        return Point(self.width / 2, self.height / 2)

    @property
    def is_sized(self) -> bool:
        """True once both dimensions are positive."""
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class ZoomRange:
    """Inclusive zoom limits for one view type."""

    min: float
    max: float

    def clamp(self, zoom: float) -> float:
        return max(self.min, min(self.max, zoom))


GRAPH_ZOOM = ZoomRange(0.5, 3.0)
BOARD_ZOOM = ZoomRange(0.25, 2.0)

ZOOM_RANGES: dict[str, ZoomRange] = {
    "graph": GRAPH_ZOOM,
    "board": BOARD_ZOOM,
}


class Viewport:
    """Pan offset and zoom factor mapping graph space onto the screen.

    ``screen = graph * zoom + pan`` and ``graph = (screen - pan) / zoom``.
    Zoom is always kept inside ``zoom_range``.

    Example:
        >>> vp = Viewport(pan_x=10, pan_y=20, zoom=2)
        >>> vp.screen_to_graph(Point(30, 60))
        Point(x=10.0, y=20.0)
        >>> vp.graph_to_screen(Point(10, 20))
        Point(x=30, y=60)
    """

    def __init__(
        self,
        pan_x: float = 0.0,
        pan_y: float = 0.0,
        zoom: float = 1.0,
        *,
        zoom_range: ZoomRange = GRAPH_ZOOM,
    ) -> None:
        self.zoom_range = zoom_range
        self.pan_x = pan_x
        self.pan_y = pan_y
        self.zoom = zoom_range.clamp(zoom)

    def __repr__(self) -> str:
        return f"Viewport(pan_x={self.pan_x!r}, pan_y={self.pan_y!r}, zoom={self.zoom!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Viewport):
            return NotImplemented
        return (self.pan_x, self.pan_y, self.zoom) == (other.pan_x, other.pan_y, other.zoom)

    # === Conversions ===

    def screen_to_graph(self, point: Point) -> Point:
        """Map a screen pixel to graph coordinates."""
        return Point((point.x - self.pan_x) / self.zoom, (point.y - self.pan_y) / self.zoom)

    def graph_to_screen(self, point: Point) -> Point:
        """Map a graph coordinate to a screen pixel."""
        return Point(point.x * self.zoom + self.pan_x, point.y * self.zoom + self.pan_y)

    def visible_bounds(self, width: float, height: float) -> tuple[Point, Point]:
        """Graph-space corners (top-left, bottom-right) of a width x height screen."""
        return self.screen_to_graph(Point(0, 0)), self.screen_to_graph(Point(width, height))

    # === Mutations ===

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the pan offset by a screen-space delta."""
        self.pan_x += dx
        self.pan_y += dy

    def zoom_toward(self, cursor: Point, factor: float) -> None:
        """Multiply zoom by factor, keeping the graph point under cursor fixed.

        The new zoom is clamped to the range first, so a clamped zoom still
        leaves the cursor point in place.
        """
        new_zoom = self.zoom_range.clamp(self.zoom * factor)
        ratio = new_zoom / self.zoom
        self.pan_x = cursor.x - (cursor.x - self.pan_x) * ratio
        self.pan_y = cursor.y - (cursor.y - self.pan_y) * ratio
        self.zoom = new_zoom

    def set_zoom(self, zoom: float) -> None:
        """Set zoom directly (clamped), leaving pan untouched."""
        self.zoom = self.zoom_range.clamp(zoom)

    def reset(self) -> None:
        """Return to the identity transform."""
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = self.zoom_range.clamp(1.0)

    def fit(
        self,
        top_left: Point,
        bottom_right: Point,
        width: float,
        height: float,
        *,
        padding: float = 50.0,
    ) -> None:
        """Zoom and pan so the graph-space box fills a width x height screen.

        Zoom never exceeds 1 and always respects the zoom range.
        """
        content_w = max(bottom_right.x - top_left.x, 1.0) + padding * 2
        content_h = max(bottom_right.y - top_left.y, 1.0) + padding * 2
        zoom = min(width / content_w, height / content_h, 1.0)
        self.zoom = self.zoom_range.clamp(zoom)
        center_x = (top_left.x + bottom_right.x) / 2
        center_y = (top_left.y + bottom_right.y) / 2
        self.pan_x = width / 2 - center_x * self.zoom
        self.pan_y = height / 2 - center_y * self.zoom

    # === Serialization ===

    def to_dict(self) -> dict[str, float]:
        return {"panX": self.pan_x, "panY": self.pan_y, "zoom": self.zoom}

    @classmethod
    def from_dict(cls, data: Any, *, zoom_range: ZoomRange = GRAPH_ZOOM) -> Viewport:
        """Build from a persisted record.

        Raises:
            MalformedInputError: If the record is not a mapping of finite numbers.
        """
        if not isinstance(data, dict):
            raise MalformedInputError(f"viewport record must be an object, got {type(data).__name__}")
        values = []
        for key in ("panX", "panY", "zoom"):
            value = data.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise MalformedInputError(f"viewport field '{key}' must be a finite number, got {value!r}")
            values.append(float(value))
        pan_x, pan_y, zoom = values
        if zoom <= 0:
            raise MalformedInputError(f"viewport zoom must be positive, got {zoom!r}")
        return cls(pan_x, pan_y, zoom, zoom_range=zoom_range)
