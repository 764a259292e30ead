"""Drawing surfaces.

``Surface`` is the subset of a 2D canvas context the renderer needs. A
host UI wraps its own canvas in it; this package ships a recording
surface for tests and an SVG surface for static export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from xml.sax.saxutils import escape, quoteattr


@runtime_checkable
class Surface(Protocol):
    """Canvas-like drawing target. Transforms compose like a canvas 2D context."""

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    def clear(self) -> None: ...
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, dx: float, dy: float) -> None: ...
    def scale(self, factor: float) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float) -> None: ...

    def circle(
        self,
        x: float,
        y: float,
        r: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float = 0.0,
    ) -> None: ...

    def text(self, x: float, y: float, text: str, *, color: str, size: float, bold: bool = False) -> None: ...


@dataclass(frozen=True)
class DrawCommand:
    """One recorded surface call."""

    op: str
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


class RecordingSurface:
    """Surface that records every call in order.

    Example:
        >>> surface = RecordingSurface(200, 100)
        >>> surface.circle(10, 10, 5, fill="#3B82F6")
        >>> surface.ops()
        ['circle']
    """

    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self._width = width
        self._height = height
        self.commands: list[DrawCommand] = []

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def resize(self, width: float, height: float) -> None:
        self._width = width
        self._height = height

    def ops(self) -> list[str]:
        return [c.op for c in self.commands]

    def of(self, op: str) -> list[DrawCommand]:
        """Recorded commands with the given op name."""
        return [c for c in self.commands if c.op == op]

    def reset(self) -> None:
        self.commands.clear()

    def _record(self, op: str, *args: Any, **kwargs: Any) -> None:
        self.commands.append(DrawCommand(op, args, kwargs))

    def clear(self) -> None:
        self._record("clear")

    def save(self) -> None:
        self._record("save")

    def restore(self) -> None:
        self._record("restore")

    def translate(self, dx: float, dy: float) -> None:
        self._record("translate", dx, dy)

    def scale(self, factor: float) -> None:
        self._record("scale", factor)

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float) -> None:
        self._record("line", x1, y1, x2, y2, color=color, width=width)

    def circle(
        self,
        x: float,
        y: float,
        r: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float = 0.0,
    ) -> None:
        self._record("circle", x, y, r, fill=fill, stroke=stroke, stroke_width=stroke_width)

    def text(self, x: float, y: float, text: str, *, color: str, size: float, bold: bool = False) -> None:
        self._record("text", x, y, text, color=color, size=size, bold=bold)


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class SvgSurface:
    """Surface that builds an SVG document.

    Transforms are applied to coordinates as elements are added, so the
    output is a flat list of shapes in screen space.

    Example:
        >>> surface = SvgSurface(100, 100)
        >>> surface.circle(50, 50, 8, fill="#10B981")
        >>> "<circle" in surface.to_svg()
        True
    """

    def __init__(self, width: float, height: float, *, background: str | None = "#FFFFFF") -> None:
        self._width = width
        self._height = height
        self._background = background
        self._elements: list[str] = []
        self._transform = (1.0, 0.0, 0.0)  # scale, tx, ty
        self._stack: list[tuple[float, float, float]] = []

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def _point(self, x: float, y: float) -> tuple[str, str]:
        s, tx, ty = self._transform
        return _num(x * s + tx), _num(y * s + ty)

    def _len(self, value: float) -> str:
        return _num(value * self._transform[0])

    def clear(self) -> None:
        self._elements.clear()

    def save(self) -> None:
        self._stack.append(self._transform)

    def restore(self) -> None:
        if self._stack:
            self._transform = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        s, tx, ty = self._transform
        self._transform = (s, tx + dx * s, ty + dy * s)

    def scale(self, factor: float) -> None:
        s, tx, ty = self._transform
        self._transform = (s * factor, tx, ty)

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float) -> None:
        ax, ay = self._point(x1, y1)
        bx, by = self._point(x2, y2)
        self._elements.append(
            f'<line x1="{ax}" y1="{ay}" x2="{bx}" y2="{by}" stroke={quoteattr(color)} stroke-width="{self._len(width)}"/>'
        )

    def circle(
        self,
        x: float,
        y: float,
        r: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float = 0.0,
    ) -> None:
        cx, cy = self._point(x, y)
        attrs = [f'cx="{cx}"', f'cy="{cy}"', f'r="{self._len(r)}"', f"fill={quoteattr(fill or 'none')}"]
        if stroke is not None:
            attrs.append(f"stroke={quoteattr(stroke)}")
            attrs.append(f'stroke-width="{self._len(stroke_width)}"')
        self._elements.append(f"<circle {' '.join(attrs)}/>")

    def text(self, x: float, y: float, text: str, *, color: str, size: float, bold: bool = False) -> None:
        tx, ty = self._point(x, y)
        weight = ' font-weight="bold"' if bold else ""
        self._elements.append(
            f'<text x="{tx}" y="{ty}" fill={quoteattr(color)} font-size="{self._len(size)}"'
            f' font-family="system-ui, sans-serif" text-anchor="middle" dominant-baseline="hanging"{weight}>'
            f"{escape(text)}</text>"
        )

    def to_svg(self) -> str:
        """The complete SVG document."""
        w, h = _num(self._width), _num(self._height)
        parts = [f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">']
        if self._background is not None:
            parts.append(f'<rect width="100%" height="100%" fill={quoteattr(self._background)}/>')
        parts.extend(self._elements)
        parts.append("</svg>")
        return "\n".join(parts)
