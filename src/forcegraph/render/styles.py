"""Colours and strokes for drawing concept graphs.

Concept types map to fill colours; everything else (edges, borders, the
pin marker, labels) uses the fixed styles below. Change a colour here and
every surface picks it up.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Stroke:
    """Outline colour and width."""

    color: str
    width: float


# ============================================================
# NODE FILL BY CONCEPT TYPE
# ============================================================

TYPE_COLORS: dict[str, str] = {
    "person": "#3B82F6",
    "organization": "#8B5CF6",
    "project": "#10B981",
    "topic": "#F59E0B",
    "location": "#EF4444",
    "event": "#EC4899",
    "idea": "#6366F1",
    "task": "#14B8A6",
    "date": "#F97316",
    "other": "#6B7280",
}


# ============================================================
# BORDERS
# ============================================================

SELECTED_BORDER = Stroke("#1F2937", 3)
PINNED_BORDER = Stroke("#EF4444", 2)
HOVERED_BORDER = Stroke("#6B7280", 3)


# ============================================================
# PIN MARKER & LABELS
# ============================================================

PIN_COLOR = "#EF4444"
PIN_DOT_COLOR = "#FFFFFF"
PIN_RADIUS = 5.0
PIN_DOT_RADIUS = 2.0
PIN_OFFSET = 0.7

LABEL_COLOR = "#374151"
LABEL_SIZE = 11
LABEL_GAP = 4.0


def fill_for(type_tag: str) -> str:
    """Fill colour for a concept type; unknown types use the "other" colour."""
    return TYPE_COLORS.get(type_tag, TYPE_COLORS["other"])


def edge_stroke(strength: float) -> Stroke:
    """Edge line: stronger relationships draw darker and thicker.

    Example:
        >>> edge_stroke(1.0)
        Stroke(color='rgba(156, 163, 175, 0.6)', width=3.0)
    """
    alpha = round(0.2 + strength * 0.4, 3)
    return Stroke(f"rgba(156, 163, 175, {alpha})", 1 + strength * 2)


def border_for(*, selected: bool, pinned: bool, hovered: bool) -> Stroke | None:
    """Border for a node, or None when it has none.

    Colour priority is selected, then pinned, then hovered. A pinned node
    always gets the thinner pinned width.
    """
    if not (selected or pinned or hovered):
        return None
    if selected:
        color = SELECTED_BORDER.color
    elif pinned:
        color = PINNED_BORDER.color
    else:
        color = HOVERED_BORDER.color
    width = PINNED_BORDER.width if pinned else SELECTED_BORDER.width
    return Stroke(color, width)


def truncate_label(label: str, max_chars: int = 15) -> str:
    """Cut long labels to max_chars plus an ellipsis.

    Example:
        >>> truncate_label("Quarterly planning review")
        'Quarterly plann...'
    """
    return label if len(label) <= max_chars else label[:max_chars] + "..."
