"""Event types emitted by an interactive graph view."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all view events.

    Attributes:
        view: View type that produced the event ("graph" or "board").
        timestamp: Unix timestamp when the event was created.
    """

    view: str = "graph"
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class NodeClickEvent(BaseEvent):
    """Emitted when a pointer press and release on a node stays under the click threshold.

    Attributes:
        node_id: Id of the clicked concept.
    """

    node_id: str = ""


@dataclass(frozen=True)
class NodeDoubleClickEvent(BaseEvent):
    """Emitted after a double-click on a node. The pin toggle is already applied.

    Attributes:
        node_id: Id of the double-clicked concept.
    """

    node_id: str = ""


@dataclass(frozen=True)
class NodePinToggledEvent(BaseEvent):
    """Emitted when a node's pinned flag flips.

    Attributes:
        node_id: Id of the node.
        pinned: New pinned value.
    """

    node_id: str = ""
    pinned: bool = False


@dataclass(frozen=True)
class SelectionChangedEvent(BaseEvent):
    """Emitted when the selected node set changes.

    Attributes:
        selected_ids: Selected node ids in draw order.
    """

    selected_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class LayoutSettledEvent(BaseEvent):
    """Emitted once when the render loop drops to its throttled rate.

    Attributes:
        frames: Frames run before settling.
        energy: Kinetic energy of free nodes at that moment.
    """

    frames: int = 0
    energy: float = 0.0


Event = NodeClickEvent | NodeDoubleClickEvent | NodePinToggledEvent | SelectionChangedEvent | LayoutSettledEvent
