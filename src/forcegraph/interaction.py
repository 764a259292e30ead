"""Pointer and wheel handling for a graph view.

Turns screen-space input into node drags, pans, zooms, pin toggles and
selections. Every handler converts through the viewport first; nodes only
ever see graph coordinates.

States::

    IDLE <-> HOVERING            pointer moves over / off a node
    IDLE/HOVERING -> DRAGGING    pointer down on a node
    IDLE/HOVERING -> PANNING     pointer down on the background
    IDLE/HOVERING -> SELECTING_RECT   shift + pointer down on the background
    any gesture -> IDLE/HOVERING      pointer up or pointer leave

Wheel zoom is instantaneous and never holds a state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TYPE_CHECKING

from forcegraph.config import InteractionConfig, NodeStyleConfig
from forcegraph.events import (
    EventDispatcher,
    NodeClickEvent,
    NodeDoubleClickEvent,
    NodePinToggledEvent,
    SelectionChangedEvent,
)
from forcegraph.hit_test import HitTester

if TYPE_CHECKING:
    from forcegraph.events import Event
    from forcegraph.graph.model import GraphModel
    from forcegraph.graph.types import Node
    from forcegraph.viewport import Point, Viewport

logger = logging.getLogger(__name__)


class Gesture(Enum):
    """What the pointer is currently doing.

    Values:
        IDLE: Nothing under the pointer, no button held.
        HOVERING: Pointer over a node, no button held.
        DRAGGING: Moving a node.
        PANNING: Moving the viewport.
        SELECTING_RECT: Drawing a selection rectangle.
    """

    IDLE = "idle"
    HOVERING = "hovering"
    DRAGGING = "dragging"
    PANNING = "panning"
    SELECTING_RECT = "selecting_rect"


def _noop() -> None:
    return None


class InteractionController:
    """State machine for one view's pointer input.

    Args:
        model: Graph being manipulated
        viewport: Screen/graph transform, mutated by pan and zoom
        config: Click threshold and zoom factors (default: InteractionConfig())
        style: Node sizing for hit tests (default: NodeStyleConfig())
        save_positions: Called once per finished gesture that may have moved a node
        save_viewport: Called after a pan or a zoom
        dispatcher: Receives click, pin and selection events
        view: View type stamped on emitted events

    Example:
        >>> from forcegraph.graph import Concept, GraphModel
        >>> from forcegraph.viewport import Bounds, Point, Viewport
        >>> model = GraphModel.build([Concept("a", "A")], [], {}, bounds=Bounds(400, 400))
        >>> node = model.nodes[0]
        >>> ctl = InteractionController(model, Viewport())
        >>> ctl.pointer_down(Point(node.x, node.y))
        >>> ctl.state
        <Gesture.DRAGGING: 'dragging'>
    """

    def __init__(
        self,
        model: GraphModel,
        viewport: Viewport,
        *,
        config: InteractionConfig | None = None,
        style: NodeStyleConfig | None = None,
        save_positions: Callable[[], object] | None = None,
        save_viewport: Callable[[], object] | None = None,
        dispatcher: EventDispatcher | None = None,
        view: str = "graph",
    ) -> None:
        self.config = config or InteractionConfig()
        self.style = style or NodeStyleConfig()
        self.viewport = viewport
        self.view = view
        self._save_positions = save_positions or _noop
        self._save_viewport = save_viewport or _noop
        self._dispatcher = dispatcher or EventDispatcher()

        self.state = Gesture.IDLE
        self.hovered_id: str | None = None
        self.selected_ids: tuple[str, ...] = ()
        self._drag_node: Node | None = None
        self._down_at: Point | None = None
        self._last: Point | None = None
        self._max_travel = 0.0
        self._rect_start: Point | None = None
        self._rect_end: Point | None = None

        self.set_model(model)

    # === Model ===

    def set_model(self, model: GraphModel) -> None:
        """Swap in a new node set. Any gesture in progress is dropped."""
        if self._drag_node is not None:
            self._drag_node.end_drag()
        self.model = model
        self.hit_tester = HitTester(model, self.style)
        self._reset_gesture()
        self.state = Gesture.IDLE
        self.hovered_id = None
        kept = tuple(i for i in self.selected_ids if i in model)
        if kept != self.selected_ids:
            self._set_selection(kept)

    @property
    def is_dragging(self) -> bool:
        return self.state is Gesture.DRAGGING

    @property
    def dragging_id(self) -> str | None:
        return self._drag_node.id if self._drag_node is not None else None

    @property
    def selection_rect(self) -> tuple[Point, Point] | None:
        """Graph-space corners of the rectangle being drawn, if any."""
        if self.state is not Gesture.SELECTING_RECT or self._rect_start is None or self._rect_end is None:
            return None
        return self._rect_start, self._rect_end

    # === Pointer ===

    def pointer_down(self, point: Point, *, shift: bool = False) -> None:
        """Start a gesture at a screen point."""
        if self.state in (Gesture.DRAGGING, Gesture.PANNING, Gesture.SELECTING_RECT):
            self._finish_gesture(point, allow_click=False)

        graph_point = self.viewport.screen_to_graph(point)
        node = self.hit_tester.find_node_at(graph_point)
        self._down_at = point
        self._last = point
        self._max_travel = 0.0

        if node is not None and shift:
            self._toggle_selected(node.id)
            self._down_at = None
            self._last = None
            return
        if node is not None:
            node.begin_drag()
            self._drag_node = node
            self.state = Gesture.DRAGGING
        elif shift:
            self._rect_start = graph_point
            self._rect_end = graph_point
            self.state = Gesture.SELECTING_RECT
        else:
            self.state = Gesture.PANNING

    def pointer_move(self, point: Point) -> None:
        """Continue the current gesture, or update hover when none is active."""
        if self._down_at is not None:
            self._max_travel = max(self._max_travel, self._down_at.distance_to(point))

        if self.state is Gesture.DRAGGING and self._drag_node is not None:
            graph_point = self.viewport.screen_to_graph(point)
            self._drag_node.drag_to(graph_point.x, graph_point.y)
        elif self.state is Gesture.PANNING and self._last is not None:
            self.viewport.pan_by(point.x - self._last.x, point.y - self._last.y)
        elif self.state is Gesture.SELECTING_RECT:
            self._rect_end = self.viewport.screen_to_graph(point)
        else:
            self._update_hover(point)
        self._last = point

    def pointer_up(self, point: Point | None = None) -> None:
        """End the current gesture. A short node drag counts as a click."""
        if point is not None and self.state in (Gesture.DRAGGING, Gesture.PANNING, Gesture.SELECTING_RECT):
            self.pointer_move(point)
        self._finish_gesture(point, allow_click=True)

    def pointer_leave(self) -> None:
        """Pointer left the surface: end any gesture without a click and clear hover."""
        self._finish_gesture(None, allow_click=False)
        self.hovered_id = None
        self.state = Gesture.IDLE

    def double_click(self, point: Point) -> None:
        """Toggle the pin on the node under point and persist immediately."""
        node = self.hit_tester.find_node_at(self.viewport.screen_to_graph(point))
        if node is None:
            return
        pinned = node.toggle_pin()
        logger.info("Node %r %s", node.label or node.id, "pinned" if pinned else "unpinned")
        self._save_positions()
        self._emit(NodePinToggledEvent(view=self.view, node_id=node.id, pinned=pinned))
        self._emit(NodeDoubleClickEvent(view=self.view, node_id=node.id))

    def wheel(self, point: Point, delta_y: float) -> None:
        """Zoom toward the cursor: scrolling down zooms out, anything else zooms in."""
        factor = self.config.wheel_out if delta_y > 0 else self.config.wheel_in
        before = self.viewport.zoom
        self.viewport.zoom_toward(point, factor)
        if self.viewport.zoom != before:
            self._save_viewport()

    # === Selection ===

    def select(self, node_ids: Iterable[str]) -> None:
        """Replace the selection (unknown ids are dropped)."""
        wanted = set(node_ids)
        self._set_selection(tuple(n.id for n in self.model.nodes if n.id in wanted))

    def clear_selection(self) -> None:
        self._set_selection(())

    def _toggle_selected(self, node_id: str) -> None:
        if node_id in self.selected_ids:
            self._set_selection(tuple(i for i in self.selected_ids if i != node_id))
        else:
            self.select((*self.selected_ids, node_id))

    def _set_selection(self, ids: tuple[str, ...]) -> None:
        if ids == self.selected_ids:
            return
        self.selected_ids = ids
        self._emit(SelectionChangedEvent(view=self.view, selected_ids=ids))

    # === Internals ===

    def _update_hover(self, point: Point) -> None:
        node = self.hit_tester.find_node_at(self.viewport.screen_to_graph(point))
        self.hovered_id = node.id if node is not None else None
        self.state = Gesture.HOVERING if node is not None else Gesture.IDLE

    def _finish_gesture(self, point: Point | None, *, allow_click: bool) -> None:
        state = self.state
        is_click = allow_click and self._max_travel < self.config.click_threshold

        if state is Gesture.DRAGGING and self._drag_node is not None:
            node = self._drag_node
            node.end_drag()
            self._save_positions()
            if is_click:
                self.select((node.id,))
                self._emit(NodeClickEvent(view=self.view, node_id=node.id))
        elif state is Gesture.PANNING:
            self._save_positions()
            if self._max_travel > 0:
                self._save_viewport()
            if is_click:
                self.clear_selection()
        elif state is Gesture.SELECTING_RECT and allow_click and self._rect_start is not None:
            end = self._rect_end or self._rect_start
            self.select(n.id for n in self.hit_tester.nodes_in_rect(self._rect_start, end))

        self._reset_gesture()
        if point is not None:
            self._update_hover(point)
        elif state in (Gesture.DRAGGING, Gesture.PANNING, Gesture.SELECTING_RECT):
            self.state = Gesture.IDLE

    def _reset_gesture(self) -> None:
        self._drag_node = None
        self._down_at = None
        self._last = None
        self._max_travel = 0.0
        self._rect_start = None
        self._rect_end = None

    def _emit(self, event: Event) -> None:
        self._dispatcher.emit(event)
