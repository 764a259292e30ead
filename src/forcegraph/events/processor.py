"""Event processor base classes."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forcegraph.events.types import (
        Event,
        LayoutSettledEvent,
        NodeClickEvent,
        NodeDoubleClickEvent,
        NodePinToggledEvent,
        SelectionChangedEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "NodeClickEvent": "on_node_click",
    "NodeDoubleClickEvent": "on_node_double_click",
    "NodePinToggledEvent": "on_pin_toggled",
    "SelectionChangedEvent": "on_selection_changed",
    "LayoutSettledEvent": "on_layout_settled",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the view closes."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_node_click(self, event: NodeClickEvent) -> None: ...
    def on_node_double_click(self, event: NodeDoubleClickEvent) -> None: ...
    def on_pin_toggled(self, event: NodePinToggledEvent) -> None: ...
    def on_selection_changed(self, event: SelectionChangedEvent) -> None: ...
    def on_layout_settled(self, event: LayoutSettledEvent) -> None: ...


class CallbackProcessor(TypedEventProcessor):
    """Adapts the host's plain ``on_node_click(id)`` / ``on_node_double_click(id)`` callables.

    Example:
        >>> clicked = []
        >>> processor = CallbackProcessor(on_node_click=clicked.append)
        >>> from forcegraph.events.types import NodeClickEvent
        >>> processor.on_event(NodeClickEvent(node_id="a"))
        >>> clicked
        ['a']
    """

    def __init__(
        self,
        on_node_click: Callable[[str], object] | None = None,
        on_node_double_click: Callable[[str], object] | None = None,
    ) -> None:
        self._click = on_node_click
        self._double_click = on_node_double_click

    def on_node_click(self, event: NodeClickEvent) -> None:
        if self._click is not None:
            self._click(event.node_id)

    def on_node_double_click(self, event: NodeDoubleClickEvent) -> None:
        if self._double_click is not None:
            self._double_click(event.node_id)
