"""Event system for observing an interactive graph view."""

from forcegraph.events.dispatcher import EventDispatcher
from forcegraph.events.processor import (
    CallbackProcessor,
    EventProcessor,
    TypedEventProcessor,
)
from forcegraph.events.types import (
    BaseEvent,
    Event,
    LayoutSettledEvent,
    NodeClickEvent,
    NodeDoubleClickEvent,
    NodePinToggledEvent,
    SelectionChangedEvent,
)

__all__ = [
    # Event types
    "BaseEvent",
    "Event",
    "LayoutSettledEvent",
    "NodeClickEvent",
    "NodeDoubleClickEvent",
    "NodePinToggledEvent",
    "SelectionChangedEvent",
    # Processor interfaces
    "CallbackProcessor",
    "EventProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
