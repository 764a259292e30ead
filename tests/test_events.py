"""Tests for event types, processors and the dispatcher."""

from __future__ import annotations

import dataclasses

import pytest

from forcegraph.events import (
    CallbackProcessor,
    EventDispatcher,
    EventProcessor,
    LayoutSettledEvent,
    NodeClickEvent,
    NodeDoubleClickEvent,
    NodePinToggledEvent,
    SelectionChangedEvent,
    TypedEventProcessor,
)


# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------


class ListProcessor(EventProcessor):
    """Collects all events for assertion."""

    def __init__(self):
        self.events: list = []
        self.shutdown_called = False

    def on_event(self, event):
        self.events.append(event)

    def shutdown(self):
        self.shutdown_called = True


class ExplodingProcessor(EventProcessor):
    def on_event(self, event):
        raise RuntimeError("processor bug")

    def shutdown(self):
        raise RuntimeError("shutdown bug")


class RecordingTypedProcessor(TypedEventProcessor):
    def __init__(self):
        self.calls: list[tuple[str, object]] = []

    def on_node_click(self, event):
        self.calls.append(("click", event.node_id))

    def on_pin_toggled(self, event):
        self.calls.append(("pin", event.pinned))

    def on_layout_settled(self, event):
        self.calls.append(("settled", event.frames))


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class TestEventTypes:
    def test_events_are_frozen(self):
        event = NodeClickEvent(node_id="a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.node_id = "b"

    def test_defaults(self):
        event = SelectionChangedEvent()
        assert event.view == "graph"
        assert event.selected_ids == ()
        assert event.timestamp > 0

    def test_view_is_carried(self):
        assert NodePinToggledEvent(view="board", node_id="a", pinned=True).view == "board"


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class TestDispatcher:
    def test_inactive_without_processors(self):
        dispatcher = EventDispatcher()
        assert not dispatcher.active
        dispatcher.emit(NodeClickEvent(node_id="a"))

    def test_fans_out_in_order(self):
        first, second = ListProcessor(), ListProcessor()
        dispatcher = EventDispatcher([first])
        dispatcher.add(second)
        event = NodeClickEvent(node_id="a")
        dispatcher.emit(event)
        assert first.events == [event]
        assert second.events == [event]
        assert dispatcher.active

    def test_failing_processor_is_logged_and_skipped(self, caplog):
        survivor = ListProcessor()
        dispatcher = EventDispatcher([ExplodingProcessor(), survivor])
        dispatcher.emit(NodeClickEvent(node_id="a"))
        assert len(survivor.events) == 1
        assert "failed on NodeClickEvent" in caplog.text

    def test_strict_reraises(self):
        dispatcher = EventDispatcher([ExplodingProcessor()], strict=True)
        with pytest.raises(RuntimeError, match="processor bug"):
            dispatcher.emit(NodeClickEvent(node_id="a"))

    def test_shutdown_reaches_every_processor(self, caplog):
        survivor = ListProcessor()
        EventDispatcher([ExplodingProcessor(), survivor]).shutdown()
        assert survivor.shutdown_called
        assert "failed during shutdown" in caplog.text

    def test_same_processor_registered_once(self):
        processor = ListProcessor()
        dispatcher = EventDispatcher([processor, processor])
        dispatcher.add(processor)
        dispatcher.emit(NodeClickEvent(node_id="a"))
        assert len(processor.events) == 1

    def test_remove(self):
        processor = ListProcessor()
        dispatcher = EventDispatcher([processor])
        dispatcher.remove(processor)
        dispatcher.emit(NodeClickEvent(node_id="a"))
        assert processor.events == []
        assert not dispatcher.active

    def test_failures_are_counted(self):
        dispatcher = EventDispatcher([ExplodingProcessor()])
        dispatcher.emit(NodeClickEvent(node_id="a"))
        dispatcher.emit(NodeClickEvent(view="board", node_id="b"))
        assert dispatcher.failures == 2

    def test_events_dropped_after_shutdown(self):
        processor = ListProcessor()
        dispatcher = EventDispatcher([processor])
        dispatcher.shutdown()
        dispatcher.emit(NodeClickEvent(node_id="a"))
        assert processor.events == []
        assert not dispatcher.active

    def test_shutdown_runs_once(self):
        calls = []

        class CountingProcessor(EventProcessor):
            def shutdown(self):
                calls.append(1)

        dispatcher = EventDispatcher([CountingProcessor()])
        dispatcher.shutdown()
        dispatcher.shutdown()
        assert calls == [1]

    def test_strict_shutdown_raises_after_all_processors(self):
        survivor = ListProcessor()
        dispatcher = EventDispatcher([ExplodingProcessor(), survivor], strict=True)
        with pytest.raises(RuntimeError, match="shutdown bug"):
            dispatcher.shutdown()
        assert survivor.shutdown_called


# ---------------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------------


class TestTypedEventProcessor:
    def test_routes_by_type(self):
        processor = RecordingTypedProcessor()
        processor.on_event(NodeClickEvent(node_id="a"))
        processor.on_event(NodePinToggledEvent(node_id="a", pinned=True))
        processor.on_event(LayoutSettledEvent(frames=100, energy=0.1))
        assert processor.calls == [("click", "a"), ("pin", True), ("settled", 100)]

    def test_unhandled_types_ignored(self):
        processor = RecordingTypedProcessor()
        processor.on_event(SelectionChangedEvent(selected_ids=("a",)))
        assert processor.calls == []


class TestCallbackProcessor:
    def test_click_and_double_click(self):
        clicks, doubles = [], []
        processor = CallbackProcessor(on_node_click=clicks.append, on_node_double_click=doubles.append)
        processor.on_event(NodeClickEvent(node_id="a"))
        processor.on_event(NodeDoubleClickEvent(node_id="b"))
        processor.on_event(NodePinToggledEvent(node_id="b", pinned=True))
        assert clicks == ["a"]
        assert doubles == ["b"]

    def test_missing_callbacks_are_fine(self):
        CallbackProcessor().on_event(NodeClickEvent(node_id="a"))
