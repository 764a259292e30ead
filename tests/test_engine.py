"""End-to-end tests for GraphEngine: load, interact, persist, render."""

from __future__ import annotations

import pytest

from forcegraph import (
    Concept,
    Edge,
    EventProcessor,
    ForceGraphConfig,
    GraphEngine,
    JsonFileStore,
    LayoutSettledEvent,
    LayoutStore,
    ManualScheduler,
    MemoryStore,
    Node,
    NodeState,
    PersistedPosition,
    RecordingSurface,
)
from forcegraph.config import LoopConfig
from forcegraph.viewport import BOARD_ZOOM, Point, Viewport

# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------


class ListProcessor(EventProcessor):
    def __init__(self):
        self.events: list = []

    def on_event(self, event):
        self.events.append(event)

    def of_type(self, cls):
        return [e for e in self.events if isinstance(e, cls)]


CONCEPTS = [
    Concept("a", "Alpha", "person", mention_count=2),
    Concept("b", "Beta", "topic"),
    Concept("c", "Gamma", "project"),
]
EDGES = [Edge("a", "b", 0.8), Edge("b", "c", 0.3), Edge("c", "missing")]


def _engine(store=None, **kwargs):
    kwargs.setdefault("scheduler", ManualScheduler())
    return GraphEngine(store=store, **kwargs)


def _screen(engine, node_id):
    node = engine.model.get(node_id)
    point = engine.viewport.graph_to_screen(Point(node.x, node.y))
    return point.x, point.y


def _seed(backend, positions):
    """Write saved positions straight into a backend."""
    nodes = []
    for node_id, (x, y, pinned) in positions.items():
        state = NodeState.PINNED if pinned else NodeState.FREE
        nodes.append(Node(node_id, x, y, state=state, _rest_state=state))
    LayoutStore(backend).save_positions(nodes)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_default_layout_inside_surface(self):
        engine = _engine()
        assert engine.load(CONCEPTS, EDGES) == 0
        assert [n.id for n in engine.model.nodes] == ["a", "b", "c"]
        for node in engine.model.nodes:
            assert 0 < node.x < 600
            assert 0 < node.y < 400
            assert not node.pinned

    def test_restores_saved_positions(self):
        backend = MemoryStore()
        _seed(backend, {"a": (10.0, 20.0, True), "gone": (1.0, 1.0, False)})
        engine = _engine(backend)
        assert engine.load(CONCEPTS, EDGES) == 1
        a = engine.model.get("a")
        assert (a.x, a.y, a.pinned) == (10.0, 20.0, True)

    def test_dangling_edges_kept_but_skipped(self):
        engine = _engine()
        engine.load(CONCEPTS, EDGES)
        assert len(engine.model.edges) == 3
        assert len(list(engine.model.resolved_edges())) == 2

    def test_reload_drops_vanished_selection(self):
        engine = _engine()
        engine.load(CONCEPTS, EDGES)
        engine.controller.select(["a", "c"])
        engine.load(CONCEPTS[:2], EDGES[:1])
        assert engine.controller.selected_ids == ("a",)

    def test_engines_are_independent(self):
        first, second = _engine(), _engine()
        first.load(CONCEPTS, EDGES)
        assert len(second.model) == 0


# ---------------------------------------------------------------------------
# Interaction through the engine
# ---------------------------------------------------------------------------


class TestInteraction:
    def test_click_callback(self):
        clicks = []
        engine = _engine(on_node_click=clicks.append)
        engine.load(CONCEPTS, EDGES)
        x, y = _screen(engine, "b")
        engine.pointer_down(x, y)
        engine.pointer_up(x + 1, y)
        assert clicks == ["b"]
        assert engine.controller.selected_ids == ("b",)

    def test_double_click_pins_and_persists(self):
        backend = MemoryStore()
        doubles = []
        engine = _engine(backend, on_node_double_click=doubles.append)
        engine.load(CONCEPTS, EDGES)
        x, y = _screen(engine, "c")
        engine.double_click(x, y)
        assert doubles == ["c"]
        saved = LayoutStore(backend).load_positions()
        assert saved["c"].pinned
        assert LayoutStore(backend).load_pinned_count() == 1

    def test_drag_persists_final_position(self):
        backend = MemoryStore()
        engine = _engine(backend)
        engine.load(CONCEPTS, EDGES)
        x, y = _screen(engine, "a")
        engine.pointer_down(x, y)
        engine.pointer_move(50, 60)
        engine.pointer_up(50, 60)
        assert LayoutStore(backend).load_positions()["a"] == PersistedPosition(50, 60, False)

    def test_dragged_node_ignored_by_simulation(self):
        engine = _engine()
        engine.load(CONCEPTS, EDGES)
        x, y = _screen(engine, "a")
        engine.pointer_down(x, y)
        engine.pointer_move(80, 90)
        engine.settle(20)
        a = engine.model.get("a")
        assert (a.x, a.y) == (80, 90)
        engine.pointer_up()

    def test_wheel_persists_viewport(self):
        backend = MemoryStore()
        engine = _engine(backend)
        engine.load(CONCEPTS, EDGES)
        engine.wheel(300, 200, delta_y=-120)
        assert engine.viewport.zoom == pytest.approx(1.1)
        assert LayoutStore(backend).load_viewport() == engine.viewport


# ---------------------------------------------------------------------------
# Viewport controls
# ---------------------------------------------------------------------------


class TestViewportControls:
    def test_zoom_in_about_center(self):
        engine = _engine()
        engine.zoom_in()
        assert engine.viewport.zoom == pytest.approx(1.2)
        assert engine.viewport.pan_x == pytest.approx(300 - 300 * 1.2)
        assert engine.viewport.pan_y == pytest.approx(200 - 200 * 1.2)

    def test_zoom_out_clamps(self):
        engine = _engine()
        for _ in range(10):
            engine.zoom_out()
        assert engine.viewport.zoom == 0.5

    def test_reset_view(self):
        backend = MemoryStore()
        engine = _engine(backend)
        engine.zoom_in()
        engine.wheel(10, 10, delta_y=-1)
        engine.reset_view()
        assert engine.viewport == Viewport()
        assert LayoutStore(backend).load_viewport() == Viewport()

    def test_zoom_to_fit(self):
        backend = MemoryStore()
        _seed(backend, {"a": (0.0, 0.0, False), "b": (1000.0, 500.0, False), "c": (500.0, 250.0, False)})
        engine = _engine(backend)
        engine.load(CONCEPTS, EDGES)
        engine.zoom_to_fit()
        zoom = 600 / 1100
        assert engine.viewport.zoom == pytest.approx(zoom)
        assert engine.viewport.pan_x == pytest.approx(300 - 500 * zoom)
        assert engine.viewport.pan_y == pytest.approx(200 - 250 * zoom)

    def test_visible_node_ids(self):
        backend = MemoryStore()
        _seed(backend, {"a": (0.0, 0.0, False), "b": (1000.0, 500.0, False), "c": (500.0, 250.0, False)})
        engine = _engine(backend)
        engine.load(CONCEPTS, EDGES)
        assert engine.visible_node_ids() == ["a", "c"]
        engine.zoom_to_fit()
        assert engine.visible_node_ids() == ["a", "b", "c"]

    def test_zoom_to_fit_never_zooms_in(self):
        backend = MemoryStore()
        _seed(backend, {"a": (290.0, 190.0, False), "b": (310.0, 210.0, False), "c": (300.0, 200.0, False)})
        engine = _engine(backend)
        engine.load(CONCEPTS, EDGES)
        engine.zoom_to_fit()
        assert engine.viewport.zoom == 1.0

    def test_zoom_to_fit_empty_graph(self):
        engine = _engine()
        engine.zoom_to_fit()
        assert engine.viewport == Viewport()

    def test_viewport_restored_per_view(self):
        backend = MemoryStore()
        LayoutStore(backend).save_viewport(Viewport(5, 6, 0.3, zoom_range=BOARD_ZOOM), "board")
        board = _engine(backend, view="board")
        graph = _engine(backend, view="graph")
        assert board.viewport.zoom == 0.3
        assert board.viewport.zoom_range == BOARD_ZOOM
        assert graph.viewport == Viewport()


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


class TestFrames:
    def test_frames_draw_to_surface(self):
        scheduler = ManualScheduler()
        surface = RecordingSurface(600, 400)
        engine = _engine(surface=surface, scheduler=scheduler)
        engine.load(CONCEPTS, EDGES)
        engine.start()
        for _ in range(3):
            scheduler.step()
        assert surface.ops().count("clear") == 3
        assert engine.loop.frames == 3
        engine.stop()
        assert not scheduler.pending

    def test_unsized_surface_defers_until_resized(self):
        scheduler = ManualScheduler()
        surface = RecordingSurface()
        engine = _engine(surface=surface, scheduler=scheduler)
        engine.load(CONCEPTS, EDGES)
        engine.start()
        for _ in range(3):
            scheduler.step()
        assert engine.loop.frames == 0
        assert surface.commands == []
        engine.resize(800, 600)
        scheduler.step()
        assert engine.loop.frames == 1
        assert engine.bounds.width == 800

    def test_settled_event(self):
        scheduler = ManualScheduler()
        events = ListProcessor()
        config = ForceGraphConfig(loop=LoopConfig(settle_frames=5))
        engine = _engine(config=config, scheduler=scheduler, processors=[events])
        engine.load(CONCEPTS, EDGES)
        engine.start()
        for _ in range(8):
            scheduler.step()
        settled = events.of_type(LayoutSettledEvent)
        assert len(settled) == 1
        assert settled[0].frames == 5
        assert scheduler.next_delay == pytest.approx(0.1)

    def test_headless_loop_simulates(self):
        scheduler = ManualScheduler()
        engine = _engine(scheduler=scheduler)
        engine.load(CONCEPTS, EDGES)
        before = engine.snapshot()
        engine.start()
        scheduler.step()
        assert engine.snapshot() != before


# ---------------------------------------------------------------------------
# Persistence and output
# ---------------------------------------------------------------------------


class TestPersistence:
    def test_positions_survive_new_engine(self, tmp_path):
        path = tmp_path / "layout.json"
        first = _engine(JsonFileStore(path))
        first.load(CONCEPTS, EDGES)
        first.settle(30)
        first.save_positions()
        expected = first.snapshot()
        first.close()

        second = _engine(JsonFileStore(path))
        assert second.load(CONCEPTS, EDGES) == 3
        assert second.snapshot() == expected

    def test_clear_saved_positions(self):
        backend = MemoryStore()
        engine = _engine(backend)
        engine.load(CONCEPTS, EDGES)
        engine.save_positions()
        engine.clear_saved_positions()
        assert _engine(backend).load(CONCEPTS, EDGES) == 0

    async def test_close_async_flushes_sqlite(self, tmp_path):
        pytest.importorskip("aiosqlite")
        from forcegraph import SqliteStore

        path = tmp_path / "layout.db"
        async with _engine(SqliteStore(path)) as engine:
            engine.load(CONCEPTS, EDGES)
            x, y = _screen(engine, "a")
            engine.double_click(x, y)

        store = SqliteStore(path)
        try:
            assert LayoutStore(store).load_positions()["a"].pinned
        finally:
            store.close()

    def test_svg_output(self):
        engine = _engine()
        engine.load(CONCEPTS, EDGES)
        svg = engine._repr_svg_()
        assert svg.startswith("<svg")
        assert svg.count("<circle") == 3
        assert ">Alpha</text>" in svg

    def test_repr(self):
        engine = _engine()
        engine.load(CONCEPTS, EDGES)
        assert repr(engine) == "GraphEngine(view='graph', nodes=3, edges=3)"
