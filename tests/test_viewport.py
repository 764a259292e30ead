"""Tests for screen/graph coordinate conversion and zoom."""

import pytest

from forcegraph.exceptions import MalformedInputError
from forcegraph.viewport import BOARD_ZOOM, GRAPH_ZOOM, Bounds, Point, Viewport, ZoomRange


class TestConversions:
    def test_identity(self):
        vp = Viewport()
        assert vp.screen_to_graph(Point(12, 34)) == Point(12, 34)

    def test_screen_to_graph(self):
        vp = Viewport(pan_x=100, pan_y=50, zoom=2)
        assert vp.screen_to_graph(Point(300, 250)) == Point(100, 100)

    def test_graph_to_screen_inverts(self):
        vp = Viewport(pan_x=-40, pan_y=17, zoom=1.5)
        p = Point(123.5, -8.25)
        back = vp.screen_to_graph(vp.graph_to_screen(p))
        assert back.x == pytest.approx(p.x)
        assert back.y == pytest.approx(p.y)

    def test_visible_bounds(self):
        vp = Viewport(pan_x=100, pan_y=0, zoom=2)
        top_left, bottom_right = vp.visible_bounds(600, 400)
        assert top_left == Point(-50, 0)
        assert bottom_right == Point(250, 200)


class TestZoomTowardCursor:
    @pytest.mark.parametrize("factor", [1.1, 0.9, 1.2, 1 / 1.2])
    def test_graph_point_under_cursor_is_fixed(self, factor):
        vp = Viewport(pan_x=30, pan_y=-20, zoom=1.3)
        cursor = Point(217, 141)
        before = vp.screen_to_graph(cursor)
        vp.zoom_toward(cursor, factor)
        after = vp.screen_to_graph(cursor)
        assert after.x == pytest.approx(before.x)
        assert after.y == pytest.approx(before.y)

    def test_clamped_zoom_keeps_cursor_point(self):
        vp = Viewport(zoom=2.9)
        cursor = Point(300, 200)
        before = vp.screen_to_graph(cursor)
        vp.zoom_toward(cursor, 1.5)
        assert vp.zoom == GRAPH_ZOOM.max
        after = vp.screen_to_graph(cursor)
        assert after.x == pytest.approx(before.x)
        assert after.y == pytest.approx(before.y)

    def test_zoom_at_limit_does_not_move_pan(self):
        vp = Viewport(pan_x=10, pan_y=20, zoom=0.5)
        vp.zoom_toward(Point(300, 200), 0.9)
        assert (vp.pan_x, vp.pan_y, vp.zoom) == (10, 20, 0.5)


class TestZoomRange:
    def test_graph_range(self):
        assert (GRAPH_ZOOM.min, GRAPH_ZOOM.max) == (0.5, 3.0)

    def test_board_range(self):
        assert (BOARD_ZOOM.min, BOARD_ZOOM.max) == (0.25, 2.0)

    def test_constructor_clamps(self):
        assert Viewport(zoom=10).zoom == 3.0
        assert Viewport(zoom=0.1, zoom_range=BOARD_ZOOM).zoom == 0.25

    def test_repeated_wheel_stays_in_range(self):
        vp = Viewport(zoom_range=ZoomRange(0.5, 3.0))
        for _ in range(100):
            vp.zoom_toward(Point(0, 0), 1.1)
        assert vp.zoom == 3.0
        for _ in range(100):
            vp.zoom_toward(Point(0, 0), 0.9)
        assert vp.zoom == 0.5


class TestMutations:
    def test_pan_by(self):
        vp = Viewport()
        vp.pan_by(5, -3)
        vp.pan_by(1, 1)
        assert (vp.pan_x, vp.pan_y) == (6, -2)

    def test_reset(self):
        vp = Viewport(pan_x=50, pan_y=60, zoom=2)
        vp.reset()
        assert vp == Viewport()

    def test_fit_centres_content(self):
        vp = Viewport()
        vp.fit(Point(100, 100), Point(300, 200), 600, 400)
        center = vp.graph_to_screen(Point(200, 150))
        assert center.x == pytest.approx(300)
        assert center.y == pytest.approx(200)

    def test_fit_never_zooms_past_one(self):
        vp = Viewport()
        vp.fit(Point(0, 0), Point(10, 10), 600, 400)
        assert vp.zoom == 1.0

    def test_fit_large_content_zooms_out(self):
        vp = Viewport()
        vp.fit(Point(0, 0), Point(2000, 1000), 600, 400)
        assert vp.zoom == GRAPH_ZOOM.min


class TestSerialization:
    def test_round_trip(self):
        vp = Viewport(pan_x=12.5, pan_y=-3, zoom=1.75)
        assert Viewport.from_dict(vp.to_dict()) == vp

    def test_record_keys(self):
        assert Viewport(1, 2, 1.5).to_dict() == {"panX": 1, "panY": 2, "zoom": 1.5}

    def test_from_dict_clamps_to_range(self):
        vp = Viewport.from_dict({"panX": 0, "panY": 0, "zoom": 2.5}, zoom_range=BOARD_ZOOM)
        assert vp.zoom == 2.0

    @pytest.mark.parametrize(
        "record",
        [
            None,
            [],
            {"panX": 0, "panY": 0},
            {"panX": "a", "panY": 0, "zoom": 1},
            {"panX": float("nan"), "panY": 0, "zoom": 1},
            {"panX": 0, "panY": 0, "zoom": 0},
            {"panX": True, "panY": 0, "zoom": 1},
        ],
    )
    def test_malformed(self, record):
        with pytest.raises(MalformedInputError):
            Viewport.from_dict(record)


class TestBounds:
    def test_center(self):
        assert Bounds(600, 400).center == Point(300, 200)

    def test_is_sized(self):
        assert Bounds(1, 1).is_sized
        assert not Bounds(0, 400).is_sized
