"""Tests for styles, surfaces and the graph renderer."""

import pytest

from forcegraph.exceptions import SurfaceUnavailableError
from forcegraph.graph import Edge, GraphModel, Node
from forcegraph.hit_test import node_radius
from forcegraph.render import GraphRenderer, RecordingSurface, Surface, SvgSurface, render_svg
from forcegraph.render import styles
from forcegraph.viewport import Viewport


def _model():
    nodes = [
        Node("a", 100.0, 100.0, label="Alpha", type_tag="person"),
        Node("b", 200.0, 150.0, label="A very long concept name", type_tag="mystery", mention_count=3),
    ]
    edges = [Edge("a", "b", 0.5), Edge("a", "ghost", 1.0)]
    return GraphModel(nodes, edges)


def _draw(model=None, viewport=None, **kwargs):
    surface = RecordingSurface(600, 400)
    GraphRenderer().draw(surface, model or _model(), viewport or Viewport(), **kwargs)
    return surface


class TestStyles:
    def test_fill_for_known_and_unknown_types(self):
        assert styles.fill_for("person") == "#3B82F6"
        assert styles.fill_for("nonsense") == styles.TYPE_COLORS["other"]

    @pytest.mark.parametrize(
        "strength, color, width",
        [
            (0.0, "rgba(156, 163, 175, 0.2)", 1.0),
            (0.5, "rgba(156, 163, 175, 0.4)", 2.0),
            (1.0, "rgba(156, 163, 175, 0.6)", 3.0),
        ],
    )
    def test_edge_stroke(self, strength, color, width):
        assert styles.edge_stroke(strength) == styles.Stroke(color, width)

    def test_no_border_by_default(self):
        assert styles.border_for(selected=False, pinned=False, hovered=False) is None

    def test_selected_wins_colour_pinned_wins_width(self):
        border = styles.border_for(selected=True, pinned=True, hovered=True)
        assert border == styles.Stroke(styles.SELECTED_BORDER.color, 2)

    def test_pinned_over_hovered(self):
        assert styles.border_for(selected=False, pinned=True, hovered=True) == styles.PINNED_BORDER

    def test_hovered(self):
        assert styles.border_for(selected=False, pinned=False, hovered=True) == styles.HOVERED_BORDER

    def test_truncate_label(self):
        assert styles.truncate_label("Short") == "Short"
        assert styles.truncate_label("x" * 15) == "x" * 15
        assert styles.truncate_label("x" * 16) == "x" * 15 + "..."


class TestRenderer:
    def test_frame_structure(self):
        ops = _draw().ops()
        assert ops[:4] == ["clear", "save", "translate", "scale"]
        assert ops[-1] == "restore"
        assert ops.index("line") < ops.index("circle")

    def test_viewport_transform_applied(self):
        surface = _draw(viewport=Viewport(40, -10, 2.0))
        assert surface.of("translate")[0].args == (40, -10)
        assert surface.of("scale")[0].args == (2.0,)

    def test_dangling_edges_not_drawn(self):
        lines = _draw().of("line")
        assert len(lines) == 1
        assert lines[0].args == (100.0, 100.0, 200.0, 150.0)
        assert lines[0].kwargs == {"color": "rgba(156, 163, 175, 0.4)", "width": 2.0}

    def test_nodes_in_draw_order(self):
        circles = _draw().of("circle")
        assert [c.args[:2] for c in circles] == [(100.0, 100.0), (200.0, 150.0)]
        assert circles[0].kwargs["fill"] == "#3B82F6"
        assert circles[1].kwargs["fill"] == styles.TYPE_COLORS["other"]
        assert circles[1].args[2] == pytest.approx(node_radius(3))

    def test_unstyled_node_has_no_border(self):
        circle = _draw().of("circle")[0]
        assert circle.kwargs["stroke"] is None

    def test_selected_and_hovered_borders(self):
        circles = _draw(selected_ids=("a",), hovered_id="b").of("circle")
        assert circles[0].kwargs["stroke"] == styles.SELECTED_BORDER.color
        assert circles[1].kwargs["stroke"] == styles.HOVERED_BORDER.color

    def test_pinned_node_gets_marker(self):
        model = _model()
        model.get("a").toggle_pin()
        circles = _draw(model).of("circle")
        assert len(circles) == 4
        node, pin, dot = circles[:3]
        r = node_radius(0)
        assert node.kwargs["stroke"] == styles.PINNED_BORDER.color
        assert pin.args == pytest.approx((100 + r * 0.7, 100 - r * 0.7, styles.PIN_RADIUS))
        assert pin.kwargs["fill"] == styles.PIN_COLOR
        assert dot.args[2] == styles.PIN_DOT_RADIUS
        assert dot.kwargs["fill"] == styles.PIN_DOT_COLOR

    def test_labels_below_nodes(self):
        texts = _draw(hovered_id="a").of("text")
        assert [t.args[2] for t in texts] == ["Alpha", "A very long con..."]
        first = texts[0]
        assert first.args[1] == pytest.approx(100 + node_radius(0) + styles.LABEL_GAP)
        assert first.kwargs == {"color": "#374151", "size": 11, "bold": True}
        assert texts[1].kwargs["bold"] is False

    def test_unsized_surface_raises(self):
        surface = RecordingSurface()
        with pytest.raises(SurfaceUnavailableError):
            GraphRenderer().draw(surface, _model(), Viewport())
        assert surface.commands == []

    def test_restore_runs_when_drawing_fails(self):
        class FailingText(RecordingSurface):
            def text(self, *args, **kwargs):
                raise RuntimeError("font missing")

        surface = FailingText(600, 400)
        with pytest.raises(RuntimeError):
            GraphRenderer().draw(surface, _model(), Viewport())
        assert surface.ops()[-1] == "restore"


class TestSurfaces:
    def test_recording_surface_is_a_surface(self):
        assert isinstance(RecordingSurface(1, 1), Surface)
        assert isinstance(SvgSurface(1, 1), Surface)

    def test_recording_reset(self):
        surface = RecordingSurface(10, 10)
        surface.clear()
        surface.reset()
        assert surface.commands == []

    def test_svg_applies_transform(self):
        surface = SvgSurface(200, 100)
        surface.save()
        surface.translate(10, 20)
        surface.scale(2)
        surface.circle(5, 5, 4, fill="#10B981")
        surface.restore()
        surface.circle(5, 5, 4, fill="#10B981")
        svg = surface.to_svg()
        assert '<circle cx="20" cy="30" r="8" fill="#10B981"/>' in svg
        assert '<circle cx="5" cy="5" r="4" fill="#10B981"/>' in svg

    def test_svg_escapes_text(self):
        surface = SvgSurface(100, 100)
        surface.text(0, 0, "R&D <team>", color="#374151", size=11)
        assert "R&amp;D &lt;team&gt;" in surface.to_svg()

    def test_svg_document(self):
        svg = render_svg(_model(), Viewport(), 600, 400)
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="600" height="400"')
        assert svg.endswith("</svg>")
        assert svg.count("<circle") == 2
        assert svg.count("<line") == 1
        assert ">Alpha</text>" in svg
