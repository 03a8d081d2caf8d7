"""Tests for interaction.py and focus.py — router state machine, focus, edge derivation."""

from __future__ import annotations

import pytest

from lineage_graph.focus import (
    NEUTRAL_STROKE,
    NEUTRAL_STROKE_ACTIVE,
    RIVAL_STROKE,
    RIVAL_STROKE_ACTIVE,
    EdgeFocus,
    EdgeGeometry,
    FocusState,
    curve_distance,
    curve_path,
    edge_focus,
    edge_geometry,
    edge_style,
    edge_views,
    node_contains,
)
from lineage_graph.graph import EdgeData, EdgeType, NodeData
from lineage_graph.interaction import (
    DraggingNode,
    Idle,
    InteractionRouter,
    PanningCanvas,
    find_node,
)
from lineage_graph.layout.types import LayoutNode, LayoutResult
from lineage_graph.viewport import ViewportController, ViewportState

# ─── Helpers ──────────────────────────────────────────────────────────────────

STUDENT_AB = EdgeData("A", "B")
INFLUENCE_AC = EdgeData("A", "C", EdgeType.Influence, "taught")
RIVAL_BC = EdgeData("B", "C", EdgeType.Rival)
DANGLING = EdgeData("A", "ghost")


def make_layout() -> LayoutResult:
    """A (gen 0) above B and C (gen 1); B and C are rivals."""
    nodes = [
        LayoutNode("A", 0, 500.0, 100.0, NodeData("A", "Socrates", 0)),
        LayoutNode("B", 1, 300.0, 280.0, NodeData("B", "Antisthenes", 1)),
        LayoutNode("C", 1, 800.0, 280.0, NodeData("C", "Plato", 1)),
    ]
    return LayoutResult(nodes=nodes, edges=[STUDENT_AB, INFLUENCE_AC, RIVAL_BC, DANGLING], width=1000)


def make_router(scale: float = 1.0, x: float = 0.0, y: float = 0.0) -> InteractionRouter:
    viewport = ViewportController(ViewportState(scale=scale, x=x, y=y))
    return InteractionRouter(make_layout(), viewport)


# ─── Edge Focus Tests ─────────────────────────────────────────────────────────


class TestEdgeFocus:
    def test_no_focus_nothing_dimmed(self):
        assert edge_focus(STUDENT_AB, FocusState()) == EdgeFocus(highlighted=False, clickable=False, dimmed=False)

    def test_selected_endpoint_highlights_and_enables_click(self):
        assert edge_focus(STUDENT_AB, FocusState(selected="A")) == EdgeFocus(True, True, False)

    def test_hover_highlights_without_click(self):
        assert edge_focus(STUDENT_AB, FocusState(hovered="B")) == EdgeFocus(True, False, False)

    def test_unrelated_edge_dimmed(self):
        assert edge_focus(RIVAL_BC, FocusState(selected="A")) == EdgeFocus(False, False, True)

    def test_selected_and_hovered_independent(self):
        focus = FocusState(selected="A", hovered="C")
        assert edge_focus(RIVAL_BC, focus) == EdgeFocus(True, False, False)
        assert edge_focus(STUDENT_AB, focus) == EdgeFocus(True, True, False)


class TestEdgeStyle:
    def test_neutral_idle(self):
        style = edge_style(STUDENT_AB, FocusState())
        assert (style.stroke, style.width, style.opacity, style.dashed) == (NEUTRAL_STROKE, 2.0, 0.6, False)

    def test_neutral_highlighted(self):
        style = edge_style(STUDENT_AB, FocusState(selected="B"))
        assert (style.stroke, style.width, style.opacity) == (NEUTRAL_STROKE_ACTIVE, 3.0, 1.0)

    def test_rival_palette(self):
        assert edge_style(RIVAL_BC, FocusState()).stroke == RIVAL_STROKE
        assert edge_style(RIVAL_BC, FocusState()).width == 1.5
        assert edge_style(RIVAL_BC, FocusState(hovered="C")).stroke == RIVAL_STROKE_ACTIVE

    def test_dashed_types(self):
        assert edge_style(INFLUENCE_AC, FocusState()).dashed
        assert edge_style(RIVAL_BC, FocusState()).dashed
        assert edge_style(EdgeData("A", "B", EdgeType.Dotted), FocusState()).dashed

    def test_label_only_when_highlighted(self):
        assert not edge_style(INFLUENCE_AC, FocusState()).show_label
        assert edge_style(INFLUENCE_AC, FocusState(hovered="A")).show_label
        assert not edge_style(STUDENT_AB, FocusState(hovered="A")).show_label


class TestEdgeGeometry:
    def test_vertical_anchors(self):
        layout = make_layout()
        geo = edge_geometry(STUDENT_AB, layout.node("A"), layout.node("B"))
        assert geo == EdgeGeometry(500, 125, 300, 255)
        assert geo.path == "M 500 125 C 500 190, 300 190, 300 255"

    def test_rival_same_generation_side_to_side(self):
        layout = make_layout()
        geo = edge_geometry(RIVAL_BC, layout.node("B"), layout.node("C"))
        assert geo == EdgeGeometry(370, 280, 730, 280)

    def test_rival_right_to_left(self):
        layout = make_layout()
        geo = edge_geometry(EdgeData("C", "B", EdgeType.Rival), layout.node("C"), layout.node("B"))
        assert geo == EdgeGeometry(730, 280, 370, 280)

    def test_rival_across_generations_is_vertical(self):
        layout = make_layout()
        geo = edge_geometry(EdgeData("A", "C", EdgeType.Rival), layout.node("A"), layout.node("C"))
        assert geo == EdgeGeometry(500, 125, 800, 255)

    def test_curve_path_control_points_at_mid_height(self):
        assert curve_path(0, 0, 10, 100) == "M 0 0 C 0 50, 10 50, 10 100"

    def test_curve_distance(self):
        geo = EdgeGeometry(500, 125, 300, 255)
        assert curve_distance(geo, 400, 190) == pytest.approx(0, abs=1)
        assert curve_distance(geo, 500, 125) == pytest.approx(0)
        assert curve_distance(geo, 900, 190) > 300

    def test_edge_views_skip_dangling(self):
        views = edge_views(make_layout(), FocusState())
        assert [v.edge for v in views] == [STUDENT_AB, INFLUENCE_AC, RIVAL_BC]


class TestNodeContains:
    def test_body_extent(self):
        node = LayoutNode("A", 0, 500.0, 100.0)
        assert node_contains(node, 500, 100)
        assert node_contains(node, 580, 135)
        assert not node_contains(node, 581, 100)
        assert not node_contains(node, 500, 136)


# ─── Router Tests ─────────────────────────────────────────────────────────────


class TestPointerDown:
    def test_on_node_starts_drag_with_grab_offset(self):
        router = make_router()
        router.pointer_down(510, 110)
        assert router.state == DraggingNode("A", 10, 10)

    def test_on_canvas_starts_pan(self):
        router = make_router()
        router.pointer_down(0, 600)
        assert router.state == PanningCanvas(0, 600)

    def test_hit_test_uses_viewport(self):
        router = make_router(scale=0.5, x=100, y=20)
        # A at world (500, 100) → screen (350, 70)
        router.pointer_down(350, 70)
        assert isinstance(router.state, DraggingNode)
        assert router.state.node_id == "A"

    def test_topmost_node_wins(self):
        router = make_router()
        router.layout.node("C").x = 320  # overlaps B, drawn later
        router.pointer_down(310, 280)
        assert router.state.node_id == "C"


class TestDrag:
    def test_node_follows_pointer_without_jump(self):
        router = make_router()
        router.pointer_down(510, 110)
        router.pointer_move(610, 160)
        assert (router.layout.node("A").x, router.layout.node("A").y) == (600, 150)

    def test_drag_uses_full_inverse_transform(self):
        router = make_router(scale=0.5, x=100, y=20)
        router.pointer_down(350, 70)
        router.pointer_move(400, 90)
        node = router.layout.node("A")
        assert (node.x, node.y) == pytest.approx((600, 140))

    def test_other_nodes_untouched(self):
        router = make_router()
        router.pointer_down(500, 100)
        router.pointer_move(900, 500)
        assert (router.layout.node("B").x, router.layout.node("C").x) == (300, 800)

    def test_release_returns_to_idle_without_selecting(self):
        router = make_router()
        router.pointer_down(500, 100)
        router.pointer_move(520, 100)
        router.pointer_up(520, 100)
        assert router.state == Idle()
        assert router.focus.selected is None

    def test_viewport_not_changed_by_drag(self):
        router = make_router(scale=0.8, x=5, y=6)
        router.pointer_down(*router.viewport.to_screen(500, 100))
        router.pointer_move(0, 0)
        assert router.viewport.state == ViewportState(0.8, 5, 6)


class TestClick:
    def test_press_release_in_place_selects_without_moving(self):
        router = make_router()
        router.pointer_down(505, 95)
        router.pointer_up(505, 95)
        assert router.focus.selected == "A"
        assert (router.layout.node("A").x, router.layout.node("A").y) == (500, 100)

    def test_move_to_same_position_is_still_a_click(self):
        router = make_router()
        router.pointer_down(505, 95)
        router.pointer_move(505, 95)
        router.pointer_up(505, 95)
        assert router.focus.selected == "A"
        assert (router.layout.node("A").x, router.layout.node("A").y) == (500, 100)

    def test_canvas_click_keeps_selection(self):
        router = make_router()
        router.click_node("B")
        router.pointer_down(0, 600)
        router.pointer_up(0, 600)
        assert router.focus.selected == "B"

    def test_release_elsewhere_is_not_a_click(self):
        """No move events in between, but the pointer came up somewhere else."""
        router = make_router()
        router.pointer_down(505, 95)
        router.pointer_up(900, 600)
        assert router.focus.selected is None
        assert router.state == Idle()

    def test_click_unknown_node(self):
        router = make_router()
        assert not router.click_node("nobody")
        assert router.focus.selected is None


class TestPan:
    def test_pan_follows_pointer_deltas(self):
        router = make_router()
        router.pointer_down(0, 600)
        router.pointer_move(30, 620)
        router.pointer_move(40, 615)
        assert (router.viewport.state.x, router.viewport.state.y) == (40, 15)
        assert router.state == PanningCanvas(40, 615)

    def test_pan_does_not_move_nodes(self):
        router = make_router()
        before = router.layout.positions()
        router.pointer_down(0, 600)
        router.pointer_move(300, 300)
        router.pointer_up(300, 300)
        assert router.layout.positions() == before
        assert router.state == Idle()

    def test_move_while_idle_does_nothing(self):
        router = make_router()
        router.pointer_move(100, 100)
        assert router.viewport.state == ViewportState()

    def test_wheel_zooms_at_cursor(self):
        router = make_router()
        router.wheel(500, 100, -200)
        assert router.viewport.scale == pytest.approx(1.2)
        assert router.viewport.to_world(500, 100) == pytest.approx((500, 100))


class TestEdgeFollow:
    def test_follow_and_back(self):
        router = make_router()
        router.click_node("A")
        assert router.click_edge(STUDENT_AB)
        assert router.focus.selected == "B"
        assert router.click_edge(STUDENT_AB)
        assert router.focus.selected == "A"

    def test_requires_selection(self):
        router = make_router()
        assert not router.click_edge(STUDENT_AB)
        assert router.focus.selected is None

    def test_edge_not_touching_selection_ignored(self):
        router = make_router()
        router.click_node("A")
        assert not router.click_edge(RIVAL_BC)
        assert router.focus.selected == "A"

    def test_hover_alone_does_not_enable_click(self):
        router = make_router()
        router.pointer_enter("A")
        assert not router.click_edge(STUDENT_AB)

    def test_dangling_far_end(self):
        router = make_router()
        router.click_node("A")
        assert not router.click_edge(DANGLING)
        assert router.focus.selected == "A"

    def test_pointer_click_on_clickable_edge(self):
        router = make_router()
        router.click_node("A")
        # Curve midpoint of A→B is (400, 190).
        router.pointer_down(400, 190)
        assert isinstance(router.state, PanningCanvas)
        router.pointer_up(400, 190)
        assert router.focus.selected == "B"

    def test_edge_press_released_elsewhere_does_not_follow(self):
        router = make_router()
        router.click_node("A")
        router.pointer_down(400, 190)
        router.pointer_up(50, 900)
        assert router.focus.selected == "A"

    def test_pointer_click_on_non_clickable_edge(self):
        router = make_router()
        router.click_node("C")
        router.pointer_down(400, 190)
        router.pointer_up(400, 190)
        assert router.focus.selected == "C"

    def test_edge_at(self):
        router = make_router()
        assert router.edge_at(400, 190) is None
        router.click_node("B")
        assert router.edge_at(400, 190) == STUDENT_AB
        assert router.edge_at(400, 400) is None


class TestHover:
    def test_pointer_move_tracks_hover(self):
        router = make_router()
        router.pointer_move(800, 280)
        assert router.focus.hovered == "C"
        router.pointer_move(800, 500)
        assert router.focus.hovered is None

    def test_enter_leave(self):
        router = make_router()
        router.pointer_enter("B")
        assert router.hovered_node().id == "B"
        router.pointer_leave("C")
        assert router.focus.hovered == "B"
        router.pointer_leave("B")
        assert router.focus.hovered is None

    def test_hover_independent_of_selection(self):
        router = make_router()
        router.click_node("A")
        router.pointer_enter("C")
        router.pointer_leave("C")
        assert router.focus.selected == "A"

    def test_focus_follows_live_position(self):
        router = make_router()
        router.click_node("A")
        router.pointer_down(500, 100)
        router.pointer_move(700, 100)
        assert router.selected_node().x == 700


class TestSearch:
    def test_case_insensitive_substring(self):
        router = make_router()
        found = router.search("PLA")
        assert found.id == "C"
        assert router.focus.selected == "C"

    def test_first_match_in_input_order(self):
        router = make_router()
        assert router.search("s").id == "A"

    def test_no_match_keeps_selection(self):
        router = make_router()
        router.click_node("B")
        assert router.search("Epictetus") is None
        assert router.focus.selected == "B"

    def test_empty_query(self):
        assert find_node(make_layout().nodes, "   ") is None


class TestRebind:
    def test_drops_vanished_focus(self):
        router = make_router()
        router.click_node("A")
        router.pointer_enter("B")
        router.pointer_down(0, 0)
        fresh = LayoutResult(nodes=[LayoutNode("B", 0, 0.0, 100.0)], edges=[], width=100)
        router.rebind(fresh)
        assert router.focus == FocusState(selected=None, hovered="B")
        assert router.state == Idle()

    def test_clear_selection(self):
        router = make_router()
        router.click_node("A")
        router.clear_selection()
        assert router.selected_node() is None
