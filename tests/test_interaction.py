"""Tests for pointer gestures: selection, dragging, panning, rubber band, zoom and tooltips."""

import pytest

from socialgraph.controller.interaction import GestureKind, InteractionController
from socialgraph.controller.scheduler import AnimationScheduler
from socialgraph.controller.simulation import ForceSimulation

from conftest import FakeTimer, fixed_measure


class Recorder:
    def __init__(self):
        self.selects = 0
        self.popups = 0
        self.redraws = 0

    def on_select(self):
        self.selects += 1

    def on_popup(self):
        self.popups += 1

    def redraw(self):
        self.redraws += 1


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def board(scene):
    """Three labelled nodes in a row, free to move, with the simulation at rest."""
    scene.set_nodes([
        {"id": 1, "text": "a", "title": "first"},
        {"id": 2, "text": "b"},
        {"id": 3, "text": "c"},
    ])
    for node, x in zip(scene.nodes, (100.0, 200.0, 300.0)):
        node.x, node.y = x, 100.0
    scene.has_moving_nodes = False
    return scene


@pytest.fixture
def controller(board, recorder):
    scheduler = AnimationScheduler(board, ForceSimulation(board), recorder.redraw, FakeTimer())
    return InteractionController(board, scheduler, fixed_measure, recorder.redraw,
                                 on_select=recorder.on_select, on_popup=recorder.on_popup,
                                 hover_timer=FakeTimer())


def click(controller, x, y, ctrl=False, shift=False):
    controller.press(x, y, ctrl=ctrl, shift=shift)
    controller.release(x, y, ctrl=ctrl)


class TestSelection:
    def test_click_selects_node(self, controller, board, recorder):
        click(controller, 100, 100)
        assert board.selection() == [0]
        assert recorder.selects == 1

    def test_click_replaces_selection(self, controller, board):
        click(controller, 100, 100)
        click(controller, 200, 100)
        assert board.selection() == [1]

    def test_ctrl_click_adds_and_toggles(self, controller, board):
        click(controller, 100, 100)
        click(controller, 200, 100, ctrl=True)
        assert board.selection() == [0, 1]
        click(controller, 100, 100, ctrl=True)
        assert board.selection() == [1]

    def test_click_on_empty_space_clears(self, controller, board, recorder):
        click(controller, 100, 100)
        click(controller, 500, 500)
        assert board.selection() == []
        assert recorder.selects == 2

    def test_reselecting_does_not_signal(self, controller, recorder):
        click(controller, 100, 100)
        click(controller, 100, 100)
        assert recorder.selects == 1

    def test_rubber_band_selects_enclosed_nodes(self, controller, board, recorder):
        controller.press(50, 50, shift=True)
        assert controller.gesture.kind == GestureKind.RUBBER_BAND
        controller.move(250, 150)
        assert controller.selection_rect is not None
        controller.release(250, 150)
        assert board.selection() == [0, 1]
        assert controller.selection_rect is None
        assert recorder.selects == 1

    def test_not_selectable(self, controller, board):
        controller.selectable = False
        click(controller, 100, 100)
        assert board.selection() == []
        assert controller.gesture is None


class TestDragAndPan:
    def test_drag_moves_node_and_restores_pins(self, controller, board):
        node = board.nodes[0]
        controller.press(100, 100)
        assert node.x_fixed and node.y_fixed
        controller.move(140, 130)
        assert (node.x, node.y) == (140, 130)
        assert board.has_moving_nodes
        controller.release(140, 130)
        assert not node.x_fixed and not node.y_fixed
        assert controller.scheduler.timer.isActive()

    def test_drag_respects_pinned_axis(self, controller, board):
        node = board.nodes[1]
        node.y_fixed = True
        controller.press(200, 100)
        controller.move(230, 160)
        assert (node.x, node.y) == (230, 100)
        controller.release(230, 160)
        assert node.y_fixed and not node.x_fixed

    def test_drag_follows_zoom(self, controller, board):
        board.transform.scale = 2.0
        node = board.nodes[0]
        controller.press(200, 200)
        controller.move(300, 260)
        assert (node.x, node.y) == (150, 130)

    def test_pan_moves_view_without_clearing_selection(self, controller, board):
        click(controller, 100, 100)
        controller.press(500, 500)
        controller.move(520, 490)
        controller.release(520, 490)
        assert (board.transform.tx, board.transform.ty) == (20, -10)
        assert board.selection() == [0]

    def test_wheel_zooms_around_pointer(self, controller, board):
        before = board.transform.to_canvas(200, 100)
        controller.wheel(200, 100, 1)
        assert board.transform.scale == pytest.approx(1.1)
        assert board.transform.to_canvas(200, 100) == pytest.approx(before)


class TestPopup:
    def test_hover_shows_title_after_delay(self, controller, recorder):
        controller.hover(100, 100)
        assert not controller.popup.visible
        assert controller.hover_timer.isActive()
        controller.hover_timer.fire()
        assert controller.popup.visible
        assert controller.popup.text == "first"
        assert recorder.popups == 1

    def test_leaving_target_hides_popup(self, controller, recorder):
        controller.hover(100, 100)
        controller.hover_timer.fire()
        controller.hover(400, 400)
        assert not controller.popup.visible
        assert controller.popup.target is None
        assert recorder.popups == 2

    def test_untitled_node_has_no_popup(self, controller):
        controller.hover(200, 100)
        controller.hover_timer.fire()
        assert not controller.popup.visible

    def test_press_cancels_pending_popup(self, controller):
        controller.hover(100, 100)
        controller.press(100, 100)
        assert not controller.hover_timer.isActive()
