"""
Interaction Controller
======================
Turns pointer input into scene mutations: dragging nodes, selecting, rubber
band selection, panning, wheel zoom and hover tooltips.

Why is this file needed?
------------------------
The widget layer only knows about Qt events. This controller works on plain
screen coordinates and modifier flags, so every gesture can be exercised
without a window. Only one gesture is active at a time.

Modifiers:
    ctrl: add to / toggle the selection instead of replacing it.
    shift: start a rubber band selection when the press misses every node.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional

from PySide6.QtCore import QTimer

from socialgraph.controller.scheduler import AnimationScheduler
from socialgraph.model.geometry import Rect
from socialgraph.model.node import Node, TextMeasure
from socialgraph.model.popup import Popup
from socialgraph.model.scene import Scene

logger = logging.getLogger(__name__)


class GestureKind(Enum):
    DRAG = auto()
    RUBBER_BAND = auto()
    PAN = auto()


@dataclass
class Gesture:
    kind: GestureKind
    start_x: float
    start_y: float
    start_tx: float
    start_ty: float
    ctrl: bool = False
    node: Optional[Node] = None
    x_fixed: bool = False
    y_fixed: bool = False
    moved: bool = False


class InteractionController:
    def __init__(self, scene: Scene, scheduler: AnimationScheduler, measure: TextMeasure,
                 redraw: Callable[[], None],
                 on_select: Callable[[], None] = lambda: None,
                 on_popup: Callable[[], None] = lambda: None,
                 hover_timer: Optional[Any] = None) -> None:
        self.scene = scene
        self.scheduler = scheduler
        self.measure = measure
        self.redraw = redraw
        self.on_select = on_select
        self.on_popup = on_popup

        self.selectable = True
        self.gesture: Optional[Gesture] = None
        self.selection_rect: Optional[Rect] = None  # screen coordinates

        self.popup = Popup(padding=scene.constants.popup_padding)
        self._hover_point: Optional[tuple[float, float]] = None
        self.hover_timer = hover_timer if hover_timer is not None else QTimer()
        self.hover_timer.setSingleShot(True)
        self.hover_timer.setInterval(scene.constants.popup_delay)
        self.hover_timer.timeout.connect(self._check_show_popup)

    def _canvas_rect(self, x: float, y: float) -> Rect:
        return Rect.at(*self.scene.transform.to_canvas(x, y))

    # --- press / move / release ---

    def press(self, x: float, y: float, ctrl: bool = False, shift: bool = False) -> None:
        if not self.selectable:
            return
        if self.gesture is not None:
            self.release(x, y, ctrl)
        self.hover_timer.stop()

        scene = self.scene
        scene.update_sizes(self.measure)
        transform = scene.transform
        hits = scene.nodes_overlapping(self._canvas_rect(x, y))

        if hits:
            row = hits[0]
            node = scene.nodes[row]
            self.gesture = Gesture(GestureKind.DRAG, x, y, transform.tx, transform.ty, ctrl,
                                   node=node, x_fixed=node.x_fixed, y_fixed=node.y_fixed)
            node.x_fixed = True
            node.y_fixed = True

            if not ctrl or not node.selected:
                changed = scene.select_nodes([row], append=ctrl)
            else:
                changed = scene.unselect_nodes([row])
            if changed:
                self.on_select()
            if not scene.has_moving_nodes:
                self.redraw()
        elif shift:
            self.gesture = Gesture(GestureKind.RUBBER_BAND, x, y, transform.tx, transform.ty, ctrl)
        else:
            self.gesture = Gesture(GestureKind.PAN, x, y, transform.tx, transform.ty, ctrl)

    def move(self, x: float, y: float) -> None:
        gesture = self.gesture
        if not self.selectable or gesture is None:
            return
        gesture.moved = True

        if gesture.kind == GestureKind.DRAG:
            cx, cy = self.scene.transform.to_canvas(x, y)
            if not gesture.x_fixed:
                gesture.node.x = cx
            if not gesture.y_fixed:
                gesture.node.y = cy
            if not self.scene.has_moving_nodes:
                self.scene.has_moving_nodes = True
                self.scheduler.start()
        elif gesture.kind == GestureKind.RUBBER_BAND:
            self.selection_rect = Rect.spanning(gesture.start_x, gesture.start_y, x, y)
            self.redraw()
        else:
            transform = self.scene.transform
            transform.tx = gesture.start_tx + (x - gesture.start_x)
            transform.ty = gesture.start_ty + (y - gesture.start_y)
            self.redraw()

    def release(self, x: float, y: float, ctrl: bool = False) -> None:
        gesture = self.gesture
        if not self.selectable or gesture is None:
            return
        self.gesture = None
        scene = self.scene

        if gesture.kind == GestureKind.DRAG:
            node = gesture.node
            node.x_fixed = gesture.x_fixed
            node.y_fixed = gesture.y_fixed
            if not node.is_fixed() and not scene.has_moving_nodes:
                # Let the released node settle back among its neighbours
                scene.has_moving_nodes = True
                self.scheduler.start()
        elif gesture.kind == GestureKind.RUBBER_BAND:
            transform = scene.transform
            x1, y1 = transform.to_canvas(gesture.start_x, gesture.start_y)
            x2, y2 = transform.to_canvas(x, y)
            scene.update_sizes(self.measure)
            rows = scene.nodes_overlapping(Rect.spanning(x1, y1, x2, y2))
            if scene.select_nodes(rows, append=ctrl):
                self.on_select()
            self.selection_rect = None
            self.redraw()
        elif not gesture.ctrl and not gesture.moved:
            if scene.unselect_nodes():
                self.on_select()
            self.redraw()

    # --- wheel ---

    def wheel(self, x: float, y: float, delta: float) -> None:
        """``delta`` is in wheel notches; positive zooms in."""
        constants = self.scene.constants
        self.scene.transform.zoom_at(x, y, delta, constants.min_scale, constants.max_scale)
        self.redraw()

    # --- hover ---

    def hover(self, x: float, y: float) -> None:
        if self.popup.target is not None:
            self._check_hide_popup(x, y)
        self.hover_timer.stop()
        if self.gesture is None:
            self._hover_point = (x, y)
            self.hover_timer.start()

    def _check_show_popup(self) -> None:
        if self._hover_point is None:
            return
        x, y = self._hover_point
        popup = self.popup
        last = popup.target

        if popup.target is None:
            self.scene.update_sizes(self.measure)
            popup.target = self.scene.title_target_at(self._canvas_rect(x, y))

        if popup.target is not None:
            if popup.target is not last:
                offset = self.scene.constants.popup_offset
                popup.set_position(x - offset, y - offset)
                popup.set_text(str(popup.target.title))
                popup.show()
                self.on_popup()
        elif popup.visible:
            popup.hide()
            self.on_popup()

    def _check_hide_popup(self, x: float, y: float) -> None:
        popup = self.popup
        if popup.target is None or not popup.target.is_overlapping_with(self._canvas_rect(x, y)):
            popup.target = None
            if popup.visible:
                popup.hide()
                self.on_popup()
