"""
Network
=======
The public entry point of the engine.

Why is this file needed?
------------------------
It is the composition root for one network view: it builds the scene, the
force simulation, the animation scheduler, the interaction controller and the
time slider, and exposes the calls an embedding application needs (draw,
ingestion, selection, timestamps, playback).

Signals:
    ready: Initial draw and stabilization finished.
    select: The set of selected nodes changed; read it with ``get_selection``.
    repaint_requested: The scene changed and the widget should repaint.
    popup_changed: The tooltip was shown, moved or hidden.
    slider_changed: A slider was created or removed by ``draw``.
    timestamp_changed: The slider moved to a new timestamp.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from socialgraph.config import Background, NetworkConstants, NetworkOptions
from socialgraph.controller.interaction import InteractionController
from socialgraph.controller.scheduler import AnimationScheduler
from socialgraph.controller.simulation import ForceSimulation
from socialgraph.controller.slider import Slider
from socialgraph.model.images import ImageEntry, ImageLoader, Images
from socialgraph.model.node import TextMeasure
from socialgraph.model.scene import Scene, TableLike

logger = logging.getLogger(__name__)


def approximate_text_size(text: str, font_size: float, bold: bool = False) -> tuple[float, float]:
    """Rough text metrics for use without a font engine."""
    factor = 0.65 if bold else 0.6
    return len(text) * font_size * factor, float(font_size)


class Network(QObject):
    ready = Signal()
    select = Signal()
    repaint_requested = Signal()
    popup_changed = Signal()
    slider_changed = Signal()
    timestamp_changed = Signal()

    def __init__(self, constants: Optional[NetworkConstants] = None,
                 image_loader: Optional[ImageLoader] = None,
                 measure_text: TextMeasure = approximate_text_size,
                 timer_factory: Callable[[], Any] = QTimer,
                 parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.base_constants = constants or NetworkConstants()
        self.measure_text = measure_text
        self.timer_factory = timer_factory

        self.options = NetworkOptions()
        self.background = Background()
        self.images = Images(image_loader)
        self.images.set_onload_callback(self._on_image_loaded)

        self.scene = Scene(self.base_constants, self.images)
        self.simulation = ForceSimulation(self.scene)
        self.scheduler = AnimationScheduler(self.scene, self.simulation, self._redraw, timer_factory())
        self.interaction = InteractionController(
            self.scene, self.scheduler, self._measure, self._redraw,
            on_select=self.select.emit,
            on_popup=self.popup_changed.emit,
            hover_timer=timer_factory(),
        )
        self.slider: Optional[Slider] = None

    @property
    def constants(self) -> NetworkConstants:
        return self.scene.constants

    def _measure(self, text: str, font_size: float, bold: bool) -> tuple[float, float]:
        return self.measure_text(text, font_size, bold)

    def set_image_loader(self, loader: ImageLoader) -> None:
        self.images.set_loader(loader)

    def set_measure_text(self, measure_text: TextMeasure) -> None:
        self.measure_text = measure_text
        for node in self.scene.nodes:
            node.invalidate_size()

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def draw(self, nodes: TableLike = None, links: TableLike = None, packages: TableLike = None,
             options: Optional[dict[str, Any]] = None) -> None:
        """
        Load all data and show it.

        Replaces any previous content. Free nodes are spread on a circle and,
        unless ``stabilize`` is off, simulated until they settle before the
        first frame. Emits ``ready`` when done.
        """
        self.stop()
        self.options = NetworkOptions.from_dict(options)
        self.background = self.options.background
        self.scene.constants = self.options.apply(self.base_constants)
        self.scheduler.timer.setInterval(self.scene.constants.refresh_rate)
        self.interaction.selectable = self.options.selectable
        if self.options.width is not None and self.options.height is not None:
            self.scene.set_canvas_size(self.options.width, self.options.height)
        self.scene.transform.reset()

        self.scene.set_nodes(nodes)
        self.scene.set_links(links)
        self.scene.set_packages(packages)
        logger.info(f"Drawing {len(self.scene.nodes)} nodes, {len(self.scene.links)} links, "
                    f"{len(self.scene.packages)} packages")

        self.simulation.reposition()
        if self.options.stabilize:
            self.simulation.stabilize()
        self._create_slider()
        self.start()
        self.ready.emit()

    def _create_slider(self) -> None:
        if self.slider is not None:
            self.slider.stop()
            self.slider = None
        if self.scene.has_timestamps:
            self.slider = Slider(self.timer_factory(), on_change=self._on_slider_change)
            self.slider.set_loop(False)
            start, end = self.scene.get_range()
            self.slider.set_range(start, end)
            self._on_slider_change()
        self.slider_changed.emit()

    def _on_slider_change(self) -> None:
        self.set_timestamp(self.slider.get_value())
        self.timestamp_changed.emit()

    def set_size(self, width: float, height: float) -> None:
        self.scene.set_canvas_size(width, height)
        self.redraw()

    def redraw(self) -> None:
        self._redraw()

    def _redraw(self) -> None:
        self.scene.update_sizes(self._measure)
        self.repaint_requested.emit()

    def _on_image_loaded(self, entry: ImageEntry) -> None:
        logger.debug(f"Image loaded: {entry.url}")
        self._redraw()

    # -------------------------------------------------------------------------
    # Animation
    # -------------------------------------------------------------------------

    def start(self) -> None:
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def is_moving(self) -> bool:
        return self.scheduler.is_moving()

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def set_nodes(self, table: TableLike) -> None:
        self.scene.set_nodes(table)
        self.start()

    def add_nodes(self, table: TableLike) -> None:
        self.scene.add_nodes(table)
        self.start()

    def set_links(self, table: TableLike) -> None:
        self.scene.set_links(table)
        self.start()

    def add_links(self, table: TableLike) -> None:
        self.scene.add_links(table)
        self.start()

    def set_packages(self, table: TableLike) -> None:
        self.scene.set_packages(table)
        self.start()

    def add_packages(self, table: TableLike) -> None:
        self.scene.add_packages(table)
        self.start()

    def set_timestamp(self, timestamp: Any) -> None:
        self.scene.set_timestamp(timestamp)
        self.start()

    def get_range(self) -> tuple[Any, Any]:
        return self.scene.get_range()

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def get_selection(self) -> list[int]:
        return self.scene.selection()

    def set_selection(self, selection: Any) -> None:
        if self.scene.set_selection(selection):
            self.select.emit()
        self.redraw()

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    def animation_start(self) -> None:
        if self.slider is not None:
            self.slider.play()

    def animation_stop(self) -> None:
        if self.slider is not None:
            self.slider.stop()

    def set_animation_framerate(self, framerate: float) -> None:
        if self.slider is not None:
            self.slider.set_framerate(framerate)

    def set_animation_duration(self, duration: float) -> None:
        if self.slider is not None:
            self.slider.set_duration(duration)

    def set_animation_acceleration(self, acceleration: float) -> None:
        if self.slider is not None:
            self.slider.set_acceleration(acceleration)
