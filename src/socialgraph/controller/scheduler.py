"""
Animation Scheduler
===================
Drives repeated redraws while anything in the scene moves.

Why is this file needed?
------------------------
The scene animates for three independent reasons: free nodes still settling,
links drawn with moving arrows or dots, and packages travelling along their
edge. The scheduler owns the single timer that advances all of them and goes
idle as soon as none of them needs another frame.

The timer is a single-shot ``QTimer`` re-armed after every tick, so at most one
tick is ever pending. ``start`` cancels a pending tick before running one
immediately; ``stop`` cancels unconditionally.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

from PySide6.QtCore import QTimer

from socialgraph.controller.simulation import ForceSimulation
from socialgraph.model.scene import Scene

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class AnimationScheduler:
    def __init__(self, scene: Scene, simulation: ForceSimulation, redraw: Callable[[], None],
                 timer: Optional[Any] = None) -> None:
        self.scene = scene
        self.simulation = simulation
        self.redraw = redraw
        self.ticks = 0

        self.timer = timer if timer is not None else QTimer()
        self.timer.setSingleShot(True)
        self.timer.setInterval(scene.constants.refresh_rate)
        self.timer.timeout.connect(self.tick)

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.RUNNING if self.timer.isActive() else SchedulerState.IDLE

    def is_moving(self) -> bool:
        scene = self.scene
        return scene.has_moving_nodes or scene.has_moving_links or scene.has_moving_packages

    def start(self) -> None:
        """Run a tick now; keeps ticking while anything moves."""
        self.timer.stop()
        self.tick()

    def stop(self) -> None:
        if self.timer.isActive():
            logger.debug("Animation stopped")
        self.timer.stop()

    def tick(self) -> None:
        scene = self.scene
        interval = scene.constants.interval
        self.ticks += 1

        if scene.has_moving_nodes:
            self.simulation.calculate_forces()
            self.simulation.discrete_step_nodes()
            scene.has_moving_nodes = self.simulation.is_moving()

        if scene.has_moving_links:
            scene.step_links(interval)

        if scene.has_moving_packages:
            scene.step_packages(interval)
            scene.delete_finished_packages()

        self.redraw()

        if self.is_moving():
            self.timer.setInterval(scene.constants.refresh_rate)
            self.timer.start()
        else:
            logger.debug(f"Animation idle after {self.ticks} ticks")
