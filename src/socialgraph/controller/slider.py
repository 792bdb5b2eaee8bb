"""
Time slider playback model.

Holds a value within [start, end] and steps through the range in
``duration * framerate`` frames. Datetime ranges are handled in milliseconds
internally and handed back as datetimes.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, tzinfo
from typing import Any, Callable, Optional

from PySide6.QtCore import QTimer

from socialgraph.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Slider:
    def __init__(self, timer: Optional[Any] = None, on_change: Optional[Callable[[], None]] = None) -> None:
        self.on_change = on_change
        self.framerate = 20.0  # frames per second
        self.duration = 10.0  # seconds for the full range
        self.loop = True
        self.start = 0.0
        self.end = 0.0
        self.value = 0.0
        self.step = 0.0
        self.range_is_date = False
        self._zone: Optional[tzinfo] = None
        self.dragging = False
        self._playing = False

        self.timer = timer if timer is not None else QTimer()
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self.play_next)

    # --- range & value ---

    def set_range(self, start: Any, end: Any) -> None:
        self.range_is_date = isinstance(start, datetime)
        self._zone = start.tzinfo if self.range_is_date else None
        self.start = self._to_number(start) if start is not None else 0.0
        self.end = self._to_number(end) if end is not None else self.start
        self.value = self.start
        self._update_step()

    @staticmethod
    def _to_number(value: Any) -> float:
        if isinstance(value, datetime):
            return value.timestamp() * 1000.0
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise InvalidArgumentError(f"Invalid slider value {value!r}")

    def get_value(self) -> Any:
        if self.range_is_date:
            return datetime.fromtimestamp(self.value / 1000.0, tz=self._zone)
        return self.value

    def set_value(self, value: Any) -> None:
        self.value = self._limit(self._to_number(value))
        if self.on_change is not None:
            self.on_change()

    def _limit(self, value: float) -> float:
        return min(max(value, self.start), self.end)

    @property
    def fraction(self) -> float:
        """Position of the value within the range, 0 to 1."""
        if self.end > self.start:
            return (self.value - self.start) / (self.end - self.start)
        return 0.0

    def set_fraction(self, fraction: float) -> None:
        self.set_value(self.start + fraction * (self.end - self.start))

    # --- stepping ---

    def _update_step(self) -> None:
        frames = self.duration * self.framerate
        self.step = (self.end - self.start) / frames if frames > 0 else 0.0

    def prev(self) -> None:
        self.set_value(self.value - self.step)

    def next(self) -> None:
        self.set_value(self.value + self.step)

    # --- playback ---

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        self._playing = True
        self.play_next()

    def stop(self) -> None:
        self._playing = False
        self.timer.stop()

    def toggle_play(self) -> None:
        if self._playing:
            self.stop()
        else:
            self.play()

    def play_next(self) -> None:
        """Advance one frame and schedule the next, or stop at the end."""
        if not self._playing:
            return
        began = time.perf_counter()
        if not self.dragging:
            if self.value + self.step < self.end:
                self.set_value(self.value + self.step)
            elif self.loop:
                self.set_value(self.start)
            else:
                self.stop()
                self.set_value(self.end)
                return

        # Keep the frame rate steady regardless of how long the frame took
        spent = (time.perf_counter() - began) * 1000.0
        interval = max(1000.0 / self.framerate - spent, 0.0)
        self.timer.setInterval(int(interval))
        self.timer.start()

    # --- settings ---

    def set_framerate(self, framerate: float) -> None:
        if framerate <= 0:
            raise InvalidArgumentError("Framerate must be positive")
        self.framerate = float(framerate)
        self._update_step()

    def set_duration(self, duration: float) -> None:
        if duration <= 0:
            raise InvalidArgumentError("Duration must be positive")
        self.duration = float(duration)
        self._update_step()

    def set_acceleration(self, acceleration: float) -> None:
        """Play the range at ``acceleration`` times real time."""
        if acceleration <= 0:
            raise InvalidArgumentError("Acceleration must be positive")
        realtime = (self.end - self.start) / 1000.0
        self.duration = realtime / acceleration
        self._update_step()

    def set_loop(self, loop: bool) -> None:
        self.loop = bool(loop)
