from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Rect:
    """Axis-aligned rectangle in canvas coordinates."""
    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def at(cls, x: float, y: float) -> Rect:
        """Zero-size rectangle for point hit tests."""
        return cls(x, y, x, y)

    @classmethod
    def spanning(cls, x1: float, y1: float, x2: float, y2: float) -> Rect:
        return cls(min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.right) / 2, (self.top + self.bottom) / 2


def boxes_overlap(left: float, top: float, width: float, height: float, rect: Rect) -> bool:
    return (left < rect.right and
            left + width > rect.left and
            top < rect.bottom and
            top + height > rect.top)


def point_segment_distance(x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> float:
    """Distance from point (x3, y3) to the segment (x1, y1)-(x2, y2)."""
    px = x2 - x1
    py = y2 - y1
    norm = px * px + py * py
    if norm == 0:
        return math.hypot(x3 - x1, y3 - y1)

    u = ((x3 - x1) * px + (y3 - y1) * py) / norm
    u = min(max(u, 0.0), 1.0)

    dx = x1 + u * px - x3
    dy = y1 + u * py - y3
    return math.hypot(dx, dy)


@dataclass
class Transform:
    """
    Pan/zoom state shared by rendering and hit testing.

    Screen coordinates are widget pixels; canvas coordinates are the space
    node positions live in. ``screen = canvas * scale + translation``.
    """
    tx: float = 0.0
    ty: float = 0.0
    scale: float = 1.0

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        return (x - self.tx) / self.scale, (y - self.ty) / self.scale

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        return x * self.scale + self.tx, y * self.scale + self.ty

    def reset(self) -> None:
        self.tx = 0.0
        self.ty = 0.0
        self.scale = 1.0

    def zoom_at(self, x: float, y: float, delta: float,
                min_scale: float = 0.01, max_scale: float = 10.0) -> float:
        """
        Zoom by a wheel delta (in notches) keeping screen point (x, y) fixed.

        Positive deltas zoom in. A negative delta of the same size undoes the
        zoom exactly, up to the scale bounds.

        Returns:
            The new scale.
        """
        if not delta:
            return self.scale
        zoom = delta / 10
        if delta < 0:
            zoom = zoom / (1 - zoom)

        old = self.scale
        new = min(max(old * (1 + zoom), min_scale), max_scale)

        frac = new / old
        self.tx = (1 - frac) * x + self.tx * frac
        self.ty = (1 - frac) * y + self.ty * frac
        self.scale = new
        return new
