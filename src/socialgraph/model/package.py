from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Optional

from socialgraph.model.geometry import Rect, boxes_overlap
from socialgraph.model.link import NodeResolver, resolve_endpoints
from socialgraph.model.table import numbers, timestamp_ms

if TYPE_CHECKING:
    from socialgraph.config import NetworkConstants
    from socialgraph.model.images import ImageEntry, Images
    from socialgraph.model.node import Node


class PackageStyle(StrEnum):
    DOT = "dot"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: Optional[str]) -> PackageStyle:
        try:
            return cls(value)
        except ValueError:
            return cls.DOT


class Package:
    """
    A marker travelling from one node to another.

    Without an explicit ``progress`` the package advances on its own and is
    removed when it arrives. Once a row supplies ``progress``, the position is
    controlled externally for the rest of the package's life.
    """

    def __init__(self, properties: dict[str, Any], resolve: NodeResolver, images: Images,
                 constants: NetworkConstants) -> None:
        self._resolve = resolve
        self._images = images
        self.radius_min = constants.packages.radius_min
        self.radius_max = constants.packages.radius_max
        self.hit_radius = constants.packages.hit_radius

        self.from_node: Optional[Node] = None
        self.to_node: Optional[Node] = None
        self.id: Any = None
        self.title: Optional[str] = None
        self.style = PackageStyle.DOT.value
        self.radius = constants.packages.default_radius
        self.value: Optional[float] = None
        self.image: Optional[str] = None
        self.color = constants.colors.line
        self.progress = 0.0
        self.timestamp: Any = None
        self.duration = constants.packages.default_duration
        self.auto_progress = True
        self.radius_fixed = False

        self.kind = PackageStyle.DOT
        self.image_entry: Optional[ImageEntry] = None

        self.set_properties(properties)

    def set_properties(self, properties: dict[str, Any]) -> None:
        from_node, to_node = resolve_endpoints(properties, self._resolve, (self.from_node, self.to_node))
        values = numbers(properties, ("radius", "progress", "duration", "value"))
        if "timestamp" in properties:
            timestamp_ms(properties["timestamp"])
        image = properties.get("image", self.image)
        image_entry = self._images.load(image) if image is not None else None

        self.from_node = from_node
        self.to_node = to_node
        for name in ("id", "title", "style", "image", "color", "timestamp"):
            if name in properties:
                setattr(self, name, properties[name])
        for name, number in values.items():
            setattr(self, name, number)

        self.radius_fixed = self.radius_fixed or "radius" in properties
        self.auto_progress = self.auto_progress and "progress" not in properties
        self.progress = min(max(self.progress, 0.0), 1.0)

        self.image_entry = image_entry
        self.kind = PackageStyle.parse(self.style)

    @property
    def timestamp_ms(self) -> Optional[float]:
        return timestamp_ms(self.timestamp)

    def is_finished(self) -> bool:
        return self.auto_progress and self.progress >= 1.0

    def is_moving(self) -> bool:
        return self.auto_progress and not self.is_finished()

    def discrete_step(self, interval: float) -> None:
        if not self.auto_progress:
            return
        if self.duration <= 0:
            self.progress = 1.0
        else:
            self.progress = min(self.progress + interval / self.duration, 1.0)

    def set_value_range(self, minimum: float, maximum: float) -> None:
        if not self.radius_fixed and self.value is not None:
            factor = (self.radius_max - self.radius_min) / (maximum - minimum)
            self.radius = (self.value - minimum) * factor + self.radius_min

    def position(self) -> tuple[float, float]:
        return ((1 - self.progress) * self.from_node.x + self.progress * self.to_node.x,
                (1 - self.progress) * self.from_node.y + self.progress * self.to_node.y)

    def is_overlapping_with(self, rect: Rect) -> bool:
        # Small packages are hard to hover, so hit test at least hit_radius around
        radius = max(self.radius, self.hit_radius)
        x, y = self.position()
        return boxes_overlap(x - radius, y - radius, 2 * radius, 2 * radius, rect)

    def __repr__(self) -> str:
        return f"Package(id={self.id!r}, progress={self.progress:.2f})"
