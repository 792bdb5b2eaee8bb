from __future__ import annotations

import math
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable, Optional

from socialgraph.errors import NotFoundError
from socialgraph.model.geometry import Rect, point_segment_distance
from socialgraph.model.table import numbers, timestamp_ms

if TYPE_CHECKING:
    from socialgraph.config import NetworkConstants
    from socialgraph.model.node import Node

NodeResolver = Callable[[Any], Optional["Node"]]


class LinkStyle(StrEnum):
    LINE = "line"
    ARROW = "arrow"
    MOVING_ARROWS = "moving-arrows"
    MOVING_DOT = "moving-dot"

    @classmethod
    def parse(cls, value: Optional[str]) -> LinkStyle:
        if value == "moving-arrow":
            return cls.MOVING_ARROWS
        try:
            return cls(value)
        except ValueError:
            return cls.LINE


def resolve_endpoints(properties: dict[str, Any], resolve: NodeResolver,
                      current: tuple[Optional[Node], Optional[Node]] = (None, None)
                      ) -> tuple[Node, Node]:
    """Look up the ``from`` and ``to`` nodes of a link or package row."""
    from_node, to_node = current
    if "from" in properties:
        from_node = resolve(properties["from"])
        if from_node is None:
            raise NotFoundError("node", properties["from"])
    if "to" in properties:
        to_node = resolve(properties["to"])
        if to_node is None:
            raise NotFoundError("node", properties["to"])
    if from_node is None:
        raise NotFoundError("node", properties.get("from"))
    if to_node is None:
        raise NotFoundError("node", properties.get("to"))
    return from_node, to_node


class Link:
    """
    An edge between two live nodes, acting as a spring in the simulation.

    Links only reference their endpoints; the scene owns the nodes.
    """

    def __init__(self, properties: dict[str, Any], resolve: NodeResolver,
                 constants: NetworkConstants) -> None:
        self._resolve = resolve
        self.width_min = constants.links.width_min
        self.width_max = constants.links.width_max
        self.stiffness = constants.links.stiffness
        self.hit_distance = constants.links.hit_distance
        self.arrow_count = constants.links.arrow_count
        self.arrow_speed = constants.links.arrow_speed
        self.dot_speed = constants.links.dot_speed

        self.from_node: Optional[Node] = None
        self.to_node: Optional[Node] = None
        self.id: Any = None
        self.style: Optional[str] = None
        self.title: Optional[str] = None
        self.width = constants.links.width_min
        self.value: Optional[float] = None
        self.length = constants.links.default_length
        self.color = constants.colors.line
        self.timestamp: Any = None
        self.width_fixed = False

        self.kind = LinkStyle.LINE
        self.arrows: list[float] = []
        self.dot = 0.0

        self.set_properties(properties)

    def set_properties(self, properties: dict[str, Any]) -> None:
        from_node, to_node = resolve_endpoints(properties, self._resolve, (self.from_node, self.to_node))
        values = numbers(properties, ("width", "length", "value"))
        if "timestamp" in properties:
            timestamp_ms(properties["timestamp"])

        self.from_node = from_node
        self.to_node = to_node
        for name in ("id", "style", "title", "color", "timestamp"):
            if name in properties:
                setattr(self, name, properties[name])
        for name, number in values.items():
            setattr(self, name, number)

        self.width_fixed = self.width_fixed or "width" in properties

        self.kind = LinkStyle.parse(self.style)
        if self.kind == LinkStyle.ARROW:
            self.arrows = [0.5]
        elif self.kind == LinkStyle.MOVING_ARROWS:
            self.arrows = [a / self.arrow_count for a in range(self.arrow_count)]
        else:
            self.arrows = []
        self.dot = 0.0

    @property
    def timestamp_ms(self) -> Optional[float]:
        return timestamp_ms(self.timestamp)

    def is_moving(self) -> bool:
        """Animated styles need a redraw on every tick."""
        return self.kind in (LinkStyle.MOVING_ARROWS, LinkStyle.MOVING_DOT)

    def advance(self, interval: float) -> None:
        """Move the animated arrows or dot along the link, wrapping at the end."""
        if self.kind == LinkStyle.MOVING_ARROWS:
            self.arrows = [(a + self.arrow_speed * interval) % 1.0 for a in self.arrows]
        elif self.kind == LinkStyle.MOVING_DOT:
            self.dot = (self.dot + self.dot_speed * interval) % 1.0

    def set_value_range(self, minimum: float, maximum: float) -> None:
        if not self.width_fixed and self.value is not None:
            factor = (self.width_max - self.width_min) / (maximum - minimum)
            self.width = (self.value - minimum) * factor + self.width_min

    def angle(self) -> float:
        return math.atan2(self.to_node.y - self.from_node.y, self.to_node.x - self.from_node.x)

    def point_at(self, fraction: float) -> tuple[float, float]:
        return ((1 - fraction) * self.from_node.x + fraction * self.to_node.x,
                (1 - fraction) * self.from_node.y + fraction * self.to_node.y)

    def is_overlapping_with(self, rect: Rect) -> bool:
        x, y = rect.center
        distance = point_segment_distance(self.from_node.x, self.from_node.y,
                                          self.to_node.x, self.to_node.y, x, y)
        return distance < self.hit_distance

    def __repr__(self) -> str:
        return f"Link(id={self.id!r}, from={self.from_node.id!r}, to={self.to_node.id!r})"
