from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable, Optional

from socialgraph.errors import InvalidArgumentError
from socialgraph.model.geometry import Rect, boxes_overlap
from socialgraph.model.groups import DEFAULT_GROUP
from socialgraph.model.table import numbers, timestamp_ms

if TYPE_CHECKING:
    from socialgraph.config import NetworkConstants
    from socialgraph.model.groups import GroupStyle, Groups
    from socialgraph.model.images import ImageEntry, Images

# measure(text, font_size, bold) -> (width, height)
TextMeasure = Callable[[str, float, bool], tuple[float, float]]


class NodeStyle(StrEnum):
    RECT = "rect"
    CIRCLE = "circle"
    DOT = "dot"
    IMAGE = "image"
    TEXT = "text"
    DATABASE = "database"

    @classmethod
    def parse(cls, value: str) -> NodeStyle:
        """Unknown styles draw as plain text."""
        try:
            return cls(value)
        except ValueError:
            return cls.TEXT


class Node:
    """
    A vertex of the network.

    Position, velocity and force are the simulation state. Supplying ``x`` or
    ``y`` pins the node on that axis, and supplying ``radius`` exempts it from
    value scaling; these flags are sticky across later partial updates.
    """

    def __init__(self, properties: dict[str, Any], images: Images, groups: Groups,
                 constants: NetworkConstants) -> None:
        self._images = images
        self._groups = groups

        self.font_size = constants.nodes.font_size
        self.font_face = constants.nodes.font_face
        self.font_color = constants.colors.font
        self.margin = constants.nodes.margin
        self.radius_min = constants.nodes.radius_min
        self.radius_max = constants.nodes.radius_max

        self.id: Any = None
        self.style: str = constants.nodes.default_style
        self.text: Optional[str] = None
        self.title: Optional[str] = None
        self.image: Optional[str] = None
        self.group: Any = None
        self.x = 0.0
        self.y = 0.0
        self.radius = constants.nodes.default_radius
        self.value: Optional[float] = None
        self.timestamp: Any = None
        self.x_fixed = False
        self.y_fixed = False
        self.radius_fixed = False

        self.kind = NodeStyle.parse(self.style)
        self.group_style: GroupStyle = groups.get(DEFAULT_GROUP)
        self.image_entry: Optional[ImageEntry] = None
        self.selected = False

        self.width: Optional[float] = None
        self.height: Optional[float] = None

        self.set_properties(properties)

        self.mass = constants.nodes.mass
        self.damping = constants.nodes.damping
        self.vx = 0.0
        self.vy = 0.0
        self.fx = 0.0
        self.fy = 0.0

    def set_properties(self, properties: dict[str, Any]) -> None:
        """Merge the supplied properties. Validates before changing anything."""
        if properties.get("id", self.id) is None:
            raise InvalidArgumentError("Node must have an id")
        if "timestamp" in properties:
            timestamp_ms(properties["timestamp"])
        values = numbers(properties, ("x", "y", "radius", "value"))
        image = properties.get("image", self.image)
        image_entry = self._images.load(image) if image is not None else None

        for name in ("id", "style", "text", "title", "image", "group", "timestamp"):
            if name in properties:
                setattr(self, name, properties[name])
        for name, number in values.items():
            setattr(self, name, number)

        self.x_fixed = self.x_fixed or "x" in properties
        self.y_fixed = self.y_fixed or "y" in properties
        self.radius_fixed = self.radius_fixed or "radius" in properties

        self.image_entry = image_entry
        self.group_style = self._groups.get(self.group if self.group is not None else DEFAULT_GROUP)
        self.kind = NodeStyle.parse(self.style)
        self.invalidate_size()

    @property
    def timestamp_ms(self) -> Optional[float]:
        return timestamp_ms(self.timestamp)

    def select(self) -> None:
        self.selected = True

    def unselect(self) -> None:
        self.selected = False

    def is_fixed(self) -> bool:
        return self.x_fixed and self.y_fixed

    def set_value_range(self, minimum: float, maximum: float) -> None:
        if not self.radius_fixed and self.value is not None:
            factor = (self.radius_max - self.radius_min) / (maximum - minimum)
            self.radius = (self.value - minimum) * factor + self.radius_min
            self.invalidate_size()

    # --- geometry ---

    def invalidate_size(self) -> None:
        self.width = None
        self.height = None

    def resize(self, measure: TextMeasure) -> None:
        """Compute the node's box once; it stays cached until a property changes."""
        if self.kind == NodeStyle.IMAGE:
            # Recomputed every time since the image may still be loading
            entry = self.image_entry
            image_width = entry.width if entry is not None else 0.0
            image_height = entry.height if entry is not None else 0.0
            self.width = image_width
            self.height = image_height + self.font_size
            return
        if self.width is not None:
            return

        if self.kind == NodeStyle.DOT:
            self.width = 2 * self.radius
            self.height = self.width
            return

        text_width, text_height = self.text_size(measure)
        self.width = text_width + 2 * self.margin
        if self.kind in (NodeStyle.CIRCLE, NodeStyle.DATABASE):
            self.height = self.width
            if self.kind == NodeStyle.CIRCLE:
                self.radius = self.width / 2
        else:
            self.height = text_height + 2 * self.margin

    def text_size(self, measure: TextMeasure) -> tuple[float, float]:
        if not self.text:
            return 0.0, 0.0
        width, _ = measure(str(self.text), self.font_size, False)
        return width, float(self.font_size)

    @property
    def left(self) -> float:
        if self.kind == NodeStyle.IMAGE and self.image_entry is not None:
            return self.x - self.image_entry.width / 2
        return self.x - (self.width or 0.0) / 2

    @property
    def top(self) -> float:
        if self.kind == NodeStyle.IMAGE and self.image_entry is not None:
            return self.y - self.image_entry.height / 2
        return self.y - (self.height or 0.0) / 2

    def is_overlapping_with(self, rect: Rect) -> bool:
        if self.width is None or self.height is None:
            return False
        return boxes_overlap(self.left, self.top, self.width, self.height, rect)

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, x={self.x:.1f}, y={self.y:.1f})"
