"""
Configuration & Constants
=========================
This module is the central registry for the engine's constants and for the
options an embedding application passes to ``Network.draw``.

Why is this file needed?
------------------------
1. Explicitness: every component receives its constants through a
   ``NetworkConstants`` instance instead of reading module globals, so two
   networks on screen never share mutable settings.
2. Option parsing: the options map uses the camelCase keys of the data tables
   (``backgroundColor``, ``links.defaultLength``). ``NetworkOptions.from_dict``
   validates them once and turns them into typed values.

Exports:
    NetworkConstants: Physics, sizing and color constants.
    NetworkOptions: Parsed draw options.
    Background: Frame fill and border.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from socialgraph.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass
class NodeConstants:
    radius_min: float = 5.0
    radius_max: float = 20.0
    default_radius: float = 5.0
    minimum_distance: float = 100.0  # px, range of the repulsion force
    default_style: str = "rect"
    font_size: int = 12
    font_face: str = "Verdana"
    margin: float = 5.0  # px between text and border
    mass: float = 50.0
    damping: float = 0.5


@dataclass
class LinkConstants:
    width_min: float = 1.0
    width_max: float = 15.0
    default_length: float = 50.0  # px
    stiffness: float = 0.01
    hit_distance: float = 10.0  # px
    arrow_count: int = 3
    arrow_speed: float = 0.4  # fraction of the link per second
    dot_speed: float = 1.0


@dataclass
class PackageConstants:
    radius_min: float = 5.0
    radius_max: float = 15.0
    default_radius: float = 5.0
    default_duration: float = 1.0  # seconds
    hit_radius: float = 10.0  # px


@dataclass
class ColorConstants:
    font: str = "#1A1A1A"
    border: str = "#2B7CE9"
    fill: str = "#97C2FC"
    line: str = "#2B7CE9"


@dataclass
class NetworkConstants:
    """All tunables of one network instance."""
    nodes: NodeConstants = field(default_factory=NodeConstants)
    links: LinkConstants = field(default_factory=LinkConstants)
    packages: PackageConstants = field(default_factory=PackageConstants)
    colors: ColorConstants = field(default_factory=ColorConstants)

    gravity: float = 0.01
    min_velocity: float = 0.01  # px/s
    min_force: float = 0.001
    max_iterations: int = 1000
    refresh_rate: int = 50  # ms between animation ticks

    min_scale: float = 0.01
    max_scale: float = 10.0
    popup_delay: int = 300  # ms
    popup_offset: float = 3.0  # px
    popup_padding: float = 5.0  # px

    @property
    def interval(self) -> float:
        """Tick length in seconds."""
        return self.refresh_rate / 1000.0


@dataclass
class Background:
    fill: str = "white"
    stroke: str = "#666"
    stroke_width: float = 1.0

    @classmethod
    def from_option(cls, value: Any) -> "Background":
        """
        Parse the ``backgroundColor`` option.

        A string sets only the fill and removes the border. A dict may set any
        of ``fill``, ``stroke`` and ``strokeWidth``. ``None`` keeps the defaults.

        Raises:
            InvalidArgumentError: For any other type.
        """
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(fill=value, stroke="none", stroke_width=0.0)
        if isinstance(value, dict):
            background = cls()
            if value.get("fill") is not None:
                background.fill = value["fill"]
            if value.get("stroke") is not None:
                background.stroke = value["stroke"]
            if value.get("strokeWidth") is not None:
                background.stroke_width = float(value["strokeWidth"])
            return background
        raise InvalidArgumentError(f"Unsupported type of backgroundColor: {type(value).__name__}")


_PIXELS = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$")


def parse_size(value: Any) -> Optional[int]:
    """
    Convert a width/height option to pixels.

    Returns None for a percentage, meaning the widget follows its parent.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        if value.strip().endswith("%"):
            return None
        match = _PIXELS.match(value)
        if match:
            return int(float(match.group(1)))
    raise InvalidArgumentError(f"Invalid size {value!r}, expected pixels like 600 or '600px'")


@dataclass
class NetworkOptions:
    width: Optional[int] = None
    height: Optional[int] = None
    stabilize: bool = True
    selectable: bool = True
    background: Background = field(default_factory=Background)
    default_length: Optional[float] = None

    @classmethod
    def from_dict(cls, options: Optional[dict[str, Any]]) -> "NetworkOptions":
        if options is None:
            return cls()
        if not isinstance(options, dict):
            raise InvalidArgumentError("Options must be a dict")

        parsed = cls(
            width=parse_size(options.get("width")),
            height=parse_size(options.get("height")),
            background=Background.from_option(options.get("backgroundColor")),
        )
        if options.get("stabilize") is not None:
            parsed.stabilize = bool(options["stabilize"])
        if options.get("selectable") is not None:
            parsed.selectable = bool(options["selectable"])

        link_options = options.get("links")
        if link_options is not None:
            if not isinstance(link_options, dict):
                raise InvalidArgumentError("Option 'links' must be a dict")
            if link_options.get("defaultLength") is not None:
                parsed.default_length = float(link_options["defaultLength"])
        return parsed

    def apply(self, constants: NetworkConstants) -> NetworkConstants:
        """Return a copy of ``constants`` adjusted by these options."""
        if self.default_length is None:
            return constants
        # The rest length is shorter than requested; repulsion compensates.
        nodes = replace(constants.nodes, minimum_distance=self.default_length * 1.75)
        links = replace(constants.links, default_length=self.default_length * 0.75)
        logger.debug(f"Default link length {links.default_length}, minimum distance {nodes.minimum_distance}")
        return replace(constants, nodes=nodes, links=links)
