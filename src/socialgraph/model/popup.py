from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Popup:
    """
    Tooltip state. The widget layer renders it and asks ``place`` for the
    top-left corner once it knows the rendered size.
    """
    padding: float = 5.0
    x: int = 0
    y: int = 0
    text: str = ""
    visible: bool = False
    target: Optional[Any] = None

    def set_position(self, x: float, y: float) -> None:
        self.x = int(x)
        self.y = int(y)

    def set_text(self, text: str) -> None:
        self.text = text

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def place(self, width: float, height: float, max_width: float, max_height: float) -> tuple[float, float]:
        """Bottom-left corner at (x, y), kept inside the frame with padding."""
        top = self.y - height
        if top + height + self.padding > max_height:
            top = max_height - height - self.padding
        if top < self.padding:
            top = self.padding

        left = float(self.x)
        if left + width + self.padding > max_width:
            left = max_width - width - self.padding
        if left < self.padding:
            left = self.padding
        return left, top
