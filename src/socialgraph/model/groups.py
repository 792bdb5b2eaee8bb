from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GroupStyle:
    stroke: str
    fill: str
    highlight: str


PALETTE: tuple[GroupStyle, ...] = (
    GroupStyle("#2B7CE9", "#97C2FC", "#D2E5FF"),  # blue
    GroupStyle("#FFA500", "#FFFF00", "#FFFFA3"),  # yellow
    GroupStyle("#FA0A10", "#FB7E81", "#FFAFB1"),  # red
    GroupStyle("#41A906", "#7BE141", "#A1EC76"),  # green
    GroupStyle("#E129F0", "#EB7DF4", "#F0B3F5"),  # magenta
    GroupStyle("#7C29F0", "#AD85E4", "#D3BDF0"),  # purple
    GroupStyle("#C37F00", "#FFA807", "#FFCA66"),  # orange
    GroupStyle("#4220FB", "#6E6EFD", "#9B9BFD"),  # darkblue
    GroupStyle("#FD5A77", "#FFC0CB", "#FFD1D9"),  # pink
    GroupStyle("#4AD63A", "#C2FABC", "#E6FFE3"),  # mint
)

DEFAULT_GROUP = "default"


class Groups:
    """Lazily assigns palette colors to group names, round-robin."""

    def __init__(self) -> None:
        self._groups: dict[object, GroupStyle] = {}

    def get(self, name: object) -> GroupStyle:
        style = self._groups.get(name)
        if style is None:
            style = PALETTE[len(self._groups) % len(PALETTE)]
            self._groups[name] = style
        return style

    def __len__(self) -> int:
        return len(self._groups)
