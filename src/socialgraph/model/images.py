"""
Image cache for image-styled nodes and packages.

Loading is fire-and-forget: ``Images.load`` returns a cache entry right away
and the pixels arrive later through the loader's completion callback. Each
completion triggers the on-load callback, which the network uses to redraw.
Loads are never cancelled and may complete in any order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# loader(url, done) must eventually call done(image, width, height)
ImageLoader = Callable[[str, Callable[[Any, float, float], None]], None]


@dataclass
class ImageEntry:
    url: str
    image: Any = None
    width: float = 0.0
    height: float = 0.0

    @property
    def loaded(self) -> bool:
        return self.image is not None


class Images:
    def __init__(self, loader: Optional[ImageLoader] = None) -> None:
        self._images: dict[str, ImageEntry] = {}
        self._loader = loader
        self._callback: Optional[Callable[[ImageEntry], None]] = None
        # requested while no loader was set
        self._waiting: list[ImageEntry] = []

    def set_loader(self, loader: ImageLoader) -> None:
        self._loader = loader
        waiting, self._waiting = self._waiting, []
        for entry in waiting:
            self._request(entry)

    def set_onload_callback(self, callback: Optional[Callable[[ImageEntry], None]]) -> None:
        self._callback = callback

    def load(self, url: str) -> ImageEntry:
        entry = self._images.get(url)
        if entry is not None:
            return entry
        entry = ImageEntry(url)
        self._images[url] = entry
        if self._loader is None:
            logger.warning(f"No image loader set, {url} stays unloaded for now")
            self._waiting.append(entry)
        else:
            self._request(entry)
        return entry

    def _request(self, entry: ImageEntry) -> None:
        logger.debug(f"Loading image {entry.url}")
        self._loader(entry.url, lambda image, width, height: self._on_loaded(entry, image, width, height))

    def _on_loaded(self, entry: ImageEntry, image: Any, width: float, height: float) -> None:
        entry.image = image
        entry.width = float(width)
        entry.height = float(height)
        if self._callback is not None:
            self._callback(entry)

    def __contains__(self, url: str) -> bool:
        return url in self._images

    def __len__(self) -> int:
        return len(self._images)
