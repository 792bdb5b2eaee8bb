"""
Qt image loader for image-styled nodes and packages.

Local paths are read with ``QImage``; http(s) URLs are fetched with a
``QNetworkAccessManager``. Completion is always delivered from the event loop,
never synchronously from ``load``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QTimer, QUrl
from PySide6.QtGui import QImage
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

logger = logging.getLogger(__name__)

Done = Callable[[Any, float, float], None]


class QtImageLoader(QObject):
    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._manager: Optional[QNetworkAccessManager] = None
        self._pending: set[QNetworkReply] = set()

    def __call__(self, url: str, done: Done) -> None:
        qurl = QUrl(url)
        if qurl.scheme() in ("http", "https"):
            self._fetch(qurl, done)
        else:
            path = qurl.toLocalFile() if qurl.isLocalFile() else url
            QTimer.singleShot(0, lambda: self._read_file(path, done))

    def _read_file(self, path: str, done: Done) -> None:
        image = QImage(path)
        if image.isNull():
            logger.warning(f"Could not load image {path}")
            done(None, 0.0, 0.0)
            return
        done(image, image.width(), image.height())

    def _fetch(self, url: QUrl, done: Done) -> None:
        if self._manager is None:
            self._manager = QNetworkAccessManager(self)
        reply = self._manager.get(QNetworkRequest(url))
        self._pending.add(reply)
        reply.finished.connect(lambda: self._on_reply(reply, done))

    def _on_reply(self, reply: QNetworkReply, done: Done) -> None:
        self._pending.discard(reply)
        url = reply.url().toString()
        if reply.error() != QNetworkReply.NetworkError.NoError:
            logger.warning(f"Could not download image {url}: {reply.errorString()}")
            done(None, 0.0, 0.0)
        else:
            image = QImage.fromData(reply.readAll())
            if image.isNull():
                logger.warning(f"Downloaded data of {url} is not an image")
                done(None, 0.0, 0.0)
            else:
                done(image, image.width(), image.height())
        reply.deleteLater()
