"""
Network Widget
==============
The Qt surface of a ``Network``.

Why is this file needed?
------------------------
1. Painting: it fills the frame, hands the painter to the scene renderer and
   draws the rubber band while a box selection is in progress.
2. Input: Qt mouse and wheel events are translated into the interaction
   controller's press/move/release/wheel/hover calls.
3. Metrics: text is measured with the widget's real fonts, so node boxes
   match what is painted.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import (
    QColor, QFont, QFontMetricsF, QMouseEvent, QPainter, QPaintEvent, QPen, QResizeEvent, QWheelEvent
)
from PySide6.QtWidgets import QFrame, QLabel, QSizePolicy, QWidget

from socialgraph.controller.network import Network
from socialgraph.errors import InvalidArgumentError
from socialgraph.view.renderer import paint_scene

logger = logging.getLogger(__name__)


def qt_text_size(text: str, font_size: float, bold: bool = False, face: str = "Verdana") -> tuple[float, float]:
    font = QFont(face)
    font.setPixelSize(max(int(font_size), 1))
    font.setBold(bold)
    return QFontMetricsF(font).horizontalAdvance(text), float(font_size)


class NetworkWidget(QWidget):
    def __init__(self, network: Network, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        if network is None:
            raise InvalidArgumentError("NetworkWidget needs a network")
        self.network = network
        network.set_measure_text(qt_text_size)

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        self.popup_label = QLabel(self)
        self.popup_label.setTextFormat(Qt.RichText)
        self.popup_label.setFrameShape(QFrame.Box)
        self.popup_label.setStyleSheet(
            "QLabel { background-color: #FFFFC6; border: 1px solid #666; padding: 5px;"
            " font-family: verdana; font-size: 10pt; }"
        )
        self.popup_label.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.popup_label.hide()

        network.repaint_requested.connect(self.update)
        network.popup_changed.connect(self.on_popup_changed)
        network.ready.connect(self.on_ready)

    # --- sizing ---

    def on_ready(self) -> None:
        options = self.network.options
        if options.width is not None and options.height is not None:
            self.setMinimumSize(options.width, options.height)
        self.update()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.network.set_size(self.width(), self.height())

    # --- painting ---

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            background = self.network.background
            frame = QRectF(0, 0, self.width(), self.height())
            painter.fillRect(frame, QColor(background.fill))
            if background.stroke != "none" and background.stroke_width > 0:
                half = background.stroke_width / 2
                painter.setPen(QPen(QColor(background.stroke), background.stroke_width))
                painter.setBrush(Qt.NoBrush)
                painter.drawRect(frame.adjusted(half, half, -half, -half))

            painter.setClipRect(frame)
            paint_scene(painter, self.network.scene)

            band = self.network.interaction.selection_rect
            if band is not None:
                pen = QPen(QColor("red"), 1.0, Qt.DashLine)
                painter.setPen(pen)
                painter.setBrush(Qt.NoBrush)
                painter.drawRect(QRectF(QPointF(band.left, band.top), QPointF(band.right, band.bottom)))
        finally:
            painter.end()

    # --- mouse ---

    @staticmethod
    def _modifiers(event: QMouseEvent | QWheelEvent) -> tuple[bool, bool]:
        modifiers = event.modifiers()
        return bool(modifiers & Qt.ControlModifier), bool(modifiers & Qt.ShiftModifier)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        ctrl, shift = self._modifiers(event)
        pos = event.position()
        self.network.interaction.press(pos.x(), pos.y(), ctrl=ctrl, shift=shift)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        if event.buttons() & Qt.LeftButton:
            self.network.interaction.move(pos.x(), pos.y())
        else:
            self.network.interaction.hover(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        ctrl, _ = self._modifiers(event)
        pos = event.position()
        self.network.interaction.release(pos.x(), pos.y(), ctrl=ctrl)
        event.accept()

    def wheelEvent(self, event: QWheelEvent) -> None:
        steps = event.angleDelta().y() / 120
        if steps:
            pos = event.position()
            self.network.interaction.wheel(pos.x(), pos.y(), steps)
        event.accept()

    # --- popup ---

    def on_popup_changed(self) -> None:
        popup = self.network.interaction.popup
        if not popup.visible:
            self.popup_label.hide()
            return
        self.popup_label.setText(popup.text)
        self.popup_label.adjustSize()
        left, top = popup.place(self.popup_label.width(), self.popup_label.height(), self.width(), self.height())
        self.popup_label.move(int(left), int(top))
        self.popup_label.show()
        self.popup_label.raise_()
