"""
Time slider controls: previous / play / next buttons, a track and the current
timestamp. Hidden while the network has no timestamps.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QSlider, QStyle, QWidget

from socialgraph.controller.network import Network

logger = logging.getLogger(__name__)

TRACK_STEPS = 1000


class SliderWidget(QWidget):
    def __init__(self, network: Network, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.network = network

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 4, 0, 4)

        self.btn_prev = QPushButton()
        self.btn_prev.setIcon(self.style().standardIcon(QStyle.SP_MediaSeekBackward))
        self.btn_prev.setToolTip("Previous")
        self.btn_prev.clicked.connect(self.on_prev)
        layout.addWidget(self.btn_prev)

        self.btn_play = QPushButton()
        self.btn_play.setIcon(self.style().standardIcon(QStyle.SP_MediaPlay))
        self.btn_play.setToolTip("Play")
        self.btn_play.clicked.connect(self.on_play)
        layout.addWidget(self.btn_play)

        self.btn_next = QPushButton()
        self.btn_next.setIcon(self.style().standardIcon(QStyle.SP_MediaSeekForward))
        self.btn_next.setToolTip("Next")
        self.btn_next.clicked.connect(self.on_next)
        layout.addWidget(self.btn_next)

        self.track = QSlider(Qt.Horizontal)
        self.track.setRange(0, TRACK_STEPS)
        self.track.sliderPressed.connect(self.on_drag_started)
        self.track.sliderReleased.connect(self.on_drag_finished)
        self.track.valueChanged.connect(self.on_track_moved)
        layout.addWidget(self.track, stretch=1)

        self.lbl_value = QLabel("-")
        self.lbl_value.setMinimumWidth(160)
        self.lbl_value.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        layout.addWidget(self.lbl_value)

        network.slider_changed.connect(self.on_slider_changed)
        network.timestamp_changed.connect(self.sync)
        self.on_slider_changed()

    def on_slider_changed(self) -> None:
        self.setVisible(self.network.slider is not None)
        self.sync()

    def sync(self) -> None:
        """Update the track, label and play icon from the slider state."""
        slider = self.network.slider
        if slider is None:
            return
        self.track.blockSignals(True)
        self.track.setValue(round(slider.fraction * TRACK_STEPS))
        self.track.blockSignals(False)

        value = slider.get_value()
        if isinstance(value, datetime):
            self.lbl_value.setText(value.strftime("%Y-%m-%d %H:%M:%S"))
        else:
            self.lbl_value.setText(f"{value:g}")

        icon = QStyle.SP_MediaPause if slider.is_playing else QStyle.SP_MediaPlay
        self.btn_play.setIcon(self.style().standardIcon(icon))
        self.btn_play.setToolTip("Stop" if slider.is_playing else "Play")

    def on_prev(self) -> None:
        if self.network.slider is not None:
            self.network.slider.prev()

    def on_next(self) -> None:
        if self.network.slider is not None:
            self.network.slider.next()

    def on_play(self) -> None:
        slider = self.network.slider
        if slider is None:
            return
        slider.toggle_play()
        self.sync()

    def on_drag_started(self) -> None:
        if self.network.slider is not None:
            self.network.slider.dragging = True

    def on_drag_finished(self) -> None:
        if self.network.slider is not None:
            self.network.slider.dragging = False

    def on_track_moved(self, position: int) -> None:
        if self.network.slider is not None:
            self.network.slider.set_fraction(position / TRACK_STEPS)
