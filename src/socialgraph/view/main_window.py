"""
Main Application Window
=======================
The demo window: the network view, the domain legend and the time slider.

Why is this file needed?
------------------------
1. Layout: it arranges the network widget above its legend and slider.
2. Routing: it connects the network's selection signal to the status bar and
   feeds the people tables into ``Network.draw``.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QMainWindow, QSplitter, QVBoxLayout, QWidget

from socialgraph.controller.network import Network
from socialgraph.model.people import DRAW_OPTIONS, Person, build_tables, legend, sample_persons
from socialgraph.view.image_loader import QtImageLoader
from socialgraph.view.network_widget import NetworkWidget
from socialgraph.view.slider_widget import SliderWidget

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Social Graph"


class MainWindow(QMainWindow):
    def __init__(self, persons: Optional[list[Person]] = None) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(800, 700)

        self.image_loader = QtImageLoader(self)
        self.network = Network(image_loader=self.image_loader, parent=self)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        splitter = QSplitter(Qt.Vertical)
        main_layout.addWidget(splitter)

        self.network_widget = NetworkWidget(self.network)
        splitter.addWidget(self.network_widget)

        bottom = QWidget()
        bottom_layout = QVBoxLayout(bottom)
        bottom_layout.setContentsMargins(0, 0, 0, 0)
        self.slider_widget = SliderWidget(self.network)
        bottom_layout.addWidget(self.slider_widget)
        bottom_layout.addLayout(self._create_legend())
        bottom_layout.addStretch()
        splitter.addWidget(bottom)
        splitter.setSizes([600, 100])

        # --- SIGNAL CONNECTIONS ---
        self.network.select.connect(self.on_select)
        self.network.ready.connect(lambda: self.statusBar().showMessage("Ready", 2000))

        nodes, links = build_tables(persons if persons is not None else sample_persons())
        self.network.draw(nodes, links, options=DRAW_OPTIONS)

    def _create_legend(self) -> QHBoxLayout:
        layout = QHBoxLayout()
        for domain, color in legend():
            swatch = QLabel()
            swatch.setFixedSize(16, 12)
            swatch.setStyleSheet(f"QLabel {{ background-color: {color}; }}")
            layout.addWidget(swatch)
            layout.addWidget(QLabel(domain))
        layout.addStretch()
        return layout

    def on_select(self) -> None:
        names = [str(self.network.scene.nodes[row].text) for row in self.network.get_selection()]
        logger.debug(f"Selection changed: {names}")
        self.statusBar().showMessage(", ".join(names) if names else "No selection")
