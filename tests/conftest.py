"""Shared fixtures for the network engine tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from socialgraph.config import NetworkConstants
from socialgraph.controller.network import Network
from socialgraph.model.images import Images
from socialgraph.model.scene import Scene


class FakeSignal:
    def __init__(self):
        self._slots = []

    def connect(self, slot):
        self._slots.append(slot)

    def emit(self):
        for slot in list(self._slots):
            slot()


class FakeTimer:
    """Stand-in for a single-shot QTimer; fire() delivers the pending timeout."""

    def __init__(self):
        self.timeout = FakeSignal()
        self.single_shot = False
        self.interval = 0
        self.active = False
        self.starts = 0

    def setSingleShot(self, value):
        self.single_shot = value

    def setInterval(self, value):
        self.interval = value

    def start(self):
        self.active = True
        self.starts += 1

    def stop(self):
        self.active = False

    def isActive(self):
        return self.active

    def fire(self):
        assert self.active, "timer is not running"
        if self.single_shot:
            self.active = False
        self.timeout.emit()


def fixed_measure(text, font_size, bold=False):
    """Every character is font_size / 2 wide."""
    return len(text) * font_size / 2, float(font_size)


class ImmediateLoader:
    """Image loader that completes on demand with a fixed size."""

    def __init__(self, width=40, height=30):
        self.width = width
        self.height = height
        self.requests = []

    def __call__(self, url, done):
        self.requests.append((url, done))

    def complete_all(self):
        for url, done in self.requests:
            done(f"image:{url}", self.width, self.height)
        self.requests = []


@pytest.fixture
def constants():
    return NetworkConstants()


@pytest.fixture
def loader():
    return ImmediateLoader()


@pytest.fixture
def scene(constants, loader):
    scene = Scene(constants, Images(loader))
    scene.set_canvas_size(600, 600)
    return scene


@pytest.fixture
def timers():
    """All FakeTimers created through ``timer_factory``, in creation order."""
    return []


@pytest.fixture
def timer_factory(timers):
    def create():
        timer = FakeTimer()
        timers.append(timer)
        return timer
    return create


@pytest.fixture
def network(timer_factory, loader):
    return Network(image_loader=loader, measure_text=fixed_measure, timer_factory=timer_factory)


@pytest.fixture
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
