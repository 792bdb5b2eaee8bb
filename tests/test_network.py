"""Tests for the Network facade: draw, ingestion, selection, time slider and signals."""

import math

import pytest

from socialgraph.controller.network import Network
from socialgraph.errors import InvalidArgumentError
from socialgraph.model.people import DRAW_OPTIONS, build_tables, sample_persons

from conftest import fixed_measure


class Counter:
    def __init__(self, signal):
        self.count = 0
        signal.connect(self.increment)

    def increment(self):
        self.count += 1


@pytest.fixture
def people():
    return build_tables(sample_persons())


@pytest.fixture
def timeline():
    nodes = [{"id": 1, "text": "a", "timestamp": 0}, {"id": 2, "text": "b", "timestamp": 4000}]
    links = [{"from": 1, "to": 2, "timestamp": 4000}]
    return nodes, links


class TestDraw:
    def test_draw_loads_and_signals_ready(self, network, people):
        ready = Counter(network.ready)
        nodes, links = people
        network.draw(nodes, links, options=DRAW_OPTIONS)
        assert ready.count == 1
        assert len(network.scene.nodes) == len(nodes)
        assert len(network.scene.links) == len(links)
        assert (network.scene.width, network.scene.height) == (600, 500)
        assert network.background.stroke == "lightgray"

    def test_draw_applies_default_length(self, network, people):
        network.draw(*people, options=DRAW_OPTIONS)
        assert network.constants.links.default_length == pytest.approx(90)
        assert all(link.length == pytest.approx(90) for link in network.scene.links)
        # the base constants are left alone for the next draw
        assert network.base_constants.links.default_length == 50

    def test_draw_stabilizes(self, network, people):
        network.draw(*people, options=DRAW_OPTIONS)
        assert not network.scene.has_moving_nodes
        assert not network.is_moving()

    def test_draw_without_stabilize_starts_on_a_circle(self, network):
        network.draw([{"id": 1}, {"id": 2}], options={"width": 400, "height": 400, "stabilize": False})
        # one tick has run since the layout; the nodes are still close to the circle
        for node in network.scene.nodes:
            distance = math.hypot(node.x - 200, node.y - 200)
            assert distance == pytest.approx(100, abs=5)
        assert network.scheduler.timer.isActive()

    def test_draw_resets_the_view(self, network, people):
        network.scene.transform.scale = 3
        network.draw(*people)
        assert network.scene.transform.scale == 1

    def test_no_slider_without_timestamps(self, network, people):
        network.draw(*people)
        assert network.slider is None
        network.animation_start()  # no-op


class TestIngestion:
    def test_add_nodes_restarts_animation(self, network):
        network.draw([{"id": 1, "x": 10, "y": 10}])
        assert not network.scheduler.timer.isActive()
        network.add_nodes([{"id": 2}])
        assert network.scheduler.timer.isActive()

    def test_add_packages_animates(self, network):
        network.draw([{"id": 1, "x": 0, "y": 0}, {"id": 2, "x": 100, "y": 0}])
        network.add_packages([{"from": 1, "to": 2}])
        assert network.is_moving()

    def test_redraw_emits_repaint(self, network):
        network.draw([{"id": 1, "x": 0, "y": 0, "text": "abc"}])
        repaints = Counter(network.repaint_requested)
        network.redraw()
        assert repaints.count == 1
        assert network.scene.nodes[0].width == pytest.approx(3 * 6 + 10)

    def test_image_arrival_triggers_repaint(self, network, loader):
        network.draw([{"id": 1, "x": 0, "y": 0, "style": "image", "image": "face.png"}])
        repaints = Counter(network.repaint_requested)
        loader.complete_all()
        assert repaints.count == 1
        node = network.scene.nodes[0]
        assert (node.width, node.height) == (40, 30 + node.font_size)

    def test_image_rows_without_a_loader(self, timer_factory, loader):
        network = Network(measure_text=fixed_measure, timer_factory=timer_factory)
        network.draw([{"id": 1, "x": 0, "y": 0, "style": "image", "image": "face.png", "text": "me"}])
        node = network.scene.nodes[0]
        assert not node.image_entry.loaded
        network.set_image_loader(loader)
        repaints = Counter(network.repaint_requested)
        loader.complete_all()
        assert node.image_entry.loaded
        assert repaints.count == 1


class TestSelection:
    def test_set_selection_signals_on_change(self, network, people):
        network.draw(*people)
        selects = Counter(network.select)
        network.set_selection([{"row": 1}, 2])
        assert network.get_selection() == [1, 2]
        network.set_selection([1, 2])
        assert selects.count == 1

    def test_invalid_selection(self, network, people):
        network.draw(*people)
        with pytest.raises(InvalidArgumentError):
            network.set_selection([999])

    def test_pointer_selection_signals(self, network):
        network.draw([{"id": 1, "x": 50, "y": 50, "text": "a"}], options={"width": 200, "height": 200})
        selects = Counter(network.select)
        network.interaction.press(50, 50)
        network.interaction.release(50, 50)
        assert network.get_selection() == [0]
        assert selects.count == 1


class TestTimeSlider:
    def test_slider_created_for_timestamps(self, network, timeline):
        network.draw(*timeline)
        slider = network.slider
        assert slider is not None
        assert not slider.loop
        assert (slider.start, slider.end) == (0, 4000)
        assert network.get_range() == (0, 4000)
        # the view starts at the beginning of the range
        assert [node.id for node in network.scene.nodes] == [1]
        assert network.scene.links == []

    def test_moving_the_slider_filters_the_scene(self, network, timeline):
        changed = Counter(network.timestamp_changed)
        network.draw(*timeline)
        network.slider.set_value(4000)
        assert [node.id for node in network.scene.nodes] == [1, 2]
        assert len(network.scene.links) == 1
        assert changed.count == 2

    def test_set_timestamp(self, network, timeline):
        network.draw(*timeline)
        network.set_timestamp(5000)
        assert len(network.scene.nodes) == 2

    def test_playback_controls(self, network, timeline):
        network.draw(*timeline)
        network.set_animation_framerate(10)
        network.set_animation_duration(2)
        assert network.slider.step == pytest.approx(4000 / 20)
        network.set_animation_acceleration(4)
        assert network.slider.duration == pytest.approx(1)
        network.animation_start()
        assert network.slider.is_playing
        network.animation_stop()
        assert not network.slider.is_playing

    def test_redraw_replaces_slider(self, network, timeline, people):
        changed = Counter(network.slider_changed)
        network.draw(*timeline)
        network.draw(*people)
        assert network.slider is None
        assert changed.count == 2
