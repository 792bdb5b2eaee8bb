"""Tests for the animation scheduler, driven by a fake single-shot timer."""

import pytest

from socialgraph.controller.scheduler import AnimationScheduler, SchedulerState
from socialgraph.controller.simulation import ForceSimulation

from conftest import FakeTimer


@pytest.fixture
def redraws():
    return []


@pytest.fixture
def scheduler(scene, redraws):
    return AnimationScheduler(scene, ForceSimulation(scene), lambda: redraws.append(1), FakeTimer())


def run_until_idle(scheduler, limit=2000):
    ticks = 0
    while scheduler.timer.isActive() and ticks < limit:
        scheduler.timer.fire()
        ticks += 1
    return ticks


class TestScheduler:
    def test_timer_is_single_shot(self, scheduler, scene):
        assert scheduler.timer.single_shot
        assert scheduler.timer.interval == scene.constants.refresh_rate

    def test_idle_scene_draws_once_and_stops(self, scheduler, scene, redraws):
        scene.set_nodes([{"id": 1, "x": 0, "y": 0}])
        scheduler.start()
        assert redraws == [1]
        assert scheduler.state == SchedulerState.IDLE

    def test_moving_nodes_keep_it_running(self, scheduler, scene):
        scene.set_nodes([{"id": 1}, {"id": 2}])
        scene.nodes[0].x, scene.nodes[0].y = 250.0, 300.0
        scene.nodes[1].x, scene.nodes[1].y = 350.0, 300.0
        scene.set_links([{"from": 1, "to": 2}])
        scheduler.start()
        assert scheduler.state == SchedulerState.RUNNING

        ticks = run_until_idle(scheduler)
        assert ticks < 2000
        assert scheduler.state == SchedulerState.IDLE
        assert not scene.has_moving_nodes

    def test_start_never_leaves_two_ticks_pending(self, scheduler, scene):
        scene.set_nodes([{"id": 1}, {"id": 2}])
        scheduler.start()
        scheduler.start()
        scheduler.start()
        assert scheduler.ticks == 3
        # one pending timeout, re-armed after each tick
        assert scheduler.timer.isActive()

    def test_stop_cancels_pending_tick(self, scheduler, scene):
        scene.set_nodes([{"id": 1}, {"id": 2}])
        scheduler.start()
        scheduler.stop()
        assert scheduler.state == SchedulerState.IDLE
        assert scheduler.ticks == 1

    def test_animated_links_advance_each_tick(self, scheduler, scene):
        scene.set_nodes([{"id": 1, "x": 0, "y": 0}, {"id": 2, "x": 100, "y": 0}])
        scene.set_links([{"from": 1, "to": 2, "style": "moving-dot"}])
        scheduler.start()
        link = scene.links[0]
        assert link.dot == pytest.approx(scene.constants.links.dot_speed * scene.constants.interval)
        # animated links never settle
        assert scheduler.state == SchedulerState.RUNNING
        for _ in range(25):
            scheduler.timer.fire()
        assert 0 <= link.dot < 1

    def test_packages_run_until_arrival(self, scheduler, scene):
        scene.set_nodes([{"id": 1, "x": 0, "y": 0}, {"id": 2, "x": 100, "y": 0}])
        scene.set_packages([{"from": 1, "to": 2, "duration": 0.5}])
        scheduler.start()
        ticks = run_until_idle(scheduler)
        # 0.5 s at 50 ms per tick, give or take rounding of the progress sum
        assert 9 <= ticks <= 10
        assert scene.packages == []
