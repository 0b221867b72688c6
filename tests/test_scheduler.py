from __future__ import annotations

import logging
import threading
import time

import pytest

from spotify_stats.core.scheduler import PollScheduler

from conftest import wait_for


class CountingAction:
    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self) -> None:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(0.005)
            if self.fail:
                raise RuntimeError("tick failed")
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def make_poller():
    pollers = []

    def factory(action, interval_seconds: float) -> PollScheduler:
        poller = PollScheduler(logging.getLogger("spotify_stats.tests"), action, interval_seconds)
        pollers.append(poller)
        return poller

    yield factory

    for poller in pollers:
        poller.shutdown(wait=True)


def test_first_tick_is_immediate(make_poller) -> None:
    action = CountingAction()
    poller = make_poller(action, interval_seconds=60)

    assert poller.start() is True

    assert wait_for(lambda: action.calls == 1, timeout=2)
    time.sleep(0.1)
    assert action.calls == 1


def test_ticks_repeat_after_interval(make_poller) -> None:
    action = CountingAction()
    poller = make_poller(action, interval_seconds=0.05)

    poller.start()

    assert wait_for(lambda: action.calls >= 4)


def test_stop_prevents_further_ticks(make_poller) -> None:
    action = CountingAction()
    poller = make_poller(action, interval_seconds=0.05)
    poller.start()
    assert wait_for(lambda: action.calls >= 2)

    assert poller.stop() is True
    assert poller.is_polling() is False

    # Allow a tick that was already running to finish
    time.sleep(0.1)
    calls = action.calls
    time.sleep(0.3)
    assert action.calls == calls


def test_restart_ticks_immediately(make_poller) -> None:
    action = CountingAction()
    poller = make_poller(action, interval_seconds=60)
    poller.start()
    assert wait_for(lambda: action.calls == 1)

    poller.stop()
    poller.start()

    assert wait_for(lambda: action.calls == 2, timeout=2)
    assert poller.is_polling() is True


def test_start_and_stop_are_idempotent(make_poller) -> None:
    action = CountingAction()
    poller = make_poller(action, interval_seconds=60)

    assert poller.stop() is False
    assert poller.start() is True
    assert poller.start() is False
    assert wait_for(lambda: action.calls == 1)

    assert poller.stop() is True
    assert poller.stop() is False

    time.sleep(0.1)
    assert action.calls == 1


def test_failing_action_keeps_polling(make_poller) -> None:
    action = CountingAction(fail=True)
    poller = make_poller(action, interval_seconds=0.02)

    poller.start()

    assert wait_for(lambda: action.calls >= 3)
    assert poller.is_polling() is True


def test_stop_does_not_interrupt_running_tick(make_poller) -> None:
    entered = threading.Event()
    release = threading.Event()
    finished = []

    def slow_action() -> None:
        entered.set()
        release.wait(timeout=5)
        finished.append(True)

    poller = make_poller(slow_action, interval_seconds=0.01)
    poller.start()
    assert entered.wait(timeout=2)

    poller.stop()
    release.set()

    assert wait_for(lambda: finished == [True])
    time.sleep(0.1)
    assert finished == [True]


def test_ticks_never_overlap_across_restarts(make_poller) -> None:
    action = CountingAction()
    poller = make_poller(action, interval_seconds=0.01)

    for _ in range(5):
        poller.start()
        time.sleep(0.02)
        poller.stop()
        poller.start()
        time.sleep(0.02)
        poller.stop()

    time.sleep(0.05)
    assert action.calls > 0
    assert action.max_active == 1


def test_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        PollScheduler(logging.getLogger("test"), lambda: None, interval_seconds=0)
