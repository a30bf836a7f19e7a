"""Shared fixtures: a hand-advanced clock and a hand-fired sampler timer."""

import pytest

from baxter_data_recorder import JointSnapshot, LatestValueCache, RecorderConfig


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, dt):
        self.now += dt


class ManualTimer:
    """Stands in for a periodic timer; tests call fire() once per tick."""

    def __init__(self, period, callback):
        self.period = period
        self.callback = callback
        self.cancelled = False

    def fire(self):
        if not self.cancelled:
            self.callback()

    def cancel(self):
        self.cancelled = True


class ManualTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, period, callback):
        timer = ManualTimer(period, callback)
        self.timers.append(timer)
        return timer

    @property
    def current(self):
        return self.timers[-1]


def make_state(stamp, positions, velocities=None, efforts=None, names=None):
    n = len(positions)
    return JointSnapshot(
        stamp=stamp,
        names=tuple(names or [f"j{i}" for i in range(n)]),
        positions=tuple(positions),
        velocities=tuple(velocities if velocities is not None else [0.0] * n),
        efforts=tuple(efforts if efforts is not None else [0.0] * n),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def config():
    return RecorderConfig(record_rate_hz=10.0, state_expired_timeout=1.0)


@pytest.fixture
def cache(clock):
    return LatestValueCache(clock)
