from baxter_data_recorder import LivenessMonitor
from conftest import make_state


def test_fresh_state_is_live(cache, clock):
    monitor = LivenessMonitor(cache, timeout=1.0, clock=clock)
    cache.update_state(make_state(0.0, [0.0]))
    clock.advance(0.5)
    assert monitor.state_age() == 0.5
    assert not monitor.is_expired()


def test_age_equal_to_timeout_is_still_live(cache, clock):
    monitor = LivenessMonitor(cache, timeout=1.0, clock=clock)
    clock.now = 10.0
    cache.update_state(make_state(0.0, [0.0]))
    clock.now = 11.0
    assert not monitor.is_expired()


def test_age_past_timeout_is_expired(cache, clock):
    monitor = LivenessMonitor(cache, timeout=1.0, clock=clock)
    clock.now = 10.0
    cache.update_state(make_state(0.0, [0.0]))
    clock.now = 11.000001
    assert monitor.is_expired()


def test_new_state_revives_stream(cache, clock):
    monitor = LivenessMonitor(cache, timeout=1.0, clock=clock)
    cache.update_state(make_state(0.0, [0.0]))
    clock.advance(5.0)
    assert monitor.is_expired()
    cache.update_state(make_state(5.0, [0.0]))
    assert not monitor.is_expired()
