"""Detects when the joint state stream has gone silent."""

import time
from typing import Callable

from baxter_data_recorder.cache import LatestValueCache


class LivenessMonitor:
    """
    Reports the state stream as expired once the cached state is older than
    ``timeout`` seconds.

    Only meaningful after the first state has arrived; the recorder waits
    for that before it starts sampling.
    """

    def __init__(self, cache: LatestValueCache, timeout: float,
                 clock: Callable[[], float] = time.time):
        self._cache = cache
        self.timeout = timeout
        self._clock = clock

    def state_age(self) -> float:
        """Seconds since the last state message arrived."""
        return self._clock() - self._cache.state_arrival_time()

    def is_expired(self) -> bool:
        # Strict: an age equal to the timeout is still live
        return self.state_age() > self.timeout
