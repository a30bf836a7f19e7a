"""
Latest-value cache for the joint state and joint command streams.

Each stream owns one slot. Subscription callbacks overwrite their slot; the
sampler reads both on every tick. Values overwritten between ticks are
dropped.
"""

import threading
import time
from typing import Callable, Dict, Optional

from baxter_data_recorder.snapshots import CommandMode, CommandSnapshot, JointSnapshot


class LatestValueCache:
    """Holds the most recent state snapshot and command snapshot of each kind."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

        self._state: Optional[JointSnapshot] = None
        self._state_arrival_time = 0.0
        self._state_lock = threading.Lock()
        self._first_state = threading.Event()

        self._commands: Dict[CommandMode, Optional[CommandSnapshot]] = {
            mode: None for mode in CommandMode}
        self._command_locks = {mode: threading.Lock() for mode in CommandMode}

    def update_state(self, snapshot: JointSnapshot):
        """Replace the cached state and stamp its arrival time."""
        now = self._clock()
        with self._state_lock:
            self._state = snapshot
            self._state_arrival_time = now
        self._first_state.set()

    def update_command(self, snapshot: CommandSnapshot):
        """Replace the cached command of the snapshot's kind."""
        with self._command_locks[snapshot.mode]:
            self._commands[snapshot.mode] = snapshot

    @property
    def has_state(self) -> bool:
        """True once any state message has been cached."""
        return self._first_state.is_set()

    def wait_for_state(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the first state message has been cached.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            True if a state is cached, False if the timeout elapsed first.
        """
        return self._first_state.wait(timeout)

    def state(self) -> Optional[JointSnapshot]:
        with self._state_lock:
            return self._state

    def state_arrival_time(self) -> float:
        """Clock time at which the cached state arrived (0.0 if none yet)."""
        with self._state_lock:
            return self._state_arrival_time

    def command(self, mode: CommandMode) -> Optional[CommandSnapshot]:
        with self._command_locks[mode]:
            return self._commands[mode]
