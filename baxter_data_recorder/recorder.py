"""
Periodic sampler that records joint states and joint commands.

The recorder reads the latest-value cache at a fixed rate and appends one
sample per tick to the current session. If the state stream goes silent,
or the joint layout changes mid-session, it stops itself and still writes
what it collected.
"""

import logging
import threading
import time
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Dict, Optional

from baxter_data_recorder.cache import LatestValueCache
from baxter_data_recorder.config import RecorderConfig
from baxter_data_recorder.csv_writer import write_session
from baxter_data_recorder.liveness import LivenessMonitor
from baxter_data_recorder.session import JointLayoutError, Session
from baxter_data_recorder.snapshots import Sample


class RecorderState(Enum):
    """States of the recorder."""

    IDLE = auto()       # Not sampling
    RECORDING = auto()  # Timer armed, appending samples


class PeriodicTimer:
    """Calls ``callback`` every ``period`` seconds on a daemon thread until cancelled."""

    def __init__(self, period: float, callback: Callable[[], None]):
        self._period = period
        self._callback = callback
        self._cancelled = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="recorder-sampler", daemon=True)
        self._thread.start()

    def _run(self):
        next_time = time.monotonic() + self._period
        while not self._cancelled.wait(max(0.0, next_time - time.monotonic())):
            self._callback()
            next_time += self._period
            # Fell behind: skip the missed ticks instead of bursting
            now = time.monotonic()
            if next_time < now:
                next_time = now + self._period

    def cancel(self):
        """Stop the timer. Safe to call from inside the callback."""
        self._cancelled.set()
        if threading.current_thread() is not self._thread:
            self._thread.join()


class NodeTimer:
    """Sampler timer owned by a ROS node. Cancelling also releases it from the node."""

    def __init__(self, node, period: float, callback: Callable[[], None],
                 callback_group=None):
        self._node = node
        self._timer = node.create_timer(period, callback, callback_group=callback_group)

    def cancel(self):
        """Stop the timer and destroy it. Safe to call more than once."""
        if self._timer is None:
            return
        timer, self._timer = self._timer, None
        timer.cancel()
        self._node.destroy_timer(timer)


class DataRecorder:
    """
    Samples the latest joint state and joint command into a CSV session.

    State machine: IDLE -> RECORDING -> IDLE. ``stop()`` and the automatic
    abort on an expired state stream take the same path: the timer is
    cancelled and the session is written to disk.

    The timer is created through ``timer_factory(period, callback)``, which
    must return an object with a ``cancel()`` method. ROS nodes pass a
    factory building NodeTimer; the default is a background thread.
    """

    def __init__(self,
                 config: Optional[RecorderConfig] = None,
                 cache: Optional[LatestValueCache] = None,
                 clock: Callable[[], float] = time.time,
                 timer_factory: Optional[Callable] = None,
                 logger=None,
                 on_state_change: Optional[Callable[[RecorderState], None]] = None):
        self.config = config or RecorderConfig()
        self._clock = clock
        self.cache = cache or LatestValueCache(clock)
        self.liveness = LivenessMonitor(
            self.cache, self.config.state_expired_timeout, clock)
        self._timer_factory = timer_factory or PeriodicTimer
        self._log = logger or logging.getLogger(__name__)
        self._on_state_change = on_state_change

        self._lock = threading.Lock()
        self._state = RecorderState.IDLE
        self._timer = None
        self._session: Optional[Session] = None

        # Rate monitoring
        self._first_update = False
        self._last_tick_time: Optional[float] = None
        self._last_warned: Dict[str, float] = {}

        # Outcome of the most recent write (None until a session ends)
        self.last_result: Optional[bool] = None

    # -- Properties ----------------------------------------------------------

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is RecorderState.RECORDING

    @property
    def sample_count(self) -> int:
        """Samples collected by the current session (0 when idle)."""
        with self._lock:
            return len(self._session) if self._session is not None else 0

    # -- Public methods ------------------------------------------------------

    def start(self, file_name, timeout: Optional[float] = None) -> bool:
        """Start recording to ``file_name``.

        Blocks until the first joint state has been received.

        Args:
            file_name: CSV file written when the session ends
            timeout: Max seconds to wait for the first state (None = forever)

        Returns:
            True if recording started, False if already recording or no
            state arrived within the timeout.
        """
        if self.is_recording:
            self._log.warning("Already recording, ignoring start request")
            return False

        if not self.cache.has_state:
            self._log.info("Waiting for first state message to be received")
            if not self.cache.wait_for_state(timeout):
                self._log.error(f"No state message received within {timeout} seconds")
                return False

        with self._lock:
            if self._state is RecorderState.RECORDING:
                return False
            self._session = Session(Path(file_name), self.config.command_mode)
            self._first_update = True
            self._last_tick_time = None
            # Expiry warnings stay throttled across quick restarts
            self._last_warned.pop("rate", None)
            self._state = RecorderState.RECORDING
            self._timer = self._timer_factory(self.config.record_period, self._update)

        self._log.info(
            f"Recording {self.config.command_mode.name.lower()} commands to {file_name} "
            f"at {self.config.record_rate_hz:g} Hz")
        self._notify(RecorderState.RECORDING)
        return True

    def stop(self) -> bool:
        """Stop recording and write the session.

        Returns:
            True if the CSV was written. False if idle (nothing happens),
            the session was empty, or the file could not be written.
        """
        with self._lock:
            if self._state is not RecorderState.RECORDING:
                self._log.debug("Not recording, nothing to stop")
                return False
            timer, session = self._finish_locked()
        return self._complete(timer, session)

    # -- Internal methods ----------------------------------------------------

    def _update(self):
        """Timer callback: take one sample, or abort if the state expired."""
        finished = None
        with self._lock:
            if self._state is not RecorderState.RECORDING:
                return

            now = self._clock()
            self._check_rate(now)

            if self.liveness.is_expired():
                if self._throttle("expired", now):
                    self._log.warning(
                        f"State expired. Last received state "
                        f"{self.liveness.state_age():.3f} seconds ago.")
                self._log.error("Aborting early")
                finished = self._finish_locked()
            else:
                sample = Sample(
                    state=self.cache.state(),
                    command=self.cache.command(self._session.mode))
                try:
                    self._session.append(sample)
                except JointLayoutError as e:
                    self._log.error(f"Aborting early: {e}")
                    finished = self._finish_locked()

        if finished is not None:
            self._complete(*finished)

    def _check_rate(self, now: float):
        """Warn when the tick rate drifts from record_rate_hz."""
        if self._first_update:
            # No previous tick to measure against
            self._first_update = False
        elif self._last_tick_time is not None:
            interval = now - self._last_tick_time
            expected = self.config.record_rate_hz
            if interval > 0:
                rate = 1.0 / interval
                if abs(rate - expected) > self.config.rate_tolerance * expected:
                    if self._throttle("rate", now):
                        self._log.warning(
                            f"Updating at {rate:.1f} Hz, expected {expected:g} Hz")
        self._last_tick_time = now

    def _throttle(self, key: str, now: float) -> bool:
        last = self._last_warned.get(key)
        if last is not None and now - last < self.config.log_throttle_sec:
            return False
        self._last_warned[key] = now
        return True

    def _finish_locked(self):
        """Transition to IDLE. Caller holds the lock."""
        self._state = RecorderState.IDLE
        timer, session = self._timer, self._session
        self._timer = None
        self._session = None
        return timer, session

    def _complete(self, timer, session: Session) -> bool:
        """Cancel the timer and write the session (lock not held)."""
        if timer is not None:
            timer.cancel()
        self._log.info(f"Stopped recording after {len(session)} samples")
        ok = write_session(session, logger=self._log)
        self.last_result = ok
        self._notify(RecorderState.IDLE)
        return ok

    def _notify(self, state: RecorderState):
        if self._on_state_change is not None:
            self._on_state_change(state)
