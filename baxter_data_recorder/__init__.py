"""
Baxter data recorder - samples joint states and joint commands to CSV.

This package provides:
- A latest-value cache fed by the joint state and joint command topics
- A fixed-rate sampler that aborts when the state stream goes silent
- CSV writing and reading of recorded sessions
- A ROS 2 node and a command-line recorder wrapping the above
"""

from .cache import LatestValueCache
from .config import RecorderConfig
from .csv_writer import Recording, read_recording, write_session
from .liveness import LivenessMonitor
from .recorder import DataRecorder, NodeTimer, PeriodicTimer, RecorderState
from .session import JointLayoutError, Session
from .snapshots import (
    CommandMode, CommandSnapshot, JointSnapshot, PositionCommand, Sample,
    VelocityCommand, make_command,
)

__version__ = "1.0.0"

__all__ = [
    'CommandMode',
    'CommandSnapshot',
    'DataRecorder',
    'JointLayoutError',
    'JointSnapshot',
    'LatestValueCache',
    'LivenessMonitor',
    'NodeTimer',
    'PeriodicTimer',
    'PositionCommand',
    'Recording',
    'RecorderConfig',
    'RecorderState',
    'Sample',
    'Session',
    'VelocityCommand',
    'make_command',
    'read_recording',
    'write_session',
]
