"""
Snapshot types shared by the cache, the session buffer and the CSV writer.

A snapshot is an immutable copy of one incoming message. Joint states and
joint commands arrive on separate topics, so a Sample pairs whichever of
each was most recently received when the sampler fired.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Sequence, Tuple


class CommandMode(Enum):
    """Which command stream a recording session follows."""

    POSITION = "pos"
    VELOCITY = "vel"

    @property
    def column_suffix(self) -> str:
        """Suffix of the per-joint command column, e.g. ``_pos_cmd``."""
        return f"_{self.value}_cmd"


@dataclass(frozen=True)
class JointSnapshot:
    """Joint state captured from one JointState message."""
    stamp: float  # s - capture time from the message header
    names: Tuple[str, ...]
    positions: Tuple[float, ...]
    velocities: Tuple[float, ...]
    efforts: Tuple[float, ...]

    def __post_init__(self):
        n = len(self.names)
        if not (len(self.positions) == len(self.velocities) == len(self.efforts) == n):
            raise ValueError(
                f"Joint arrays must match {n} names: got {len(self.positions)} positions, "
                f"{len(self.velocities)} velocities, {len(self.efforts)} efforts")

    @property
    def num_joints(self) -> int:
        return len(self.names)

    @classmethod
    def from_joint_state(cls, msg, stamp: float) -> 'JointSnapshot':
        """
        Copy a sensor_msgs/JointState message.

        Publishers may leave velocity or effort empty; those joints get NaN.

        Args:
            msg: JointState-shaped message (name, position, velocity, effort)
            stamp: Capture time in seconds
        """
        names = tuple(msg.name)
        n = len(names)

        def _column(values: Sequence[float]) -> Tuple[float, ...]:
            values = [float(v) for v in values][:n]
            return tuple(values + [math.nan] * (n - len(values)))

        return cls(
            stamp=float(stamp),
            names=names,
            positions=_column(msg.position),
            velocities=_column(msg.velocity),
            efforts=_column(msg.effort),
        )


@dataclass(frozen=True)
class CommandSnapshot:
    """Base for the two command variants."""
    values: Tuple[float, ...]
    names: Tuple[str, ...] = ()  # Joint order, when the message carries one

    mode: ClassVar[CommandMode]

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class PositionCommand(CommandSnapshot):
    """Target joint angles (rad)."""
    mode: ClassVar[CommandMode] = CommandMode.POSITION


@dataclass(frozen=True)
class VelocityCommand(CommandSnapshot):
    """Target joint velocities (rad/s)."""
    mode: ClassVar[CommandMode] = CommandMode.VELOCITY


def make_command(mode: CommandMode, values: Sequence[float],
                 names: Sequence[str] = ()) -> CommandSnapshot:
    """Build the command variant for ``mode``."""
    values = tuple(float(v) for v in values)
    if mode is CommandMode.POSITION:
        return PositionCommand(values, tuple(names))
    return VelocityCommand(values, tuple(names))


@dataclass(frozen=True)
class Sample:
    """One sampler tick: the latest state and the latest command (if any yet)."""
    state: JointSnapshot
    command: Optional[CommandSnapshot] = None
