"""
Session buffer: the samples collected between one start and stop.
"""

from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from baxter_data_recorder.snapshots import CommandMode, Sample


class JointLayoutError(ValueError):
    """A sample does not match the joint layout the session started with."""


class Session:
    """
    Ordered, append-only list of samples for one recording run.

    The joint names of the first sample fix the column layout for the whole
    session. Later samples must carry the same names in the same order, and
    any command must have one value per joint, in the same joint order when
    the command names its joints.
    """

    def __init__(self, file_name: Path, mode: CommandMode):
        self.file_name = Path(file_name)
        self.mode = mode
        self._samples: List[Sample] = []

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return tuple(self._samples)

    @property
    def joint_names(self) -> Tuple[str, ...]:
        """Column order of the session (empty until the first sample)."""
        if not self._samples:
            return ()
        return self._samples[0].state.names

    @property
    def start_stamp(self) -> Optional[float]:
        if not self._samples:
            return None
        return self._samples[0].state.stamp

    @property
    def duration(self) -> float:
        """Seconds between the first and last sample's state stamps."""
        if not self._samples:
            return 0.0
        return self._samples[-1].state.stamp - self._samples[0].state.stamp

    def append(self, sample: Sample):
        """
        Append a sample after checking it against the session layout.

        Raises:
            JointLayoutError: joint names changed, or the command has the
                wrong kind, length or joint order for this session.
        """
        names = sample.state.names
        if self._samples and names != self.joint_names:
            raise JointLayoutError(
                f"Joint names changed during recording: expected {list(self.joint_names)}, "
                f"got {list(names)}")

        command = sample.command
        if command is not None:
            if command.mode is not self.mode:
                raise JointLayoutError(
                    f"Session records {self.mode.name.lower()} commands, "
                    f"got a {command.mode.name.lower()} command")
            if len(command) != len(names):
                raise JointLayoutError(
                    f"Command has {len(command)} values for {len(names)} joints")
            if command.names and command.names != names:
                raise JointLayoutError(
                    f"Command joint order {list(command.names)} does not match "
                    f"joint states {list(names)}")

        self._samples.append(sample)
