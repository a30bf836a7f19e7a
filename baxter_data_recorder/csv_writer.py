"""
CSV serialization of recording sessions.

File layout (one line per sample, every field followed by a comma):

    timestamp,<j>_pos,<j>_vel,<j>_eff,<j>_pos_cmd,...,
    0.0,0.5,0.1,0.05,0.6,...,

The command column is ``<j>_vel_cmd`` for velocity-command sessions. The
timestamp is the state stamp relative to the first sample. Commands that
had not arrived yet when a sample was taken are written as ``nan``.
"""

import csv
import logging
import math
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from baxter_data_recorder.session import Session
from baxter_data_recorder.snapshots import CommandMode

_logger = logging.getLogger(__name__)

STATE_FIELDS = ("pos", "vel", "eff")


def _fmt(value: float) -> str:
    # repr() is the shortest text that parses back to the same float
    return repr(float(value))


def header_columns(joint_names, mode: CommandMode) -> List[str]:
    """Column names for a session, without the trailing empty field."""
    columns = ["timestamp"]
    for name in joint_names:
        columns.extend(f"{name}_{suffix}" for suffix in STATE_FIELDS)
        columns.append(f"{name}{mode.column_suffix}")
    return columns


def session_rows(session: Session) -> List[List[str]]:
    """Format every sample of a session as a list of CSV fields."""
    rows = []
    start = session.start_stamp
    for sample in session:
        state = sample.state
        row = [_fmt(state.stamp - start)]
        for j in range(state.num_joints):
            row.append(_fmt(state.positions[j]))
            row.append(_fmt(state.velocities[j]))
            row.append(_fmt(state.efforts[j]))
            if sample.command is None:
                row.append(_fmt(math.nan))
            else:
                row.append(_fmt(sample.command.values[j]))
        rows.append(row)
    return rows


def _output_mode(path: Path) -> int:
    """Permissions for the written file: keep an existing file's, else follow the umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_session(session: Session, file_name: Optional[Path] = None,
                  logger=None) -> bool:
    """
    Write a session to CSV, replacing any existing file.

    The file is written to a temporary name next to the target and moved
    into place, so a failed write never leaves a partial file behind.

    Args:
        session: Samples to write
        file_name: Output path (defaults to the session's file name)
        logger: Logger for status messages (module logger if None)

    Returns:
        True if the file was written, False if the session was empty or the
        file could not be written.
    """
    log = logger or _logger
    path = Path(file_name) if file_name is not None else session.file_name

    if not len(session):
        log.error("No joint states populated")
        return False

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
                mode="w", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp",
                delete=False, newline="", encoding="utf-8") as f:
            tmp_name = f.name
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(header_columns(session.joint_names, session.mode) + [""])
            for row in session_rows(session):
                writer.writerow(row + [""])
        os.chmod(tmp_name, _output_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        log.error(f"Failed to write {path}: {e}")
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        return False

    log.info(f"Wrote to file {path}")
    return True


@dataclass
class Recording:
    """A CSV recording read back from disk."""
    path: Path
    joint_names: List[str]
    mode: CommandMode
    columns: Dict[str, List[float]] = field(default_factory=dict)

    @property
    def timestamps(self) -> List[float]:
        return self.columns["timestamp"]

    @property
    def num_samples(self) -> int:
        return len(self.timestamps)

    def joint_column(self, joint_name: str, kind: str) -> List[float]:
        """
        Get one column of a joint.

        Args:
            joint_name: Joint name as it appears in the header
            kind: "pos", "vel", "eff" or "cmd"
        """
        if kind == "cmd":
            return self.columns[f"{joint_name}{self.mode.column_suffix}"]
        return self.columns[f"{joint_name}_{kind}"]


def _strip_trailing(fields: List[str]) -> List[str]:
    if fields and fields[-1] == "":
        return fields[:-1]
    return fields


def _parse_header(header: List[str]):
    if not header or header[0] != "timestamp":
        raise ValueError("Header must start with 'timestamp'")
    groups = header[1:]
    if len(groups) % 4:
        raise ValueError(f"Expected 4 columns per joint, got {len(groups)} joint columns")

    names = []
    mode = None
    for i in range(0, len(groups), 4):
        pos, vel, eff, cmd = groups[i:i + 4]
        if not pos.endswith("_pos"):
            raise ValueError(f"Unexpected column '{pos}'")
        name = pos[:-len("_pos")]
        if vel != f"{name}_vel" or eff != f"{name}_eff":
            raise ValueError(f"Columns for joint '{name}' out of order")
        for candidate in CommandMode:
            if cmd == f"{name}{candidate.column_suffix}":
                break
        else:
            raise ValueError(f"Unexpected command column '{cmd}'")
        if mode is not None and candidate is not mode:
            raise ValueError("File mixes position and velocity commands")
        mode = candidate
        names.append(name)

    return names, mode or CommandMode.POSITION


def read_recording(path: Path) -> Recording:
    """
    Parse a CSV written by write_session.

    Raises:
        ValueError: header or rows do not follow the recorder's layout
    """
    path = Path(path)
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        try:
            header = _strip_trailing(next(reader))
        except StopIteration:
            raise ValueError(f"{path} is empty") from None
        names, mode = _parse_header(header)

        columns: Dict[str, List[float]] = {name: [] for name in header}
        for line_no, fields in enumerate(reader, start=2):
            fields = _strip_trailing(fields)
            if not fields:
                continue
            if len(fields) != len(header):
                raise ValueError(
                    f"{path}:{line_no}: expected {len(header)} fields, got {len(fields)}")
            for name, value in zip(header, fields):
                columns[name].append(float(value))

    return Recording(path=path, joint_names=names, mode=mode, columns=columns)
