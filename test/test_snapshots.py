import math
from types import SimpleNamespace

import pytest

from baxter_data_recorder import (
    CommandMode, JointSnapshot, PositionCommand, VelocityCommand, make_command,
)


def test_from_joint_state_copies_arrays():
    msg = SimpleNamespace(
        name=["s0", "s1"], position=[0.1, 0.2], velocity=[1.0, 2.0], effort=[3.0, 4.0])
    snapshot = JointSnapshot.from_joint_state(msg, stamp=12.5)
    assert snapshot.stamp == 12.5
    assert snapshot.names == ("s0", "s1")
    assert snapshot.positions == (0.1, 0.2)
    assert snapshot.velocities == (1.0, 2.0)
    assert snapshot.efforts == (3.0, 4.0)

    # Later changes to the message do not leak into the snapshot
    msg.position[0] = 9.0
    assert snapshot.positions[0] == 0.1


def test_from_joint_state_pads_missing_velocity_and_effort():
    msg = SimpleNamespace(name=["s0", "s1"], position=[0.1, 0.2], velocity=[], effort=[5.0])
    snapshot = JointSnapshot.from_joint_state(msg, stamp=1.0)
    assert all(math.isnan(v) for v in snapshot.velocities)
    assert snapshot.efforts[0] == 5.0
    assert math.isnan(snapshot.efforts[1])


def test_mismatched_arrays_rejected():
    with pytest.raises(ValueError):
        JointSnapshot(stamp=0.0, names=("a", "b"), positions=(1.0,),
                      velocities=(0.0, 0.0), efforts=(0.0, 0.0))


def test_snapshot_is_immutable():
    snapshot = JointSnapshot(stamp=0.0, names=("a",), positions=(1.0,),
                             velocities=(0.0,), efforts=(0.0,))
    with pytest.raises(AttributeError):
        snapshot.stamp = 1.0


def test_make_command_variants():
    position = make_command(CommandMode.POSITION, [1, 2])
    velocity = make_command(CommandMode.VELOCITY, [0.5])
    assert isinstance(position, PositionCommand)
    assert position.values == (1.0, 2.0)
    assert position.mode is CommandMode.POSITION
    assert isinstance(velocity, VelocityCommand)
    assert velocity.mode is CommandMode.VELOCITY
    assert len(velocity) == 1


def test_make_command_keeps_joint_names():
    command = make_command(CommandMode.VELOCITY, [0.1, 0.2], ["s0", "s1"])
    assert command.names == ("s0", "s1")
    assert make_command(CommandMode.POSITION, [0.1]).names == ()


def test_column_suffix():
    assert CommandMode.POSITION.column_suffix == "_pos_cmd"
    assert CommandMode.VELOCITY.column_suffix == "_vel_cmd"
