from pathlib import Path

import pytest

from baxter_data_recorder import CommandMode, RecorderConfig


def test_defaults_follow_left_arm_position_topics():
    config = RecorderConfig()
    assert config.state_topic == "/robot/limb/left/joint_states"
    assert config.command_topic == "/robot/limb/left/command_joint_angles"
    assert config.command_mode is CommandMode.POSITION


def test_velocity_mode_selects_velocity_topic():
    config = RecorderConfig(arm_name="right", position_cmd_mode=False)
    assert config.command_topic == "/robot/limb/right/command_joint_velocities"
    assert config.command_mode is CommandMode.VELOCITY


def test_record_period():
    assert RecorderConfig(record_rate_hz=50.0).record_period == pytest.approx(0.02)


@pytest.mark.parametrize("kwargs", [
    {"record_rate_hz": 0.0},
    {"state_expired_timeout": -1.0},
    {"log_throttle_sec": 0.0},
    {"rate_tolerance": -0.1},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        RecorderConfig(**kwargs)


def test_yaml_save_and_load(tmp_path):
    config = RecorderConfig(arm_name="right", position_cmd_mode=False, record_rate_hz=200.0)
    path = tmp_path / "nested" / "recorder.yaml"
    config.save(path)
    assert RecorderConfig.load(path) == config


def test_partial_yaml_keeps_defaults():
    config = RecorderConfig.from_yaml("state_expired_timeout: 0.5\n")
    assert config.state_expired_timeout == 0.5
    assert config.record_rate_hz == RecorderConfig().record_rate_hz


def test_unknown_yaml_key_rejected():
    with pytest.raises(TypeError):
        RecorderConfig.from_yaml("bogus: 1\n")


def test_resolve_output_path(tmp_path):
    config = RecorderConfig(output_dir=str(tmp_path))
    assert config.resolve_output_path("run.csv") == tmp_path / "run.csv"
    absolute = tmp_path / "elsewhere" / "run.csv"
    assert config.resolve_output_path(str(absolute)) == absolute


def test_packaged_config_matches_defaults():
    packaged = Path(__file__).resolve().parent.parent / "config" / "recorder_config.yaml"
    assert RecorderConfig.load(packaged) == RecorderConfig()
