"""
Configuration module for the Baxter data recorder.

Defines the recorder configuration dataclass with YAML support.
"""

import os
import yaml
from dataclasses import dataclass, asdict
from pathlib import Path

from baxter_data_recorder.snapshots import CommandMode


@dataclass
class RecorderConfig:
    """Recorder configuration."""
    arm_name: str = "left"
    position_cmd_mode: bool = True  # False records velocity commands instead
    record_rate_hz: float = 100.0  # Hz - samples written per second
    state_expired_timeout: float = 1.0  # s - state older than this aborts recording
    rate_tolerance: float = 0.25  # Fraction of record_rate_hz before warning
    log_throttle_sec: float = 2.0  # Min seconds between repeated warnings
    joint_state_topic: str = "/robot/limb/{arm}/joint_states"
    position_command_topic: str = "/robot/limb/{arm}/command_joint_angles"
    velocity_command_topic: str = "/robot/limb/{arm}/command_joint_velocities"
    output_dir: str = "~/baxter_recordings"

    def __post_init__(self):
        if self.record_rate_hz <= 0:
            raise ValueError("record_rate_hz must be > 0")
        if self.state_expired_timeout <= 0:
            raise ValueError("state_expired_timeout must be > 0")
        if self.log_throttle_sec <= 0:
            raise ValueError("log_throttle_sec must be > 0")
        if self.rate_tolerance < 0:
            raise ValueError("rate_tolerance must be >= 0")

    @property
    def command_mode(self) -> CommandMode:
        """Command variant recorded alongside the joint states."""
        return CommandMode.POSITION if self.position_cmd_mode else CommandMode.VELOCITY

    @property
    def record_period(self) -> float:
        """Sampler period in seconds."""
        return 1.0 / self.record_rate_hz

    @property
    def state_topic(self) -> str:
        return self.joint_state_topic.format(arm=self.arm_name)

    @property
    def command_topic(self) -> str:
        """Topic of the command stream selected by position_cmd_mode."""
        if self.position_cmd_mode:
            return self.position_command_topic.format(arm=self.arm_name)
        return self.velocity_command_topic.format(arm=self.arm_name)

    def resolve_output_path(self, file_name: str) -> Path:
        """Place relative file names under output_dir."""
        path = Path(os.path.expanduser(file_name))
        if path.is_absolute():
            return path
        return Path(os.path.expanduser(self.output_dir)) / path

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        return yaml.dump(asdict(self), default_flow_style=False, sort_keys=False)

    def save(self, path: Path):
        """Save config to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            f.write(self.to_yaml())

    @classmethod
    def from_yaml(cls, yaml_str: str) -> 'RecorderConfig':
        """Load config from YAML string."""
        data = yaml.safe_load(yaml_str) or {}
        return cls(**data)

    @classmethod
    def load(cls, path: Path) -> 'RecorderConfig':
        """Load config from YAML file."""
        with open(path, 'r') as f:
            return cls.from_yaml(f.read())

    @classmethod
    def default_config_path(cls) -> Path:
        """Get default config path."""
        # Try package share directory first
        try:
            from ament_index_python.packages import get_package_share_directory
            return Path(get_package_share_directory('baxter_data_recorder')) / 'config' / 'recorder_config.yaml'
        except Exception:
            pass
        # Fallback to home directory
        return Path.home() / '.config' / 'baxter_data_recorder' / 'recorder_config.yaml'
