#!/usr/bin/env python3
"""
ROS 2 node that records Baxter joint states and joint commands to CSV.

Feeds the recorder's latest-value cache from the state and command topics
and exposes start/stop controls.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import rclpy
from rclpy.node import Node
from rclpy.callback_groups import ReentrantCallbackGroup
from rclpy.executors import MultiThreadedExecutor

from sensor_msgs.msg import JointState
from std_msgs.msg import Bool, String
from std_srvs.srv import Trigger

from baxter_data_recorder.config import RecorderConfig
from baxter_data_recorder.recorder import DataRecorder, NodeTimer, RecorderState
from baxter_data_recorder.snapshots import CommandMode, JointSnapshot, make_command


def stamp_to_sec(stamp) -> float:
    """Convert a builtin_interfaces/Time to seconds."""
    return stamp.sec + stamp.nanosec * 1e-9


def default_recording_name() -> str:
    return f"recording_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"


class RecorderNode(Node):
    """
    ROS 2 node wrapping DataRecorder.

    Topics Subscribed:
        <joint_state_topic> (sensor_msgs/JointState): Joint state stream
        <command_topic> (sensor_msgs/JointState): Joint commands; position
            field in position mode, velocity field in velocity mode. A non-empty
            name list must match the joint state order.
        ~/start_recording (std_msgs/String): Start recording to the given file

    Topics Published:
        ~/recording (std_msgs/Bool): True while recording

    Services:
        ~/stop_recording (std_srvs/Trigger): Stop and write the CSV file
    """

    def __init__(self, config: Optional[RecorderConfig] = None):
        super().__init__('baxter_to_csv')

        self.callback_group = ReentrantCallbackGroup()

        # Load config from parameters or use provided
        if config is None:
            config = self._load_config_from_params()
        self.config = config

        self.recorder = DataRecorder(
            config,
            timer_factory=self._create_sampler_timer,
            logger=self.get_logger(),
            on_state_change=self._publish_recording,
        )

        # Publishers
        self.recording_pub = self.create_publisher(Bool, '~/recording', 10)

        # Subscribers (depth 1: only the latest message matters)
        self.state_sub = self.create_subscription(
            JointState, config.state_topic,
            self._state_callback, 1,
            callback_group=self.callback_group)
        self.command_sub = self.create_subscription(
            JointState, config.command_topic,
            self._command_callback, 1,
            callback_group=self.callback_group)
        self.start_sub = self.create_subscription(
            String, '~/start_recording',
            self._start_callback, 10,
            callback_group=self.callback_group)

        # Services
        self.stop_srv = self.create_service(
            Trigger, '~/stop_recording', self._stop_callback,
            callback_group=self.callback_group)

        self._publish_recording(RecorderState.IDLE)

        self.get_logger().info(
            f"Recorder ready: state from {config.state_topic}, "
            f"{config.command_mode.name.lower()} commands from {config.command_topic}")

    def _load_config_from_params(self) -> RecorderConfig:
        """Load configuration from ROS parameters."""
        defaults = RecorderConfig()
        self.declare_parameter('config_file', '')
        self.declare_parameter('arm_name', defaults.arm_name)
        self.declare_parameter('position_cmd_mode', defaults.position_cmd_mode)
        self.declare_parameter('record_rate_hz', defaults.record_rate_hz)
        self.declare_parameter('state_expired_timeout', defaults.state_expired_timeout)
        self.declare_parameter('output_dir', defaults.output_dir)

        # Check for config file parameter
        config_file = self.get_parameter('config_file').get_parameter_value().string_value
        if config_file:
            try:
                return RecorderConfig.load(Path(config_file))
            except (OSError, TypeError, ValueError) as e:
                self.get_logger().warning(f"Failed to load config file: {e}")

        return RecorderConfig(
            arm_name=self.get_parameter('arm_name').get_parameter_value().string_value,
            position_cmd_mode=self.get_parameter('position_cmd_mode').get_parameter_value().bool_value,
            record_rate_hz=self.get_parameter('record_rate_hz').get_parameter_value().double_value,
            state_expired_timeout=self.get_parameter(
                'state_expired_timeout').get_parameter_value().double_value,
            output_dir=self.get_parameter('output_dir').get_parameter_value().string_value,
        )

    def _create_sampler_timer(self, period: float, callback):
        return NodeTimer(self, period, callback, callback_group=self.callback_group)

    def _state_callback(self, msg: JointState):
        """Cache the latest joint state."""
        stamp = stamp_to_sec(msg.header.stamp)
        if stamp == 0.0:
            # Unstamped publisher: fall back to receipt time
            stamp = self.get_clock().now().nanoseconds * 1e-9
        self.recorder.cache.update_state(JointSnapshot.from_joint_state(msg, stamp))

    def _command_callback(self, msg: JointState):
        """Cache the latest joint command, keeping its joint order for checking."""
        mode = self.config.command_mode
        values = msg.position if mode is CommandMode.POSITION else msg.velocity
        self.recorder.cache.update_command(make_command(mode, values, msg.name))

    def _start_callback(self, msg: String):
        """Start recording. Blocks this callback until the first state arrives."""
        path = self.config.resolve_output_path(msg.data or default_recording_name())
        self.recorder.start(path)

    def _stop_callback(self, request, response):
        """Stop recording and write the file."""
        if not self.recorder.is_recording:
            response.success = False
            response.message = "Not recording"
            return response
        response.success = self.recorder.stop()
        response.message = "CSV written" if response.success else "Failed to write CSV"
        return response

    def _publish_recording(self, state: RecorderState):
        msg = Bool()
        msg.data = state is RecorderState.RECORDING
        self.recording_pub.publish(msg)

    def shutdown(self):
        """Write any session in progress."""
        if self.recorder.is_recording:
            self.recorder.stop()
        self.get_logger().info("Recorder shutdown complete")


def main(args=None):
    rclpy.init(args=args)

    # Parameters (or the config_file parameter) configure the node
    node = RecorderNode()

    executor = MultiThreadedExecutor()
    executor.add_node(node)

    try:
        executor.spin()
    except KeyboardInterrupt:
        pass
    finally:
        node.shutdown()
        node.destroy_node()
        rclpy.shutdown()


if __name__ == '__main__':
    main()
