#!/usr/bin/env python3
"""Launch file for the Baxter data recorder."""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    """Generate launch description."""

    # Declare arguments
    config_file_arg = DeclareLaunchArgument(
        'config_file',
        default_value='',
        description='Path to recorder config YAML file'
    )

    arm_name_arg = DeclareLaunchArgument(
        'arm_name',
        default_value='left',
        description='Arm to record (left or right)'
    )

    position_cmd_mode_arg = DeclareLaunchArgument(
        'position_cmd_mode',
        default_value='true',
        description='Record position commands (true) or velocity commands (false)'
    )

    record_rate_arg = DeclareLaunchArgument(
        'record_rate_hz',
        default_value='100.0',
        description='Samples written per second'
    )

    timeout_arg = DeclareLaunchArgument(
        'state_expired_timeout',
        default_value='1.0',
        description='Seconds without a joint state before recording aborts'
    )

    output_dir_arg = DeclareLaunchArgument(
        'output_dir',
        default_value='~/baxter_recordings',
        description='Directory for relative CSV file names'
    )

    # Recorder node
    recorder_node = Node(
        package='baxter_data_recorder',
        executable='recorder_node',
        name='baxter_to_csv',
        output='screen',
        parameters=[{
            'config_file': LaunchConfiguration('config_file'),
            'arm_name': LaunchConfiguration('arm_name'),
            'position_cmd_mode': LaunchConfiguration('position_cmd_mode'),
            'record_rate_hz': LaunchConfiguration('record_rate_hz'),
            'state_expired_timeout': LaunchConfiguration('state_expired_timeout'),
            'output_dir': LaunchConfiguration('output_dir'),
        }],
    )

    return LaunchDescription([
        config_file_arg,
        arm_name_arg,
        position_cmd_mode_arg,
        record_rate_arg,
        timeout_arg,
        output_dir_arg,
        recorder_node,
    ])
