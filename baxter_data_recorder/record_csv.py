#!/usr/bin/env python3
"""
Command-line recorder.

Records one session to CSV until Ctrl+C (or until the state stream goes
silent), then prints a summary of the written file.

Usage:
    ros2 run baxter_data_recorder record_csv [file.csv] [--velocity] [--arm right]
"""

import argparse
import sys
import threading
import time
from dataclasses import replace
from pathlib import Path

# Suppress ROS 2 logging noise
import logging
logging.getLogger('rcl').setLevel(logging.CRITICAL)

from rich.console import Console
from rich.table import Table

from baxter_data_recorder.config import RecorderConfig
from baxter_data_recorder.csv_writer import read_recording


def build_config(args) -> RecorderConfig:
    """Merge command-line overrides into the file (or default) config."""
    if args.config:
        config = RecorderConfig.load(Path(args.config))
    elif RecorderConfig.default_config_path().exists():
        config = RecorderConfig.load(RecorderConfig.default_config_path())
    else:
        config = RecorderConfig()
    overrides = {}
    if args.arm:
        overrides['arm_name'] = args.arm
    if args.velocity:
        overrides['position_cmd_mode'] = False
    if args.rate:
        overrides['record_rate_hz'] = args.rate
    return replace(config, **overrides)


def summary_table(path: Path) -> Table:
    """Summarize a written recording."""
    recording = read_recording(path)
    table = Table(title=str(path), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Joints", ", ".join(recording.joint_names))
    table.add_row("Command", recording.mode.name.lower())
    table.add_row("Samples", str(recording.num_samples))
    duration = recording.timestamps[-1] if recording.num_samples else 0.0
    table.add_row("Duration", f"{duration:.2f} s")
    return table


def main():
    """Main entry point for the command-line recorder."""
    console = Console()

    try:
        import rclpy
        from rclpy.executors import MultiThreadedExecutor
    except ImportError:
        console.print(
            "[red]Error:[/red] ROS 2 Python packages (rclpy) are not available.\n"
            "Make sure you have sourced the ROS 2 setup file and built your workspace.")
        sys.exit(1)

    from baxter_data_recorder.recorder_node import RecorderNode, default_recording_name

    parser = argparse.ArgumentParser(
        description="Record Baxter joint states and commands to CSV.",
        epilog="Press Ctrl+C to stop recording and write the file.",
    )
    parser.add_argument(
        "file", nargs="?", default="",
        help="Output CSV (relative names go under output_dir; auto-named if omitted)")
    parser.add_argument("--config", default="", help="Recorder config YAML file")
    parser.add_argument("--arm", default="", help="Arm name (left or right)")
    parser.add_argument(
        "--velocity", action="store_true",
        help="Record velocity commands instead of position commands")
    parser.add_argument("--rate", type=float, default=0.0, help="Record rate in Hz")
    parser.add_argument(
        "--wait", type=float, default=None,
        help="Seconds to wait for the first joint state (default: forever)")
    args = parser.parse_args()

    try:
        config = build_config(args)
    except (OSError, TypeError, ValueError) as e:
        console.print(f"[red]Error:[/red] invalid config: {e}")
        sys.exit(1)

    path = config.resolve_output_path(args.file or default_recording_name())

    rclpy.init()
    node = RecorderNode(config)
    executor = MultiThreadedExecutor()
    executor.add_node(node)
    spin_thread = threading.Thread(target=executor.spin, daemon=True)
    spin_thread.start()

    recorder = node.recorder
    ok = False
    try:
        with console.status(f"Waiting for joint states on {config.state_topic}..."):
            started = recorder.start(path, timeout=args.wait)
        if not started:
            console.print("[red]No joint states received, nothing recorded[/red]")
        else:
            with console.status("Recording... press Ctrl+C to stop") as status:
                while recorder.is_recording:
                    status.update(
                        f"Recording to {path}: {recorder.sample_count} samples "
                        f"(Ctrl+C to stop)")
                    time.sleep(0.2)
            # Stream went silent and the recorder stopped itself
            ok = bool(recorder.last_result)
    except KeyboardInterrupt:
        if recorder.is_recording:
            ok = recorder.stop()
        else:
            ok = bool(recorder.last_result)
    finally:
        executor.shutdown()
        node.destroy_node()
        rclpy.shutdown()

    if ok:
        console.print(summary_table(path))
    else:
        console.print("[yellow]No CSV written[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
