"""Define a command-line interface for dispatching teleop commands to simulated services."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from rich.markup import escape
from rich.table import Table

from mobility_teleop.actions import DispatchLoop
from mobility_teleop.config import TeleopRequest
from mobility_teleop.errors import ConfigurationError
from mobility_teleop.io.logging import console
from mobility_teleop.motion.goals import PIPELINES, MotionCommand
from mobility_teleop.motion.outcomes import RESPONSE_MESSAGES, TIMEOUT_MESSAGES
from mobility_teleop.orchestrator import Orchestrator
from mobility_teleop.simulator import simulate_robot


def render_option_tables() -> list[Table]:
    """Render tables listing the pipelines, commands, and outcome messages of the tool."""
    pipelines = Table(title="Localization pipelines (--loc)")
    pipelines.add_column("Name", style="cyan", no_wrap=True)
    pipelines.add_column("Description")
    for name, description in PIPELINES.items():
        pipelines.add_row(name, description)

    commands = Table(title="Motion commands")
    commands.add_column("Flag", style="cyan", no_wrap=True)
    commands.add_column("Command", style="bold")
    for command in MotionCommand:
        commands.add_row(f"--{command.value}", command.name)

    responses = Table(title="Motion outcomes")
    responses.add_column("Code", justify="right", style="cyan")
    responses.add_column("Response", style="bold")
    responses.add_column("Message", style="magenta")
    for response, message in RESPONSE_MESSAGES.items():
        responses.add_row(str(int(response)), response.name, message)
    for state, message in TIMEOUT_MESSAGES.items():
        responses.add_row("-", state.label, message)

    return [pipelines, commands, responses]


def build_request(options: dict[str, Any]) -> TeleopRequest:
    """Convert parsed command-line options into a validated teleop request.

    :raises ConfigurationError: If the options select an invalid intent or invalid timeouts
    """
    return TeleopRequest.validated(
        namespace=options["ns"],
        pipeline=options["loc"],
        flight_mode=options["mode"],
        move=options["move"],
        stop=options["stop"],
        idle=options["idle"],
        prep=options["prep"],
        exec_path=options["exec_path"],
        record_path=options["rec"],
        position=options["pos"],
        attitude=options["att"],
        wait_s=options["wait"],
        timeouts={
            "connect_s": options["connect"],
            "active_s": options["active"],
            "response_s": options["response"],
            "deadline_s": options["deadline"],
        },
        planner={
            "desired_vel": options["vel"],
            "desired_accel": options["accel"],
            "desired_omega": options["omega"],
            "desired_alpha": options["alpha"],
            "desired_rate": options["rate"],
            "planner": options["planner"],
            "enable_collision_checking": not options["nocollision"],
            "enable_validation": not options["novalidate"],
            "enable_bootstrapping": not options["nobootstrap"],
            "enable_immediate": not options["noimmediate"],
            "enable_timesync": options["timesync"],
            "enable_replanning": options["replan"],
            "enable_faceforward": options["ff"],
        },
    )


@click.command(name="mobility-teleop")
@click.option("--ns", default="", help="Robot namespace")
@click.option("--loc", default="", help="Localization pipeline (none, ml, ar, hr)")
@click.option("--mode", default="", help="Flight mode")
@click.option("--planner", default="trapezoidal", help="Path planning algorithm")
@click.option("--ff", is_flag=True, help="Plan in face-forward mode")
@click.option("--rate", default=1.0, help="Segment sampling rate")
@click.option("--vel", default=-1.0, help="Desired velocity")
@click.option("--accel", default=-1.0, help="Desired acceleration")
@click.option("--omega", default=-1.0, help="Desired angular velocity")
@click.option("--alpha", default=-1.0, help="Desired angular acceleration")
@click.option("--move", is_flag=True, help="Send move command")
@click.option("--stop", is_flag=True, help="Send stop command")
@click.option("--idle", is_flag=True, help="Send idle command")
@click.option("--prep", is_flag=True, help="Send prep command")
@click.option("--novalidate", is_flag=True, help="Don't validate the segment before running")
@click.option("--nocollision", is_flag=True, help="Don't check for collisions during action")
@click.option("--nobootstrap", is_flag=True, help="Don't move to the starting station on execute")
@click.option("--noimmediate", is_flag=True, help="Don't execute immediately")
@click.option("--replan", is_flag=True, help="Enable replanning")
@click.option("--timesync", is_flag=True, help="Enable time synchronization")
@click.option("--rec", type=click.Path(path_type=Path), help="Plan and record to this file")
@click.option("--exec", "exec_path", type=click.Path(path_type=Path), help="Execute a given segment")
@click.option("--pos", default="", help="Desired position in cartesian format 'X Y Z' (meters)")
@click.option("--att", default="", help="Desired attitude as 'angle X Y Z' (axis-angle) or 'yaw'")
@click.option("--wait", default=0.0, help="Defer move by given amount in seconds (needs --noimmediate)")
@click.option("--connect", default=30.0, help="Action connect timeout")
@click.option("--active", default=30.0, help="Action active timeout")
@click.option("--response", default=30.0, help="Action response timeout")
@click.option("--deadline", default=-1.0, help="Action deadline timeout")
@click.option("--list-options", is_flag=True, help="Print the available pipelines and outcomes.")
@click.option("--verbose", is_flag=True, help="Log diagnostic messages.")
def cli(list_options: bool, verbose: bool, **options: Any) -> None:
    """Send one localization or motion command to the (simulated) robot and report the result."""
    if list_options:
        for table in render_option_tables():
            console.print(table)
        return

    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)

    try:
        request = build_request(options)
    except ConfigurationError as error:
        console.print(f"[red]{escape(str(error))}[/]")
        sys.exit(1)

    loop = DispatchLoop()
    robot = simulate_robot(loop, namespace=request.namespace)
    orchestrator = Orchestrator(
        request,
        loop,
        robot.switch,
        robot.motion,
        robot.pose_provider,
        parameter_client=robot.parameter_client,
    )
    report = orchestrator.run()
    sys.exit(0 if report.success else 1)


def main(argv: Optional[list[str]] = None) -> None:
    """Run the teleop command-line interface."""
    cli.main(args=argv, prog_name="mobility-teleop")
