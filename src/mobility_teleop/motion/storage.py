"""Define durable storage for motion goals recorded to YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from mobility_teleop.errors import SegmentLoadError
from mobility_teleop.io.logging import log_error
from mobility_teleop.io.schemata import RecordedGoalSchema
from mobility_teleop.io.yaml_utils import export_yaml_data, load_yaml_data
from mobility_teleop.motion.goals import ControlState, MotionCommand, MotionGoal


class SegmentStorage(Protocol):
    """Persists motion goals so that recorded segments can be replayed."""

    def write(self, path: Path, goal: MotionGoal) -> bool:
        """Write the goal to the given path, returning True if it was saved."""
        ...

    def read(self, path: Path) -> MotionGoal:
        """Read a goal from the given path, raising `SegmentLoadError` on failure."""
        ...


def _control_state_to_data(setpoint: ControlState) -> dict[str, Any]:
    """Convert a setpoint into plain Python data suitable for export to YAML."""
    return {
        "when_s": float(setpoint.when_s),
        "position": [float(v) for v in setpoint.position],
        "orientation": [float(v) for v in setpoint.orientation],
        "linear_velocity": [float(v) for v in setpoint.linear_velocity],
        "angular_velocity": [float(v) for v in setpoint.angular_velocity],
        "linear_acceleration": [float(v) for v in setpoint.linear_acceleration],
        "angular_acceleration": [float(v) for v in setpoint.angular_acceleration],
    }


def goal_to_data(goal: MotionGoal) -> dict[str, Any]:
    """Convert a motion goal into a dictionary suitable for export to YAML.

    Target poses of MOVE goals are not stored; only the replayable segment is.
    """
    return {
        "command": goal.command.value,
        "flight_mode": goal.flight_mode,
        "segment": [_control_state_to_data(setpoint) for setpoint in goal.segment],
    }


def goal_from_data(data: Any) -> MotionGoal:
    """Construct a motion goal from data imported from YAML.

    :raises SegmentLoadError: If the data does not describe a valid recorded goal
    """
    try:
        schema = RecordedGoalSchema.model_validate(data)
    except ValidationError as error:
        raise SegmentLoadError(f"Invalid recorded goal: {error}") from error

    segment = tuple(
        ControlState(
            when_s=s.when_s,
            position=s.position,
            orientation=s.orientation,
            linear_velocity=s.linear_velocity,
            angular_velocity=s.angular_velocity,
            linear_acceleration=s.linear_acceleration,
            angular_acceleration=s.angular_acceleration,
        )
        for s in schema.segment
    )
    return MotionGoal(MotionCommand(schema.command), flight_mode=schema.flight_mode, segment=segment)


class YamlSegmentStorage:
    """Stores recorded motion goals as YAML files."""

    def write(self, path: Path, goal: MotionGoal) -> bool:
        """Write the goal to the given YAML file.

        :return: True if the goal was saved, False if writing failed
        """
        try:
            export_yaml_data(goal_to_data(goal), Path(path))
        except OSError as error:
            log_error(f"Could not write recorded goal to {path}: {error}")
            return False

        return True

    def read(self, path: Path) -> MotionGoal:
        """Read a recorded goal from the given YAML file.

        :raises SegmentLoadError: If the file is missing, unreadable, or invalid
        """
        try:
            data = load_yaml_data(Path(path), required_keys={"command"})
        except (OSError, RuntimeError, KeyError) as error:
            raise SegmentLoadError(f"Segment not loaded from file {path}: {error}") from error

        return goal_from_data(data)
