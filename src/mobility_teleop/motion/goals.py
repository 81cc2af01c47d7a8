"""Define the goals, feedback, and results exchanged with the switch and motion services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple

from mobility_teleop.spatial import StampedPose

Vector3 = Tuple[float, float, float]
QuaternionXYZW = Tuple[float, float, float, float]

PIPELINES = {
    "none": "No localization",
    "ml": "Mapped landmarks (vision-based)",
    "ar": "AR tags",
    "hr": "Handrail",
}
"""Localization pipelines known to the switch service, with human-readable descriptions."""


class MotionCommand(Enum):
    """Commands understood by the motion service."""

    IDLE = "idle"
    STOP = "stop"
    PREP = "prep"
    MOVE = "move"
    EXEC = "exec"


class MotionState(IntEnum):
    """Internal states reported by the motion service in its feedback."""

    INITIALIZING = 0
    IDLING = 1
    STOPPING = 2
    WAITING = 3
    WAITING_FOR_STOP = 4
    PREPPING = 5
    BOOTSTRAPPING = 6
    PLANNING = 7
    VALIDATING = 8
    PREPARING = 9
    CONTROLLING = 10
    REPLANNING = 11
    REVALIDATING = 12


@dataclass(frozen=True)
class SwitchGoal:
    """Request that the robot switch its localization pipeline."""

    pipeline: str


@dataclass(frozen=True)
class SwitchResult:
    """Result reported by the switch service."""

    response: int = 0


@dataclass(frozen=True)
class ControlState:
    """One timed setpoint of a recorded segment (orientation given as x,y,z,w)."""

    when_s: float
    position: Vector3
    orientation: QuaternionXYZW
    linear_velocity: Vector3 = (0.0, 0.0, 0.0)
    angular_velocity: Vector3 = (0.0, 0.0, 0.0)
    linear_acceleration: Vector3 = (0.0, 0.0, 0.0)
    angular_acceleration: Vector3 = (0.0, 0.0, 0.0)


Segment = Tuple[ControlState, ...]
"""A sequence of setpoints which can be replayed by the motion service."""


@dataclass(frozen=True)
class MotionGoal:
    """A command sent to the motion service.

    MOVE goals carry the stamped target poses in `states`; EXEC goals carry a recorded `segment`.
    """

    command: MotionCommand
    flight_mode: str = ""
    states: Tuple[StampedPose, ...] = ()
    segment: Segment = ()


@dataclass(frozen=True)
class MotionProgress:
    """Tracking errors of the robot relative to its current setpoint."""

    error_position: float = 0.0
    """Position error (meters)."""

    error_attitude: float = 0.0
    """Attitude error (radians)."""

    error_velocity: float = 0.0
    """Velocity error (meters per second)."""

    error_omega: float = 0.0
    """Angular velocity error (radians per second)."""


@dataclass(frozen=True)
class MotionFeedback:
    """Feedback emitted by the motion service while a goal is active."""

    state: int
    progress: MotionProgress = MotionProgress()


@dataclass(frozen=True)
class MotionResult:
    """Result reported by the motion service, echoing the segment it planned or executed."""

    response: int
    segment: Segment = ()
    flight_mode: str = ""
