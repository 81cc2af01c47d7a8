"""Classify the terminal outcome of a motion goal into operator-facing categories.

Timeouts carry no result payload, so they are categorized from the terminal state alone. Results
    with a payload (success, preempted, aborted) are explained by the service's detailed response
    code, each of which maps to one fixed message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from mobility_teleop.actions.states import ActionState
from mobility_teleop.io.logging import log_error, log_info
from mobility_teleop.motion.goals import MotionCommand, MotionGoal

if TYPE_CHECKING:
    from pathlib import Path

    from mobility_teleop.motion.goals import MotionResult, Segment
    from mobility_teleop.motion.storage import SegmentStorage


class MotionResponse(IntEnum):
    """Detailed response codes reported by the motion service."""

    ALREADY_THERE = 2
    SUCCESS = 1
    PREEMPTED = 0
    CANCELLED = -1
    PLAN_FAILED = -2
    VALIDATE_FAILED = -3
    CONTROL_FAILED = -4
    OBSTACLE_DETECTED = -5
    REPLAN_NOT_ENOUGH_TIME = -6
    REPLAN_FAILED = -7
    REVALIDATE_FAILED = -8
    NOT_IN_WAITING_MODE = -9
    INVALID_FLIGHT_MODE = -10
    UNEXPECTED_EMPTY_SEGMENT = -11
    COULD_NOT_RESAMPLE = -12
    UNEXPECTED_EMPTY_STATES = -13
    INVALID_COMMAND = -14
    CANNOT_QUERY_ROBOT_POSE = -15
    NOT_ON_FIRST_POSE = -16
    BAD_DESIRED_VELOCITY = -17
    BAD_DESIRED_ACCELERATION = -18
    BAD_DESIRED_OMEGA = -19
    BAD_DESIRED_ALPHA = -20
    BAD_DESIRED_RATE = -21
    TOLERANCE_VIOLATION_POSITION = -22
    TOLERANCE_VIOLATION_ATTITUDE = -23
    TOLERANCE_VIOLATION_VELOCITY = -24
    TOLERANCE_VIOLATION_OMEGA = -25


RESPONSE_MESSAGES: dict[MotionResponse, str] = {
    MotionResponse.ALREADY_THERE: "We are already at the location",
    MotionResponse.SUCCESS: "Motion succeeded",
    MotionResponse.CANCELLED: "Motion cancelled by callee",
    MotionResponse.PREEMPTED: "Motion preempted by thirdparty",
    MotionResponse.PLAN_FAILED: "Plan/bootstrap failed",
    MotionResponse.VALIDATE_FAILED: "Validate failed",
    MotionResponse.CONTROL_FAILED: "Control failed",
    MotionResponse.OBSTACLE_DETECTED: "Obstacle detected / replan disabled",
    MotionResponse.REPLAN_NOT_ENOUGH_TIME: "Obstacle and no time to replan",
    MotionResponse.REPLAN_FAILED: "Obstacle and replanning failed",
    MotionResponse.REVALIDATE_FAILED: "Obstacle and revalidating failed",
    MotionResponse.NOT_IN_WAITING_MODE: "Internal failure",
    MotionResponse.INVALID_FLIGHT_MODE: "Invalid flight mode specified",
    MotionResponse.UNEXPECTED_EMPTY_SEGMENT: "Segment empty",
    MotionResponse.COULD_NOT_RESAMPLE: "Could not resample segment",
    MotionResponse.UNEXPECTED_EMPTY_STATES: "State vector empty",
    MotionResponse.INVALID_COMMAND: "Command rejected",
    MotionResponse.CANNOT_QUERY_ROBOT_POSE: "Failed to find the current pose",
    MotionResponse.NOT_ON_FIRST_POSE: "Not on first pose / no bootstrapping",
    MotionResponse.BAD_DESIRED_VELOCITY: "Requested vel too high",
    MotionResponse.BAD_DESIRED_ACCELERATION: "Requested accel too high",
    MotionResponse.BAD_DESIRED_OMEGA: "Requested omega too high",
    MotionResponse.BAD_DESIRED_ALPHA: "Requested alpha too high",
    MotionResponse.BAD_DESIRED_RATE: "Requested rate too low",
    MotionResponse.TOLERANCE_VIOLATION_POSITION: "Position tolerance violated",
    MotionResponse.TOLERANCE_VIOLATION_ATTITUDE: "Attitude tolerance violated",
    MotionResponse.TOLERANCE_VIOLATION_VELOCITY: "Velocity tolerance violated",
    MotionResponse.TOLERANCE_VIOLATION_OMEGA: "Omega tolerance violated",
}

UNKNOWN_RESPONSE_MESSAGE = "Error: unknown"

TIMEOUT_MESSAGES: dict[ActionState, str] = {
    ActionState.TIMEOUT_ON_CONNECT: "Timeout on connecting to action",
    ActionState.TIMEOUT_ON_ACTIVE: "Timeout on action going active",
    ActionState.TIMEOUT_ON_RESPONSE: "Timeout on receiving a response",
    ActionState.TIMEOUT_ON_DEADLINE: "Timeout on result deadline",
}


class OutcomeCategory(Enum):
    """Operator-facing category of a terminal outcome."""

    SUCCESS = "success"
    PREEMPTED = "preempted"
    ABORTED = "aborted"
    TIMEOUT = "timeout"


CATEGORY_BY_STATE = {
    ActionState.SUCCESS: OutcomeCategory.SUCCESS,
    ActionState.PREEMPTED: OutcomeCategory.PREEMPTED,
    ActionState.ABORTED: OutcomeCategory.ABORTED,
}


def describe_response(response: int) -> str:
    """Map a detailed response code to its fixed message (unknown codes map to a generic one)."""
    try:
        return RESPONSE_MESSAGES[MotionResponse(response)]
    except ValueError:
        return UNKNOWN_RESPONSE_MESSAGE


@dataclass(frozen=True)
class Outcome:
    """The classified terminal outcome of a motion goal."""

    state: ActionState
    category: OutcomeCategory
    message: str
    response: int | None = None
    """Detailed response code (None for timeouts and for results without a payload)."""

    segment: Segment | None = None
    """Segment echoed by the service, if any."""

    saved_to: Path | None = None
    """Path to which the segment was recorded (None if it was not recorded)."""

    @property
    def success(self) -> bool:
        """Check whether the motion service reported success."""
        return self.category == OutcomeCategory.SUCCESS


class OutcomeClassifier:
    """Classifies motion outcomes and records successful segments when requested."""

    def __init__(
        self,
        flight_mode: str = "",
        record_path: Path | None = None,
        storage: SegmentStorage | None = None,
    ) -> None:
        """Initialize the classifier.

        :param flight_mode: Flight mode originally requested, stored alongside recorded segments
        :param record_path: Path to which successful segments are recorded (None = no recording)
        :param storage: Storage used to record segments (required if `record_path` is given)
        """
        if record_path is not None and storage is None:
            raise ValueError("Recording a segment requires a segment storage.")

        self.flight_mode = flight_mode
        self.record_path = record_path
        self.storage = storage

    def classify(self, state: ActionState, result: MotionResult | None) -> Outcome:
        """Classify the terminal state and (optional) result of a motion goal.

        :param state: Terminal state of the motion session
        :param result: Result payload (None for timeouts)
        :return: Classified outcome, including where the segment was recorded (if it was)
        """
        if state.is_timeout:
            return Outcome(state, OutcomeCategory.TIMEOUT, TIMEOUT_MESSAGES[state])

        if state not in CATEGORY_BY_STATE:
            raise ValueError(f"Cannot classify non-terminal state {state.label}")

        if result is None:
            message = f"Error: {state.label} reported without a result"
            return Outcome(state, CATEGORY_BY_STATE[state], message)

        saved_to = None
        if state == ActionState.SUCCESS and self.record_path is not None:
            saved_to = self._record(result.segment)

        return Outcome(
            state=state,
            category=CATEGORY_BY_STATE[state],
            message=describe_response(result.response),
            response=result.response,
            segment=result.segment,
            saved_to=saved_to,
        )

    def _record(self, segment: Segment) -> Path | None:
        """Write a replayable goal containing the segment, returning its path if it was saved."""
        if self.record_path is None or self.storage is None:
            return None

        goal = MotionGoal(MotionCommand.EXEC, flight_mode=self.flight_mode, segment=segment)
        if not self.storage.write(self.record_path, goal):
            log_error(f"Failed to record segment to {self.record_path}")
            return None

        log_info(f"Recorded segment of {len(segment)} setpoints to {self.record_path}")
        return self.record_path
