"""Define simulated switch and motion services, used when no robot is available."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mobility_teleop.actions import ActionState, ScriptedResponse, SimulatedActionServer
from mobility_teleop.motion.goals import (
    PIPELINES,
    ControlState,
    MotionCommand,
    MotionFeedback,
    MotionGoal,
    MotionProgress,
    MotionResult,
    MotionState,
    SwitchGoal,
    SwitchResult,
)
from mobility_teleop.motion.outcomes import MotionResponse
from mobility_teleop.pose_lookup import StaticPoseProvider
from mobility_teleop.reconfigure import InMemoryParameterClient
from mobility_teleop.spatial import Pose3D, StampedPose, body_frame_name

if TYPE_CHECKING:
    from mobility_teleop.actions import DispatchLoop

SWITCH_ACTION = "localization/switch"
MOTION_ACTION = "mobility/motion"


def handle_switch_goal(goal: SwitchGoal) -> ScriptedResponse:
    """Succeed when switching to a known pipeline, otherwise abort."""
    if goal.pipeline not in PIPELINES:
        return ScriptedResponse(state=ActionState.ABORTED, result=SwitchResult(response=-1))
    return ScriptedResponse(state=ActionState.SUCCESS, result=SwitchResult(response=1))


def _setpoint_from_pose(stamped: StampedPose) -> ControlState:
    """Construct a stationary setpoint at the given stamped pose."""
    return ControlState(
        when_s=stamped.stamp_s,
        position=stamped.pose.position.to_tuple(),
        orientation=stamped.pose.orientation.to_tuple(),
    )


def handle_motion_goal(goal: MotionGoal) -> ScriptedResponse:
    """Track MOVE and EXEC goals with converging errors, and complete other commands at once."""
    if goal.command == MotionCommand.MOVE:
        if not goal.states:
            return ScriptedResponse(
                state=ActionState.ABORTED,
                result=MotionResult(MotionResponse.UNEXPECTED_EMPTY_STATES),
            )
        segment = tuple(_setpoint_from_pose(stamped) for stamped in goal.states)
    elif goal.command == MotionCommand.EXEC:
        if not goal.segment:
            return ScriptedResponse(
                state=ActionState.ABORTED,
                result=MotionResult(MotionResponse.UNEXPECTED_EMPTY_SEGMENT),
            )
        segment = goal.segment
    else:
        return ScriptedResponse(state=ActionState.SUCCESS, result=MotionResult(MotionResponse.SUCCESS))

    feedback = [MotionFeedback(MotionState.PLANNING)]
    for error in (0.1, 0.05, 0.01):
        progress = MotionProgress(error, error, error, error)
        feedback.append(MotionFeedback(MotionState.CONTROLLING, progress))

    return ScriptedResponse(
        feedback=feedback,
        state=ActionState.SUCCESS,
        result=MotionResult(MotionResponse.SUCCESS, segment=segment, flight_mode=goal.flight_mode),
    )


@dataclass
class SimulatedRobot:
    """Simulated services and collaborators for one run."""

    switch: SimulatedActionServer[SwitchGoal, None, SwitchResult]
    motion: SimulatedActionServer[MotionGoal, MotionFeedback, MotionResult]
    pose_provider: StaticPoseProvider
    parameter_client: InMemoryParameterClient


def simulate_robot(
    loop: DispatchLoop,
    namespace: str = "",
    live_pose: Pose3D | None = None,
    step_s: float = 0.1,
) -> SimulatedRobot:
    """Create simulated services for a robot resting at the given pose (defaults to identity).

    :param loop: Loop on which the simulated services emit their events
    :param namespace: Robot namespace (determines the name of the body frame)
    :param live_pose: Pose of the robot w.r.t. the world frame
    :param step_s: Interval (seconds) between consecutive simulated events
    """
    pose = live_pose if live_pose is not None else Pose3D.identity()
    pose_provider = StaticPoseProvider()
    pose_provider.set_pose(body_frame_name(namespace), StampedPose(pose, loop.time()))

    return SimulatedRobot(
        switch=SimulatedActionServer(SWITCH_ACTION, loop, handle_switch_goal, step_s=step_s),
        motion=SimulatedActionServer(MOTION_ACTION, loop, handle_motion_goal, step_s=step_s),
        pose_provider=pose_provider,
        parameter_client=InMemoryParameterClient(),
    )
