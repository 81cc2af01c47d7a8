"""Integration tests for sequencing the switch and motion sessions of a teleop run."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from mobility_teleop.actions import ActionState, ScriptedResponse, VirtualTimeLoop
from mobility_teleop.config import TeleopRequest
from mobility_teleop.errors import ConfigurationError
from mobility_teleop.motion import MotionCommand, MotionGoal, YamlSegmentStorage
from mobility_teleop.motion.outcomes import MotionResponse, OutcomeCategory
from mobility_teleop.orchestrator import Orchestrator
from mobility_teleop.simulator import SimulatedRobot, simulate_robot
from mobility_teleop.spatial import Point3D, Pose3D


def make_run(**fields: Any) -> tuple[Orchestrator, SimulatedRobot, VirtualTimeLoop]:
    """Create an orchestrator for the given request, driving a simulated robot in virtual time."""
    loop = VirtualTimeLoop()
    robot = simulate_robot(loop, live_pose=Pose3D.from_xyz_rpy(x=1.0, y=-1.0, z=0.5), step_s=1.0)
    orchestrator = Orchestrator(
        TeleopRequest.validated(**fields),
        loop,
        robot.switch,
        robot.motion,
        robot.pose_provider,
        parameter_client=robot.parameter_client,
    )
    return orchestrator, robot, loop


def test_pipeline_switch_only() -> None:
    """Verify that a pipeline-only request switches the pipeline and sends no motion goal."""
    # Arrange - Request a switch to the mapped-landmarks pipeline
    orchestrator, robot, _ = make_run(pipeline="ml")

    # Act - Run until the switch completes
    report = orchestrator.run()

    # Assert - Expect a successful switch and no motion goal
    assert report.success
    assert report.switch_state == ActionState.SUCCESS
    assert [goal.pipeline for goal in robot.switch.goals] == ["ml"]
    assert robot.motion.goals == []
    assert report.outcome is None


def test_failed_switch_prevents_motion() -> None:
    """Verify that a failed pipeline switch ends the run before the motion phase."""
    # Arrange - Request an unknown pipeline followed by a stop
    orchestrator, robot, _ = make_run(pipeline="gps", stop=True)

    # Act - Run until the switch fails
    report = orchestrator.run()

    # Assert - Expect the aborted switch to be reported and no motion goal sent
    assert not report.success
    assert report.switch_state == ActionState.ABORTED
    assert report.error == "Error: ABORTED"
    assert robot.motion.goals == []


def test_switch_success_starts_motion_phase() -> None:
    """Verify that a successful switch is followed by the requested motion command."""
    # Arrange - Request a switch followed by a move to a new position
    orchestrator, robot, _ = make_run(pipeline="ar", move=True, position="2 3 4")

    # Act - Run until the motion goal completes
    report = orchestrator.run()

    # Assert - Expect one switch goal, then one move goal which succeeded
    assert report.success
    assert report.switch_state == ActionState.SUCCESS
    assert len(robot.switch.goals) == 1
    assert len(robot.motion.goals) == 1
    assert robot.motion.goals[0].command == MotionCommand.MOVE
    assert report.outcome is not None
    assert report.outcome.message == "Motion succeeded"


def test_command_is_sent_once_despite_repeated_connected_notifications() -> None:
    """Verify that duplicate connected notifications never cause a second submission."""
    # Arrange - Both services repeat their connected notification several times
    orchestrator, robot, loop = make_run(pipeline="ml", move=True)
    assert orchestrator.start()
    for delay_s in (0.0, 0.0, 0.5, 1.5, 2.5):
        loop.call_later(delay_s, robot.switch.announce_connected)
        loop.call_later(delay_s, robot.motion.announce_connected)

    # Act - Dispatch every event of the run
    loop.run()

    # Assert - Expect exactly one goal per service
    assert len(robot.switch.goals) == 1
    assert len(robot.motion.goals) == 1
    assert orchestrator.report.success


def test_switch_connect_timeout_prevents_motion() -> None:
    """Verify that a switch service which never connects ends the run after the connect timeout."""
    # Arrange - The switch service never completes its handshake
    orchestrator, robot, loop = make_run(pipeline="ml", move=True)
    robot.switch.connect_delay_s = None

    # Act - Run until the connect timeout expires
    report = orchestrator.run()

    # Assert - Expect TIMEOUT_ON_CONNECT after the default 30 seconds, without any goals
    assert report.switch_state == ActionState.TIMEOUT_ON_CONNECT
    assert loop.time() == pytest.approx(30.0)
    assert robot.switch.goals == []
    assert robot.motion.goals == []
    assert not report.success


def test_motion_connect_timeout_is_reported_as_outcome() -> None:
    """Verify that a motion service which never connects yields a timeout outcome."""
    # Arrange - The motion service never completes its handshake
    orchestrator, robot, _ = make_run(stop=True, timeouts={"connect_s": 5.0})
    robot.motion.connect_delay_s = None

    # Act - Run until the connect timeout expires
    report = orchestrator.run()

    # Assert - Expect a timeout outcome without a response code
    assert report.outcome is not None
    assert report.outcome.category == OutcomeCategory.TIMEOUT
    assert report.outcome.message == "Timeout on connecting to action"
    assert report.outcome.response is None
    assert robot.motion.goals == []


def test_move_resolves_target_from_live_pose() -> None:
    """Verify that a move keeps unspecified coordinates and defers the target by the wait."""
    # Arrange - Override only x and y, and defer the move by two seconds
    orchestrator, robot, _ = make_run(move=True, position="5 6", wait_s=2.0)

    # Act - Run until the motion goal completes
    report = orchestrator.run()

    # Assert - Expect the live z coordinate and orientation, stamped two seconds later
    assert report.success
    assert report.switch_state is None
    target = robot.motion.goals[0].states[0]
    assert target.pose.position.approx_equal(Point3D(5.0, 6.0, 0.5))
    assert target.pose.orientation.approx_equal(Pose3D.identity().orientation)
    assert target.stamp_s == pytest.approx(2.0)


def test_move_applies_planner_settings() -> None:
    """Verify that planner parameters are applied before a move is sent."""
    # Arrange - Request a move with a custom velocity limit
    orchestrator, robot, _ = make_run(move=True, planner={"desired_vel": 0.2, "planner": "qp"})

    # Act - Run until the motion goal completes
    orchestrator.run()

    # Assert - Expect the positive limit and the planner name to have been applied
    assert robot.parameter_client.applied["desired_vel"] == pytest.approx(0.2)
    assert robot.parameter_client.applied["planner"] == "qp"
    assert "desired_accel" not in robot.parameter_client.applied


def test_stop_does_not_reconfigure_planner() -> None:
    """Verify that commands other than MOVE and EXEC leave the planner untouched."""
    # Arrange - Request a stop
    orchestrator, robot, _ = make_run(stop=True)

    # Act - Run until the motion goal completes
    report = orchestrator.run()

    # Assert - Expect success without any applied parameters
    assert report.success
    assert report.outcome is not None
    assert report.outcome.response == MotionResponse.SUCCESS
    assert robot.parameter_client.applied == {}


def test_failed_reconfiguration_ends_run_before_connecting() -> None:
    """Verify that a refused reconfiguration ends the run before any session is created."""
    # Arrange - The planner refuses every reconfiguration
    orchestrator, robot, _ = make_run(move=True)
    robot.parameter_client.accept = False

    # Act - Attempt the run
    report = orchestrator.run()

    # Assert - Expect the reconfiguration error and untouched sessions
    assert report.error == "Could not reconfigure the choreographer node"
    assert orchestrator.switch_client.state == ActionState.DISCONNECTED
    assert robot.motion.goals == []


def test_move_requires_parameter_client() -> None:
    """Verify that MOVE and EXEC runs cannot be set up without a planner parameter client."""
    # Arrange - Simulated services for a move request
    loop = VirtualTimeLoop()
    robot = simulate_robot(loop)
    request = TeleopRequest.validated(move=True)

    # Act/Assert - Expect a configuration error when no parameter client is given
    with pytest.raises(ConfigurationError):
        Orchestrator(request, loop, robot.switch, robot.motion, robot.pose_provider)


def test_malformed_attitude_aborts_without_goal() -> None:
    """Verify that an invalid attitude override ends the run without sending a goal."""
    # Arrange - An attitude override with two values
    orchestrator, robot, _ = make_run(move=True, attitude="1.0 2.0")

    # Act - Run until the goal resolution fails
    report = orchestrator.run()

    # Assert - Expect the format error and no motion goal
    assert report.error is not None
    assert "Four elements required" in report.error
    assert robot.motion.goals == []
    assert report.motion_goal is None


def test_unavailable_pose_aborts_without_goal() -> None:
    """Verify that a failed live pose lookup ends the run without sending a goal."""
    # Arrange - A namespace whose body frame is unknown to the simulated robot
    orchestrator, robot, _ = make_run(move=True, namespace="bumble")

    # Act - Run until the pose lookup fails
    report = orchestrator.run()

    # Assert - Expect an error and no motion goal
    assert report.error is not None
    assert "bumble/body" in report.error
    assert robot.motion.goals == []


def test_rejected_motion_goal_ends_run() -> None:
    """Verify that a motion goal declined by the service is reported as an error."""
    # Arrange - A motion service which declines every goal
    orchestrator, robot, _ = make_run(idle=True)
    robot.motion.handler = lambda goal: ScriptedResponse(accepted=False)

    # Act - Run until the submission fails
    report = orchestrator.run()

    # Assert - Expect the rejection to end the run
    assert report.error == "Mobility client did not accept goal"
    assert not report.success


def test_motion_response_timeout_is_reported() -> None:
    """Verify that a silent motion service yields the response timeout message."""
    # Arrange - A motion service which goes active but never responds
    orchestrator, robot, loop = make_run(prep=True, timeouts={"response_s": 4.0})
    robot.motion.handler = lambda goal: ScriptedResponse(state=None)

    # Act - Run until the response timeout expires
    report = orchestrator.run()

    # Assert - Expect a timeout measured from the goal going active at t=1
    assert report.outcome is not None
    assert report.outcome.state == ActionState.TIMEOUT_ON_RESPONSE
    assert report.outcome.message == "Timeout on receiving a response"
    assert loop.time() == pytest.approx(5.0)


def test_recorded_move_can_be_executed(tmp_path: Path) -> None:
    """Verify that a recorded move segment is saved and can then be replayed with EXEC."""
    # Arrange - Record a move performed in a named flight mode
    record_path = tmp_path / "segment.yaml"
    orchestrator, _, _ = make_run(move=True, position="0 0 1", flight_mode="quiet", record_path=record_path)

    # Act - Record the segment, then replay it in a new run
    recorded = orchestrator.run()
    replay, robot, _ = make_run(exec_path=record_path)
    replayed = replay.run()

    # Assert - Expect the segment to be saved and replayed in its recorded flight mode
    assert recorded.outcome is not None
    assert recorded.outcome.saved_to == record_path
    assert record_path.exists()
    assert replayed.success
    exec_goal = robot.motion.goals[0]
    assert exec_goal.command == MotionCommand.EXEC
    assert exec_goal.flight_mode == "quiet"
    assert len(exec_goal.segment) == 1
    assert exec_goal.segment[0].position == pytest.approx((0.0, 0.0, 1.0))


def test_empty_recorded_segment_is_aborted(tmp_path: Path) -> None:
    """Verify that executing an empty segment reports the service's detailed response."""
    # Arrange - Write a recorded goal without setpoints
    segment_path = tmp_path / "empty.yaml"
    assert YamlSegmentStorage().write(segment_path, MotionGoal(MotionCommand.EXEC))
    orchestrator, _, _ = make_run(exec_path=segment_path)

    # Act - Run until the motion service aborts
    report = orchestrator.run()

    # Assert - Expect the aborted outcome and its fixed message
    assert report.outcome is not None
    assert report.outcome.category == OutcomeCategory.ABORTED
    assert report.outcome.message == "Segment empty"
    assert not report.success


def test_missing_segment_file_aborts_without_goal(tmp_path: Path) -> None:
    """Verify that executing a nonexistent segment file ends the run without sending a goal."""
    # Arrange - Request execution of a file which doesn't exist
    orchestrator, robot, _ = make_run(exec_path=tmp_path / "missing.yaml")

    # Act - Run until loading the segment fails
    report = orchestrator.run()

    # Assert - Expect a load error and no motion goal
    assert report.error is not None
    assert report.error.startswith("Segment not loaded from file")
    assert robot.motion.goals == []


def test_error_with_bracketed_path_is_reported(tmp_path: Path) -> None:
    """Verify that error messages containing markup-like brackets are reported verbatim."""
    # Arrange - Request execution of a missing file whose path looks like a closing tag
    segment_path = tmp_path / "[/runs]" / "seg.yaml"
    orchestrator, robot, _ = make_run(exec_path=segment_path)

    # Act - Run until loading the segment fails
    report = orchestrator.run()

    # Assert - Expect the error (including the bracketed path) to end the run
    assert report.error is not None
    assert "[/runs]" in report.error
    assert robot.motion.goals == []
    assert not report.success
