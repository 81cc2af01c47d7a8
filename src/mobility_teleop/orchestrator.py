"""Sequence the switch and motion action sessions of one teleop run.

Both sessions connect independently. Whichever connects second triggers the command: either a
    pipeline switch, whose success starts the motion phase, or (without a switch) the motion phase
    directly. The run ends when a terminal result has been reported or a goal cannot be sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from rich.markup import escape

from mobility_teleop.actions import ActionClient, ActionState
from mobility_teleop.errors import ConfigurationError, GoalResolutionError, ReconfigureError
from mobility_teleop.io.logging import console, log_error, log_info
from mobility_teleop.motion import GoalBuilder, OutcomeClassifier, SwitchGoal, YamlSegmentStorage
from mobility_teleop.motion.feedback import format_motion_feedback
from mobility_teleop.reconfigure import apply_planner_settings

if TYPE_CHECKING:
    from mobility_teleop.actions import ActionTransport, DispatchLoop
    from mobility_teleop.config import TeleopRequest
    from mobility_teleop.motion import MotionFeedback, MotionGoal, MotionResult, Outcome
    from mobility_teleop.motion import SwitchResult
    from mobility_teleop.motion.storage import SegmentStorage
    from mobility_teleop.pose_lookup import PoseProvider
    from mobility_teleop.reconfigure import ParameterClient


@dataclass
class RunReport:
    """What happened during one teleop run."""

    switch_state: Optional[ActionState] = None
    """Terminal state of the pipeline switch (None if no switch was performed)."""

    motion_goal: Optional[MotionGoal] = None
    """Motion goal accepted by the motion service (None if none was sent)."""

    outcome: Optional[Outcome] = None
    """Classified outcome of the motion goal (None if it never ended)."""

    error: Optional[str] = None
    """Reason the run failed before a motion outcome was reached, if any."""

    @property
    def success(self) -> bool:
        """Check whether the requested command completed successfully."""
        if self.error is not None:
            return False
        if self.outcome is not None:
            return self.outcome.success
        return self.switch_state == ActionState.SUCCESS


class Orchestrator:
    """Owns the switch and motion sessions of one run and issues the requested command once."""

    def __init__(
        self,
        request: TeleopRequest,
        loop: DispatchLoop,
        switch_transport: ActionTransport[SwitchGoal],
        motion_transport: ActionTransport[MotionGoal],
        pose_provider: PoseProvider,
        storage: Optional[SegmentStorage] = None,
        parameter_client: Optional[ParameterClient] = None,
    ) -> None:
        """Initialize the orchestrator of a run.

        :param request: Validated operator request (exactly one intent)
        :param loop: Single-threaded loop on which every session callback runs
        :param switch_transport: Connection to the localization switch service
        :param motion_transport: Connection to the motion service
        :param pose_provider: Source of the robot's live pose (used by MOVE commands)
        :param storage: Storage for recorded segments (defaults to YAML files)
        :param parameter_client: Client used to apply planner settings (required by MOVE/EXEC)
        :raises ConfigurationError: If the planner must be reconfigured but no client is given
        """
        if request.needs_reconfigure and parameter_client is None:
            raise ConfigurationError("A planner parameter client is required for MOVE and EXEC.")

        self.request = request
        self._loop = loop
        self._parameter_client = parameter_client
        storage = storage if storage is not None else YamlSegmentStorage()

        self.switch_client: ActionClient[SwitchGoal, None, SwitchResult] = ActionClient(
            loop,
            switch_transport,
        )
        self.motion_client: ActionClient[MotionGoal, MotionFeedback, MotionResult] = ActionClient(
            loop,
            motion_transport,
        )

        self.goal_builder = GoalBuilder(request, pose_provider, storage)
        self.classifier = OutcomeClassifier(request.flight_mode, request.record_path, storage)

        self.report = RunReport()
        self._sent = False  # Set once the command has been issued; never reset within a run
        self._feedback_shown = False

    def run(self) -> RunReport:
        """Start both sessions and dispatch their events until the run has ended."""
        if self.start():
            self._loop.run()
        return self.report

    def start(self) -> bool:
        """Apply planner settings (if needed), then configure and create both sessions.

        :return: True if the sessions were created, False if the run already failed
        """
        if self.request.needs_reconfigure and self._parameter_client is not None:
            try:
                apply_planner_settings(self._parameter_client, self.request.planner)
            except ReconfigureError as error:
                self._fail(str(error))
                return False

        timeouts = self.request.timeouts
        for client in (self.switch_client, self.motion_client):
            client.configure(
                timeouts.connect_s,
                timeouts.active_s,
                timeouts.response_s,
                timeouts.deadline_or_none,
            )
            client.on_connected(self._on_connected)

        self.switch_client.on_result(self._on_switch_result)
        self.motion_client.on_feedback(self._on_motion_feedback)
        self.motion_client.on_result(self._on_motion_result)

        self.switch_client.create()
        self.motion_client.create()
        return True

    def _on_connected(self) -> None:
        """Issue the command once both sessions are connected (ignores repeat notifications)."""
        if not (self.switch_client.is_connected() and self.motion_client.is_connected()):
            return
        if self._sent:
            return
        self._sent = True

        console.print("All actions connected. Sending command...")
        if self.request.pipeline:
            if not self.switch_client.submit(SwitchGoal(self.request.pipeline)):
                self._fail("Switch client did not accept goal")
            return

        self._on_switch_result(ActionState.SUCCESS, None)  # Nothing to switch; proceed directly

    def _on_switch_result(self, state: ActionState, result: Optional[SwitchResult]) -> None:
        """Start the motion phase after a successful switch, or end the run on failure."""
        if self.request.pipeline:
            self.report.switch_state = state
            if result is not None:
                log_info(f"Switch service responded with code {result.response}")

        if state != ActionState.SUCCESS:
            self._fail(f"Error: {state.label}")
            return

        if self.request.pipeline:
            pipeline = escape(self.request.pipeline)
            console.print(f"[green]Switched localization pipeline to '{pipeline}'[/]")
            if self.request.motion_command is None:
                self._loop.shutdown()
                return

        self._begin_motion_phase()

    def _begin_motion_phase(self) -> None:
        """Build the motion goal and send it to the motion service."""
        try:
            goal = self.goal_builder.build()
        except GoalResolutionError as error:
            self._fail(str(error))
            return

        if not self.motion_client.submit(goal):
            self._fail("Mobility client did not accept goal")
            return

        self.report.motion_goal = goal
        log_info(f"Sent {goal.command.name} goal to '{self.motion_client.name}'")

    def _on_motion_feedback(self, feedback: MotionFeedback) -> None:
        console.print(escape(format_motion_feedback(feedback)), end="\r")
        self._feedback_shown = True

    def _on_motion_result(self, state: ActionState, result: Optional[MotionResult]) -> None:
        """Classify and report the outcome of the motion goal, then end the run."""
        if self._feedback_shown:
            console.print()

        outcome = self.classifier.classify(state, result)
        self.report.outcome = outcome

        if outcome.success and self.request.record_path is not None:
            if outcome.saved_to is not None:
                console.print(f"Segment saved to {escape(str(outcome.saved_to))}")
            else:
                console.print("[yellow]Segment not saved[/]")

        if outcome.response is None:
            console.print(f"[red]{escape(outcome.message)}[/]")
        else:
            color = "green" if outcome.success else "red"
            console.print(f"Result: [{color}]{escape(outcome.message)}[/]")

        self._loop.shutdown()

    def _fail(self, message: str) -> None:
        """Report an error which ends the run."""
        log_error(message)
        console.print(f"[red]{escape(message)}[/]")
        if self.report.error is None:
            self.report.error = message
        self._loop.shutdown()
