"""Build the motion goal requested by an operator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mobility_teleop.io.logging import log_info
from mobility_teleop.motion.goal_geometry import resolve_target_pose
from mobility_teleop.motion.goals import MotionCommand, MotionGoal
from mobility_teleop.spatial import WORLD_FRAME, body_frame_name

if TYPE_CHECKING:
    from mobility_teleop.config import TeleopRequest
    from mobility_teleop.motion.storage import SegmentStorage
    from mobility_teleop.pose_lookup import PoseProvider


class GoalBuilder:
    """Constructs the single motion goal of a run from the operator's request."""

    def __init__(
        self,
        request: TeleopRequest,
        pose_provider: PoseProvider,
        storage: SegmentStorage,
    ) -> None:
        """Initialize the builder with the collaborators used to resolve the goal."""
        self.request = request
        self.pose_provider = pose_provider
        self.storage = storage

    def build(self) -> MotionGoal:
        """Build the motion goal; no goal is produced if any part of it cannot be resolved.

        :raises GoalResolutionError: If an override is malformed, the live pose is unavailable,
            or the recorded segment cannot be read
        """
        command = self.request.motion_command
        if command is None:
            raise ValueError("Cannot build a motion goal for a request without a motion command.")

        if command == MotionCommand.MOVE:
            return self._build_move()

        if command == MotionCommand.EXEC and self.request.exec_path is not None:
            goal = self.storage.read(self.request.exec_path)
            log_info(f"Loaded {len(goal.segment)} setpoints from {self.request.exec_path}")
            return goal

        return MotionGoal(command, flight_mode=self.request.flight_mode)

    def _build_move(self) -> MotionGoal:
        """Build a MOVE goal towards the pose resolved from the live pose and the overrides."""
        body_frame = body_frame_name(self.request.namespace)
        live = self.pose_provider.lookup(WORLD_FRAME, body_frame)
        target = resolve_target_pose(
            live,
            position=self.request.position,
            attitude=self.request.attitude,
            delay_s=self.request.wait_s,
        )
        log_info(f"Resolved target pose {target.pose} at t={target.stamp_s:.3f} s")
        return MotionGoal(MotionCommand.MOVE, flight_mode=self.request.flight_mode, states=(target,))
