"""Define the interface used to look up the live pose of the robot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from mobility_teleop.errors import PoseUnavailable
from mobility_teleop.io.logging import log_warning

if TYPE_CHECKING:
    from mobility_teleop.spatial import StampedPose


class PoseProvider(Protocol):
    """Answers the question "where is the robot now?"."""

    def lookup(self, world_frame: str, body_frame: str, when_s: Optional[float] = None) -> StampedPose:
        """Look up the pose of the body frame relative to the world frame.

        :param world_frame: Frame relative to which the pose is expressed
        :param body_frame: Frame whose pose is found
        :param when_s: Time (seconds) for which the pose is found (if None, use the latest data)
        :return: Stamped pose of the body frame w.r.t. the world frame
        :raises PoseUnavailable: If no recent transform exists
        """
        ...


class StaticPoseProvider:
    """A pose provider which reports a fixed pose for every body frame it knows about."""

    def __init__(self, poses: Optional[dict[str, StampedPose]] = None) -> None:
        """Initialize the provider with a map from body frame names to their stamped poses."""
        self.poses = dict(poses or {})

    def set_pose(self, body_frame: str, pose: StampedPose) -> None:
        """Set the pose reported for the named body frame."""
        self.poses[body_frame] = pose

    def lookup(self, world_frame: str, body_frame: str, when_s: Optional[float] = None) -> StampedPose:
        """Look up the stored pose of the body frame relative to the world frame."""
        stamped = self.poses.get(body_frame)
        if stamped is None or stamped.pose.ref_frame != world_frame:
            log_warning(f"Lookup of '{body_frame}' w.r.t. '{world_frame}' failed.")
            raise PoseUnavailable(f"No transform from '{world_frame}' to '{body_frame}'")
        return stamped
