"""Define classes to represent poses in 3D space, optionally stamped with a time."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from mobility_teleop.spatial.point3d import Point3D
from mobility_teleop.spatial.rotations import EulerRPY, Quaternion

WORLD_FRAME = "world"
"""Name of the fixed frame in which motion goals are expressed."""

BODY_FRAME = "body"
"""Name of the robot's body frame (prefixed by the robot namespace, if any)."""

XYZ_RPY = Tuple[float, float, float, float, float, float]
"""A 6-tuple of (x, y, z, roll, pitch, yaw) values."""


def body_frame_name(namespace: str = "") -> str:
    """Compute the name of the robot's body frame, given the robot namespace."""
    return BODY_FRAME if not namespace else f"{namespace}/{BODY_FRAME}"


@dataclass(frozen=True)
class Pose3D:
    """A position and orientation in 3D space."""

    position: Point3D
    orientation: Quaternion
    ref_frame: str = WORLD_FRAME

    def __str__(self) -> str:
        """Return a human-readable string representation of the Pose3D."""
        xyz_rpy = ", ".join(f"{value:.3f}" for value in self.to_xyz_rpy())
        return f'Pose3D([{xyz_rpy}], ref_frame="{self.ref_frame}")'

    @classmethod
    def identity(cls, ref_frame: str = WORLD_FRAME) -> Pose3D:
        """Construct a Pose3D corresponding to the identity transformation."""
        return Pose3D(Point3D.identity(), Quaternion.identity(), ref_frame)

    @classmethod
    def from_xyz_rpy(
        cls,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        roll_rad: float = 0.0,
        pitch_rad: float = 0.0,
        yaw_rad: float = 0.0,
        ref_frame: str = WORLD_FRAME,
    ) -> Pose3D:
        """Construct a Pose3D from the given XYZ coordinates and Euler RPY angles.

        :param x: Translation along the x-axis
        :param y: Translation along the y-axis
        :param z: Translation along the z-axis
        :param roll_rad: Fixed-frame roll angle (radians) about the x-axis
        :param pitch_rad: Fixed-frame pitch angle (radians) about the y-axis
        :param yaw_rad: Fixed-frame yaw angle (radians) about the z-axis
        :param ref_frame: Reference frame of the constructed pose
        :return: Constructed Pose3D instance
        """
        position = Point3D(x, y, z)
        orientation = EulerRPY(roll_rad, pitch_rad, yaw_rad).to_quaternion()

        return Pose3D(position, orientation, ref_frame)

    def to_xyz_rpy(self) -> XYZ_RPY:
        """Convert the pose into a tuple of its (x, y, z, roll, pitch, yaw) values."""
        return (*self.position.to_tuple(), *self.orientation.to_euler_rpy().to_tuple())

    def approx_equal(self, other: Pose3D, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Pose3D is approximately equal to this one."""
        return (
            self.ref_frame == other.ref_frame
            and self.position.approx_equal(other.position, rtol=rtol, atol=atol)
            and self.orientation.approx_equal(other.orientation, rtol=rtol, atol=atol)
        )


@dataclass(frozen=True)
class StampedPose:
    """A 3D pose associated with the time (seconds) at which it holds."""

    pose: Pose3D
    stamp_s: float

    def deferred(self, delay_s: float) -> StampedPose:
        """Return a copy of this pose with its timestamp pushed into the future.

        :param delay_s: Non-negative duration (seconds) added to the timestamp
        """
        if delay_s < 0:
            raise ValueError(f"Cannot defer a pose by a negative duration: {delay_s}")
        return replace(self, stamp_s=self.stamp_s + delay_s)
