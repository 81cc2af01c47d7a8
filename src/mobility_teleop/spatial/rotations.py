"""Define classes to represent 3D rotations and orientations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from pyquaternion import Quaternion as Q
from trimesh.transformations import (
    euler_from_quaternion,
    quaternion_from_euler,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

FORWARD_AXIS = np.array([1.0, 0.0, 0.0])
"""Forward (x) axis of a body frame, expressed in that body frame."""

VERTICAL_TOLERANCE = 1e-9
"""Horizontal length below which a projected forward axis is considered vertical."""


@dataclass(frozen=True)
class EulerRPY:
    """A 3D rotation represented using three fixed-frame Euler angles."""

    roll_rad: float
    pitch_rad: float
    yaw_rad: float

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert the Euler angles into a (roll, pitch, yaw) tuple."""
        return (float(self.roll_rad), float(self.pitch_rad), float(self.yaw_rad))

    def to_quaternion(self) -> Quaternion:
        """Convert the Euler angles into an equivalent unit quaternion."""
        w, x, y, z = quaternion_from_euler(self.roll_rad, self.pitch_rad, self.yaw_rad, axes="sxyz")
        return Quaternion(x=x, y=y, z=z, w=w)


@dataclass(frozen=True)
class Quaternion:
    """A unit quaternion representing a 3D orientation."""

    x: float
    y: float
    z: float
    w: float

    def __post_init__(self) -> None:
        """Normalize the quaternion after it is initialized."""
        norm = float(np.linalg.norm([self.x, self.y, self.z, self.w]))
        if norm == 0 or not np.isfinite(norm):
            raise ValueError(f"Cannot normalize a zero-valued or non-finite quaternion: {self}")

        object.__setattr__(self, "x", float(self.x) / norm)
        object.__setattr__(self, "y", float(self.y) / norm)
        object.__setattr__(self, "z", float(self.z) / norm)
        object.__setattr__(self, "w", float(self.w) / norm)

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Return the Hamilton product of this quaternion and another.

        Reference: https://kieranwynn.github.io/pyquaternion/#quaternion-operations
        """
        if not isinstance(other, Quaternion):
            raise TypeError(f"Cannot multiply a Quaternion with a {type(other)}: {other}.")
        product = self._to_pyquaternion() * other._to_pyquaternion()
        return Quaternion(product.x, product.y, product.z, product.w)

    def _to_pyquaternion(self) -> Q:
        return Q(self.w, self.x, self.y, self.z)

    @classmethod
    def identity(cls) -> Quaternion:
        """Construct a Quaternion corresponding to the identity rotation."""
        return Quaternion(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, angle_rad: float, axis: Sequence[float]) -> Quaternion:
        """Construct a quaternion rotating by the given angle about the given axis.

        :param angle_rad: Rotation angle (radians) following the right-hand rule
        :param axis: Rotation axis (x,y,z); normalized before conversion
        :return: Unit quaternion equal to (cos(a/2), sin(a/2) * axis / |axis|)
        :raises ValueError: If the axis has zero length
        """
        axis_array = np.asarray(axis, dtype=float)
        if axis_array.shape != (3,):
            raise ValueError(f"Rotation axis must have 3 components, got {axis_array.shape}")

        try:
            q = Q(axis=axis_array, angle=float(angle_rad))
        except ZeroDivisionError as exc:
            raise ValueError(f"Cannot rotate about a zero-length axis: {list(axis)}") from exc

        return Quaternion(q.x, q.y, q.z, q.w)

    @classmethod
    def from_yaw(cls, yaw_rad: float) -> Quaternion:
        """Construct a quaternion representing a pure rotation about the world z-axis."""
        return Quaternion(0.0, 0.0, float(np.sin(0.5 * yaw_rad)), float(np.cos(0.5 * yaw_rad)))

    def to_array(self) -> NDArray[np.float64]:
        """Convert the quaternion to a NumPy array of the form [x,y,z,w]."""
        return np.array([self.x, self.y, self.z, self.w])

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert the quaternion into an (x,y,z,w) tuple."""
        return (self.x, self.y, self.z, self.w)

    def to_euler_rpy(self) -> EulerRPY:
        """Convert the quaternion into equivalent Euler roll, pitch, and yaw angles."""
        r, p, y = euler_from_quaternion(quaternion=[self.w, self.x, self.y, self.z], axes="sxyz")
        return EulerRPY(float(r), float(p), float(y))

    def rotate(self, vector: Sequence[float] | NDArray[np.float64]) -> NDArray[np.float64]:
        """Rotate the given 3-vector by this quaternion."""
        return np.asarray(self._to_pyquaternion().rotate(np.asarray(vector, dtype=float)))

    def forward_vector(self) -> NDArray[np.float64]:
        """Compute the body's forward (x) axis expressed in the reference frame."""
        return self.rotate(FORWARD_AXIS)

    def heading_rad(self) -> float:
        """Compute the azimuth (radians) of the forward axis projected onto the horizontal plane.

        When the forward axis points straight up or down, the heading is undefined and 0.0 is
            returned.
        """
        forward = self.forward_vector().copy()
        forward[2] = 0.0
        norm = float(np.linalg.norm(forward))
        if norm < VERTICAL_TOLERANCE:
            return 0.0

        forward /= norm
        return float(np.arctan2(forward[1], forward[0]))

    def approx_equal(self, other: Quaternion, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Quaternion is approximately equal to this one.

        Note: A quaternion is considered equal to its negation, as they express the same rotation.
        """
        self_array = self.to_array()
        other_array = other.to_array()

        return bool(
            np.allclose(self_array, other_array, rtol=rtol, atol=atol)
            or np.allclose(-self_array, other_array, rtol=rtol, atol=atol),
        )
