"""Define a class to represent positions in 3D space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray


@dataclass(frozen=True)
class Point3D:
    """An (x,y,z) position in 3D space."""

    x: float
    y: float
    z: float

    @classmethod
    def identity(cls) -> Point3D:
        """Construct a Point3D corresponding to the identity translation."""
        return Point3D(0.0, 0.0, 0.0)

    def to_array(self) -> NDArray[np.float64]:
        """Convert the 3D point to a NumPy array."""
        return np.array([self.x, self.y, self.z])

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert the 3D point into an (x,y,z) tuple."""
        return (float(self.x), float(self.y), float(self.z))

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Point3D:
        """Construct a Point3D instance from a sequence (e.g., list or tuple) of values."""
        if len(values) != 3:
            raise ValueError(f"Point3D expects 3 values, got {len(values)}")
        return Point3D(float(values[0]), float(values[1]), float(values[2]))

    def with_overrides(self, values: Sequence[float]) -> Point3D:
        """Replace the leading coordinates of the point with the given values, in (x,y,z) order.

        :param values: Between zero and three values; coordinates without a value are retained
        :return: New point with the overridden coordinates
        """
        if len(values) > 3:
            raise ValueError(f"Point3D accepts at most 3 override values, got {len(values)}")

        coords = list(self.to_tuple())
        coords[: len(values)] = [float(v) for v in values]
        return Point3D.from_sequence(coords)

    def approx_equal(self, other: Point3D, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Point3D is approximately equal to this one."""
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=rtol, atol=atol))
