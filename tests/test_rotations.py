"""Unit tests for classes representing 3D rotations and orientations."""

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from mobility_teleop.math import angle_difference
from mobility_teleop.spatial import EulerRPY, Quaternion

from .strategies.spatial_strategies import angles_rad, quaternions, rotation_axes


@given(angles_rad(), angles_rad())
def test_angle_difference_is_wrapped(a_rad: float, b_rad: float) -> None:
    """Verify that the difference between two angles is wrapped into [-pi, pi]."""
    # Arrange/Act - Compute the signed difference between two arbitrary angles
    diff_rad = angle_difference(a_rad, b_rad)

    # Assert - Expect the difference to be wrapped and to undo the subtraction
    assert -np.pi <= diff_rad <= np.pi
    assert np.cos(b_rad + diff_rad) == pytest.approx(np.cos(a_rad), abs=1e-6)
    assert np.sin(b_rad + diff_rad) == pytest.approx(np.sin(a_rad), abs=1e-6)


@given(quaternions())
def test_quaternion_to_euler_rpy_and_back(quat: Quaternion) -> None:
    """Verify that any Quaternion is unchanged after converting to and from Euler angles."""
    # Arrange/Act - Given a unit quaternion, convert to and from Euler RPY angles
    result_quat = quat.to_euler_rpy().to_quaternion()

    # Assert - Expect that the resulting quaternion equals the original (modulo negation)
    assert quat.approx_equal(result_quat, rtol=1e-05, atol=1e-08)


def test_zero_quaternion_raises_error() -> None:
    """Verify that attempting to construct an all-zero Quaternion raises a ValueError."""
    # Arrange/Act/Assert - Expect that constructing an all-zero Quaternion will raise an error
    with pytest.raises(ValueError, match="zero"):
        _ = Quaternion(0.0, 0.0, 0.0, 0.0)


@given(angles_rad(), rotation_axes(), st.floats(min_value=0.01, max_value=100.0))
def test_axis_angle_matches_closed_form(
    angle_rad: float,
    axis: tuple[float, float, float],
    scale: float,
) -> None:
    """Verify that axis-angle conversion matches the closed form, for any axis length."""
    # Arrange - Compute the closed-form quaternion using a unit-length axis
    unit_axis = np.array(axis) / np.linalg.norm(axis)
    half_rad = 0.5 * angle_rad
    expected = Quaternion(*(np.sin(half_rad) * unit_axis), w=np.cos(half_rad))

    # Act - Convert the same rotation using the raw axis and a rescaled axis
    from_raw = Quaternion.from_axis_angle(angle_rad, axis)
    from_scaled = Quaternion.from_axis_angle(angle_rad, [scale * v for v in axis])

    # Assert - Expect unit quaternions equal to the closed-form conversion
    assert np.linalg.norm(from_raw.to_array()) == pytest.approx(1.0)
    assert from_raw.approx_equal(expected, atol=1e-07)
    assert from_scaled.approx_equal(expected, atol=1e-07)


def test_axis_angle_with_zero_axis_raises_error() -> None:
    """Verify that a rotation about a zero-length axis is rejected."""
    # Arrange/Act/Assert - Expect a ValueError for an axis without a direction
    with pytest.raises(ValueError, match="zero-length"):
        Quaternion.from_axis_angle(1.0, [0.0, 0.0, 0.0])


@given(angles_rad())
def test_pure_yaw_heading(yaw_rad: float) -> None:
    """Verify that a pure-yaw quaternion has a heading equal to its yaw (modulo 2*pi)."""
    # Arrange/Act - Construct a rotation about the world z-axis and compute its heading
    heading_rad = Quaternion.from_yaw(yaw_rad).heading_rad()

    # Assert - Expect the heading to match the yaw, with a horizontal forward axis
    assert angle_difference(heading_rad, yaw_rad) == pytest.approx(0.0, abs=1e-7)


def test_heading_of_vertical_forward_axis_is_zero() -> None:
    """Verify that the heading is zero when the forward axis points straight up."""
    # Arrange - Pitch the body so that its forward axis points along world +z
    pitched_up = EulerRPY(0.0, -np.pi / 2, 0.7).to_quaternion()

    # Act/Assert - The projected forward axis vanishes, so the heading falls back to zero
    assert pitched_up.heading_rad() == pytest.approx(0.0, abs=1e-6)


def test_hamilton_product_composes_rotations() -> None:
    """Verify that multiplying two yaw rotations adds their angles."""
    # Arrange - Two rotations about the world z-axis
    first = Quaternion.from_yaw(0.3)
    second = Quaternion.from_yaw(0.4)

    # Act/Assert - Expect their product to rotate by the sum of the angles
    assert (second * first).approx_equal(Quaternion.from_yaw(0.7))
