"""Resolve the target pose of a MOVE command from the live pose and operator overrides.

Position overrides give up to three values (X, Y, Z); each replaces the matching live coordinate.
Orientation overrides take one of two forms:

    - "angle X Y Z": an absolute orientation in axis-angle form (the axis need not be unit length)
    - "yaw": a desired heading, reached by rotating the live orientation about the world z-axis
        so that its roll and pitch are preserved
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import List

from mobility_teleop.errors import InvalidOrientationError, InvalidPositionError
from mobility_teleop.math import angle_difference
from mobility_teleop.spatial import Pose3D, Quaternion, StampedPose


def parse_values(text: str) -> List[float]:
    """Parse a whitespace-separated string of finite real numbers.

    :raises ValueError: If any token is not a finite real number
    """
    values = [float(token) for token in text.split()]
    if not all(math.isfinite(value) for value in values):
        raise ValueError(f"Expected finite values, got '{text}'")
    return values


def parse_position_override(text: str) -> List[float]:
    """Parse a position override of zero to three values, given in (X, Y, Z) order.

    :raises InvalidPositionError: If a value is not a number or more than three are given
    """
    try:
        values = parse_values(text)
    except ValueError as error:
        raise InvalidPositionError(f"Invalid position passed to -pos: '{text}'") from error

    if len(values) > 3:
        raise InvalidPositionError(
            f"Invalid position passed to -pos: at most three values allowed, got {len(values)}",
        )
    return values


def parse_orientation_override(text: str) -> List[float]:
    """Parse an orientation override of zero, one (yaw), or four (angle-axis) values.

    :raises InvalidOrientationError: If a value is not a number or the element count is invalid
    """
    try:
        values = parse_values(text)
    except ValueError as error:
        raise InvalidOrientationError(f"Invalid attitude passed to -att: '{text}'") from error

    if len(values) not in (0, 1, 4):
        raise InvalidOrientationError(
            "Invalid axis-angle format passed to -att. Four elements required. Aborting",
        )
    return values


def yaw_corrected(live: Quaternion, yaw_rad: float) -> Quaternion:
    """Rotate an orientation about the world z-axis so that its heading equals the given yaw.

    The heading is the azimuth of the body's forward axis projected onto the horizontal plane.
        Left-multiplying by a pure-yaw rotation leaves roll and pitch unchanged.

    :param live: Current orientation of the robot
    :param yaw_rad: Desired heading (radians)
    :return: Orientation with the desired heading and the live roll and pitch
    """
    delta_rad = angle_difference(yaw_rad, live.heading_rad())
    return Quaternion.from_yaw(delta_rad) * live


def resolve_orientation(live: Quaternion, values: List[float]) -> Quaternion:
    """Compute the target orientation from the live orientation and parsed override values.

    :raises InvalidOrientationError: If the override is malformed
    """
    if not values:
        return live

    if len(values) == 1:
        return yaw_corrected(live, values[0])

    if len(values) == 4:
        angle_rad, *axis = values
        try:
            return Quaternion.from_axis_angle(angle_rad, axis)
        except ValueError as error:
            raise InvalidOrientationError(str(error)) from error

    raise InvalidOrientationError(
        "Invalid axis-angle format passed to -att. Four elements required. Aborting",
    )


def resolve_target_pose(
    live: StampedPose,
    position: str = "",
    attitude: str = "",
    delay_s: float = 0.0,
) -> StampedPose:
    """Compute the stamped target pose of a MOVE command.

    :param live: Live pose of the robot, stamped with the time at which it was observed
    :param position: Position override string (e.g., "1.0 2.0")
    :param attitude: Orientation override string ("angle X Y Z" or "yaw")
    :param delay_s: Non-negative deferral (seconds) added to the live timestamp
    :return: Stamped target pose; nothing is produced if an override is malformed
    :raises GoalResolutionError: If either override is malformed
    """
    position_values = parse_position_override(position)
    orientation_values = parse_orientation_override(attitude)

    pose = live.pose
    target = Pose3D(
        position=pose.position.with_overrides(position_values),
        orientation=resolve_orientation(pose.orientation, orientation_values),
        ref_frame=pose.ref_frame,
    )
    return replace(live.deferred(delay_s), pose=target)
