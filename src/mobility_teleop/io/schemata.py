"""Define Pydantic models for validating recorded segment files."""

from __future__ import annotations

from typing import List, Literal, Tuple

from pydantic import BaseModel, ConfigDict

# =============================================================================
# Segment Schemata
# =============================================================================

Vector3Schema = Tuple[float, float, float]
"""A three-tuple of floats representing a 3D vector."""

QuaternionSchema = Tuple[float, float, float, float]
"""A four-tuple of floats representing a quaternion as (x, y, z, w)."""


class ControlStateSchema(BaseModel):
    """Schema for one timed setpoint of a recorded segment."""

    when_s: float
    position: Vector3Schema
    orientation: QuaternionSchema
    linear_velocity: Vector3Schema = (0.0, 0.0, 0.0)
    angular_velocity: Vector3Schema = (0.0, 0.0, 0.0)
    linear_acceleration: Vector3Schema = (0.0, 0.0, 0.0)
    angular_acceleration: Vector3Schema = (0.0, 0.0, 0.0)

    model_config = ConfigDict(extra="forbid")


class RecordedGoalSchema(BaseModel):
    """Schema for a motion goal recorded to file so that it can be replayed."""

    command: Literal["idle", "stop", "prep", "move", "exec"]
    flight_mode: str = ""
    segment: List[ControlStateSchema] = []

    model_config = ConfigDict(extra="forbid")
