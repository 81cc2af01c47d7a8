"""Define Pydantic models for the configuration of one teleop run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from mobility_teleop.errors import ConfigurationError
from mobility_teleop.io.yaml_utils import load_yaml_data
from mobility_teleop.motion.goals import MotionCommand

ParameterValue = Union[bool, float, str]
"""Value of a named planner parameter."""


def _configuration_error(error: ValidationError) -> ConfigurationError:
    """Convert a Pydantic validation error into a configuration error with readable messages."""
    messages: List[str] = []
    for details in error.errors():
        ctx_error = details.get("ctx", {}).get("error")
        if ctx_error is not None:
            messages.append(str(ctx_error))
        else:
            location = ".".join(str(part) for part in details["loc"])
            messages.append(f"{location}: {details['msg']}")
    return ConfigurationError("; ".join(messages))


class ActionTimeouts(BaseModel):
    """Durations (seconds) of the timeouts shared by both action sessions."""

    connect_s: float = Field(default=30.0, description="Action connect timeout")
    active_s: float = Field(default=30.0, description="Action active timeout")
    response_s: float = Field(default=30.0, description="Action response timeout")
    deadline_s: float = Field(default=-1.0, description="Action deadline timeout (if positive)")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("connect_s", "active_s", "response_s")
    @classmethod
    def _must_be_positive(cls, value: float, info: ValidationInfo) -> float:
        if value <= 0.0:
            kind = str(info.field_name).removesuffix("_s")
            raise ValueError(f"Your {kind} timeout must be positive")
        return value

    @property
    def deadline_or_none(self) -> Optional[float]:
        """Retrieve the deadline timeout, or None if no deadline is enforced."""
        return self.deadline_s if self.deadline_s > 0 else None


class PlannerSettings(BaseModel):
    """Planner parameters applied before MOVE and EXEC commands.

    Numeric limits are only sent when positive, and the planner name only when non-empty.
    """

    desired_vel: float = -1.0
    desired_accel: float = -1.0
    desired_omega: float = -1.0
    desired_alpha: float = -1.0
    desired_rate: float = 1.0
    planner: str = "trapezoidal"
    enable_collision_checking: bool = True
    enable_validation: bool = True
    enable_bootstrapping: bool = True
    enable_immediate: bool = True
    enable_timesync: bool = False
    enable_replanning: bool = False
    enable_faceforward: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_parameters(self) -> Dict[str, ParameterValue]:
        """Collect the named parameters which should be sent to the planner."""
        parameters: Dict[str, ParameterValue] = {}
        for name in ("desired_vel", "desired_accel", "desired_omega", "desired_alpha"):
            value = getattr(self, name)
            if value > 0:
                parameters[name] = value
        if self.desired_rate > 0:
            parameters["desired_rate"] = self.desired_rate

        parameters["enable_collision_checking"] = self.enable_collision_checking
        parameters["enable_validation"] = self.enable_validation
        parameters["enable_bootstrapping"] = self.enable_bootstrapping
        parameters["enable_immediate"] = self.enable_immediate
        parameters["enable_timesync"] = self.enable_timesync
        parameters["enable_replanning"] = self.enable_replanning
        parameters["enable_faceforward"] = self.enable_faceforward

        if self.planner:
            parameters["planner"] = self.planner

        return parameters


class TeleopRequest(BaseModel):
    """Everything an operator specifies for one teleop run.

    A run may switch the localization pipeline, send one motion command, or both (the motion
        command follows a successful switch).
    """

    namespace: str = ""
    pipeline: str = Field(default="", description="Localization pipeline to switch to")
    flight_mode: str = ""
    move: bool = False
    stop: bool = False
    idle: bool = False
    prep: bool = False
    exec_path: Optional[Path] = Field(default=None, description="Execute a recorded segment")
    record_path: Optional[Path] = Field(default=None, description="Record the planned segment")
    position: str = Field(default="", description="Desired position 'X Y Z' (meters)")
    attitude: str = Field(default="", description="Desired attitude 'angle X Y Z' or 'yaw'")
    wait_s: float = Field(default=0.0, ge=0.0, description="Deferral (seconds) of a move")
    timeouts: ActionTimeouts = ActionTimeouts()
    planner: PlannerSettings = PlannerSettings()

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _check_single_intent(self) -> TeleopRequest:
        intents = sum([self.move, self.stop, self.idle, self.prep, self.exec_path is not None])
        if not self.pipeline and intents == 0:
            raise ValueError("You must specify one of -loc, -move, -stop, -idle, -prep, -exec")
        if intents > 1:
            raise ValueError("You can only specify one of -move, -stop, -idle, -prep, or -exec")
        return self

    @classmethod
    def validated(cls, **fields: Any) -> TeleopRequest:
        """Construct a request from the given fields.

        :raises ConfigurationError: If the intent selection or the timeouts are invalid
        """
        try:
            return cls.model_validate(fields)
        except ValidationError as error:
            raise _configuration_error(error) from error

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> TeleopRequest:
        """Load a request from a YAML file whose keys match the fields of this model."""
        data = load_yaml_data(yaml_path)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping of request fields in {yaml_path}")
        return cls.validated(**data)

    @property
    def motion_command(self) -> Optional[MotionCommand]:
        """Retrieve the selected motion command, or None if only a pipeline switch was requested."""
        if self.move:
            return MotionCommand.MOVE
        if self.stop:
            return MotionCommand.STOP
        if self.idle:
            return MotionCommand.IDLE
        if self.prep:
            return MotionCommand.PREP
        if self.exec_path is not None:
            return MotionCommand.EXEC
        return None

    @property
    def needs_reconfigure(self) -> bool:
        """Check whether the planner must be reconfigured before the command is sent."""
        return self.motion_command in (MotionCommand.MOVE, MotionCommand.EXEC)
