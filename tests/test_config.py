"""Unit tests for validating the configuration of teleop runs."""

from pathlib import Path

import pytest

from mobility_teleop.config import ActionTimeouts, PlannerSettings, TeleopRequest
from mobility_teleop.errors import ConfigurationError
from mobility_teleop.io.yaml_utils import export_yaml_data
from mobility_teleop.motion import MotionCommand


def test_request_without_intent_is_rejected() -> None:
    """Verify that a request must select a pipeline or a motion command."""
    # Act/Assert - Expect an empty request to be rejected with the usage message
    with pytest.raises(ConfigurationError, match="You must specify one of"):
        TeleopRequest.validated()


@pytest.mark.parametrize(
    "intents",
    [
        {"move": True, "stop": True},
        {"idle": True, "prep": True},
        {"stop": True, "exec_path": Path("segment.yaml")},
        {"pipeline": "ml", "move": True, "idle": True},
    ],
)
def test_request_with_multiple_motion_intents_is_rejected(intents: dict) -> None:
    """Verify that at most one motion command may be selected."""
    # Act/Assert - Expect any pair of motion intents to be rejected
    with pytest.raises(ConfigurationError, match="You can only specify one of"):
        TeleopRequest.validated(**intents)


@pytest.mark.parametrize(
    ("fields", "expected_command", "needs_reconfigure"),
    [
        ({"pipeline": "hr"}, None, False),
        ({"move": True}, MotionCommand.MOVE, True),
        ({"pipeline": "ml", "stop": True}, MotionCommand.STOP, False),
        ({"idle": True}, MotionCommand.IDLE, False),
        ({"prep": True}, MotionCommand.PREP, False),
        ({"exec_path": Path("segment.yaml")}, MotionCommand.EXEC, True),
    ],
)
def test_request_selects_motion_command(
    fields: dict,
    expected_command: MotionCommand,
    needs_reconfigure: bool,
) -> None:
    """Verify that a valid request reports its motion command and whether to reconfigure."""
    # Act - Validate the request
    request = TeleopRequest.validated(**fields)

    # Assert - Expect the selected command and reconfiguration need
    assert request.motion_command == expected_command
    assert request.needs_reconfigure == needs_reconfigure


@pytest.mark.parametrize("kind", ["connect", "active", "response"])
@pytest.mark.parametrize("value", [0.0, -5.0])
def test_non_positive_timeouts_are_rejected(kind: str, value: float) -> None:
    """Verify that the connect, active, and response timeouts must be positive."""
    # Act/Assert - Expect a message naming the invalid timeout
    with pytest.raises(ConfigurationError, match=f"Your {kind} timeout must be positive"):
        TeleopRequest.validated(stop=True, timeouts={f"{kind}_s": value})


def test_deadline_is_optional() -> None:
    """Verify that only a positive deadline is enforced."""
    assert ActionTimeouts().deadline_or_none is None
    assert ActionTimeouts(deadline_s=0.0).deadline_or_none is None
    assert ActionTimeouts(deadline_s=12.5).deadline_or_none == 12.5


def test_negative_wait_is_rejected() -> None:
    """Verify that a move cannot be deferred by a negative duration."""
    with pytest.raises(ConfigurationError):
        TeleopRequest.validated(move=True, wait_s=-1.0)


def test_unknown_fields_are_rejected() -> None:
    """Verify that misspelled request fields are not silently ignored."""
    with pytest.raises(ConfigurationError):
        TeleopRequest.validated(move=True, velocity=1.0)


def test_default_planner_parameters() -> None:
    """Verify that unset numeric limits are omitted from the planner parameters."""
    # Act - Collect the parameters of the default settings
    parameters = PlannerSettings().to_parameters()

    # Assert - Expect the rate, planner name, and flags, but no velocity or acceleration limits
    assert parameters["desired_rate"] == 1.0
    assert parameters["planner"] == "trapezoidal"
    assert parameters["enable_collision_checking"] is True
    assert parameters["enable_faceforward"] is False
    for name in ("desired_vel", "desired_accel", "desired_omega", "desired_alpha"):
        assert name not in parameters


def test_planner_parameters_include_positive_limits() -> None:
    """Verify that positive limits are sent and an empty planner name is omitted."""
    # Act - Collect the parameters of custom settings
    parameters = PlannerSettings(desired_vel=0.1, desired_alpha=0.2, planner="").to_parameters()

    # Assert - Expect only the positive limits and no planner name
    assert parameters["desired_vel"] == 0.1
    assert parameters["desired_alpha"] == 0.2
    assert "desired_accel" not in parameters
    assert "planner" not in parameters


def test_request_loads_from_yaml(tmp_path: Path) -> None:
    """Verify that a request can be loaded from a YAML file."""
    # Arrange - Export a request specifying a switch, a move, and custom timeouts
    yaml_path = tmp_path / "request.yaml"
    export_yaml_data(
        {
            "pipeline": "ar",
            "move": True,
            "position": "1 2 3",
            "timeouts": {"connect_s": 5.0, "deadline_s": 60.0},
        },
        yaml_path,
    )

    # Act - Load the request
    request = TeleopRequest.from_yaml(yaml_path)

    # Assert - Expect the loaded fields, with defaults for the rest
    assert request.pipeline == "ar"
    assert request.motion_command == MotionCommand.MOVE
    assert request.position == "1 2 3"
    assert request.timeouts.connect_s == 5.0
    assert request.timeouts.active_s == 30.0
    assert request.timeouts.deadline_or_none == 60.0


def test_request_yaml_must_be_a_mapping(tmp_path: Path) -> None:
    """Verify that a YAML file which isn't a mapping cannot be loaded as a request."""
    # Arrange - Export a list instead of a mapping
    yaml_path = tmp_path / "request.yaml"
    export_yaml_data(["move"], yaml_path)

    # Act/Assert - Expect a configuration error
    with pytest.raises(ConfigurationError):
        TeleopRequest.from_yaml(yaml_path)
