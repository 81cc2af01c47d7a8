"""Define the exceptions raised while validating, resolving, or dispatching teleop commands."""


class TeleopError(Exception):
    """Base class for errors raised by the teleop command dispatcher."""


class ConfigurationError(TeleopError):
    """An error raised when the requested intent or timeouts are invalid."""


class GoalResolutionError(TeleopError):
    """An error raised when a motion goal cannot be constructed from operator input."""


class InvalidPositionError(GoalResolutionError):
    """An error raised when a position override cannot be parsed."""


class InvalidOrientationError(GoalResolutionError):
    """An error raised when an orientation override has an unsupported format."""


class PoseUnavailable(GoalResolutionError):
    """An error raised when the live pose of the robot cannot be looked up."""


class SegmentLoadError(GoalResolutionError):
    """An error raised when a recorded segment cannot be read from storage."""


class ReconfigureError(TeleopError):
    """An error raised when planner parameters could not be applied."""
