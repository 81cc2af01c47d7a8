"""Define functions to render motion feedback as a one-line status for the operator."""

from __future__ import annotations

from mobility_teleop.motion.goals import MotionFeedback, MotionState

M_TO_MM = 1000.0
RAD_TO_DEG = 57.2958


def motion_state_name(state: int) -> str:
    """Retrieve the name of a motion state (unrecognized states are named "UNKNOWN")."""
    try:
        return MotionState(state).name
    except ValueError:
        return "UNKNOWN"


def format_motion_feedback(feedback: MotionFeedback) -> str:
    """Format the tracking errors and state of the motion service into a status line."""
    progress = feedback.progress
    return (
        f"POS: {M_TO_MM * progress.error_position:.2f} mm "
        f"ATT: {RAD_TO_DEG * progress.error_attitude:.2f} deg "
        f"VEL: {M_TO_MM * progress.error_velocity:.2f} mm/s "
        f"OMEGA: {RAD_TO_DEG * progress.error_omega:.2f} deg/s "
        f"[{motion_state_name(feedback.state)}]"
    )
