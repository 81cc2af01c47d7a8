"""Define utility functions for computations involving angles."""

import numpy as np


def angle_difference(a_rad: float, b_rad: float) -> float:
    """Compute the signed difference (a - b) between two angles, wrapped into [-pi, pi]."""
    return float(np.arctan2(np.sin(a_rad - b_rad), np.cos(a_rad - b_rad)))
