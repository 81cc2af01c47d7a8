"""Import utility functions for angle computations."""

from .angles import angle_difference as angle_difference
