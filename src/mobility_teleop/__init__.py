"""Dispatch localization and motion commands to a mobile robot's action services."""

__version__ = "1.0.0"
