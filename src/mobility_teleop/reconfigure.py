"""Define the interface used to apply planner parameters before motion commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Protocol

from mobility_teleop.errors import ReconfigureError
from mobility_teleop.io.logging import log_info

if TYPE_CHECKING:
    from mobility_teleop.config import ParameterValue, PlannerSettings


class ParameterClient(Protocol):
    """Sets named parameters of a remote node and applies them together."""

    def set(self, name: str, value: ParameterValue) -> None:
        """Stage a new value for the named parameter."""
        ...

    def reconfigure(self) -> bool:
        """Apply all staged parameters at once, returning whether they were accepted."""
        ...


class InMemoryParameterClient:
    """A parameter client which applies staged parameters to a local dictionary."""

    def __init__(self, accept: bool = True) -> None:
        """Initialize the client; if `accept` is False, every reconfiguration is refused."""
        self.accept = accept
        self.staged: Dict[str, ParameterValue] = {}
        self.applied: Dict[str, ParameterValue] = {}

    def set(self, name: str, value: ParameterValue) -> None:
        """Stage a new value for the named parameter."""
        self.staged[name] = value

    def reconfigure(self) -> bool:
        """Apply the staged parameters, unless this client refuses reconfiguration."""
        if not self.accept:
            return False
        self.applied.update(self.staged)
        self.staged.clear()
        return True


def apply_planner_settings(client: ParameterClient, settings: PlannerSettings) -> None:
    """Send the planner settings to the given client and apply them atomically.

    :raises ReconfigureError: If the parameters were not applied
    """
    parameters = settings.to_parameters()
    for name, value in parameters.items():
        client.set(name, value)

    if not client.reconfigure():
        raise ReconfigureError("Could not reconfigure the choreographer node")

    log_info(f"Applied planner parameters: {parameters}")
