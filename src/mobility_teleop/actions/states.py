"""Define the lifecycle states of an action session."""

from __future__ import annotations

from enum import Enum


class ActionState(Enum):
    """States of one session with a remote action service."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    WAITING_FOR_ACTIVE = "waiting_for_active"
    ACTIVE = "active"

    # Terminal states, each delivered exactly once through the result callback
    SUCCESS = "success"
    PREEMPTED = "preempted"
    ABORTED = "aborted"
    TIMEOUT_ON_CONNECT = "timeout_on_connect"
    TIMEOUT_ON_ACTIVE = "timeout_on_active"
    TIMEOUT_ON_RESPONSE = "timeout_on_response"
    TIMEOUT_ON_DEADLINE = "timeout_on_deadline"

    @property
    def is_terminal(self) -> bool:
        """Check whether the session can no longer change state."""
        return self in TERMINAL_STATES

    @property
    def is_timeout(self) -> bool:
        """Check whether the state is one of the four timeout outcomes (no result payload)."""
        return self in TIMEOUT_STATES

    @property
    def label(self) -> str:
        """Retrieve the upper-case name used when reporting the state to an operator."""
        return self.name


TIMEOUT_STATES = frozenset(
    {
        ActionState.TIMEOUT_ON_CONNECT,
        ActionState.TIMEOUT_ON_ACTIVE,
        ActionState.TIMEOUT_ON_RESPONSE,
        ActionState.TIMEOUT_ON_DEADLINE,
    },
)

RESULT_STATES = frozenset({ActionState.SUCCESS, ActionState.PREEMPTED, ActionState.ABORTED})
"""Terminal states which carry a result payload from the remote service."""

TERMINAL_STATES = TIMEOUT_STATES | RESULT_STATES
