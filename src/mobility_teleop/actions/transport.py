"""Define the interface between an action client and the transport that reaches a remote service."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Protocol, TypeVar

GoalT = TypeVar("GoalT")
"""Type of the goals accepted by a remote action service."""

FeedbackT = TypeVar("FeedbackT")
"""Type of the feedback messages emitted by a remote action service."""

ResultT = TypeVar("ResultT")
"""Type of the result payloads emitted by a remote action service."""

GoalT_contra = TypeVar("GoalT_contra", contravariant=True)


class ActionEvent(Enum):
    """Kinds of inbound events delivered by a transport to its action client."""

    CONNECTED = "connected"
    ACTIVE = "active"
    FEEDBACK = "feedback"
    RESULT = "result"


EventSink = Callable[[ActionEvent, Any], None]
"""Receives (event, payload) pairs; RESULT payloads are (ActionState, result) tuples."""


class ActionTransport(Protocol[GoalT_contra]):
    """Connection to one remote action service, delivering its events to a sink."""

    name: str
    """Name of the remote action (e.g., "localization/switch")."""

    def connect(self, sink: EventSink) -> None:
        """Begin connecting to the remote service; events are reported to the given sink."""
        ...

    def send_goal(self, goal: GoalT_contra) -> bool:
        """Send a goal to the remote service, returning whether it was accepted for processing."""
        ...
