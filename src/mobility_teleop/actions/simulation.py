"""Define an in-process action service used to exercise clients without a robot."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Generic, Sequence

from mobility_teleop.actions.states import ActionState
from mobility_teleop.actions.transport import ActionEvent, FeedbackT, GoalT, ResultT
from mobility_teleop.io.logging import log_info

if TYPE_CHECKING:
    from mobility_teleop.actions.dispatch import DispatchLoop
    from mobility_teleop.actions.transport import EventSink


@dataclass(frozen=True)
class ScriptedResponse(Generic[FeedbackT, ResultT]):
    """Scripted reaction of a simulated action service to one goal."""

    accepted: bool = True
    feedback: Sequence[FeedbackT] = ()
    state: ActionState | None = ActionState.SUCCESS
    """Terminal state reported after the feedback (None = the service never responds)."""

    result: ResultT | None = None
    goes_active: bool = True


GoalHandler = Callable[[Any], ScriptedResponse]
"""Computes the scripted response of a simulated service to a received goal."""


@dataclass
class SimulatedActionServer(Generic[GoalT, FeedbackT, ResultT]):
    """An action service simulated on a dispatch loop, implementing the transport interface."""

    name: str
    loop: DispatchLoop
    handler: GoalHandler
    connect_delay_s: float | None = 0.0
    """Delay (seconds) before the handshake completes (None = never connects)."""

    step_s: float = 0.1
    """Interval (seconds) between consecutive events emitted for a goal."""

    goals: list[GoalT] = field(default_factory=list)
    """Goals accepted by the service, in order of arrival."""

    _sink: EventSink | None = field(default=None, init=False, repr=False)
    _connected: bool = field(default=False, init=False, repr=False)

    def connect(self, sink: EventSink) -> None:
        """Begin the simulated handshake, reporting events to the given sink."""
        self._sink = sink
        if self.connect_delay_s is not None:
            self.loop.call_later(self.connect_delay_s, self.announce_connected)

    def announce_connected(self) -> None:
        """Complete the handshake, or repeat the connected notification if already connected."""
        self._connected = True
        self._emit(ActionEvent.CONNECTED, None)

    def send_goal(self, goal: GoalT) -> bool:
        """Accept or reject the goal, then schedule the scripted feedback and result."""
        if not self._connected:
            return False

        response = self.handler(goal)
        if not response.accepted:
            log_info(f"Simulated action '{self.name}' declined a goal.")
            return False

        self.goals.append(goal)
        delay_s = self.step_s
        if response.goes_active:
            self.loop.call_later(delay_s, partial(self._emit, ActionEvent.ACTIVE, None))

        for message in response.feedback:
            delay_s += self.step_s
            self.loop.call_later(delay_s, partial(self._emit, ActionEvent.FEEDBACK, message))

        if response.state is not None:
            delay_s += self.step_s
            payload = (response.state, response.result)
            self.loop.call_later(delay_s, partial(self._emit, ActionEvent.RESULT, payload))

        return True

    def _emit(self, event: ActionEvent, payload: Any) -> None:
        if self._sink is None:
            raise RuntimeError(f"Simulated action '{self.name}' has no connected client.")
        self._sink(event, payload)
