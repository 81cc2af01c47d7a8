"""Define a generic client for one remote action service.

A client moves through the states DISCONNECTED -> CONNECTING -> CONNECTED, then (after a goal is
    accepted) WAITING_FOR_ACTIVE -> ACTIVE, and ends in exactly one terminal state. Four timers
    guard the session:

    - connect: armed by `create()`, cleared once the transport reports the handshake complete
    - active: armed when a goal is accepted, cleared once the service reports the goal active
    - response: armed when the goal goes active, re-armed by every feedback message
    - deadline: armed when the goal goes active, only if a positive deadline was configured

Timeouts are delivered through the result callback with a None result payload.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Generic

from mobility_teleop.actions.states import RESULT_STATES, ActionState
from mobility_teleop.actions.transport import ActionEvent, FeedbackT, GoalT, ResultT
from mobility_teleop.io.logging import log_info, log_warning

if TYPE_CHECKING:
    from mobility_teleop.actions.dispatch import DispatchLoop, TimerHandle
    from mobility_teleop.actions.transport import ActionTransport

ConnectedCallback = Callable[[], None]
FeedbackCallback = Callable[[Any], None]
ResultCallback = Callable[[ActionState, Any], None]


class ActionClient(Generic[GoalT, FeedbackT, ResultT]):
    """An asynchronous request/feedback/result channel to one remote action service."""

    def __init__(self, loop: DispatchLoop, transport: ActionTransport[GoalT]) -> None:
        """Initialize a disconnected client which dispatches its callbacks on the given loop.

        :param loop: Single-threaded loop on which every callback of this client runs
        :param transport: Connection to the remote action service
        """
        self._loop = loop
        self._transport = transport

        self.state = ActionState.DISCONNECTED
        self._connected = False  # Monotonic: never reverts to False once set

        self.connect_timeout_s = 30.0
        self.active_timeout_s = 30.0
        self.response_timeout_s = 30.0
        self.deadline_timeout_s: float | None = None

        self._timers: dict[ActionState, TimerHandle] = {}

        self._connected_cb: ConnectedCallback | None = None
        self._feedback_cb: FeedbackCallback | None = None
        self._result_cb: ResultCallback | None = None

    @property
    def name(self) -> str:
        """Retrieve the name of the remote action served by this client."""
        return self._transport.name

    def configure(
        self,
        connect_timeout_s: float,
        active_timeout_s: float,
        response_timeout_s: float,
        deadline_timeout_s: float | None = None,
    ) -> None:
        """Set the durations (seconds) of the session's timeouts.

        Connect, active, and response timeouts must be positive; this is validated by the caller.

        :param deadline_timeout_s: Optional limit on the total active duration (ignored unless > 0)
        """
        self.connect_timeout_s = connect_timeout_s
        self.active_timeout_s = active_timeout_s
        self.response_timeout_s = response_timeout_s
        self.deadline_timeout_s = deadline_timeout_s

    def on_connected(self, callback: ConnectedCallback) -> None:
        """Register the callback run when the connection is established (replaces any earlier)."""
        self._connected_cb = callback

    def on_feedback(self, callback: Callable[[FeedbackT], None]) -> None:
        """Register the callback run for each feedback message (replaces any earlier)."""
        self._feedback_cb = callback

    def on_result(self, callback: Callable[[ActionState, ResultT | None], None]) -> None:
        """Register the callback run once the session is terminal (replaces any earlier)."""
        self._result_cb = callback

    def create(self) -> None:
        """Begin connecting to the remote service and arm the connect timer."""
        if self.state != ActionState.DISCONNECTED:
            raise RuntimeError(f"Action client '{self.name}' was already created.")

        self.state = ActionState.CONNECTING
        self._arm(ActionState.TIMEOUT_ON_CONNECT, self.connect_timeout_s)
        self._transport.connect(self._receive)

    def is_connected(self) -> bool:
        """Check whether the connection handshake has completed (no side effects)."""
        return self._connected

    def submit(self, goal: GoalT) -> bool:
        """Send a goal to the remote service.

        :return: True if the service accepted the goal for processing, else False
        """
        if not self._connected or self.state != ActionState.CONNECTED:
            log_warning(f"Action '{self.name}' cannot accept a goal in state {self.state.label}.")
            return False

        if not self._transport.send_goal(goal):
            log_warning(f"Action '{self.name}' rejected the goal.")
            return False

        self.state = ActionState.WAITING_FOR_ACTIVE
        self._arm(ActionState.TIMEOUT_ON_ACTIVE, self.active_timeout_s)
        return True

    def _receive(self, event: ActionEvent, payload: Any) -> None:
        """Forward an inbound event from the transport onto the dispatch loop."""
        self._loop.post(partial(self._handle_event, event, payload))

    def _handle_event(self, event: ActionEvent, payload: Any) -> None:
        """Advance the session's state machine in response to an inbound event."""
        if self.state.is_terminal:
            log_info(f"Action '{self.name}' ignored {event.name} after {self.state.label}.")
            return

        if event == ActionEvent.CONNECTED:
            self._handle_connected()
        elif event == ActionEvent.ACTIVE:
            self._handle_active()
        elif event == ActionEvent.FEEDBACK:
            self._handle_feedback(payload)
        elif event == ActionEvent.RESULT:
            state, result = payload
            if state not in RESULT_STATES:
                raise ValueError(f"Action '{self.name}' received a result with state {state}")
            self._finish(state, result)

    def _handle_connected(self) -> None:
        self._connected = True
        if self.state == ActionState.CONNECTING:
            self.state = ActionState.CONNECTED
            self._disarm(ActionState.TIMEOUT_ON_CONNECT)
            log_info(f"Action '{self.name}' connected.")

        if self._connected_cb is not None:
            self._connected_cb()

    def _handle_active(self) -> None:
        if self.state != ActionState.WAITING_FOR_ACTIVE:
            return

        self.state = ActionState.ACTIVE
        self._disarm(ActionState.TIMEOUT_ON_ACTIVE)
        self._arm(ActionState.TIMEOUT_ON_RESPONSE, self.response_timeout_s)
        if self.deadline_timeout_s is not None and self.deadline_timeout_s > 0:
            self._arm(ActionState.TIMEOUT_ON_DEADLINE, self.deadline_timeout_s)

    def _handle_feedback(self, feedback: FeedbackT) -> None:
        if self.state == ActionState.WAITING_FOR_ACTIVE:
            self._handle_active()  # Feedback implies that the goal went active
        if self.state != ActionState.ACTIVE:
            return

        self._arm(ActionState.TIMEOUT_ON_RESPONSE, self.response_timeout_s)
        if self._feedback_cb is not None:
            self._feedback_cb(feedback)

    def _arm(self, timeout_state: ActionState, duration_s: float) -> None:
        """(Re-)arm the timer which ends the session with the given timeout state."""
        self._disarm(timeout_state)
        self._timers[timeout_state] = self._loop.call_later(
            duration_s,
            partial(self._handle_timeout, timeout_state),
        )

    def _disarm(self, timeout_state: ActionState) -> None:
        timer = self._timers.pop(timeout_state, None)
        if timer is not None:
            timer.cancel()

    def _handle_timeout(self, timeout_state: ActionState) -> None:
        self._timers.pop(timeout_state, None)
        if not self.state.is_terminal:
            log_warning(f"Action '{self.name}' ended with {timeout_state.label}.")
            self._finish(timeout_state, None)

    def _finish(self, state: ActionState, result: ResultT | None) -> None:
        """Move the session into a terminal state and report it through the result callback."""
        for timeout_state in list(self._timers):
            self._disarm(timeout_state)

        self.state = state
        if self._result_cb is not None:
            self._result_cb(state, result)
