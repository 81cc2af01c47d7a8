"""Import classes used to communicate with remote action services."""

from .action_client import ActionClient as ActionClient
from .dispatch import DispatchLoop as DispatchLoop
from .dispatch import VirtualTimeLoop as VirtualTimeLoop
from .simulation import ScriptedResponse as ScriptedResponse
from .simulation import SimulatedActionServer as SimulatedActionServer
from .states import ActionState as ActionState
from .transport import ActionEvent as ActionEvent
from .transport import ActionTransport as ActionTransport
