"""
Debug controls - Developer overrides for connectivity.

go_offline()/go_online() force the state machine through the regular
dispatch path. server_down()/server_up() only make outgoing probe traffic
fail, leaving the platform network flag alone.
"""

from typing import TYPE_CHECKING, Optional

from loguru import logger

from offlinemode.core.errors import NetworkFailureForced
from offlinemode.core.types import ActivationReason

if TYPE_CHECKING:
    from offlinemode.core.state_machine import ConnectivityStateMachine


class TrafficGate:
    """Blocks outgoing traffic while the server is simulated down or offline is forced."""

    def __init__(self):
        self._server_down = False
        self._machine: Optional["ConnectivityStateMachine"] = None

    def follow(self, state_machine: "ConnectivityStateMachine"):
        """Also block traffic whenever this state machine is forced offline."""
        self._machine = state_machine

    @property
    def server_down(self) -> bool:
        return self._server_down

    def set_server_down(self, down: bool):
        self._server_down = down

    def is_open(self) -> bool:
        if self._server_down:
            return False
        if self._machine is not None and self._machine.forced_offline:
            return False
        return True

    def check(self):
        """
        Raises:
            NetworkFailureForced: If traffic is currently blocked
        """
        if self._server_down:
            raise NetworkFailureForced("server down simulated")
        if self._machine is not None and self._machine.forced_offline:
            raise NetworkFailureForced("offline forced")


class DebugControls:
    """Developer entry points bound to one state machine instance."""

    def __init__(self, state_machine: "ConnectivityStateMachine", traffic_gate: Optional[TrafficGate] = None):
        self._machine = state_machine
        self._gate = traffic_gate if traffic_gate is not None else state_machine.traffic_gate

    def go_offline(self):
        logger.info("[Debug] Forcing offline")
        self._machine.dispatch(ActivationReason.FORCE_OFFLINE)

    def go_online(self):
        logger.info("[Debug] Releasing forced offline")
        self._machine.dispatch(ActivationReason.FORCE_ONLINE)

    def server_down(self):
        logger.info("[Debug] Simulating server down")
        self._gate.set_server_down(True)

    def server_up(self):
        logger.info("[Debug] Simulating server up")
        self._gate.set_server_down(False)
