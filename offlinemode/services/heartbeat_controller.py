"""Heartbeat Controller - Adapts polling cadence to the connectivity state."""

from typing import TYPE_CHECKING

from loguru import logger

from offlinemode.core.types import HEARTBEAT_DISABLED, TimerConfig

if TYPE_CHECKING:
    from offlinemode.core.state_machine import ConnectivityStateMachine
    from offlinemode.services.prober import Prober


class HeartbeatController:
    """
    Chooses the active polling interval after every transition.

    Policy:
    - online: normal cadence (heartbeat_interval_ms)
    - offline with network and no override: fast polling (ping_timeout_ms)
    - offline otherwise: no polling at all

    With an application bridge bound, its own heartbeat carries the cadence;
    otherwise the Prober's timer does.
    """

    def __init__(self, state_machine: "ConnectivityStateMachine", timer_config: TimerConfig, prober: "Prober"):
        self._machine = state_machine
        self._config = timer_config
        self._prober = prober
        self._timeout_overridden = False

    def reconfigure(self):
        """Apply the polling policy for the current state."""
        machine = self._machine
        bridge = machine.bridge

        if bridge is not None:
            self._apply_server_timeout(bridge)

        if machine.online:
            interval_ms = self._config.heartbeat_interval_ms
        elif machine.network_online and not machine.forced_offline:
            interval_ms = self._config.ping_timeout_ms
        else:
            interval_ms = None

        if bridge is not None:
            # The bridge heartbeat replaces our own timer
            self._prober.cancel()
            seconds = interval_ms // 1000 if interval_ms is not None else HEARTBEAT_DISABLED
            logger.debug(f"[HeartbeatController] Bridge heartbeat interval: {seconds}s")
            bridge.heartbeat.set_interval(seconds)
        elif interval_ms is not None:
            self._prober.schedule(interval_ms)
        else:
            logger.debug("[HeartbeatController] No network or forced offline, polling paused")
            self._prober.cancel()

    def _apply_server_timeout(self, bridge):
        """Take the server-configured ping timeout, once."""
        if self._timeout_overridden:
            return
        timeout = getattr(bridge, "offline_mode_timeout", None)
        if timeout is None or timeout < 0:
            return
        self._timeout_overridden = True
        logger.info(f"[HeartbeatController] Server ping timeout: {timeout} ms")
        self._config.ping_timeout_ms = timeout
