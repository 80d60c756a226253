"""Connectivity State Machine - Single authority for the online/offline decision."""

import asyncio
from typing import Callable, Iterable, List, Optional, Union

import requests
from loguru import logger

from offlinemode.core.errors import BridgeAlreadyBound
from offlinemode.core.protocols import ApplicationBridge, OfflineUI, SignalSource
from offlinemode.core.status import NetworkStatus, network_status
from offlinemode.core.types import (
    ActivationReason,
    ConnectivityState,
    OfflineEvent,
    OnlineEvent,
    TimerConfig,
)
from offlinemode.services.bridge_adapter import BridgeEventAdapter
from offlinemode.services.debug import TrafficGate
from offlinemode.services.heartbeat_controller import HeartbeatController
from offlinemode.services.prober import Prober

Listener = Callable[[Union[OnlineEvent, OfflineEvent]], None]


class ConnectivityStateMachine:
    """
    Reconciles network, server and override signals into one online flag.

    Signal-Based Architecture:
    - Signal sources, probes and the bridge report ActivationReasons (facts)
    - dispatch() is the ONLY entry point and the ONLY writer of the state
    - The online flag changes only inside the two transition methods

    The application starts offline. It goes online only once the network is
    up, the server answered and no forced-offline override is set.
    """

    def __init__(
        self,
        offline_ui: OfflineUI,
        server_url: Optional[str] = None,
        timer_config: Optional[TimerConfig] = None,
        status: Optional[NetworkStatus] = None,
        traffic_gate: Optional[TrafficGate] = None,
        signal_sources: Iterable[SignalSource] = (),
        prober: Optional[Prober] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the state machine. Nothing is dispatched until start().

        Args:
            offline_ui: Offline UI implementation (activate/deactivate/is_active)
            server_url: Base URL of the server used by the prober
            timer_config: Heartbeat and ping cadences
            status: Read-only flag to publish into (process-wide one by default)
            traffic_gate: Debug gate consulted before probe traffic
            signal_sources: Platform sources registered on start()
            prober: Prober override (built from the other arguments if None)
            loop: Event loop for timers (running loop if None)
            session: requests session for the prober
        """
        self._ui = offline_ui
        self._config = timer_config or TimerConfig()
        self._status = status if status is not None else network_status
        self._state = ConnectivityState()
        self._bridge: Optional[ApplicationBridge] = None
        self._bridge_adapter: Optional[BridgeEventAdapter] = None
        self._signal_sources: List[SignalSource] = list(signal_sources)
        self._listeners: List[Listener] = []
        self._started = False

        self.traffic_gate = traffic_gate if traffic_gate is not None else TrafficGate()
        self.traffic_gate.follow(self)

        self._prober = prober or Prober(
            self,
            server_url=server_url,
            timer_config=self._config,
            traffic_gate=self.traffic_gate,
            loop=loop,
            session=session,
        )
        self._heartbeat = HeartbeatController(self, self._config, self._prober)

    # ═══════════════════════════════════════════════════════════
    # Read-only view
    # ═══════════════════════════════════════════════════════════

    @property
    def state(self) -> ConnectivityState:
        """Snapshot of the current state (mutating it has no effect)."""
        return self._state.copy()

    @property
    def online(self) -> bool:
        return self._state.online

    @property
    def network_online(self) -> bool:
        return self._state.network_online

    @property
    def forced_offline(self) -> bool:
        return self._state.forced_offline

    @property
    def last_reason(self) -> Optional[ActivationReason]:
        return self._state.last_reason

    @property
    def bridge(self) -> Optional[ApplicationBridge]:
        return self._bridge

    @property
    def timer_config(self) -> TimerConfig:
        return self._config

    # ═══════════════════════════════════════════════════════════
    # Lifecycle
    # ═══════════════════════════════════════════════════════════

    def start(self):
        """
        Dispatch APP_STARTING, then register signal sources.

        We always go offline at the beginning until the server answers. A
        source reporting NO_NETWORK on registration replaces that reason.
        """
        if self._started:
            return
        self._started = True

        self.dispatch(ActivationReason.APP_STARTING)

        for source in self._signal_sources:
            source.register(self.dispatch)

    def stop(self):
        """Unregister signal sources and cancel pending probes."""
        if not self._started:
            return
        self._started = False

        for source in self._signal_sources:
            source.unregister()
        self._prober.cancel()
        logger.info("[StateMachine] Stopped")

    def add_signal_source(self, source: SignalSource):
        """Add a signal source; registered immediately if already started."""
        self._signal_sources.append(source)
        if self._started:
            source.register(self.dispatch)

    def add_listener(self, callback: Listener):
        """Be notified with OnlineEvent/OfflineEvent on every transition."""
        self._listeners.append(callback)

    def bind_bridge(self, bridge: ApplicationBridge):
        """
        Attach the online application once it has started.

        Having a bridge means the server just served the application, so
        SERVER_AVAILABLE is dispatched right away.

        Raises:
            BridgeAlreadyBound: If a bridge is already attached
        """
        if self._bridge is not None:
            raise BridgeAlreadyBound("An application bridge is already bound")

        self._bridge = bridge
        self._bridge_adapter = BridgeEventAdapter(self.dispatch)
        bridge.add_listener(self._bridge_adapter)
        logger.info("[StateMachine] Application bridge bound")

        self.dispatch(ActivationReason.SERVER_AVAILABLE)

    # ═══════════════════════════════════════════════════════════
    # Dispatch - SINGLE POINT OF STATE MUTATION
    # ═══════════════════════════════════════════════════════════

    def dispatch(self, reason: ActivationReason):
        """
        Receive any connectivity fact, update the flags and go offline or
        online as appropriate.

        Repeating the last applied reason is a no-op. NETWORK_ONLINE is never
        stored as the last reason, so every NETWORK_ONLINE triggers a probe.
        """
        state = self._state
        logger.info(f"[StateMachine] Dispatching: {state.last_reason} -> {reason}")

        if reason == state.last_reason:
            return

        if reason == ActivationReason.NETWORK_ONLINE:
            state.network_online = True
            # Don't go online yet, the server must answer a probe first
            self._prober.probe_now()

        elif reason == ActivationReason.NO_NETWORK:
            state.network_online = False
            cold_start = state.last_reason in (None, ActivationReason.APP_STARTING)
            if state.server_available or cold_start:
                self._go_offline(reason)

        elif reason == ActivationReason.SERVER_AVAILABLE:
            state.server_available = True
            state.network_online = True
            self._go_online(reason)

        elif reason == ActivationReason.FORCE_OFFLINE:
            state.forced_offline = True
            self._go_offline(reason)

        elif reason == ActivationReason.FORCE_ONLINE:
            state.forced_offline = False
            self._prober.probe_now()

        else:
            state.server_available = False
            self._go_offline(reason)

        self._heartbeat.reconfigure()

    def _go_online(self, reason: ActivationReason):
        """Go online if every condition holds, hiding the offline UI."""
        state = self._state
        if state.online or not state.network_online or not state.server_available or state.forced_offline:
            return

        if self._bridge is None:
            # The server answered but the online application never started:
            # the user has to reload.
            if state.last_reason != ActivationReason.ONLINE_APP_NOT_STARTED:
                logger.warning("[StateMachine] Server reachable but online application not started")
                state.last_reason = ActivationReason.ONLINE_APP_NOT_STARTED
                self._ui.activate(ActivationReason.ONLINE_APP_NOT_STARTED)
            return

        logger.info(f"[StateMachine] Network back ONLINE ({reason})")
        state.online = True
        state.last_reason = reason
        self._status._publish(True)

        if self._ui.is_active():
            self._ui.deactivate()
        self._bridge.set_application_running(True)
        self._emit_event(OnlineEvent())

    def _go_offline(self, reason: ActivationReason):
        """Go offline showing the offline UI with the reason."""
        logger.info(f"[StateMachine] Network OFFLINE ({reason})")
        state = self._state
        state.online = False
        state.last_reason = reason
        self._status._publish(False)

        self._ui.activate(reason)
        if self._bridge is not None:
            self._bridge.set_application_running(False)
        self._emit_event(OfflineEvent(reason))

    def _emit_event(self, event: Union[OnlineEvent, OfflineEvent]):
        """Notify the bridge and local listeners of a transition."""
        if self._bridge is not None:
            try:
                self._bridge.fire_event(event)
            except Exception as e:
                logger.error(f"[StateMachine] Bridge failed to handle {type(event).__name__}: {e}")

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"[StateMachine] Error in event listener: {e}")
