"""
Services cooperating with the connectivity state machine.

- Prober: timer-driven reachability checks
- HeartbeatController: picks the polling cadence for the current state
- BridgeEventAdapter: turns application-bridge health events into reasons
- Signal sources: platform link state and embedded-frame messages
- DebugControls / TrafficGate: developer override surface
"""

from offlinemode.services.bridge_adapter import BridgeEventAdapter
from offlinemode.services.debug import DebugControls, TrafficGate
from offlinemode.services.heartbeat_controller import HeartbeatController
from offlinemode.services.prober import Prober
from offlinemode.services.signal_sources import (
    ManualSignalSource,
    MessageSignalSource,
    NetworkLinkSignalSource,
)

__all__ = [
    "BridgeEventAdapter",
    "DebugControls",
    "HeartbeatController",
    "ManualSignalSource",
    "MessageSignalSource",
    "NetworkLinkSignalSource",
    "Prober",
    "TrafficGate",
]
