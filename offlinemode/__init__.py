"""offlinemode - Online/offline connectivity decisions for client applications."""

__version__ = "0.1.0"
__author__ = "offlinemode contributors"
__description__ = "Reconciles network and server reachability signals into one online/offline state"

from offlinemode.core.state_machine import ConnectivityStateMachine
from offlinemode.core.types import ActivationReason, TimerConfig

__all__ = ["ActivationReason", "ConnectivityStateMachine", "TimerConfig", "__version__"]
