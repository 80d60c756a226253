"""Core types and enums."""
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

from offlinemode.core.constants import HEARTBEAT_INTERVAL_MS, PING_TIMEOUT_MS

# Bridge heartbeat interval meaning "never send"
HEARTBEAT_DISABLED = -1


class ActivationReason(Enum):
    """
    Why a connectivity transition is being requested.

    These are FACTS reported by signal sources, probes and the debug surface.
    The state machine alone decides what each one means.
    """

    APP_STARTING = auto()
    NO_NETWORK = auto()
    NETWORK_ONLINE = auto()
    SERVER_AVAILABLE = auto()
    BAD_RESPONSE = auto()
    RESPONSE_TIMEOUT = auto()
    FORCE_OFFLINE = auto()
    FORCE_ONLINE = auto()
    ONLINE_APP_NOT_STARTED = auto()

    def __str__(self):
        return self.name


@dataclass
class ConnectivityState:
    """
    Mutable connectivity record, written only by the state machine.

    `online` is updated at transition time, never recomputed from the flags.
    """

    network_online: bool = True
    server_available: bool = False
    forced_offline: bool = False
    online: bool = False
    last_reason: Optional[ActivationReason] = None

    def copy(self) -> "ConnectivityState":
        return replace(self)


@dataclass
class TimerConfig:
    """Polling cadences in milliseconds."""

    heartbeat_interval_ms: int = HEARTBEAT_INTERVAL_MS
    ping_timeout_ms: int = PING_TIMEOUT_MS


@dataclass(frozen=True)
class OnlineEvent:
    """Fired when the application goes back online."""


@dataclass(frozen=True)
class OfflineEvent:
    """Fired when the application goes offline."""

    reason: ActivationReason
