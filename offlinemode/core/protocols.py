"""Protocols for the collaborators of the connectivity state machine."""
from typing import Callable, Optional, Protocol, Union

from offlinemode.core.types import ActivationReason, OfflineEvent, OnlineEvent

ReasonCallback = Callable[[ActivationReason], None]


class OfflineUI(Protocol):
    """Degraded presentation shown while the application is not online."""

    def activate(self, reason: ActivationReason) -> None:
        """Show (or refresh) the offline UI for the given reason."""
        ...

    def deactivate(self) -> None:
        ...

    def is_active(self) -> bool:
        ...


class Heartbeat(Protocol):
    """Keep-alive channel owned by the online application."""

    def set_interval(self, seconds: int) -> None:
        """Set the heartbeat interval. -1 disables the heartbeat."""
        ...

    def send(self) -> None:
        """Send one heartbeat now."""
        ...


class BridgeListener(Protocol):
    """Connection-health callbacks the bridge invokes."""

    def on_request_starting(self) -> None: ...

    def on_response_handling_started(self) -> None: ...

    def on_response_handling_ended(self) -> None: ...

    def on_connection_status(self, status: int) -> None: ...

    def on_communication_error(self, details: str, status: int) -> bool: ...

    def on_response_timeout(self) -> None: ...


class ApplicationBridge(Protocol):
    """The running online application, once it has attached."""

    heartbeat: Heartbeat

    # Server-supplied ping timeout in ms; None or -1 when not configured
    offline_mode_timeout: Optional[int]

    def set_application_running(self, running: bool) -> None:
        ...

    def fire_event(self, event: Union[OnlineEvent, OfflineEvent]) -> None:
        ...

    def add_listener(self, listener: BridgeListener) -> None:
        ...


class SignalSource(Protocol):
    """Produces activation reasons from platform observations."""

    def register(self, callback: ReasonCallback) -> None:
        """Start delivering reasons to callback."""
        ...

    def unregister(self) -> None:
        ...
