"""Exceptions raised by offlinemode."""


class OfflineModeError(Exception):
    """Base class for offlinemode errors."""

    pass


class NetworkFailureForced(OfflineModeError):
    """Outgoing traffic was blocked by the debug traffic gate."""

    pass


class BridgeAlreadyBound(OfflineModeError):
    """An application bridge is already attached to the state machine."""

    pass


class ConfigError(OfflineModeError, ValueError):
    """Raised when configuration values are invalid."""

    pass
