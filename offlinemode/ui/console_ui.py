"""Console offline UI - Headless implementation of the offline UI contract."""

from typing import Optional

from loguru import logger

from offlinemode.core.types import ActivationReason

MESSAGES = {
    ActivationReason.APP_STARTING: "Starting, waiting for the server",
    ActivationReason.NO_NETWORK: "No network connection",
    ActivationReason.BAD_RESPONSE: "Server unreachable",
    ActivationReason.RESPONSE_TIMEOUT: "Server not responding",
    ActivationReason.FORCE_OFFLINE: "Offline mode forced",
    ActivationReason.ONLINE_APP_NOT_STARTED: "Server is back, reload the application",
}


class ConsoleOfflineUI:
    """Reports offline mode through the logger instead of drawing anything."""

    def __init__(self):
        self._active = False
        self._reason: Optional[ActivationReason] = None

    @property
    def reason(self) -> Optional[ActivationReason]:
        return self._reason

    @staticmethod
    def message_for(reason: ActivationReason) -> str:
        return MESSAGES.get(reason, "Offline")

    def activate(self, reason: ActivationReason):
        self._active = True
        self._reason = reason
        logger.warning(f"[OfflineUI] OFFLINE: {self.message_for(reason)} ({reason})")

    def deactivate(self):
        if self._active:
            logger.info("[OfflineUI] Back online")
        self._active = False
        self._reason = None

    def is_active(self) -> bool:
        return self._active
