"""Bridge Event Adapter - Turns application connection health into reasons."""

from loguru import logger

from offlinemode.core.protocols import ReasonCallback
from offlinemode.core.types import ActivationReason

HTTP_OK = 200


class BridgeEventAdapter:
    """
    Listener registered on the application bridge.

    Any response the application starts handling proves the server is
    reachable; connection errors and bad statuses prove the opposite.
    """

    def __init__(self, dispatch: ReasonCallback):
        self._dispatch = dispatch

    def on_request_starting(self):
        pass

    def on_response_handling_started(self):
        self._dispatch(ActivationReason.SERVER_AVAILABLE)

    def on_response_handling_ended(self):
        pass

    def on_connection_status(self, status: int):
        if status == HTTP_OK:
            self._dispatch(ActivationReason.SERVER_AVAILABLE)
        else:
            logger.debug(f"[BridgeAdapter] Connection status {status}")
            self._dispatch(ActivationReason.BAD_RESPONSE)

    def on_communication_error(self, details: str, status: int) -> bool:
        """Handle a communication error; returns True so the bridge stops there."""
        logger.debug(f"[BridgeAdapter] Communication error ({status}): {details}")
        self._dispatch(ActivationReason.BAD_RESPONSE)
        return True

    def on_response_timeout(self):
        self._dispatch(ActivationReason.RESPONSE_TIMEOUT)
