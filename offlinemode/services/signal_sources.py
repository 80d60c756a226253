"""
Signal sources - Turn platform observations into activation reasons.

Sources emit FACTS (NO_NETWORK, NETWORK_ONLINE, ...). They never decide
whether the application is online; the state machine does.
"""

import asyncio
import re
from typing import Optional

import psutil
from loguru import logger

from offlinemode.core.constants import LINK_POLL_INTERVAL
from offlinemode.core.protocols import ReasonCallback
from offlinemode.core.types import ActivationReason

LOOPBACK_PATTERN = re.compile(r"^(lo\d*|loopback.*)$", re.IGNORECASE)


def _is_loopback(name: str) -> bool:
    return bool(LOOPBACK_PATTERN.match(name))


class ManualSignalSource:
    """Source fed programmatically, e.g. by an embedding application."""

    def __init__(self):
        self._callback: Optional[ReasonCallback] = None

    @property
    def registered(self) -> bool:
        return self._callback is not None

    def register(self, callback: ReasonCallback):
        self._callback = callback

    def unregister(self):
        self._callback = None

    def emit(self, reason: ActivationReason):
        """Deliver a reason; dropped if nothing is registered."""
        if self._callback is None:
            logger.debug(f"[ManualSource] {reason} dropped (not registered)")
            return
        self._callback(reason)


class NetworkLinkSignalSource:
    """
    Watches network interface link state with psutil.

    The link counts as up when any non-loopback interface reports isup.
    A missing link at registration is reported straight away so a cold
    start without network goes offline immediately.
    """

    def __init__(
        self,
        interval: float = LINK_POLL_INTERVAL,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._interval = interval
        self._loop = loop
        self._callback: Optional[ReasonCallback] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._link_up: Optional[bool] = None

    @staticmethod
    def link_up() -> bool:
        """Whether any non-loopback interface is up."""
        try:
            stats = psutil.net_if_stats()
        except OSError as e:
            logger.warning(f"[LinkSource] Could not read interface stats: {e}")
            return True  # Unknown; let the probe decide

        for name, stat in stats.items():
            if _is_loopback(name):
                continue
            if stat.isup:
                return True
        return False

    def register(self, callback: ReasonCallback):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._callback = callback
        self._link_up = self.link_up()
        logger.info(f"[LinkSource] Watching network link (up={self._link_up}, every {self._interval}s)")
        if not self._link_up:
            callback(ActivationReason.NO_NETWORK)
        self._schedule()

    def unregister(self):
        self._callback = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self):
        self._handle = self._loop.call_later(self._interval, self._poll)

    def _poll(self):
        self._handle = None
        if self._callback is None:
            return

        up = self.link_up()
        if up != self._link_up:
            self._link_up = up
            logger.info(f"[LinkSource] Network flag is {'online' if up else 'offline'}")
            self._callback(ActivationReason.NETWORK_ONLINE if up else ActivationReason.NO_NETWORK)

        if self._callback is not None:
            self._schedule()


class MessageSignalSource:
    """
    Maps text messages from a hosting container to reasons.

    A container (for instance a native shell embedding the application in a
    frame) posts messages like "cordova-offline" / "cordova-online". The
    prefix names the container and may itself contain hyphens
    ("my-app-online"). Other messages are ignored.
    """

    MESSAGE_PATTERN = re.compile(r"^[a-z0-9_-]+-(online|offline)$")

    def __init__(self):
        self._callback: Optional[ReasonCallback] = None

    def register(self, callback: ReasonCallback):
        self._callback = callback

    def unregister(self):
        self._callback = None

    @classmethod
    def parse(cls, message: str) -> Optional[ActivationReason]:
        """Reason carried by a message, or None if it is not a network message."""
        match = cls.MESSAGE_PATTERN.match(message.strip().lower())
        if not match:
            return None
        if match.group(1) == "offline":
            return ActivationReason.NO_NETWORK
        return ActivationReason.NETWORK_ONLINE

    def on_message(self, message: str) -> bool:
        """
        Handle one message.

        Returns:
            True if the message was a network status message
        """
        reason = self.parse(message)
        if reason is None:
            return False
        logger.debug(f"[MessageSource] Received message {message!r}")
        if self._callback is not None:
            self._callback(reason)
        return True
