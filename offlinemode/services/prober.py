"""Prober - Timer-driven server reachability checks."""

import asyncio
from typing import TYPE_CHECKING, Optional

import requests
from loguru import logger

from offlinemode.core.constants import PING_PATH
from offlinemode.core.errors import NetworkFailureForced
from offlinemode.core.types import ActivationReason, TimerConfig

if TYPE_CHECKING:
    from offlinemode.core.state_machine import ConnectivityStateMachine
    from offlinemode.services.debug import TrafficGate


def build_ping_url(server_url: str) -> str:
    """Reachability endpoint for a server base URL."""
    return server_url.rstrip("/") + "/" + PING_PATH


def send_ping(session: requests.Session, url: str, timeout_ms: int) -> bool:
    """
    POST to the reachability endpoint.

    Returns:
        True on HTTP 200, False on any other status, timeout or transport error
    """
    timeout = timeout_ms / 1000
    try:
        response = session.post(url, timeout=timeout)
    except requests.Timeout:
        logger.debug(f"[Prober] Ping timed out after {timeout}s")
        return False
    except requests.RequestException as e:
        logger.debug(f"[Prober] Ping failed: {e}")
        return False

    if response.status_code != requests.codes.ok:
        logger.debug(f"[Prober] Ping returned HTTP {response.status_code}")
        return False
    return True


class Prober:
    """
    Issues lightweight reachability checks and reports them as reasons.

    Results are FACTS: SERVER_AVAILABLE on HTTP 200, BAD_RESPONSE on anything
    else (timeout, transport error, other status, blocked traffic). The
    prober never touches connectivity state; it only dispatches.

    Timer model:
    - schedule() cancels the pending timer and arms a new one
    - a timer-driven probe re-arms itself at the same interval once its
      result is dispatched, unless a new schedule/cancel happened meanwhile
    - probe_now() sends one probe without touching the timer
    """

    def __init__(
        self,
        state_machine: "ConnectivityStateMachine",
        server_url: Optional[str] = None,
        timer_config: Optional[TimerConfig] = None,
        traffic_gate: Optional["TrafficGate"] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            state_machine: Queried for network/bridge state; receives dispatches
            server_url: Server base URL; the ping goes to <server_url>/PING
            timer_config: Supplies the ping timeout
            traffic_gate: Debug gate; a closed gate fails the probe
            loop: Event loop for timers (running loop if None)
            session: requests session used for the ping
        """
        self._machine = state_machine
        self._url = build_ping_url(server_url) if server_url else None
        self._config = timer_config or TimerConfig()
        self._gate = traffic_gate
        self._loop = loop
        self._session = session or requests.Session()

        self._handle: Optional[asyncio.TimerHandle] = None
        self._interval_ms: Optional[int] = None

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def pending(self) -> bool:
        """Whether a timer is currently armed."""
        return self._handle is not None

    @property
    def interval_ms(self) -> Optional[int]:
        """Current cadence, None when cancelled."""
        return self._interval_ms

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay_ms: int):
        """Cancel any pending timer and probe again after delay_ms."""
        self._cancel_handle()
        self._interval_ms = delay_ms
        self._arm()
        logger.debug(f"[Prober] Next probe in {delay_ms} ms")

    def cancel(self):
        """Cancel the pending timer and stop the cadence."""
        if self._handle is not None:
            logger.debug("[Prober] Cancelled pending probe")
        self._cancel_handle()
        self._interval_ms = None

    def probe_now(self):
        """Check server reachability immediately."""
        self._probe(rearm=False)

    def _arm(self):
        self._handle = self._get_loop().call_later(self._interval_ms / 1000, self._on_timer)

    def _rearm(self):
        if self._handle is None and self._interval_ms is not None:
            self._arm()

    def _cancel_handle(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_timer(self):
        self._handle = None
        if not self._machine.network_online:
            logger.debug("[Prober] Timer fired without network, skipping probe")
            return
        self._probe(rearm=True)

    def _probe(self, rearm: bool):
        """Send a probe, through the bridge heartbeat when one is bound."""
        try:
            if self._gate is not None:
                self._gate.check()
        except NetworkFailureForced as e:
            logger.debug(f"[Prober] Probe blocked: {e}")
            self._report_later(False, rearm)
            return

        bridge = self._machine.bridge
        if bridge is not None:
            # The application's own heartbeat reports back through its events
            logger.debug("[Prober] Sending heartbeat through the application bridge")
            try:
                bridge.heartbeat.send()
            except Exception as e:
                logger.warning(f"[Prober] Bridge heartbeat failed: {e}")
                self._report_later(False, rearm)
                return
            if rearm:
                self._rearm()
            return

        if self._url is None:
            logger.warning("[Prober] No server URL configured, cannot probe")
            self._report_later(False, rearm)
            return

        logger.debug(f"[Prober] Sending a ping request to {self._url}")
        future = self._get_loop().run_in_executor(None, self._send_ping)
        future.add_done_callback(lambda f: self._on_ping_done(f, rearm))

    def _send_ping(self) -> bool:
        """Blocking POST to the ping endpoint (runs in the executor)."""
        return send_ping(self._session, self._url, self._config.ping_timeout_ms)

    def _on_ping_done(self, future: asyncio.Future, rearm: bool):
        if future.cancelled():
            return
        try:
            ok = future.result()
        except Exception as e:
            logger.error(f"[Prober] Unexpected ping error: {e}")
            ok = False
        self._report(ok, rearm)

    def _report(self, ok: bool, rearm: bool):
        reason = ActivationReason.SERVER_AVAILABLE if ok else ActivationReason.BAD_RESPONSE
        self._machine.dispatch(reason)
        if rearm:
            self._rearm()

    def _report_later(self, ok: bool, rearm: bool):
        # Keep dispatch off the caller's stack, as with a network response
        self._get_loop().call_soon(self._report, ok, rearm)
