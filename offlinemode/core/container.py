"""Dependency Injection Container - composition root for offlinemode."""
from pathlib import Path
from typing import Optional

from dependency_injector import containers, providers

from offlinemode.core.config import Config
from offlinemode.core.constants import LINK_POLL_INTERVAL
from offlinemode.core.state_machine import ConnectivityStateMachine
from offlinemode.core.status import network_status
from offlinemode.services.debug import DebugControls, TrafficGate
from offlinemode.services.signal_sources import NetworkLinkSignalSource
from offlinemode.ui.console_ui import ConsoleOfflineUI


def _timer_config(config: Config):
    return config.timer_config()


class ApplicationContainer(containers.DeclarativeContainer):
    """DI Container for application-wide dependencies."""

    options = providers.Configuration()

    # ═══════════════════════════════════════════════════════════
    # CONFIGURATION
    # ═══════════════════════════════════════════════════════════

    config = providers.Singleton(Config, config_path=options.config_path)

    timer_config = providers.Singleton(_timer_config, config=config)

    # ═══════════════════════════════════════════════════════════
    # SINGLETONS - one state machine per application
    # ═══════════════════════════════════════════════════════════

    network_status = providers.Object(network_status)

    traffic_gate = providers.Singleton(TrafficGate)

    offline_ui = providers.Singleton(ConsoleOfflineUI)

    link_source = providers.Singleton(
        NetworkLinkSignalSource,
        interval=options.link_poll_interval,
    )

    signal_sources = providers.List(link_source)

    state_machine = providers.Singleton(
        ConnectivityStateMachine,
        offline_ui=offline_ui,
        server_url=options.server_url,
        timer_config=timer_config,
        status=network_status,
        traffic_gate=traffic_gate,
        signal_sources=signal_sources,
    )

    debug_controls = providers.Singleton(
        DebugControls,
        state_machine=state_machine,
        traffic_gate=traffic_gate,
    )


def create_container(
    server_url: Optional[str] = None,
    config_path: Optional[Path] = None,
    heartbeat_ms: Optional[int] = None,
    ping_timeout_ms: Optional[int] = None,
) -> ApplicationContainer:
    """
    Build the container from the config file plus explicit overrides.

    Explicit arguments win over the config file values.
    """
    container = ApplicationContainer()
    container.options.config_path.from_value(config_path)

    config: Config = container.config()
    if heartbeat_ms is not None:
        config.set("heartbeat_interval_ms", heartbeat_ms)
    if ping_timeout_ms is not None:
        config.set("ping_timeout_ms", ping_timeout_ms)

    container.options.server_url.from_value(server_url or config.get("server_url"))
    container.options.link_poll_interval.from_value(config.get("link_poll.interval", LINK_POLL_INTERVAL))

    if not config.get("link_poll.enabled", True):
        container.signal_sources.override(providers.List())

    return container
