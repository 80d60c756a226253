"""CLI interface for offlinemode - headless connectivity watcher.

Usage:
    offlinemode probe <server-url>
    offlinemode watch <server-url>
    offlinemode version
"""

import asyncio
from pathlib import Path
from typing import Optional

import requests
import typer
from loguru import logger

from offlinemode import __version__
from offlinemode.core.errors import ConfigError
from offlinemode.core.logger import setup_logging
from offlinemode.core.types import OfflineEvent, OnlineEvent

app = typer.Typer(
    name="offlinemode",
    help="Decide whether a server-backed application should run online or offline",
    add_completion=False,
)


def _describe(event) -> str:
    if isinstance(event, OnlineEvent):
        return "🟢 ONLINE"
    if isinstance(event, OfflineEvent):
        return f"🔴 OFFLINE ({event.reason})"
    return str(event)


@app.command()
def version():
    """Show version information."""
    typer.echo(f"offlinemode v{__version__}")


@app.command()
def probe(
    server_url: str = typer.Argument(..., help="Server base URL"),
    timeout_ms: int = typer.Option(10000, "--timeout-ms", "-t", help="Probe timeout in milliseconds"),
):
    """Send one reachability probe to the server."""
    from offlinemode.services.prober import build_ping_url, send_ping

    url = build_ping_url(server_url)
    with requests.Session() as session:
        ok = send_ping(session, url, timeout_ms)

    if ok:
        typer.echo(f"🟢 ONLINE: {url} answered")
        return
    typer.echo(f"🔴 OFFLINE: {url} unreachable", err=True)
    raise typer.Exit(1)


async def _watch(container):
    machine = container.state_machine()
    machine.add_listener(lambda event: typer.echo(_describe(event)))
    machine.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        machine.stop()


@app.command()
def watch(
    server_url: Optional[str] = typer.Argument(None, help="Server base URL (defaults to config server_url)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    heartbeat_ms: Optional[int] = typer.Option(None, "--heartbeat-ms", help="Polling interval while online"),
    ping_timeout_ms: Optional[int] = typer.Option(None, "--ping-timeout-ms", help="Polling interval while degraded"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Console log level (defaults to config log_level)"),
):
    """Track connectivity until interrupted, printing every transition."""
    from offlinemode.core.container import create_container

    container = create_container(
        server_url=server_url,
        config_path=config_path,
        heartbeat_ms=heartbeat_ms,
        ping_timeout_ms=ping_timeout_ms,
    )
    setup_logging(log_level or container.config().get("log_level", "info"))

    try:
        container.timer_config()
    except ConfigError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(1)

    if not container.options.server_url():
        typer.echo("❌ Error: No server URL given and none configured", err=True)
        raise typer.Exit(1)

    typer.echo(f"👀 Watching {container.options.server_url()} (Ctrl-C to stop)")
    try:
        asyncio.run(_watch(container))
    except KeyboardInterrupt:
        logger.debug("[CLI] Interrupted")
    typer.echo("Stopped")


def main():
    app()


if __name__ == "__main__":
    main()
