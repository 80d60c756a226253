"""Shared fixtures."""
import asyncio
from unittest.mock import MagicMock

import pytest

from offlinemode.core.status import NetworkStatus


@pytest.fixture
def loop():
    """A private event loop, closed after the test."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def drive(loop):
    """Run the loop until predicate() is true (fails after timeout seconds)."""

    def _drive(predicate, timeout=2.0):
        async def _wait():
            deadline = loop.time() + timeout
            while not predicate():
                if loop.time() > deadline:
                    raise AssertionError("condition not reached before timeout")
                await asyncio.sleep(0.01)

        loop.run_until_complete(_wait())

    return _drive


@pytest.fixture
def status():
    return NetworkStatus()


@pytest.fixture
def ui():
    """Offline UI double that tracks its active flag like a real one."""
    ui = MagicMock()
    ui.is_active.return_value = False

    def _activate(reason):
        ui.is_active.return_value = True

    def _deactivate():
        ui.is_active.return_value = False

    ui.activate.side_effect = _activate
    ui.deactivate.side_effect = _deactivate
    return ui


@pytest.fixture
def bridge():
    """Application bridge double without a server-supplied timeout."""
    bridge = MagicMock()
    bridge.offline_mode_timeout = -1
    return bridge
