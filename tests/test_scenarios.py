"""
End-to-end scenarios: state machine, prober and heartbeat controller together.

Only the HTTP session and the application bridge are doubles; timers run on
a real event loop.
"""
from unittest.mock import MagicMock, Mock

import pytest
import requests

from offlinemode.core.state_machine import ConnectivityStateMachine
from offlinemode.core.types import ActivationReason, OnlineEvent, TimerConfig
from offlinemode.services.debug import DebugControls
from offlinemode.services.signal_sources import ManualSignalSource
from offlinemode.ui.console_ui import ConsoleOfflineUI

R = ActivationReason


class TestScenarios:
    @pytest.fixture
    def session(self):
        session = MagicMock()
        session.post.return_value = Mock(status_code=200)
        return session

    @pytest.fixture
    def offline_ui(self):
        return Mock(wraps=ConsoleOfflineUI())

    @pytest.fixture
    def source(self):
        return ManualSignalSource()

    @pytest.fixture
    def machine(self, offline_ui, session, source, status, loop):
        machine = ConnectivityStateMachine(
            offline_ui,
            server_url="http://srv",
            timer_config=TimerConfig(heartbeat_interval_ms=200, ping_timeout_ms=20),
            status=status,
            signal_sources=[source],
            loop=loop,
            session=session,
        )
        yield machine
        machine.stop()

    def test_network_back_then_probe_without_bridge(self, machine, source, offline_ui, session, drive):
        """Test a network return is verified by a probe before trusting it."""
        session.post.side_effect = requests.ConnectionError("no route")
        machine.start()
        source.emit(R.NO_NETWORK)
        assert machine.network_online is False
        assert machine._prober.pending is False

        session.post.side_effect = None
        source.emit(R.NETWORK_ONLINE)
        assert machine._prober.interval_ms == 20

        # No bridge: the probe succeeds but the application must be reloaded
        drive(lambda: machine.last_reason == R.ONLINE_APP_NOT_STARTED)
        offline_ui.activate.assert_called_with(R.ONLINE_APP_NOT_STARTED)
        assert machine.online is False

    def test_network_back_then_probe_with_bridge(self, machine, source, status):
        """Test offline without network, NETWORK_ONLINE, heartbeat probe, online."""
        bridge = MagicMock()
        bridge.offline_mode_timeout = -1
        events = []
        machine.add_listener(events.append)

        machine.start()
        machine.bind_bridge(bridge)
        assert machine.online is True

        source.emit(R.NO_NETWORK)
        assert machine.online is False
        bridge.heartbeat.set_interval.assert_called_with(-1)

        source.emit(R.NETWORK_ONLINE)
        bridge.heartbeat.send.assert_called_once()
        assert bridge.heartbeat.set_interval.call_args[0][0] >= 0

        # The application's heartbeat answers through the adapter
        adapter = bridge.add_listener.call_args[0][0]
        adapter.on_connection_status(200)

        assert machine.online is True
        assert status.online is True
        assert events[-1] == OnlineEvent()

    def test_server_outage_recovers_at_fixed_cadence(self, machine, session, drive):
        """Test a failing server is re-probed until it answers again."""
        session.post.side_effect = requests.Timeout("slow")
        machine.start()

        drive(lambda: session.post.call_count >= 3)
        assert machine.last_reason == R.BAD_RESPONSE
        assert machine.online is False

        session.post.side_effect = None
        drive(lambda: machine.last_reason == R.ONLINE_APP_NOT_STARTED)

    def test_forced_offline_blocks_probes(self, machine, session, drive):
        """Test forcing offline stops all probing until released."""
        controls = DebugControls(machine)
        machine.start()

        controls.go_offline()
        calls = session.post.call_count
        assert machine._prober.pending is False

        controls.go_online()
        drive(lambda: session.post.call_count > calls)
        drive(lambda: machine.last_reason == R.ONLINE_APP_NOT_STARTED)

    def test_simulated_server_down(self, machine, session, drive):
        """Test server_down fails probes without flagging the network down."""
        controls = DebugControls(machine)
        controls.server_down()
        machine.start()

        drive(lambda: machine.last_reason == R.BAD_RESPONSE)
        assert machine.network_online is True
        session.post.assert_not_called()

        controls.server_up()
        drive(lambda: machine.last_reason == R.ONLINE_APP_NOT_STARTED)
