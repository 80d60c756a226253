"""Unit tests for signal sources."""
from collections import namedtuple
from unittest.mock import Mock, patch

import pytest

from offlinemode.core.types import ActivationReason
from offlinemode.services.signal_sources import (
    ManualSignalSource,
    MessageSignalSource,
    NetworkLinkSignalSource,
)

IfStat = namedtuple("IfStat", ["isup"])

R = ActivationReason


class TestManualSignalSource:
    def test_emit_after_register(self):
        source = ManualSignalSource()
        callback = Mock()
        source.register(callback)

        source.emit(R.NO_NETWORK)

        callback.assert_called_once_with(R.NO_NETWORK)

    def test_emit_dropped_when_unregistered(self):
        source = ManualSignalSource()
        callback = Mock()
        source.register(callback)
        source.unregister()

        source.emit(R.NO_NETWORK)

        callback.assert_not_called()
        assert source.registered is False


class TestNetworkLinkSignalSource:
    @pytest.mark.parametrize(
        "stats, expected",
        [
            ({"lo": IfStat(True), "eth0": IfStat(True)}, True),
            ({"lo": IfStat(True), "eth0": IfStat(False)}, False),
            ({"lo0": IfStat(True), "en0": IfStat(True)}, True),
            ({"Loopback Pseudo-Interface 1": IfStat(True)}, False),
            ({}, False),
        ],
    )
    def test_link_up(self, stats, expected):
        """Test only non-loopback interfaces count as a network link."""
        with patch("offlinemode.services.signal_sources.psutil.net_if_stats", return_value=stats):
            assert NetworkLinkSignalSource.link_up() is expected

    def test_link_up_unknown_on_error(self):
        """Test unreadable interface stats do not report a missing network."""
        with patch("offlinemode.services.signal_sources.psutil.net_if_stats", side_effect=OSError("denied")):
            assert NetworkLinkSignalSource.link_up() is True

    def test_register_reports_missing_link(self, loop):
        """Test a cold start without link reports NO_NETWORK right away."""
        source = NetworkLinkSignalSource(interval=60, loop=loop)
        callback = Mock()

        with patch.object(NetworkLinkSignalSource, "link_up", return_value=False):
            source.register(callback)

        callback.assert_called_once_with(R.NO_NETWORK)
        source.unregister()

    def test_register_with_link_is_silent(self, loop):
        source = NetworkLinkSignalSource(interval=60, loop=loop)
        callback = Mock()

        with patch.object(NetworkLinkSignalSource, "link_up", return_value=True):
            source.register(callback)

        callback.assert_not_called()
        source.unregister()

    def test_poll_reports_changes_only(self, loop, drive):
        """Test link changes are reported once per change."""
        source = NetworkLinkSignalSource(interval=0.01, loop=loop)
        callback = Mock()
        readings = iter([True, True, False, False, True])

        with patch.object(NetworkLinkSignalSource, "link_up", side_effect=lambda: next(readings, True)):
            source.register(callback)
            drive(lambda: callback.call_count >= 2)
            source.unregister()

        assert [c.args[0] for c in callback.call_args_list] == [R.NO_NETWORK, R.NETWORK_ONLINE]


class TestMessageSignalSource:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("cordova-offline", R.NO_NETWORK),
            ("cordova-online", R.NETWORK_ONLINE),
            ("  Shell-Online ", R.NETWORK_ONLINE),
            ("my-app-offline", R.NO_NETWORK),
            ("-online", None),
            ("cordova-pause", None),
            ("offline", None),
            ("hello", None),
        ],
    )
    def test_parse(self, message, expected):
        assert MessageSignalSource.parse(message) == expected

    def test_on_message_dispatches(self):
        source = MessageSignalSource()
        callback = Mock()
        source.register(callback)

        assert source.on_message("cordova-offline") is True
        assert source.on_message("touchkit-ready") is False

        callback.assert_called_once_with(R.NO_NETWORK)
