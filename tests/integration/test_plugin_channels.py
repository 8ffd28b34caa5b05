"""
Integration tests for the connectivity plugin over its channels.
Simulates the application side calling methods and subscribing to status
changes, with mock OS services standing in for the device.
"""

from unittest.mock import MagicMock

import pytest

from connectivity.channels.messenger import (
    CallbackEventSink,
    CapturingResult,
    Messenger,
)
from connectivity.config import ConnectivitySettings
from connectivity.plugin import ConnectivityPlugin, register_android, register_with
from connectivity.services import android_adapter
from connectivity.services.adapter import (
    ACTION_RESTRICT_BACKGROUND_CHANGED,
    CONNECTIVITY_ACTION,
    NetworkInfo,
    NetworkType,
    RestrictBackgroundStatus,
    WifiInfo,
)
from connectivity.services.mock_adapter import MockConnectivityService, MockWifiService

METHODS = "plugins.flutter.io/connectivity"
EVENTS = "plugins.flutter.io/connectivity_status"


@pytest.fixture
def connectivity_service():
    return MockConnectivityService(network_info=NetworkInfo(NetworkType.WIFI))


@pytest.fixture
def wifi_service():
    return MockWifiService(WifiInfo(
        ssid='"MyNetwork"', bssid="02:00:00:00:00:01", ip_address=0x0101080A))


@pytest.fixture
def messenger(connectivity_service, wifi_service):
    messenger = Messenger()
    register_with(messenger, connectivity_service, wifi_service)
    return messenger


class TestMethodChannel:
    """Test one-shot queries."""

    def test_check_wifi(self, messenger):
        result = messenger.invoke_method(METHODS, "check")
        assert result.status == CapturingResult.SUCCESS
        assert result.value == "wifi/"

    def test_check_disconnected(self, messenger, connectivity_service):
        connectivity_service.set_network(None)
        assert messenger.invoke_method(METHODS, "check").value == "none/"

    def test_check_metered_mobile(self, messenger, connectivity_service):
        connectivity_service.set_network(NetworkInfo(NetworkType.MOBILE_HIPRI), metered=True)
        connectivity_service.restrict_status = RestrictBackgroundStatus.WHITELISTED
        assert messenger.invoke_method(METHODS, "check").value == "mobile/whitelistedBackgroundData"

    def test_wifi_fields(self, messenger):
        assert messenger.invoke_method(METHODS, "wifiName").value == "MyNetwork"
        assert messenger.invoke_method(METHODS, "wifiBSSID").value == "02:00:00:00:00:01"
        assert messenger.invoke_method(METHODS, "wifiIPAddress").value == "10.8.1.1"

    def test_no_wifi_connection(self, messenger, wifi_service):
        wifi_service.wifi_info = None
        for method in ("wifiName", "wifiBSSID", "wifiIPAddress"):
            result = messenger.invoke_method(METHODS, method)
            assert result.status == CapturingResult.SUCCESS
            assert result.value is None

    def test_zero_ip_address_is_null(self, messenger, wifi_service):
        wifi_service.wifi_info = WifiInfo(ssid="<unknown ssid>", ip_address=0)
        assert messenger.invoke_method(METHODS, "wifiIPAddress").value is None

    def test_wifi_service_unavailable(self, connectivity_service):
        messenger = Messenger()
        register_with(messenger, connectivity_service, None)
        assert messenger.invoke_method(METHODS, "wifiName").value is None
        assert messenger.invoke_method(METHODS, "check").value == "wifi/"

    def test_wifi_snapshot(self, connectivity_service, wifi_service):
        plugin = ConnectivityPlugin(connectivity_service, wifi_service)
        assert plugin.wifi_snapshot().to_dict() == {
            'ssid': "MyNetwork",
            'bssid': "02:00:00:00:00:01",
            'ip_address': "10.8.1.1",
        }

    def test_unknown_method_not_implemented(self, messenger):
        result = messenger.invoke_method(METHODS, "wifiSignalStrength")
        assert result.status == CapturingResult.NOT_IMPLEMENTED


class TestEventChannel:
    """Test the status change stream."""

    def test_broadcast_emits_status(self, messenger, connectivity_service):
        events = []
        messenger.listen(EVENTS, CallbackEventSink(events.append))

        connectivity_service.set_network(NetworkInfo(NetworkType.MOBILE))
        connectivity_service.send_broadcast(CONNECTIVITY_ACTION)

        assert events == ["mobile/"]

    def test_restriction_change_emits_status(self, messenger, connectivity_service):
        events = []
        messenger.listen(EVENTS, CallbackEventSink(events.append))

        connectivity_service.set_network(NetworkInfo(NetworkType.MOBILE), metered=True)
        connectivity_service.restrict_status = RestrictBackgroundStatus.ENABLED
        connectivity_service.send_broadcast(ACTION_RESTRICT_BACKGROUND_CHANGED)

        assert events == ["mobile/blockedBackgroundData"]

    def test_old_os_ignores_restriction_broadcast(self):
        service = MockConnectivityService(
            network_info=NetworkInfo(NetworkType.WIFI), sdk_int=23)
        messenger = Messenger()
        plugin = register_with(messenger, service)
        events = []
        messenger.listen(EVENTS, CallbackEventSink(events.append))

        assert plugin.supports_background_restriction is False
        assert service.send_broadcast(ACTION_RESTRICT_BACKGROUND_CHANGED) == 0
        assert events == []

    def test_no_events_after_cancel(self, messenger, connectivity_service):
        events = []
        messenger.listen(EVENTS, CallbackEventSink(events.append))
        connectivity_service.send_broadcast(CONNECTIVITY_ACTION)
        messenger.cancel(EVENTS)

        connectivity_service.send_broadcast(CONNECTIVITY_ACTION)
        connectivity_service.send_broadcast(CONNECTIVITY_ACTION)

        assert events == ["wifi/"]
        assert connectivity_service.receivers == {}

    def test_relisten_replaces_subscriber(self, messenger, connectivity_service):
        first, second = [], []
        messenger.listen(EVENTS, CallbackEventSink(first.append))
        messenger.listen(EVENTS, CallbackEventSink(second.append))

        connectivity_service.send_broadcast(CONNECTIVITY_ACTION)

        assert len(connectivity_service.receivers) == 1
        assert first == []
        assert second == ["wifi/"]

    def test_cancel_without_listen_is_noop(self, messenger, connectivity_service):
        messenger.cancel(EVENTS)
        assert connectivity_service.receivers == {}


class TestRegistration:
    """Test plugin registration."""

    def test_custom_channel_names(self, connectivity_service):
        messenger = Messenger()
        settings = ConnectivitySettings(method_channel="m", event_channel="e")
        plugin = register_with(messenger, connectivity_service, settings=settings)

        assert messenger.invoke_method("m", "check").value == "wifi/"
        messenger.listen("e", CallbackEventSink(lambda e: None))
        assert plugin.listening is True

    def test_capability_checked_once(self):
        service = MagicMock()
        service.sdk_version.return_value = 30
        service.get_active_network_info.return_value = None
        service.is_active_network_metered.return_value = False

        plugin = ConnectivityPlugin(service)
        plugin.check()
        plugin.check()

        assert plugin.supports_background_restriction is True
        service.sdk_version.assert_called_once()

    def test_register_android(self, tmp_path):
        bridge = MagicMock()
        bridge.getSdkInt.return_value = 29
        bridge.getActiveNetworkInfo.return_value = None
        bridge.isActiveNetworkMetered.return_value = False
        bridge.getConnectionInfo.return_value = None
        messenger = Messenger()

        try:
            plugin = register_android(
                messenger, bridge, config_path=str(tmp_path / "missing.yaml"))

            assert plugin.supports_background_restriction is True
            assert messenger.invoke_method(METHODS, "check").value == "none/"
            assert messenger.invoke_method(METHODS, "wifiBSSID").value is None
        finally:
            android_adapter.set_bridge(None)

    def test_register_android_without_bridge(self, tmp_path):
        with pytest.raises(RuntimeError):
            register_android(Messenger(), config_path=str(tmp_path / "missing.yaml"))
