"""
Connectivity plugin: answers status queries on the method channel and streams
status changes on the event channel.
"""

import logging
from typing import Any, Optional

from connectivity.channels.messenger import (
    EventChannel,
    EventSink,
    Messenger,
    MethodCall,
    MethodChannel,
    MethodResult,
    StreamHandler,
)
from connectivity.config import ConnectivitySettings, load_settings
from connectivity.logging import configure_logging
from connectivity.receiver import ConnectivityReceiver
from connectivity.services.adapter import (
    ACTION_RESTRICT_BACKGROUND_CHANGED,
    CONNECTIVITY_ACTION,
    NOUGAT_SDK_INT,
    ConnectivityService,
    WifiInfo,
    WifiService,
)
from connectivity.status import (
    WifiSnapshot,
    check_network_type,
    format_ip_address,
    strip_ssid_quotes,
)

logger = logging.getLogger(__name__)


class ConnectivityPlugin(StreamHandler):
    """
    Exposes connectivity and Wi-Fi state to the application.

    Method channel: check, wifiName, wifiBSSID, wifiIPAddress.
    Event channel: one subscriber at a time, receiving the status string
    whenever the OS reports a connectivity or Data Saver change.
    """

    def __init__(
        self,
        connectivity_service: ConnectivityService,
        wifi_service: Optional[WifiService] = None
    ):
        """
        Args:
            connectivity_service: OS connectivity manager
            wifi_service: OS Wi-Fi manager, None if the device has no Wi-Fi
        """
        self.connectivity_service = connectivity_service
        self.wifi_service = wifi_service
        self.supports_background_restriction = (
            connectivity_service.sdk_version() >= NOUGAT_SDK_INT)
        self.receiver: Optional[ConnectivityReceiver] = None

        self._handlers = {
            'check': self.check,
            'wifiName': self.wifi_name,
            'wifiBSSID': self.wifi_bssid,
            'wifiIPAddress': self.wifi_ip_address,
        }

        logger.info(
            f"Connectivity plugin initialized: "
            f"background_restriction={self.supports_background_restriction}, "
            f"wifi={'available' if wifi_service else 'unavailable'}"
        )

    # --- Method channel ---

    def on_method_call(self, call: MethodCall, result: MethodResult) -> None:
        handler = self._handlers.get(call.method)
        if handler is None:
            logger.warning(f"Method not implemented: {call.method}")
            result.not_implemented()
            return
        result.success(handler())

    def check(self) -> str:
        """Return the current status string, e.g. "wifi/" or "mobile/metered"."""
        return check_network_type(
            self.connectivity_service, self.supports_background_restriction)

    def _wifi_info(self) -> Optional[WifiInfo]:
        if self.wifi_service is None:
            return None
        return self.wifi_service.get_connection_info()

    def wifi_name(self) -> Optional[str]:
        info = self._wifi_info()
        return strip_ssid_quotes(info.ssid) if info else None

    def wifi_bssid(self) -> Optional[str]:
        info = self._wifi_info()
        return info.bssid if info else None

    def wifi_ip_address(self) -> Optional[str]:
        info = self._wifi_info()
        return format_ip_address(info.ip_address) if info else None

    def wifi_snapshot(self) -> WifiSnapshot:
        """Read all Wi-Fi fields from a single connection info query."""
        return WifiSnapshot.from_wifi_info(self._wifi_info())

    # --- Event channel ---

    def _actions(self) -> list:
        actions = [CONNECTIVITY_ACTION]
        if self.supports_background_restriction:
            actions.append(ACTION_RESTRICT_BACKGROUND_CHANGED)
        return actions

    def on_listen(self, arguments: Any, events: EventSink) -> None:
        if self.receiver is not None:
            logger.info("Replacing existing status subscriber")
            self._stop_receiver()

        self.receiver = ConnectivityReceiver(
            self.connectivity_service,
            lambda action: events.success(self.check()),
            self._actions())
        self.receiver.start()

    def on_cancel(self, arguments: Any) -> None:
        if self.receiver is None:
            logger.warning("Cancel received with no active subscriber")
            return
        self._stop_receiver()

    def _stop_receiver(self) -> None:
        receiver, self.receiver = self.receiver, None
        receiver.stop()

    @property
    def listening(self) -> bool:
        return self.receiver is not None and self.receiver.registered


def register_with(
    messenger: Messenger,
    connectivity_service: ConnectivityService,
    wifi_service: Optional[WifiService] = None,
    settings: Optional[ConnectivitySettings] = None
) -> ConnectivityPlugin:
    """
    Create the plugin and attach it to its method and event channels.

    Returns:
        The registered ConnectivityPlugin
    """
    settings = settings or ConnectivitySettings()
    plugin = ConnectivityPlugin(connectivity_service, wifi_service)

    MethodChannel(messenger, settings.method_channel).set_method_call_handler(
        plugin.on_method_call)
    EventChannel(messenger, settings.event_channel).set_stream_handler(plugin)

    logger.info(
        f"Registered on {settings.method_channel} and {settings.event_channel}")
    return plugin


def register_android(
    messenger: Messenger,
    bridge=None,
    config_path: Optional[str] = None
) -> ConnectivityPlugin:
    """
    Entry point for the Android host: load settings, configure logging and
    register the plugin against the Kotlin bridge.

    Raises:
        RuntimeError: If no Kotlin bridge is available
    """
    from connectivity.services.android_adapter import (
        AndroidConnectivityService,
        AndroidWifiService,
    )

    settings = load_settings(config_path)
    configure_logging(log_level=settings.log_level, log_file=settings.log_file)

    connectivity_service = AndroidConnectivityService(bridge)
    wifi_service = AndroidWifiService(connectivity_service.bridge)
    return register_with(messenger, connectivity_service, wifi_service, settings)
