"""
Android-backed connectivity and Wi-Fi services.

The host application hands a Kotlin bridge object to Python via Chaquopy
(see set_bridge). The bridge exposes the ConnectivityManager and WifiManager
calls below using their Java names, and turns Python callables into
BroadcastReceivers on the Kotlin side.
"""

import logging
from typing import Iterable, Optional

from connectivity.services.adapter import (
    BroadcastCallback,
    ConnectivityService,
    NetworkInfo,
    WifiInfo,
    WifiService,
)

logger = logging.getLogger(__name__)

_bridge = None


def set_bridge(bridge) -> None:
    """
    Install the Kotlin connectivity bridge. Called from Kotlin at startup.

    Args:
        bridge: Kotlin object exposing the connectivity/Wi-Fi calls
    """
    global _bridge
    _bridge = bridge
    logger.info("Connectivity bridge installed")


def get_bridge():
    """Return the installed Kotlin bridge, or None."""
    return _bridge


def _require_bridge(bridge):
    bridge = bridge if bridge is not None else _bridge
    if bridge is None:
        raise RuntimeError(
            "No connectivity bridge available. Call set_bridge() from Kotlin first.")
    return bridge


class AndroidConnectivityService(ConnectivityService):
    """ConnectivityManager access through the Kotlin bridge."""

    def __init__(self, bridge=None):
        self.bridge = _require_bridge(bridge)

    def sdk_version(self) -> int:
        return int(self.bridge.getSdkInt())

    def get_active_network_info(self) -> Optional[NetworkInfo]:
        try:
            info = self.bridge.getActiveNetworkInfo()
        except Exception as e:
            logger.error(f"Failed to read active network: {e}")
            return None
        if info is None:
            return None
        return NetworkInfo(int(info.getType()), bool(info.isConnected()))

    def is_active_network_metered(self) -> bool:
        return bool(self.bridge.isActiveNetworkMetered())

    def get_restrict_background_status(self) -> int:
        return int(self.bridge.getRestrictBackgroundStatus())

    def register_receiver(
            self,
            callback: BroadcastCallback,
            actions: Iterable[str]) -> None:
        actions = list(actions)
        self.bridge.registerReceiver(callback, actions)
        logger.debug(f"Registered broadcast receiver for {actions}")

    def unregister_receiver(self, callback: BroadcastCallback) -> None:
        self.bridge.unregisterReceiver(callback)
        logger.debug("Unregistered broadcast receiver")


class AndroidWifiService(WifiService):
    """WifiManager access through the Kotlin bridge."""

    def __init__(self, bridge=None):
        self.bridge = _require_bridge(bridge)

    def get_connection_info(self) -> Optional[WifiInfo]:
        try:
            info = self.bridge.getConnectionInfo()
        except Exception as e:
            logger.error(f"Failed to read Wi-Fi connection info: {e}")
            return None
        if info is None:
            return None
        return WifiInfo(
            ssid=info.getSSID(),
            bssid=info.getBSSID(),
            ip_address=int(info.getIpAddress()))
