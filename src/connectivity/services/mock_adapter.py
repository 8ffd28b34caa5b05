"""
In-memory connectivity and Wi-Fi services.
Used by the test suites and for running the plugin off-device.
"""

import logging
from typing import Dict, Iterable, List, Optional

from connectivity.services.adapter import (
    NOUGAT_SDK_INT,
    BroadcastCallback,
    ConnectivityService,
    NetworkInfo,
    RestrictBackgroundStatus,
    WifiInfo,
    WifiService,
)

logger = logging.getLogger(__name__)


class MockConnectivityService(ConnectivityService):
    """
    Mock connectivity manager.

    State is set directly by the caller; broadcasts are raised with send_broadcast().
    """

    def __init__(
        self,
        network_info: Optional[NetworkInfo] = None,
        metered: bool = False,
        restrict_status: int = RestrictBackgroundStatus.DISABLED,
        sdk_int: int = NOUGAT_SDK_INT
    ):
        self.network_info = network_info
        self.metered = metered
        self.restrict_status = restrict_status
        self.sdk_int = sdk_int
        self.receivers: Dict[BroadcastCallback, List[str]] = {}
        self.restrict_status_queries = 0

    def sdk_version(self) -> int:
        return self.sdk_int

    def get_active_network_info(self) -> Optional[NetworkInfo]:
        return self.network_info

    def is_active_network_metered(self) -> bool:
        return self.metered

    def get_restrict_background_status(self) -> int:
        self.restrict_status_queries += 1
        return self.restrict_status

    def register_receiver(
            self,
            callback: BroadcastCallback,
            actions: Iterable[str]) -> None:
        self.receivers[callback] = list(actions)
        logger.debug(f"Mock receiver registered for {self.receivers[callback]}")

    def unregister_receiver(self, callback: BroadcastCallback) -> None:
        if self.receivers.pop(callback, None) is None:
            raise ValueError("Receiver not registered")

    def set_network(
            self,
            network_info: Optional[NetworkInfo],
            metered: bool = False) -> None:
        """Update the active network for testing."""
        self.network_info = network_info
        self.metered = metered

    def send_broadcast(self, action: str) -> int:
        """
        Deliver a broadcast to every receiver listening for the action.

        Returns:
            Number of receivers reached
        """
        targets = [cb for cb, actions in self.receivers.items() if action in actions]
        for callback in targets:
            callback(action)
        return len(targets)


class MockWifiService(WifiService):
    """Mock Wi-Fi manager returning a configurable connection."""

    def __init__(self, wifi_info: Optional[WifiInfo] = None):
        self.wifi_info = wifi_info

    def get_connection_info(self) -> Optional[WifiInfo]:
        return self.wifi_info
