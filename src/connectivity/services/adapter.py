"""
OS service interfaces for connectivity and Wi-Fi state.
Allows the platform services to be injected, and replaced with test doubles in CI.
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional


class NetworkType:
    """Transport type codes reported for the active network."""
    MOBILE = 0
    WIFI = 1
    MOBILE_MMS = 2
    MOBILE_SUPL = 3
    MOBILE_DUN = 4
    MOBILE_HIPRI = 5
    WIMAX = 6
    BLUETOOTH = 7
    DUMMY = 8
    ETHERNET = 9
    VPN = 17


class RestrictBackgroundStatus:
    """Data Saver state for this app while on a metered network."""
    DISABLED = 1
    WHITELISTED = 2
    ENABLED = 3


CONNECTIVITY_ACTION = "android.net.conn.CONNECTIVITY_CHANGE"
ACTION_RESTRICT_BACKGROUND_CHANGED = "android.net.conn.RESTRICT_BACKGROUND_CHANGED"

# First OS version that reports background data restriction
NOUGAT_SDK_INT = 24


class NetworkInfo:
    """Represents the OS view of the active network."""

    def __init__(self, network_type: int, connected: bool = True):
        self.network_type = network_type
        self.connected = connected

    def __repr__(self) -> str:
        return f"NetworkInfo(type={self.network_type}, connected={self.connected})"


class WifiInfo:
    """Represents the current Wi-Fi connection as reported by the OS."""

    def __init__(
            self,
            ssid: Optional[str] = None,
            bssid: Optional[str] = None,
            ip_address: int = 0):
        """
        Args:
            ssid: Network SSID, usually wrapped in double quotes by the OS
            bssid: Access point hardware address
            ip_address: IPv4 address packed into an int, least significant byte first
        """
        self.ssid = ssid
        self.bssid = bssid
        self.ip_address = ip_address

    def __repr__(self) -> str:
        return f"WifiInfo(ssid={self.ssid!r}, bssid={self.bssid!r}, ip={self.ip_address})"


BroadcastCallback = Callable[[str], None]


class ConnectivityService(ABC):
    """Abstract interface over the OS connectivity manager."""

    @abstractmethod
    def sdk_version(self) -> int:
        """Return the OS API level."""

    @abstractmethod
    def get_active_network_info(self) -> Optional[NetworkInfo]:
        """
        Get the currently preferred network.

        Returns:
            NetworkInfo for the active network, or None if there is none
        """

    @abstractmethod
    def is_active_network_metered(self) -> bool:
        """Check whether the OS advises limiting data on the active network."""

    @abstractmethod
    def get_restrict_background_status(self) -> int:
        """
        Get the background data restriction for this app.

        Only meaningful from NOUGAT_SDK_INT onwards.

        Returns:
            One of the RestrictBackgroundStatus codes
        """

    @abstractmethod
    def register_receiver(
            self,
            callback: BroadcastCallback,
            actions: Iterable[str]) -> None:
        """
        Register a broadcast callback.

        Args:
            callback: Called with the action name for each matching broadcast
            actions: Broadcast actions to listen for
        """

    @abstractmethod
    def unregister_receiver(self, callback: BroadcastCallback) -> None:
        """Remove a previously registered broadcast callback."""


class WifiService(ABC):
    """Abstract interface over the OS Wi-Fi manager."""

    @abstractmethod
    def get_connection_info(self) -> Optional[WifiInfo]:
        """
        Get the current Wi-Fi connection.

        Returns:
            WifiInfo, or None if the Wi-Fi subsystem has nothing to report
        """
