"""
Connectivity status derivation and Wi-Fi field formatting.

The status string reported to the application is "<type>/<metered>", where
type is one of wifi, mobile or none and metered is empty unless the active
network is metered and the OS reports a background data restriction.
"""

from dataclasses import dataclass
from typing import Optional

from connectivity.services.adapter import (
    ConnectivityService,
    NetworkType,
    RestrictBackgroundStatus,
    WifiInfo,
)

WIFI = "wifi"
MOBILE = "mobile"
NONE = "none"

METERED = "metered"
BLOCKED_BACKGROUND_DATA = "blockedBackgroundData"
WHITELISTED_BACKGROUND_DATA = "whitelistedBackgroundData"

_CLASSIFICATION = {
    NetworkType.ETHERNET: WIFI,
    NetworkType.WIFI: WIFI,
    NetworkType.WIMAX: WIFI,
    NetworkType.MOBILE: MOBILE,
    NetworkType.MOBILE_DUN: MOBILE,
    NetworkType.MOBILE_HIPRI: MOBILE,
}

_RESTRICTION_SUFFIX = {
    RestrictBackgroundStatus.ENABLED: BLOCKED_BACKGROUND_DATA,
    RestrictBackgroundStatus.WHITELISTED: WHITELISTED_BACKGROUND_DATA,
    RestrictBackgroundStatus.DISABLED: METERED,
}


def classify_network_type(network_type: Optional[int]) -> str:
    """Map an OS transport type to wifi, mobile or none."""
    return _CLASSIFICATION.get(network_type, NONE)


def metered_suffix(
        metered: bool,
        restrict_status: Optional[int],
        supports_restrict: bool) -> str:
    """
    Build the metered part of the status string.

    Without restriction support a metered network reports the same empty
    suffix as an unmetered one.
    """
    if not metered or not supports_restrict:
        return ""
    return _RESTRICTION_SUFFIX.get(restrict_status, "")


def check_network_type(
        service: ConnectivityService,
        supports_restrict: bool) -> str:
    """
    Derive the current status string from the connectivity service.

    Args:
        service: Connectivity service to query
        supports_restrict: Whether the OS reports background data restriction

    Returns:
        Status string such as "wifi/" or "mobile/blockedBackgroundData"
    """
    info = service.get_active_network_info()
    if info is not None and info.connected:
        network_type = classify_network_type(info.network_type)
    else:
        network_type = NONE

    metered = service.is_active_network_metered()
    restrict_status = None
    if metered and supports_restrict:
        restrict_status = service.get_restrict_background_status()

    return f"{network_type}/{metered_suffix(metered, restrict_status, supports_restrict)}"


def strip_ssid_quotes(ssid: Optional[str]) -> Optional[str]:
    """Remove the double quotes the OS wraps around SSIDs."""
    if ssid is None:
        return None
    return ssid.replace('"', "")


def format_ip_address(packed: Optional[int]) -> Optional[str]:
    """
    Format a packed IPv4 address as dotted decimal.

    The least significant byte is the first octet. 0 means no address.
    """
    if not packed:
        return None
    packed &= 0xFFFFFFFF
    return ".".join(str(packed >> shift & 0xFF) for shift in (0, 8, 16, 24))


@dataclass
class WifiSnapshot:
    """Wi-Fi fields as reported to the application."""
    ssid: Optional[str] = None
    bssid: Optional[str] = None
    ip_address: Optional[str] = None

    @classmethod
    def from_wifi_info(cls, info: Optional[WifiInfo]) -> "WifiSnapshot":
        if info is None:
            return cls()
        return cls(
            ssid=strip_ssid_quotes(info.ssid),
            bssid=info.bssid,
            ip_address=format_ip_address(info.ip_address))

    def to_dict(self) -> dict:
        return {
            'ssid': self.ssid,
            'bssid': self.bssid,
            'ip_address': self.ip_address,
        }
