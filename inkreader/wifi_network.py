"""Wireless networks and the radio that finds and joins them."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

ACCESS_POINT_IP = "192.168.4.1"
NOT_FOUND_RSSI = -100


class AuthMode(enum.Enum):
    """Security used by a wireless network."""

    OPEN = "open"
    WEP = "wep"
    WPA_PSK = "wpa_psk"
    WPA2_PSK = "wpa2_psk"
    WPA_WPA2_PSK = "wpa_wpa2_psk"
    WPA2_ENTERPRISE = "wpa2_enterprise"
    WPA3_PSK = "wpa3_psk"
    WPA2_WPA3_PSK = "wpa2_wpa3_psk"


_AUTH_NAMES = {
    AuthMode.OPEN: "Open",
    AuthMode.WEP: "WEP",
    AuthMode.WPA_PSK: "WPA",
    AuthMode.WPA2_PSK: "WPA2",
    AuthMode.WPA_WPA2_PSK: "WPA/WPA2",
    AuthMode.WPA2_ENTERPRISE: "WPA2-ENT",
}


def encryption_name(mode: AuthMode) -> str:
    """Short human name for a security mode."""
    return _AUTH_NAMES.get(mode, "Unknown")


@dataclass
class WiFiNetwork:
    """A network seen in a scan."""

    ssid: str
    rssi: int = NOT_FOUND_RSSI
    encryption: AuthMode = AuthMode.OPEN
    is_connected: bool = False

    @property
    def is_open(self) -> bool:
        return self.encryption is AuthMode.OPEN


class RadioMode(enum.Enum):
    """What the radio is doing."""

    OFF = "off"
    STATION = "station"
    ACCESS_POINT = "access_point"


class WiFiBackend:
    """A radio that scans, joins networks and serves an access point.

    This implementation keeps everything in memory: ``networks`` are the
    networks in range and ``credentials`` maps each secured network to the
    password it accepts. Subclasses can drive a real device instead.
    """

    def __init__(
        self,
        networks: Iterable[WiFiNetwork] = (),
        credentials: Mapping[str, str] | None = None,
        station_ip: str = "10.0.0.2",
        access_point_ip: str = ACCESS_POINT_IP,
    ) -> None:
        self.networks = list(networks)
        self.credentials = dict(credentials or {})
        self.station_ip = station_ip
        self.access_point_ip = access_point_ip
        self.mode = RadioMode.OFF
        self.access_point_ssid = ""
        self._connected: WiFiNetwork | None = None

    @property
    def is_enabled(self) -> bool:
        return self.mode is not RadioMode.OFF

    @property
    def is_connected(self) -> bool:
        return self._connected is not None

    @property
    def connected_ssid(self) -> str:
        """SSID of the joined network, or an empty string."""
        return self._connected.ssid if self._connected else ""

    @property
    def rssi(self) -> int:
        """Signal strength of the joined network, 0 when not joined."""
        return self._connected.rssi if self._connected else 0

    @property
    def local_ip(self) -> str:
        return self.station_ip if self._connected else "0.0.0.0"

    def scan(self) -> list[WiFiNetwork]:
        """Networks in range, marking the one currently joined."""
        return [
            dataclasses.replace(network, is_connected=network.ssid == self.connected_ssid)
            for network in self.networks
        ]

    def _find(self, ssid: str) -> WiFiNetwork | None:
        return next((network for network in self.networks if network.ssid == ssid), None)

    def connect(self, ssid: str, password: str = "") -> bool:
        """Join a network in station mode; True if it accepted the password."""
        self.mode = RadioMode.STATION
        self.access_point_ssid = ""
        self._connected = None
        network = self._find(ssid)
        if network is None:
            return False
        if not network.is_open and self.credentials.get(ssid) != password:
            return False
        self._connected = network
        return True

    def disconnect(self) -> None:
        """Leave the joined network."""
        self._connected = None

    def start_access_point(self, ssid: str, password: str = "") -> bool:
        """Leave any network and serve an access point named ``ssid``."""
        self.disconnect()
        if not ssid:
            return False
        self.mode = RadioMode.ACCESS_POINT
        self.access_point_ssid = ssid
        return True

    def stop_access_point(self) -> None:
        """Stop the access point and switch the radio off."""
        if self.mode is RadioMode.ACCESS_POINT:
            self.mode = RadioMode.OFF
        self.access_point_ssid = ""