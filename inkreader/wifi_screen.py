"""The WiFi settings screen: saved networks, scanning and setup mode."""

from __future__ import annotations

import logging
from http.server import HTTPServer

from .formatting import ellipsize
from .setup_portal import SetupPortal
from .wifi_config import WiFiConfig
from .wifi_network import NOT_FOUND_RSSI, WiFiBackend, WiFiNetwork

log = logging.getLogger(__name__)

AP_SSID = "E-Reader"
MAIN_MAX_VISIBLE = 8
SCAN_MAX_VISIBLE = 10
SAVED_MAX_VISIBLE = 6
ENCRYPTED_NETWORK_MESSAGE = "Encrypted network - use web interface to enter password"


class WiFiScreen:
    """State and button handling for joining networks and the setup hotspot.

    Uploads received in setup mode go to ``upload_dir``, by default the
    directory holding the configuration file; the portal listens on
    ``portal_address``.
    """

    def __init__(self, backend: WiFiBackend, config: WiFiConfig) -> None:
        self.backend = backend
        self.config = config
        self.selected_network_index = 0
        self.is_scanning = False
        self.show_network_list = False
        self.is_connecting = False
        self.show_saved_networks_list = False
        self.selected_saved_network_index = 0
        self.selected_main_item_index = 0
        self.available_networks: list[WiFiNetwork] = []

        self.ap_mode_active = False
        self.portal: SetupPortal | None = None
        self.server: HTTPServer | None = None
        self.portal_address: tuple[str, int] = ("0.0.0.0", 80)
        self.upload_dir = config.path.parent

        self.message = ""
        self.last_error: str | None = None
        self._load_config()

    def _load_config(self) -> None:
        try:
            self.config.load()
        except ValueError as exc:
            self.last_error = str(exc)
            log.error("failed to read WiFi configuration: %s", exc)
            return
        network = self.config.first_auto_connect()
        if network is not None:
            log.info("auto-connecting to %s", network.ssid)
            self.connect_to_network(network.ssid, network.password)

    # Buttons

    def handle_select(self) -> None:
        """Leave setup mode, join the highlighted network, or start setup mode."""
        if self.ap_mode_active:
            self.stop_hotspot()
            return

        saved = self.config.networks
        if self.show_saved_networks_list and saved:
            if self.selected_saved_network_index < len(saved):
                self.select_saved_network(self.selected_saved_network_index)
        elif self.show_network_list and self.available_networks:
            if self.selected_network_index < len(self.available_networks):
                network = self.available_networks[self.selected_network_index]
                if network.is_open:
                    self.connect_to_network(network.ssid, "")
                else:
                    self.message = ENCRYPTED_NETWORK_MESSAGE
                    log.info(ENCRYPTED_NETWORK_MESSAGE)
        elif self.selected_main_item_index < len(saved):
            self.select_saved_network(self.selected_main_item_index)
        elif self.selected_main_item_index == len(saved):
            self.start_hotspot()

    def handle_down(self) -> None:
        """Move down the visible list, or scan when nothing is saved."""
        if self.ap_mode_active:
            return
        saved = self.config.networks
        if self.show_saved_networks_list and saved:
            self.selected_saved_network_index = (self.selected_saved_network_index + 1) % len(saved)
        elif self.show_network_list and self.available_networks:
            self.selected_network_index = (self.selected_network_index + 1) % len(
                self.available_networks
            )
        else:
            total = len(saved) + 1
            if total > 1:
                self.selected_main_item_index = (self.selected_main_item_index + 1) % total
            else:
                self.scan_networks()

    def handle_up(self) -> None:
        """Move up the visible list, wrapping at the top."""
        if self.ap_mode_active:
            return
        saved = self.config.networks
        if self.show_saved_networks_list and saved:
            self.selected_saved_network_index = (self.selected_saved_network_index - 1) % len(saved)
        elif self.show_network_list and self.available_networks:
            self.selected_network_index = (self.selected_network_index - 1) % len(
                self.available_networks
            )
        else:
            total = len(saved) + 1
            if total > 1:
                self.selected_main_item_index = (self.selected_main_item_index - 1) % total
            elif saved:
                self.show_saved_networks()

    # WiFi

    def toggle_wifi(self) -> None:
        """Disconnect, join the preferred saved network, or start setup mode."""
        if self.backend.is_connected:
            self.disconnect()
        elif self.config.is_configured:
            network = self.config.first_auto_connect()
            if network is not None:
                self.connect_to_network(network.ssid, network.password)
        else:
            self.start_hotspot()

    def scan_networks(self) -> None:
        """Look for networks in range and show them."""
        if self.ap_mode_active:
            return
        self.is_scanning = True
        self.available_networks = self.backend.scan()
        self.show_network_list = True
        self.selected_network_index = 0
        self.is_scanning = False

    def connect_to_network(self, ssid: str, password: str = "") -> bool:
        """Join a network and remember it if new or its password changed."""
        log.info("connecting to %s", ssid)
        self.is_connecting = True
        connected = self.backend.connect(ssid, password)
        self.is_connecting = False

        if not connected:
            log.warning("connection to %s failed", ssid)
            self.backend.disconnect()
            self.config.active_index = -1
            return False

        networks = self.config.networks
        self.config.active_index = next(
            (index for index, network in enumerate(networks) if network.ssid == ssid), -1
        )
        index = self.config.active_index
        if index == -1 or networks[index].password != password:
            try:
                self.config.remember(ssid, password)
            except OSError as exc:
                self.last_error = str(exc)
                log.error("failed to save WiFi configuration: %s", exc)
        return True

    def disconnect(self) -> None:
        self.backend.disconnect()
        self.show_network_list = False

    # Hotspot

    def start_hotspot(self) -> bool:
        """Serve the setup access point and its web portal."""
        if not self.backend.start_access_point(AP_SSID):
            log.error("failed to start hotspot")
            return False
        self.ap_mode_active = True
        self.portal = SetupPortal(self.config, self.backend, self.upload_dir)
        try:
            self.server = self.portal.build_server(*self.portal_address)
            self.server.timeout = 0
        except OSError as exc:
            self.server = None
            self.last_error = str(exc)
            log.error("failed to start setup web server: %s", exc)
        log.info("hotspot started at %s", self.backend.access_point_ip)
        return True

    def stop_hotspot(self) -> None:
        """Stop setup mode and rejoin the first saved network."""
        if self.server is not None:
            self.server.server_close()
            self.server = None
        self.portal = None
        self.backend.stop_access_point()
        self.ap_mode_active = False
        if self.config.is_configured:
            first = self.config.networks[0]
            self.connect_to_network(first.ssid, first.password)

    def update(self) -> None:
        """Serve one pending portal request; leave setup mode once configured."""
        if not self.ap_mode_active:
            return
        if self.server is not None:
            self.server.handle_request()
        if self.portal is not None and self.portal.restart_requested:
            self.stop_hotspot()

    # Saved networks

    def show_saved_networks(self) -> None:
        self.show_saved_networks_list = True
        self.show_network_list = False
        self.selected_saved_network_index = 0

    def select_saved_network(self, index: int) -> None:
        """Join the saved network at ``index``; out-of-range indexes are ignored."""
        if not 0 <= index < len(self.config.networks):
            return
        network = self.config.networks[index]
        self.connect_to_network(network.ssid, network.password)
        self.show_saved_networks_list = False

    def network_rssi(self, ssid: str) -> int:
        """Signal strength of a scanned network, -100 if it was not seen."""
        return next(
            (network.rssi for network in self.available_networks if network.ssid == ssid),
            NOT_FOUND_RSSI,
        )

    # Rendering

    def render(self) -> list[str]:
        """Lines of text describing what the screen shows."""
        lines = ["WiFi Setup", *self._status_lines()]
        if self.is_scanning:
            lines.append("Scanning...")
        elif self.show_saved_networks_list:
            lines.extend(self._saved_list_lines())
        elif self.show_network_list and self.available_networks:
            lines.extend(self._scan_lines())
        else:
            lines.extend(self._main_lines())
        if self.message:
            lines.append(self.message)
        return lines

    def _status_lines(self) -> list[str]:
        if self.ap_mode_active:
            return [
                "Setup Mode Active",
                f"Connect to '{AP_SSID}'",
                f"Go to {self.backend.access_point_ip}",
            ]
        if self.is_connecting:
            return ["Connecting...", "Please wait..."]
        if self.backend.is_connected:
            return [f"Connected: {ellipsize(self.backend.connected_ssid, 20, 17)}"]
        return ["Disconnected"]

    def _is_current(self, ssid: str) -> bool:
        return self.backend.is_connected and self.backend.connected_ssid == ssid

    def _main_lines(self) -> list[str]:
        saved = self.config.networks
        if not saved:
            return ["No saved networks", "Press DOWN to scan or SELECT for setup"]
        lines = ["Saved Networks:"]
        for index, network in enumerate(saved[:MAIN_MAX_VISIBLE]):
            text = ellipsize("• " + network.ssid, 30, 27)
            if network.auto_connect:
                text += " ✓"
            if self._is_current(network.ssid):
                text += " ✓"
            marker = ">" if index == self.selected_main_item_index else " "
            lines.append(f"{marker} {text}")
        marker = ">" if self.selected_main_item_index == len(saved) else " "
        lines.append(f"{marker} • Setup Mode (AP)")
        return lines

    def _scan_lines(self) -> list[str]:
        lines = []
        for index, network in enumerate(self.available_networks[:SCAN_MAX_VISIBLE]):
            text = ellipsize(network.ssid, 25, 17)
            if not network.is_open:
                text += " \U0001f512"
            text += f" ({network.rssi})"
            marker = ">" if index == self.selected_network_index else " "
            lines.append(f"{marker} {text}")
        return lines

    def _saved_list_lines(self) -> list[str]:
        lines = ["Saved Networks"]
        for index, network in enumerate(self.config.networks[:SAVED_MAX_VISIBLE]):
            text = ellipsize(network.ssid, 20, 17) + f" [P:{network.priority}]"
            text += " ✓" if network.auto_connect else " ✗"
            if self._is_current(network.ssid):
                text += " ✓"
            marker = ">" if index == self.selected_saved_network_index else " "
            lines.append(f"{marker} {text}")
        lines.append("SELECT: Connect  UP/DOWN: Navigate")
        return lines