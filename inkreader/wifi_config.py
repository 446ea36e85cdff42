"""Saved wireless networks and the JSON file that keeps them."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

CONFIG_FILENAME = "wifi_networks.json"


@dataclass
class SavedNetwork:
    """A network the device remembers."""

    ssid: str
    password: str = ""
    auto_connect: bool = True
    priority: int = 0


def _network_from_json(entry: dict[str, Any]) -> SavedNetwork:
    ssid = entry.get("ssid")
    password = entry.get("password")
    auto_connect = entry.get("autoConnect")
    priority = entry.get("priority")
    return SavedNetwork(
        ssid=ssid if isinstance(ssid, str) else "",
        password=password if isinstance(password, str) else "",
        auto_connect=auto_connect if isinstance(auto_connect, bool) else True,
        priority=priority if isinstance(priority, int) and not isinstance(priority, bool) else 0,
    )


class WiFiConfig:
    """Saved networks, highest priority first, stored as JSON at ``path``."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.networks: list[SavedNetwork] = []
        self.active_index = -1

    @property
    def is_configured(self) -> bool:
        return bool(self.networks)

    def _sort(self) -> None:
        self.networks.sort(key=lambda network: network.priority, reverse=True)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.networks):
            raise IndexError(f"no saved network {index}")

    def load(self) -> None:
        """Replace the saved networks with those in the file.

        A missing file or one without a network list leaves no networks.
        Raises ValueError if the file is not valid JSON.
        """
        self.networks = []
        self.active_index = -1
        if not self.path.is_file():
            log.info("no WiFi configuration at %s", self.path)
            return

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid WiFi configuration in {self.path}: {exc}") from exc

        entries = document.get("networks") if isinstance(document, dict) else None
        if not isinstance(entries, list):
            log.warning("no networks array in %s", self.path)
            return

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            network = _network_from_json(entry)
            if network.ssid:
                self.networks.append(network)
        self._sort()
        log.info("loaded %d networks", len(self.networks))

    def to_json(self) -> str:
        """The saved networks as compact JSON."""
        document = {
            "networks": [
                {
                    "ssid": network.ssid,
                    "password": network.password,
                    "autoConnect": network.auto_connect,
                    "priority": network.priority,
                }
                for network in self.networks
            ]
        }
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False)

    def save(self) -> None:
        """Write the saved networks to the file, creating its directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.to_json(), encoding="utf-8")

    def remember(self, ssid: str, password: str) -> SavedNetwork:
        """Store a network's password, adding the network if it is new, and save."""
        network = next((known for known in self.networks if known.ssid == ssid), None)
        if network is not None:
            network.password = password
        else:
            network = SavedNetwork(
                ssid=ssid, password=password, auto_connect=True, priority=len(self.networks)
            )
            self.networks.append(network)
        self.save()
        return network

    def remove(self, index: int) -> SavedNetwork:
        """Forget the network at ``index`` and save; raises IndexError if absent."""
        self._check_index(index)
        removed = self.networks.pop(index)
        if self.active_index == index:
            self.active_index = -1
        elif self.active_index > index:
            self.active_index -= 1
        self.save()
        return removed

    def toggle_auto_connect(self, index: int) -> bool:
        """Flip auto-connect for a network, save, and return the new value."""
        self._check_index(index)
        network = self.networks[index]
        network.auto_connect = not network.auto_connect
        self.save()
        return network.auto_connect

    def change_priority(self, index: int, increase: bool) -> None:
        """Raise or lower a network's priority (never below 0), re-sort and save."""
        self._check_index(index)
        network = self.networks[index]
        network.priority = network.priority + 1 if increase else max(0, network.priority - 1)
        self._sort()
        self.save()

    def first_auto_connect(self) -> SavedNetwork | None:
        """The highest-ranked network with auto-connect on, if any."""
        return next((network for network in self.networks if network.auto_connect), None)