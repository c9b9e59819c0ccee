"""
Wi-Fi model for macOS (networksetup, system_profiler, security).
"""

import json
import re
import shlex
from typing import Any, Dict, List, Optional, Union

from airctl.core.errors import AirctlError, OsCommandError
from airctl.models.base import AvailableNetwork, WifiModel

AIRPORT = "/System/Library/PrivateFrameworks/Apple80211.framework/Versions/Current/Resources/airport"

# `security` exit status when no keychain item matches
KEYCHAIN_ITEM_NOT_FOUND = 44

_SIGNAL = re.compile(r"(-?\d+)\s*dBm")


class MacModel(WifiModel):
    """networksetup implementation of the Wi-Fi operations."""

    def _hardware_ports(self) -> List[Dict[str, str]]:
        output = self.run_os_command("networksetup -listallhardwareports")
        ports = []
        current: Dict[str, str] = {}
        for line in output.splitlines():
            if line.startswith("Hardware Port: "):
                current = {"name": line.split(": ", 1)[1].strip()}
                ports.append(current)
            elif line.startswith("Device: ") and current:
                current["device"] = line.split(": ", 1)[1].strip()
        return ports

    def detect_wifi_port(self) -> str:
        for port in self._hardware_ports():
            if port["name"] in ("Wi-Fi", "AirPort") and port.get("device"):
                return port["device"]
        raise AirctlError("No Wi-Fi interface found.")

    def is_wifi_port(self, port: str) -> bool:
        return any(
            p.get("device") == port and p["name"] in ("Wi-Fi", "AirPort")
            for p in self._hardware_ports()
        )

    def _service_name(self) -> str:
        """networksetup service name ('Wi-Fi') owning the Wi-Fi port."""
        for port in self._hardware_ports():
            if port.get("device") == self.wifi_port:
                return port["name"]
        return "Wi-Fi"

    def is_wifi_on(self) -> bool:
        output = self.run_os_command(f"networksetup -getairportpower {self.wifi_port}")
        return output.strip().endswith("On")

    def wifi_on(self) -> None:
        self.run_os_command(f"networksetup -setairportpower {self.wifi_port} on")
        self.await_radio_state(True)

    def wifi_off(self) -> None:
        self.run_os_command(f"networksetup -setairportpower {self.wifi_port} off")
        self.await_radio_state(False)

    def _airport_interface(self) -> Dict[str, Any]:
        data = json.loads(self.run_os_command("system_profiler -json SPAirPortDataType"))
        for section in data.get("SPAirPortDataType", []):
            for interface in section.get("spairport_airport_interfaces", []):
                if interface.get("_name") == self.wifi_port:
                    return interface
        return {}

    def available_network_info(self) -> List[AvailableNetwork]:
        networks = []
        entries = self._airport_interface().get("spairport_airport_other_local_wireless_networks", [])
        for entry in entries:
            match = _SIGNAL.search(entry.get("spairport_signal_noise", ""))
            networks.append(AvailableNetwork(
                ssid=entry.get("_name", ""),
                signal=int(match.group(1)) if match else None,
                channel=str(entry["spairport_network_channel"]) if "spairport_network_channel" in entry else None,
                security=entry.get("spairport_security_mode"),
            ))
        networks.sort(key=lambda n: n.signal if n.signal is not None else -1000, reverse=True)
        return networks

    def available_network_names(self) -> List[str]:
        return self._dedupe(network.ssid for network in self.available_network_info())

    def connected_network_name(self) -> Optional[str]:
        output = self.run_os_command(f"networksetup -getairportnetwork {self.wifi_port}")
        prefix = "Current Wi-Fi Network: "
        line = output.strip()
        if line.startswith(prefix):
            return line[len(prefix):]
        return None

    def os_level_connect(self, network_name: str, password: Optional[str] = None) -> None:
        command = f"networksetup -setairportnetwork {self.wifi_port} {shlex.quote(network_name)}"
        if password:
            command += f" {shlex.quote(password)}"
        output = self.run_os_command(command)
        # networksetup exits 0 even when joining fails
        if output.strip().startswith(("Failed", "Could not")):
            raise AirctlError(output.strip())

    def disconnect(self) -> None:
        self.run_os_command(f"sudo {AIRPORT} -z")

    def preferred_networks(self) -> List[str]:
        output = self.run_os_command(f"networksetup -listpreferredwirelessnetworks {self.wifi_port}")
        names = [line.strip() for line in output.splitlines()[1:]]
        return sorted(self._dedupe(names), key=str.lower)

    def remove_preferred_network(self, network_name: str) -> None:
        self.run_os_command(
            f"sudo networksetup -removepreferredwirelessnetwork {self.wifi_port} {shlex.quote(network_name)}"
        )

    def os_level_preferred_network_password(self, network_name: str) -> Optional[str]:
        command = (
            'security find-generic-password -D "AirPort network password" '
            f"-a {shlex.quote(network_name)} -w"
        )
        try:
            return self.run_os_command(command).strip() or None
        except OsCommandError as e:
            if e.exit_status == KEYCHAIN_ITEM_NOT_FOUND:
                return None
            raise

    def ip_address(self) -> Optional[str]:
        output = self.run_os_command(f"ipconfig getifaddr {self.wifi_port}", raise_on_error=False)
        address = output.strip()
        return address if re.fullmatch(r"[\d.]+", address) else None

    def nameservers(self) -> List[str]:
        output = self.run_os_command(f"networksetup -getdnsservers {shlex.quote(self._service_name())}")
        if "There aren't any DNS Servers" in output:
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

    def set_nameservers(self, nameservers: Union[str, List[str]]) -> None:
        servers = "empty" if nameservers == "clear" else " ".join(shlex.quote(s) for s in nameservers)
        self.run_os_command(f"networksetup -setdnsservers {shlex.quote(self._service_name())} {servers}")

    def open_resource(self, url: str) -> None:
        self.run_os_command(f"open {shlex.quote(url)}")
