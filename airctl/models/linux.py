"""
Wi-Fi model for Linux hosts managed by NetworkManager (nmcli).
"""

import re
import shlex
from typing import List, Optional, Union

from airctl.core.errors import AirctlError
from airctl.models.base import AvailableNetwork, WifiModel

# nmcli terse output escapes literal colons as "\:"
_FIELD_SEPARATOR = re.compile(r"(?<!\\):")

WIRELESS_CONNECTION_TYPE = "802-11-wireless"


def split_terse(line: str) -> List[str]:
    """Split one line of `nmcli -t` output into unescaped fields."""
    return [field.replace("\\:", ":").replace("\\\\", "\\") for field in _FIELD_SEPARATOR.split(line)]


class LinuxModel(WifiModel):
    """NetworkManager implementation of the Wi-Fi operations."""

    def detect_wifi_port(self) -> str:
        output = self.run_os_command("nmcli -t -f DEVICE,TYPE device")
        for line in output.splitlines():
            fields = split_terse(line)
            if len(fields) >= 2 and fields[1] == "wifi":
                return fields[0]
        raise AirctlError("No Wi-Fi interface found.")

    def is_wifi_port(self, port: str) -> bool:
        output = self.run_os_command("nmcli -t -f DEVICE,TYPE device")
        return any(split_terse(line)[:2] == [port, "wifi"] for line in output.splitlines())

    def is_wifi_on(self) -> bool:
        return self.run_os_command("nmcli radio wifi").strip() == "enabled"

    def wifi_on(self) -> None:
        self.run_os_command("nmcli radio wifi on")
        self.await_radio_state(True)

    def wifi_off(self) -> None:
        self.run_os_command("nmcli radio wifi off")
        self.await_radio_state(False)

    def _scan(self) -> List[AvailableNetwork]:
        output = self.run_os_command(
            "nmcli -t -f SSID,BSSID,CHAN,SIGNAL,SECURITY device wifi list"
        )
        networks = []
        for line in output.splitlines():
            fields = split_terse(line)
            if len(fields) < 5 or not fields[0]:
                continue
            ssid, bssid, channel, signal, security = fields[:5]
            networks.append(AvailableNetwork(
                ssid=ssid,
                bssid=bssid or None,
                signal=int(signal) if signal.isdigit() else None,
                channel=channel or None,
                security=security or None,
            ))
        networks.sort(key=lambda n: n.signal if n.signal is not None else -1, reverse=True)
        return networks

    def available_network_names(self) -> List[str]:
        return self._dedupe(network.ssid for network in self._scan())

    def available_network_info(self) -> List[AvailableNetwork]:
        return self._scan()

    def connected_network_name(self) -> Optional[str]:
        output = self.run_os_command("nmcli -t -f ACTIVE,SSID device wifi")
        for line in output.splitlines():
            fields = split_terse(line)
            if len(fields) >= 2 and fields[0] == "yes" and fields[1]:
                return fields[1]
        return None

    def os_level_connect(self, network_name: str, password: Optional[str] = None) -> None:
        command = f"nmcli device wifi connect {shlex.quote(network_name)}"
        if password:
            command += f" password {shlex.quote(password)}"
        self.run_os_command(command)

    def disconnect(self) -> None:
        self.run_os_command(f"nmcli device disconnect {shlex.quote(self.wifi_port)}")

    def preferred_networks(self) -> List[str]:
        output = self.run_os_command("nmcli -t -f NAME,TYPE connection show")
        names = []
        for line in output.splitlines():
            fields = split_terse(line)
            if len(fields) >= 2 and fields[1] == WIRELESS_CONNECTION_TYPE:
                names.append(fields[0])
        return sorted(self._dedupe(names), key=str.lower)

    def remove_preferred_network(self, network_name: str) -> None:
        self.run_os_command(f"nmcli connection delete id {shlex.quote(network_name)}")

    def os_level_preferred_network_password(self, network_name: str) -> Optional[str]:
        output = self.run_os_command(
            "nmcli --show-secrets -g 802-11-wireless-security.psk "
            f"connection show id {shlex.quote(network_name)}"
        )
        password = output.strip()
        return password or None

    def ip_address(self) -> Optional[str]:
        output = self.run_os_command(
            f"nmcli -g IP4.ADDRESS device show {shlex.quote(self.wifi_port)}",
            raise_on_error=False,
        )
        first = output.strip().split("|")[0].strip()
        return first.split("/")[0] if first else None

    def nameservers(self) -> List[str]:
        return self.nameservers_using_resolv_conf() or []

    def _active_connection(self) -> str:
        output = self.run_os_command(
            f"nmcli -g GENERAL.CONNECTION device show {shlex.quote(self.wifi_port)}"
        )
        connection = output.strip()
        if not connection:
            raise AirctlError("Wi-Fi is not connected; cannot change nameservers.")
        return connection

    def set_nameservers(self, nameservers: Union[str, List[str]]) -> None:
        connection = shlex.quote(self._active_connection())
        if nameservers == "clear":
            self.run_os_command(
                f"nmcli connection modify {connection} ipv4.dns '' ipv4.ignore-auto-dns no"
            )
        else:
            servers = shlex.quote(" ".join(nameservers))
            self.run_os_command(
                f"nmcli connection modify {connection} ipv4.dns {servers} ipv4.ignore-auto-dns yes"
            )
        self.run_os_command(f"nmcli connection up {connection}")

    def open_resource(self, url: str) -> None:
        self.run_os_command(f"xdg-open {shlex.quote(url)}")
