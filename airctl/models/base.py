"""
Base Wi-Fi model and the operations shared by every operating system.
"""

import json
import time
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from airctl.core.errors import AirctlError, ConnectionFailedError, NetworkNotPreferredError
from airctl.core.executor import CommandExecutor
from airctl.modules.connectivity import ConnectivityProber
from airctl.modules.waiter import WaitTarget, wait_until

RESOLV_CONF = Path("/etc/resolv.conf")

# Seconds the radio gets to report a new power state after on/off
RADIO_SWITCH_TIMEOUT = 10.0


class AvailableNetwork(BaseModel):
    """One access point seen in a scan."""

    ssid: str
    bssid: Optional[str] = None
    signal: Optional[int] = None
    channel: Optional[str] = None
    security: Optional[str] = None


class WifiModel(ABC):
    """
    Wi-Fi operations for one operating system.

    Subclasses translate the abstract operations into OS utility calls made
    through the executor; everything else is implemented here on top of them.
    """

    radio_switch_timeout = RADIO_SWITCH_TIMEOUT
    radio_poll_interval = 0.25

    def __init__(
        self,
        executor: CommandExecutor,
        prober: Optional[ConnectivityProber] = None,
        wifi_port: Optional[str] = None,
    ):
        self.executor = executor
        self.prober = prober or ConnectivityProber()
        if wifi_port and not self.is_wifi_port(wifi_port):
            raise AirctlError(f"{wifi_port} is not a Wi-Fi interface.")
        self._wifi_port = wifi_port

    @property
    def wifi_port(self) -> str:
        if self._wifi_port is None:
            self._wifi_port = self.detect_wifi_port()
        return self._wifi_port

    def run_os_command(self, command: str, raise_on_error: bool = True) -> str:
        return self.executor.execute(command, raise_on_error)

    # OS specific operations

    @abstractmethod
    def detect_wifi_port(self) -> str:
        """Name of the first Wi-Fi interface."""

    @abstractmethod
    def is_wifi_port(self, port: str) -> bool:
        pass

    @abstractmethod
    def is_wifi_on(self) -> bool:
        pass

    @abstractmethod
    def wifi_on(self) -> None:
        pass

    @abstractmethod
    def wifi_off(self) -> None:
        pass

    @abstractmethod
    def available_network_names(self) -> List[str]:
        """SSIDs in range, strongest first, without duplicates."""

    @abstractmethod
    def available_network_info(self) -> List[AvailableNetwork]:
        """Access points in range, strongest first."""

    @abstractmethod
    def connected_network_name(self) -> Optional[str]:
        pass

    @abstractmethod
    def os_level_connect(self, network_name: str, password: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Leave the current network without turning the radio off."""

    @abstractmethod
    def preferred_networks(self) -> List[str]:
        pass

    @abstractmethod
    def remove_preferred_network(self, network_name: str) -> None:
        pass

    @abstractmethod
    def os_level_preferred_network_password(self, network_name: str) -> Optional[str]:
        pass

    @abstractmethod
    def ip_address(self) -> Optional[str]:
        pass

    @abstractmethod
    def nameservers(self) -> List[str]:
        pass

    @abstractmethod
    def set_nameservers(self, nameservers: Union[str, List[str]]) -> None:
        """Set DNS servers for the Wi-Fi connection; 'clear' removes them."""

    @abstractmethod
    def open_resource(self, url: str) -> None:
        pass

    # Shared operations

    def is_connected_to_internet(self) -> bool:
        return self.prober.is_connected()

    def cycle_network(self) -> None:
        """Turn Wi-Fi off and then back on."""
        self.wifi_off()
        self.wifi_on()

    def is_connected_to(self, network_name: str) -> bool:
        return network_name == self.connected_network_name()

    def connect(self, network_name: Any, password: Any = None) -> None:
        """
        Turn Wi-Fi on and join network_name, then check that the radio is
        actually associated with it.
        """
        network_name = str(network_name) if network_name is not None else None
        password = str(password) if password is not None else None

        if not network_name:
            raise AirctlError("A network name is required but was not provided.")

        self.wifi_on()
        self.os_level_connect(network_name, password)

        actual_network_name = self.connected_network_name()
        if actual_network_name != network_name:
            message = f'Expected to connect to "{network_name}" but '
            if actual_network_name:
                message += f'connected to "{actual_network_name}" instead. Did you '
            else:
                message += "unable to connect to any network. Did you "
            message += "provide the correct password?" if password else "need to provide a password?"
            raise ConnectionFailedError(message)

    def remove_preferred_networks(self, *network_names: str) -> List[str]:
        """
        Forget the named saved networks. Names that are not saved are ignored.

        Returns:
            The names that were removed
        """
        preferred = set(self.preferred_networks())
        to_remove = []
        for name in network_names:
            name = str(name)
            if name in preferred and name not in to_remove:
                to_remove.append(name)
        for name in to_remove:
            self.remove_preferred_network(name)
        return to_remove

    def preferred_network_password(self, network_name: Any) -> Optional[str]:
        network_name = str(network_name)
        if network_name not in self.preferred_networks():
            raise NetworkNotPreferredError(
                f"Network {network_name} not in preferred networks list."
            )
        return self.os_level_preferred_network_password(network_name)

    def wait_until(
        self,
        target: Union[WaitTarget, str],
        wait_interval: Optional[float] = None,
    ) -> None:
        """Block until the Internet or the radio reaches the target state."""
        predicates = {
            WaitTarget.INTERNET_CONNECTED: lambda: self.is_connected_to_internet(),
            WaitTarget.INTERNET_DISCONNECTED: lambda: not self.is_connected_to_internet(),
            WaitTarget.RADIO_ON: lambda: self.is_wifi_on(),
            WaitTarget.RADIO_OFF: lambda: not self.is_wifi_on(),
        }
        wait_until(target, predicates, wait_interval)

    def await_radio_state(self, on: bool) -> None:
        """
        Poll until the radio reports the requested power state.

        The OS utilities return before the radio has switched, and a blocked
        radio (rfkill) never switches at all.

        Raises:
            AirctlError: the state did not change within radio_switch_timeout
        """
        deadline = time.monotonic() + self.radio_switch_timeout
        while self.is_wifi_on() != on:
            if time.monotonic() >= deadline:
                raise AirctlError(f"Wifi could not be {'enabled' if on else 'disabled'}.")
            time.sleep(self.radio_poll_interval)

    def try_os_command_until(
        self,
        command: str,
        stop_condition: Callable[[str], bool],
        max_tries: int = 100,
    ) -> Optional[str]:
        """
        Run command until stop_condition accepts its output.

        Returns:
            The accepted output, or None if max_tries ran out
        """
        for _ in range(max_tries):
            output = self.run_os_command(command)
            if stop_condition(output):
                return output
        return None

    def public_ip_address_info(self) -> Dict[str, Any]:
        """Public IP address details from ipinfo.io."""
        output = self.run_os_command("curl -s ipinfo.io")
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise AirctlError(f"Unexpected response from ipinfo.io: {output!r}") from e

    @staticmethod
    def nameservers_using_resolv_conf(path: Path = RESOLV_CONF) -> Optional[List[str]]:
        """Nameserver addresses in resolv.conf, or None when the file is missing."""
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return None
        return [line.split()[-1] for line in lines if line.startswith("nameserver ")]

    def wifi_info(self) -> Dict[str, Any]:
        """Summary of the radio, the current network and Internet reachability."""
        wifi_on = self.is_wifi_on()
        info: Dict[str, Any] = {
            "wifi_on": wifi_on,
            "internet_on": self.is_connected_to_internet() if wifi_on else False,
            "port": self.wifi_port,
            "network": self.connected_network_name() if wifi_on else None,
            "ip_address": self.ip_address() if wifi_on else None,
            "nameservers": self.nameservers(),
            "timestamp": datetime.now().isoformat(timespec="seconds"),
        }
        return info

    @staticmethod
    def _dedupe(names: Iterable[str]) -> List[str]:
        seen = []
        for name in names:
            if name and name not in seen:
                seen.append(name)
        return seen
