"""
Wi-Fi models, one per supported operating system.
"""

from typing import Optional

from airctl.core.detector import SystemInfo
from airctl.core.errors import UnsupportedOSError
from airctl.core.executor import CommandExecutor
from airctl.models.base import AvailableNetwork, WifiModel
from airctl.models.linux import LinuxModel
from airctl.models.mac import MacModel
from airctl.modules.connectivity import ConnectivityProber

MODELS = {
    "Linux": LinuxModel,
    "Darwin": MacModel,
}


def create_model(
    system_info: SystemInfo,
    executor: CommandExecutor,
    prober: Optional[ConnectivityProber] = None,
    wifi_port: Optional[str] = None,
) -> WifiModel:
    """Instantiate the Wi-Fi model for the detected operating system."""
    model_class = MODELS.get(system_info.os_type)
    if model_class is None:
        raise UnsupportedOSError(
            f"Unsupported operating system: {system_info.os_type} "
            f"(supported: {', '.join(MODELS)})"
        )
    return model_class(executor, prober=prober, wifi_port=wifi_port)


__all__ = [
    "AvailableNetwork",
    "WifiModel",
    "LinuxModel",
    "MacModel",
    "MODELS",
    "create_model",
]
