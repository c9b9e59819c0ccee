"""
Host detection: which OS we run on and whether its Wi-Fi utilities exist.
"""

import platform
import shutil
import socket
import sys
from typing import Dict, List, Optional

from pydantic import BaseModel


class SystemInfo(BaseModel):
    """Facts about the host, gathered once at startup."""

    os_type: str  # platform.system(): 'Linux', 'Darwin', ...
    platform: str
    python_version: str
    hostname: str


class MissingTool(BaseModel):
    name: str
    suggestion: str


# Utility -> how to get it, for each OS that has a Wi-Fi model
WIFI_TOOLS: Dict[str, Dict[str, str]] = {
    "Linux": {
        "nmcli": "sudo apt-get install network-manager (or dnf install NetworkManager)",
        "curl": "sudo apt-get install curl (or dnf install curl)",
    },
    "Darwin": {
        "networksetup": "Ships with macOS",
        "system_profiler": "Ships with macOS",
        "security": "Ships with macOS",
        "curl": "Ships with macOS",
    },
}


class SystemDetector:
    """Detect the host OS and the Wi-Fi utilities available on it."""

    def detect_system(self) -> SystemInfo:
        return SystemInfo(
            os_type=platform.system(),
            platform=platform.platform(),
            python_version=sys.version.split()[0],
            hostname=socket.gethostname(),
        )

    def required_tools(self, os_type: str) -> List[str]:
        """Utilities the Wi-Fi model for os_type shells out to."""
        return list(WIFI_TOOLS.get(os_type, {}))

    def check_required_tools(self, tools: List[str], os_type: Optional[str] = None) -> List[MissingTool]:
        """
        Return the tools that are not on the PATH, each with a hint on
        how to install it.
        """
        os_type = os_type or platform.system()
        hints = WIFI_TOOLS.get(os_type, {})
        return [
            MissingTool(name=tool, suggestion=hints.get(tool, f"Please install {tool} manually"))
            for tool in tools
            if shutil.which(tool) is None
        ]
