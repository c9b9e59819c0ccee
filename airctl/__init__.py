"""
airctl - Wi-Fi inspection and control from the command line
"""

from airctl.__version__ import __version__
from airctl.core.config import AppConfig
from airctl.core.detector import SystemDetector
from airctl.core.executor import CommandExecutor

__all__ = [
    "AppConfig",
    "SystemDetector",
    "CommandExecutor",
    "__version__",
]
