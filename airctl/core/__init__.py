"""
Core functionality components.
"""

from airctl.core.config import AppConfig, load_config_file
from airctl.core.detector import SystemDetector, SystemInfo
from airctl.core.errors import (
    AirctlError,
    OsCommandError,
    ProbeExhaustedError,
    InvalidWaitTargetError,
)
from airctl.core.executor import CommandExecutor

__all__ = [
    "AppConfig",
    "load_config_file",
    "SystemDetector",
    "SystemInfo",
    "AirctlError",
    "OsCommandError",
    "ProbeExhaustedError",
    "InvalidWaitTargetError",
    "CommandExecutor",
]
