"""
Logging components.
"""

from airctl.storage.logger import setup_logging

__all__ = [
    "setup_logging",
]
