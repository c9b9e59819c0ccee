"""
Connectivity probing and state waiting.
"""

from airctl.modules.connectivity import ConnectivityOutcome, ConnectivityProber
from airctl.modules.waiter import WaitTarget, wait_until

__all__ = [
    "ConnectivityOutcome",
    "ConnectivityProber",
    "WaitTarget",
    "wait_until",
]
