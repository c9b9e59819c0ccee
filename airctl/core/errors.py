"""
Error types raised by airctl.
"""

from typing import Any, Dict


class AirctlError(Exception):
    """Base class for errors reported to the user."""


class OsCommandError(AirctlError):
    """An external command exited with a nonzero status."""

    def __init__(self, exit_status: int, command: str, output_text: str):
        self._exit_status = exit_status
        self._command = command
        self._output_text = output_text
        super().__init__(str(self))

    @property
    def exit_status(self) -> int:
        return self._exit_status

    @property
    def command(self) -> str:
        return self._command

    @property
    def output_text(self) -> str:
        return self._output_text

    def __str__(self) -> str:
        return (
            f"Error code {self._exit_status}, command = {self._command}, "
            f"text = {self._output_text}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exit_status": self._exit_status,
            "command": self._command,
            "output_text": self._output_text,
        }


class ProbeExhaustedError(AirctlError):
    """Every connectivity probe attempt hung."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__("Could not determine Internet status.")


class InvalidWaitTargetError(AirctlError, ValueError):
    """An unknown state was requested from the condition waiter."""


class ConnectionFailedError(AirctlError):
    """The radio ended up on a different network (or none) after connecting."""


class NetworkNotPreferredError(AirctlError):
    """The named network is not in the saved networks list."""


class UnsupportedOSError(AirctlError):
    """No Wi-Fi model exists for the running operating system."""


class BadCommandError(AirctlError):
    """The command line named no registered command."""
