"""
Command-line interface.
"""

from airctl.cli.commands import Command, CommandRegistry

__all__ = [
    "Command",
    "CommandRegistry",
]
