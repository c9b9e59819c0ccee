"""
Command execution engine.
"""

import subprocess
import time

from loguru import logger

from airctl.core.detector import SystemInfo
from airctl.core.errors import OsCommandError

SEPARATOR = "-" * 79


class CommandExecutor:
    """Run OS commands through the shell and capture their combined output."""

    def __init__(self, system_info: SystemInfo, app_logger: logger, verbose: bool = False):
        self.system_info = system_info
        self.logger = app_logger
        self.verbose = verbose

    def execute(self, command: str, raise_on_error: bool = True) -> str:
        """
        Execute a shell command, merging stderr into stdout.

        Args:
            command: Command line passed to the shell
            raise_on_error: Raise OsCommandError on a nonzero exit status;
                when False the output is returned whatever the status

        Returns:
            Combined stdout and stderr text
        """
        start_time = time.time()

        result = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            # SSIDs and localized tool messages are not always valid UTF-8
            encoding="utf-8",
            errors="replace",
        )
        output = result.stdout or ""
        duration = time.time() - start_time

        self.logger.debug(
            f"Command completed: {command} "
            f"(return code: {result.returncode}, duration: {duration:.2f}s)"
        )
        if self.verbose:
            self.logger.info(
                f"\n\n{SEPARATOR}\nCommand: {command}\n\nOutput:\n{output}{SEPARATOR}\n"
            )

        if result.returncode != 0 and raise_on_error:
            raise OsCommandError(result.returncode, command, output)

        return output
