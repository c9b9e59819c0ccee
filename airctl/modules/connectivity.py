"""
Internet connectivity probe.

Some HTTP clients block forever when the Wi-Fi radio is switched off while a
request is in flight, so the check runs in a detached shell that is polled for
liveness and killed when it overruns its timeout.
"""

import os
import shlex
import signal
import subprocess
import tempfile
import time
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from airctl.core.errors import ProbeExhaustedError

DEFAULT_PROBE_URL = "http://www.google.com/"

# {url} and {result_file} are shell-quoted before substitution
DEFAULT_SCRIPT = "curl --silent --head {url} > /dev/null; echo $? > {result_file}"


class ConnectivityOutcome(str, Enum):
    """Result of a single probe attempt."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    INDETERMINATE = "indeterminate"


class ConnectivityProber:
    """Decide whether the host can reach the Internet within a bounded time."""

    def __init__(
        self,
        url: str = DEFAULT_PROBE_URL,
        timeout: float = 3.0,
        poll_interval: float = 0.5,
        max_tries: int = 3,
        script: str = DEFAULT_SCRIPT,
        scratch_dir: Optional[Path] = None,
    ):
        """
        Args:
            url: Endpoint receiving the HEAD request
            timeout: Seconds one attempt may run before it is killed
            poll_interval: Seconds between liveness checks
            max_tries: Attempts made before giving up on hung probes
            script: Shell template writing the request's exit code to {result_file}
            scratch_dir: Directory for the per-attempt result files
        """
        self.url = url
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_tries = max_tries
        self.script = script
        self.scratch_dir = scratch_dir

    def is_connected(self) -> bool:
        """
        Return whether the Internet is reachable.

        Only hung attempts are retried; a clean failure is taken as final.

        Raises:
            ProbeExhaustedError: every attempt hung
        """
        for attempt in range(1, self.max_tries + 1):
            outcome = self.probe_once()
            if outcome is not ConnectivityOutcome.INDETERMINATE:
                return outcome is ConnectivityOutcome.CONNECTED
            logger.warning(f"Connectivity probe hung (attempt {attempt}/{self.max_tries})")
        raise ProbeExhaustedError(self.max_tries)

    def probe_once(self) -> ConnectivityOutcome:
        """Run one spawn, poll and read (or kill) cycle."""
        fd, result_path = tempfile.mkstemp(
            prefix="airctl-",
            dir=str(self.scratch_dir) if self.scratch_dir is not None else None,
        )
        os.close(fd)
        process = None
        try:
            process = self._spawn(result_path)
            deadline = time.monotonic() + self.timeout
            while time.monotonic() < deadline:
                if process.poll() is not None:
                    return self._read_outcome(result_path)
                time.sleep(self.poll_interval)

            # The writer may have finished during the last sleep
            if process.poll() is not None:
                return self._read_outcome(result_path)

            self._kill(process)
            return ConnectivityOutcome.INDETERMINATE
        finally:
            if process is not None and process.poll() is None:
                self._kill(process)
            try:
                os.unlink(result_path)
            except FileNotFoundError:
                pass

    def _spawn(self, result_path: str) -> subprocess.Popen:
        command = self.script.format(
            url=shlex.quote(self.url),
            result_file=shlex.quote(result_path),
        )
        logger.debug(f"Starting connectivity probe: {command}")
        return subprocess.Popen(
            ["/bin/sh", "-c", command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )

    def _kill(self, process: subprocess.Popen) -> None:
        """Kill the probe shell and everything it started, then reap it."""
        logger.debug(f"Killing hung connectivity probe (pid {process.pid})")
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        process.wait()

    @staticmethod
    def _read_outcome(result_path: str) -> ConnectivityOutcome:
        with open(result_path, "r", encoding="utf-8") as f:
            code = f.read().strip()
        logger.debug(f"Connectivity probe exit code: {code!r}")
        if code == "0":
            return ConnectivityOutcome.CONNECTED
        return ConnectivityOutcome.DISCONNECTED
