"""Tests for the connectivity prober (runs real short-lived shell processes)."""
import subprocess
import time
from unittest.mock import patch

import pytest

from airctl.core.errors import ProbeExhaustedError
from airctl.modules.connectivity import ConnectivityOutcome, ConnectivityProber

HANG = "sleep 30"
SUCCEED = "echo 0 > {result_file}"
FAIL = "echo 6 > {result_file}"


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


def make_prober(script, scratch_dir, timeout=0.3, poll_interval=0.05, max_tries=3):
    return ConnectivityProber(
        url="http://example.invalid/",
        timeout=timeout,
        poll_interval=poll_interval,
        max_tries=max_tries,
        script=script,
        scratch_dir=scratch_dir,
    )


@pytest.fixture
def spawned():
    """Record every probe process started while the test runs."""
    processes = []
    real_popen = subprocess.Popen

    def recording_popen(*args, **kwargs):
        process = real_popen(*args, **kwargs)
        processes.append(process)
        return process

    with patch("airctl.modules.connectivity.subprocess.Popen", side_effect=recording_popen):
        yield processes


def test_connected_on_first_attempt(scratch_dir, spawned):
    """A probe that succeeds at once returns True without waiting for the timeout."""
    prober = make_prober(SUCCEED, scratch_dir, timeout=2.0)

    start = time.monotonic()
    assert prober.is_connected() is True
    elapsed = time.monotonic() - start

    assert len(spawned) == 1
    assert elapsed < 2.0


def test_probe_once_outcomes(scratch_dir):
    assert make_prober(SUCCEED, scratch_dir).probe_once() is ConnectivityOutcome.CONNECTED
    assert make_prober(FAIL, scratch_dir).probe_once() is ConnectivityOutcome.DISCONNECTED


def test_disconnected_is_not_retried(scratch_dir, spawned):
    """A clean failure is final; only hangs are retried."""
    prober = make_prober(FAIL, scratch_dir)
    assert prober.is_connected() is False
    assert len(spawned) == 1


def test_multi_digit_exit_code_is_disconnected(scratch_dir):
    """Exit code 10 must not be read as success."""
    prober = make_prober("echo 10 > {result_file}", scratch_dir)
    assert prober.probe_once() is ConnectivityOutcome.DISCONNECTED


def test_hung_probe_is_indeterminate_and_killed(scratch_dir, spawned):
    prober = make_prober(HANG, scratch_dir)
    assert prober.probe_once() is ConnectivityOutcome.INDETERMINATE
    assert len(spawned) == 1
    assert spawned[0].poll() is not None


def test_always_hanging_probe_exhausts_retries(scratch_dir, spawned):
    """Every attempt hangs: after max_tries attempts ProbeExhaustedError is raised."""
    prober = make_prober(HANG, scratch_dir, timeout=0.2, max_tries=3)

    with pytest.raises(ProbeExhaustedError) as excinfo:
        prober.is_connected()

    assert "Could not determine Internet status" in str(excinfo.value)
    assert excinfo.value.attempts == 3
    assert len(spawned) == 3
    assert all(process.poll() is not None for process in spawned)


def test_hang_then_success(scratch_dir, tmp_path):
    """A hang followed by a successful attempt reports connected."""
    marker = tmp_path / "attempted"
    script = (
        f"if [ -e {marker} ]; then echo 0 > {{result_file}}; "
        f"else touch {marker}; sleep 30; fi"
    )
    prober = make_prober(script, scratch_dir)
    assert prober.is_connected() is True


def test_scratch_files_removed_on_every_path(scratch_dir):
    make_prober(SUCCEED, scratch_dir).is_connected()
    make_prober(FAIL, scratch_dir).is_connected()
    with pytest.raises(ProbeExhaustedError):
        make_prober(HANG, scratch_dir, timeout=0.1, max_tries=2).is_connected()
    assert list(scratch_dir.iterdir()) == []


def test_scratch_file_removed_when_spawn_fails(scratch_dir):
    prober = make_prober(SUCCEED, scratch_dir)
    with patch("airctl.modules.connectivity.subprocess.Popen", side_effect=OSError("no shell")):
        with pytest.raises(OSError):
            prober.probe_once()
    assert list(scratch_dir.iterdir()) == []


def test_url_is_passed_quoted(scratch_dir, spawned):
    prober = ConnectivityProber(
        url="http://example.invalid/?a=1&b=2",
        timeout=0.5,
        poll_interval=0.05,
        script="echo {url} > /dev/null; echo 0 > {result_file}",
        scratch_dir=scratch_dir,
    )
    assert prober.probe_once() is ConnectivityOutcome.CONNECTED
    command = spawned[0].args[-1]
    assert "'http://example.invalid/?a=1&b=2'" in command
