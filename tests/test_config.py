"""Tests for AppConfig."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from airctl.core.config import AppConfig, load_config_file


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Point the home and working directories at empty temp dirs."""
    home = tmp_path / "home"
    cwd = tmp_path / "cwd"
    home.mkdir()
    cwd.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(cwd)
    return home, cwd


def test_app_config_defaults():
    config = AppConfig()
    assert config.verbose is False
    assert config.wifi_port is None
    assert config.output_format is None
    assert config.probe_timeout == 3.0
    assert config.probe_poll_interval == 0.5
    assert config.probe_max_tries == 3
    assert config.wait_interval == 0.5
    assert config.log_file is None


def test_app_config_log_file_from_string():
    config = AppConfig(log_file="~/airctl.log")
    assert config.log_file == Path("~/airctl.log").expanduser()


@pytest.mark.parametrize("code", ["i", "j", "k", "p", "y"])
def test_app_config_output_formats(code):
    assert AppConfig(output_format=code).output_format == code


def test_app_config_rejects_unknown_format():
    with pytest.raises(ValidationError):
        AppConfig(output_format="x")


@pytest.mark.parametrize("field", ["probe_timeout", "probe_poll_interval", "wait_interval"])
def test_app_config_rejects_non_positive_timings(field):
    with pytest.raises(ValidationError):
        AppConfig(**{field: 0})


def test_load_config_file_no_file(isolated_dirs):
    """When no config file exists, load_config_file returns empty dict."""
    assert load_config_file() == {}


def test_load_config_file_from_cwd(isolated_dirs):
    _home, cwd = isolated_dirs
    (cwd / ".airctl.yaml").write_text("wifi_port: wlan1\nprobe_max_tries: 5\nunknown_key: 1\n")
    assert load_config_file() == {"wifi_port": "wlan1", "probe_max_tries": 5}


def test_load_config_file_home_wins(isolated_dirs):
    home, cwd = isolated_dirs
    (home / ".airctl.yaml").write_text("output_format: y\n")
    (cwd / ".airctl.yaml").write_text("output_format: j\n")
    assert load_config_file() == {"output_format": "y"}


def test_load_config_file_malformed(isolated_dirs):
    _home, cwd = isolated_dirs
    (cwd / ".airctl.yaml").write_text("verbose: [unclosed\n")
    assert load_config_file() == {}


def test_load_config_file_not_a_mapping(isolated_dirs):
    _home, cwd = isolated_dirs
    (cwd / ".airctl.yaml").write_text("- a\n- b\n")
    assert load_config_file() == {}
