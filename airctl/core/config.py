"""
Configuration management.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

OUTPUT_FORMATS = ("i", "j", "k", "p", "y")

CONFIG_FILE_NAME = ".airctl.yaml"


def load_config_file() -> dict[str, Any]:
    """
    Load optional config from ~/.airctl.yaml or ./.airctl.yaml.
    The first file found wins. Returns the raw mapping; keys that AppConfig
    does not know are dropped so callers can splat the result.
    """
    candidates = [
        Path.home() / CONFIG_FILE_NAME,
        Path.cwd() / CONFIG_FILE_NAME,
    ]
    raw: dict[str, Any] = {}
    for path in candidates:
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Ignoring unreadable config file {path}: {e}")
                raw = {}
            break
    if not isinstance(raw, dict):
        logger.warning("Ignoring config file: top level is not a mapping")
        return {}
    return {key: value for key, value in raw.items() if key in AppConfig.model_fields}


class AppConfig(BaseModel):
    """Application configuration."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    verbose: bool = False
    wifi_port: Optional[str] = None
    output_format: Optional[str] = None

    probe_url: str = "http://www.google.com/"
    probe_timeout: float = Field(default=3.0, gt=0)
    probe_poll_interval: float = Field(default=0.5, gt=0)
    probe_max_tries: int = Field(default=3, ge=1)
    wait_interval: float = Field(default=0.5, gt=0)

    log_file: Optional[Path] = None

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v):
        """Only the single-letter format codes are accepted."""
        if v is not None and v not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {list(OUTPUT_FORMATS)}, was {v!r}")
        return v

    @field_validator("log_file", mode="before")
    @classmethod
    def validate_log_file(cls, v):
        if v is None or v == "":
            return None
        return Path(v).expanduser()
