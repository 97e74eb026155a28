import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

import yaml

# Directory containing run.py (one level above this file)
APP_DIR = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".."))

DEFAULT_CONFIG_PATH = os.path.join(APP_DIR, "config.yaml")
DEFAULT_OUTPUT_PATH = os.path.join(APP_DIR, "calendar.ics")

# yaml key -> environment variable
ENV_KEYS = {
    "airbnb_url": "AIRBNB_ICS_URL",
    "booking_url": "BOOKING_ICS_URL",
    "output_path": "OUTPUT_PATH",
    "output_bucket": "OUTPUT_BUCKET",
    "timeout": "FETCH_TIMEOUT",
    "log_level": "LOG_LEVEL",
}


class ConfigError(ValueError):
    """Missing or invalid configuration."""


@dataclass(frozen=True)
class Config:
    airbnb_url: str
    booking_url: str
    output_path: str = DEFAULT_OUTPUT_PATH
    output_bucket: Optional[str] = None
    timeout: float = 20
    log_level: str = "INFO"


def _read_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Builds the run configuration from an optional YAML file,
    with environment variables taking precedence.
    Raises ConfigError if either source URL is missing.
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get("CONFIG_PATH") or DEFAULT_CONFIG_PATH

    values = {k: v for k, v in _read_yaml(path).items() if k in ENV_KEYS}
    for key, var in ENV_KEYS.items():
        if environ.get(var):
            values[key] = environ[var]

    for key in ("airbnb_url", "booking_url"):
        if not str(values.get(key) or "").strip():
            raise ConfigError(f"Missing env {ENV_KEYS[key]}")
        values[key] = str(values[key]).strip()

    if "timeout" in values:
        try:
            values["timeout"] = float(values["timeout"])
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid {ENV_KEYS['timeout']}: {values['timeout']!r}")

    return Config(**values)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Sends log records to stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
