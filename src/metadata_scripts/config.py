# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Configuration for metadata_scripts.

Built once at startup and passed to every component. Defaults target the
Compute Engine metadata server; an optional YAML file overrides them.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml

CONFIG_ENV_VAR = "METADATA_SCRIPTS_CONFIG"
LOG_LEVEL_ENV_VAR = "METADATA_SCRIPTS_LOG_LEVEL"

STRING_FIELDS = (
    "metadata_url",
    "metadata_query",
    "metadata_flavor",
    "powershell",
    "temp_prefix",
    "log_level",
    "log_file",
)
OPTIONAL_STRING_FIELDS = ("log_file",)


class ConfigError(Exception):
    """Raised when the configuration file is invalid."""

    pass


@dataclass(frozen=True)
class Config:
    """Immutable runtime settings."""

    metadata_url: str = "http://metadata.google.internal/computeMetadata/v1/instance/attributes"
    # Long-poll for 10 seconds; last_etag=NONE means no prior state
    metadata_query: str = "/?recursive=true&alt=json&timeout_sec=10&last_etag=NONE"
    metadata_flavor: str = "Google"
    metadata_timeout: float = 20.0
    download_timeout: Optional[float] = None
    powershell: str = "powershell.exe"
    temp_prefix: str = "metadata-scripts"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def metadata_endpoint(self) -> str:
        return self.metadata_url + self.metadata_query


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration.

    Resolution:
    1. config_path if given
    2. $METADATA_SCRIPTS_CONFIG if set
    3. built-in defaults

    $METADATA_SCRIPTS_LOG_LEVEL overrides log_level in every case.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If an explicitly named file does not exist
        ConfigError: If the file is not a YAML mapping of known keys
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or None

    config = Config()
    if config_path is not None:
        config = _load_file(Path(config_path).expanduser())

    log_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if log_level:
        config = replace(config, log_level=log_level.upper())

    return config


def _load_file(path: Path) -> Config:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a YAML mapping")

    known = {f.name for f in fields(Config)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")

    for key in ("metadata_timeout", "download_timeout"):
        value = data.get(key)
        if value is None:
            continue
        try:
            data[key] = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{key} must be a number of seconds, got: {value!r}") from e

    for key in STRING_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if value is None and key in OPTIONAL_STRING_FIELDS:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string, got: {value!r}")

    return Config(**data)
