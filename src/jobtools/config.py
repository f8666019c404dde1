"""
jobtools configuration.

A small YAML file with file-access defaults and the log level:

    default_protocol: file
    protocols:
      sim.mu2e.cosmic.v0.art: root
    default_location: disk
    locations:
      sim.mu2e.cosmic.v0.art: dir:/data/cosmic
    log_level: INFO

Search order: explicit path, $JOBTOOLS_CONFIG, ./jobtools.yaml,
$JOBTOOLS_HOME/jobtools.yaml. No file means all defaults.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from jobtools.errors import ConfigError

CONFIG_FILENAME = "jobtools.yaml"
ENV_CONFIG = "JOBTOOLS_CONFIG"
ENV_HOME = "JOBTOOLS_HOME"

LOGGER_NAME = "jobtools"


class JobToolsConfig(BaseModel):
    default_protocol: Optional[str] = None
    protocols: Dict[str, str] = Field(default_factory=dict)
    default_location: Optional[str] = None
    locations: Dict[str, str] = Field(default_factory=dict)
    log_level: str = Field(default="WARNING")


def find_config_file(path: str | Path | None = None) -> Optional[Path]:
    if path is not None:
        p = Path(path).expanduser()
        if not p.is_file():
            raise ConfigError(f"config file not found: {p}")
        return p.resolve()

    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        p = Path(env_path).expanduser()
        if not p.is_file():
            raise ConfigError(f"${ENV_CONFIG} points to a missing file: {p}")
        return p.resolve()

    cwd_candidate = Path.cwd() / CONFIG_FILENAME
    if cwd_candidate.is_file():
        return cwd_candidate.resolve()

    env_home = os.environ.get(ENV_HOME)
    if env_home:
        home_candidate = Path(env_home).expanduser() / CONFIG_FILENAME
        if home_candidate.is_file():
            return home_candidate.resolve()

    return None


def load_config(path: str | Path | None = None) -> JobToolsConfig:
    found = find_config_file(path)
    if found is None:
        return JobToolsConfig()

    try:
        data = yaml.safe_load(found.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"{found}: invalid YAML: {e}") from e

    try:
        return JobToolsConfig(**(data or {}))
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"{found}: {e}") from e


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[jobtools] %(message)s"))
        logger.addHandler(h)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    return logger
